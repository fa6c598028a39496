"""Helpers for redacting secrets and precise locations from logs and journals."""

from __future__ import annotations

import re
from typing import Any

REDACTED = "[REDACTED]"

# Two decimals is roughly 1 km, matching the requested positioning accuracy.
COORDINATE_DECIMALS = 2

_SENSITIVE_KEY_RE = re.compile(
    r"(authorization|token|secret|api[_-]?key|appid|password)",
    re.IGNORECASE,
)
_COORDINATE_KEY_RE = re.compile(r"^(lat|lon|latitude|longitude)$", re.IGNORECASE)
_KEY_VALUE_SECRET_RE = re.compile(
    r"""(?ix)
    \b
    (
      authorization|
      token|
      secret|
      api[_-]?key|
      appid|
      password
    )
    \s*[:=]\s*
    ([^\s,;&]+)
    """
)
_COORDINATE_INLINE_RE = re.compile(r"(?<![\d.:])(-?\d{1,3}\.\d{3,})(?![\d.])")


def coarsen_coordinate(value: float) -> float:
    """Round a latitude/longitude to the logging precision."""
    return round(value, COORDINATE_DECIMALS)


def sanitize_text(text: str) -> str:
    """Redact secrets and coarsen precise coordinates embedded in plain text."""
    sanitized = _KEY_VALUE_SECRET_RE.sub(lambda m: f"{m.group(1)}={REDACTED}", text)
    sanitized = _COORDINATE_INLINE_RE.sub(
        lambda m: f"{coarsen_coordinate(float(m.group(1))):.{COORDINATE_DECIMALS}f}",
        sanitized,
    )
    return sanitized


def sanitize_for_logging(value: Any) -> Any:
    """Recursively redact sensitive values in nested structures."""
    if isinstance(value, dict):
        sanitized: dict[Any, Any] = {}
        for key, child in value.items():
            key_text = str(key)
            if _SENSITIVE_KEY_RE.search(key_text):
                sanitized[key] = REDACTED
            elif _COORDINATE_KEY_RE.match(key_text) and isinstance(child, float):
                sanitized[key] = coarsen_coordinate(child)
            else:
                sanitized[key] = sanitize_for_logging(child)
        return sanitized
    if isinstance(value, list):
        return [sanitize_for_logging(item) for item in value]
    if isinstance(value, tuple):
        return tuple(sanitize_for_logging(item) for item in value)
    if isinstance(value, str):
        return sanitize_text(value)
    return value
