"""Key-value preference store shared by the host and presentation layer."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from .exceptions import PreferenceStoreError

SHOW_FOOTER_KEY = "showFooter"
IGNORED_ALERT_KEY = "ignoredAlert"

DEFAULTS: dict[str, Any] = {
    SHOW_FOOTER_KEY: True,
}

Listener = Callable[[], None]

_MISSING = object()


class PreferenceStore:
    """JSON-file backed preferences with explicit change notification.

    `set` persists immediately but does not notify; callers batch writes and
    then call `notify` so dependents (e.g. a rendered widget) refresh once.
    """

    def __init__(self, path: Path, defaults: dict[str, Any] | None = None) -> None:
        self.path = path
        self._defaults = dict(DEFAULTS if defaults is None else defaults)
        self._values = self._load()
        self._listeners: list[Listener] = []

    def get(self, key: str, default: Any = _MISSING) -> Any:
        if key in self._values:
            return self._values[key]
        if default is not _MISSING:
            return default
        return self._defaults.get(key)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
        self._save()

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    @property
    def show_footer(self) -> bool:
        return bool(self.get(SHOW_FOOTER_KEY))

    @property
    def ignored_alert(self) -> str | None:
        value = self.get(IGNORED_ALERT_KEY)
        return value if isinstance(value, str) and value else None

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            raise PreferenceStoreError(f"Failed reading preferences {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PreferenceStoreError(
                f"Preferences file {self.path} must hold a JSON object, "
                f"got {type(data).__name__}."
            )
        return data

    def _save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as fh:
                json.dump(self._values, fh, ensure_ascii=False, indent=2, sort_keys=True)
                fh.write("\n")
        except (OSError, TypeError, ValueError) as exc:
            raise PreferenceStoreError(f"Failed writing preferences {self.path}: {exc}") from exc
