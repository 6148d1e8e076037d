"""
settings.py

Read-only key/value settings for the wallpaper.

The store is a flat JSON object on disk, e.g.

    {"TimeZone": true, "AllowOmegaShift": true, "RustproofBeeShed": false}

The file is re-read only when its mtime changes, so edits made while the
wallpaper is running are picked up on the next draw.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

import config

log = logging.getLogger(__name__)


class Settings:
    """JSON-file backed settings.  Never writes the file."""

    def __init__(self, path: str | None = None,
                 defaults: Optional[Dict[str, Any]] = None) -> None:
        self.path = os.path.abspath(path or config.SETTINGS_PATH)
        self.defaults: Dict[str, Any] = dict(
            config.PREF_DEFAULTS if defaults is None else defaults)
        self._values: Dict[str, Any] = {}
        self._mtime: Optional[float] = None

    # ----------------------------------------------------------- loading
    def _refresh(self) -> None:
        try:
            mtime = os.path.getmtime(self.path)
        except OSError:
            if self._mtime is not None:
                log.info("Settings file %s went away, using defaults", self.path)
            self._values, self._mtime = {}, None
            return

        if mtime == self._mtime:
            return

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            log.warning("Couldn't read settings from %s (%s), using defaults",
                        self.path, exc)
            data = {}

        if not isinstance(data, dict):
            log.warning("Settings file %s isn't a JSON object, ignoring it",
                        self.path)
            data = {}

        self._values, self._mtime = data, mtime
        log.debug("Loaded settings: %s", self._values)

    # ------------------------------------------------------------ access
    def get(self, key: str, default: Any = None) -> Any:
        self._refresh()
        if key in self._values:
            return self._values[key]
        return self.defaults.get(key, default)

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key, default)
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)

    def get_str(self, key: str, default: str = "") -> str:
        value = self.get(key, default)
        return default if value is None else str(value)


class StaticSettings(Settings):
    """In-memory settings, for previews and tests."""

    def __init__(self, values: Optional[Dict[str, Any]] = None,
                 defaults: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(path=os.devnull, defaults=defaults)
        self._values = dict(values or {})

    def _refresh(self) -> None:
        pass

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
