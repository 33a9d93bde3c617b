"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

CONFIG_FILE_NAME = "image_viewer_config.json"


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path, data: dict | None = None) -> None:
        self._path = Path(settings_path)
        if data is not None:
            self._data = data
            return
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    @classmethod
    def load_or_default(cls, settings_path: str | Path) -> JsonSettings:
        """Load `settings_path`, falling back to empty settings when it is missing or broken."""
        try:
            return cls(settings_path)
        except (OSError, ValueError) as ex:
            logger.warning("Using default settings ({}): {}", settings_path, ex)
            return cls(settings_path, data={})

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_int(self, key: str, default: int) -> int:
        try:
            return int(self.get(key, default))
        except (TypeError, ValueError):
            return default


def get_config_directory() -> Path:
    """Per-user configuration directory for persisted UI state."""
    if os.name == "nt":
        base = Path(os.path.expandvars("%APPDATA%"))
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base


class LastFolderStore:
    """Persists the last opened folder under `{"last_folder": ...}`."""

    def __init__(self, config_path: str | Path | None = None) -> None:
        self._path = Path(config_path) if config_path else get_config_directory() / CONFIG_FILE_NAME

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str | None:
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            return None
        value = data.get("last_folder") if isinstance(data, dict) else None
        return str(value) if value else None

    def save(self, folder: str) -> None:
        """Write `folder`; raises OSError on failure so callers can decide."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as f:
            json.dump({"last_folder": folder}, f)
