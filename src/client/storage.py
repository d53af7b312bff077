"""Durable local key-value storage for the client (a small JSON file)."""

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_PATH = Path.home() / ".taskmanager" / "storage.json"
STORAGE_PATH = Path(os.getenv("TASKS_STORAGE_PATH", str(DEFAULT_STORAGE_PATH)))

AUTH_TOKEN_KEY = "authToken"
USERNAME_KEY = "username"
THEME_KEY = "theme"


class LocalStorage:
    """String key → string value, persisted on every write."""

    def __init__(self, path: Path = STORAGE_PATH):
        self.path = Path(path)
        self._data: dict[str, str] = self._read()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable client storage", extra={"path": str(self.path), "error": str(e)})
            return {}
        return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._write()

    def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._write()
