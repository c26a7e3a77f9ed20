"""
storage.py
──────────
Key-value persistence for opaque string blobs.

JsonFileStorage keeps one file per key under a data directory:
  - threading.Lock serialises readers and writers
  - writes go to a tmp file first and are moved into place with os.replace()
MemoryStorage keeps blobs in a dict (tests, ephemeral runs).
"""

from __future__ import annotations

import os
import threading
from typing import Dict, Optional

from alarmclock.errors import StorageReadError, StorageWriteError

ALARMS_KEY   = "alarmclock.alarms.v1"
SETTINGS_KEY = "alarmclock.settings.v1"


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value


class JsonFileStorage:
    """Stores each key as ``<data_dir>/<key>.json``."""

    def __init__(self, data_dir: str):
        self.data_dir = os.path.abspath(os.path.expanduser(data_dir))
        self._lock = threading.Lock()
        os.makedirs(self.data_dir, exist_ok=True)

    def path_for(self, key: str) -> str:
        return os.path.join(self.data_dir, f"{key}.json")

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        with self._lock:
            if not os.path.exists(path):
                return None
            try:
                with open(path, "r", encoding="utf-8") as f:
                    return f.read()
            except OSError as e:
                raise StorageReadError(f"Cannot read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        """Atomic write: write to a tmp file then rename (os.replace)."""
        path = self.path_for(key)
        tmp = path + ".tmp"
        with self._lock:
            try:
                with open(tmp, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp, path)   # Atomic on POSIX; near-atomic on Windows
            except OSError as e:
                raise StorageWriteError(f"Cannot write {path}: {e}") from e
