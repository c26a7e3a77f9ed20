"""
settings.py
───────────
Persisted user preferences (currently only the 12h/24h display toggle).
"""

from __future__ import annotations

import json
import logging
import threading

from alarmclock.errors import StorageReadError
from alarmclock.models import Settings
from alarmclock.storage import SETTINGS_KEY

logger = logging.getLogger(__name__)


class SettingsStore:

    def __init__(self, storage, key: str = SETTINGS_KEY):
        self._storage = storage
        self._key = key
        self._settings = Settings()
        self._lock = threading.Lock()

    @property
    def current(self) -> Settings:
        with self._lock:
            return self._settings.model_copy()

    def load(self) -> Settings:
        """Stored values over defaults; any failure leaves the defaults."""
        settings = Settings()
        try:
            raw = self._storage.get(self._key)
            if raw:
                stored = json.loads(raw)
                settings = Settings.model_validate({**settings.model_dump(by_alias=True), **stored})
        except (StorageReadError, ValueError, TypeError) as e:
            # ValidationError and JSONDecodeError are both ValueErrors
            logger.warning("Could not load settings, using defaults: %s", e)
        with self._lock:
            self._settings = settings
        return settings.model_copy()

    def save(self) -> None:
        with self._lock:
            data = self._settings.model_dump(by_alias=True)
        self._storage.set(self._key, json.dumps(data))

    def update(self, **fields) -> Settings:
        with self._lock:
            self._settings = Settings.model_validate({**self._settings.model_dump(), **fields})
        self.save()
        return self.current
