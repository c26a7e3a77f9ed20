"""
alarm_store.py
──────────────
The in-memory alarm collection and its persistence.

The store is the only owner of the Alarm records.  Every read hands out deep
copies; every mutation re-serialises the whole collection to the storage
collaborator.  A re-entrant lock makes each operation run to completion
before the ticker thread or a request handler can observe the collection.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime
from typing import List, Mapping, Optional, Union

from pydantic import ValidationError

from alarmclock.errors import StorageReadError, StorageWriteError
from alarmclock.models import Alarm, AlarmCreate, AlarmUpdate
from alarmclock.scanner import scan_due
from alarmclock.storage import ALARMS_KEY

logger = logging.getLogger(__name__)

# Persisted (alias) key -> field name, e.g. "lastFired" -> "last_fired"
_FIELD_NAMES = {f.alias: name for name, f in Alarm.model_fields.items() if f.alias}


class AlarmStore:

    def __init__(self, storage, key: str = ALARMS_KEY):
        self._storage = storage
        self._key = key
        self._alarms: List[Alarm] = []
        self._lock = threading.RLock()

    # ── Persistence ───────────────────────────────────────────────────────────

    def load(self) -> None:
        """
        Replace the collection with what the storage collaborator holds.

        Never raises: a missing, unreadable or corrupted blob gives an empty
        collection, and records that fail validation are skipped.
        """
        alarms: List[Alarm] = []
        try:
            raw = self._storage.get(self._key)
            rows = json.loads(raw) if raw else []
        except (StorageReadError, ValueError) as e:
            logger.warning("Could not load alarms, starting empty: %s", e)
            rows = []

        if not isinstance(rows, list):
            logger.warning("Stored alarms are not a list, starting empty")
            rows = []

        seen = set()
        for row in rows:
            try:
                alarm = Alarm.model_validate(row)
            except ValidationError as e:
                logger.warning("Skipping invalid alarm record %r: %s", row, e)
                continue
            if alarm.id in seen:
                logger.warning("Skipping duplicate alarm id %s", alarm.id)
                continue
            seen.add(alarm.id)
            alarms.append(alarm)

        with self._lock:
            self._alarms = alarms
        logger.info("Loaded %d alarm(s)", len(alarms))

    def save(self) -> None:
        """Serialise the whole collection; StorageWriteError propagates."""
        with self._lock:
            data = [a.to_record() for a in self._alarms]
            self._storage.set(self._key, json.dumps(data))

    # ── CRUD ──────────────────────────────────────────────────────────────────

    def list(self) -> List[Alarm]:
        with self._lock:
            return [a.model_copy(deep=True) for a in self._alarms]

    def get(self, alarm_id: str) -> Optional[Alarm]:
        with self._lock:
            idx = self._index(alarm_id)
            return None if idx is None else self._alarms[idx].model_copy(deep=True)

    def add(self, spec: Union[AlarmCreate, Mapping]) -> Alarm:
        if not isinstance(spec, AlarmCreate):
            spec = AlarmCreate.model_validate(spec)
        alarm = Alarm(**spec.model_dump())
        with self._lock:
            self._alarms.append(alarm)
            self.save()
        logger.info("Added alarm %s at %s", alarm.id, alarm.time)
        return alarm.model_copy(deep=True)

    def update(self, alarm_id: str, patch: Union[AlarmUpdate, Mapping]) -> Optional[Alarm]:
        """Merge ``patch`` onto the alarm.  Unknown ids are a no-op (None)."""
        if isinstance(patch, AlarmUpdate):
            patch = patch.model_dump(exclude_none=True)
        with self._lock:
            idx = self._index(alarm_id)
            if idx is None:
                return None
            current = self._alarms[idx]
            fields = {_FIELD_NAMES.get(k, k): v for k, v in patch.items()}
            merged = {**current.model_dump(), **fields, "id": current.id}
            updated = Alarm.model_validate(merged)
            self._alarms[idx] = updated
            self.save()
            return updated.model_copy(deep=True)

    def remove(self, alarm_id: str) -> bool:
        with self._lock:
            before = len(self._alarms)
            self._alarms = [a for a in self._alarms if a.id != alarm_id]
            self.save()
            return len(self._alarms) != before

    def clear(self) -> None:
        with self._lock:
            self._alarms = []
            self.save()

    # ── Scheduling ────────────────────────────────────────────────────────────

    def due(self, now: Optional[datetime] = None) -> List[Alarm]:
        """
        Fire the alarms due this minute and persist their ``last_fired``.

        A failed save is logged, not raised: the fired alarms are still
        returned so they ring, and the next successful save persists them.
        """
        now = now or datetime.now()
        with self._lock:
            fired = scan_due(self._alarms, now)
            if fired:
                try:
                    self.save()
                except StorageWriteError:
                    logger.exception("Could not persist %d fired alarm(s)", len(fired))
            return [a.model_copy(deep=True) for a in fired]

    # ── Internal ──────────────────────────────────────────────────────────────

    def _index(self, alarm_id: str) -> Optional[int]:
        for i, a in enumerate(self._alarms):
            if a.id == alarm_id:
                return i
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._alarms)
