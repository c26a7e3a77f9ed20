"""
alarm_manager.py
────────────────
The ticker that rings alarms.

One daemon "tick" thread wakes every ``interval`` seconds (half a second by
default, so no minute boundary is missed) and asks the AlarmStore which
alarms are due.  For each fired alarm it plays the sound, shows a
notification, calls ``on_ring`` and, for one-shot alarms, disables them.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional

from alarmclock.alarm_store import AlarmStore
from alarmclock.models import Alarm
from alarmclock.notifier import Notifier, NullNotifier
from alarmclock.sound_engine import NullSoundPort, SoundPort

logger = logging.getLogger(__name__)


class AlarmManager:

    def __init__(
        self,
        store: AlarmStore,
        sound: Optional[SoundPort] = None,
        notifier: Optional[Notifier] = None,
        on_ring: Optional[Callable[[Alarm], None]] = None,
        interval: float = 0.5,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        on_ring(alarm) is called on the tick thread after an alarm fired.
        It is responsible for notifying connected WebSocket clients.
        """
        self.store    = store
        self.sound    = sound or NullSoundPort()
        self.notifier = notifier or NullNotifier()
        self._on_ring = on_ring
        self._interval = interval
        self._clock   = clock
        self._stop    = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        """Start the background scheduler thread."""
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._tick_loop, daemon=True, name="alarm-ticker")
        self._thread.start()
        logger.info("Alarm ticker started (every %.2fs)", self._interval)

    def stop(self, timeout: float = 2.0):
        """Signal the tick thread to stop and wait for it."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        logger.info("Alarm ticker stopped")

    # ── Ticking ───────────────────────────────────────────────────────────────

    def tick(self, now: Optional[datetime] = None) -> List[Alarm]:
        """Run one scan and ring everything it fired."""
        fired = self.store.due(now or self._clock())
        for alarm in fired:
            self._ring(alarm)
        return fired

    def _tick_loop(self):
        while not self._stop.is_set():
            try:
                self.tick()
            except Exception:
                # Keep ticking: a failed save must not silence later alarms.
                logger.exception("Alarm tick failed")
            self._stop.wait(timeout=self._interval)

    def _ring(self, alarm: Alarm):
        logger.info("Ringing alarm %s %r (%s)", alarm.id, alarm.label, alarm.sound.value)
        try:
            self.sound.play(alarm.sound.value)
        except Exception:
            logger.exception("Sound playback failed for alarm %s", alarm.id)

        try:
            self.notifier.notify("Alarm", alarm.label or "Alarm")
        except Exception:
            logger.exception("Notification failed for alarm %s", alarm.id)

        if self._on_ring:
            try:
                self._on_ring(alarm)
            except Exception:
                logger.exception("on_ring callback failed for alarm %s", alarm.id)

        if alarm.one_shot:
            try:
                self.store.update(alarm.id, {"enabled": False})
            except Exception:
                logger.exception("Could not disable one-shot alarm %s", alarm.id)
