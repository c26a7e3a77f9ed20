"""
scanner.py
──────────
Decides which alarms fire during the current scheduling tick.

De-duplication is per minute: an alarm that fired during minute-epoch ``m``
carries ``last_fired == m`` and is skipped for the rest of that minute, no
matter how often the scan runs.  A minute that was never scanned is gone;
the scan does not look back.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Iterable, List

from alarmclock.models import Alarm
from alarmclock.trigger import due_instant

logger = logging.getLogger(__name__)


def minute_epoch(dt: datetime) -> int:
    """Whole minutes since the Unix epoch (naive datetimes are local time)."""
    return math.floor(dt.timestamp() / 60)


def scan_due(alarms: Iterable[Alarm], now: datetime) -> List[Alarm]:
    """
    Return the enabled alarms due in ``now``'s minute, in iteration order.

    Each returned alarm has ``last_fired`` set in place to the current
    minute-epoch; the caller is responsible for persisting that.
    """
    now_min = minute_epoch(now)
    fired = []
    for alarm in alarms:
        if not alarm.enabled:
            continue
        if alarm.last_fired == now_min:
            continue
        if minute_epoch(due_instant(alarm, now)) == now_min:
            alarm.last_fired = now_min
            fired.append(alarm)
            logger.info("Alarm %s (%s) due at %s", alarm.id, alarm.time, now.strftime("%Y-%m-%d %H:%M"))
    return fired
