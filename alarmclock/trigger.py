"""
trigger.py
──────────
Next-trigger computation for one-shot and weekly-repeating alarms.

All datetimes are naive and interpreted in host local time.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from alarmclock.timefmt import js_weekday, parse_time_of_day

_ONE_MINUTE = timedelta(minutes=1)


def _plus_days(dt: datetime, n: int) -> datetime:
    # Naive arithmetic keeps the wall-clock hour:minute on the target day.
    return dt + timedelta(days=n)


def truncate_to_minute(dt: datetime) -> datetime:
    return dt.replace(second=0, microsecond=0)


def next_trigger(alarm, reference: datetime) -> datetime:
    """
    Return the next instant strictly after the minute of ``reference`` at
    which ``alarm`` should ring.

    ``alarm`` needs ``time`` ("HH:MM") and ``repeat`` (weekday indices,
    0 = Sunday).  ``enabled`` is ignored; callers filter on it.
    """
    tod = parse_time_of_day(alarm.time)
    start = truncate_to_minute(reference)
    candidate = start.replace(hour=tod.hour, minute=tod.minute)

    if not alarm.repeat:
        if candidate <= start:
            return _plus_days(candidate, 1)
        return candidate

    today = js_weekday(start)
    for delta in range(8):
        if (today + delta) % 7 in alarm.repeat:
            d = _plus_days(candidate, delta)
            if d > start:
                return d

    return _plus_days(candidate, 7)


def due_instant(alarm, now: datetime) -> datetime:
    """Next occurrence on or after the current minute (a match now counts)."""
    return next_trigger(alarm, truncate_to_minute(now) - _ONE_MINUTE)
