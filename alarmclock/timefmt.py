"""
timefmt.py
──────────
Pure helpers for turning hour/minute(/second) values into display strings
and for parsing the canonical "HH:MM" alarm time.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import NamedTuple, Optional

from alarmclock.errors import ParseError

# 0 = Sunday ... 6 = Saturday
DAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

_HHMM = re.compile(r"([01]?\d|2[0-3]):([0-5]\d)")


class TimeOfDay(NamedTuple):
    hour: int
    minute: int
    second: Optional[int] = None


def pad2(n: int) -> str:
    return f"{n:02d}"


def to_12h(hour: int) -> int:
    """Convert a 24h hour (0..23) to a 12h clock hour (1..12)."""
    h = hour % 12
    return 12 if h == 0 else h


def am_pm(hour: int) -> str:
    return "AM" if hour < 12 else "PM"


def js_weekday(dt: datetime) -> int:
    """Weekday index with Sunday as 0 (datetime.weekday() starts on Monday)."""
    return (dt.weekday() + 1) % 7


def parse_time_of_day(text: str) -> TimeOfDay:
    """
    Parse "H:MM" / "HH:MM" (24-hour) into a TimeOfDay.

    Raises ParseError for anything else, e.g. "24:00", "1:5" or "noon".
    """
    if not isinstance(text, str):
        raise ParseError(f"Invalid time: {text!r}")
    m = _HHMM.fullmatch(text)
    if not m:
        raise ParseError(f"Invalid time: {text!r}")
    return TimeOfDay(int(m.group(1)), int(m.group(2)))


def format_display_time(t: TimeOfDay, use_24h: bool) -> str:
    hour = t.hour if use_24h else to_12h(t.hour)
    parts = [pad2(hour), pad2(t.minute)]
    if t.second is not None:
        parts.append(pad2(t.second))
    text = ":".join(parts)
    if use_24h:
        return text
    return f"{text} {am_pm(t.hour)}"
