"""Display helpers for the alarm list."""

from __future__ import annotations

from datetime import datetime

from alarmclock.models import Alarm, AlarmView
from alarmclock.timefmt import DAY_LABELS, TimeOfDay, format_display_time, parse_time_of_day
from alarmclock.trigger import next_trigger


def describe_alarm(alarm: Alarm, now: datetime, use_24h: bool) -> str:
    """``label • Repeats: Mon, Wed • Next: Fri 03 Jan 2025 09:00``"""
    meta = []
    if alarm.label:
        meta.append(alarm.label)
    if alarm.repeat:
        meta.append("Repeats: " + ", ".join(DAY_LABELS[i] for i in sorted(set(alarm.repeat))))
    else:
        meta.append("One-time")
    nxt = next_trigger(alarm, now)
    clock = format_display_time(TimeOfDay(nxt.hour, nxt.minute), use_24h)
    meta.append(f"Next: {nxt.strftime('%a %d %b %Y')} {clock}")
    return " • ".join(meta)


def alarm_view(alarm: Alarm, now: datetime, use_24h: bool) -> AlarmView:
    return AlarmView(
        **alarm.model_dump(),
        display_time=format_display_time(parse_time_of_day(alarm.time), use_24h),
        next_trigger=next_trigger(alarm, now),
        summary=describe_alarm(alarm, now, use_24h),
    )
