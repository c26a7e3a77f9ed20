from datetime import datetime

import pytest

from alarmclock.errors import ParseError
from alarmclock.timefmt import (
    TimeOfDay, am_pm, format_display_time, js_weekday, pad2, parse_time_of_day, to_12h,
)


def test_basics():
    assert pad2(3) == "03"
    assert to_12h(0) == 12 and to_12h(12) == 12 and to_12h(13) == 1
    assert am_pm(0) == "AM" and am_pm(11) == "AM" and am_pm(12) == "PM"


def test_format_24h_and_12h():
    assert format_display_time(TimeOfDay(14, 5), True) == "14:05"
    assert format_display_time(TimeOfDay(14, 5), False) == "02:05 PM"


def test_format_midnight_and_noon_in_12h():
    assert format_display_time(TimeOfDay(0, 0), False) == "12:00 AM"
    assert format_display_time(TimeOfDay(12, 30), False) == "12:30 PM"


def test_format_with_seconds():
    assert format_display_time(TimeOfDay(9, 7, 3), True) == "09:07:03"
    assert format_display_time(TimeOfDay(21, 7, 3), False) == "09:07:03 PM"


def test_parse_valid():
    t = parse_time_of_day("23:59")
    assert (t.hour, t.minute) == (23, 59)
    assert t == TimeOfDay(23, 59)
    assert parse_time_of_day("7:05") == TimeOfDay(7, 5)
    assert parse_time_of_day("00:00") == TimeOfDay(0, 0)


@pytest.mark.parametrize("text", ["24:00", "1:5", "12:60", "ab:cd", "", "12:00 PM", "23:59\n", None, 1230])
def test_parse_rejects(text):
    with pytest.raises(ParseError):
        parse_time_of_day(text)


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        parse_time_of_day("noon")


def test_js_weekday_starts_on_sunday():
    assert js_weekday(datetime(2025, 1, 5)) == 0     # Sunday
    assert js_weekday(datetime(2025, 1, 1)) == 3     # Wednesday
    assert js_weekday(datetime(2025, 1, 4)) == 6     # Saturday
