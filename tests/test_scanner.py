from datetime import datetime, timedelta

from alarmclock.models import Alarm
from alarmclock.scanner import minute_epoch, scan_due

NOW = datetime(2025, 1, 1, 7, 30, 15)     # Wednesday


def test_minute_epoch_truncates():
    assert minute_epoch(datetime(2025, 1, 1, 7, 30, 0)) == minute_epoch(datetime(2025, 1, 1, 7, 30, 59))
    assert minute_epoch(datetime(2025, 1, 1, 7, 31)) - minute_epoch(datetime(2025, 1, 1, 7, 30)) == 1


def test_fires_alarm_in_its_minute_and_marks_it():
    alarm = Alarm(time="07:30")
    fired = scan_due([alarm], NOW)
    assert fired == [alarm]
    assert alarm.last_fired == minute_epoch(NOW)


def test_same_minute_fires_once():
    alarm = Alarm(time="07:30")
    assert scan_due([alarm], NOW) == [alarm]
    assert scan_due([alarm], NOW + timedelta(seconds=30)) == []


def test_not_due_before_or_after_its_minute():
    alarm = Alarm(time="07:30")
    assert scan_due([alarm], datetime(2025, 1, 1, 7, 29, 59)) == []
    # A missed minute is not fired late
    assert scan_due([alarm], datetime(2025, 1, 1, 7, 31, 0)) == []
    assert alarm.last_fired == 0


def test_disabled_never_fires():
    alarm = Alarm(time="07:30", enabled=False)
    for offset in range(0, 24 * 60, 7):
        assert scan_due([alarm], datetime(2025, 1, 1) + timedelta(minutes=offset)) == []


def test_repeating_fires_only_on_listed_days():
    alarm = Alarm(time="07:30", repeat=[1, 3])     # Mon, Wed
    assert scan_due([alarm], NOW) == [alarm]
    assert scan_due([alarm], NOW + timedelta(days=1)) == []     # Thursday
    assert scan_due([alarm], NOW + timedelta(days=5)) == [alarm]   # Monday


def test_fired_list_keeps_collection_order():
    a = Alarm(time="07:30", label="a")
    b = Alarm(time="08:00", label="b")
    c = Alarm(time="07:30", label="c")
    assert [x.label for x in scan_due([a, b, c], NOW)] == ["a", "c"]
