import logging

from alarmclock import notifier as notifier_mod
from alarmclock.notifier import (
    DesktopNotifier, LogNotifier, NullNotifier, _escape, _notification_command, detect_notifier,
)


def test_detect_explicit_choices():
    assert isinstance(detect_notifier("none"), NullNotifier)
    assert isinstance(detect_notifier("log"), LogNotifier)


def test_detect_without_desktop_tool_logs(monkeypatch):
    monkeypatch.setattr(DesktopNotifier, "available", staticmethod(lambda: False))
    assert isinstance(detect_notifier("auto"), LogNotifier)
    assert isinstance(detect_notifier("desktop"), LogNotifier)


def test_detect_desktop(monkeypatch):
    monkeypatch.setattr(DesktopNotifier, "available", staticmethod(lambda: True))
    assert isinstance(detect_notifier("auto"), DesktopNotifier)


def test_log_notifier(caplog):
    with caplog.at_level(logging.WARNING, logger="alarmclock.notifier"):
        LogNotifier().notify("Alarm", "Wake up")
    assert "Alarm: Wake up" in caplog.text


def test_linux_command(monkeypatch):
    monkeypatch.setattr(notifier_mod.platform, "system", lambda: "Linux")
    cmd = _notification_command("Alarm", "Gym")
    assert cmd[0] == "notify-send"
    assert cmd[-2:] == ["Alarm", "Gym"]


def test_macos_command_escapes_quotes(monkeypatch):
    monkeypatch.setattr(notifier_mod.platform, "system", lambda: "Darwin")
    cmd = _notification_command("Alarm", 'say "hi"')
    assert cmd[0] == "osascript"
    assert 'say \\"hi\\"' in cmd[2]
    assert _escape('a"b') == 'a\\"b'


def test_missing_binary_is_ignored(monkeypatch):
    def popen(*args, **kwargs):
        raise FileNotFoundError("notify-send")

    monkeypatch.setattr(notifier_mod.platform, "system", lambda: "Linux")
    monkeypatch.setattr(notifier_mod.subprocess, "Popen", popen)
    DesktopNotifier().notify("Alarm", "Wake up")
