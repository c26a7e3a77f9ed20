"""
notifier.py
───────────
Visual alarm notifications.

DesktopNotifier talks to the OS notification daemon by spawning a child
process:

  Linux  → notify-send (libnotify / D-Bus)
  macOS  → osascript (AppleScript bridge)
  Windows→ PowerShell NotifyIcon balloon
"""

from __future__ import annotations

import logging
import platform
import shutil
import subprocess
from typing import List, Optional

logger = logging.getLogger(__name__)


class Notifier:
    name = "abstract"

    def notify(self, title: str, body: str) -> None:
        raise NotImplementedError


class NullNotifier(Notifier):
    name = "none"

    def notify(self, title: str, body: str) -> None:
        pass


class LogNotifier(Notifier):
    """Falls back to the log when there is no desktop to notify."""

    name = "log"

    def notify(self, title: str, body: str) -> None:
        logger.warning("%s: %s", title, body)


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _notification_command(title: str, body: str) -> Optional[List[str]]:
    system = platform.system()
    if system == "Linux":
        return ["notify-send", "--icon=dialog-information", "--expire-time=8000", title, body]
    if system == "Darwin":
        script = (
            f'display notification "{_escape(body)}" '
            f'with title "{_escape(title)}" sound name "Glass"'
        )
        return ["osascript", "-e", script]
    if system == "Windows":
        ps_title = title.replace("'", "''")
        ps_body = body.replace("'", "''")
        ps_cmd = (
            "Add-Type -AssemblyName System.Windows.Forms; "
            "$n = New-Object System.Windows.Forms.NotifyIcon; "
            "$n.Icon = [System.Drawing.SystemIcons]::Information; "
            "$n.Visible = $true; "
            f"$n.ShowBalloonTip(5000, '{ps_title}', '{ps_body}', "
            "[System.Windows.Forms.ToolTipIcon]::Info)"
        )
        return ["powershell", "-WindowStyle", "Hidden", "-Command", ps_cmd]
    return None


class DesktopNotifier(Notifier):
    name = "desktop"

    @staticmethod
    def available() -> bool:
        cmd = _notification_command("", "")
        return bool(cmd) and shutil.which(cmd[0]) is not None

    def notify(self, title: str, body: str) -> None:
        cmd = _notification_command(title, body)
        if cmd is None:
            return
        try:
            subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        except FileNotFoundError:
            # notify-send not installed — silently skip OS notification
            logger.debug("%s not found, notification skipped", cmd[0])


def detect_notifier(preference: str = "auto") -> Notifier:
    if preference == "none":
        return NullNotifier()
    if preference == "log":
        return LogNotifier()
    if DesktopNotifier.available():
        return DesktopNotifier()
    if preference == "desktop":
        logger.warning("No desktop notification tool found, logging alarms instead")
    return LogNotifier()
