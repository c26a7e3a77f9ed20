"""Local alarm clock: scheduled one-shot and weekly alarms with sound and notifications."""

__version__ = "1.0.0"
