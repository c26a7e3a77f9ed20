"""
errors.py
─────────
Exception hierarchy shared by the alarm clock modules.

Unknown alarm ids are not errors: lookups return None / False instead.
"""


class AlarmClockError(Exception):
    """Base class for every error raised by this package."""


class ParseError(AlarmClockError, ValueError):
    """A time-of-day string did not match HH:MM (00-23 / 00-59)."""


class StorageError(AlarmClockError):
    pass


class StorageReadError(StorageError):
    """The storage collaborator could not return a stored blob."""


class StorageWriteError(StorageError):
    """The storage collaborator could not persist a blob."""
