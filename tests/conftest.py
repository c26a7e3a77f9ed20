import pytest

from alarmclock.alarm_store import AlarmStore
from alarmclock.errors import StorageReadError, StorageWriteError
from alarmclock.notifier import Notifier
from alarmclock.sound_engine import SoundPort
from alarmclock.storage import MemoryStorage


class FakeSound(SoundPort):
    name = "fake"

    def __init__(self):
        self.played = []

    def play(self, kind="beep"):
        self.played.append(kind)


class FakeNotifier(Notifier):
    name = "fake"

    def __init__(self):
        self.sent = []

    def notify(self, title, body):
        self.sent.append((title, body))


class BrokenStorage:
    """Fails every read and/or write."""

    def __init__(self, read=True, write=True):
        self.read, self.write = read, write
        self.data = {}

    def get(self, key):
        if self.read:
            raise StorageReadError("disk on fire")
        return self.data.get(key)

    def set(self, key, value):
        if self.write:
            raise StorageWriteError("disk full")
        self.data[key] = value


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    s = AlarmStore(storage)
    s.load()
    return s


@pytest.fixture
def sound():
    return FakeSound()


@pytest.fixture
def notifier():
    return FakeNotifier()
