import json

from alarmclock.settings import SettingsStore
from alarmclock.storage import SETTINGS_KEY, MemoryStorage

from .conftest import BrokenStorage


def test_defaults_when_nothing_stored():
    settings = SettingsStore(MemoryStorage())
    assert settings.load().use_24h is False


def test_update_persists_with_camel_case_key():
    storage = MemoryStorage()
    settings = SettingsStore(storage)
    settings.load()
    assert settings.update(use_24h=True).use_24h is True
    assert json.loads(storage.get(SETTINGS_KEY)) == {"use24h": True}

    again = SettingsStore(storage)
    assert again.load().use_24h is True


def test_unknown_keys_are_ignored():
    storage = MemoryStorage({SETTINGS_KEY: '{"use24h": true, "theme": "dark"}'})
    assert SettingsStore(storage).load().use_24h is True


def test_corrupt_or_unreadable_settings_fall_back_to_defaults():
    for storage in (MemoryStorage({SETTINGS_KEY: "{oops"}),
                    MemoryStorage({SETTINGS_KEY: "[1, 2]"}),
                    BrokenStorage(read=True, write=False)):
        assert SettingsStore(storage).load().use_24h is False


def test_current_is_a_copy():
    settings = SettingsStore(MemoryStorage())
    snapshot = settings.current
    snapshot.use_24h = True
    assert settings.current.use_24h is False
