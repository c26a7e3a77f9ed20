import pytest
from pydantic import ValidationError

from alarmclock.config import AppConfig, configure_logging


def test_defaults():
    config = AppConfig.from_env({})
    assert config.port == 8000
    assert config.tick_interval == 0.5
    assert config.sound == "auto"
    assert config.ticker is True


def test_environment_and_overrides():
    env = {
        "ALARMCLOCK_PORT": "9001",
        "ALARMCLOCK_TICK_INTERVAL": "0.25",
        "ALARMCLOCK_TICKER": "false",
        "ALARMCLOCK_SOUND": "none",
        "LOGGING_LEVEL": "DEBUG",
    }
    config = AppConfig.from_env(env, port=None, host="0.0.0.0")
    assert config.port == 9001
    assert config.tick_interval == 0.25
    assert config.ticker is False
    assert config.sound == "none"
    assert config.host == "0.0.0.0"
    assert config.log_level == "DEBUG"


def test_invalid_values_rejected():
    with pytest.raises(ValidationError):
        AppConfig.from_env({"ALARMCLOCK_SOUND": "trumpet"})
    with pytest.raises(ValidationError):
        AppConfig.from_env({"ALARMCLOCK_TICK_INTERVAL": "0"})


def test_configure_logging_is_idempotent():
    logger = configure_logging("debug")
    handlers = list(logger.handlers)
    assert configure_logging("info") is logger
    assert logger.handlers == handlers


@pytest.mark.parametrize("given, expected", [("warn", "WARNING"), ("Debug", "DEBUG"), ("ERROR", "ERROR")])
def test_log_level_is_canonical(given, expected):
    config = AppConfig.from_env({"LOGGING_LEVEL": given})
    assert config.log_level == expected
    # uvicorn only accepts the full lowercase names
    assert config.log_level.lower() in {"critical", "error", "warning", "info", "debug", "trace"}


def test_unknown_log_level_rejected():
    with pytest.raises(ValidationError):
        AppConfig.from_env({}, log_level="loud")
