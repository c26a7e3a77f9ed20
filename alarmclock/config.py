"""
config.py
─────────
Runtime configuration, read from ALARMCLOCK_* environment variables, and the
package logging setup.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}


class AppConfig(BaseModel):
    data_dir: str = "~/.alarmclock"
    host: str = "127.0.0.1"
    port: int = 8000
    tick_interval: float = Field(0.5, gt=0)
    sound: Literal["auto", "sounddevice", "subprocess", "none"] = "auto"
    notifier: Literal["auto", "desktop", "log", "none"] = "auto"
    ticker: bool = True
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LEVELS:
            raise ValueError(f"Unknown log level: {v!r}")
        # Canonical name, e.g. "WARN" -> "WARNING"
        return logging.getLevelName(LEVELS[level])

    @classmethod
    def from_env(cls, environ=None, **overrides) -> "AppConfig":
        env = os.environ if environ is None else environ
        values = {}
        mapping = {
            "data_dir": "ALARMCLOCK_DATA_DIR",
            "host": "ALARMCLOCK_HOST",
            "port": "ALARMCLOCK_PORT",
            "tick_interval": "ALARMCLOCK_TICK_INTERVAL",
            "sound": "ALARMCLOCK_SOUND",
            "notifier": "ALARMCLOCK_NOTIFIER",
            "ticker": "ALARMCLOCK_TICKER",
            "log_level": "LOGGING_LEVEL",
        }
        for field, var in mapping.items():
            if env.get(var):
                values[field] = env[var]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)


def configure_logging(level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger("alarmclock")
    logger.setLevel(LEVELS.get(level.upper(), logging.INFO))

    if not logger.handlers:
        formatter = logging.Formatter(
            "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
            "%Y-%m-%d %H:%M:%S",
        )
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)
    return logger
