"""
models.py
─────────
Shared Pydantic data models for the alarm clock.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from alarmclock.timefmt import pad2, parse_time_of_day

Weekday = Annotated[int, Field(ge=0, le=6)]     # 0 = Sunday


class SoundKind(str, Enum):
    BEEP = "beep"
    CHIME = "chime"


def new_alarm_id() -> str:
    return uuid.uuid4().hex


def _normalise_time(value: str) -> str:
    tod = parse_time_of_day(value)
    return f"{pad2(tod.hour)}:{pad2(tod.minute)}"


class Alarm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_alarm_id)
    time: str                                   # "HH:MM"
    label: str = ""
    enabled: bool = True
    repeat: List[Weekday] = []                  # empty = one-shot
    sound: SoundKind = SoundKind.BEEP
    last_fired: int = Field(0, alias="lastFired")   # minute-epoch

    @field_validator("time")
    @classmethod
    def _check_time(cls, v: str) -> str:
        return _normalise_time(v)

    @property
    def one_shot(self) -> bool:
        return not self.repeat

    def to_record(self) -> dict:
        """JSON-ready dict using the persisted key names."""
        return self.model_dump(mode="json", by_alias=True)


class AlarmCreate(BaseModel):
    time: str
    label: str = ""
    repeat: List[Weekday] = []
    sound: SoundKind = SoundKind.BEEP

    @field_validator("time")
    @classmethod
    def _check_time(cls, v: str) -> str:
        return _normalise_time(v)


class AlarmUpdate(BaseModel):
    time: Optional[str] = None
    label: Optional[str] = None
    enabled: Optional[bool] = None
    repeat: Optional[List[Weekday]] = None
    sound: Optional[SoundKind] = None

    @field_validator("time")
    @classmethod
    def _check_time(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _normalise_time(v)


class Settings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    use_24h: bool = Field(False, alias="use24h")


class AlarmView(Alarm):
    """An alarm as rendered for the presentation layer."""

    display_time: str
    next_trigger: datetime
    summary: str
