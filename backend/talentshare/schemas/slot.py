"""
Pydantic schemas for slot (schedule entry) validation.
"""

import re
from datetime import date, datetime

from pydantic import BaseModel, field_validator, model_validator

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


def to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class SlotCreate(BaseModel):
    date: date
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, v: str) -> str:
        if not TIME_PATTERN.match(v):
            raise ValueError("Time must use the HH:MM format")
        hours, minutes = v.split(":")
        return f"{int(hours):02d}:{minutes}"

    @model_validator(mode="after")
    def end_after_start(self) -> "SlotCreate":
        if to_minutes(self.end_time) <= to_minutes(self.start_time):
            raise ValueError("End time must be after start time")
        return self


class SlotResponse(BaseModel):
    id: int
    talent_id: int
    date: date
    start_time: str
    end_time: str
    current_participants: int
    created_at: datetime

    model_config = {"from_attributes": True}
