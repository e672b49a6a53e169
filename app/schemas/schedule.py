import re
from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import field_validator, model_validator

from app.schemas.base import CamelModel

TIME_OF_DAY = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

class Slot(CamelModel):
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_of_day(cls, value: str) -> str:
        value = value.strip()
        if not TIME_OF_DAY.match(value):
            raise ValueError("Times must use 24-hour HH:MM format.")
        return value

    @model_validator(mode="after")
    def validate_order(self) -> "Slot":
        if self.start_time >= self.end_time:
            raise ValueError("Slot start time must be before its end time.")
        return self

class DaySchedule(CamelModel):
    active: bool = False
    slots: List[Slot] = []

class WeeklyTemplate(CamelModel):
    sun: DaySchedule = DaySchedule()
    mon: DaySchedule = DaySchedule()
    tue: DaySchedule = DaySchedule()
    wed: DaySchedule = DaySchedule()
    thu: DaySchedule = DaySchedule()
    fri: DaySchedule = DaySchedule()
    sat: DaySchedule = DaySchedule()

    def day(self, key: str) -> DaySchedule:
        return getattr(self, key)

class WeeklyScheduleResponse(CamelModel):
    doctor_id: UUID
    days: WeeklyTemplate
    updated_at: datetime

class AvailableSlotsResponse(CamelModel):
    available_slots: List[Slot]
