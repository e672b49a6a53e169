from sqlmodel import SQLModel, Field, Relationship
from typing import TYPE_CHECKING
from datetime import datetime
from uuid import UUID, uuid4
from sqlalchemy import JSON, Column, DateTime

if TYPE_CHECKING:
    from .doctor import Doctor

# Civil-calendar order: index 0 is Sunday.
WEEKDAY_KEYS = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")

class WeeklySchedule(SQLModel, table=True):
    __tablename__ = "weekly_schedules"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    doctor_id: UUID = Field(foreign_key="doctors.id", unique=True, index=True)
    # {"mon": {"active": true, "slots": [{"startTime": "09:00", "endTime": "09:30"}]}, ...}
    days: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_column=Column(DateTime, nullable=False))
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column=Column(DateTime, nullable=False))

    doctor: "Doctor" = Relationship(back_populates="weekly_schedule")
