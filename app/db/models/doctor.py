from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from uuid import UUID, uuid4
from sqlalchemy import Column, DateTime

if TYPE_CHECKING:
    from .schedule import WeeklySchedule
    from .appointment import Appointment

class Doctor(SQLModel, table=True):
    __tablename__ = "doctors"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    email: str = Field(unique=True, index=True)
    specialty: Optional[str] = Field(default=None, index=True)
    clinic_address: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_column=Column(DateTime, nullable=False))

    weekly_schedule: Optional["WeeklySchedule"] = Relationship(
        back_populates="doctor", sa_relationship_kwargs={"uselist": False}
    )
    appointments: List["Appointment"] = Relationship(back_populates="doctor")
