from enum import Enum
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from uuid import UUID, uuid4
from sqlalchemy import Column, DateTime, Index, text

if TYPE_CHECKING:
    from .doctor import Doctor
    from .user import User

class AppointmentStatus(str, Enum):
    PENDING = "pending"
    BOOKED = "booked"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    REJECTED = "rejected"

class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    __table_args__ = (
        # At most one booked appointment per doctor and timestamp.
        Index(
            "uq_appointments_doctor_slot_booked",
            "doctor_id",
            "scheduled_for",
            unique=True,
            postgresql_where=text("status = 'booked'"),
            sqlite_where=text("status = 'booked'"),
        ),
        Index("ix_appointments_doctor_scheduled_for", "doctor_id", "scheduled_for"),
    )
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    doctor_id: UUID = Field(foreign_key="doctors.id")
    # Naive, server local time.
    scheduled_for: datetime = Field(sa_column=Column(DateTime, nullable=False))
    status: str = Field(default=AppointmentStatus.PENDING.value, index=True)
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_column=Column(DateTime, nullable=False))
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column=Column(DateTime, nullable=False))

    user: "User" = Relationship(back_populates="appointments")
    doctor: "Doctor" = Relationship(back_populates="appointments")
