from sqlmodel import SQLModel
from .user import User
from .doctor import Doctor
from .schedule import WeeklySchedule, WEEKDAY_KEYS
from .appointment import Appointment, AppointmentStatus

__all__ = [
    "SQLModel",
    "User",
    "Doctor",
    "WeeklySchedule",
    "WEEKDAY_KEYS",
    "Appointment",
    "AppointmentStatus",
]
