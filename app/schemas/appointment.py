from pydantic import Field
from uuid import UUID
from datetime import datetime
from typing import Any, Optional, List

from app.schemas.base import CamelModel

MAX_NOTES_LENGTH = 1000

class AppointmentCreate(CamelModel):
    # Left untyped so a missing or malformed timestamp is reported as a 400, not a 422.
    scheduled_for: Any = None
    notes: Optional[str] = Field(default=None, max_length=MAX_NOTES_LENGTH)

class AppointmentDecision(CamelModel):
    approve: bool

class DoctorSummary(CamelModel):
    id: UUID
    name: str
    specialty: Optional[str] = None

class PatientSummary(CamelModel):
    id: UUID
    name: str
    email: str

class AppointmentResponse(CamelModel):
    id: UUID
    user_id: UUID
    doctor_id: UUID
    scheduled_for: datetime
    status: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class PatientAppointmentResponse(AppointmentResponse):
    doctor: Optional[DoctorSummary] = None

class DoctorAppointmentResponse(AppointmentResponse):
    user: Optional[PatientSummary] = None

class AppointmentEnvelope(CamelModel):
    message: str
    appointment: AppointmentResponse

class PatientAppointmentListResponse(CamelModel):
    appointments: List[PatientAppointmentResponse]

class DoctorAppointmentListResponse(CamelModel):
    appointments: List[DoctorAppointmentResponse]

class MessageResponse(CamelModel):
    message: str
