from typing import Optional
from uuid import UUID
from datetime import datetime

from app.schemas.base import CamelModel

class DoctorResponse(CamelModel):
    id: UUID
    name: str
    email: str
    specialty: Optional[str] = None
    clinic_address: Optional[str] = None
    created_at: datetime
