from enum import Enum
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jwt.exceptions import PyJWTError
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.redis import session_store
from app.db.session import get_session
from app.services.appointment_service import AppointmentService
from app.services.availability_service import AvailabilityService
from app.services.schedule_service import ScheduleService
from app.core.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")

class Role(str, Enum):
    PATIENT = "patient"
    DOCTOR = "doctor"

class Principal(BaseModel):
    """Caller identity resolved from a bearer token issued by the identity service."""
    id: UUID
    role: Role

async def get_current_principal(token: str = Depends(oauth2_scheme)) -> Principal:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
        principal = Principal(id=payload.get("sub"), role=payload.get("role"))
    except (PyJWTError, ValidationError):
        raise credentials_exception

    if settings.CHECK_TOKEN_SESSION and await session_store.lookup(token) is None:
        raise credentials_exception
    return principal

async def get_current_patient(principal: Principal = Depends(get_current_principal)) -> Principal:
    if principal.role != Role.PATIENT:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Patient access required")
    return principal

async def get_current_doctor(principal: Principal = Depends(get_current_principal)) -> Principal:
    if principal.role != Role.DOCTOR:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Doctor access required")
    return principal

async def get_appointment_service(session: AsyncSession = Depends(get_session)) -> AppointmentService:
    return AppointmentService(session)

async def get_availability_service(session: AsyncSession = Depends(get_session)) -> AvailabilityService:
    return AvailabilityService(session)

async def get_schedule_service(session: AsyncSession = Depends(get_session)) -> ScheduleService:
    return ScheduleService(session)
