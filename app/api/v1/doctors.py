from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from app.api.deps import Principal, get_current_doctor, get_schedule_service
from app.db.session import get_session
from app.schemas.doctor import DoctorResponse
from app.schemas.schedule import WeeklyScheduleResponse, WeeklyTemplate
from app.services.doctor_service import DoctorService
from app.services.schedule_service import ScheduleService

router = APIRouter()

async def get_doctor_service(session: AsyncSession = Depends(get_session)) -> DoctorService:
    return DoctorService(session)

def schedule_response(schedule) -> WeeklyScheduleResponse:
    return WeeklyScheduleResponse(
        doctor_id=schedule.doctor_id,
        days=WeeklyTemplate.model_validate(schedule.days or {}),
        updated_at=schedule.updated_at
    )

@router.get("/", response_model=List[DoctorResponse])
async def read_doctors(
    specialty: Optional[str] = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    service: DoctorService = Depends(get_doctor_service)
):
    doctors = await service.get_doctors(specialty, skip, limit)
    return [DoctorResponse.model_validate(doctor) for doctor in doctors]

@router.put("/me/schedule", response_model=WeeklyScheduleResponse)
async def update_my_schedule(
    template: WeeklyTemplate,
    doctor: Principal = Depends(get_current_doctor),
    service: ScheduleService = Depends(get_schedule_service)
):
    schedule = await service.upsert_weekly_schedule(doctor.id, template)
    return schedule_response(schedule)

@router.get("/{doctor_id}", response_model=DoctorResponse)
async def read_doctor(
    doctor_id: UUID,
    service: DoctorService = Depends(get_doctor_service)
):
    doctor = await service.get_doctor(doctor_id)
    return DoctorResponse.model_validate(doctor)

@router.get("/{doctor_id}/schedule", response_model=WeeklyScheduleResponse)
async def read_doctor_schedule(
    doctor_id: UUID,
    service: ScheduleService = Depends(get_schedule_service)
):
    schedule = await service.get_weekly_schedule(doctor_id)
    return schedule_response(schedule)
