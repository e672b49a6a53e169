from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from uuid import UUID

from app.api.deps import (
    Principal,
    get_appointment_service,
    get_availability_service,
    get_current_doctor,
    get_current_patient,
    get_current_principal,
)
from app.schemas.appointment import (
    AppointmentCreate,
    AppointmentDecision,
    AppointmentEnvelope,
    AppointmentResponse,
    DoctorAppointmentListResponse,
    DoctorAppointmentResponse,
    MessageResponse,
    PatientAppointmentListResponse,
    PatientAppointmentResponse
)
from app.schemas.schedule import AvailableSlotsResponse
from app.services.appointment_service import AppointmentService
from app.services.availability_service import AvailabilityService

router = APIRouter()

@router.get("/user", response_model=PatientAppointmentListResponse)
async def get_user_appointments(
    patient: Principal = Depends(get_current_patient),
    service: AppointmentService = Depends(get_appointment_service)
):
    appointments = await service.list_for_patient(patient.id)
    return PatientAppointmentListResponse(
        appointments=[PatientAppointmentResponse.model_validate(a) for a in appointments]
    )

@router.get("/doctor", response_model=DoctorAppointmentListResponse)
async def get_doctor_appointments(
    doctor: Principal = Depends(get_current_doctor),
    service: AppointmentService = Depends(get_appointment_service)
):
    appointments = await service.list_for_doctor(doctor.id)
    return DoctorAppointmentListResponse(
        appointments=[DoctorAppointmentResponse.model_validate(a) for a in appointments]
    )

@router.get("/{doctor_id}/slots", response_model=AvailableSlotsResponse)
async def get_available_slots(
    doctor_id: UUID,
    date: Optional[str] = Query(default=None, description="YYYY-MM-DD"),
    principal: Principal = Depends(get_current_principal),
    service: AvailabilityService = Depends(get_availability_service)
):
    slots = await service.compute_free_slots(doctor_id, date)
    return AvailableSlotsResponse(available_slots=slots)

@router.post("/{doctor_id}", response_model=AppointmentEnvelope, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    doctor_id: UUID,
    request: AppointmentCreate,
    patient: Principal = Depends(get_current_patient),
    service: AppointmentService = Depends(get_appointment_service)
):
    appointment = await service.request_booking(
        patient.id, doctor_id, request.scheduled_for, request.notes
    )
    return AppointmentEnvelope(
        message="Appointment booked successfully, pending doctor approval",
        appointment=AppointmentResponse.model_validate(appointment)
    )

@router.patch("/{appointment_id}/approve", response_model=AppointmentEnvelope)
async def approve_appointment(
    appointment_id: UUID,
    decision: AppointmentDecision,
    doctor: Principal = Depends(get_current_doctor),
    service: AppointmentService = Depends(get_appointment_service)
):
    appointment = await service.decide(appointment_id, decision.approve, doctor_id=doctor.id)
    outcome = "approved" if decision.approve else "rejected"
    return AppointmentEnvelope(
        message=f"Appointment {outcome} successfully",
        appointment=AppointmentResponse.model_validate(appointment)
    )

@router.patch("/{appointment_id}/cancel", response_model=AppointmentEnvelope)
async def cancel_appointment(
    appointment_id: UUID,
    principal: Principal = Depends(get_current_principal),
    service: AppointmentService = Depends(get_appointment_service)
):
    appointment = await service.cancel(appointment_id)
    return AppointmentEnvelope(
        message="Appointment cancelled successfully",
        appointment=AppointmentResponse.model_validate(appointment)
    )

@router.delete("/{appointment_id}/delete", response_model=MessageResponse)
async def delete_appointment(
    appointment_id: UUID,
    principal: Principal = Depends(get_current_principal),
    service: AppointmentService = Depends(get_appointment_service)
):
    await service.delete(appointment_id)
    return MessageResponse(message="Appointment deleted successfully")
