from datetime import datetime
from typing import Any, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import select

from app.core.exceptions import ConflictError, InvalidArgumentError, InvalidStateError, NotFoundError
from app.core.logger import logger
from app.db.models import Appointment, AppointmentStatus, Doctor, User

ACTIVE_STATUSES = (AppointmentStatus.PENDING, AppointmentStatus.BOOKED)


def parse_scheduled_for(value: Any) -> datetime:
    """
    Parse an ISO 8601 timestamp into a naive server-local datetime.

    Offset-aware values (including a trailing ``Z``) are converted to the
    server's local zone first, so the stored wall-clock time lines up with
    the weekly template the availability engine reads. Anything that is not
    a non-empty string is rejected the same way as a malformed one.
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError("Invalid date format")
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        raise InvalidArgumentError("Invalid date format")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


class AppointmentService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_appointment(self, appointment_id: UUID) -> Appointment:
        appointment = await self.session.get(Appointment, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    async def find_booked(self, doctor_id: UUID, scheduled_for: datetime) -> Appointment | None:
        stmt = select(Appointment).where(
            Appointment.doctor_id == doctor_id,
            Appointment.scheduled_for == scheduled_for,
            Appointment.status == AppointmentStatus.BOOKED.value
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def request_booking(
        self,
        user_id: UUID,
        doctor_id: UUID,
        scheduled_for: Any,
        notes: Optional[str] = None
    ) -> Appointment:
        if user_id is None:
            raise InvalidArgumentError("Caller identity is required")
        appointment_date = parse_scheduled_for(scheduled_for)

        patient = await self.session.get(User, user_id)
        if not patient:
            raise NotFoundError("Patient not found")

        doctor = await self.session.get(Doctor, doctor_id)
        if not doctor:
            raise NotFoundError("Doctor not found")

        # Friendly early answer; the partial unique index stays authoritative.
        if await self.find_booked(doctor_id, appointment_date):
            raise ConflictError("Slot already booked")

        appointment = Appointment(
            user_id=user_id,
            doctor_id=doctor_id,
            scheduled_for=appointment_date,
            notes=notes,
            status=AppointmentStatus.PENDING.value
        )
        self.session.add(appointment)
        # Pending rows are outside the booked-slot index.
        await self.session.commit()
        await self.session.refresh(appointment)

        logger.info(
            f"Appointment {appointment.id} requested by user {user_id} "
            f"with doctor {doctor_id} for {appointment_date.isoformat()}"
        )
        return appointment

    async def _transition(
        self,
        appointment_id: UUID,
        allowed_from: Iterable[AppointmentStatus],
        target: AppointmentStatus,
        invalid_state_detail: str,
        conflict_detail: str = "Slot already booked",
        doctor_id: Optional[UUID] = None
    ) -> Appointment:
        # Compare-and-set: the row only changes if it is still in an allowed status.
        conditions = [
            Appointment.id == appointment_id,
            Appointment.status.in_([status.value for status in allowed_from])
        ]
        if doctor_id is not None:
            conditions.append(Appointment.doctor_id == doctor_id)
        stmt = (
            update(Appointment)
            .where(*conditions)
            .values(status=target.value, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
            changed = result.rowcount
            if changed:
                await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.warning(f"Appointment {appointment_id} not moved to {target.value}: slot already booked")
            raise ConflictError(conflict_detail)

        if not changed:
            await self.session.rollback()
            existing = await self.get_appointment(appointment_id)
            # Another doctor's appointment is reported as missing.
            if doctor_id is not None and existing.doctor_id != doctor_id:
                raise NotFoundError("Appointment not found")
            raise InvalidStateError(invalid_state_detail)

        appointment = await self.session.get(Appointment, appointment_id, populate_existing=True)
        logger.info(f"Appointment {appointment_id} is now {target.value}")
        return appointment

    async def decide(self, appointment_id: UUID, approve: bool, doctor_id: Optional[UUID] = None) -> Appointment:
        """Approve or reject a pending request. With ``doctor_id`` only that doctor's appointments match."""
        return await self._transition(
            appointment_id,
            allowed_from=(AppointmentStatus.PENDING,),
            target=AppointmentStatus.BOOKED if approve else AppointmentStatus.REJECTED,
            invalid_state_detail="Only pending appointments can be approved or rejected",
            conflict_detail=(
                "This slot is already booked by another appointment. "
                "Reject this request or ask the patient to pick another slot"
            ),
            doctor_id=doctor_id
        )

    async def cancel(self, appointment_id: UUID) -> Appointment:
        return await self._transition(
            appointment_id,
            allowed_from=ACTIVE_STATUSES,
            target=AppointmentStatus.CANCELLED,
            invalid_state_detail="Only pending or booked appointments can be cancelled"
        )

    async def complete(self, appointment_id: UUID) -> Appointment:
        return await self._transition(
            appointment_id,
            allowed_from=(AppointmentStatus.BOOKED,),
            target=AppointmentStatus.COMPLETED,
            invalid_state_detail="Only booked appointments can be completed"
        )

    async def list_for_patient(self, user_id: UUID) -> List[Appointment]:
        stmt = select(Appointment).where(
            Appointment.user_id == user_id
        ).options(
            selectinload(Appointment.doctor)
        ).order_by(Appointment.scheduled_for.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_doctor(self, doctor_id: UUID) -> List[Appointment]:
        stmt = select(Appointment).where(
            Appointment.doctor_id == doctor_id,
            Appointment.status.in_([status.value for status in ACTIVE_STATUSES])
        ).options(
            selectinload(Appointment.user)
        ).order_by(Appointment.scheduled_for)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, appointment_id: UUID) -> None:
        result = await self.session.execute(
            delete(Appointment).where(Appointment.id == appointment_id)
        )
        await self.session.commit()
        if result.rowcount:
            logger.info(f"Appointment {appointment_id} deleted")
