from datetime import date, datetime, time
from typing import Iterable, List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.exceptions import InvalidArgumentError
from app.db.models import Appointment, AppointmentStatus, WEEKDAY_KEYS
from app.schemas.schedule import DaySchedule, Slot
from app.services.schedule_service import ScheduleService


def parse_query_date(value: str | None) -> date:
    if not value:
        raise InvalidArgumentError("A date query parameter is required. Use YYYY-MM-DD")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise InvalidArgumentError("Invalid date format. Use YYYY-MM-DD")


def weekday_key(day: date) -> str:
    # Python weekday() is 0=Monday..6=Sunday; schedules use 0=Sunday..6=Saturday.
    python_day = day.weekday()
    civil_day = 0 if python_day == 6 else python_day + 1
    return WEEKDAY_KEYS[civil_day]


def day_window(day: date) -> tuple[datetime, datetime]:
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def occupied_starts(booked_times: Iterable[datetime]) -> set[str]:
    """
    Start times (HH:MM) of slots taken by booked appointments.

    An appointment only records when it starts, so a template slot counts as
    taken when its start time equals the appointment's HH:MM. Appointments
    that fall between slot starts do not hide any slot.
    """
    return {scheduled_for.strftime("%H:%M") for scheduled_for in booked_times}


def free_slots(day: DaySchedule, booked_times: Iterable[datetime]) -> List[Slot]:
    if not day.active:
        return []
    taken = occupied_starts(booked_times)
    return [slot for slot in day.slots if slot.start_time not in taken]


class AvailabilityService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.schedules = ScheduleService(session)

    async def booked_times(self, doctor_id: UUID, day: date) -> List[datetime]:
        start_of_day, end_of_day = day_window(day)
        stmt = select(Appointment.scheduled_for).where(
            Appointment.doctor_id == doctor_id,
            Appointment.scheduled_for >= start_of_day,
            Appointment.scheduled_for <= end_of_day,
            Appointment.status == AppointmentStatus.BOOKED.value
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def compute_free_slots(self, doctor_id: UUID, date_str: str | None) -> List[Slot]:
        query_date = parse_query_date(date_str)
        template = await self.schedules.get_template(doctor_id)

        day = template.day(weekday_key(query_date))
        if not day.active:
            return []

        booked = await self.booked_times(doctor_id, query_date)
        return free_slots(day, booked)
