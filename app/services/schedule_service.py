from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.exceptions import NotFoundError
from app.core.logger import logger
from app.db.models import Doctor, WeeklySchedule
from app.schemas.schedule import WeeklyTemplate

class ScheduleService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_weekly_schedule(self, doctor_id: UUID) -> WeeklySchedule | None:
        stmt = select(WeeklySchedule).where(WeeklySchedule.doctor_id == doctor_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_weekly_schedule(self, doctor_id: UUID) -> WeeklySchedule:
        schedule = await self.find_weekly_schedule(doctor_id)
        if not schedule:
            raise NotFoundError("Doctor schedule not found")
        return schedule

    async def get_template(self, doctor_id: UUID) -> WeeklyTemplate:
        schedule = await self.get_weekly_schedule(doctor_id)
        # Days missing from the stored document read back as inactive.
        return WeeklyTemplate.model_validate(schedule.days or {})

    async def upsert_weekly_schedule(self, doctor_id: UUID, template: WeeklyTemplate) -> WeeklySchedule:
        doctor = await self.session.get(Doctor, doctor_id)
        if not doctor:
            raise NotFoundError("Doctor not found")

        days = template.model_dump(by_alias=True)
        schedule = await self.find_weekly_schedule(doctor_id)
        if schedule:
            schedule.days = days
            schedule.updated_at = datetime.utcnow()
        else:
            schedule = WeeklySchedule(doctor_id=doctor_id, days=days)

        self.session.add(schedule)
        await self.session.commit()
        await self.session.refresh(schedule)
        logger.info(f"Weekly schedule saved for doctor {doctor_id}")
        return schedule
