from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.exceptions import NotFoundError
from app.db.models import Doctor

class DoctorService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_doctor(self, doctor_id: UUID) -> Doctor:
        doctor = await self.session.get(Doctor, doctor_id)
        if not doctor:
            raise NotFoundError("Doctor not found")
        return doctor

    async def get_doctors(self, specialty: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[Doctor]:
        query = select(Doctor)
        if specialty and specialty != "All":
            query = query.where(Doctor.specialty == specialty)
        query = query.order_by(Doctor.name).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())
