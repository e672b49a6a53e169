import os
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("CHECK_TOKEN_SESSION", "false")

import jwt  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlmodel import select  # noqa: E402

from app.api.deps import Principal, Role, get_current_principal  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.db.models import Appointment, AppointmentStatus, Doctor, User, WeeklySchedule  # noqa: E402
from app.db.session import get_session, init_db  # noqa: E402
from app.main import app  # noqa: E402

# 2026-01-05 is a Monday, 2026-01-10 a Saturday.
MONDAY = "2026-01-05"
TUESDAY = "2026-01-06"
SATURDAY = "2026-01-10"

WORKING_DAY = {
    "active": True,
    "slots": [
        {"startTime": "09:00", "endTime": "09:30"},
        {"startTime": "09:30", "endTime": "10:00"},
    ],
}
WEEKDAY_TEMPLATE = {
    "sun": {"active": False, "slots": []},
    "mon": WORKING_DAY,
    "tue": WORKING_DAY,
    "wed": WORKING_DAY,
    "thu": WORKING_DAY,
    "fri": WORKING_DAY,
    # Slots on an inactive day must never be offered.
    "sat": {"active": False, "slots": [{"startTime": "09:00", "endTime": "09:30"}]},
}


def enforce_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def issue_token(claims: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Mint a token the way the identity service does."""
    payload = dict(claims)
    payload["exp"] = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=30))
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'medsync.db'}",
        connect_args={"timeout": 30},
    )
    event.listen(engine.sync_engine, "connect", enforce_foreign_keys)
    await init_db(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


async def create_doctor(session: AsyncSession, name: str = "Dr. Meera Nair", email: str = "meera@clinic.test", specialty: str = "Cardiology") -> UUID:
    doctor = Doctor(name=name, email=email, specialty=specialty)
    session.add(doctor)
    await session.commit()
    return doctor.id


async def create_patient(session: AsyncSession, name: str, email: str) -> UUID:
    user = User(name=name, email=email)
    session.add(user)
    await session.commit()
    return user.id


async def make_appointment(
    session: AsyncSession,
    user_id: UUID,
    doctor_id: UUID,
    scheduled_for: datetime,
    status: AppointmentStatus = AppointmentStatus.PENDING,
) -> UUID:
    appointment = Appointment(
        user_id=user_id,
        doctor_id=doctor_id,
        scheduled_for=scheduled_for,
        status=status.value,
    )
    session.add(appointment)
    await session.commit()
    return appointment.id


async def status_of(session: AsyncSession, appointment_id: UUID) -> str | None:
    result = await session.execute(select(Appointment.status).where(Appointment.id == appointment_id))
    return result.scalar()


@pytest_asyncio.fixture
async def doctor_id(session):
    return await create_doctor(session)


@pytest_asyncio.fixture
async def patient_id(session):
    return await create_patient(session, "Asha Rao", "asha@example.test")


@pytest_asyncio.fixture
async def second_patient_id(session):
    return await create_patient(session, "Vikram Iyer", "vikram@example.test")


@pytest_asyncio.fixture
async def weekly_schedule(session, doctor_id):
    schedule = WeeklySchedule(doctor_id=doctor_id, days=WEEKDAY_TEMPLATE)
    session.add(schedule)
    await session.commit()
    return schedule.id


class Caller:
    """Stands in for the identity service during HTTP tests."""

    def __init__(self):
        self.principal = None

    def act_as(self, principal_id: UUID, role: Role) -> None:
        self.principal = Principal(id=principal_id, role=role)


@pytest_asyncio.fixture
async def caller():
    return Caller()


@pytest_asyncio.fixture
async def client(session_factory, caller):
    async def override_session():
        async with session_factory() as session:
            yield session

    async def override_principal():
        return caller.principal

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_current_principal] = override_principal
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
