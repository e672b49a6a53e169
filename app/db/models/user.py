from sqlmodel import SQLModel, Field, Relationship
from typing import List, TYPE_CHECKING
from datetime import datetime
from uuid import UUID, uuid4
from sqlalchemy import Column, DateTime

if TYPE_CHECKING:
    from .appointment import Appointment

class User(SQLModel, table=True):
    """A patient account. Credentials live with the identity service."""
    __tablename__ = "users"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    email: str = Field(unique=True, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_column=Column(DateTime, nullable=False))

    appointments: List["Appointment"] = Relationship(back_populates="user")
