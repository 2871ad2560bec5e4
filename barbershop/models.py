# barbershop/models.py

from typing import Optional
from datetime import datetime, date as Date
from uuid import uuid4

from sqlalchemy import Index, UniqueConstraint, text
from sqlmodel import SQLModel, Field

BOOKED = "booked"
CANCELED = "canceled"

_ACTIVE = text(f"status = '{BOOKED}'")


def new_id() -> str:
    return str(uuid4())


class User(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    role: str  # barber or client
    full_name: str
    phone: str
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class Barber(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(foreign_key="user.id", unique=True)
    manual_location: str
    haircut_duration: int = 30  # minutes
    open_time: str  # HH:MM
    close_time: str
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class Reservation(SQLModel, table=True):
    # Only booked rows take part in uniqueness, so a canceled slot can be rebooked
    __table_args__ = (
        Index(
            "uq_reservation_barber_slot",
            "barber_id", "date", "time",
            unique=True,
            sqlite_where=_ACTIVE,
            postgresql_where=_ACTIVE,
        ),
        Index(
            "uq_reservation_client_slot",
            "client_id", "date", "time",
            unique=True,
            sqlite_where=_ACTIVE,
            postgresql_where=_ACTIVE,
        ),
    )

    id: str = Field(default_factory=new_id, primary_key=True)
    client_id: str = Field(foreign_key="user.id", index=True)
    barber_id: str = Field(foreign_key="barber.id", index=True)
    date: Date = Field(index=True)
    time: str  # HH:MM
    status: str = BOOKED
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def active(self) -> bool:
        return self.status == BOOKED


class DayAvailability(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("barber_id", "date", name="uq_day_availability"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    barber_id: str = Field(foreign_key="barber.id", index=True)
    date: Date
    is_available: bool = True
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class SlotBlackout(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("barber_id", "date", "time", name="uq_slot_blackout"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    barber_id: str = Field(foreign_key="barber.id", index=True)
    date: Date
    time: str  # HH:MM
    is_unavailable: bool = True
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
