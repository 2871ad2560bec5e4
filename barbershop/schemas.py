# barbershop/schemas.py

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictBool, model_validator
from pydantic.alias_generators import to_camel
from enum import Enum
from datetime import datetime, date
from typing import Annotated, List, Optional

from .errors import InvalidInput
from .timeslots import DATE_PATTERN, TIME_PATTERN, normalize_time, time_to_minutes

PHONE_PATTERN = r"^\+?[\d\s\-\(\)]+$"


def _check_date(value):
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise ValueError("Invalid date format. Use YYYY-MM-DD")
    return date.fromisoformat(value)


def _check_time(value):
    if not isinstance(value, str) or not TIME_PATTERN.match(value):
        raise ValueError("Invalid time format. Use HH:MM")
    return normalize_time(value)


ParsedDate = Annotated[date, BeforeValidator(_check_date)]
ParsedTime = Annotated[str, BeforeValidator(_check_time)]


def parse_date_param(value: Optional[str]) -> date:
    """Query-string dates get the same rules as body fields."""
    if not value:
        raise InvalidInput("Date parameter is required")
    try:
        return _check_date(value)
    except ValueError:
        raise InvalidInput("Invalid date format. Use YYYY-MM-DD")


class CamelModel(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class UserRole(str, Enum):
    barber = "barber"
    client = "client"

class UserPublic(CamelModel):
    id: str
    email: str
    role: UserRole
    full_name: str
    phone: str
    barber_id: Optional[str] = None

class UserCreate(CamelModel):
    email: str
    password: str = Field(min_length=6, max_length=72)
    role: UserRole
    full_name: str = Field(min_length=2)
    phone: str = Field(pattern=PHONE_PATTERN)
    # barber profile
    manual_location: Optional[str] = None
    haircut_duration: Optional[int] = Field(default=None, ge=15, le=120)
    open_time: Optional[ParsedTime] = None
    close_time: Optional[ParsedTime] = None

    @model_validator(mode="after")
    def check_role_fields(self):
        barber_fields = (self.manual_location, self.haircut_duration, self.open_time, self.close_time)
        if self.role == UserRole.client:
            if any(v is not None for v in barber_fields):
                raise ValueError("Barber profile fields are not allowed for clients")
            return self

        if not self.manual_location:
            raise ValueError("manualLocation is required for barbers")
        if self.open_time is None or self.close_time is None:
            raise ValueError("openTime and closeTime are required for barbers")
        if time_to_minutes(self.open_time) >= time_to_minutes(self.close_time):
            raise ValueError("openTime must be before closeTime")
        if self.haircut_duration is None:
            self.haircut_duration = 30
        return self

class BarberScheduleUpdate(CamelModel):
    open_time: ParsedTime
    close_time: ParsedTime
    haircut_duration: int = Field(default=30, ge=15, le=120)

    @model_validator(mode="after")
    def check_hours(self):
        if time_to_minutes(self.open_time) >= time_to_minutes(self.close_time):
            raise ValueError("openTime must be before closeTime")
        return self

class BarberSummary(CamelModel):
    id: str
    full_name: str
    manual_location: str
    haircut_duration: int
    open_time: str
    close_time: str

class BarberPublic(BarberSummary):
    email: str
    phone: str

class BarberList(CamelModel):
    barbers: List[BarberPublic]

class TimeSlotPublic(CamelModel):
    time: str
    formatted: str
    reserved: bool
    unavailable: bool

class ScheduleResponse(CamelModel):
    barber: BarberSummary
    date: date
    is_available: bool
    time_slots: List[TimeSlotPublic]

class ReservationCreate(CamelModel):
    barber_id: str
    date: ParsedDate
    time: ParsedTime

class ReservationPublic(CamelModel):
    id: str
    date: date
    time: str
    barber_name: str
    barber_phone: str

class BookingResponse(CamelModel):
    message: str = "Reservation created successfully"
    reservation: ReservationPublic

class ClientReservation(ReservationPublic):
    barber_location: str

class ClientReservationList(CamelModel):
    reservations: List[ClientReservation]

class BarberReservation(CamelModel):
    id: str
    date: date
    time: str
    client_name: str
    client_phone: str
    client_email: str

class BarberReservationList(CamelModel):
    reservations: List[BarberReservation]

class MessageResponse(CamelModel):
    message: str

class AvailabilityToggle(CamelModel):
    date: ParsedDate
    is_available: StrictBool

class BlackoutToggle(CamelModel):
    date: ParsedDate
    time: ParsedTime
    is_unavailable: StrictBool

class DayAvailabilityPublic(CamelModel):
    barber_id: str
    date: date
    is_available: bool
    updated_at: datetime

class SlotBlackoutPublic(CamelModel):
    barber_id: str
    date: date
    time: str
    is_unavailable: bool
    updated_at: datetime

class AvailabilityUpdated(CamelModel):
    message: str = "Availability updated"
    availability: DayAvailabilityPublic

class BlackoutUpdated(CamelModel):
    message: str = "Unavailable slot updated"
    slot: SlotBlackoutPublic
