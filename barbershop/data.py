# barbershop/data.py

import logging
import threading
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from .errors import AlreadyExists, ClientAlreadyBooked, NotFound, SlotAlreadyBooked
from .models import BOOKED, CANCELED, Barber, DayAvailability, Reservation, SlotBlackout, User
from .store import Store

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "barbershop-demo"

DEMO_BARBERS = [
    {
        "email": "john@barbershop.com",
        "full_name": "John Smith",
        "phone": "555-0101",
        "manual_location": "Downtown Barbershop",
        "haircut_duration": 30,
        "open_time": "09:00",
        "close_time": "18:00",
    },
    {
        "email": "mike@barbershop.com",
        "full_name": "Mike Johnson",
        "phone": "555-0102",
        "manual_location": "Uptown Cuts",
        "haircut_duration": 45,
        "open_time": "08:00",
        "close_time": "19:00",
    },
    {
        "email": "david@barbershop.com",
        "full_name": "David Wilson",
        "phone": "555-0103",
        "manual_location": "Downtown Barbershop",
        "haircut_duration": 30,
        "open_time": "10:00",
        "close_time": "17:00",
    },
]

DEMO_CLIENT = {
    "email": "client@example.com",
    "full_name": "Test Client",
    "phone": "1234567890",
}


class MemoryStore(Store):
    """Process-local store used when no database is configured.

    Every write happens under one lock, which gives the same
    check-then-insert atomicity the SQL store gets from its unique indexes.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self.users: Dict[str, User] = {}
        self.barbers: Dict[str, Barber] = {}
        self.reservations: Dict[str, Reservation] = {}
        self.day_availability: Dict[Tuple[str, date], DayAvailability] = {}
        self.blackouts: Dict[Tuple[str, date, str], SlotBlackout] = {}
        self._next_override_id = 1

    # users / barbers

    def create_user(self, user: User, barber: Optional[Barber] = None) -> User:
        with self._lock:
            if self.get_user_by_email(user.email) is not None:
                raise AlreadyExists("Email already registered")
            self.users[user.id] = user
            if barber is not None:
                barber.user_id = user.id
                self.barbers[barber.id] = barber
            return user

    def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        for user in list(self.users.values()):
            if user.email == email:
                return user
        return None

    def get_barber(self, barber_id: str) -> Optional[Barber]:
        return self.barbers.get(barber_id)

    def get_barber_by_user(self, user_id: str) -> Optional[Barber]:
        for barber in list(self.barbers.values()):
            if barber.user_id == user_id:
                return barber
        return None

    def list_barbers(self) -> List[Barber]:
        return list(self.barbers.values())

    def update_barber_schedule(
        self, barber_id: str, open_time: str, close_time: str, haircut_duration: int
    ) -> Barber:
        with self._lock:
            barber = self.barbers.get(barber_id)
            if barber is None:
                raise NotFound("Barber not found")
            barber.open_time = open_time
            barber.close_time = close_time
            barber.haircut_duration = haircut_duration
            barber.updated_at = datetime.now()
            return barber

    # reservations

    def get_reservation(self, reservation_id: str) -> Optional[Reservation]:
        return self.reservations.get(reservation_id)

    def list_reservations(
        self,
        barber_id: Optional[str] = None,
        client_id: Optional[str] = None,
        on_date: Optional[date] = None,
        include_canceled: bool = False,
    ) -> List[Reservation]:
        found = []
        for r in list(self.reservations.values()):
            if barber_id is not None and r.barber_id != barber_id:
                continue
            if client_id is not None and r.client_id != client_id:
                continue
            if on_date is not None and r.date != on_date:
                continue
            if not include_canceled and r.status != BOOKED:
                continue
            found.append(r)
        found.sort(key=lambda r: (r.date, r.time))
        return found

    def create_reservation(self, reservation: Reservation) -> Reservation:
        with self._lock:
            for r in self.reservations.values():
                if r.status != BOOKED or r.date != reservation.date or r.time != reservation.time:
                    continue
                if r.barber_id == reservation.barber_id:
                    raise SlotAlreadyBooked()
            for r in self.reservations.values():
                if r.status != BOOKED or r.date != reservation.date or r.time != reservation.time:
                    continue
                if r.client_id == reservation.client_id:
                    raise ClientAlreadyBooked()

            self.reservations[reservation.id] = reservation
            return reservation

    def cancel_reservation(self, reservation_id: str) -> Reservation:
        with self._lock:
            reservation = self.reservations.get(reservation_id)
            if reservation is None or reservation.status != BOOKED:
                raise NotFound("Reservation not found")
            reservation.status = CANCELED
            reservation.updated_at = datetime.now()
            return reservation

    # availability overrides

    def get_day_availability(self, barber_id: str, on_date: date) -> Optional[DayAvailability]:
        return self.day_availability.get((barber_id, on_date))

    def set_day_availability(self, barber_id: str, on_date: date, is_available: bool) -> DayAvailability:
        with self._lock:
            row = self.day_availability.get((barber_id, on_date))
            if row is None:
                row = DayAvailability(
                    id=self._take_id(), barber_id=barber_id, date=on_date, is_available=is_available
                )
                self.day_availability[(barber_id, on_date)] = row
            else:
                row.is_available = is_available
                row.updated_at = datetime.now()
            return row

    def list_blackouts(self, barber_id: str, on_date: date) -> List[SlotBlackout]:
        rows = [
            row for (b_id, d, _), row in list(self.blackouts.items())
            if b_id == barber_id and d == on_date
        ]
        return sorted(rows, key=lambda row: row.time)

    def set_slot_blackout(
        self, barber_id: str, on_date: date, time: str, is_unavailable: bool
    ) -> SlotBlackout:
        with self._lock:
            key = (barber_id, on_date, time)
            row = self.blackouts.get(key)
            if row is None:
                row = SlotBlackout(
                    id=self._take_id(),
                    barber_id=barber_id,
                    date=on_date,
                    time=time,
                    is_unavailable=is_unavailable,
                )
                self.blackouts[key] = row
            else:
                row.is_unavailable = is_unavailable
                row.updated_at = datetime.now()
            return row

    def _take_id(self) -> int:
        value = self._next_override_id
        self._next_override_id += 1
        return value


def seed_demo_data(store: Store, password_hash: str) -> None:
    """Demo barbers plus one client, all sharing DEMO_PASSWORD."""
    for entry in DEMO_BARBERS:
        if store.get_user_by_email(entry["email"]) is not None:
            continue
        user = User(
            email=entry["email"],
            password_hash=password_hash,
            role="barber",
            full_name=entry["full_name"],
            phone=entry["phone"],
        )
        barber = Barber(
            user_id=user.id,
            manual_location=entry["manual_location"],
            haircut_duration=entry["haircut_duration"],
            open_time=entry["open_time"],
            close_time=entry["close_time"],
        )
        store.create_user(user, barber)

    if store.get_user_by_email(DEMO_CLIENT["email"]) is None:
        store.create_user(User(password_hash=password_hash, role="client", **DEMO_CLIENT))

    logger.info("Seeded demo data: %d barbers", len(DEMO_BARBERS))
