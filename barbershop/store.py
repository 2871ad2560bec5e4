# barbershop/store.py
"""
Persistence contract shared by the SQL store (``db.SqlStore``) and the
in-memory store (``data.MemoryStore``).

Both implementations must give the same guarantees:

* ``create_reservation`` checks the barber slot, then the client slot, and
  inserts, as one indivisible step. It raises ``SlotAlreadyBooked`` or
  ``ClientAlreadyBooked`` instead of inserting a second active row.
* ``set_day_availability`` / ``set_slot_blackout`` are upserts keyed on
  (barber, date[, time]) and never leave two rows for one key.
* Lookups only return active (booked) reservations unless asked otherwise.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from .models import Barber, DayAvailability, Reservation, SlotBlackout, User


class Store(ABC):

    # users / barbers

    @abstractmethod
    def create_user(self, user: User, barber: Optional[Barber] = None) -> User:
        """Insert a user (and its barber profile). Duplicate email -> AlreadyExists."""

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    def get_barber(self, barber_id: str) -> Optional[Barber]:
        ...

    @abstractmethod
    def get_barber_by_user(self, user_id: str) -> Optional[Barber]:
        ...

    @abstractmethod
    def list_barbers(self) -> List[Barber]:
        ...

    @abstractmethod
    def update_barber_schedule(
        self, barber_id: str, open_time: str, close_time: str, haircut_duration: int
    ) -> Barber:
        ...

    # reservations

    @abstractmethod
    def get_reservation(self, reservation_id: str) -> Optional[Reservation]:
        ...

    @abstractmethod
    def list_reservations(
        self,
        barber_id: Optional[str] = None,
        client_id: Optional[str] = None,
        on_date: Optional[date] = None,
        include_canceled: bool = False,
    ) -> List[Reservation]:
        """Reservations matching every given filter, ordered by date then time."""

    @abstractmethod
    def create_reservation(self, reservation: Reservation) -> Reservation:
        ...

    @abstractmethod
    def cancel_reservation(self, reservation_id: str) -> Reservation:
        ...

    # availability overrides

    @abstractmethod
    def get_day_availability(self, barber_id: str, on_date: date) -> Optional[DayAvailability]:
        ...

    @abstractmethod
    def set_day_availability(self, barber_id: str, on_date: date, is_available: bool) -> DayAvailability:
        ...

    @abstractmethod
    def list_blackouts(self, barber_id: str, on_date: date) -> List[SlotBlackout]:
        ...

    @abstractmethod
    def set_slot_blackout(
        self, barber_id: str, on_date: date, time: str, is_unavailable: bool
    ) -> SlotBlackout:
        ...
