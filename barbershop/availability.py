# barbershop/availability.py
"""
Day-level and slot-level availability overrides, and the schedule views
built on top of them.

A missing DayAvailability row means the barber works that day. When the day
is switched off, every slot reads ``unavailable=True, reserved=False`` in
both views; reservations themselves are left alone.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional

from .errors import NotFound, PastDateTime
from .models import Barber, DayAvailability, SlotBlackout
from .store import Store
from .timeslots import (
    TimeSlot,
    generate_all_time_slots,
    generate_time_slots,
    is_date_in_past,
    mark_day_unavailable,
)

logger = logging.getLogger(__name__)


@dataclass
class DaySchedule:
    barber: Barber
    date: date
    is_available: bool
    time_slots: List[TimeSlot]


def is_day_available(record: Optional[DayAvailability]) -> bool:
    return True if record is None else record.is_available


def unavailable_times(blackouts: Iterable[SlotBlackout]) -> List[str]:
    return [b.time for b in blackouts if b.is_unavailable]


def build_day_schedule(store: Store, barber: Barber, on_date: date, bookable_only: bool) -> DaySchedule:
    reserved_times = [r.time for r in store.list_reservations(barber_id=barber.id, on_date=on_date)]
    blackout_times = unavailable_times(store.list_blackouts(barber.id, on_date))
    is_available = is_day_available(store.get_day_availability(barber.id, on_date))

    args = (barber.open_time, barber.close_time, barber.haircut_duration, reserved_times, blackout_times)
    if bookable_only:
        # the day-level veto leaves nothing bookable
        slots = generate_time_slots(*args) if is_available else []
    else:
        slots = generate_all_time_slots(*args)
        if not is_available:
            slots = mark_day_unavailable(slots)

    return DaySchedule(barber=barber, date=on_date, is_available=is_available, time_slots=slots)


def _get_barber(store: Store, barber_id: str) -> Barber:
    barber = store.get_barber(barber_id)
    if barber is None:
        raise NotFound("Barber not found")
    return barber


def client_schedule(store: Store, barber_id: str, on_date: date, now: datetime) -> DaySchedule:
    """Bookable slots for clients; past dates are refused."""
    if is_date_in_past(on_date, now.date()):
        raise PastDateTime("Cannot view schedule for past dates")
    barber = _get_barber(store, barber_id)
    return build_day_schedule(store, barber, on_date, bookable_only=True)


def dashboard_schedule(store: Store, barber_id: str, on_date: date) -> DaySchedule:
    """Every slot with its status, for the barber's own dashboard."""
    barber = _get_barber(store, barber_id)
    return build_day_schedule(store, barber, on_date, bookable_only=False)


def set_day_availability(store: Store, barber: Barber, on_date: date, is_available: bool) -> DayAvailability:
    record = store.set_day_availability(barber.id, on_date, is_available)
    logger.info(
        "Barber %s marked %s as %s", barber.id, on_date, "available" if is_available else "unavailable"
    )
    return record


def set_slot_blackout(
    store: Store, barber: Barber, on_date: date, time: str, is_unavailable: bool
) -> SlotBlackout:
    record = store.set_slot_blackout(barber.id, on_date, time, is_unavailable)
    logger.info(
        "Barber %s slot %s %s is now %s",
        barber.id, on_date, time, "blacked out" if is_unavailable else "open",
    )
    return record
