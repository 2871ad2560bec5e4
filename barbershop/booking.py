# barbershop/booking.py
"""
Reservation rules.

A reservation is created ``booked`` and can only move to ``canceled``.
Creation checks run in a fixed order and the first failure wins:

1. the date is not before today,
2. on today, the time is not before now,
3. the barber exists,
4. the time lies in [open_time, close_time),
5. the barber slot is free,
6. the client has nothing else at that date/time.

Syntax of date/time is enforced earlier by the request models. Checks 5 and
6 run inside ``Store.create_reservation`` together with the insert.
"""

import logging
from datetime import date, datetime

from .errors import NotFound, OutsideWorkingHours, PastDateTime, PermissionDenied
from .models import Barber, Reservation
from .store import Store
from .timeslots import is_date_in_past, is_time_in_past, time_to_minutes

logger = logging.getLogger(__name__)


def within_working_hours(barber: Barber, time: str) -> bool:
    minutes = time_to_minutes(time)
    return time_to_minutes(barber.open_time) <= minutes < time_to_minutes(barber.close_time)


def create_reservation(
    store: Store,
    client_id: str,
    barber_id: str,
    on_date: date,
    time: str,
    now: datetime,
) -> Reservation:
    today = now.date()
    if is_date_in_past(on_date, today):
        raise PastDateTime("Cannot book appointments in the past")
    if on_date == today and is_time_in_past(time, now):
        raise PastDateTime("Cannot book appointments in the past")

    barber = store.get_barber(barber_id)
    if barber is None:
        raise NotFound("Barber not found")

    if not within_working_hours(barber, time):
        raise OutsideWorkingHours(
            f"Barber is only available between {barber.open_time} and {barber.close_time}"
        )

    reservation = store.create_reservation(
        Reservation(client_id=client_id, barber_id=barber_id, date=on_date, time=time)
    )
    logger.info(
        "Reservation %s booked: barber=%s client=%s %s %s",
        reservation.id, barber_id, client_id, on_date, time,
    )
    return reservation


def cancel_reservation(store: Store, reservation_id: str, client_id: str, now: datetime) -> Reservation:
    """Client cancellation; only the owner, and never retroactively."""
    reservation = store.get_reservation(reservation_id)
    if reservation is None or not reservation.active:
        raise NotFound("Reservation not found")
    if reservation.client_id != client_id:
        raise PermissionDenied("You can only cancel your own reservations")
    if is_date_in_past(reservation.date, now.date()):
        raise PastDateTime("Cannot cancel past reservations")

    canceled = store.cancel_reservation(reservation_id)
    logger.info("Reservation %s canceled by client %s", reservation_id, client_id)
    return canceled


def remove_reservation(store: Store, reservation_id: str, barber: Barber) -> Reservation:
    """Barber-side removal from their own book."""
    reservation = store.get_reservation(reservation_id)
    if reservation is None or not reservation.active:
        raise NotFound("Reservation not found")
    if reservation.barber_id != barber.id:
        raise PermissionDenied("Reservation belongs to another barber")

    removed = store.cancel_reservation(reservation_id)
    logger.info("Reservation %s removed by barber %s", reservation_id, barber.id)
    return removed
