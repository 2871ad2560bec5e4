# barbershop/routers/barbers_routes.py

from typing import Optional

from fastapi import APIRouter, Depends, Query

from barbershop import availability, booking
from barbershop.auth import get_current_barber
from barbershop.deps import get_now, get_store
from barbershop.models import Barber
from barbershop.schemas import (
    AvailabilityToggle,
    AvailabilityUpdated,
    BarberList,
    BarberPublic,
    BarberReservation,
    BarberReservationList,
    BarberScheduleUpdate,
    BarberSummary,
    BlackoutToggle,
    BlackoutUpdated,
    DayAvailabilityPublic,
    MessageResponse,
    ScheduleResponse,
    SlotBlackoutPublic,
    TimeSlotPublic,
    parse_date_param,
)
from barbershop.store import Store

router = APIRouter(
    prefix="/barbers",
    tags=["barbers"],
)


def _barber_public(barber: Barber, store: Store) -> BarberPublic:
    user = store.get_user(barber.user_id)
    return BarberPublic(
        id=barber.id,
        full_name=user.full_name if user else "Unknown",
        email=user.email if user else "",
        phone=user.phone if user else "",
        manual_location=barber.manual_location,
        haircut_duration=barber.haircut_duration,
        open_time=barber.open_time,
        close_time=barber.close_time,
    )


def _schedule_response(schedule: availability.DaySchedule, store: Store) -> ScheduleResponse:
    profile = _barber_public(schedule.barber, store)
    return ScheduleResponse(
        barber=BarberSummary(**profile.model_dump(include=set(BarberSummary.model_fields))),
        date=schedule.date,
        is_available=schedule.is_available,
        time_slots=[
            TimeSlotPublic(
                time=slot.time,
                formatted=slot.formatted,
                reserved=slot.reserved,
                unavailable=slot.unavailable,
            )
            for slot in schedule.time_slots
        ],
    )


@router.get("", response_model=BarberList)
def search_barbers(
    search: Optional[str] = None,
    location: Optional[str] = None,
    store: Store = Depends(get_store),
):
    barbers = [_barber_public(b, store) for b in store.list_barbers()]

    if search:
        barbers = [b for b in barbers if search.lower() in b.full_name.lower()]
    if location:
        barbers = [b for b in barbers if location.lower() in b.manual_location.lower()]

    barbers.sort(key=lambda b: b.full_name.lower())
    return BarberList(barbers=barbers)


@router.get("/me/schedule", response_model=BarberPublic)
def get_my_schedule(
    barber: Barber = Depends(get_current_barber),
    store: Store = Depends(get_store),
):
    return _barber_public(barber, store)


@router.put("/me/schedule", response_model=BarberPublic)
def update_my_schedule(
    schedule: BarberScheduleUpdate,
    barber: Barber = Depends(get_current_barber),
    store: Store = Depends(get_store),
):
    updated = store.update_barber_schedule(
        barber.id, schedule.open_time, schedule.close_time, schedule.haircut_duration
    )
    return _barber_public(updated, store)


@router.get("/me/dashboard-schedule", response_model=ScheduleResponse)
def my_dashboard_schedule(
    on_date: Optional[str] = Query(default=None, alias="date"),
    barber: Barber = Depends(get_current_barber),
    store: Store = Depends(get_store),
):
    schedule = availability.dashboard_schedule(store, barber.id, parse_date_param(on_date))
    return _schedule_response(schedule, store)


@router.get("/me/reservations", response_model=BarberReservationList)
def list_my_reservations(
    on_date: Optional[str] = Query(default=None, alias="date"),
    barber: Barber = Depends(get_current_barber),
    store: Store = Depends(get_store),
):
    day = parse_date_param(on_date) if on_date is not None else None

    items = []
    for r in store.list_reservations(barber_id=barber.id, on_date=day):
        client = store.get_user(r.client_id)
        items.append(BarberReservation(
            id=r.id,
            date=r.date,
            time=r.time,
            client_name=client.full_name if client else "Unknown",
            client_phone=client.phone if client else "Unknown",
            client_email=client.email if client else "Unknown",
        ))
    return BarberReservationList(reservations=items)


@router.delete("/me/reservations/{reservation_id}", response_model=MessageResponse)
def remove_reservation(
    reservation_id: str,
    barber: Barber = Depends(get_current_barber),
    store: Store = Depends(get_store),
):
    booking.remove_reservation(store, reservation_id, barber)
    return MessageResponse(message="Reservation removed successfully")


@router.patch("/me/availability", response_model=AvailabilityUpdated)
def toggle_day_availability(
    toggle: AvailabilityToggle,
    barber: Barber = Depends(get_current_barber),
    store: Store = Depends(get_store),
):
    record = availability.set_day_availability(store, barber, toggle.date, toggle.is_available)
    return AvailabilityUpdated(
        availability=DayAvailabilityPublic(
            barber_id=record.barber_id,
            date=record.date,
            is_available=record.is_available,
            updated_at=record.updated_at,
        )
    )


@router.patch("/me/unavailable-slots", response_model=BlackoutUpdated)
def toggle_slot_blackout(
    toggle: BlackoutToggle,
    barber: Barber = Depends(get_current_barber),
    store: Store = Depends(get_store),
):
    record = availability.set_slot_blackout(store, barber, toggle.date, toggle.time, toggle.is_unavailable)
    return BlackoutUpdated(
        slot=SlotBlackoutPublic(
            barber_id=record.barber_id,
            date=record.date,
            time=record.time,
            is_unavailable=record.is_unavailable,
            updated_at=record.updated_at,
        )
    )


@router.get("/{barber_id}/schedule", response_model=ScheduleResponse)
def barber_schedule(
    barber_id: str,
    on_date: Optional[str] = Query(default=None, alias="date"),
    store: Store = Depends(get_store),
    now=Depends(get_now),
):
    schedule = availability.client_schedule(store, barber_id, parse_date_param(on_date), now)
    return _schedule_response(schedule, store)
