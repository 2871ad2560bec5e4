# barbershop/routers/reservations_routes.py

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from barbershop import booking
from barbershop.auth import get_current_user
from barbershop.deps import get_now, get_store, require_role
from barbershop.schemas import (
    BookingResponse,
    ClientReservation,
    ClientReservationList,
    MessageResponse,
    ReservationCreate,
    ReservationPublic,
    parse_date_param,
)
from barbershop.store import Store

router = APIRouter(
    prefix="/reservations",
    tags=["reservations"],
)


@router.post("", response_model=BookingResponse, status_code=201)
def create_reservation(
    payload: ReservationCreate,
    store: Store = Depends(get_store),
    current_user: dict = Depends(get_current_user),
    now: datetime = Depends(get_now),
):
    require_role(current_user, "client")

    reservation = booking.create_reservation(
        store,
        client_id=current_user["id"],
        barber_id=payload.barber_id,
        on_date=payload.date,
        time=payload.time,
        now=now,
    )

    barber = store.get_barber(reservation.barber_id)
    barber_user = store.get_user(barber.user_id) if barber else None
    return BookingResponse(
        reservation=ReservationPublic(
            id=reservation.id,
            date=reservation.date,
            time=reservation.time,
            barber_name=barber_user.full_name if barber_user else "Unknown",
            barber_phone=barber_user.phone if barber_user else "Unknown",
        )
    )


@router.get("", response_model=ClientReservationList)
def list_my_reservations(
    on_date: Optional[str] = Query(default=None, alias="date"),
    store: Store = Depends(get_store),
    current_user: dict = Depends(get_current_user),
):
    day = parse_date_param(on_date) if on_date is not None else None

    items = []
    for r in store.list_reservations(client_id=current_user["id"], on_date=day):
        barber = store.get_barber(r.barber_id)
        barber_user = store.get_user(barber.user_id) if barber else None
        items.append(ClientReservation(
            id=r.id,
            date=r.date,
            time=r.time,
            barber_name=barber_user.full_name if barber_user else "Unknown",
            barber_phone=barber_user.phone if barber_user else "Unknown",
            barber_location=barber.manual_location if barber else "Unknown",
        ))
    return ClientReservationList(reservations=items)


@router.delete("/{reservation_id}", response_model=MessageResponse)
def cancel_reservation(
    reservation_id: str,
    store: Store = Depends(get_store),
    current_user: dict = Depends(get_current_user),
    now: datetime = Depends(get_now),
):
    require_role(current_user, "client")
    booking.cancel_reservation(store, reservation_id, current_user["id"], now)
    return MessageResponse(message="Reservation cancelled successfully")
