# barbershop/routers/users_routes.py

import logging

from fastapi import APIRouter, Depends

from barbershop.auth import get_current_user, hash_password
from barbershop.deps import get_store
from barbershop.models import Barber, User
from barbershop.schemas import UserCreate, UserPublic, UserRole
from barbershop.store import Store

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["users"],
)


def _public_user(user: User, store: Store) -> UserPublic:
    barber = store.get_barber_by_user(user.id) if user.role == UserRole.barber.value else None
    return UserPublic(
        id=user.id,
        email=user.email,
        role=user.role,
        full_name=user.full_name,
        phone=user.phone,
        barber_id=barber.id if barber else None,
    )


@router.get("/me", response_model=UserPublic)
def me(
    current_user: dict = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    user = store.get_user(current_user["id"])
    return _public_user(user, store)


@router.post("/users", status_code=201, response_model=UserPublic)
def create_user(
    user: UserCreate,
    store: Store = Depends(get_store),
):
    db_user = User(
        email=user.email,
        password_hash=hash_password(user.password),
        role=user.role.value,
        full_name=user.full_name,
        phone=user.phone,
    )

    # Barbers get their profile in the same insert
    barber = None
    if user.role == UserRole.barber:
        barber = Barber(
            user_id=db_user.id,
            manual_location=user.manual_location,
            haircut_duration=user.haircut_duration,
            open_time=user.open_time,
            close_time=user.close_time,
        )

    db_user = store.create_user(db_user, barber)
    logger.info("Registered %s %s", db_user.role, db_user.id)

    return _public_user(db_user, store)
