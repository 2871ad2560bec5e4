# barbershop/routers/auth_routes.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm

from barbershop.auth import verify_password, create_access_token
from barbershop.config import Settings
from barbershop.deps import get_settings, get_store
from barbershop.schemas import Token
from barbershop.store import Store

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    # Swagger OAuth2 "password" flow uses "username" field
    email = form_data.username
    password = form_data.password

    user = store.get_user_by_email(email)

    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login for %s", email)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": user.id, "role": user.role}, settings)
    return {"access_token": token, "token_type": "bearer"}
