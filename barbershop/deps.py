# barbershop/deps.py

from datetime import datetime

from fastapi import Request

from .config import Settings
from .errors import PermissionDenied
from .store import Store


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_now() -> datetime:
    # Local wall-clock time; overridden in tests to pin "today"
    return datetime.now()


def require_role(user: dict, role: str):
    if user["role"] != role:
        raise PermissionDenied("Insufficient permissions")
