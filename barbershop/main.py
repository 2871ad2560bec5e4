# barbershop/main.py

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .auth import hash_password
from .config import Settings, settings as default_settings
from .data import DEMO_PASSWORD, MemoryStore, seed_demo_data
from .db import SqlStore, build_engine, create_db_and_tables
from .errors import BookingError
from .routers import auth_routes, barbers_routes, reservations_routes, users_routes
from .store import Store

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_store(settings: Settings) -> Store:
    if settings.database_url:
        engine = build_engine(settings.database_url)
        create_db_and_tables(engine)
        logger.info("Using database store")
        return SqlStore(engine)

    logger.info("DATABASE_URL not set, using in-memory demo store")
    store = MemoryStore()
    if settings.seed_demo_data:
        seed_demo_data(store, hash_password(DEMO_PASSWORD))
    return store


async def booking_error_handler(request: Request, exc: BookingError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def persistence_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Persistence failure on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(store: Optional[Store] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(title="Barbershop Booking API")
    app.state.settings = settings
    app.state.store = store if store is not None else build_store(settings)

    app.add_exception_handler(BookingError, booking_error_handler)
    app.add_exception_handler(SQLAlchemyError, persistence_error_handler)

    app.include_router(auth_routes.router)
    app.include_router(users_routes.router)
    app.include_router(barbers_routes.router)
    app.include_router(reservations_routes.router)

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app


def run() -> None:
    """Console entry point; the app is built by uvicorn through the factory."""
    uvicorn.run(
        "barbershop.main:create_app",
        factory=True,
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )
