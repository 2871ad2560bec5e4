# barbershop/db.py

import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine, select

from .errors import AlreadyExists, ClientAlreadyBooked, NotFound, SlotAlreadyBooked
from .models import BOOKED, CANCELED, Barber, DayAvailability, Reservation, SlotBlackout, User
from .store import Store

logger = logging.getLogger(__name__)

# PostgreSQL reports the index name, SQLite the column list
_SLOT_CONFLICTS = (
    (("uq_reservation_barber_slot", "reservation.barber_id, reservation.date, reservation.time"), SlotAlreadyBooked),
    (("uq_reservation_client_slot", "reservation.client_id, reservation.date, reservation.time"), ClientAlreadyBooked),
)


def slot_conflict_for(exc: IntegrityError):
    """Conflict error for a violated reservation slot index, or None."""
    message = str(exc.orig)
    for markers, error in _SLOT_CONFLICTS:
        if any(marker in message for marker in markers):
            return error
    return None


def build_engine(database_url: str, echo: bool = False):
    connect_args = {}
    kwargs = {}
    if database_url.startswith("sqlite"):
        # required for SQLite + FastAPI's threadpool
        connect_args["check_same_thread"] = False
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every session sees an empty db
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(database_url, echo=echo, connect_args=connect_args, **kwargs)


def create_db_and_tables(engine) -> None:
    SQLModel.metadata.create_all(engine)


class SqlStore(Store):
    """Store backed by any SQLAlchemy database; one session per operation."""

    def __init__(self, engine):
        self.engine = engine

    def _session(self) -> Session:
        return Session(self.engine, expire_on_commit=False)

    # users / barbers

    def create_user(self, user: User, barber: Optional[Barber] = None) -> User:
        with self._session() as session:
            existing = session.exec(select(User).where(User.email == user.email)).first()
            if existing is not None:
                raise AlreadyExists("Email already registered")

            session.add(user)
            if barber is not None:
                barber.user_id = user.id
                session.add(barber)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                raise AlreadyExists("Email already registered")

            session.refresh(user)
            return user

    def get_user(self, user_id: str) -> Optional[User]:
        with self._session() as session:
            return session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._session() as session:
            return session.exec(select(User).where(User.email == email)).first()

    def get_barber(self, barber_id: str) -> Optional[Barber]:
        with self._session() as session:
            return session.get(Barber, barber_id)

    def get_barber_by_user(self, user_id: str) -> Optional[Barber]:
        with self._session() as session:
            return session.exec(select(Barber).where(Barber.user_id == user_id)).first()

    def list_barbers(self) -> List[Barber]:
        with self._session() as session:
            return list(session.exec(select(Barber)).all())

    def update_barber_schedule(
        self, barber_id: str, open_time: str, close_time: str, haircut_duration: int
    ) -> Barber:
        with self._session() as session:
            barber = session.get(Barber, barber_id)
            if barber is None:
                raise NotFound("Barber not found")
            barber.open_time = open_time
            barber.close_time = close_time
            barber.haircut_duration = haircut_duration
            barber.updated_at = datetime.now()
            session.add(barber)
            session.commit()
            session.refresh(barber)
            return barber

    # reservations

    def get_reservation(self, reservation_id: str) -> Optional[Reservation]:
        with self._session() as session:
            return session.get(Reservation, reservation_id)

    def list_reservations(
        self,
        barber_id: Optional[str] = None,
        client_id: Optional[str] = None,
        on_date: Optional[date] = None,
        include_canceled: bool = False,
    ) -> List[Reservation]:
        stmt = select(Reservation)
        if barber_id is not None:
            stmt = stmt.where(Reservation.barber_id == barber_id)
        if client_id is not None:
            stmt = stmt.where(Reservation.client_id == client_id)
        if on_date is not None:
            stmt = stmt.where(Reservation.date == on_date)
        if not include_canceled:
            stmt = stmt.where(Reservation.status == BOOKED)
        stmt = stmt.order_by(Reservation.date, Reservation.time)

        with self._session() as session:
            return list(session.exec(stmt).all())

    def _check_conflicts(self, session: Session, reservation: Reservation) -> None:
        # Friendly error messages; the partial unique indexes are the real guard
        taken = session.exec(
            select(Reservation)
            .where(Reservation.barber_id == reservation.barber_id)
            .where(Reservation.date == reservation.date)
            .where(Reservation.time == reservation.time)
            .where(Reservation.status == BOOKED)
        ).first()
        if taken is not None:
            raise SlotAlreadyBooked()

        own = session.exec(
            select(Reservation)
            .where(Reservation.client_id == reservation.client_id)
            .where(Reservation.date == reservation.date)
            .where(Reservation.time == reservation.time)
            .where(Reservation.status == BOOKED)
        ).first()
        if own is not None:
            raise ClientAlreadyBooked()

    def create_reservation(self, reservation: Reservation) -> Reservation:
        with self._session() as session:
            self._check_conflicts(session, reservation)

            session.add(reservation)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                conflict = slot_conflict_for(exc)
                if conflict is None:
                    raise
                logger.info("Reservation insert lost a race: %s", exc.orig)
                raise conflict()

            session.refresh(reservation)
            return reservation

    def cancel_reservation(self, reservation_id: str) -> Reservation:
        with self._session() as session:
            reservation = session.get(Reservation, reservation_id)
            if reservation is None or reservation.status != BOOKED:
                raise NotFound("Reservation not found")
            reservation.status = CANCELED
            reservation.updated_at = datetime.now()
            session.add(reservation)
            session.commit()
            session.refresh(reservation)
            return reservation

    # availability overrides

    def get_day_availability(self, barber_id: str, on_date: date) -> Optional[DayAvailability]:
        with self._session() as session:
            return session.exec(
                select(DayAvailability)
                .where(DayAvailability.barber_id == barber_id)
                .where(DayAvailability.date == on_date)
            ).first()

    def set_day_availability(self, barber_id: str, on_date: date, is_available: bool) -> DayAvailability:
        return self._upsert(
            DayAvailability,
            {"barber_id": barber_id, "date": on_date},
            {"is_available": is_available},
        )

    def list_blackouts(self, barber_id: str, on_date: date) -> List[SlotBlackout]:
        with self._session() as session:
            return list(session.exec(
                select(SlotBlackout)
                .where(SlotBlackout.barber_id == barber_id)
                .where(SlotBlackout.date == on_date)
                .order_by(SlotBlackout.time)
            ).all())

    def set_slot_blackout(
        self, barber_id: str, on_date: date, time: str, is_unavailable: bool
    ) -> SlotBlackout:
        return self._upsert(
            SlotBlackout,
            {"barber_id": barber_id, "date": on_date, "time": time},
            {"is_unavailable": is_unavailable},
        )

    def _find_row(self, session: Session, model, key: dict):
        stmt = select(model)
        for column, value in key.items():
            stmt = stmt.where(getattr(model, column) == value)
        return session.exec(stmt).first()

    def _upsert(self, model, key: dict, values: dict):
        # If a concurrent request inserts the same key first, the unique
        # constraint rejects ours and the second pass updates its row instead.
        for attempt in range(2):
            with self._session() as session:
                row = self._find_row(session, model, key)

                if row is None:
                    row = model(**key, **values)
                else:
                    for column, value in values.items():
                        setattr(row, column, value)
                    row.updated_at = datetime.now()

                session.add(row)
                try:
                    session.commit()
                except IntegrityError:
                    session.rollback()
                    if attempt:
                        raise
                    logger.info("Upsert of %s %s lost a race, retrying", model.__name__, key)
                    continue
                session.refresh(row)
                return row
