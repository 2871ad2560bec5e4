from datetime import date, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from passlib.context import CryptContext

from barbershop import auth
from barbershop.config import Settings
from barbershop.data import MemoryStore
from barbershop.db import SqlStore, build_engine, create_db_and_tables
from barbershop.deps import get_now
from barbershop.main import create_app
from barbershop.models import Barber, User

# Monday, noon
NOW = datetime(2030, 6, 10, 12, 0)
TODAY = NOW.date()
TOMORROW = TODAY + timedelta(days=1)
YESTERDAY = TODAY - timedelta(days=1)

PASSWORD = "s3cret-pass"


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    monkeypatch.setattr(auth, "pwd_context", CryptContext(schemes=["bcrypt"], bcrypt__rounds=4))


@pytest.fixture
def settings():
    return Settings(database_url=None, seed_demo_data=False, secret_key="test-secret")


@pytest.fixture(params=["memory", "sql"])
def store(request):
    if request.param == "memory":
        return MemoryStore()
    engine = build_engine("sqlite://")
    create_db_and_tables(engine)
    return SqlStore(engine)


@pytest.fixture
def make_barber(store):
    counter = {"n": 0}

    def _make(open_time="09:00", close_time="18:00", haircut_duration=30, name="John Smith"):
        counter["n"] += 1
        user = User(
            email=f"barber{counter['n']}@example.com",
            password_hash="x",
            role="barber",
            full_name=name,
            phone="555-0101",
        )
        barber = Barber(
            user_id=user.id,
            manual_location="Downtown Barbershop",
            haircut_duration=haircut_duration,
            open_time=open_time,
            close_time=close_time,
        )
        store.create_user(user, barber)
        return store.get_barber(barber.id)

    return _make


@pytest.fixture
def make_client(store):
    counter = {"n": 0}

    def _make(name="Test Client"):
        counter["n"] += 1
        user = User(
            email=f"client{counter['n']}@example.com",
            password_hash="x",
            role="client",
            full_name=name,
            phone="1234567890",
        )
        return store.create_user(user)

    return _make


@pytest.fixture
def app(store, settings):
    app = create_app(store=store, settings=settings)
    app.dependency_overrides[get_now] = lambda: NOW
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def register(client):
    counter = {"n": 0}

    def _register(role="client", **overrides):
        counter["n"] += 1
        body = {
            "role": role,
            "email": f"{role}{counter['n']}@example.com",
            "password": PASSWORD,
            "fullName": f"{role.title()} Number{counter['n']}",
            "phone": "+1 (555) 010-0000",
        }
        if role == "barber":
            body.update({
                "manualLocation": "Downtown Barbershop",
                "openTime": "09:00",
                "closeTime": "18:00",
                "haircutDuration": 30,
            })
        body.update(overrides)

        resp = client.post("/users", json=body)
        assert resp.status_code == 201, resp.text
        login = client.post("/auth/login", data={"username": body["email"], "password": PASSWORD})
        assert login.status_code == 200, login.text

        user = resp.json()
        user["headers"] = {"Authorization": f"Bearer {login.json()['access_token']}"}
        return user

    return _register


def iso(d: date) -> str:
    return d.isoformat()
