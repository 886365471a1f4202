"""Shared pytest fixtures."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from forms_api.auth.codec import TokenCodec
from forms_api.auth.sessions import SessionManager
from forms_api.auth.store import reset_purge_throttle
from forms_api.clock import now_utc_naive
from forms_api.database import Base, get_db
from forms_api.main import app
from forms_api.routes.auth import get_codec

TEST_SECRET = "test-secret-key-for-testing-only-do-not-use-in-production"
TEST_PASSWORD = "TestPassword123!"


class MutableClock:
    """Injectable clock for the token codec."""

    def __init__(self) -> None:
        self.now = now_utc_naive().replace(microsecond=0)

    def __call__(self):
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def _reset_purge_throttle():
    reset_purge_throttle()
    yield
    reset_purge_throttle()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return MutableClock()


@pytest.fixture
def codec(clock):
    return TokenCodec(TEST_SECRET, clock=clock)


@pytest.fixture
def manager(db, codec):
    return SessionManager(db, codec)


@pytest.fixture
def client(session_factory, codec):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_codec] = lambda: codec
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def rpc(client):
    """Call an RPC method: rpc("FormsService", "CreateForm", {...})."""

    def _call(service: str, method: str, body: dict | None = None):
        return client.post(f"/forms.{service}/{method}", json=body or {})

    return _call


@pytest.fixture
def register(rpc):
    def _register(email="alice@example.com", name="Alice", password=TEST_PASSWORD) -> dict:
        res = rpc("UsersService", "CreateUser", {"email": email, "password": password, "name": name})
        assert res.status_code == 200, res.text
        return res.json()

    return _register


@pytest.fixture
def login(rpc):
    def _login(email="alice@example.com", password=TEST_PASSWORD) -> str:
        res = rpc("SessionsService", "CreateSession", {"email": email, "password": password})
        assert res.status_code == 200, res.text
        return res.json()["token"]

    return _login


@pytest.fixture
def alice(register, login):
    user = register()
    return {"user": user, "token": login()}


@pytest.fixture
def bob(register, login):
    user = register(email="bob@example.com", name="Bob")
    return {"user": user, "token": login(email="bob@example.com")}
