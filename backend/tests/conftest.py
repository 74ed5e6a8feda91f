import os

# Must be set before groupchat modules read settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENABLE_SCHEDULER"] = "false"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from groupchat.core.database import Base, get_db
from groupchat.main import app
from groupchat.models import message, user  # noqa: F401  (register tables)
from groupchat.schemas import SignUpData
from groupchat.services.presence import PresenceTracker
from groupchat.services.theme_catalog import ThemeCatalog
from groupchat.storage.chat_storage import ChatStorage


class FakeClock:
    """Manually advanced clock for presence tests."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def session_factory():
    # One shared in-memory connection so every session sees the same tables
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def presence(clock):
    return PresenceTracker(timeout_seconds=300, clock=clock)


@pytest.fixture
def themes():
    return ThemeCatalog()


@pytest.fixture
def storage(db_session, presence, themes):
    return ChatStorage(db_session, presence, themes)


@pytest.fixture
def sign_up_data():
    def build(name: str, **overrides) -> SignUpData:
        fields = {
            "username": name,
            "email": f"{name}@x.com",
            "password": "secret123",
            "first_name": name.capitalize(),
            "last_name": "Tester",
        }
        fields.update(overrides)
        return SignUpData(**fields)
    return build


@pytest.fixture
def client(session_factory, presence, themes):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    previous_state = (app.state.presence, app.state.themes)
    app.state.presence = presence
    app.state.themes = themes
    # Not used as a context manager: the lifespan would touch the real
    # database and start the scheduler
    yield TestClient(app)
    app.dependency_overrides.clear()
    app.state.presence, app.state.themes = previous_state


@pytest.fixture
def signup(client):
    """Sign a user up through the API and return the response body."""
    def do_signup(name: str, **overrides) -> dict:
        body = {
            "username": name,
            "email": f"{name}@x.com",
            "password": "secret123",
            "firstName": name.capitalize(),
            "lastName": "Tester",
        }
        body.update(overrides)
        response = client.post("/api/auth/signup", json=body)
        assert response.status_code == 201, response.text
        return response.json()
    return do_signup
