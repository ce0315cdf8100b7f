# tests/conftest.py
import os
import tempfile
from datetime import datetime, timedelta, timezone

# must be set before movment.core.config is imported
_TMP = tempfile.mkdtemp(prefix="movment-tests-")
os.environ["DATA_DIR"] = _TMP
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["RUN_MIGRATIONS"] = "false"
os.environ["SCHEDULERS_ENABLED"] = "false"
os.environ["EMAIL_ENABLED"] = "false"
os.environ["SMS_ENABLED"] = "false"
os.environ["OWNER_EMAIL"] = "owner@test.local"
os.environ["OWNER_PASSWORD"] = "owner-pass"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select

import movment.models  # noqa: F401
from movment.core.security import hash_password
from movment.core.tokens import create_access_token
from movment.db.base import Base
from movment.db.init_db import init_db
from movment.db.session import SessionLocal, engine
from movment.main import api
from movment.models.enums import Role
from movment.models.user import User
from movment.schemas.event import EventCreate
from movment.services import lifecycle

NOW = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as s:
        init_db(s)
    yield


@pytest.fixture
def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client():
    with TestClient(api) as c:
        yield c


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role: str = Role.USER.value, *, city: str | None = None, approved: bool = True, name: str | None = None, password: str = "secret123") -> User:
        counter["n"] += 1
        u = User(
            name=name or f"{role.title()} {counter['n']}",
            email=f"{role}{counter['n']}@test.local",
            password_hash=hash_password(password),
            role=role,
            approved=approved,
            city=city,
        )
        db.add(u); db.commit(); db.refresh(u)
        return u

    return _make


@pytest.fixture
def owner(db):
    return db.scalar(select(User).where(User.role == Role.OWNER.value))


def auth(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id=user.id, role=user.role)}"}


def event_payload(**overrides) -> dict:
    """camelCase body for POST /events."""
    body = {
        "type": "birthday",
        "title": "Asha's 30th",
        "scheduledAt": (NOW + timedelta(days=5)).isoformat(),
        "guestCount": 40,
        "addressLine": "12 Beach Road",
        "city": "Chennai",
        "pincode": "600001",
        "additionalServices": ["decoration", {"service": "food", "description": "veg buffet"}],
    }
    body.update(overrides)
    return body


@pytest.fixture
def make_event(db):
    def _make(owner: User, now: datetime = NOW, **overrides):
        data = EventCreate.model_validate(event_payload(**overrides))
        return lifecycle.create_event(db, owner, data, now=now)

    return _make
