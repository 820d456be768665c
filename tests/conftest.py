import os

# In-memory database for everything imported below
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")

from dataclasses import asdict, dataclass, replace
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
import models.users  # noqa: F401
import models.shift  # noqa: F401
import models.log  # noqa: F401
from services import accounts
from services import shifts as shift_service


@dataclass(frozen=True)
class UserAttrs:
    first_name: str = "Justin"
    last_name: str = "Vanderheide"
    email: str = "user@example.com"
    password: str = "foobar"
    password_confirmation: str = "foobar"

    def with_(self, **overrides) -> dict:
        """Copy of the attributes with some fields replaced."""
        return asdict(replace(self, **overrides))

    def as_dict(self) -> dict:
        return asdict(self)


@pytest.fixture()
def attrs() -> UserAttrs:
    return UserAttrs()


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    from main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def user(db, attrs):
    return accounts.create_user(db, attrs.as_dict())


@pytest.fixture()
def admin(db, attrs):
    admin = accounts.create_user(
        db, attrs.with_(first_name="Ada", last_name="Admin", email="admin@example.com")
    )
    return accounts.toggle(db, admin, "admin")


@pytest.fixture()
def shift_type(db):
    return shift_service.create_shift_type(db, "Night", "22:00 - 06:00")


@pytest.fixture()
def shift_start():
    return datetime.now(timezone.utc).replace(microsecond=0)


def login(client, email: str, password: str = "foobar") -> dict:
    resp = client.post("/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def days_ago(start: datetime, days: int) -> datetime:
    return start - timedelta(days=days)
