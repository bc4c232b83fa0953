"""Shared fixtures: in-memory database, test client and header authentication."""

import os

# Must be set before the app (and its settings) are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["FIREBASE_ENABLED"] = "false"
os.environ["ALLOW_USER_ID_HEADER"] = "true"

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app import crud
from app.database import Base, get_engine, get_session_local
from app.models.identity import IdentityContext, AccountPrivacy


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with get_engine().begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def db():
    session = get_session_local()()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    def _make_user(user_id, email=None):
        return crud.create_user(db, user_id, email or f"{user_id}@example.com", user_id.title())
    return _make_user


@pytest.fixture
def make_identity(db):
    def _make_identity(user_id, context, preferred_name, privacy=AccountPrivacy.PRIVATE, legal_name=None):
        return crud.create_identity(
            db,
            user_id,
            legal_name or f"{preferred_name.title()} Legal",
            preferred_name,
            IdentityContext(context),
            account_privacy=AccountPrivacy(privacy),
        )
    return _make_identity


def as_user(user_id):
    """Request headers authenticating as ``user_id``."""
    return {"X-User-ID": user_id}
