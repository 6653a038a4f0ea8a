"""Pytest configuration and fixtures."""

import pytest

from aurora import create_app, db
from aurora.errors import DependencyFailure
from aurora.models import User
from aurora.services.xp_ledger import XPLedger

TEST_PASSWORD = "correct-horse"


def _make_user(name: str, email: str) -> dict:
    user = User(name=name, email=email, subjects=["Math", "Physics"])
    user.set_password(TEST_PASSWORD)
    db.session.add(user)
    db.session.commit()
    return {"id": user.id, "email": user.email, "password": TEST_PASSWORD}


@pytest.fixture
def app():
    """Create and configure a test application instance."""
    app = create_app("testing")

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def test_user(app):
    """Create a test user in the database."""
    return _make_user("Test User", "test@example.com")


@pytest.fixture
def other_user(app):
    """A second user whose data must stay invisible to ``test_user``."""
    return _make_user("Other User", "other@example.com")


@pytest.fixture
def failing_ledger(app):
    """An XP ledger whose storage write always fails."""

    class FailingLedger(XPLedger):
        def grant_xp(self, user_id, amount, reason=""):
            raise DependencyFailure("Failed to apply XP grant")

    return FailingLedger()


@pytest.fixture
def auth_headers(client, test_user):
    """Get authorization headers with JWT token."""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": test_user["email"], "password": test_user["password"]},
    )
    assert response.status_code == 200
    token = response.json["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_client(client, auth_headers):
    """Create an authenticated test client wrapper."""

    class AuthenticatedClient:
        def __init__(self, client, headers):
            self._client = client
            self._headers = headers

        def get(self, *args, **kwargs):
            kwargs.setdefault("headers", {}).update(self._headers)
            return self._client.get(*args, **kwargs)

        def post(self, *args, **kwargs):
            kwargs.setdefault("headers", {}).update(self._headers)
            return self._client.post(*args, **kwargs)

        def put(self, *args, **kwargs):
            kwargs.setdefault("headers", {}).update(self._headers)
            return self._client.put(*args, **kwargs)

        def delete(self, *args, **kwargs):
            kwargs.setdefault("headers", {}).update(self._headers)
            return self._client.delete(*args, **kwargs)

    return AuthenticatedClient(client, auth_headers)
