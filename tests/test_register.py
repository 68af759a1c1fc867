import pytest
from fastapi.testclient import TestClient

from ledgerly.app.core.security import pwd_context, verify_password
from ledgerly.app.db.base import Base
from ledgerly.app.db.session import SessionLocal, engine
from ledgerly.app.main import app
from ledgerly.app.models.user import User


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def test_registration_returns_owner_profile_without_secrets():
    client = TestClient(app)
    payload = {"email": "owner@example.com", "password": "secret", "full_name": "Ada Owner"}
    response = client.post("/auth/register", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"id", "email", "full_name"}
    assert data["email"] == "owner@example.com"
    assert data["full_name"] == "Ada Owner"


def test_duplicate_email_returns_400():
    client = TestClient(app)
    payload = {"email": "dup@example.com", "password": "secret"}
    assert client.post("/auth/register", json=payload).status_code == 200
    second = client.post("/auth/register", json={"email": "dup@example.com", "password": "other"})
    assert second.status_code == 400
    assert second.json()["detail"] == "Email already registered"


def test_stored_password_is_a_pbkdf2_hash():
    client = TestClient(app)
    client.post("/auth/register", json={"email": "persist@example.com", "password": "secret"})
    with SessionLocal() as db:
        user = db.query(User).filter(User.email == "persist@example.com").first()
        assert user.is_active is True
        assert pwd_context.identify(user.hashed_password) == "pbkdf2_sha256"
        assert verify_password("secret", user.hashed_password)


@pytest.mark.parametrize(
    "payload",
    [
        {"email": "not-an-email", "password": "secret"},
        {"email": "blank@example.com", "password": ""},
        {"password": "secret"},
    ],
)
def test_invalid_registration_is_422(payload):
    client = TestClient(app)
    assert client.post("/auth/register", json=payload).status_code == 422
