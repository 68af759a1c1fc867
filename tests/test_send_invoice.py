import pytest
from fastapi.testclient import TestClient

from ledgerly.app.db.base import Base
from ledgerly.app.db.session import engine
from ledgerly.app.main import app
from ledgerly.app.services.email_delivery import EmailDeliveryError, get_email_sender


class Outbox:
    def __init__(self):
        self.messages = []

    def send(self, message):
        self.messages.append(message)


class FailingSender:
    def send(self, message):
        raise EmailDeliveryError("connection refused")


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    app.dependency_overrides.clear()


@pytest.fixture
def outbox():
    box = Outbox()
    app.dependency_overrides[get_email_sender] = lambda: box
    return box


def register_and_login(client: TestClient, email: str, password: str) -> str:
    client.post("/auth/register", json={"email": email, "password": password})
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()["access_token"]


def create_invoice(client: TestClient, token: str, **overrides) -> dict:
    payload = {
        "date": "2025-11-06",
        "from_name": "Acme Studio",
        "from_email": "billing@acme.com",
        "bill_to_name": "Globex",
        "bill_to_email": "ap@globex.com",
        "line_items": [{"description": "Design", "rate": "100", "quantity": "2"}],
    }
    payload.update(overrides)
    resp = client.post("/invoices/", json=payload, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 201
    return resp.json()


def test_send_marks_draft_as_sent_and_shares(outbox):
    client = TestClient(app)
    token = register_and_login(client, "send1@example.com", "secret")
    invoice = create_invoice(client, token)

    resp = client.post(f"/invoices/{invoice['id']}/send", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json() == {"message": "Invoice sent", "sent_to": "ap@globex.com", "status": "sent"}

    assert len(outbox.messages) == 1
    message = outbox.messages[0]
    assert message.to == "ap@globex.com"
    assert message.subject == "Invoice INV0001"
    assert message.reply_to == "billing@acme.com"

    detail = client.get(f"/invoices/{invoice['id']}", headers={"Authorization": f"Bearer {token}"}).json()
    assert detail["status"] == "sent"
    assert detail["share_token"]
    assert f"/invoice/{invoice['id']}?token={detail['share_token']}" in message.text_body


def test_send_keeps_paid_status(outbox):
    client = TestClient(app)
    token = register_and_login(client, "send2@example.com", "secret")
    invoice = create_invoice(client, token)
    client.patch(f"/invoices/{invoice['id']}/status", json={"status": "paid"}, headers={"Authorization": f"Bearer {token}"})

    resp = client.post(f"/invoices/{invoice['id']}/send", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "paid"


def test_send_without_recipient_is_400(outbox):
    client = TestClient(app)
    token = register_and_login(client, "send3@example.com", "secret")
    invoice = create_invoice(client, token, bill_to_email=None)

    resp = client.post(f"/invoices/{invoice['id']}/send", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 400
    assert outbox.messages == []


def test_transport_failure_leaves_status_unchanged():
    app.dependency_overrides[get_email_sender] = lambda: FailingSender()
    client = TestClient(app)
    token = register_and_login(client, "send4@example.com", "secret")
    invoice = create_invoice(client, token)

    resp = client.post(f"/invoices/{invoice['id']}/send", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 502
    detail = client.get(f"/invoices/{invoice['id']}", headers={"Authorization": f"Bearer {token}"}).json()
    assert detail["status"] == "draft"
