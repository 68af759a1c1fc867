import pytest
from fastapi.testclient import TestClient

from ledgerly.app.db.base import Base
from ledgerly.app.db.session import engine
from ledgerly.app.main import app


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def register_and_login(client: TestClient, email: str, password: str) -> str:
    client.post("/auth/register", json={"email": email, "password": password})
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()["access_token"]


def create_invoice(client: TestClient, token: str) -> dict:
    resp = client.post(
        "/invoices/",
        json={
            "date": "2025-11-06",
            "from_name": "Acme Studio",
            "bill_to_name": "Globex",
            "line_items": [{"description": "Design", "rate": "100", "quantity": "2"}],
        },
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 201
    return resp.json()


def test_unshared_invoice_is_not_found_publicly():
    client = TestClient(app)
    token = register_and_login(client, "share1@example.com", "secret")
    invoice = create_invoice(client, token)
    assert invoice["share_token"] is None

    for url in (f"/invoice/{invoice['id']}", f"/invoice/{invoice['id']}?token=", f"/invoice/{invoice['id']}?token=None"):
        resp = client.get(url)
        assert resp.status_code == 404
        assert "Globex" not in resp.text
    assert client.get(f"/invoice/{invoice['id']}/pdf?token=anything").status_code == 404


def test_share_link_grants_public_access():
    client = TestClient(app)
    token = register_and_login(client, "share2@example.com", "secret")
    invoice = create_invoice(client, token)

    resp = client.post(f"/invoices/{invoice['id']}/share", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    link = resp.json()
    share_token = link["share_token"]
    assert len(share_token) >= 32
    assert link["url"].endswith(f"/invoice/{invoice['id']}?token={share_token}")
    assert link["pdf_url"].endswith(f"/invoice/{invoice['id']}/pdf?token={share_token}")

    # Sharing again keeps the same token
    again = client.post(f"/invoices/{invoice['id']}/share", headers={"Authorization": f"Bearer {token}"}).json()
    assert again["share_token"] == share_token

    page = client.get(f"/invoice/{invoice['id']}", params={"token": share_token})
    assert page.status_code == 200
    assert "Globex" in page.text
    assert "Powered by Ledgerly" in page.text

    pdf = client.get(f"/invoice/{invoice['id']}/pdf", params={"token": share_token})
    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"


def test_wrong_token_or_wrong_invoice_is_not_found():
    client = TestClient(app)
    token = register_and_login(client, "share3@example.com", "secret")
    first = create_invoice(client, token)
    second = create_invoice(client, token)
    share_token = client.post(f"/invoices/{first['id']}/share", headers={"Authorization": f"Bearer {token}"}).json()["share_token"]

    assert client.get(f"/invoice/{first['id']}", params={"token": share_token + "x"}).status_code == 404
    assert client.get(f"/invoice/{second['id']}", params={"token": share_token}).status_code == 404
    assert client.get("/invoice/9999", params={"token": share_token}).status_code == 404


def test_revoked_link_stops_working():
    client = TestClient(app)
    token = register_and_login(client, "share4@example.com", "secret")
    invoice = create_invoice(client, token)
    share_token = client.post(f"/invoices/{invoice['id']}/share", headers={"Authorization": f"Bearer {token}"}).json()["share_token"]

    resp = client.delete(f"/invoices/{invoice['id']}/share", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 204
    assert client.get(f"/invoice/{invoice['id']}", params={"token": share_token}).status_code == 404
    detail = client.get(f"/invoices/{invoice['id']}", headers={"Authorization": f"Bearer {token}"}).json()
    assert detail["share_token"] is None


def test_other_owner_cannot_share():
    client = TestClient(app)
    token_a = register_and_login(client, "share5a@example.com", "secret")
    token_b = register_and_login(client, "share5b@example.com", "secret")
    invoice = create_invoice(client, token_a)
    resp = client.post(f"/invoices/{invoice['id']}/share", headers={"Authorization": f"Bearer {token_b}"})
    assert resp.status_code == 404
