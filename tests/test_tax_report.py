from datetime import date

import pytest
from fastapi.testclient import TestClient

from ledgerly.app.core.time import start_of_year
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


def create_invoice(client: TestClient, token: str, day: str, rate: str, status: str | None = None) -> dict:
    invoice = client.post(
        "/invoices/",
        json={
            "date": day,
            "from_name": "Acme Studio",
            "bill_to_name": "Globex",
            "line_items": [{"description": "Work", "rate": rate, "quantity": "1"}],
        },
        headers={"Authorization": f"Bearer {token}"},
    ).json()
    if status:
        client.patch(f"/invoices/{invoice['id']}/status", json={"status": status}, headers={"Authorization": f"Bearer {token}"})
    return invoice


def test_tax_summary_counts_paid_income_and_deductions():
    client = TestClient(app)
    token = register_and_login(client, "tax1@example.com", "secret")
    headers = {"Authorization": f"Bearer {token}"}

    create_invoice(client, token, "2025-02-01", "1000.00", status="paid")
    create_invoice(client, token, "2025-03-01", "500.00", status="sent")
    create_invoice(client, token, "2024-12-31", "700.00", status="paid")

    client.post(
        "/expenses/",
        json={"merchant": "Office Depot", "date": "2025-02-10", "total": "100", "is_tax_deductible": True, "tax_category": "office_supplies"},
        headers=headers,
    )
    client.post(
        "/expenses/",
        json={"merchant": "Phone", "date": "2025-02-11", "total": "50", "is_tax_deductible": True, "business_use_percentage": "50"},
        headers=headers,
    )
    client.post("/expenses/", json={"merchant": "Lunch", "date": "2025-02-12", "total": "30"}, headers=headers)
    client.post("/mileage/", json={"date": "2025-02-15", "purpose": "Site visit", "miles": "100", "rate_per_mile": "0.67"}, headers=headers)

    resp = client.get("/reports/tax-summary", params={"start_date": "2025-01-01", "end_date": "2025-12-31"}, headers=headers)
    assert resp.status_code == 200
    data = resp.json()

    assert data["total_income"] == "1000.00"
    assert data["paid_invoice_count"] == 1
    assert data["total_expenses"] == "125.00"
    assert data["expense_count"] == 2
    assert data["expenses_by_category"]["office_supplies"] == {"count": 1, "total": "100.00"}
    assert data["expenses_by_category"]["uncategorized"] == {"count": 1, "total": "25.00"}
    assert data["total_mileage"] == "100.00"
    assert data["total_mileage_deduction"] == "67.00"
    assert data["total_deductions"] == "192.00"
    assert data["net_profit"] == "808.00"
    # 808 * 15.3% = 123.62; (808 - 61.81) * 22% = 164.16
    assert data["self_employment_tax"] == "123.62"
    assert data["estimated_income_tax"] == "164.16"
    assert data["total_estimated_tax"] == "287.78"


def test_tax_summary_with_loss_has_no_tax():
    client = TestClient(app)
    token = register_and_login(client, "tax2@example.com", "secret")
    headers = {"Authorization": f"Bearer {token}"}
    client.post(
        "/expenses/",
        json={"merchant": "Laptop", "date": "2025-05-01", "total": "900", "is_tax_deductible": True},
        headers=headers,
    )
    data = client.get("/reports/tax-summary", params={"start_date": "2025-01-01", "end_date": "2025-12-31"}, headers=headers).json()
    assert data["net_profit"] == "-900.00"
    assert data["self_employment_tax"] == "0.00"
    assert data["total_estimated_tax"] == "0.00"


def test_tax_summary_defaults_to_year_to_date():
    client = TestClient(app)
    token = register_and_login(client, "tax3@example.com", "secret")
    data = client.get("/reports/tax-summary", headers={"Authorization": f"Bearer {token}"}).json()
    assert data["start_date"] == start_of_year(date.today()).isoformat()
    assert data["end_date"] == date.today().isoformat()
    assert data["total_income"] == "0.00"


def test_tax_summary_rejects_inverted_range():
    client = TestClient(app)
    token = register_and_login(client, "tax4@example.com", "secret")
    resp = client.get(
        "/reports/tax-summary",
        params={"start_date": "2025-12-31", "end_date": "2025-01-01"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 400
