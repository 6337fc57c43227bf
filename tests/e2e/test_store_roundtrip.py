"""
E2E tests against a running mock order store, using its bundled seed orders.

These tests require the mock store to be listening on settings.store_api_base:
    uvicorn mock_services.store_server.main:app --port 8001

Seed orders:
- ord-ana: 3 installments, first paid, second long past due
- ord-bruno: legacy monthly due day 31, no payments yet
- ord-carla: fully paid
"""

import pytest
from fastapi.testclient import TestClient

from crediario.api.main import create_app


@pytest.fixture
def live_client() -> TestClient:
    """Gateway wired to the real store client, no dependency overrides"""
    return TestClient(create_app())


@pytest.mark.integration
def test_collection_ranking(live_client: TestClient):
    """Overdue installment plan first, legacy customer next, settled order last"""
    response = live_client.get("/v1/orders")

    assert response.status_code == 200
    ids = [o["order_id"] for o in response.json()["orders"]]
    assert ids == ["ord-ana", "ord-bruno", "ord-carla"]


@pytest.mark.integration
def test_legacy_due_day_is_never_past_month_end(live_client: TestClient):
    """Day 31 is clamped to the last day of the current month"""
    response = live_client.get("/v1/orders/ord-bruno/due")

    assert response.status_code == 200
    data = response.json()
    assert data["overdue"] is False
    assert data["next_installment_number"] is None
    assert data["candidate_date"] is not None


@pytest.mark.integration
def test_payment_round_trip(live_client: TestClient):
    """Append then delete a payment; the store recomputes the paid total both times"""
    before = live_client.get("/v1/orders/ord-ana").json()

    added = live_client.post("/v1/orders/ord-ana/payments", json={"date": "2025-03-01", "amount": "100.00"})
    assert added.status_code == 201
    data = added.json()
    assert data["paid_cents"] == before["paid_cents"] + 10000
    assert data["installments"][1]["status"] == "pago"

    new_ids = {p["id"] for p in data["payment_history"]} - {p["id"] for p in before["payment_history"]}
    [payment_id] = new_ids

    removed = live_client.delete(f"/v1/orders/ord-ana/payments/{payment_id}")
    assert removed.status_code == 200
    assert removed.json()["paid_cents"] == before["paid_cents"]
    assert removed.json()["installments"][1]["status"] == "pendente"


@pytest.mark.integration
def test_settled_order_summary(live_client: TestClient):
    response = live_client.get("/v1/orders/ord-carla/summary")

    assert response.status_code == 200
    data = response.json()
    assert data["amount_due_cents"] == 0
    assert data["amount_due_display"] == "R$ 0,00"
    assert data["paid_installments"] == 2
    assert data["next_due"]["days_until_due"] is None
