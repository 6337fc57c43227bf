"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

import httpx
from fastapi.testclient import TestClient

from crediario.api.dependencies import get_store_client
from crediario.api.main import create_app
from crediario.domain.exceptions import StoreAPIError
from crediario.domain.models import Installment, InstallmentStatus, Order, Payment
from crediario.infrastructure.clients.store import StoreClient
from crediario.config import settings
from crediario.utils.date_utils import calendar_today, to_iso_timestamp
from mock_services.store_server.main import create_store_app


def business_today() -> date:
    """Today as the API sees it"""
    return calendar_today(tz_name=settings.business_timezone)


def make_order(
    order_id: str = "ord-1",
    total_cents: int = 30000,
    installments: Sequence[Installment] = (),
    legacy_due_day: Optional[int] = None,
    payments: Sequence[Payment] = (),
    paid_cents: Optional[int] = None,
    created_at: Optional[datetime] = None,
) -> Order:
    """Order snapshot with paid_cents defaulting to the payment history total"""
    if paid_cents is None:
        paid_cents = sum(p.value_cents for p in payments)
    return Order(
        id=order_id,
        total_cents=total_cents,
        installments=tuple(installments),
        legacy_due_day=legacy_due_day,
        payment_history=tuple(payments),
        paid_cents=paid_cents,
        created_at=created_at or datetime(2025, 1, 1, 12, tzinfo=timezone.utc),
    )


class FakeOrderStore:
    """In-memory order store that records every call and can be told to fail"""

    def __init__(self, orders: Sequence[Order] = ()):
        self.orders: Dict[str, Order] = {order.id: order for order in orders}
        self.calls: List[tuple] = []
        self.fail_on: set[str] = set()
        self._next_id = 1

    def _call(self, name: str, *args: Any) -> None:
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise StoreAPIError(f"Store API error: 503 ({name})")

    def mutations(self) -> List[tuple]:
        return [call for call in self.calls if call[0] not in ("get_order", "list_orders")]

    async def list_orders(self) -> List[Order]:
        self._call("list_orders")
        return list(self.orders.values())

    async def get_order(self, order_id: str) -> Order:
        self._call("get_order", order_id)
        return self.orders[order_id]

    async def replace_order(self, order_id, installments, total_cents, paid_cents) -> None:
        self._call("replace_order", order_id, list(installments), total_cents, paid_cents)
        order = self.orders[order_id]
        self.orders[order_id] = make_order(
            order.id, total_cents, installments, order.legacy_due_day, order.payment_history,
            created_at=order.created_at,
        )

    async def append_payment(self, order_id: str, payment: Payment) -> Dict[str, Any]:
        self._call("append_payment", order_id, payment)
        order = self.orders[order_id]
        stored = Payment(date=payment.date, value_cents=payment.value_cents, id=f"pay-{self._next_id}")
        self._next_id += 1
        self.orders[order_id] = make_order(
            order.id, order.total_cents, order.installments, order.legacy_due_day,
            order.payment_history + (stored,), created_at=order.created_at,
        )
        return {"id": stored.id}

    async def delete_payment(self, order_id: str, payment_id: str) -> None:
        self._call("delete_payment", order_id, payment_id)
        order = self.orders[order_id]
        self.orders[order_id] = make_order(
            order.id, order.total_cents, order.installments, order.legacy_due_day,
            tuple(p for p in order.payment_history if p.id != payment_id), created_at=order.created_at,
        )


@pytest.fixture
def fake_store() -> FakeOrderStore:
    """Store with one three-installment order, first installment paid"""
    today = business_today()
    order = make_order(
        "ord-1",
        total_cents=30000,
        installments=[
            Installment(1, today - timedelta(days=30), 10000, InstallmentStatus.PAID),
            Installment(2, today + timedelta(days=5), 10000, InstallmentStatus.PENDING),
            Installment(3, today + timedelta(days=35), 10000, InstallmentStatus.PENDING),
        ],
        payments=[Payment(today - timedelta(days=31), 10000, "pay-0")],
    )
    return FakeOrderStore([order])


@pytest.fixture
def store_seed() -> List[Dict[str, Any]]:
    """Store JSON for the mock store: one overdue, one due soon, one fully paid"""
    today = business_today()
    return [
        {
            "_id": "ord-paid",
            "customerId": "cus-a",
            "date": "2024-10-01T10:00:00.000Z",
            "totalCents": 20000,
            "installments": [
                {"number": 1, "dueDate": to_iso_timestamp(today - timedelta(days=40)), "amountCents": 10000, "status": "pago"},
                {"number": 2, "dueDate": to_iso_timestamp(today - timedelta(days=10)), "amountCents": 10000, "status": "pago"},
            ],
            "paymentHistory": [
                {"id": "pay-a", "date": to_iso_timestamp(today - timedelta(days=40)), "valueCents": 20000},
            ],
            "paidCents": 20000,
        },
        {
            "_id": "ord-late",
            "customerId": "cus-b",
            "date": "2024-12-01T10:00:00.000Z",
            "totalCents": 1000,
            "installments": [
                {"number": 1, "dueDate": to_iso_timestamp(today - timedelta(days=5)), "amountCents": 334, "status": "pendente"},
                {"number": 2, "dueDate": to_iso_timestamp(today + timedelta(days=25)), "amountCents": 333, "status": "pendente"},
                {"number": 3, "dueDate": to_iso_timestamp(today + timedelta(days=55)), "amountCents": 333, "status": "pendente"},
            ],
            "paymentHistory": [],
            "paidCents": 0,
        },
        {
            "_id": "ord-soon",
            "customerId": "cus-c",
            "date": "2024-11-01T10:00:00.000Z",
            "totalCents": 5000,
            "installments": [
                {"number": 1, "dueDate": to_iso_timestamp(today + timedelta(days=2)), "amountCents": 5000, "status": "pendente"},
            ],
            "paymentHistory": [],
            "paidCents": 0,
        },
    ]


@pytest.fixture
def store_app(store_seed):
    """Mock order store seeded with store_seed"""
    return create_store_app(store_seed)


@pytest.fixture
def store_client(store_app) -> StoreClient:
    """Store client talking to the mock store in-process"""
    return StoreClient(base_url="http://store", transport=httpx.ASGITransport(app=store_app))


@pytest.fixture
def client(store_client: StoreClient) -> TestClient:
    """Create FastAPI test client backed by the mock order store"""
    app = create_app()
    app.dependency_overrides[get_store_client] = lambda: store_client
    return TestClient(app)


@pytest.fixture
def order_factory():
    """Build Order snapshots with test-friendly defaults"""
    return make_order
