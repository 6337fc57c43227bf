"""Order store HTTP client - the remote system of record for orders and payments"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from crediario.config import settings
from crediario.domain.exceptions import OrderNotFoundError, StoreAPIError
from crediario.domain.ledger import normalize_payment_date
from crediario.domain.models import Installment, InstallmentStatus, Order, Payment
from crediario.infrastructure.observability.metrics import store_failure_counter, store_latency_histogram
from crediario.utils.date_utils import format_utc_timestamp, parse_calendar_date, parse_timestamp, to_iso_timestamp

logger = logging.getLogger(__name__)


def parse_installment(data: Dict[str, Any]) -> Installment:
    """Store JSON -> Installment; an unparseable dueDate becomes None"""
    return Installment(
        number=int(data["number"]),
        due_date=parse_calendar_date(data.get("dueDate")),
        amount_cents=int(data.get("amountCents", data.get("amount", 0))),
        status=InstallmentStatus.parse(data.get("status")),
    )


def parse_payment(data: Dict[str, Any]) -> Payment:
    """Store JSON -> Payment; an unparseable date becomes None but the value still counts"""
    payment_id = data.get("id", data.get("_id"))
    return Payment(
        date=parse_calendar_date(data.get("date")),
        value_cents=int(data.get("valueCents", data.get("value", 0))),
        id=str(payment_id) if payment_id is not None else None,
    )


def parse_due_day(value: Any) -> Optional[int]:
    """Legacy day of month; anything that is not a whole number reads as no due day"""
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    try:
        day = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return day if 1 <= day <= 31 else None


def parse_order(data: Dict[str, Any]) -> Order:
    """Store JSON -> Order snapshot"""
    return Order(
        id=str(data.get("_id", data.get("id", ""))),
        customer_id=data.get("customerId"),
        total_cents=int(data.get("totalCents", 0)),
        installments=tuple(
            sorted((parse_installment(i) for i in data.get("installments") or []), key=lambda i: i.number)
        ),
        legacy_due_day=parse_due_day(data.get("legacyDueDay")),
        payment_history=tuple(parse_payment(p) for p in data.get("paymentHistory") or []),
        paid_cents=int(data.get("paidCents", 0)),
        created_at=parse_timestamp(data.get("date")),
    )


def serialize_installment(installment: Installment) -> Dict[str, Any]:
    """Installment -> store JSON, due date at the neutral UTC hour"""
    return {
        "number": installment.number,
        "dueDate": to_iso_timestamp(installment.due_date, settings.neutral_hour_utc),
        "amountCents": installment.amount_cents,
        "status": installment.status.value,
    }


def serialize_payment(payment: Payment) -> Dict[str, Any]:
    """Payment -> store JSON, date at the neutral UTC hour"""
    body: Dict[str, Any] = {
        "date": format_utc_timestamp(normalize_payment_date(payment.date)),
        "valueCents": payment.value_cents,
    }
    if payment.id is not None:
        body["id"] = payment.id
    return body


class StoreClient:
    """Client for the external order store API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.store_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def _request(self, operation: str, method: str, path: str, json: Any = None) -> Any:
        """
        Single call to the store, no retry.

        Raises:
            OrderNotFoundError: store answered 404
            StoreAPIError: on timeout, network failure, other HTTP errors or a non-JSON body
        """
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport) as client:
            try:
                with store_latency_histogram.labels(operation=operation).time():
                    response = await client.request(method, path, json=json)
                response.raise_for_status()
                return response.json() if response.content else None

            except httpx.TimeoutException as e:
                store_failure_counter.labels(operation=operation).inc()
                raise StoreAPIError(f"Store API timeout after {self.timeout}s ({operation})") from e
            except httpx.HTTPStatusError as e:
                if e.response.status_code == 404:
                    raise OrderNotFoundError(f"Not found in store ({operation} {path})") from e
                store_failure_counter.labels(operation=operation).inc()
                logger.warning("Store returned %s for %s %s", e.response.status_code, method, path)
                raise StoreAPIError(f"Store API error: {e.response.status_code} ({operation})") from e
            except httpx.RequestError as e:
                store_failure_counter.labels(operation=operation).inc()
                raise StoreAPIError(f"Store API unreachable ({operation}): {e}") from e
            except ValueError as e:
                store_failure_counter.labels(operation=operation).inc()
                raise StoreAPIError(f"Invalid JSON from store ({operation}): {e}") from e

    def _to_order(self, data: Any) -> Order:
        try:
            return parse_order(data)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise StoreAPIError(f"Invalid order data from store: {e}") from e

    async def list_orders(self) -> List[Order]:
        """Fetch every order"""
        data = await self._request("list_orders", "GET", "/order/")
        if not isinstance(data, list):
            raise StoreAPIError("Invalid order list from store")
        return [self._to_order(item) for item in data]

    async def get_order(self, order_id: str) -> Order:
        """Fetch one order by id"""
        return self._to_order(await self._request("get_order", "GET", f"/order/{order_id}"))

    async def replace_order(
        self,
        order_id: str,
        installments: Sequence[Installment],
        total_cents: int,
        paid_cents: int,
    ) -> None:
        """Send the full rebuilt installment list plus recomputed totals"""
        await self._request(
            "replace_order",
            "PUT",
            f"/order/{order_id}",
            json={
                "totalCents": total_cents,
                "paidCents": paid_cents,
                "remainingCents": max(0, total_cents - paid_cents),
                "installments": [serialize_installment(i) for i in installments],
            },
        )

    async def append_payment(self, order_id: str, payment: Payment) -> Optional[Dict[str, Any]]:
        """Append a payment to the order's history; the store assigns its id"""
        return await self._request(
            "append_payment", "POST", f"/order/{order_id}/payment", json=serialize_payment(payment)
        )

    async def delete_payment(self, order_id: str, payment_id: str) -> None:
        """Remove a payment from the order's history"""
        await self._request("delete_payment", "DELETE", f"/order/{order_id}/payment/{payment_id}")
