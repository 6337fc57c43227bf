"""Order service - schedule rebuilds and ledger mutations against the order store"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Protocol, Sequence

from crediario.domain.exceptions import ValidationError
from crediario.domain.installments import build_installments
from crediario.domain.ledger import total_paid, validate_payment
from crediario.domain.models import Installment, Order, Payment

logger = logging.getLogger(__name__)


class OrderStore(Protocol):
    """Remote operations the engine needs from the system of record"""

    async def list_orders(self) -> List[Order]: ...

    async def get_order(self, order_id: str) -> Order: ...

    async def replace_order(
        self, order_id: str, installments: Sequence[Installment], total_cents: int, paid_cents: int
    ) -> None: ...

    async def append_payment(self, order_id: str, payment: Payment) -> Optional[Dict[str, Any]]: ...

    async def delete_payment(self, order_id: str, payment_id: str) -> None: ...


class OrderService:
    """
    Keeps the last fetched snapshot per order and applies mutations through the store.

    After every successful mutation the snapshot is dropped and re-read: the
    store recomputes paid totals and installment statuses, and its answer
    wins over anything computed locally. A failed call leaves the snapshot
    as it was and the error propagates to the caller. Calls are never retried.

    There is no conflict detection: two sessions editing the same order's
    ledger get the store's last-write-wins behaviour.
    """

    def __init__(self, store: OrderStore):
        self.store = store
        self._snapshots: Dict[str, Order] = {}

    async def get_order(self, order_id: str, refresh: bool = False) -> Order:
        """Cached snapshot of an order, fetched on first use or when refresh is set"""
        if refresh or order_id not in self._snapshots:
            self._snapshots[order_id] = await self.store.get_order(order_id)
        return self._snapshots[order_id]

    async def list_orders(self) -> List[Order]:
        """Fresh list from the store; also replaces any cached snapshots"""
        orders = await self.store.list_orders()
        self._snapshots.update((order.id, order) for order in orders)
        return orders

    def cached(self, order_id: str) -> Optional[Order]:
        return self._snapshots.get(order_id)

    def invalidate(self, order_id: str) -> None:
        self._snapshots.pop(order_id, None)

    async def _reload(self, order_id: str) -> Order:
        self.invalidate(order_id)
        return await self.get_order(order_id)

    async def reschedule(
        self,
        order_id: str,
        count: int,
        explicit_dates: Optional[Sequence[Any]] = None,
        today: Optional[date] = None,
    ) -> Order:
        """
        Rebuild an order's installments from scratch and replace them in the store.

        The paid-to-date amount comes from the full payment history, so earlier
        installments are marked paid again no matter how the count changed.
        """
        order = await self.get_order(order_id, refresh=True)
        paid = total_paid(order.payment_history)

        installments = build_installments(order.total_cents, count, explicit_dates, paid, today)

        await self.store.replace_order(order_id, installments, order.total_cents, paid)
        logger.info(
            "Installments rebuilt",
            extra={"order_id": order_id, "installment_count": count, "paid_cents": paid},
        )
        return await self._reload(order_id)

    async def add_payment(self, order_id: str, value_cents: Any, payment_date: Any) -> Order:
        """
        Validate and append a payment, then return the store's recomputed order.

        Raises:
            ValidationError: before any store call, for a non-positive value or bad date
            StoreAPIError: the store call failed; cached state is unchanged
        """
        payment = validate_payment(value_cents, payment_date)
        await self.store.append_payment(order_id, payment)
        logger.info(
            "Payment recorded",
            extra={"order_id": order_id, "value_cents": payment.value_cents, "payment_date": payment.date.isoformat()},
        )
        return await self._reload(order_id)

    async def remove_payment(self, order_id: str, payment_id: str) -> Order:
        """Delete a payment by id, then return the store's recomputed order"""
        if not payment_id:
            raise ValidationError("Payment id is required")
        await self.store.delete_payment(order_id, payment_id)
        logger.info("Payment removed", extra={"order_id": order_id, "payment_id": payment_id})
        return await self._reload(order_id)
