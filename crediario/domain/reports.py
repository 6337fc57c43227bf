"""Read-side views: per-order bill summary and portfolio statistics"""

from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

from crediario.domain.due_dates import resolve_next_due, with_read_time_status
from crediario.domain.installments import count_paid
from crediario.domain.ledger import amount_due, last_payment_date, total_paid
from crediario.domain.models import Order, OrderSummary, PortfolioStats


def summarize_order(order: Order, now: date | datetime | None = None) -> OrderSummary:
    """Payment position of an order; totals come from the payment history, not the cached paid_cents"""
    return OrderSummary(
        order_id=order.id,
        total_cents=order.total_cents,
        total_paid_cents=total_paid(order.payment_history),
        amount_due_cents=amount_due(order),
        last_payment_date=last_payment_date(order.payment_history),
        paid_installments=count_paid(order.installments),
        installments=tuple(with_read_time_status(order, now)),
        next_due=resolve_next_due(order, now),
    )


def portfolio_stats(orders: Sequence[Order], now: date | datetime | None = None) -> PortfolioStats:
    """
    Totals for the order list header.

    - total revenue: sum of order totals
    - average order value: rounded half away from zero to the cent
    - pending revenue: sum of what is still owed (order total - cached paid)
    """
    total_revenue = sum(order.total_cents for order in orders)
    average = 0
    if orders:
        average = int((Decimal(total_revenue) / len(orders)).quantize(Decimal(1), rounding=ROUND_HALF_UP))

    overdue = 0
    for order in orders:
        if not order.is_settled and resolve_next_due(order, now).overdue:
            overdue += 1

    return PortfolioStats(
        order_count=len(orders),
        total_revenue_cents=total_revenue,
        average_order_cents=average,
        pending_revenue_cents=sum(order.remaining_cents for order in orders),
        settled_count=sum(1 for order in orders if order.is_settled),
        overdue_count=overdue,
    )
