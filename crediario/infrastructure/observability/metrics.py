"""Prometheus metrics for ledger activity, collection urgency and store latency"""

from typing import Iterable, Tuple

from prometheus_client import Counter, Gauge, Histogram

from crediario.domain.models import DueResolution, Order

# Ledger metrics
payment_counter = Counter(
    "crediario_payments_total",
    "Payments applied to orders",
    ["action"],  # recorded | removed
)

payment_value_histogram = Histogram(
    "crediario_payment_value_cents",
    "Value of recorded payments in cents",
    buckets=[1_000, 5_000, 10_000, 50_000, 100_000, 500_000],
)

schedule_rebuild_counter = Counter(
    "crediario_schedule_rebuilds_total",
    "Installment schedules rebuilt and replaced in the store",
)

validation_failure_counter = Counter(
    "crediario_validation_failures_total",
    "Requests rejected locally before reaching the store",
    ["kind"],
)

# Collection urgency, refreshed on every ranking
overdue_orders_gauge = Gauge(
    "crediario_overdue_orders",
    "Unsettled orders past their next due date at the last ranking",
)

pending_revenue_gauge = Gauge(
    "crediario_pending_revenue_cents",
    "Sum of remaining balances at the last ranking",
)

# Store API metrics
store_latency_histogram = Histogram(
    "store_request_latency_seconds",
    "Order store response time",
    ["operation"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

store_failure_counter = Counter(
    "store_failures_total",
    "Failed order store calls",
    ["operation"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_payment(action: str, value_cents: int | None = None) -> None:
    """Count a ledger mutation; value is only tracked for recorded payments"""
    payment_counter.labels(action=action).inc()
    if value_cents is not None:
        payment_value_histogram.observe(value_cents)


def record_ranking(ranked: Iterable[Tuple[Order, DueResolution]]) -> None:
    """Refresh the urgency gauges from a ranked order list"""
    overdue = 0
    pending = 0
    for order, resolution in ranked:
        pending += order.remaining_cents
        if resolution.overdue and not order.is_settled:
            overdue += 1

    overdue_orders_gauge.set(overdue)
    pending_revenue_gauge.set(pending)
