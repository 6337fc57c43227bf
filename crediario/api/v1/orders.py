"""Order endpoints - due dates, urgency ranking, schedule rebuilds and payments"""

import logging
import time
from typing import Literal, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from crediario.api.dependencies import get_order_service, get_request_id
from crediario.api.v1.schemas import (
    DueResponse,
    OrderListResponse,
    OrderResponse,
    OrderSummaryResponse,
    PaymentRequest,
    PortfolioStatsResponse,
    RankedOrderItem,
    ScheduleRequest,
)
from crediario.domain.due_dates import resolve_next_due
from crediario.domain.exceptions import ValidationError
from crediario.domain.installments import strict_due_dates
from crediario.domain.money import format_brl, to_cents
from crediario.domain.orders import OrderService
from crediario.domain.ranking import rank_with_resolutions, sort_orders
from crediario.domain.reports import portfolio_stats, summarize_order
from crediario.infrastructure.observability.logging import log_ledger_event
from crediario.infrastructure.observability.metrics import (
    record_payment,
    record_ranking,
    schedule_rebuild_counter,
    validation_failure_counter,
)

router = APIRouter()


def _reject(e: ValidationError, request_id: str) -> NoReturn:
    """Input refused before any store call; store errors go to the app-level handler"""
    validation_failure_counter.labels(kind=type(e).__name__).inc()
    logging.warning(f"Validation error: {e}", extra={"request_id": request_id})
    raise HTTPException(status_code=422, detail=str(e))


@router.get("/orders", response_model=OrderListResponse)
async def list_orders(
    sort: Literal["due", "date"] = Query("due", description="'due' ranks by urgency, 'date' lists newest first"),
    service: OrderService = Depends(get_order_service),
):
    """
    List orders with their next due point.

    sort=due: overdue orders first (most overdue on top), then soonest due,
    fully paid orders last. sort=date: newest order first.
    """
    orders = await service.list_orders()

    ranked = rank_with_resolutions(orders)
    record_ranking(ranked)

    if sort == "date":
        pairs = [(order, resolve_next_due(order)) for order in sort_orders(orders, by_due=False)]
    else:
        pairs = ranked

    return OrderListResponse(
        sort=sort,
        orders=[
            RankedOrderItem(
                order_id=order.id,
                customer_id=order.customer_id,
                total_cents=order.total_cents,
                remaining_cents=order.remaining_cents,
                settled=order.is_settled,
                due=DueResponse.from_domain(resolution),
            )
            for order, resolution in pairs
        ],
    )


@router.get("/orders/stats", response_model=PortfolioStatsResponse)
async def get_portfolio_stats(service: OrderService = Depends(get_order_service)):
    """Revenue, average order value and pending revenue over all orders"""
    orders = await service.list_orders()
    return PortfolioStatsResponse.from_domain(portfolio_stats(orders))


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, service: OrderService = Depends(get_order_service)):
    """Order as currently stored"""
    order = await service.get_order(order_id)
    return OrderResponse.from_domain(order)


@router.get("/orders/{order_id}/due", response_model=DueResponse)
async def get_next_due(order_id: str, service: OrderService = Depends(get_order_service)):
    """Next unpaid due date, days until due and days overdue"""
    order = await service.get_order(order_id)
    return DueResponse.from_domain(resolve_next_due(order))


@router.get("/orders/{order_id}/summary", response_model=OrderSummaryResponse)
async def get_order_summary(order_id: str, service: OrderService = Depends(get_order_service)):
    """Bill view: paid to date, amount due, last payment and installments with read-time lateness"""
    order = await service.get_order(order_id)
    summary = summarize_order(order)
    return OrderSummaryResponse.from_domain(summary, format_brl(summary.amount_due_cents))


@router.put("/orders/{order_id}/schedule", response_model=OrderResponse)
async def reschedule_order(
    order_id: str,
    request_body: ScheduleRequest,
    request: Request,
    service: OrderService = Depends(get_order_service),
):
    """
    Rebuild the installment schedule and replace it in the store.

    Flow:
    1. Validate count and every due date locally
    2. Re-read the order and rebuild installments from its full payment history
    3. Send the whole list to the store (no partial patch)
    4. Return the order as re-read from the store
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        due_dates = strict_due_dates(request_body.due_dates, request_body.count)
        order = await service.reschedule(order_id, request_body.count, due_dates)
    except ValidationError as e:
        _reject(e, request_id)

    schedule_rebuild_counter.inc()
    duration_ms = (time.time() - start_time) * 1000
    log_ledger_event(request_id, order_id, "schedule_replaced", duration_ms, remaining_cents=order.remaining_cents)
    return OrderResponse.from_domain(order)


@router.post("/orders/{order_id}/payments", response_model=OrderResponse, status_code=201)
async def add_payment(
    order_id: str,
    request_body: PaymentRequest,
    request: Request,
    service: OrderService = Depends(get_order_service),
):
    """
    Record a payment against an order.

    Rejected locally (422, no store call) for a non-positive value or a bad
    date. The response is the order re-read from the store after the append.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        if request_body.value_cents is not None:
            value_cents = request_body.value_cents
        else:
            value_cents = to_cents(request_body.amount)
        order = await service.add_payment(order_id, value_cents, request_body.date)
    except ValidationError as e:
        _reject(e, request_id)

    record_payment("recorded", value_cents)
    duration_ms = (time.time() - start_time) * 1000
    log_ledger_event(
        request_id, order_id, "payment_recorded", duration_ms,
        value_cents=value_cents, remaining_cents=order.remaining_cents,
    )
    return OrderResponse.from_domain(order)


@router.delete("/orders/{order_id}/payments/{payment_id}", response_model=OrderResponse)
async def remove_payment(
    order_id: str,
    payment_id: str,
    request: Request,
    service: OrderService = Depends(get_order_service),
):
    """Delete a payment; the response is the order re-read from the store"""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        order = await service.remove_payment(order_id, payment_id)
    except ValidationError as e:
        _reject(e, request_id)

    record_payment("removed")
    duration_ms = (time.time() - start_time) * 1000
    log_ledger_event(request_id, order_id, "payment_removed", duration_ms, remaining_cents=order.remaining_cents)
    return OrderResponse.from_domain(order)
