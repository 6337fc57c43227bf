"""Urgency ranking - order lists sorted so the most overdue collections come first"""

import logging
from datetime import date, datetime, timezone
from typing import Iterable, List, Tuple

from crediario.config import settings
from crediario.domain.due_dates import resolve_next_due
from crediario.domain.models import DueResolution, Order
from crediario.utils.date_utils import calendar_today

logger = logging.getLogger(__name__)

# Orders without a date sort after dated ones
_NO_DATE = datetime.max.replace(tzinfo=timezone.utc)


def _order_date(order: Order) -> datetime:
    return order.created_at or _NO_DATE


def urgency_key(order: Order, resolution: DueResolution) -> Tuple:
    """
    Sort key for one order.

    Ranking rules:
    1. Unsettled orders before settled ones
    2. Settled orders: oldest order date first
    3. Unsettled: overdue before not overdue
    4. Overdue: most days overdue first
    5. Not overdue: fewest days until due first (no due date sorts last)
    6. Ties: oldest order date first
    """
    if order.is_settled:
        return (1, 0, 0, _order_date(order))
    if resolution.overdue:
        return (0, 0, -resolution.days_overdue, _order_date(order))
    return (0, 1, resolution.days_until_due, _order_date(order))


def rank_with_resolutions(
    orders: Iterable[Order], now: date | datetime | None = None
) -> List[Tuple[Order, DueResolution]]:
    """Resolve every order once and return (order, resolution) pairs in urgency order"""
    today = calendar_today(now, settings.business_timezone)
    resolved = [(order, resolve_next_due(order, today)) for order in orders]
    # sorted() is stable, so fully tied orders keep their input order
    ranked = sorted(resolved, key=lambda pair: urgency_key(*pair))

    overdue = sum(1 for order, res in ranked if res.overdue and not order.is_settled)
    logger.debug("Ranked %d orders, %d overdue", len(ranked), overdue)
    return ranked


def rank_by_urgency(orders: Iterable[Order], now: date | datetime | None = None) -> List[Order]:
    """Orders sorted by payment urgency; fully paid orders always last"""
    return [order for order, _ in rank_with_resolutions(orders, now)]


def sort_orders(orders: Iterable[Order], now: date | datetime | None = None, by_due: bool = False) -> List[Order]:
    """Order list view: newest first by default, urgency ranking when by_due is set"""
    if by_due:
        return rank_by_urgency(orders, now)
    return sorted(orders, key=_order_date_desc)


def _order_date_desc(order: Order) -> Tuple[int, float]:
    if order.created_at is None:
        return (1, 0.0)
    return (0, -order.created_at.timestamp())
