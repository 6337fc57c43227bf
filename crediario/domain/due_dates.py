"""Next-due resolution - which installment (or monthly cycle) an order owes next"""

from datetime import date, datetime
from typing import Callable, List, Optional

from crediario.config import settings
from crediario.domain.ledger import paid_in_month
from crediario.domain.models import NO_CANDIDATE, DueResolution, Installment, InstallmentStatus, Order
from crediario.utils.date_utils import calendar_today, clamp_day, next_month


def _measure(candidate: date, today: date, installment_number: Optional[int] = None) -> DueResolution:
    """Day distance between a due date and today; all math on calendar dates"""
    diff_days = (candidate - today).days
    overdue = candidate < today
    return DueResolution(
        candidate_date=candidate,
        days_until_due=max(0, diff_days),
        overdue=overdue,
        days_overdue=-diff_days if overdue else 0,
        next_installment_number=installment_number,
    )


def resolve_explicit(order: Order, today: date) -> DueResolution:
    """Earliest unpaid installment with a valid due date (ties by installment number)"""
    open_installments = [
        inst for inst in order.installments
        if inst.status is not InstallmentStatus.PAID and inst.due_date is not None
    ]
    if not open_installments:
        return NO_CANDIDATE

    nearest = min(open_installments, key=lambda inst: (inst.due_date, inst.number))
    return _measure(nearest.due_date, today, nearest.number)


def resolve_legacy(order: Order, today: date) -> DueResolution:
    """
    Recurring day-of-month schedule for orders without explicit installments.

    - The due day is clamped to the month's last day (31 -> 30 in April)
    - Any payment this calendar month settles the current cycle, so the
      candidate moves to next month's due day
    - Otherwise the current month's due day is used even if it has passed,
      which reports the cycle as overdue
    """
    day = order.legacy_due_day
    if paid_in_month(order.payment_history, today.year, today.month):
        year, month = next_month(today.year, today.month)
        candidate = clamp_day(year, month, day)
    else:
        candidate = clamp_day(today.year, today.month, day)
    return _measure(candidate, today)


def _pick_strategy(order: Order) -> Optional[Callable[[Order, date], DueResolution]]:
    if order.installments:
        return resolve_explicit
    if order.legacy_due_day is not None and 1 <= order.legacy_due_day <= 31:
        return resolve_legacy
    return None


def resolve_next_due(order: Order, now: date | datetime | None = None) -> DueResolution:
    """
    Find the order's next unpaid due point.

    Args:
        order: Order snapshot
        now: Current date or datetime (default: today in the business timezone)

    Returns:
        DueResolution; candidate_date is None and days_until_due is infinite
        when nothing is due
    """
    strategy = _pick_strategy(order)
    if strategy is None:
        return NO_CANDIDATE
    return strategy(order, calendar_today(now, settings.business_timezone))


def with_read_time_status(order: Order, now: date | datetime | None = None) -> List[Installment]:
    """Installments as displayed: unpaid ones read as late once their due date has passed"""
    today = calendar_today(now, settings.business_timezone)
    displayed = []
    for inst in order.installments:
        if not inst.is_paid:
            late = inst.due_date is not None and inst.due_date < today
            status = InstallmentStatus.LATE if late else InstallmentStatus.PENDING
            inst = Installment(inst.number, inst.due_date, inst.amount_cents, status)
        displayed.append(inst)
    return displayed
