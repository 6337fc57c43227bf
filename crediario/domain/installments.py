"""Installment schedule generation for credit-sale orders"""

from datetime import date
from typing import Any, List, Optional, Sequence

from crediario.config import settings
from crediario.domain.exceptions import InvalidDueDateError, InvalidInstallmentCountError
from crediario.domain.models import Installment, InstallmentStatus
from crediario.utils.date_utils import add_months, calendar_today, parse_calendar_date


def default_due_dates(count: int, today: date) -> List[date]:
    """One due date per month starting today: today, today + 1 month, ..."""
    return [add_months(today, i) for i in range(count)]


def resize_due_dates(dates: Sequence[Any], count: int, today: date) -> List[Any]:
    """
    Fit an existing list of due dates to a new installment count.

    Existing entries are kept in place; new slots default to today + index
    months; surplus entries are dropped.
    """
    resized = list(dates[:count])
    for i in range(len(resized), count):
        resized.append(add_months(today, i))
    return resized


def strict_due_dates(dates: Optional[Sequence[Any]], count: int) -> List[date]:
    """
    Validate user-entered due dates before an order is submitted.

    Raises:
        InvalidInstallmentCountError: count is not a positive integer
        InvalidDueDateError: list length differs from count, or any entry is
            missing or unparseable
    """
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise InvalidInstallmentCountError(f"Installment count must be a positive integer, got {count!r}")
    if dates is None or len(dates) != count:
        raise InvalidDueDateError(f"Expected {count} due dates, got {0 if dates is None else len(dates)}")

    parsed = []
    for index, raw in enumerate(dates, start=1):
        due = parse_calendar_date(raw)
        if due is None:
            raise InvalidDueDateError(f"Installment {index} has an invalid due date: {raw!r}")
        parsed.append(due)
    return parsed


def split_amount(total_cents: int, count: int) -> List[int]:
    """
    Split a total into count integer amounts that add up exactly.

    The first (total % count) installments carry one extra cent.

    Example:
        1000 cents / 3 -> [334, 333, 333]
    """
    base = total_cents // count
    remainder = total_cents - base * count
    return [base + 1 if i < remainder else base for i in range(count)]


def build_installments(
    total_cents: int,
    count: int,
    explicit_dates: Optional[Sequence[Any]] = None,
    already_paid_cents: int = 0,
    today: Optional[date] = None,
) -> List[Installment]:
    """
    Build the full installment schedule for an order.

    Requirements:
    - Amounts sum exactly to total_cents, extra cents go to the earliest installments
    - explicit_dates, if given, has one entry per installment; missing or
      unparseable entries fall back to today + index months
    - Leading installments are marked paid while already_paid_cents covers them;
      the rest are pending (lateness is decided at read time, never here)

    Always rebuilt from scratch: the result depends only on the arguments.

    Args:
        total_cents: Order total
        count: Number of installments (>= 1)
        explicit_dates: Optional due date per installment (date, datetime or ISO string)
        already_paid_cents: Amount paid to date, consumed in installment order
        today: Reference date for default due dates (default: today in the business timezone)

    Returns:
        Installments numbered 1..count

    Example:
        build_installments(1000, 3, already_paid_cents=400)
        -> 334 paid, 333 pending, 333 pending (66 cents left over)
    """
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise InvalidInstallmentCountError(f"Installment count must be a positive integer, got {count!r}")
    if total_cents < 0:
        raise ValueError(f"total_cents must be >= 0, got {total_cents}")
    if explicit_dates is not None and len(explicit_dates) != count:
        raise InvalidDueDateError(f"Expected {count} due dates, got {len(explicit_dates)}")

    if today is None:
        today = calendar_today(tz_name=settings.business_timezone)

    fallback_dates = default_due_dates(count, today)
    installments = []
    for i, amount in enumerate(split_amount(total_cents, count)):
        due_date = parse_calendar_date(explicit_dates[i]) if explicit_dates is not None else None
        installments.append(
            Installment(number=i + 1, due_date=due_date or fallback_dates[i], amount_cents=amount)
        )

    return apply_paid_amount(installments, already_paid_cents)


def apply_paid_amount(installments: Sequence[Installment], paid_cents: int) -> List[Installment]:
    """Re-derive paid/pending for an existing schedule from the amount paid to date"""
    budget = max(0, paid_cents)
    result = []
    for inst in sorted(installments, key=lambda item: item.number):
        if budget >= inst.amount_cents:
            budget -= inst.amount_cents
            status = InstallmentStatus.PAID
        else:
            status = InstallmentStatus.PENDING
        result.append(Installment(inst.number, inst.due_date, inst.amount_cents, status))
    return result


def count_paid(installments: Sequence[Installment]) -> int:
    """Number of installments marked paid"""
    return sum(1 for inst in installments if inst.is_paid)


def check_schedule_total(installments: Sequence[Installment], total_cents: int) -> None:
    """Installment amounts must add up to the order total; a mismatch is a bug, not bad input"""
    scheduled = sum(inst.amount_cents for inst in installments)
    assert scheduled == total_cents, f"installments sum to {scheduled}, order total is {total_cents}"
