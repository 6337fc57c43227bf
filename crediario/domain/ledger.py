"""Payment ledger rules - validation and totals over an order's payment history"""

from datetime import date, datetime
from typing import Any, Iterable, Optional

from crediario.config import settings
from crediario.domain.exceptions import InvalidDueDateError, InvalidPaymentValueError
from crediario.domain.models import Order, Payment
from crediario.utils.date_utils import parse_calendar_date, to_neutral_timestamp


def validate_payment(value_cents: Any, payment_date: Any, payment_id: Optional[str] = None) -> Payment:
    """
    Check a payment entry before it is sent to the store.

    Raises:
        InvalidPaymentValueError: value is not a positive integer number of cents
        InvalidDueDateError: date is missing or does not parse
    """
    if isinstance(value_cents, bool) or not isinstance(value_cents, int) or value_cents <= 0:
        raise InvalidPaymentValueError(f"Payment value must be a positive number of cents, got {value_cents!r}")

    parsed = parse_calendar_date(payment_date)
    if parsed is None:
        raise InvalidDueDateError(f"Invalid payment date: {payment_date!r}")

    return Payment(date=parsed, value_cents=value_cents, id=payment_id)


def normalize_payment_date(day: date) -> datetime:
    """Payment date as a UTC timestamp at the neutral hour, safe across timezones"""
    return to_neutral_timestamp(day, settings.neutral_hour_utc)


def total_paid(history: Iterable[Payment]) -> int:
    """Sum of all recorded payments"""
    return sum(payment.value_cents for payment in history)


def amount_due(order: Order) -> int:
    """What is still owed according to the payment history (never negative)"""
    return max(0, order.total_cents - total_paid(order.payment_history))


def last_payment_date(history: Iterable[Payment]) -> Optional[date]:
    """Most recent payment date, None when nothing was paid"""
    return max((payment.date for payment in history if payment.date is not None), default=None)


def paid_in_month(history: Iterable[Payment], year: int, month: int) -> bool:
    """Whether any payment, of any amount, was recorded in the given calendar month"""
    return any(p.date is not None and p.date.year == year and p.date.month == month for p in history)
