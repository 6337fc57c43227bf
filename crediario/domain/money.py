"""Money conversions - every amount inside the engine is integer cents"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from crediario.domain.exceptions import InvalidAmountError

Amount = Union[Decimal, str, int, float]

CENT = Decimal("0.01")


def to_cents(amount: Amount) -> int:
    """
    Convert a human-entered amount in whole currency units to cents.

    Floats go through their shortest repr so 19.9 stays 19.9 instead of
    19.899999.... Rounds half away from zero on the multiply-by-100 step.

    Example:
        "19.90" -> 1990, "0.005" -> 1, "-0.005" -> -1
    """
    if isinstance(amount, bool):
        raise InvalidAmountError(f"Invalid amount: {amount!r}")
    if isinstance(amount, str):
        amount = amount.strip().replace(",", ".")
    elif isinstance(amount, float):
        amount = repr(amount)

    try:
        value = Decimal(amount)
    except (InvalidOperation, ValueError, TypeError) as e:
        raise InvalidAmountError(f"Invalid amount: {amount!r}") from e

    if not value.is_finite():
        raise InvalidAmountError(f"Invalid amount: {amount!r}")

    return int((value * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    """Cents -> amount in whole currency units with two decimal places"""
    return (Decimal(cents) / 100).quantize(CENT)


def format_cents(cents: int) -> str:
    """Printable amount, e.g. 1990 -> '19.90'"""
    return str(from_cents(cents))


def format_brl(cents: int) -> str:
    """Brazilian real display format, e.g. 123456 -> 'R$ 1.234,56'"""
    sign = "-" if cents < 0 else ""
    units, rest = divmod(abs(cents), 100)
    grouped = f"{units:,}".replace(",", ".")
    return f"{sign}R$ {grouped},{rest:02d}"
