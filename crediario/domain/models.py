"""Domain models - immutable snapshots of orders read from the store"""

import enum
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple


class InstallmentStatus(enum.Enum):
    """Installment state; values are the store's wire strings"""

    PENDING = "pendente"
    PAID = "pago"
    LATE = "atrasado"

    @classmethod
    def parse(cls, raw: object) -> "InstallmentStatus":
        """Lenient read of stored status strings: anything mentioning "pago"/"paga" is paid"""
        text = str(raw or "").strip().lower()
        if "pago" in text or "paga" in text or text == "paid":
            return cls.PAID
        if "atrasad" in text or text == "late":
            return cls.LATE
        return cls.PENDING


@dataclass(frozen=True)
class Installment:
    """Single scheduled payment of an order's total"""

    number: int
    due_date: Optional[date]  # None when the stored value does not parse
    amount_cents: int
    status: InstallmentStatus = InstallmentStatus.PENDING

    @property
    def is_paid(self) -> bool:
        return self.status is InstallmentStatus.PAID


@dataclass(frozen=True)
class Payment:
    """Entry in an order's payment history"""

    date: Optional[date]  # None when the stored value does not parse
    value_cents: int
    id: Optional[str] = None  # assigned by the store


@dataclass(frozen=True)
class Order:
    """Credit-sale order as last fetched from the store"""

    id: str
    total_cents: int
    installments: Tuple[Installment, ...] = ()
    legacy_due_day: Optional[int] = None
    payment_history: Tuple[Payment, ...] = ()
    paid_cents: int = 0  # cached by the store, may be stale
    customer_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def remaining_cents(self) -> int:
        return max(0, self.total_cents - self.paid_cents)

    @property
    def is_settled(self) -> bool:
        return self.remaining_cents == 0


@dataclass(frozen=True)
class DueResolution:
    """Next unpaid due point of an order relative to today"""

    candidate_date: Optional[date]
    days_until_due: float  # math.inf when there is no candidate
    overdue: bool
    days_overdue: int
    next_installment_number: Optional[int] = None

    @property
    def has_candidate(self) -> bool:
        return self.candidate_date is not None


NO_CANDIDATE = DueResolution(
    candidate_date=None,
    days_until_due=math.inf,
    overdue=False,
    days_overdue=0,
)


@dataclass(frozen=True)
class OrderSummary:
    """Payment position of one order, as shown on its bill"""

    order_id: str
    total_cents: int
    total_paid_cents: int
    amount_due_cents: int
    last_payment_date: Optional[date]
    paid_installments: int
    installments: Tuple[Installment, ...]
    next_due: DueResolution


@dataclass(frozen=True)
class PortfolioStats:
    """Aggregates over a list of orders"""

    order_count: int
    total_revenue_cents: int
    average_order_cents: int
    pending_revenue_cents: int
    settled_count: int = 0
    overdue_count: int = 0
