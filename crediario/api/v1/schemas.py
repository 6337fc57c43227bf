"""Pydantic schemas for API request/response validation"""

import math
from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from crediario.domain.models import DueResolution, Installment, Order, OrderSummary, PortfolioStats


class InstallmentPreviewRequest(BaseModel):
    """Request body for POST /v1/installments/preview"""

    total_cents: int = Field(..., ge=0, description="Order total in cents")
    count: int = Field(..., description="Number of installments")
    due_dates: Optional[List[Optional[str]]] = Field(
        default=None, description="One ISO date per installment; blanks fall back to monthly defaults"
    )
    already_paid_cents: int = Field(default=0, ge=0, description="Amount paid to date in cents")


class ScheduleRequest(BaseModel):
    """Request body for PUT /v1/orders/{order_id}/schedule"""

    count: int = Field(..., description="Number of installments")
    due_dates: List[Optional[str]] = Field(..., description="One ISO date per installment")


class PaymentRequest(BaseModel):
    """Request body for POST /v1/orders/{order_id}/payments"""

    date: str = Field(..., description="Payment date (ISO-8601)")
    value_cents: Optional[int] = Field(default=None, description="Payment value in cents")
    amount: Optional[Decimal] = Field(default=None, description="Payment value in whole currency units")

    @model_validator(mode="after")
    def one_value(self) -> "PaymentRequest":
        if (self.value_cents is None) == (self.amount is None):
            raise ValueError("Provide exactly one of value_cents or amount")
        return self


class InstallmentSchema(BaseModel):
    """Single installment in a schedule"""

    number: int
    due_date: Optional[date]
    amount_cents: int
    status: str

    @classmethod
    def from_domain(cls, installment: Installment) -> "InstallmentSchema":
        return cls(
            number=installment.number,
            due_date=installment.due_date,
            amount_cents=installment.amount_cents,
            status=installment.status.value,
        )


class PaymentSchema(BaseModel):
    """Single entry in a payment history"""

    id: Optional[str] = None
    date: Optional[date]
    value_cents: int


class DueResponse(BaseModel):
    """Next due point of an order; days_until_due is null when nothing is due"""

    candidate_date: Optional[date]
    days_until_due: Optional[int]
    overdue: bool
    days_overdue: int
    next_installment_number: Optional[int] = None

    @classmethod
    def from_domain(cls, resolution: DueResolution) -> "DueResponse":
        days = resolution.days_until_due
        return cls(
            candidate_date=resolution.candidate_date,
            days_until_due=None if math.isinf(days) else int(days),
            overdue=resolution.overdue,
            days_overdue=resolution.days_overdue,
            next_installment_number=resolution.next_installment_number,
        )


class InstallmentPreviewResponse(BaseModel):
    """Response for POST /v1/installments/preview"""

    total_cents: int
    installments: List[InstallmentSchema]
    paid_installments: int


class OrderResponse(BaseModel):
    """Order as read back from the store"""

    order_id: str
    customer_id: Optional[str] = None
    total_cents: int
    paid_cents: int
    remaining_cents: int
    legacy_due_day: Optional[int] = None
    installments: List[InstallmentSchema]
    payment_history: List[PaymentSchema]
    created_at: Optional[str] = None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        return cls(
            order_id=order.id,
            customer_id=order.customer_id,
            total_cents=order.total_cents,
            paid_cents=order.paid_cents,
            remaining_cents=order.remaining_cents,
            legacy_due_day=order.legacy_due_day,
            installments=[InstallmentSchema.from_domain(i) for i in order.installments],
            payment_history=[
                PaymentSchema(id=p.id, date=p.date, value_cents=p.value_cents) for p in order.payment_history
            ],
            created_at=order.created_at.isoformat() if order.created_at else None,
        )


class RankedOrderItem(BaseModel):
    """Order list entry with its next due point"""

    order_id: str
    customer_id: Optional[str] = None
    total_cents: int
    remaining_cents: int
    settled: bool
    due: DueResponse


class OrderListResponse(BaseModel):
    """Response for GET /v1/orders"""

    sort: str
    orders: List[RankedOrderItem]


class OrderSummaryResponse(BaseModel):
    """Response for GET /v1/orders/{order_id}/summary"""

    order_id: str
    total_cents: int
    total_paid_cents: int
    amount_due_cents: int
    amount_due_display: str
    last_payment_date: Optional[date]
    paid_installments: int
    installments: List[InstallmentSchema]
    next_due: DueResponse

    @classmethod
    def from_domain(cls, summary: OrderSummary, amount_due_display: str) -> "OrderSummaryResponse":
        return cls(
            order_id=summary.order_id,
            total_cents=summary.total_cents,
            total_paid_cents=summary.total_paid_cents,
            amount_due_cents=summary.amount_due_cents,
            amount_due_display=amount_due_display,
            last_payment_date=summary.last_payment_date,
            paid_installments=summary.paid_installments,
            installments=[InstallmentSchema.from_domain(i) for i in summary.installments],
            next_due=DueResponse.from_domain(summary.next_due),
        )


class PortfolioStatsResponse(BaseModel):
    """Response for GET /v1/orders/stats"""

    order_count: int
    total_revenue_cents: int
    average_order_cents: int
    pending_revenue_cents: int
    settled_count: int
    overdue_count: int

    @classmethod
    def from_domain(cls, stats: PortfolioStats) -> "PortfolioStatsResponse":
        return cls(
            order_count=stats.order_count,
            total_revenue_cents=stats.total_revenue_cents,
            average_order_cents=stats.average_order_cents,
            pending_revenue_cents=stats.pending_revenue_cents,
            settled_count=stats.settled_count,
            overdue_count=stats.overdue_count,
        )
