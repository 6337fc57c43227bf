"""Unit tests for bill summaries and portfolio statistics"""

from datetime import date

from crediario.domain.models import Installment, InstallmentStatus, Payment
from crediario.domain.reports import portfolio_stats, summarize_order

NOW = date(2025, 3, 15)
PAID = InstallmentStatus.PAID
PENDING = InstallmentStatus.PENDING


def test_summarize_order(order_factory):
    order = order_factory(
        total_cents=1000,
        installments=[
            Installment(1, date(2025, 2, 10), 334, PAID),
            Installment(2, date(2025, 3, 10), 333, PENDING),
            Installment(3, date(2025, 4, 10), 333, PENDING),
        ],
        payments=[Payment(date(2025, 2, 8), 400, "p1")],
    )

    summary = summarize_order(order, NOW)

    assert summary.total_paid_cents == 400
    assert summary.amount_due_cents == 600
    assert summary.last_payment_date == date(2025, 2, 8)
    assert summary.paid_installments == 1
    assert [inst.status for inst in summary.installments] == [PAID, InstallmentStatus.LATE, PENDING]
    assert summary.next_due.next_installment_number == 2
    assert summary.next_due.days_overdue == 5


def test_summarize_order_without_payments(order_factory):
    summary = summarize_order(order_factory(total_cents=500, legacy_due_day=20), NOW)

    assert summary.total_paid_cents == 0
    assert summary.amount_due_cents == 500
    assert summary.last_payment_date is None
    assert summary.next_due.candidate_date == date(2025, 3, 20)


def test_portfolio_stats(order_factory):
    orders = [
        order_factory("a", total_cents=1000, payments=[Payment(date(2025, 1, 5), 1000, "p1")]),
        order_factory("b", total_cents=2001, installments=[Installment(1, date(2025, 3, 1), 2001, PENDING)]),
        order_factory("c", total_cents=3000, paid_cents=500, legacy_due_day=28),
    ]

    stats = portfolio_stats(orders, NOW)

    assert stats.order_count == 3
    assert stats.total_revenue_cents == 6001
    assert stats.average_order_cents == 2000
    assert stats.pending_revenue_cents == 2001 + 2500
    assert stats.settled_count == 1
    assert stats.overdue_count == 1


def test_portfolio_average_rounds_half_up(order_factory):
    orders = [order_factory("a", total_cents=1), order_factory("b", total_cents=2)]

    assert portfolio_stats(orders, NOW).average_order_cents == 2


def test_portfolio_stats_empty():
    stats = portfolio_stats([], NOW)

    assert stats.order_count == 0
    assert stats.average_order_cents == 0
    assert stats.pending_revenue_cents == 0
