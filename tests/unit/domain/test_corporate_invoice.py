"""Unit tests for CorporateInvoice domain rules"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from src.domain.corporate_invoice import (
    AlreadyPaid,
    InvoiceStatus,
    build_invoice_number,
    compute_invoice_totals,
    mark_invoice_paid,
    refresh_totals,
    totals_for,
    transition_invoice,
)
from src.domain.order import InvalidTransition
from tests.fixtures.factories import make_invoice


class TestInvoiceTotals:
    def test_vat_is_added_on_top_of_subtotal(self):
        totals = compute_invoice_totals([Decimal("100.00"), Decimal("50.00")], Decimal("0.20"))

        assert totals.subtotal == Decimal("150.00")
        assert totals.vat_amount == Decimal("30.00")
        assert totals.total_amount == Decimal("180.00")

    def test_vat_rounds_half_up(self):
        totals = compute_invoice_totals([Decimal("0.125")], Decimal("0.20"))

        assert totals.subtotal == Decimal("0.13")
        assert totals.vat_amount == Decimal("0.03")
        assert totals.total_amount == Decimal("0.16")

    def test_total_is_subtotal_plus_vat(self):
        totals = compute_invoice_totals([Decimal("33.33"), Decimal("66.67"), Decimal("10.01")], Decimal("0.20"))

        assert totals.total_amount == totals.subtotal + totals.vat_amount
        assert totals.vat_amount == Decimal("22.00")

    def test_recomputing_is_idempotent(self):
        invoice = make_invoice(amounts=["19.99", "0.01", "45.55"])

        first = refresh_totals(invoice)
        second = refresh_totals(invoice)

        assert first == second
        assert invoice.total_amount == first.total_amount

    def test_empty_invoice_totals_are_zero(self):
        totals = compute_invoice_totals([], Decimal("0.20"))

        assert totals.total_amount == Decimal("0.00")


class TestInvoiceTransitions:
    def test_sending_sets_issue_and_due_dates(self):
        invoice = make_invoice(status=InvoiceStatus.DRAFT)
        at = datetime(2024, 2, 1, 8, 0, 0)

        transition_invoice(invoice, InvoiceStatus.SENT, at=at, payment_term_days=30)

        assert invoice.status == InvoiceStatus.SENT
        assert invoice.issued_at == at
        assert invoice.due_date == at + timedelta(days=30)

    def test_paying_sets_paid_at(self):
        invoice = make_invoice(status=InvoiceStatus.OVERDUE)
        paid_at = datetime(2024, 3, 10)

        mark_invoice_paid(invoice, paid_at)

        assert invoice.status == InvoiceStatus.PAID
        assert invoice.paid_at == paid_at

    def test_paying_twice_raises_already_paid_without_change(self):
        invoice = make_invoice(status=InvoiceStatus.SENT)
        first_paid_at = datetime(2024, 2, 15)
        mark_invoice_paid(invoice, first_paid_at)

        with pytest.raises(AlreadyPaid):
            mark_invoice_paid(invoice, datetime(2024, 2, 20))

        assert invoice.paid_at == first_paid_at
        assert invoice.status == InvoiceStatus.PAID

    @pytest.mark.parametrize(
        "current,requested",
        [
            (InvoiceStatus.DRAFT, InvoiceStatus.PAID),
            (InvoiceStatus.PAID, InvoiceStatus.SENT),
            (InvoiceStatus.OVERDUE, InvoiceStatus.SENT),
            (InvoiceStatus.SENT, InvoiceStatus.DRAFT),
        ],
    )
    def test_unreachable_status_is_rejected(self, current, requested):
        invoice = make_invoice(status=current)

        with pytest.raises(InvalidTransition):
            transition_invoice(invoice, requested)

        assert invoice.status == current


class TestOverdue:
    def test_sent_invoice_past_due_is_overdue(self):
        invoice = make_invoice(due_date=datetime(2024, 3, 1))

        assert invoice.is_overdue(datetime(2024, 3, 2)) is True
        assert invoice.is_overdue(datetime(2024, 2, 28)) is False

    def test_paid_invoice_is_never_overdue(self):
        invoice = make_invoice(status=InvoiceStatus.PAID, due_date=datetime(2024, 3, 1))

        assert invoice.is_overdue(datetime(2024, 6, 1)) is False


def test_invoice_number_format():
    assert build_invoice_number(2024, 3, 12) == "BFC-2024-03-0012"


def test_totals_for_reads_items():
    invoice = make_invoice(amounts=["10.00"])

    assert totals_for(invoice).total_amount == Decimal("12.00")
