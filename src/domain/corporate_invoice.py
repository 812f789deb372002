"""Corporate Invoice Domain Entity

Monthly invoice aggregating the orders of one corporate account.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional
import pydantic
from sqlmodel import Field, Column, Index, UniqueConstraint
from sqlalchemy import JSON, Date, Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid
from src.domain.order import InvalidTransition

CENTS = Decimal("0.01")
DEFAULT_VAT_RATE = Decimal("0.20")


class InvoiceStatus(str, Enum):
    """Corporate invoice status"""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"


ALLOWED_INVOICE_TRANSITIONS = {
    InvoiceStatus.DRAFT: {InvoiceStatus.SENT},
    InvoiceStatus.SENT: {InvoiceStatus.PAID, InvoiceStatus.OVERDUE},
    InvoiceStatus.OVERDUE: {InvoiceStatus.PAID},
    InvoiceStatus.PAID: set(),
}


class AlreadyPaid(ValueError):
    """Raised when paying or charging an invoice that is already paid"""

    def __init__(self, invoice_number: str):
        super().__init__(f"Invoice {invoice_number} has already been paid")
        self.invoice_number = invoice_number


class InvoiceItem(pydantic.BaseModel):
    order_id: str
    order_number: str
    order_date: datetime
    amount: Decimal = pydantic.Field(..., ge=0)
    description: str = pydantic.Field(..., max_length=500)


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Decimal
    vat_amount: Decimal
    total_amount: Decimal


class CorporateInvoice(BaseModel, table=True):
    """
    CorporateInvoice - Monthly billing of a corporate account

    Domain Rules:
    - invoice_number is unique and sequential per billing period (BFC-YYYY-MM-NNNN)
    - One invoice per corporate user and billing month
    - vat_amount = round(subtotal * vat_rate, 2), total_amount = subtotal + vat_amount
    - Status transitions: draft -> sent -> paid, sent -> overdue -> paid
    - paid_at is set whenever status is paid
    - Never deleted once sent
    """

    __tablename__ = "corporate_invoices"
    __table_args__ = (
        UniqueConstraint(
            'corporate_user_id', 'period_year', 'period_month',
            name='uq_corporate_invoices_user_period',
        ),
        Index('ix_corporate_invoices_status', 'status'),
        Index('ix_corporate_invoices_due_date', 'due_date'),
        Index('ix_corporate_invoices_created_at', 'created_at'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique invoice identifier"
    )

    invoice_number: str = Field(
        sa_column=Column(String(30), nullable=False, unique=True),
        description="Invoice number (e.g., BFC-2024-01-0001)"
    )

    corporate_user_id: str = Field(
        index=True,
        description="Owning corporate user"
    )

    company_name: str = Field(
        sa_column=Column(String(200), nullable=False),
        description="Billed company name"
    )

    period_start: date = Field(
        sa_column=Column(Date, nullable=False),
        description="First day of the billing month"
    )

    period_end: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Last day of the billing month"
    )

    period_month: int = Field(description="Billing month (1-12)")

    period_year: int = Field(description="Billing year")

    items: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Aggregated orders of the period"
    )

    subtotal: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
        description="Sum of item amounts"
    )

    vat_rate: Decimal = Field(
        default=DEFAULT_VAT_RATE,
        sa_column=Column(Numeric(5, 4), nullable=False),
        description="VAT rate as a fraction (0.20 = 20%)"
    )

    vat_amount: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
        description="round(subtotal * vat_rate, 2)"
    )

    total_amount: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
        description="subtotal + vat_amount"
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.DRAFT,
        description="Invoice status (draft, sent, paid, overdue)"
    )

    issued_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp when the invoice was sent"
    )

    due_date: Optional[datetime] = Field(
        default=None,
        description="Payment due date"
    )

    paid_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp when the invoice was paid"
    )

    payment_intent_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Payment processor intent identifier"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Notes printed on the invoice"
    )

    admin_notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Internal notes"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Invoice creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    def invoice_items(self) -> List[InvoiceItem]:
        return [InvoiceItem.model_validate(item) for item in self.items]

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.utcnow()
        return self.status == InvoiceStatus.SENT and self.due_date is not None and self.due_date < now


def compute_invoice_totals(amounts: Iterable[Decimal], vat_rate: Decimal) -> InvoiceTotals:
    """
    Compute HT/VAT/TTC totals from line amounts

    Pure and idempotent: totals derive from the amounts only, never from
    previously stored totals, so recomputing cannot accumulate rounding.
    """
    subtotal = sum((Decimal(a) for a in amounts), Decimal("0")).quantize(CENTS, rounding=ROUND_HALF_UP)
    vat_amount = (subtotal * Decimal(vat_rate)).quantize(CENTS, rounding=ROUND_HALF_UP)
    return InvoiceTotals(
        subtotal=subtotal,
        vat_amount=vat_amount,
        total_amount=subtotal + vat_amount,
    )


def totals_for(invoice: CorporateInvoice) -> InvoiceTotals:
    return compute_invoice_totals(
        (item.amount for item in invoice.invoice_items()), invoice.vat_rate
    )


def refresh_totals(invoice: CorporateInvoice) -> InvoiceTotals:
    totals = totals_for(invoice)
    invoice.subtotal = totals.subtotal
    invoice.vat_amount = totals.vat_amount
    invoice.total_amount = totals.total_amount
    return totals


def transition_invoice(
    invoice: CorporateInvoice,
    requested: InvoiceStatus,
    at: Optional[datetime] = None,
    payment_term_days: int = 30,
) -> None:
    """
    Apply a status change to an invoice

    Raises:
        AlreadyPaid: invoice is paid and requested is paid
        InvalidTransition: requested status is not reachable
    """
    at = at or datetime.utcnow()
    if invoice.status == InvoiceStatus.PAID and requested == InvoiceStatus.PAID:
        raise AlreadyPaid(invoice.invoice_number)
    if requested not in ALLOWED_INVOICE_TRANSITIONS[invoice.status]:
        raise InvalidTransition(invoice.status, requested)

    if requested == InvoiceStatus.SENT:
        invoice.issued_at = at
        if invoice.due_date is None:
            invoice.due_date = at + timedelta(days=payment_term_days)
    elif requested == InvoiceStatus.PAID:
        invoice.paid_at = at

    invoice.status = requested
    invoice.updated_at = datetime.utcnow()


def mark_invoice_paid(invoice: CorporateInvoice, paid_at: Optional[datetime] = None) -> None:
    transition_invoice(invoice, InvoiceStatus.PAID, at=paid_at)


def build_invoice_number(year: int, month: int, sequence: int) -> str:
    return f"BFC-{year}-{month:02d}-{sequence:04d}"
