"""Data Transfer Objects for Corporate Invoice Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from src.app.use_cases.common import PaginationDTO
from src.domain.corporate_invoice import CorporateInvoice, InvoiceItem, InvoiceStatus, totals_for


class InvoiceDTO(BaseModel):
    """
    Corporate invoice as returned by the API

    Totals are recomputed from the items on every read.
    """

    id: str
    invoice_number: str
    corporate_user_id: str
    company_name: str
    period_start: date
    period_end: date
    period_month: int
    period_year: int
    items: List[InvoiceItem]
    subtotal: Decimal
    vat_rate: Decimal
    vat_amount: Decimal
    total_amount: Decimal
    status: str
    issued_at: Optional[datetime] = None
    due_date: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    is_overdue: bool = False
    notes: Optional[str] = None
    admin_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_invoice(
        cls, invoice: CorporateInvoice, include_admin_notes: bool = True
    ) -> "InvoiceDTO":
        totals = totals_for(invoice)
        return cls(
            id=invoice.id,
            invoice_number=invoice.invoice_number,
            corporate_user_id=invoice.corporate_user_id,
            company_name=invoice.company_name,
            period_start=invoice.period_start,
            period_end=invoice.period_end,
            period_month=invoice.period_month,
            period_year=invoice.period_year,
            items=invoice.invoice_items(),
            subtotal=totals.subtotal,
            vat_rate=invoice.vat_rate,
            vat_amount=totals.vat_amount,
            total_amount=totals.total_amount,
            status=invoice.status.value,
            issued_at=invoice.issued_at,
            due_date=invoice.due_date,
            paid_at=invoice.paid_at,
            is_overdue=invoice.status == InvoiceStatus.OVERDUE or invoice.is_overdue(),
            notes=invoice.notes,
            admin_notes=invoice.admin_notes if include_admin_notes else None,
            created_at=invoice.created_at,
            updated_at=invoice.updated_at,
        )


class InvoiceListResponseDTO(BaseModel):
    invoices: List[InvoiceDTO]
    pagination: PaginationDTO


class UpdateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for back-office invoice updates

    Used as input to UpdateInvoice use case.
    """

    invoice_id: str = Field(..., description="Invoice identifier")

    status: Optional[InvoiceStatus] = Field(
        default=None,
        description="Requested status (sent, paid, overdue)"
    )

    paid_date: Optional[datetime] = Field(
        default=None,
        description="Payment date when status is paid (defaults to now)"
    )

    notes: Optional[str] = Field(default=None, max_length=1000)

    admin_notes: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("paid_date")
    @classmethod
    def naive_utc(cls, v):
        """Timestamps are stored as naive UTC"""
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class GenerateMonthlyInvoicesCommandDTO(BaseModel):
    year: int = Field(..., ge=2000, le=2100, description="Billing year")
    month: int = Field(..., ge=1, le=12, description="Billing month")

    class Config:
        json_schema_extra = {"example": {"year": 2024, "month": 1}}


class MonthlyInvoicingResultDTO(BaseModel):
    """
    Result of a monthly invoicing run

    Used by the admin endpoint and the monthly worker.
    """

    year: int
    month: int
    created: List[str] = Field(default_factory=list, description="Invoice numbers created")
    sent: List[str] = Field(default_factory=list, description="Invoice numbers e-mailed and marked sent")
    email_failed: List[str] = Field(default_factory=list, description="Invoices left in draft")
    skipped_existing: int = Field(default=0, description="Users already invoiced for the month")
    skipped_empty: int = Field(default=0, description="Users without billable orders")
    failed: List[str] = Field(default_factory=list, description="User ids whose invoice failed")


class MarkOverdueResultDTO(BaseModel):
    marked: List[str] = Field(default_factory=list, description="Invoice numbers now overdue")


class ResendInvoiceResultDTO(BaseModel):
    invoice_number: str
    recipient: str


class InvoicePdfDTO(BaseModel):
    invoice_number: str
    filename: str
    content: bytes


class MonthlyInvoicingRunDTO(BaseModel):
    """Summary of one monthly invoicing worker run"""

    invoicing: Optional[MonthlyInvoicingResultDTO] = None
    overdue: Optional[MarkOverdueResultDTO] = None
    errors: List[str] = Field(default_factory=list, description="Codes of failed steps")
    execution_time_ms: int = 0
