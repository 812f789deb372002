"""Request schemas for Corporate Invoice API"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from src.domain.corporate_invoice import InvoiceStatus


class UpdateInvoiceRequestSchema(BaseModel):
    """
    Request schema for back-office invoice updates

    Used for PATCH /admin/invoices/{invoice_id} endpoint. Every field is
    optional; notes can be edited without changing the status.
    """

    status: Optional[InvoiceStatus] = Field(
        default=None,
        description="Requested status: sent, paid or overdue"
    )

    paid_date: Optional[datetime] = Field(
        default=None,
        description="Payment date when marking paid (defaults to now)"
    )

    notes: Optional[str] = Field(default=None, max_length=1000, description="Notes printed on the invoice")

    admin_notes: Optional[str] = Field(default=None, max_length=1000, description="Back-office only notes")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "paid",
                "paid_date": "2024-02-15T10:00:00Z",
                "admin_notes": "Virement reçu"
            }
        }
