"""Corporate invoice use cases"""
from .create_invoice_payment_intent import CreateInvoicePaymentIntent
from .resend_invoice import ResendInvoice
from .list_invoices import ListInvoices
from .update_invoice import UpdateInvoice
from .get_corporate_invoice import GetCorporateInvoice
from .list_corporate_invoices import ListCorporateInvoices
from .download_invoice_pdf import DownloadInvoicePdf
from .generate_monthly_invoices import GenerateMonthlyInvoices
from .mark_overdue_invoices import MarkOverdueInvoices
from .dtos import (
    InvoiceDTO,
    InvoiceListResponseDTO,
    UpdateInvoiceCommandDTO,
    GenerateMonthlyInvoicesCommandDTO,
    MonthlyInvoicingResultDTO,
    MarkOverdueResultDTO,
    ResendInvoiceResultDTO,
    InvoicePdfDTO,
    MonthlyInvoicingRunDTO,
)

__all__ = [
    "CreateInvoicePaymentIntent",
    "ResendInvoice",
    "ListInvoices",
    "UpdateInvoice",
    "GetCorporateInvoice",
    "ListCorporateInvoices",
    "DownloadInvoicePdf",
    "GenerateMonthlyInvoices",
    "MarkOverdueInvoices",
    "InvoiceDTO",
    "InvoiceListResponseDTO",
    "UpdateInvoiceCommandDTO",
    "GenerateMonthlyInvoicesCommandDTO",
    "MonthlyInvoicingResultDTO",
    "MarkOverdueResultDTO",
    "ResendInvoiceResultDTO",
    "InvoicePdfDTO",
    "MonthlyInvoicingRunDTO",
]
