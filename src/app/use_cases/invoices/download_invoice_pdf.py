"""DownloadInvoicePdf Use Case"""

from libs.result import Result, Return, Error
from src.app import errors
from src.app.access_control import check_invoice_read, require_authenticated
from src.app.repositories.corporate_invoice_repository import CorporateInvoiceRepository
from src.app.services.pdf_service import PdfService
from src.domain.identity import Identity
from .dtos import InvoicePdfDTO


class DownloadInvoicePdf:
    """
    Use Case: Render an invoice as PDF (owner or admin)

    Flow:
    1. Load invoice and check access
    2. Render PDF
    """

    def __init__(self, invoice_repo: CorporateInvoiceRepository, pdf_service: PdfService):
        self.invoice_repo = invoice_repo
        self.pdf_service = pdf_service

    async def execute(self, invoice_id: str, identity: Identity) -> Result[InvoicePdfDTO]:
        denied = require_authenticated(identity)
        if denied:
            return Return.err(denied)

        # Step 1: Load invoice and check access
        invoice = await self.invoice_repo.get_by_id(invoice_id)
        if not invoice:
            return Return.err(errors.not_found(errors.INVOICE_NOT_FOUND, "Invoice", invoice_id))

        denied = check_invoice_read(identity, invoice)
        if denied:
            return Return.err(denied)

        # Step 2: Render PDF
        try:
            content = self.pdf_service.generate_corporate_invoice(invoice)
        except Exception as e:
            return Return.err(
                Error(
                    code="PDF_GENERATION_FAILED",
                    message=f"Failed to render invoice {invoice.invoice_number}",
                    reason=str(e),
                )
            )

        return Return.ok(
            InvoicePdfDTO(
                invoice_number=invoice.invoice_number,
                filename=f"facture_{invoice.invoice_number}.pdf",
                content=content,
            )
        )
