"""ResendInvoice Use Case"""

from libs.result import Result, Return, Error
from src.app import errors
from src.app.access_control import require_admin
from src.app.repositories.corporate_invoice_repository import CorporateInvoiceRepository
from src.app.repositories.user_repository import UserRepository
from src.app.services.email_service import EmailService
from src.app.services.pdf_service import PdfService
from src.domain.identity import Identity
from .dtos import ResendInvoiceResultDTO
from .mailing import email_invoice


class ResendInvoice:
    """
    Use Case: E-mail an invoice to its owner again (admin)

    The invoice status is left untouched.
    """

    def __init__(
        self,
        invoice_repo: CorporateInvoiceRepository,
        user_repo: UserRepository,
        email_service: EmailService,
        pdf_service: PdfService,
    ):
        self.invoice_repo = invoice_repo
        self.user_repo = user_repo
        self.email_service = email_service
        self.pdf_service = pdf_service

    async def execute(self, invoice_id: str, identity: Identity) -> Result[ResendInvoiceResultDTO]:
        denied = require_admin(identity)
        if denied:
            return Return.err(denied)

        invoice = await self.invoice_repo.get_by_id(invoice_id)
        if not invoice:
            return Return.err(errors.not_found(errors.INVOICE_NOT_FOUND, "Invoice", invoice_id))

        owner = await self.user_repo.get_by_id(invoice.corporate_user_id)
        if not owner:
            return Return.err(
                errors.not_found(errors.USER_NOT_FOUND, "User", invoice.corporate_user_id)
            )

        if not await email_invoice(invoice, owner, self.email_service, self.pdf_service):
            return Return.err(
                Error(
                    code=errors.EMAIL_SEND_FAILED,
                    message=f"Failed to send invoice {invoice.invoice_number}",
                )
            )

        return Return.ok(
            ResendInvoiceResultDTO(invoice_number=invoice.invoice_number, recipient=owner.email)
        )
