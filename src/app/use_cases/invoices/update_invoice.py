"""UpdateInvoice Use Case

Back-office status changes and notes on corporate invoices.
"""

import logging
from datetime import datetime
from libs.result import Result, Return, Error
from src.app import errors
from src.app.access_control import require_admin
from src.app.repositories.corporate_invoice_repository import CorporateInvoiceRepository
from src.app.repositories.user_repository import UserRepository
from src.app.services.email_service import EmailService
from src.app.services.pdf_service import PdfService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.corporate_invoice import (
    AlreadyPaid,
    InvoiceStatus,
    transition_invoice,
)
from src.domain.identity import Identity
from src.domain.order import InvalidTransition
from .dtos import InvoiceDTO, UpdateInvoiceCommandDTO
from .mailing import email_invoice

logger = logging.getLogger(__name__)


class UpdateInvoice:
    """
    Use Case: Update a corporate invoice (admin)

    Business Rules:
    1. Admin only
    2. sent: the invoice is e-mailed first, and only marked sent if the e-mail went out
    3. paid: paid_date defaults to now; paying a paid invoice is ALREADY_PAID
    4. overdue: only from sent
    5. notes and admin_notes can change in any status

    Flow:
    1. Check admin access
    2. Load invoice
    3. Apply status change
    4. Apply notes
    5. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: CorporateInvoiceRepository,
        user_repo: UserRepository,
        email_service: EmailService,
        pdf_service: PdfService,
        payment_term_days: int = 30,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.user_repo = user_repo
        self.email_service = email_service
        self.pdf_service = pdf_service
        self.payment_term_days = payment_term_days

    async def execute(self, command: UpdateInvoiceCommandDTO, identity: Identity) -> Result[InvoiceDTO]:
        denied = require_admin(identity)
        if denied:
            return Return.err(denied)

        try:
            # Step 1: Load invoice
            invoice = await self.invoice_repo.get_by_id(command.invoice_id)
            if not invoice:
                return Return.err(
                    errors.not_found(errors.INVOICE_NOT_FOUND, "Invoice", command.invoice_id)
                )

            # Step 2: Apply status change
            if command.status is not None:
                if command.status == InvoiceStatus.DRAFT:
                    return Return.err(
                        errors.invalid_transition(invoice.status.value, command.status.value)
                    )

                if command.status == InvoiceStatus.SENT:
                    if invoice.status != InvoiceStatus.DRAFT:
                        return Return.err(
                            errors.invalid_transition(invoice.status.value, command.status.value)
                        )
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

                at = command.paid_date if command.status == InvoiceStatus.PAID else None
                try:
                    transition_invoice(
                        invoice,
                        command.status,
                        at=at or datetime.utcnow(),
                        payment_term_days=self.payment_term_days,
                    )
                except AlreadyPaid as e:
                    return Return.err(Error(code=errors.ALREADY_PAID, message=str(e)))
                except InvalidTransition as e:
                    return Return.err(
                        errors.invalid_transition(e.current.value, e.requested.value)
                    )

            # Step 3: Apply notes
            if command.notes is not None:
                invoice.notes = command.notes
            if command.admin_notes is not None:
                invoice.admin_notes = command.admin_notes

            invoice = await self.invoice_repo.update(invoice)

            # Step 4: Commit transaction
            await self.uow.commit()

            logger.info(f"Invoice {invoice.invoice_number} updated, status {invoice.status.value}")
            return Return.ok(InvoiceDTO.from_invoice(invoice))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_INVOICE_FAILED",
                    message="Failed to update invoice",
                    reason=str(e),
                )
            )
