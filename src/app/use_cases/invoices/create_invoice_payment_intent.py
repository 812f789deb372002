"""CreateInvoicePaymentIntent Use Case

Card payment of a corporate invoice.
"""

import logging
from libs.result import Result, Return, Error
from src.app import errors
from src.app.access_control import check_invoice_read, require_authenticated
from src.app.repositories.corporate_invoice_repository import CorporateInvoiceRepository
from src.app.services.payment_gateway import PaymentGateway, PaymentProviderError
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import PaymentIntentResponseDTO, to_minor_units
from src.domain.corporate_invoice import InvoiceStatus, totals_for
from src.domain.identity import Identity

logger = logging.getLogger(__name__)


class CreateInvoicePaymentIntent:
    """
    Use Case: Create or retrieve the payment intent of an invoice

    Business Rules:
    1. Corporate owner or admin only
    2. Paid invoices cannot be charged again (ALREADY_PAID)
    3. Draft invoices are not payable until sent
    4. An existing intent is retrieved, never duplicated
    5. Creation is keyed by invoice-<id> so retries return the same intent
    6. Processor failures are reported, not retried

    Flow:
    1. Load invoice and check access
    2. Retrieve existing intent, or create one for total_amount in cents
    3. Persist the intent id and commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: CorporateInvoiceRepository,
        payment_gateway: PaymentGateway,
        currency: str = "eur",
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.payment_gateway = payment_gateway
        self.currency = currency

    async def execute(self, invoice_id: str, identity: Identity) -> Result[PaymentIntentResponseDTO]:
        """
        Execute payment intent creation

        Args:
            invoice_id: Invoice identifier
            identity: Requesting identity

        Returns:
            Result[PaymentIntentResponseDTO]: Client secret or error
        """
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

        if invoice.status == InvoiceStatus.PAID:
            return Return.err(
                Error(
                    code=errors.ALREADY_PAID,
                    message=f"Invoice {invoice.invoice_number} has already been paid",
                )
            )
        if invoice.status == InvoiceStatus.DRAFT:
            return Return.err(
                Error(
                    code=errors.INVALID_TRANSITION,
                    message=f"Invoice {invoice.invoice_number} has not been issued yet",
                )
            )

        total_amount = totals_for(invoice).total_amount

        # Step 2: Retrieve or create intent
        try:
            if invoice.payment_intent_id:
                intent = await self.payment_gateway.retrieve_payment_intent(invoice.payment_intent_id)
                return Return.ok(
                    PaymentIntentResponseDTO(
                        payment_intent_id=intent.id,
                        client_secret=intent.client_secret,
                        amount=total_amount,
                        currency=intent.currency,
                    )
                )

            intent = await self.payment_gateway.create_payment_intent(
                amount=to_minor_units(total_amount),
                currency=self.currency,
                metadata={
                    "invoice_id": invoice.id,
                    "invoice_number": invoice.invoice_number,
                    "corporate_user_id": invoice.corporate_user_id,
                },
                idempotency_key=f"invoice-{invoice.id}",
                description=f"Facture {invoice.invoice_number} - {invoice.company_name}",
            )
        except PaymentProviderError as e:
            logger.error(f"Payment intent failed for invoice {invoice.invoice_number}: {e}")
            return Return.err(
                Error(
                    code=errors.PAYMENT_PROVIDER_ERROR,
                    message="Payment provider error",
                    reason=str(e),
                )
            )

        # Step 3: Persist intent id
        try:
            invoice.payment_intent_id = intent.id
            await self.invoice_repo.update(invoice)
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_PAYMENT_INTENT_FAILED",
                    message="Failed to save payment intent",
                    reason=str(e),
                )
            )

        return Return.ok(
            PaymentIntentResponseDTO(
                payment_intent_id=intent.id,
                client_secret=intent.client_secret,
                amount=total_amount,
                currency=intent.currency,
            )
        )
