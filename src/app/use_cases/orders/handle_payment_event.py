"""HandlePaymentEvent Use Case

Applies payment processor webhook events to orders and corporate invoices.
"""

import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app import errors
from src.app.repositories.corporate_invoice_repository import CorporateInvoiceRepository
from src.app.repositories.order_repository import OrderRepository
from src.app.services.payment_gateway import PAYMENT_FAILED, PAYMENT_SUCCEEDED, PaymentEvent
from src.app.services.unit_of_work import UnitOfWork
from src.domain.corporate_invoice import (
    CorporateInvoice,
    InvoiceStatus,
    mark_invoice_paid,
)
from src.domain.order import InvalidTransition, Order, OrderStatus, PaymentStatus, apply_order_status
from .dtos import PaymentEventResultDTO

logger = logging.getLogger(__name__)


class HandlePaymentEvent:
    """
    Use Case: Process a verified payment webhook event

    Business Rules:
    1. payment_intent.succeeded marks the order paid and confirms it if pending
    2. payment_intent.succeeded marks the invoice paid
    3. payment_intent.payment_failed marks an unpaid order failed
    4. Redelivered events are no-ops (already paid stays paid)
    5. Unknown event types are acknowledged and ignored

    Flow:
    1. Resolve the target from metadata, falling back to the intent id
    2. Apply the event
    3. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        invoice_repo: CorporateInvoiceRepository,
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.invoice_repo = invoice_repo

    async def execute(self, event: PaymentEvent, now: Optional[datetime] = None) -> Result[PaymentEventResultDTO]:
        now = now or datetime.utcnow()
        if event.type not in (PAYMENT_SUCCEEDED, PAYMENT_FAILED):
            return Return.ok(PaymentEventResultDTO(event_type=event.type, handled=False))

        try:
            # Step 1: Resolve target
            invoice = await self._find_invoice(event)
            order = None if invoice else await self._find_order(event)

            if invoice is None and order is None:
                logger.warning(f"No order or invoice for payment intent {event.intent_id}")
                return Return.ok(PaymentEventResultDTO(event_type=event.type, handled=False))

            # Step 2: Apply event
            if invoice is not None:
                handled = await self._apply_to_invoice(invoice, event, now)
                result = PaymentEventResultDTO(
                    event_type=event.type, handled=handled, target="invoice", target_id=invoice.id
                )
            else:
                handled = await self._apply_to_order(order, event, now)
                result = PaymentEventResultDTO(
                    event_type=event.type, handled=handled, target="order", target_id=order.id
                )

            # Step 3: Commit transaction
            if handled:
                await self.uow.commit()

            return Return.ok(result)

        except InvalidTransition as e:
            await self.uow.rollback()
            return Return.err(errors.invalid_transition(e.current.value, e.requested.value))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="PAYMENT_EVENT_FAILED",
                    message="Failed to process payment event",
                    reason=str(e),
                )
            )

    async def _find_invoice(self, event: PaymentEvent) -> Optional[CorporateInvoice]:
        invoice_id = event.metadata.get("invoice_id")
        if invoice_id:
            return await self.invoice_repo.get_by_id(invoice_id)
        if event.metadata.get("order_id"):
            return None
        return await self.invoice_repo.get_by_payment_intent_id(event.intent_id)

    async def _find_order(self, event: PaymentEvent) -> Optional[Order]:
        order_id = event.metadata.get("order_id")
        if order_id:
            return await self.order_repo.get_by_id(order_id)
        return await self.order_repo.get_by_payment_intent_id(event.intent_id)

    async def _apply_to_invoice(self, invoice: CorporateInvoice, event: PaymentEvent, now: datetime) -> bool:
        if event.type == PAYMENT_FAILED:
            logger.warning(f"Payment failed for invoice {invoice.invoice_number}")
            return False
        if invoice.status == InvoiceStatus.PAID:
            return False

        mark_invoice_paid(invoice, now)
        invoice.payment_intent_id = invoice.payment_intent_id or event.intent_id
        await self.invoice_repo.update(invoice)
        logger.info(f"Invoice {invoice.invoice_number} paid by card")
        return True

    async def _apply_to_order(self, order: Order, event: PaymentEvent, now: datetime) -> bool:
        if order.payment_status == PaymentStatus.PAID:
            return False

        order.payment_intent_id = order.payment_intent_id or event.intent_id
        if event.type == PAYMENT_FAILED:
            order.payment_status = PaymentStatus.FAILED
            logger.warning(f"Payment failed for order {order.order_number}")
        else:
            order.payment_status = PaymentStatus.PAID
            if order.status == OrderStatus.PENDING:
                apply_order_status(order, OrderStatus.CONFIRMED, "Paiement reçu", now)
            logger.info(f"Order {order.order_number} paid")

        order.updated_at = now
        await self.order_repo.update(order)
        return True
