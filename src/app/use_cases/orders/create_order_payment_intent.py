"""CreateOrderPaymentIntent Use Case

Card payment for a checkout order.
"""

import logging
from libs.result import Result, Return, Error
from src.app import errors
from src.app.access_control import check_order_payment
from src.app.repositories.order_repository import OrderRepository
from src.app.services.payment_gateway import PaymentGateway, PaymentProviderError
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.common import PaymentIntentResponseDTO, to_minor_units
from src.domain.identity import Identity
from src.domain.order import OrderStatus, PaymentStatus

logger = logging.getLogger(__name__)


class CreateOrderPaymentIntent:
    """
    Use Case: Create or retrieve the payment intent of an order

    Business Rules:
    1. Paid orders cannot be charged again (ALREADY_PAID)
    2. Cancelled orders and monthly-billed orders are not charged by card
    3. An order has at most one intent: an existing intent is retrieved
    4. Creation is keyed by order-<id> so retries return the same intent
    5. Processor failures are reported, not retried

    Flow:
    1. Load order and check access
    2. Retrieve existing intent, or create one for total_amount in cents
    3. Persist the intent id and commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        payment_gateway: PaymentGateway,
        currency: str = "eur",
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.payment_gateway = payment_gateway
        self.currency = currency

    async def execute(self, order_id: str, identity: Identity) -> Result[PaymentIntentResponseDTO]:
        order = await self.order_repo.get_by_id(order_id)
        if not order:
            return Return.err(errors.not_found(errors.ORDER_NOT_FOUND, "Order", order_id))

        denied = check_order_payment(identity, order)
        if denied:
            return Return.err(denied)

        if order.payment_status == PaymentStatus.PAID:
            return Return.err(
                Error(code=errors.ALREADY_PAID, message=f"Order {order.order_number} is already paid")
            )
        if order.status == OrderStatus.CANCELLED:
            return Return.err(
                Error(code=errors.INVALID_TRANSITION, message=f"Order {order.order_number} is cancelled")
            )
        if order.payment_method == "monthly_invoice":
            return Return.err(
                Error(
                    code=errors.VALIDATION_ERROR,
                    message=f"Order {order.order_number} is billed on the monthly invoice",
                )
            )

        try:
            if order.payment_intent_id:
                intent = await self.payment_gateway.retrieve_payment_intent(order.payment_intent_id)
                return Return.ok(
                    PaymentIntentResponseDTO(
                        payment_intent_id=intent.id,
                        client_secret=intent.client_secret,
                        amount=order.total_amount,
                        currency=intent.currency,
                    )
                )

            intent = await self.payment_gateway.create_payment_intent(
                amount=to_minor_units(order.total_amount),
                currency=self.currency,
                metadata={"order_id": order.id, "order_number": order.order_number},
                idempotency_key=f"order-{order.id}",
                description=f"Commande {order.order_number}",
                receipt_email=order.customer_email,
            )
        except PaymentProviderError as e:
            logger.error(f"Payment intent failed for order {order.order_number}: {e}")
            return Return.err(
                Error(
                    code=errors.PAYMENT_PROVIDER_ERROR,
                    message="Payment provider error",
                    reason=str(e),
                )
            )

        try:
            order.payment_intent_id = intent.id
            await self.order_repo.update(order)
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
                amount=order.total_amount,
                currency=intent.currency,
            )
        )
