"""Payment Provider Webhook"""

import logging
from fastapi import APIRouter, Depends, Header, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from libs.result import Error
from src.api.error import ClientError
from src.api.schemas.response import ApiResponse, success_response
from src.app import errors
from src.app.services.payment_gateway import InvalidWebhookSignature, PaymentGateway
from src.app.use_cases.orders.dtos import PaymentEventResultDTO
from src.app.use_cases.orders.handle_payment_event import HandlePaymentEvent
from src.adapter.repositories.corporate_invoice_repository import SqlAlchemyCorporateInvoiceRepository
from src.adapter.repositories.order_repository import SqlAlchemyOrderRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_payment_gateway, get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["Payments"])


@router.post("/payments", response_model=ApiResponse[PaymentEventResultDTO])
async def handle_payment_webhook(
    request: Request,
    stripe_signature: str = Header("", alias="Stripe-Signature"),
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Receive payment provider events.

    The signature is checked against the raw body. Successful payments mark
    the order or invoice paid; failed payments mark an order failed. Events
    of other types are acknowledged and ignored.
    """
    payload = await request.body()
    try:
        event = payment_gateway.parse_webhook_event(payload, stripe_signature)
    except InvalidWebhookSignature as e:
        logger.warning(f"Rejected payment webhook: {e}")
        raise ClientError(
            Error(
                code=errors.INVALID_WEBHOOK_SIGNATURE,
                message="Invalid webhook signature",
                reason=str(e),
            )
        )

    uow = SqlAlchemyUnitOfWork(session)
    use_case = HandlePaymentEvent(
        uow,
        SqlAlchemyOrderRepository(session),
        SqlAlchemyCorporateInvoiceRepository(session),
    )
    result = await use_case.execute(event)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value)
