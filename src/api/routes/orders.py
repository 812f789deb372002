"""Order API Routes

Checkout, order tracking, customer cancellation and card payment.
"""

from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.auth import get_identity
from src.api.error import ClientError
from src.api.schemas.order_request import CancelOrderRequestSchema
from src.api.schemas.response import ApiResponse, success_response
from src.app.services.email_service import EmailService
from src.app.services.payment_gateway import PaymentGateway
from src.app.use_cases.common import PaymentIntentResponseDTO
from src.app.use_cases.orders.dtos import CreateOrderCommandDTO, OrderDTO
from src.app.use_cases.orders.create_order import CreateOrder
from src.app.use_cases.orders.get_order import GetOrder
from src.app.use_cases.orders.cancel_order import CancelOrder
from src.app.use_cases.orders.create_order_payment_intent import CreateOrderPaymentIntent
from src.adapter.repositories.order_repository import SqlAlchemyOrderRepository
from src.adapter.repositories.product_repository import SqlAlchemyProductRepository
from src.adapter.repositories.shop_settings_repository import SqlAlchemyShopSettingsRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_email_service, get_payment_gateway, get_session
from src.domain.identity import Identity

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post(
    "",
    response_model=ApiResponse[OrderDTO],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Cart, delivery zone or bereavement details rejected",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "error": {
                            "code": "DELIVERY_ZONE_NOT_COVERED",
                            "message": "We do not deliver to postal code 75001"
                        }
                    }
                }
            }
        },
        409: {
            "description": "Shop is closed",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "error": {"code": "SHOP_CLOSED", "message": "Nous sommes actuellement fermés."}
                    }
                }
            }
        }
    }
)
async def create_order(
    request: CreateOrderCommandDTO,
    session: AsyncSession = Depends(get_session),
    email_service: EmailService = Depends(get_email_service),
    identity: Identity = Depends(get_identity),
):
    """
    Place an order from a cart snapshot.

    Guests may order; an authenticated customer's order is attached to
    their account, and corporate accounts are billed monthly instead of by card.

    **Request body:**
    - `items` (required): `[{product_id, quantity}]`, quantity 1-50
    - `customer_info` (required): `{name, email, phone}`
    - `delivery_info` (required): `{type: delivery|pickup, date, time_slot, address?, notes?}`
    - `bereavement_info` (optional): required when the cart holds funeral items

    **Returns:**
    - 201: Order created, status `pending`
    - 400: Empty cart, unavailable product, postal code or zone error, missing bereavement details
    - 409: Shop closed
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = CreateOrder(
        uow,
        SqlAlchemyOrderRepository(session),
        SqlAlchemyProductRepository(session),
        SqlAlchemyShopSettingsRepository(session),
        email_service,
        shop_timezone=ApplicationConfig.SHOP_TIMEZONE,
    )
    result = await use_case.execute(request, identity)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value, "Commande créée avec succès")


@router.get(
    "/{order_id}",
    response_model=ApiResponse[OrderDTO],
    responses={
        401: {"description": "Authentication required"},
        403: {"description": "Order belongs to another customer"},
        404: {"description": "Order not found"},
    }
)
async def get_order(
    order_id: str,
    session: AsyncSession = Depends(get_session),
    identity: Identity = Depends(get_identity),
):
    """
    Get an order.

    Customers see their own orders, including guest orders placed with
    their e-mail address; admins see every order.
    """
    use_case = GetOrder(SqlAlchemyOrderRepository(session))
    result = await use_case.execute(order_id, identity)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value)


@router.post(
    "/{order_id}/cancel",
    response_model=ApiResponse[OrderDTO],
    responses={
        403: {"description": "Not allowed to cancel this order"},
        404: {"description": "Order not found"},
        409: {"description": "Order is already being prepared"},
    }
)
async def cancel_order(
    order_id: str,
    request: Optional[CancelOrderRequestSchema] = None,
    session: AsyncSession = Depends(get_session),
    email_service: EmailService = Depends(get_email_service),
    identity: Identity = Depends(get_identity),
):
    """
    Cancel an order.

    Customers may cancel their own order while it is `pending` or
    `confirmed`; admins may cancel any non-terminal order.
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = CancelOrder(uow, SqlAlchemyOrderRepository(session), email_service)
    result = await use_case.execute(order_id, identity, request.reason if request else None)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value, "Commande annulée")


@router.post(
    "/{order_id}/payment-intent",
    response_model=ApiResponse[PaymentIntentResponseDTO],
    responses={
        404: {"description": "Order not found"},
        409: {"description": "Order already paid or not payable"},
        502: {"description": "Payment provider unavailable"},
    }
)
async def create_order_payment_intent(
    order_id: str,
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
    identity: Identity = Depends(get_identity),
):
    """
    Create (or reuse) the card payment intent of an order.

    Repeated calls return the same intent; the client secret is used by
    the storefront to confirm the payment.
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = CreateOrderPaymentIntent(
        uow,
        SqlAlchemyOrderRepository(session),
        payment_gateway,
        currency=ApplicationConfig.CURRENCY,
    )
    result = await use_case.execute(order_id, identity)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value)
