"""Back-office Order API Routes"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import get_identity
from src.api.error import ClientError
from src.api.schemas.order_request import UpdateOrderStatusRequestSchema
from src.api.schemas.response import ApiResponse, success_response
from src.app.services.email_service import EmailService
from src.app.use_cases.orders.dtos import (
    OrderDTO,
    OrderListResponseDTO,
    UpdateOrderStatusCommandDTO,
)
from src.app.use_cases.orders.list_orders import ListOrders
from src.app.use_cases.orders.update_order_status import UpdateOrderStatus
from src.adapter.repositories.order_repository import SqlAlchemyOrderRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_email_service, get_session
from src.domain.identity import Identity
from src.domain.order import OrderStatus

router = APIRouter(prefix="/admin/orders", tags=["Admin"])


@router.get("", response_model=ApiResponse[OrderListResponseDTO])
async def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[OrderStatus] = Query(None, description="Filter by status"),
    search: Optional[str] = Query(None, description="Order number, customer name or e-mail"),
    date_from: Optional[datetime] = Query(None, alias="dateFrom"),
    date_to: Optional[datetime] = Query(None, alias="dateTo"),
    session: AsyncSession = Depends(get_session),
    identity: Identity = Depends(get_identity),
):
    """
    List all orders for the back office, newest first.

    **Query parameters:**
    - `status`: only orders in this status
    - `search`: case-insensitive match on order number, customer name or e-mail
    - `dateFrom` / `dateTo`: creation date range, inclusive
    """
    use_case = ListOrders(SqlAlchemyOrderRepository(session))
    result = await use_case.execute(
        identity,
        page=page,
        limit=limit,
        status=status,
        search=search,
        date_from=date_from,
        date_to=date_to,
    )

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value)


@router.patch(
    "/{order_id}/status",
    response_model=ApiResponse[OrderDTO],
    responses={
        403: {"description": "Admin role required"},
        404: {"description": "Order not found"},
        409: {
            "description": "Status change not allowed",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "error": {
                            "code": "INVALID_TRANSITION",
                            "message": "Cannot change status from 'delivered' to 'preparing'"
                        }
                    }
                }
            }
        }
    }
)
async def update_order_status(
    order_id: str,
    request: UpdateOrderStatusRequestSchema,
    session: AsyncSession = Depends(get_session),
    email_service: EmailService = Depends(get_email_service),
    identity: Identity = Depends(get_identity),
):
    """
    Move an order along the fulfillment flow.

    Statuses only move forward (pending → confirmed → preparing → ready →
    delivered); any non-terminal order can be cancelled. The customer is
    notified by e-mail.
    """
    uow = SqlAlchemyUnitOfWork(session)

    command = UpdateOrderStatusCommandDTO(
        order_id=order_id,
        status=request.status,
        note=request.note,
    )

    use_case = UpdateOrderStatus(uow, SqlAlchemyOrderRepository(session), email_service)
    result = await use_case.execute(command, identity)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value, "Statut mis à jour")
