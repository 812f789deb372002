"""Customer order history"""

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import get_identity
from src.api.error import ClientError
from src.api.schemas.response import ApiResponse, success_response
from src.app.use_cases.orders.dtos import OrderListResponseDTO
from src.app.use_cases.orders.list_user_orders import ListUserOrders
from src.adapter.repositories.order_repository import SqlAlchemyOrderRepository
from src.depends import get_session
from src.domain.identity import Identity

router = APIRouter(prefix="/user", tags=["Orders"])


@router.get("/orders", response_model=ApiResponse[OrderListResponseDTO])
async def list_user_orders(
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: int = Query(10, ge=1, le=50, description="Orders per page"),
    session: AsyncSession = Depends(get_session),
    identity: Identity = Depends(get_identity),
):
    """
    List the signed-in customer's orders, newest first.

    Guest orders placed with the account's e-mail address are included.
    """
    use_case = ListUserOrders(SqlAlchemyOrderRepository(session))
    result = await use_case.execute(identity, page=page, limit=limit)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value)
