"""Cart API Routes"""

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import ClientError
from src.api.schemas.response import ApiResponse, success_response
from src.app.use_cases.catalog.dtos import CartSummaryDTO, SummarizeCartCommandDTO
from src.app.use_cases.catalog.summarize_cart import SummarizeCart
from src.adapter.repositories.product_repository import SqlAlchemyProductRepository
from src.depends import get_session

router = APIRouter(prefix="/cart", tags=["Catalog"])


@router.post("/summary", response_model=ApiResponse[CartSummaryDTO])
async def summarize_cart(
    request: SummarizeCartCommandDTO,
    session: AsyncSession = Depends(get_session),
):
    """
    Price a cart snapshot against the current catalog.

    Products that no longer exist or are inactive are dropped from the
    summary and reported in `unavailable`.
    """
    use_case = SummarizeCart(SqlAlchemyProductRepository(session))
    result = await use_case.execute(request)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value)
