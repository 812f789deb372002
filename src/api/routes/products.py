"""Catalog API Routes"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import get_identity
from src.api.error import ClientError
from src.api.schemas.response import ApiResponse, success_response
from src.app.use_cases.catalog.dtos import ProductDTO, ProductListResponseDTO, SearchResultDTO
from src.app.use_cases.catalog.get_product import GetProduct
from src.app.use_cases.catalog.list_products import CATALOG_PAGE_SIZE, ListProducts
from src.app.use_cases.catalog.search_products import DEFAULT_LIMIT, MAX_LIMIT, SearchProducts
from src.adapter.repositories.product_repository import SqlAlchemyProductRepository
from src.depends import get_session
from src.domain.identity import Identity
from src.domain.product import ProductSort

router = APIRouter(prefix="/products", tags=["Catalog"])


@router.get(
    "/search",
    response_model=ApiResponse[SearchResultDTO],
    responses={
        400: {
            "description": "Query too short",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "error": {
                            "code": "SEARCH_QUERY_TOO_SHORT",
                            "message": "Search query must be at least 2 characters"
                        }
                    }
                }
            }
        }
    }
)
async def search_products(
    q: str = Query("", description="Search text, at least 2 characters"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, description=f"Maximum results, capped at {MAX_LIMIT}"),
    session: AsyncSession = Depends(get_session),
):
    """
    Search active products by name, tag and category.

    Results are ranked by relevance: +10 for a name match, +5 for a tag
    match and +3 for a category match.
    """
    use_case = SearchProducts(SqlAlchemyProductRepository(session))
    result = await use_case.execute(q, limit=limit)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value)


@router.get("", response_model=ApiResponse[ProductListResponseDTO])
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(CATALOG_PAGE_SIZE, ge=1, le=50),
    category: Optional[str] = Query(None, description="Exact category, 'all' for every category"),
    sort: ProductSort = Query(ProductSort.NEWEST, description="newest, price-asc, price-desc, name-asc or name-desc"),
    session: AsyncSession = Depends(get_session),
):
    """
    Browse the active catalog, one page at a time.
    """
    use_case = ListProducts(SqlAlchemyProductRepository(session))
    result = await use_case.execute(
        page=page,
        limit=limit,
        category=None if category in (None, "", "all") else category,
        sort=sort,
    )

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value)


@router.get(
    "/{product_id}",
    response_model=ApiResponse[ProductDTO],
    responses={404: {"description": "Product not found or no longer sold"}},
)
async def get_product(
    product_id: str,
    session: AsyncSession = Depends(get_session),
    identity: Identity = Depends(get_identity),
):
    """
    Product detail. Deactivated products are only visible to admins.
    """
    use_case = GetProduct(SqlAlchemyProductRepository(session))
    result = await use_case.execute(product_id, identity)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value)
