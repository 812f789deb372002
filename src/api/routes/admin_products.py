"""Back-office Product API Routes"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import get_identity
from src.api.error import ClientError
from src.api.schemas.response import ApiResponse, success_response
from src.app.use_cases.catalog.create_product import CreateProduct
from src.app.use_cases.catalog.dtos import (
    CreateProductCommandDTO,
    ProductChangesDTO,
    ProductDTO,
    ProductListResponseDTO,
    UpdateProductCommandDTO,
)
from src.app.use_cases.catalog.list_products import ADMIN_PAGE_SIZE, ListAdminProducts
from src.app.use_cases.catalog.update_product import DeactivateProduct, UpdateProduct
from src.adapter.repositories.product_repository import SqlAlchemyProductRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session
from src.domain.identity import Identity

router = APIRouter(prefix="/admin/products", tags=["Admin"])


@router.get("", response_model=ApiResponse[ProductListResponseDTO])
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(ADMIN_PAGE_SIZE, ge=1, le=100),
    category: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = Query(None, description="Name, description or category"),
    session: AsyncSession = Depends(get_session),
    identity: Identity = Depends(get_identity),
):
    """
    List the whole catalog for the back office, newest first, inactive products included.
    """
    use_case = ListAdminProducts(SqlAlchemyProductRepository(session))
    result = await use_case.execute(
        identity,
        page=page,
        limit=limit,
        category=None if category in (None, "", "all") else category,
        is_active=is_active,
        search=search,
    )

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value)


@router.post(
    "",
    response_model=ApiResponse[ProductDTO],
    status_code=status.HTTP_201_CREATED,
    responses={403: {"description": "Admin role required"}},
)
async def create_product(
    request: CreateProductCommandDTO,
    session: AsyncSession = Depends(get_session),
    identity: Identity = Depends(get_identity),
):
    """
    Add a product to the catalog. Tags are stored lower-cased.
    """
    use_case = CreateProduct(SqlAlchemyUnitOfWork(session), SqlAlchemyProductRepository(session))
    result = await use_case.execute(request, identity)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value, "Produit créé avec succès")


@router.patch(
    "/{product_id}",
    response_model=ApiResponse[ProductDTO],
    responses={403: {"description": "Admin role required"}, 404: {"description": "Product not found"}},
)
async def update_product(
    product_id: str,
    request: ProductChangesDTO,
    session: AsyncSession = Depends(get_session),
    identity: Identity = Depends(get_identity),
):
    """
    Edit a product. Omitted fields are left unchanged.
    """
    command = UpdateProductCommandDTO(product_id=product_id, **request.model_dump())

    use_case = UpdateProduct(SqlAlchemyUnitOfWork(session), SqlAlchemyProductRepository(session))
    result = await use_case.execute(command, identity)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value, "Produit mis à jour avec succès")


@router.delete(
    "/{product_id}",
    response_model=ApiResponse[ProductDTO],
    responses={403: {"description": "Admin role required"}, 404: {"description": "Product not found"}},
)
async def deactivate_product(
    product_id: str,
    session: AsyncSession = Depends(get_session),
    identity: Identity = Depends(get_identity),
):
    """
    Withdraw a product from sale. The product is deactivated, not erased,
    so past orders and invoices keep their references.
    """
    use_case = DeactivateProduct(SqlAlchemyUnitOfWork(session), SqlAlchemyProductRepository(session))
    result = await use_case.execute(product_id, identity)

    if result.is_err():
        raise ClientError(result.error)

    return success_response(result.value, "Produit retiré du catalogue")
