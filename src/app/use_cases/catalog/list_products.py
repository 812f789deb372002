"""
ListProducts Use Cases

Public catalog browsing and the back-office product list.
"""
from typing import Optional
from libs.result import Result, Return
from src.app.access_control import require_admin
from src.app.repositories.product_repository import ProductRepository
from src.app.use_cases.common import build_pagination, page_offset
from src.domain.identity import Identity
from src.domain.product import ProductSort
from .dtos import ProductDTO, ProductListResponseDTO

CATALOG_PAGE_SIZE = 12
ADMIN_PAGE_SIZE = 50


class ListProducts:
    """
    Use case: Public catalog page

    Only active products are listed. category is an exact match,
    sort defaults to newest first.
    """

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    async def execute(
        self,
        page: int = 1,
        limit: int = CATALOG_PAGE_SIZE,
        category: Optional[str] = None,
        sort: ProductSort = ProductSort.NEWEST,
    ) -> Result[ProductListResponseDTO]:
        products, total = await self.product_repo.list_products(
            category=category,
            is_active=True,
            sort=sort,
            limit=limit,
            offset=page_offset(page, limit),
        )

        return Return.ok(
            ProductListResponseDTO(
                products=[ProductDTO.from_product(product) for product in products],
                pagination=build_pagination(page, limit, total),
            )
        )


class ListAdminProducts:
    """
    Use case: Back-office product list (admin)

    Inactive products are included unless is_active filters them out.
    search matches name, description and category, case-insensitively.
    """

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    async def execute(
        self,
        identity: Identity,
        page: int = 1,
        limit: int = ADMIN_PAGE_SIZE,
        category: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> Result[ProductListResponseDTO]:
        denied = require_admin(identity)
        if denied:
            return Return.err(denied)

        products, total = await self.product_repo.list_products(
            category=category,
            is_active=is_active,
            search=(search or "").strip() or None,
            limit=limit,
            offset=page_offset(page, limit),
        )

        return Return.ok(
            ProductListResponseDTO(
                products=[ProductDTO.from_product(product) for product in products],
                pagination=build_pagination(page, limit, total),
            )
        )
