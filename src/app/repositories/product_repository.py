"""Product Repository Interface

Catalog access for browsing, ordering, cart summary, search and the back office.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from src.domain.product import Product, ProductSort


class ProductRepository(ABC):
    """
    Repository interface for Product persistence

    Products are deactivated, never deleted: past orders keep referencing them.
    """

    @abstractmethod
    async def create(self, product: Product) -> Product:
        pass

    @abstractmethod
    async def get_by_id(self, product_id: str) -> Optional[Product]:
        """
        Retrieve product by ID, active or not

        Returns:
            Product if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, product: Product) -> Product:
        pass

    @abstractmethod
    async def get_by_ids(self, product_ids: List[str]) -> List[Product]:
        """
        Retrieve products by ID, active or not

        Args:
            product_ids: Product IDs

        Returns:
            Products found (missing IDs are absent from the list)
        """
        pass

    @abstractmethod
    async def list_products(
        self,
        category: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        sort: ProductSort = ProductSort.NEWEST,
        limit: int = 12,
        offset: int = 0,
    ) -> Tuple[List[Product], int]:
        """
        Retrieve a page of products

        Args:
            category: Exact category filter
            is_active: Active flag filter, None for both
            search: Case-insensitive substring of name, description or category
            sort: Listing order
            limit: Page size
            offset: Records to skip

        Returns:
            Tuple of (products, total count)
        """
        pass

    @abstractmethod
    async def search_active(self, query: str, limit: int = 100) -> List[Product]:
        """
        Retrieve active products whose name, tags or category contain the query

        Args:
            query: Case-insensitive substring
            limit: Maximum number of candidates to return

        Returns:
            Matching products, unranked
        """
        pass
