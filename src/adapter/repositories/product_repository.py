"""SQLAlchemy Product Repository Implementation"""

from typing import List, Optional, Tuple
from sqlmodel import select, func, or_
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.product_repository import ProductRepository
from src.domain.product import Product, ProductSort, relevance_score
from .patterns import LIKE_ESCAPE, like_pattern

SORT_COLUMNS = {
    ProductSort.NEWEST: (Product.created_at.desc(), Product.name.asc()),
    ProductSort.PRICE_ASC: (Product.price.asc(), Product.name.asc()),
    ProductSort.PRICE_DESC: (Product.price.desc(), Product.name.asc()),
    ProductSort.NAME_ASC: (Product.name.asc(),),
    ProductSort.NAME_DESC: (Product.name.desc(),),
}


class SqlAlchemyProductRepository(ProductRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, product: Product) -> Product:
        self.session.add(product)
        await self.session.flush()
        await self.session.refresh(product)
        return product

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        statement = select(Product).where(Product.id == product_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def update(self, product: Product) -> Product:
        self.session.add(product)
        await self.session.flush()
        await self.session.refresh(product)
        return product

    async def get_by_ids(self, product_ids: List[str]) -> List[Product]:
        if not product_ids:
            return []
        statement = select(Product).where(Product.id.in_(product_ids))
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def list_products(
        self,
        category: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        sort: ProductSort = ProductSort.NEWEST,
        limit: int = 12,
        offset: int = 0,
    ) -> Tuple[List[Product], int]:
        conditions = []
        if category:
            conditions.append(Product.category == category)
        if is_active is not None:
            conditions.append(Product.is_active == is_active)
        if search:
            pattern = like_pattern(search)
            conditions.append(
                or_(
                    Product.name.ilike(pattern, escape=LIKE_ESCAPE),
                    Product.description.ilike(pattern, escape=LIKE_ESCAPE),
                    Product.category.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        # Get total count
        count_stmt = select(func.count()).select_from(Product).where(*conditions)
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar() or 0

        # Get page
        statement = (
            select(Product)
            .where(*conditions)
            .order_by(*SORT_COLUMNS[sort])
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all()), total

    async def search_active(self, query: str, limit: int = 100) -> List[Product]:
        """
        Candidate products for ranking

        Matching runs on the loaded rows: tags are stored as escaped JSON
        text and SQLite only folds ASCII case, so SQL LIKE misses accented
        terms such as "mariée".
        """
        statement = (
            select(Product)
            .where(Product.is_active == True)  # noqa: E712
            .order_by(Product.name.asc())
        )
        result = await self.session.execute(statement)
        matches = [
            product for product in result.scalars().all() if relevance_score(product, query) > 0
        ]
        return matches[:limit]
