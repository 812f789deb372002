"""SQLAlchemy Order Repository Implementation

Implements order persistence using SQLAlchemy async session.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from sqlmodel import select, func, or_
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.order_repository import OrderRepository
from src.domain.order import Order, OrderStatus
from .patterns import LIKE_ESCAPE, like_pattern


class SqlAlchemyOrderRepository(OrderRepository):
    """
    SQLAlchemy implementation of OrderRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, order: Order) -> Order:
        self.session.add(order)
        await self.session.flush()
        await self.session.refresh(order)
        return order

    async def get_by_id(self, order_id: str) -> Optional[Order]:
        statement = select(Order).where(Order.id == order_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_payment_intent_id(self, payment_intent_id: str) -> Optional[Order]:
        statement = select(Order).where(Order.payment_intent_id == payment_intent_id)
        result = await self.session.execute(statement)
        return result.scalars().first()

    async def update(self, order: Order) -> Order:
        self.session.add(order)
        await self.session.flush()
        await self.session.refresh(order)
        return order

    async def count_created_between(self, start: datetime, end: datetime) -> int:
        stmt = select(func.count()).select_from(Order).where(
            Order.created_at >= start,
            Order.created_at < end,
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def list_for_customer(
        self,
        user_id: str,
        email: str,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[Order], int]:
        """
        Retrieve orders owned by a user or placed with their e-mail

        Returns:
            Tuple of (orders newest first, total count)
        """
        condition = or_(Order.user_id == user_id, Order.customer_email == email.lower())
        return await self._paginate(condition, limit, offset)

    async def list_orders(
        self,
        status: Optional[OrderStatus] = None,
        search: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Order], int]:
        """
        Retrieve orders for the back office

        Returns:
            Tuple of (orders newest first, total count)
        """
        conditions = []
        if status:
            conditions.append(Order.status == status)
        if search:
            pattern = like_pattern(search)
            conditions.append(
                or_(
                    Order.order_number.ilike(pattern, escape=LIKE_ESCAPE),
                    Order.customer_name.ilike(pattern, escape=LIKE_ESCAPE),
                    Order.customer_email.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
        if date_from:
            conditions.append(Order.created_at >= date_from)
        if date_to:
            conditions.append(Order.created_at <= date_to)

        return await self._paginate(conditions, limit, offset)

    async def list_billable(
        self, user_id: str, period_start: datetime, period_end: datetime
    ) -> List[Order]:
        statement = (
            select(Order)
            .where(
                Order.user_id == user_id,
                Order.status != OrderStatus.CANCELLED,
                Order.created_at >= period_start,
                Order.created_at < period_end,
            )
            .order_by(Order.created_at.asc())
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def _paginate(self, conditions, limit: int, offset: int) -> Tuple[List[Order], int]:
        if not isinstance(conditions, list):
            conditions = [conditions]

        # Get total count
        count_stmt = select(func.count()).select_from(Order).where(*conditions)
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar() or 0

        # Get page
        statement = (
            select(Order)
            .where(*conditions)
            .order_by(Order.created_at.desc(), Order.order_number.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all()), total
