"""SQLAlchemy User Repository Implementation"""

from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.user_repository import UserRepository
from src.domain.user import AccountType, User


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: str) -> Optional[User]:
        statement = select(User).where(User.id == user_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list_corporate(self) -> List[User]:
        statement = (
            select(User)
            .where(User.account_type == AccountType.CORPORATE)
            .order_by(User.created_at.asc())
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
