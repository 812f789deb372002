"""SQLAlchemy Shop Settings Repository Implementation"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.shop_settings_repository import ShopSettingsRepository
from src.domain.shop_settings import SINGLETON_KEY, ShopSettings


class SqlAlchemyShopSettingsRepository(ShopSettingsRepository):
    """
    Settings stored as the single row keyed by SINGLETON_KEY

    A concurrent first save from two requests fails on the unique key
    instead of creating a second row.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self) -> Optional[ShopSettings]:
        statement = select(ShopSettings).where(ShopSettings.singleton_key == SINGLETON_KEY)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def save(self, settings: ShopSettings) -> ShopSettings:
        settings.singleton_key = SINGLETON_KEY
        self.session.add(settings)
        await self.session.flush()
        await self.session.refresh(settings)
        return settings
