"""Shop Settings Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.shop_settings import ShopSettings


class ShopSettingsRepository(ABC):
    @abstractmethod
    async def get(self) -> Optional[ShopSettings]:
        """
        Retrieve the settings row

        Returns:
            ShopSettings if it was ever saved, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, settings: ShopSettings) -> ShopSettings:
        """
        Insert or update the settings row

        Args:
            settings: Settings to persist

        Returns:
            Persisted ShopSettings
        """
        pass
