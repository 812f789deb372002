"""GetShopSettings Use Case"""

from libs.result import Result, Return
from src.app.access_control import require_admin
from src.app.repositories.shop_settings_repository import ShopSettingsRepository
from src.domain.identity import Identity
from src.domain.shop_settings import ShopSettings
from .dtos import ShopSettingsDTO


class GetShopSettings:
    """
    Use Case: Read closure settings (admin)

    A shop that never saved settings reports the defaults.
    """

    def __init__(self, settings_repo: ShopSettingsRepository):
        self.settings_repo = settings_repo

    async def execute(self, identity: Identity) -> Result[ShopSettingsDTO]:
        denied = require_admin(identity)
        if denied:
            return Return.err(denied)

        settings = await self.settings_repo.get() or ShopSettings()
        return Return.ok(ShopSettingsDTO.from_settings(settings))
