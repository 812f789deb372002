"""Shop settings use cases"""
from .get_shop_status import GetShopStatus
from .get_shop_settings import GetShopSettings
from .update_shop_settings import UpdateShopSettings
from .dtos import ShopStatusDTO, ShopSettingsDTO, UpdateShopSettingsCommandDTO

__all__ = [
    "GetShopStatus",
    "GetShopSettings",
    "UpdateShopSettings",
    "ShopStatusDTO",
    "ShopSettingsDTO",
    "UpdateShopSettingsCommandDTO",
]
