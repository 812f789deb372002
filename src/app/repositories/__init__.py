from .order_repository import OrderRepository
from .corporate_invoice_repository import CorporateInvoiceRepository
from .product_repository import ProductRepository
from .user_repository import UserRepository
from .shop_settings_repository import ShopSettingsRepository

__all__ = [
    "OrderRepository",
    "CorporateInvoiceRepository",
    "ProductRepository",
    "UserRepository",
    "ShopSettingsRepository",
]
