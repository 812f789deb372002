from .order_repository import SqlAlchemyOrderRepository
from .corporate_invoice_repository import SqlAlchemyCorporateInvoiceRepository
from .product_repository import SqlAlchemyProductRepository
from .user_repository import SqlAlchemyUserRepository
from .shop_settings_repository import SqlAlchemyShopSettingsRepository

__all__ = [
    "SqlAlchemyOrderRepository",
    "SqlAlchemyCorporateInvoiceRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemyUserRepository",
    "SqlAlchemyShopSettingsRepository",
]
