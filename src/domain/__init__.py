from .base import BaseModel, generate_uuid
from .product import Product
from .user import User, UserRole, AccountType
from .order import Order, OrderStatus, PaymentStatus, DeliveryType
from .corporate_invoice import CorporateInvoice, InvoiceStatus
from .shop_settings import ShopSettings

__all__ = [
    "BaseModel",
    "generate_uuid",
    "Product",
    "User",
    "UserRole",
    "AccountType",
    "Order",
    "OrderStatus",
    "PaymentStatus",
    "DeliveryType",
    "CorporateInvoice",
    "InvoiceStatus",
    "ShopSettings",
]
