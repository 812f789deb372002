"""Cart Aggregate

Session-scoped list of line items built from catalog products. The cart is
not persisted: it is rebuilt from the client's line snapshot on every
request, priced from the catalog, then turned into an order at checkout.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional
from src.domain.product import Product, is_bereavement_product

MAX_QUANTITY_PER_LINE = 50
CENTS = Decimal("0.01")


class CartError(ValueError):
    """Raised when a cart mutation breaks a cart rule"""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


@dataclass
class CartItem:
    product_id: str
    name: str
    price: Decimal
    quantity: int
    image: str = ""
    category: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return (self.price * self.quantity).quantize(CENTS)

    @property
    def is_bereavement(self) -> bool:
        return is_bereavement_product(self.name, self.category)


@dataclass
class Cart:
    items: List[CartItem] = field(default_factory=list)

    def add_item(self, product: Product, quantity: int = 1) -> CartItem:
        """Add a product, merging with an existing line of the same product"""
        if not product.is_active:
            raise CartError("PRODUCT_UNAVAILABLE", f"Product {product.name} is no longer available")
        if quantity < 1:
            raise CartError("INVALID_QUANTITY", "Quantity must be at least 1")

        existing = self._find(product.id)
        new_quantity = quantity + (existing.quantity if existing else 0)
        if new_quantity > MAX_QUANTITY_PER_LINE:
            raise CartError(
                "INVALID_QUANTITY",
                f"Maximum quantity per item is {MAX_QUANTITY_PER_LINE}",
            )

        if existing:
            existing.quantity = new_quantity
            existing.price = Decimal(product.price)
            return existing

        item = CartItem(
            product_id=product.id,
            name=product.name,
            price=Decimal(product.price),
            quantity=quantity,
            image=product.main_image or "",
            category=product.category,
        )
        self.items.append(item)
        return item

    def remove_item(self, product_id: str) -> None:
        self.items = [item for item in self.items if item.product_id != product_id]

    def update_quantity(self, product_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove_item(product_id)
            return
        if quantity > MAX_QUANTITY_PER_LINE:
            raise CartError(
                "INVALID_QUANTITY",
                f"Maximum quantity per item is {MAX_QUANTITY_PER_LINE}",
            )
        item = self._find(product_id)
        if item:
            item.quantity = quantity

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_amount(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0.00")).quantize(CENTS)

    # Bereavement classification drives the condolence form at checkout

    @property
    def bereavement_items(self) -> List[CartItem]:
        return [item for item in self.items if item.is_bereavement]

    @property
    def has_bereavement_items(self) -> bool:
        return bool(self.bereavement_items)

    @property
    def is_bereavement_only(self) -> bool:
        return self.has_bereavement_items and len(self.bereavement_items) == len(self.items)

    @property
    def has_mixed_categories(self) -> bool:
        return self.has_bereavement_items and len(self.bereavement_items) < len(self.items)

    def _find(self, product_id: str) -> Optional[CartItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None
