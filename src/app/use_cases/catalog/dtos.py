"""Data Transfer Objects for Catalog Use Cases"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from src.app.use_cases.common import PaginationDTO
from src.app.use_cases.orders.dtos import CartLineDTO
from src.domain.cart import Cart, CartItem
from src.domain.product import Product, normalize_tags


class ProductSearchHitDTO(BaseModel):
    id: str
    name: str
    price: Decimal
    category: str
    image: Optional[str] = None
    score: int = Field(..., description="+10 name, +5 tag, +3 category")

    @classmethod
    def from_product(cls, product: Product, score: int) -> "ProductSearchHitDTO":
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            category=product.category,
            image=product.main_image,
            score=score,
        )


class SearchResultDTO(BaseModel):
    query: str
    products: List[ProductSearchHitDTO]
    total: int


class SummarizeCartCommandDTO(BaseModel):
    items: List[CartLineDTO] = Field(default_factory=list, description="Cart snapshot")


class CartItemDTO(BaseModel):
    product_id: str
    name: str
    price: Decimal
    quantity: int
    image: str = ""
    category: Optional[str] = None
    line_total: Decimal
    is_bereavement: bool

    @classmethod
    def from_item(cls, item: CartItem) -> "CartItemDTO":
        return cls(
            product_id=item.product_id,
            name=item.name,
            price=item.price,
            quantity=item.quantity,
            image=item.image,
            category=item.category,
            line_total=item.line_total,
            is_bereavement=item.is_bereavement,
        )


class CartSummaryDTO(BaseModel):
    """Cart priced from the catalog, with the flags that drive the checkout form"""

    items: List[CartItemDTO]
    total_items: int
    total_amount: Decimal
    has_bereavement_items: bool
    is_bereavement_only: bool
    has_mixed_categories: bool
    unavailable: List[str] = Field(
        default_factory=list,
        description="Product ids dropped because they no longer exist or are inactive"
    )

    @classmethod
    def from_cart(cls, cart: Cart, unavailable: List[str]) -> "CartSummaryDTO":
        return cls(
            items=[CartItemDTO.from_item(item) for item in cart.items],
            total_items=cart.total_items,
            total_amount=cart.total_amount,
            has_bereavement_items=cart.has_bereavement_items,
            is_bereavement_only=cart.is_bereavement_only,
            has_mixed_categories=cart.has_mixed_categories,
            unavailable=unavailable,
        )


class ProductDTO(BaseModel):
    id: str
    name: str
    description: str
    price: Decimal
    category: str
    tags: List[str]
    images: List[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_product(cls, product: Product) -> "ProductDTO":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            category=product.category,
            tags=list(product.tags or []),
            images=list(product.images or []),
            is_active=product.is_active,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductListResponseDTO(BaseModel):
    products: List[ProductDTO]
    pagination: PaginationDTO


class CreateProductCommandDTO(BaseModel):
    """
    Command DTO for adding a catalog product

    Used as input to CreateProduct use case.
    """

    name: str = Field(..., min_length=1, max_length=200, description="Product name")

    description: str = Field(default="", max_length=5000)

    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, description="Unit price, VAT included")

    category: str = Field(..., min_length=1, max_length=100, description="Catalog category")

    tags: List[str] = Field(default_factory=list, description="Search tags, stored lower-cased")

    images: List[str] = Field(default_factory=list, description="Image URLs, main image first")

    is_active: bool = Field(default=True)

    @field_validator("name", "category")
    @classmethod
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return normalize_tags(v)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Bouquet champêtre",
                "description": "Fleurs de saison, composition libre",
                "price": "45.00",
                "category": "Bouquets",
                "tags": ["champêtre", "saison"],
                "images": ["https://cdn.bellafleurs.fr/bouquet-champetre.jpg"],
            }
        }


class ProductChangesDTO(BaseModel):
    """
    Product fields an admin may edit

    Fields left to None keep their current value; tags and images replace
    the current lists.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    tags: Optional[List[str]] = None
    images: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @field_validator("name", "category")
    @classmethod
    def not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("must not be blank")
        return v.strip() if v is not None else v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return normalize_tags(v) if v is not None else v

    class Config:
        json_schema_extra = {"example": {"price": "49.90", "tags": ["roses", "anniversaire"]}}


class UpdateProductCommandDTO(ProductChangesDTO):
    """
    Command DTO for back-office product edits

    Used as input to UpdateProduct use case.
    """

    product_id: str = Field(..., description="Product identifier")
