"""Product Domain Entity

Catalog entry as needed by ordering, cart summary and search.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import JSON, Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid

BEREAVEMENT_CATEGORY = "Deuil"
BEREAVEMENT_KEYWORDS = ("deuil", "funéraire", "obsèques")

NAME_MATCH_SCORE = 10
TAG_MATCH_SCORE = 5
CATEGORY_MATCH_SCORE = 3


class ProductSort(str, Enum):
    """Catalog listing orders"""
    NEWEST = "newest"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"


class Product(BaseModel, table=True):
    """
    Product - Catalog item

    Domain Rules:
    - Only active products can be added to a cart or ordered
    - Tags are stored lower-cased
    """

    __tablename__ = "products"
    __table_args__ = (
        Index('ix_products_category_active', 'category', 'is_active'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique product identifier"
    )

    name: str = Field(
        sa_column=Column(String(200), nullable=False),
        description="Product name"
    )

    description: str = Field(
        default="",
        sa_column=Column(Text, nullable=False, default=""),
        description="Product description"
    )

    price: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False),
        description="Unit price, VAT included"
    )

    category: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Catalog category (e.g., 'Bouquets', 'Deuil')"
    )

    tags: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False, default=list),
        description="Search tags"
    )

    images: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False, default=list),
        description="Image URLs, first one is the main image"
    )

    is_active: bool = Field(
        default=True,
        description="Inactive products are hidden and cannot be ordered"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    @property
    def main_image(self) -> Optional[str]:
        return self.images[0] if self.images else None


def is_bereavement_product(name: str, category: Optional[str]) -> bool:
    """Funeral arrangements need the condolence form at checkout"""
    if category == BEREAVEMENT_CATEGORY:
        return True
    lowered = (name or "").lower()
    return any(keyword in lowered for keyword in BEREAVEMENT_KEYWORDS)


def relevance_score(product: Product, query: str) -> int:
    """Name match +10, any tag match +5, category match +3"""
    needle = query.strip().lower()
    score = 0
    if needle in product.name.lower():
        score += NAME_MATCH_SCORE
    if any(needle in tag.lower() for tag in product.tags or []):
        score += TAG_MATCH_SCORE
    if needle in product.category.lower():
        score += CATEGORY_MATCH_SCORE
    return score


def normalize_tags(tags: List[str]) -> List[str]:
    """Trimmed, lower-cased, blanks and duplicates dropped, order kept"""
    normalized = []
    for tag in tags:
        tag = tag.strip().lower()
        if tag and tag not in normalized:
            normalized.append(tag)
    return normalized
