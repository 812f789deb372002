"""Shared DTOs and helpers for use cases"""

import math
from decimal import Decimal, ROUND_HALF_UP
from pydantic import BaseModel, Field

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class PaginationDTO(BaseModel):
    page: int = Field(..., ge=1, description="Current page (1-based)")
    limit: int = Field(..., ge=1, description="Page size")
    total: int = Field(..., ge=0, description="Total number of records")
    pages: int = Field(..., ge=0, description="Number of pages, ceil(total / limit)")


class PaymentIntentResponseDTO(BaseModel):
    """Client secret returned to the checkout page"""

    payment_intent_id: str = Field(..., description="Processor intent identifier")
    client_secret: str = Field(..., description="Secret used by the client SDK to confirm payment")
    amount: Decimal = Field(..., description="Amount charged, in currency units")
    currency: str = Field(..., description="ISO currency code")

    class Config:
        json_schema_extra = {
            "example": {
                "payment_intent_id": "pi_3OabcXYZ",
                "client_secret": "pi_3OabcXYZ_secret_123",
                "amount": "120.00",
                "currency": "eur",
            }
        }


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def build_pagination(page: int, limit: int, total: int) -> PaginationDTO:
    return PaginationDTO(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


def to_minor_units(amount: Decimal) -> int:
    """Currency units to cents, half-up"""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
