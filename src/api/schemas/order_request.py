"""Request schemas for Order API

Pydantic models for validating incoming HTTP requests.
"""

from typing import Optional
from pydantic import BaseModel, Field
from src.domain.order import OrderStatus


class CancelOrderRequestSchema(BaseModel):
    """
    Request schema for cancelling an order

    Used for POST /orders/{order_id}/cancel endpoint.
    """

    reason: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Why the order is cancelled, added to the timeline"
    )


class UpdateOrderStatusRequestSchema(BaseModel):
    """
    Request schema for the back-office status change

    Used for PATCH /admin/orders/{order_id}/status endpoint.
    """

    status: OrderStatus = Field(
        ...,
        description="Requested status: pending, confirmed, preparing, ready, delivered or cancelled"
    )

    note: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Note added to the order timeline"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "status": "preparing",
                "note": "Bouquet en cours de composition"
            }
        }
