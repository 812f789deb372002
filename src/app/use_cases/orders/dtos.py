"""Data Transfer Objects for Order Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from src.app.use_cases.common import PaginationDTO
from src.domain.order import (
    BereavementInfo,
    CustomerInfo,
    DeliveryInfo,
    Order,
    OrderStatus,
    TimelineEntry,
)


class CartLineDTO(BaseModel):
    """Line of the client's cart snapshot; prices always come from the catalog"""

    product_id: str = Field(..., min_length=1, description="Product identifier")
    quantity: int = Field(..., ge=1, le=50, description="Quantity (1-50)")


class CreateOrderCommandDTO(BaseModel):
    """
    Command DTO for checkout

    Used as input to CreateOrder use case.
    """

    items: List[CartLineDTO] = Field(
        default_factory=list,
        description="Cart snapshot"
    )

    customer_info: CustomerInfo = Field(
        ...,
        description="Customer contact"
    )

    delivery_info: DeliveryInfo = Field(
        ...,
        description="Delivery or pickup details"
    )

    bereavement_info: Optional[BereavementInfo] = Field(
        default=None,
        description="Required when the cart holds funeral arrangements"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "items": [{"product_id": "8f0c2a8e-3c1d-4b7e-9a55-0b6f3d1c2e4f", "quantity": 2}],
                "customer_info": {
                    "name": "Marie Dupont",
                    "email": "marie@example.com",
                    "phone": "06 12 34 56 78",
                },
                "delivery_info": {
                    "type": "delivery",
                    "address": {"street": "12 rue des Lilas", "city": "Brétigny-sur-Orge", "zip_code": "91220"},
                    "date": "2024-02-14T10:00:00",
                },
            }
        }


class UpdateOrderStatusCommandDTO(BaseModel):
    order_id: str = Field(..., description="Order identifier")
    status: OrderStatus = Field(..., description="Requested status")
    note: Optional[str] = Field(default=None, max_length=500, description="Timeline note")


class OrderItemDTO(BaseModel):
    product_id: str
    name: str
    price: Decimal
    quantity: int
    image: str = ""
    line_total: Decimal


class OrderDTO(BaseModel):
    """Order as returned by the API"""

    id: str
    order_number: str
    user_id: Optional[str] = None
    customer_info: CustomerInfo
    items: List[OrderItemDTO]
    total_amount: Decimal
    status: str
    payment_status: str
    payment_method: str
    delivery_info: Dict[str, Any]
    bereavement_info: Optional[Dict[str, Any]] = None
    corporate_data: Optional[Dict[str, Any]] = None
    timeline: List[TimelineEntry]
    admin_notes: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    ready_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_order(cls, order: Order) -> "OrderDTO":
        return cls(
            id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            customer_info=CustomerInfo.model_construct(
                name=order.customer_name,
                email=order.customer_email,
                phone=order.customer_phone,
            ),
            items=[
                OrderItemDTO(
                    product_id=item.product_id,
                    name=item.name,
                    price=item.price,
                    quantity=item.quantity,
                    image=item.image,
                    line_total=item.line_total,
                )
                for item in order.line_items()
            ],
            total_amount=order.total_amount,
            status=order.status.value,
            payment_status=order.payment_status.value,
            payment_method=order.payment_method,
            delivery_info=order.delivery_info,
            bereavement_info=order.bereavement_info,
            corporate_data=order.corporate_data,
            timeline=order.timeline_entries(),
            admin_notes=order.admin_notes,
            confirmed_at=order.confirmed_at,
            ready_at=order.ready_at,
            delivered_at=order.delivered_at,
            cancelled_at=order.cancelled_at,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponseDTO(BaseModel):
    orders: List[OrderDTO]
    pagination: PaginationDTO


class PaymentEventResultDTO(BaseModel):
    """Outcome of a payment webhook delivery"""

    event_type: str
    handled: bool = Field(..., description="False when the event was ignored")
    target: Optional[str] = Field(default=None, description="'order' or 'invoice'")
    target_id: Optional[str] = None
