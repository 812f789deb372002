"""Order Domain Entity

Tracks a customer order from checkout to delivery. Embedded documents
(items, delivery info, timeline) are stored as JSON columns and exposed
through the typed value objects below.
"""

import re
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
import pydantic
from pydantic import field_validator, model_validator
from sqlmodel import Field, Column, Index
from sqlalchemy import JSON, Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid

CENTS = Decimal("0.01")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_PATTERN = re.compile(r"^(?:(?:\+|00)33|0)\s*[1-9](?:[\s.-]*\d{2}){4}$")


class OrderStatus(str, Enum):
    """Order fulfillment status"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Order payment status"""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class DeliveryType(str, Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"


FULFILLMENT_SEQUENCE = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.DELIVERED,
]
TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}
CUSTOMER_CANCELLABLE_STATUSES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}


class InvalidTransition(ValueError):
    """Raised when a status change would go backwards or leave a terminal state"""

    def __init__(self, current: Enum, requested: Enum):
        super().__init__(
            f"Invalid status change from '{current.value}' to '{requested.value}'"
        )
        self.current = current
        self.requested = requested


# Embedded value objects


class OrderItem(pydantic.BaseModel):
    product_id: str
    name: str
    price: Decimal = pydantic.Field(..., ge=0)
    quantity: int = pydantic.Field(..., ge=1, le=50)
    image: str = ""

    @property
    def line_total(self) -> Decimal:
        return (self.price * self.quantity).quantize(CENTS)


class CustomerInfo(pydantic.BaseModel):
    name: str = pydantic.Field(..., min_length=2, max_length=100)
    email: str
    phone: str

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        v = v.strip().lower()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email format")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        v = v.strip()
        if not PHONE_PATTERN.match(v):
            raise ValueError("Invalid phone format")
        return v


class DeliveryAddress(pydantic.BaseModel):
    street: str = pydantic.Field(..., min_length=1, max_length=200)
    city: str = pydantic.Field(..., min_length=1, max_length=100)
    zip_code: str
    complement: Optional[str] = pydantic.Field(default=None, max_length=200)


class DeliveryInfo(pydantic.BaseModel):
    type: DeliveryType
    address: Optional[DeliveryAddress] = None
    date: datetime
    notes: Optional[str] = pydantic.Field(default=None, max_length=500)

    @model_validator(mode="after")
    def address_required_for_delivery(self):
        if self.type == DeliveryType.DELIVERY and self.address is None:
            raise ValueError("Delivery address is required for home delivery")
        return self


class BereavementInfo(pydantic.BaseModel):
    """Condolence details required when the cart holds funeral arrangements"""

    deceased_name: str = pydantic.Field(..., min_length=2, max_length=100)
    sender_name: str = pydantic.Field(..., min_length=2, max_length=100)
    condolence_message: str = pydantic.Field(..., min_length=10, max_length=500)

    @field_validator("deceased_name", "sender_name", "condolence_message", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @property
    def card_message(self) -> str:
        return f"De la part de {self.sender_name}: {self.condolence_message}"


class TimelineEntry(pydantic.BaseModel):
    status: OrderStatus
    date: datetime
    note: Optional[str] = None


class Order(BaseModel, table=True):
    """
    Order - Customer order

    Domain Rules:
    - order_number is unique (BF-YYYYMMDD-NNNN)
    - total_amount is the sum of items price * quantity
    - Status moves forward only: pending -> confirmed -> preparing -> ready -> delivered
    - cancelled is reachable from any non-terminal status
    - Orders are never deleted
    """

    __tablename__ = "orders"
    __table_args__ = (
        Index('ix_orders_user_id_created_at', 'user_id', 'created_at'),
        Index('ix_orders_customer_email_created_at', 'customer_email', 'created_at'),
        Index('ix_orders_status_created_at', 'status', 'created_at'),
        Index('ix_orders_order_number', 'order_number', unique=True),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique order identifier"
    )

    order_number: str = Field(
        sa_column=Column(String(20), nullable=False, unique=True),
        description="Human-readable order number (e.g., BF-20240131-0001)"
    )

    user_id: Optional[str] = Field(
        default=None,
        description="Owning user, None for guest checkout"
    )

    customer_name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Customer full name"
    )

    customer_email: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Customer email (lower-cased)"
    )

    customer_phone: str = Field(
        sa_column=Column(String(30), nullable=False),
        description="Customer phone number"
    )

    items: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Line items with name, price and image snapshots"
    )

    total_amount: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False),
        description="Sum of line totals"
    )

    status: OrderStatus = Field(
        default=OrderStatus.PENDING,
        description="Fulfillment status"
    )

    payment_status: PaymentStatus = Field(
        default=PaymentStatus.PENDING,
        description="Payment status"
    )

    payment_method: str = Field(
        default="card",
        sa_column=Column(String(20), nullable=False, default="card"),
        description="Payment method (card, monthly_invoice)"
    )

    payment_intent_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Payment processor intent identifier"
    )

    delivery_info: Dict[str, Any] = Field(
        sa_column=Column(JSON, nullable=False),
        description="Delivery type, address, date and notes"
    )

    bereavement_info: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="Condolence details for funeral arrangements"
    )

    corporate_data: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="Corporate metadata (company_name, billing)"
    )

    timeline: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Ordered status change events"
    )

    admin_notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Internal notes"
    )

    confirmed_at: Optional[datetime] = Field(default=None)
    ready_at: Optional[datetime] = Field(default=None)
    delivered_at: Optional[datetime] = Field(default=None)
    cancelled_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Order creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    def line_items(self) -> List[OrderItem]:
        return [OrderItem.model_validate(item) for item in self.items]

    def timeline_entries(self) -> List[TimelineEntry]:
        return [TimelineEntry.model_validate(entry) for entry in self.timeline]

    @property
    def is_corporate(self) -> bool:
        return bool(self.corporate_data)


def compute_order_total(items: List[OrderItem]) -> Decimal:
    return sum((item.line_total for item in items), Decimal("0.00")).quantize(CENTS)


def check_order_transition(current: OrderStatus, requested: OrderStatus) -> bool:
    """
    Validate a status change

    Returns:
        False when requested == current (nothing to do), True otherwise

    Raises:
        InvalidTransition: leaving a terminal status or moving backwards
    """
    if requested == current:
        return False
    if current in TERMINAL_STATUSES:
        raise InvalidTransition(current, requested)
    if requested == OrderStatus.CANCELLED:
        return True
    if FULFILLMENT_SEQUENCE.index(requested) < FULFILLMENT_SEQUENCE.index(current):
        raise InvalidTransition(current, requested)
    return True


def add_timeline_entry(
    order: Order, status: OrderStatus, note: Optional[str] = None, at: Optional[datetime] = None
) -> None:
    entry = TimelineEntry(status=status, date=at or datetime.utcnow(), note=note)
    # Reassign so the JSON column is flagged dirty
    order.timeline = [*order.timeline, entry.model_dump(mode="json")]


def apply_order_status(
    order: Order, requested: OrderStatus, note: Optional[str] = None, at: Optional[datetime] = None
) -> bool:
    """
    Move an order to a new status, recording the timeline event and tracking date

    Returns:
        True if the order changed, False for a same-status no-op
    """
    if not check_order_transition(order.status, requested):
        return False

    at = at or datetime.utcnow()
    order.status = requested
    add_timeline_entry(order, requested, note or f"Status changed to {requested.value}", at)

    if requested == OrderStatus.CONFIRMED:
        order.confirmed_at = at
    elif requested == OrderStatus.READY:
        order.ready_at = at
    elif requested == OrderStatus.DELIVERED:
        order.delivered_at = at
    elif requested == OrderStatus.CANCELLED:
        order.cancelled_at = at

    order.updated_at = at
    return True


def generate_order_number(created_on: datetime, sequence: int) -> str:
    return f"BF-{created_on.strftime('%Y%m%d')}-{sequence:04d}"
