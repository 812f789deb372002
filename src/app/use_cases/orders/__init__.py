"""Order use cases"""
from .create_order import CreateOrder
from .get_order import GetOrder
from .update_order_status import UpdateOrderStatus
from .cancel_order import CancelOrder
from .list_user_orders import ListUserOrders
from .list_orders import ListOrders
from .create_order_payment_intent import CreateOrderPaymentIntent
from .handle_payment_event import HandlePaymentEvent
from .dtos import (
    CartLineDTO,
    CreateOrderCommandDTO,
    UpdateOrderStatusCommandDTO,
    OrderItemDTO,
    OrderDTO,
    OrderListResponseDTO,
    PaymentEventResultDTO,
)

__all__ = [
    "CreateOrder",
    "GetOrder",
    "UpdateOrderStatus",
    "CancelOrder",
    "ListUserOrders",
    "ListOrders",
    "CreateOrderPaymentIntent",
    "HandlePaymentEvent",
    "CartLineDTO",
    "CreateOrderCommandDTO",
    "UpdateOrderStatusCommandDTO",
    "OrderItemDTO",
    "OrderDTO",
    "OrderListResponseDTO",
    "PaymentEventResultDTO",
]
