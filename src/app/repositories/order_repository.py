"""Order Repository Interface

Defines the contract for order persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple
from src.domain.order import Order, OrderStatus


class OrderRepository(ABC):
    """
    Repository interface for Order persistence

    Orders are never deleted, so there is no delete operation.
    """

    @abstractmethod
    async def create(self, order: Order) -> Order:
        """
        Create a new order

        Args:
            order: Order entity to persist

        Returns:
            Created Order
        """
        pass

    @abstractmethod
    async def get_by_id(self, order_id: str) -> Optional[Order]:
        """
        Retrieve order by ID

        Args:
            order_id: Order ID

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_payment_intent_id(self, payment_intent_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def update(self, order: Order) -> Order:
        """
        Update an existing order

        Args:
            order: Order entity with updated values

        Returns:
            Updated Order
        """
        pass

    @abstractmethod
    async def count_created_between(self, start: datetime, end: datetime) -> int:
        """
        Count orders created in [start, end)

        Used to derive the daily order number sequence.
        """
        pass

    @abstractmethod
    async def list_for_customer(
        self,
        user_id: str,
        email: str,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[Order], int]:
        """
        Retrieve orders owned by a user or placed with their e-mail

        Args:
            user_id: Owning user ID
            email: Customer e-mail (matches guest orders)
            limit: Maximum number of orders to return
            offset: Offset for pagination

        Returns:
            Tuple of (orders newest first, total count)
        """
        pass

    @abstractmethod
    async def list_orders(
        self,
        status: Optional[OrderStatus] = None,
        search: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Order], int]:
        """
        Retrieve orders for the back office

        Args:
            status: Optional filter by status
            search: Case-insensitive substring of order number, customer name or e-mail
            date_from: Created at or after
            date_to: Created at or before
            limit: Maximum number of orders to return
            offset: Offset for pagination

        Returns:
            Tuple of (orders newest first, total count)
        """
        pass

    @abstractmethod
    async def list_billable(
        self, user_id: str, period_start: datetime, period_end: datetime
    ) -> List[Order]:
        """
        Retrieve a user's non-cancelled orders created in [period_start, period_end)

        Returns:
            Orders oldest first
        """
        pass
