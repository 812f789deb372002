"""
ListUserOrders Use Case

Order history of the requesting customer with pagination.
"""
from libs.result import Result, Return
from src.app.access_control import require_authenticated
from src.app.repositories.order_repository import OrderRepository
from src.app.use_cases.common import build_pagination, page_offset
from src.domain.identity import Identity
from .dtos import OrderDTO, OrderListResponseDTO


class ListUserOrders:
    """
    Use case: Customer order history

    Includes guest orders placed with the customer's e-mail.
    Orders are ordered by created_at DESC (most recent first).
    """

    def __init__(self, order_repo: OrderRepository):
        self.order_repo = order_repo

    async def execute(
        self, identity: Identity, page: int = 1, limit: int = 10
    ) -> Result[OrderListResponseDTO]:
        """
        List the identity's orders

        Args:
            identity: Requesting identity
            page: 1-based page number
            limit: Page size

        Returns:
            Result[OrderListResponseDTO]: Orders and pagination
        """
        denied = require_authenticated(identity)
        if denied:
            return Return.err(denied)

        orders, total = await self.order_repo.list_for_customer(
            user_id=identity.user_id,
            email=identity.email,
            limit=limit,
            offset=page_offset(page, limit),
        )

        return Return.ok(
            OrderListResponseDTO(
                orders=[OrderDTO.from_order(order) for order in orders],
                pagination=build_pagination(page, limit, total),
            )
        )
