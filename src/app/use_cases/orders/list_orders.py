"""
ListOrders Use Case

Back-office order listing with filters and pagination.
"""
from datetime import datetime
from typing import Optional
from libs.result import Result, Return
from src.app.access_control import require_admin
from src.app.repositories.order_repository import OrderRepository
from src.app.use_cases.common import build_pagination, page_offset
from src.domain.identity import Identity
from src.domain.order import OrderStatus
from .dtos import OrderDTO, OrderListResponseDTO


class ListOrders:
    """
    Use case: Admin order listing

    Filters combine with AND. search matches order number, customer name
    and e-mail, case-insensitively.
    """

    def __init__(self, order_repo: OrderRepository):
        self.order_repo = order_repo

    async def execute(
        self,
        identity: Identity,
        page: int = 1,
        limit: int = 20,
        status: Optional[OrderStatus] = None,
        search: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> Result[OrderListResponseDTO]:
        denied = require_admin(identity)
        if denied:
            return Return.err(denied)

        orders, total = await self.order_repo.list_orders(
            status=status,
            search=(search or "").strip() or None,
            date_from=date_from,
            date_to=date_to,
            limit=limit,
            offset=page_offset(page, limit),
        )

        return Return.ok(
            OrderListResponseDTO(
                orders=[OrderDTO.from_order(order) for order in orders],
                pagination=build_pagination(page, limit, total),
            )
        )
