"""GetOrder Use Case"""

from libs.result import Result, Return
from src.app import errors
from src.app.access_control import check_order_read, require_authenticated
from src.app.repositories.order_repository import OrderRepository
from src.domain.identity import Identity
from .dtos import OrderDTO


class GetOrder:
    """
    Use Case: Read one order

    Business Rules:
    1. Anonymous requests are rejected before the lookup
    2. Admins read every order
    3. Other identities read orders they own or that were placed with their e-mail
    """

    def __init__(self, order_repo: OrderRepository):
        self.order_repo = order_repo

    async def execute(self, order_id: str, identity: Identity) -> Result[OrderDTO]:
        denied = require_authenticated(identity)
        if denied:
            return Return.err(denied)

        order = await self.order_repo.get_by_id(order_id)
        if not order:
            return Return.err(errors.not_found(errors.ORDER_NOT_FOUND, "Order", order_id))

        denied = check_order_read(identity, order)
        if denied:
            return Return.err(denied)

        return Return.ok(OrderDTO.from_order(order))
