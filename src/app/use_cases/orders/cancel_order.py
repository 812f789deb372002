"""CancelOrder Use Case"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app import errors
from src.app.access_control import check_order_cancel, check_order_read, require_authenticated
from src.app.repositories.order_repository import OrderRepository
from src.app.services.email_service import EmailService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.identity import Identity
from src.domain.order import InvalidTransition, OrderStatus, apply_order_status
from .dtos import OrderDTO

logger = logging.getLogger(__name__)


class CancelOrder:
    """
    Use Case: Cancel an order

    Business Rules:
    1. Customers cancel their own order while it is pending or confirmed
    2. Admins cancel any order that is not delivered
    3. Cancelling a cancelled order changes nothing
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        email_service: EmailService,
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.email_service = email_service

    async def execute(
        self, order_id: str, identity: Identity, reason: Optional[str] = None
    ) -> Result[OrderDTO]:
        denied = require_authenticated(identity)
        if denied:
            return Return.err(denied)

        try:
            order = await self.order_repo.get_by_id(order_id)
            if not order:
                return Return.err(errors.not_found(errors.ORDER_NOT_FOUND, "Order", order_id))

            denied = check_order_read(identity, order)
            if denied:
                return Return.err(denied)

            if order.status == OrderStatus.CANCELLED:
                return Return.ok(OrderDTO.from_order(order))

            denied = check_order_cancel(identity, order)
            if denied:
                return Return.err(denied)

            try:
                apply_order_status(order, OrderStatus.CANCELLED, reason or "Commande annulée")
            except InvalidTransition as e:
                return Return.err(
                    errors.invalid_transition(e.current.value, e.requested.value)
                )

            order = await self.order_repo.update(order)
            await self.uow.commit()

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CANCEL_ORDER_FAILED",
                    message="Failed to cancel order",
                    reason=str(e),
                )
            )

        if not await self.email_service.send_order_status_update(order):
            logger.warning(f"Cancellation e-mail not sent for {order.order_number}")

        logger.info(f"Order {order.order_number} cancelled")
        return Return.ok(OrderDTO.from_order(order))
