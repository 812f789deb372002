"""UpdateOrderStatus Use Case

Back-office status changes along the fulfillment sequence.
"""

import logging
from libs.result import Result, Return, Error
from src.app import errors
from src.app.access_control import require_admin
from src.app.repositories.order_repository import OrderRepository
from src.app.services.email_service import EmailService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.identity import Identity
from src.domain.order import InvalidTransition, apply_order_status
from .dtos import OrderDTO, UpdateOrderStatusCommandDTO

logger = logging.getLogger(__name__)


class UpdateOrderStatus:
    """
    Use Case: Move an order to a new status (admin)

    Business Rules:
    1. Admin only
    2. Status moves forward only, skipping steps is allowed
    3. delivered and cancelled are terminal
    4. Requesting the current status changes nothing
    5. Each change appends a timeline event and sets its tracking date

    Flow:
    1. Check admin access
    2. Load order
    3. Apply transition
    4. Commit transaction
    5. E-mail the customer (best effort)
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
        self, command: UpdateOrderStatusCommandDTO, identity: Identity
    ) -> Result[OrderDTO]:
        denied = require_admin(identity)
        if denied:
            return Return.err(denied)

        try:
            # Step 1: Load order
            order = await self.order_repo.get_by_id(command.order_id)
            if not order:
                return Return.err(
                    errors.not_found(errors.ORDER_NOT_FOUND, "Order", command.order_id)
                )

            # Step 2: Apply transition
            try:
                changed = apply_order_status(order, command.status, command.note)
            except InvalidTransition as e:
                return Return.err(
                    errors.invalid_transition(e.current.value, e.requested.value)
                )

            if not changed:
                return Return.ok(OrderDTO.from_order(order))

            # Step 3: Persist and commit
            order = await self.order_repo.update(order)
            await self.uow.commit()

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_ORDER_STATUS_FAILED",
                    message="Failed to update order status",
                    reason=str(e),
                )
            )

        # Step 4: Notify customer
        if not await self.email_service.send_order_status_update(order):
            logger.warning(f"Status e-mail not sent for {order.order_number}")

        logger.info(f"Order {order.order_number} moved to {order.status.value}")
        return Return.ok(OrderDTO.from_order(order))
