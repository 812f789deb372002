"""Unit tests for UpdateOrderStatus and CancelOrder use cases"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app import errors
from src.app.use_cases.orders.cancel_order import CancelOrder
from src.app.use_cases.orders.dtos import UpdateOrderStatusCommandDTO
from src.app.use_cases.orders.update_order_status import UpdateOrderStatus
from src.domain.identity import Admin, Anonymous, Corporate, Individual
from src.domain.order import OrderStatus
from tests.fixtures.factories import make_order

ADMIN = Admin(user_id="a1", email="admin@bellafleurs.fr")
OWNER = Individual(user_id="u1", email="marie@example.com")


@pytest.fixture
def mock_order_repo():
    repo = MagicMock()
    repo.update = AsyncMock(side_effect=lambda order: order)
    return repo


@pytest.fixture
def update_status(mock_uow, mock_order_repo, mock_email_service):
    return UpdateOrderStatus(mock_uow, mock_order_repo, mock_email_service)


@pytest.fixture
def cancel_order(mock_uow, mock_order_repo, mock_email_service):
    return CancelOrder(mock_uow, mock_order_repo, mock_email_service)


@pytest.mark.asyncio
class TestUpdateOrderStatus:
    async def test_forward_move_is_saved_and_notified(
        self, update_status, mock_order_repo, mock_uow, mock_email_service
    ):
        order = make_order(status=OrderStatus.CONFIRMED)
        mock_order_repo.get_by_id = AsyncMock(return_value=order)

        result = await update_status.execute(
            UpdateOrderStatusCommandDTO(order_id=order.id, status=OrderStatus.PREPARING, note="En cours"),
            ADMIN,
        )

        assert result.is_ok()
        assert result.value.status == "preparing"
        assert result.value.timeline[-1].note == "En cours"
        mock_uow.commit.assert_awaited_once()
        mock_email_service.send_order_status_update.assert_awaited_once_with(order)

    async def test_backward_move_is_rejected(self, update_status, mock_order_repo, mock_uow):
        order = make_order(status=OrderStatus.READY)
        mock_order_repo.get_by_id = AsyncMock(return_value=order)

        result = await update_status.execute(
            UpdateOrderStatusCommandDTO(order_id=order.id, status=OrderStatus.PREPARING),
            ADMIN,
        )

        assert result.error.code == errors.INVALID_TRANSITION
        assert order.status == OrderStatus.READY
        mock_uow.commit.assert_not_awaited()

    async def test_same_status_is_a_no_op(self, update_status, mock_order_repo, mock_email_service):
        order = make_order(status=OrderStatus.DELIVERED)
        mock_order_repo.get_by_id = AsyncMock(return_value=order)

        result = await update_status.execute(
            UpdateOrderStatusCommandDTO(order_id=order.id, status=OrderStatus.DELIVERED),
            ADMIN,
        )

        assert result.is_ok()
        mock_order_repo.update.assert_not_awaited()
        mock_email_service.send_order_status_update.assert_not_awaited()

    async def test_customers_cannot_change_status(self, update_status, mock_order_repo):
        mock_order_repo.get_by_id = AsyncMock()

        result = await update_status.execute(
            UpdateOrderStatusCommandDTO(order_id="o1", status=OrderStatus.CONFIRMED),
            OWNER,
        )

        assert result.error.code == errors.FORBIDDEN
        mock_order_repo.get_by_id.assert_not_awaited()

    async def test_unknown_order(self, update_status, mock_order_repo):
        mock_order_repo.get_by_id = AsyncMock(return_value=None)

        result = await update_status.execute(
            UpdateOrderStatusCommandDTO(order_id="missing", status=OrderStatus.CONFIRMED),
            ADMIN,
        )

        assert result.error.code == errors.ORDER_NOT_FOUND


@pytest.mark.asyncio
class TestCancelOrder:
    async def test_owner_cancels_pending_order(self, cancel_order, mock_order_repo, mock_uow):
        order = make_order(user_id="u1")
        mock_order_repo.get_by_id = AsyncMock(return_value=order)

        result = await cancel_order.execute(order.id, OWNER, "Changement de programme")

        assert result.value.status == "cancelled"
        assert result.value.cancelled_at is not None
        mock_uow.commit.assert_awaited_once()

    async def test_owner_cannot_cancel_once_preparing(self, cancel_order, mock_order_repo):
        mock_order_repo.get_by_id = AsyncMock(return_value=make_order(user_id="u1", status=OrderStatus.PREPARING))

        result = await cancel_order.execute("o1", OWNER)

        assert result.error.code == errors.INVALID_TRANSITION

    async def test_corporate_owner_is_forbidden(self, cancel_order, mock_order_repo):
        corporate = Corporate(user_id="corp-1", email="compta@acme.fr")
        mock_order_repo.get_by_id = AsyncMock(return_value=make_order(user_id="corp-1"))

        result = await cancel_order.execute("o1", corporate)

        assert result.error.code == errors.FORBIDDEN

    async def test_already_cancelled_is_returned_unchanged(self, cancel_order, mock_order_repo, mock_uow):
        order = make_order(user_id="u1", status=OrderStatus.CANCELLED)
        mock_order_repo.get_by_id = AsyncMock(return_value=order)

        result = await cancel_order.execute(order.id, OWNER)

        assert result.is_ok()
        mock_uow.commit.assert_not_awaited()

    async def test_stranger_cannot_see_cancelled_order(self, cancel_order, mock_order_repo):
        stranger = Individual(user_id="u2", email="paul@example.com")
        mock_order_repo.get_by_id = AsyncMock(return_value=make_order(user_id="u1", status=OrderStatus.CANCELLED))

        result = await cancel_order.execute("o1", stranger)

        assert result.error.code == errors.UNAUTHORIZED_ACCESS

    async def test_delivered_order_cannot_be_cancelled_by_admin(self, cancel_order, mock_order_repo):
        mock_order_repo.get_by_id = AsyncMock(return_value=make_order(status=OrderStatus.DELIVERED))

        result = await cancel_order.execute("o1", ADMIN)

        assert result.error.code == errors.INVALID_TRANSITION

    async def test_anonymous_needs_authentication(self, cancel_order, mock_order_repo):
        mock_order_repo.get_by_id = AsyncMock()

        result = await cancel_order.execute("o1", Anonymous())

        assert result.error.code == errors.AUTH_REQUIRED
        mock_order_repo.get_by_id.assert_not_awaited()
