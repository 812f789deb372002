"""Unit tests for CreateOrder use case"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app import errors
from src.app.use_cases.orders.create_order import CreateOrder
from src.app.use_cases.orders.dtos import CreateOrderCommandDTO
from src.domain.identity import Anonymous, Corporate, Individual
from src.domain.order import OrderStatus
from src.domain.shop_settings import ClosureEnabled, ShopSettings
from tests.fixtures.factories import CUSTOMER, make_product

NOW = datetime(2024, 1, 15, 10, 30, 0)


@pytest.fixture
def roses():
    return make_product(name="Bouquet de roses", price="45.00", product_id="roses")


@pytest.fixture
def wreath():
    return make_product(name="Couronne de deuil", price="120.00", category="Deuil", product_id="wreath")


@pytest.fixture
def mock_order_repo():
    repo = MagicMock()
    repo.count_created_between = AsyncMock(return_value=2)
    repo.create = AsyncMock(side_effect=lambda order: order)
    return repo


@pytest.fixture
def mock_product_repo(roses, wreath):
    repo = MagicMock()
    catalog = {p.id: p for p in (roses, wreath)}
    repo.get_by_ids = AsyncMock(side_effect=lambda ids: [catalog[i] for i in ids if i in catalog])
    return repo


@pytest.fixture
def mock_settings_repo():
    repo = MagicMock()
    repo.get = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def create_order(mock_uow, mock_order_repo, mock_product_repo, mock_settings_repo, mock_email_service):
    return CreateOrder(
        uow=mock_uow,
        order_repo=mock_order_repo,
        product_repo=mock_product_repo,
        settings_repo=mock_settings_repo,
        email_service=mock_email_service,
    )


def build_command(items=None, zip_code="91220", delivery_type="delivery", bereavement_info=None):
    delivery = {"type": delivery_type, "date": "2024-01-20T10:00:00"}
    if delivery_type == "delivery":
        delivery["address"] = {"street": "1 rue des Lilas", "city": "Brétigny-sur-Orge", "zip_code": zip_code}
    return CreateOrderCommandDTO(
        items=items if items is not None else [{"product_id": "roses", "quantity": 2}],
        customer_info=CUSTOMER,
        delivery_info=delivery,
        bereavement_info=bereavement_info,
    )


@pytest.mark.asyncio
class TestCreateOrderSuccess:
    async def test_guest_checkout_creates_pending_order(
        self, create_order, mock_uow, mock_order_repo, mock_email_service
    ):
        result = await create_order.execute(build_command(), Anonymous(), now=NOW)

        assert result.is_ok()
        order = result.value
        assert order.order_number == "BF-20240115-0003"
        assert order.status == OrderStatus.PENDING.value
        assert order.user_id is None
        assert order.total_amount == Decimal("90.00")
        assert order.payment_method == "card"
        assert order.timeline[0].note == "Commande créée"
        mock_uow.commit.assert_awaited_once()
        mock_email_service.send_order_confirmation.assert_awaited_once()
        mock_email_service.send_new_order_alert.assert_awaited_once()

    async def test_prices_come_from_catalog(self, create_order, roses):
        roses.price = Decimal("39.90")

        result = await create_order.execute(build_command(), Anonymous(), now=NOW)

        assert result.value.items[0].price == Decimal("39.90")
        assert result.value.total_amount == Decimal("79.80")

    async def test_corporate_order_is_billed_monthly(self, create_order):
        identity = Corporate(user_id="corp-1", email="compta@acme.fr", company_name="Acme SAS")

        result = await create_order.execute(build_command(), identity, now=NOW)

        assert result.value.user_id == "corp-1"
        assert result.value.payment_method == "monthly_invoice"
        assert result.value.corporate_data == {"company_name": "Acme SAS", "billing": "monthly"}

    async def test_pickup_skips_zone_check(self, create_order):
        result = await create_order.execute(build_command(delivery_type="pickup"), Anonymous(), now=NOW)

        assert result.is_ok()

    async def test_email_failure_does_not_fail_checkout(self, create_order, mock_email_service):
        mock_email_service.send_order_confirmation = AsyncMock(return_value=False)

        result = await create_order.execute(
            build_command(), Individual(user_id="u1", email="marie@example.com"), now=NOW
        )

        assert result.is_ok()
        assert result.value.user_id == "u1"


@pytest.mark.asyncio
class TestCreateOrderRejections:
    async def test_empty_cart(self, create_order):
        result = await create_order.execute(build_command(items=[]), Anonymous(), now=NOW)

        assert result.error.code == errors.VALIDATION_ERROR

    async def test_shop_closed(self, create_order, mock_settings_repo, mock_uow):
        settings = ShopSettings()
        settings.set_closure(ClosureEnabled(start_date=date(2024, 1, 10), end_date=date(2024, 1, 20)))
        mock_settings_repo.get = AsyncMock(return_value=settings)

        result = await create_order.execute(build_command(), Anonymous(), now=NOW)

        assert result.error.code == errors.SHOP_CLOSED
        mock_uow.commit.assert_not_awaited()

    async def test_malformed_postal_code(self, create_order):
        result = await create_order.execute(build_command(zip_code="9122"), Anonymous(), now=NOW)

        assert result.error.code == errors.INVALID_POSTAL_CODE

    async def test_postal_code_outside_area(self, create_order):
        result = await create_order.execute(build_command(zip_code="75001"), Anonymous(), now=NOW)

        assert result.error.code == errors.DELIVERY_ZONE_NOT_COVERED

    async def test_unknown_product(self, create_order):
        command = build_command(items=[{"product_id": "ghost", "quantity": 1}])

        result = await create_order.execute(command, Anonymous(), now=NOW)

        assert result.error.code == errors.PRODUCT_UNAVAILABLE

    async def test_inactive_product(self, create_order, roses):
        roses.is_active = False

        result = await create_order.execute(build_command(), Anonymous(), now=NOW)

        assert result.error.code == errors.PRODUCT_UNAVAILABLE

    async def test_bereavement_items_need_condolence_details(self, create_order):
        command = build_command(items=[{"product_id": "wreath", "quantity": 1}])

        result = await create_order.execute(command, Anonymous(), now=NOW)

        assert result.error.code == errors.BEREAVEMENT_INFO_REQUIRED

    async def test_bereavement_details_are_stored(self, create_order):
        command = build_command(
            items=[{"product_id": "wreath", "quantity": 1}],
            bereavement_info={
                "deceased_name": "Jeanne Durand",
                "sender_name": "Famille Martin",
                "condolence_message": "Toutes nos pensées vous accompagnent.",
            },
        )

        result = await create_order.execute(command, Anonymous(), now=NOW)

        assert result.is_ok()
        assert result.value.bereavement_info["deceased_name"] == "Jeanne Durand"

    async def test_repository_failure_rolls_back(self, create_order, mock_order_repo, mock_uow):
        mock_order_repo.create = AsyncMock(side_effect=Exception("database unavailable"))

        result = await create_order.execute(build_command(), Anonymous(), now=NOW)

        assert result.error.code == "CREATE_ORDER_FAILED"
        mock_uow.rollback.assert_awaited_once()
