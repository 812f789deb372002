"""CreateOrder Use Case

Turns a cart snapshot into a pending order.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional
from libs.result import Result, Return, Error
from src.app import errors
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.product_repository import ProductRepository
from src.app.repositories.shop_settings_repository import ShopSettingsRepository
from src.app.services.email_service import EmailService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.shop.get_shop_status import GetShopStatus
from src.domain.cart import Cart, CartError
from src.domain.delivery_zone import InvalidPostalCode, is_deliverable
from src.domain.identity import Corporate, Identity, Individual, Admin
from src.domain.order import (
    DeliveryType,
    Order,
    OrderItem,
    OrderStatus,
    add_timeline_entry,
    compute_order_total,
    generate_order_number,
)
from .dtos import CreateOrderCommandDTO, OrderDTO

logger = logging.getLogger(__name__)

CREATED_NOTE = "Commande créée"


class CreateOrder:
    """
    Use Case: Checkout

    Business Rules:
    1. The cart must not be empty
    2. Every line must reference an existing, active product; prices come from the catalog
    3. Home delivery requires a covered postal code
    4. Funeral arrangements require condolence details
    5. No orders while the shop is closed
    6. Order number is BF-YYYYMMDD-NNNN, NNNN = orders created that day + 1
    7. Corporate accounts are billed monthly instead of paying by card

    Flow:
    1. Validate cart, shop availability and delivery zone
    2. Price the cart from the catalog
    3. Check condolence details
    4. Generate order number
    5. Create order with status=pending and a creation timeline event
    6. Commit transaction
    7. Send confirmation e-mails (best effort)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        settings_repo: ShopSettingsRepository,
        email_service: EmailService,
        shop_timezone: str = "Europe/Paris",
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.settings_repo = settings_repo
        self.email_service = email_service
        self.shop_timezone = shop_timezone

    async def execute(
        self,
        command: CreateOrderCommandDTO,
        identity: Identity,
        now: Optional[datetime] = None,
    ) -> Result[OrderDTO]:
        """
        Execute checkout

        Args:
            command: CreateOrderCommandDTO with cart snapshot, customer and delivery info
            identity: Requesting identity (Anonymous for guest checkout)
            now: Creation instant (UTC)

        Returns:
            Result[OrderDTO]: Created order or error
        """
        now = now or datetime.utcnow()

        # Step 1: Validate request
        if not command.items:
            return Return.err(Error(code=errors.VALIDATION_ERROR, message="Cart is empty"))

        shop_status = await GetShopStatus(self.settings_repo, self.shop_timezone).execute(now)
        if shop_status.value.is_closed:
            return Return.err(
                Error(
                    code=errors.SHOP_CLOSED,
                    message=shop_status.value.message or "The shop is currently closed",
                )
            )

        delivery = command.delivery_info
        if delivery.type == DeliveryType.DELIVERY:
            try:
                deliverable = is_deliverable(delivery.address.zip_code)
            except InvalidPostalCode as e:
                return Return.err(Error(code=errors.INVALID_POSTAL_CODE, message=str(e)))
            if not deliverable:
                return Return.err(
                    Error(
                        code=errors.DELIVERY_ZONE_NOT_COVERED,
                        message=f"We do not deliver to {delivery.address.zip_code}",
                    )
                )

        try:
            # Step 2: Price the cart from the catalog
            product_ids = list(dict.fromkeys(line.product_id for line in command.items))
            products = {p.id: p for p in await self.product_repo.get_by_ids(product_ids)}

            cart = Cart()
            for line in command.items:
                product = products.get(line.product_id)
                if product is None:
                    return Return.err(
                        Error(
                            code=errors.PRODUCT_UNAVAILABLE,
                            message=f"Product {line.product_id} does not exist",
                        )
                    )
                try:
                    cart.add_item(product, line.quantity)
                except CartError as e:
                    return Return.err(Error(code=e.code, message=e.message))

            # Step 3: Condolence details
            if cart.has_bereavement_items and command.bereavement_info is None:
                return Return.err(
                    Error(
                        code=errors.BEREAVEMENT_INFO_REQUIRED,
                        message="Condolence details are required for funeral arrangements",
                    )
                )

            # Step 4: Generate order number
            day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
            sequence = await self.order_repo.count_created_between(
                day_start, day_start + timedelta(days=1)
            ) + 1

            # Step 5: Create order
            items = [
                OrderItem(
                    product_id=item.product_id,
                    name=item.name,
                    price=item.price,
                    quantity=item.quantity,
                    image=item.image,
                )
                for item in cart.items
            ]

            order = Order(
                order_number=generate_order_number(now, sequence),
                user_id=self._user_id(identity),
                customer_name=command.customer_info.name,
                customer_email=command.customer_info.email,
                customer_phone=command.customer_info.phone,
                items=[item.model_dump(mode="json") for item in items],
                total_amount=compute_order_total(items),
                status=OrderStatus.PENDING,
                delivery_info=delivery.model_dump(mode="json"),
                bereavement_info=(
                    command.bereavement_info.model_dump(mode="json")
                    if command.bereavement_info and cart.has_bereavement_items
                    else None
                ),
                created_at=now,
                updated_at=now,
            )
            if isinstance(identity, Corporate):
                order.corporate_data = {
                    "company_name": identity.company_name,
                    "billing": "monthly",
                }
                order.payment_method = "monthly_invoice"
            add_timeline_entry(order, OrderStatus.PENDING, CREATED_NOTE, now)

            created = await self.order_repo.create(order)

            # Step 6: Commit transaction
            await self.uow.commit()

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_ORDER_FAILED",
                    message="Failed to create order",
                    reason=str(e),
                )
            )

        # Step 7: Notify customer and shop
        if not await self.email_service.send_order_confirmation(created):
            logger.warning(f"Order confirmation e-mail not sent for {created.order_number}")
        if not await self.email_service.send_new_order_alert(created):
            logger.warning(f"New order alert not sent for {created.order_number}")

        logger.info(
            f"Order {created.order_number} created: {created.total_amount} EUR, "
            f"{len(items)} line(s)"
        )
        return Return.ok(OrderDTO.from_order(created))

    @staticmethod
    def _user_id(identity: Identity) -> Optional[str]:
        if isinstance(identity, (Individual, Corporate, Admin)):
            return identity.user_id
        return None
