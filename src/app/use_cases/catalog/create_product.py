"""CreateProduct Use Case"""

import logging
from libs.result import Result, Return, Error
from src.app.access_control import require_admin
from src.app.repositories.product_repository import ProductRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.identity import Identity
from src.domain.product import Product
from .dtos import CreateProductCommandDTO, ProductDTO

logger = logging.getLogger(__name__)


class CreateProduct:
    """
    Use Case: Add a product to the catalog (admin)

    Business Rules:
    1. Name and category are required, price is positive
    2. Tags are stored trimmed and lower-cased, without duplicates

    Flow:
    1. Check admin access
    2. Build and persist the product
    3. Commit transaction
    """

    def __init__(self, uow: UnitOfWork, product_repo: ProductRepository):
        self.uow = uow
        self.product_repo = product_repo

    async def execute(self, command: CreateProductCommandDTO, identity: Identity) -> Result[ProductDTO]:
        denied = require_admin(identity)
        if denied:
            return Return.err(denied)

        try:
            # Step 1: Persist product
            product = await self.product_repo.create(
                Product(
                    name=command.name,
                    description=command.description,
                    price=command.price,
                    category=command.category,
                    tags=command.tags,
                    images=command.images,
                    is_active=command.is_active,
                )
            )

            # Step 2: Commit transaction
            await self.uow.commit()

            logger.info(f"Product {product.id} '{product.name}' created")
            return Return.ok(ProductDTO.from_product(product))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_PRODUCT_FAILED",
                    message="Failed to create product",
                    reason=str(e),
                )
            )
