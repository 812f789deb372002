"""UpdateProduct and DeactivateProduct Use Cases"""

from datetime import datetime
from libs.result import Result, Return, Error
from src.app import errors
from src.app.access_control import require_admin
from src.app.repositories.product_repository import ProductRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.identity import Identity
from .dtos import ProductDTO, UpdateProductCommandDTO

EDITABLE_FIELDS = ("name", "description", "price", "category", "tags", "images", "is_active")


class UpdateProduct:
    """
    Use Case: Edit a catalog product (admin)

    Business Rules:
    1. Only the fields present in the command change
    2. Setting is_active back to true republishes a deactivated product

    Flow:
    1. Check admin access
    2. Load product
    3. Apply changes and persist
    4. Commit transaction
    """

    def __init__(self, uow: UnitOfWork, product_repo: ProductRepository):
        self.uow = uow
        self.product_repo = product_repo

    async def execute(self, command: UpdateProductCommandDTO, identity: Identity) -> Result[ProductDTO]:
        denied = require_admin(identity)
        if denied:
            return Return.err(denied)

        try:
            # Step 1: Load product
            product = await self.product_repo.get_by_id(command.product_id)
            if not product:
                return Return.err(
                    errors.not_found(errors.PRODUCT_NOT_FOUND, "Product", command.product_id)
                )

            # Step 2: Apply changes
            for name in EDITABLE_FIELDS:
                value = getattr(command, name)
                if value is not None:
                    setattr(product, name, value)
            product.updated_at = datetime.utcnow()

            product = await self.product_repo.update(product)

            # Step 3: Commit transaction
            await self.uow.commit()

            return Return.ok(ProductDTO.from_product(product))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_PRODUCT_FAILED",
                    message="Failed to update product",
                    reason=str(e),
                )
            )


class DeactivateProduct:
    """
    Use Case: Withdraw a product from the catalog (admin)

    The row is kept so past orders still resolve it. Deactivating an
    inactive product changes nothing and is not an error.
    """

    def __init__(self, uow: UnitOfWork, product_repo: ProductRepository):
        self.uow = uow
        self.product_repo = product_repo

    async def execute(self, product_id: str, identity: Identity) -> Result[ProductDTO]:
        denied = require_admin(identity)
        if denied:
            return Return.err(denied)

        try:
            product = await self.product_repo.get_by_id(product_id)
            if not product:
                return Return.err(errors.not_found(errors.PRODUCT_NOT_FOUND, "Product", product_id))

            if not product.is_active:
                return Return.ok(ProductDTO.from_product(product))

            product.is_active = False
            product.updated_at = datetime.utcnow()
            product = await self.product_repo.update(product)
            await self.uow.commit()

            return Return.ok(ProductDTO.from_product(product))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DEACTIVATE_PRODUCT_FAILED",
                    message="Failed to deactivate product",
                    reason=str(e),
                )
            )
