"""GetProduct Use Case"""

from libs.result import Result, Return
from src.app import errors
from src.app.repositories.product_repository import ProductRepository
from src.domain.identity import Admin, Identity
from .dtos import ProductDTO


class GetProduct:
    """
    Use Case: Product detail page

    Inactive products read as not found, except for admins.
    """

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    async def execute(self, product_id: str, identity: Identity) -> Result[ProductDTO]:
        product = await self.product_repo.get_by_id(product_id)
        if not product or (not product.is_active and not isinstance(identity, Admin)):
            return Return.err(errors.not_found(errors.PRODUCT_NOT_FOUND, "Product", product_id))

        return Return.ok(ProductDTO.from_product(product))
