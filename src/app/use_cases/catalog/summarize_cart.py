"""SummarizeCart Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.product_repository import ProductRepository
from src.domain.cart import Cart, CartError
from .dtos import CartSummaryDTO, SummarizeCartCommandDTO


class SummarizeCart:
    """
    Use Case: Price a cart snapshot from the catalog

    Business Rules:
    1. Prices, names and images always come from the catalog
    2. Lines of the same product are merged, at most 50 per product
    3. Missing or inactive products are dropped and reported
    4. Bereavement flags tell the checkout whether condolence details are needed
    """

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    async def execute(self, command: SummarizeCartCommandDTO) -> Result[CartSummaryDTO]:
        product_ids = list(dict.fromkeys(line.product_id for line in command.items))
        products = {p.id: p for p in await self.product_repo.get_by_ids(product_ids)} if product_ids else {}

        cart = Cart()
        unavailable = []
        for line in command.items:
            product = products.get(line.product_id)
            if product is None or not product.is_active:
                if line.product_id not in unavailable:
                    unavailable.append(line.product_id)
                continue
            try:
                cart.add_item(product, line.quantity)
            except CartError as e:
                return Return.err(Error(code=e.code, message=e.message))

        return Return.ok(CartSummaryDTO.from_cart(cart, unavailable))
