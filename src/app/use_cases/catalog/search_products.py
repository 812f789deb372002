"""SearchProducts Use Case"""

from libs.result import Result, Return, Error
from src.app import errors
from src.app.repositories.product_repository import ProductRepository
from src.domain.product import relevance_score
from .dtos import ProductSearchHitDTO, SearchResultDTO

MIN_QUERY_LENGTH = 2
DEFAULT_LIMIT = 10
MAX_LIMIT = 20


class SearchProducts:
    """
    Use Case: Ranked product search

    Business Rules:
    1. Queries shorter than 2 characters (after trimming) are rejected
    2. Only active products are returned
    3. Score: +10 name match, +5 tag match, +3 category match
    4. Sorted by score descending, then by name
    5. limit is clamped to 1-20
    """

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    async def execute(self, query: str, limit: int = DEFAULT_LIMIT) -> Result[SearchResultDTO]:
        needle = (query or "").strip()
        if len(needle) < MIN_QUERY_LENGTH:
            return Return.err(
                Error(
                    code=errors.SEARCH_QUERY_TOO_SHORT,
                    message=f"Search query must be at least {MIN_QUERY_LENGTH} characters",
                )
            )
        limit = max(1, min(limit, MAX_LIMIT))

        candidates = await self.product_repo.search_active(needle)
        scored = [(relevance_score(product, needle), product) for product in candidates]
        scored = [(score, product) for score, product in scored if score > 0]
        scored.sort(key=lambda pair: (-pair[0], pair[1].name.lower()))

        return Return.ok(
            SearchResultDTO(
                query=needle,
                products=[
                    ProductSearchHitDTO.from_product(product, score)
                    for score, product in scored[:limit]
                ],
                total=len(scored),
            )
        )
