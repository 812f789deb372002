"""Catalog use cases"""
from .search_products import SearchProducts
from .summarize_cart import SummarizeCart
from .list_products import ListProducts, ListAdminProducts
from .get_product import GetProduct
from .create_product import CreateProduct
from .update_product import UpdateProduct, DeactivateProduct
from .dtos import (
    ProductSearchHitDTO,
    SearchResultDTO,
    SummarizeCartCommandDTO,
    CartItemDTO,
    CartSummaryDTO,
    ProductDTO,
    ProductListResponseDTO,
    CreateProductCommandDTO,
    ProductChangesDTO,
    UpdateProductCommandDTO,
)

__all__ = [
    "SearchProducts",
    "SummarizeCart",
    "ListProducts",
    "ListAdminProducts",
    "GetProduct",
    "CreateProduct",
    "UpdateProduct",
    "DeactivateProduct",
    "ProductSearchHitDTO",
    "SearchResultDTO",
    "SummarizeCartCommandDTO",
    "CartItemDTO",
    "CartSummaryDTO",
    "ProductDTO",
    "ProductListResponseDTO",
    "CreateProductCommandDTO",
    "ProductChangesDTO",
    "UpdateProductCommandDTO",
]
