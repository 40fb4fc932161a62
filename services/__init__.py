"""
Business logic services.

Each service handles one domain area.
"""

from services.product_service import ProductService, get_product_service
from services.shopee_import_service import (
    ShopeeImportService,
    ImportResult,
    get_shopee_import_service,
)

__all__ = [
    "ProductService",
    "get_product_service",
    "ShopeeImportService",
    "ImportResult",
    "get_shopee_import_service",
]
