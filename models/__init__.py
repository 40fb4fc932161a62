"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema, TimestampMixin
from models.product import (
    ExistingProductRef,
    ProductDraftCreate,
    ProductImportUpdate,
    ProductRecord,
    OutboundClickCreate,
)
from models.shopee_import import ImportLineErrorSchema, ShopeeImportResponse

__all__ = [
    # Base
    "BaseSchema",
    "TimestampMixin",

    # Product
    "ExistingProductRef",
    "ProductDraftCreate",
    "ProductImportUpdate",
    "ProductRecord",
    "OutboundClickCreate",

    # Shopee import
    "ImportLineErrorSchema",
    "ShopeeImportResponse",
]
