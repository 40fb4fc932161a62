"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ExternalServiceError,
    DatabaseError,

    # Product-specific
    ProductNotFoundError,

    # Shopee import
    ShopeeCsvDecodeError,

    # Image enrichment
    EnrichmentServiceError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ExternalServiceError",
    "DatabaseError",

    # Product
    "ProductNotFoundError",

    # Shopee import
    "ShopeeCsvDecodeError",

    # Image enrichment
    "EnrichmentServiceError",
]
