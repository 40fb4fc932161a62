"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.shopee_import import router as shopee_import_router
from routes.outbound import router as outbound_router

__all__ = [
    "shopee_import_router",
    "outbound_router",
]
