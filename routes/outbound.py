"""
Outbound link routes.

Public redirect from a product slug to its affiliate (or origin) link,
recording the click on the way out.
"""

from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, RedirectResponse
import structlog

from models.product import OutboundClickCreate
from services.product_service import get_product_service
from exceptions import AppError, DatabaseError, ProductNotFoundError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/out", tags=["Outbound"])


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# ROUTES
# ===================

@router.get("/{slug}")
def follow_product_link(
    slug: str,
    request: Request,
    src: Optional[str] = None,
    camp: Optional[str] = None
):
    """
    Redirect to a product's outbound link.

    Only active products redirect; unknown slugs and drafts go back to
    the storefront home. A click that cannot be recorded still redirects.

    Query params:
        src: Traffic source, e.g. 'instagram'
        camp: Campaign tag
    """
    try:
        service = get_product_service()

        try:
            product = service.get_by_slug(slug, active_only=True)
        except (ProductNotFoundError, DatabaseError) as e:
            logger.info("outbound_product_unavailable", slug=slug, reason=e.code)
            return RedirectResponse(url="/", status_code=302)

        click = OutboundClickCreate(
            product_id=product.id,
            src=src,
            camp=camp,
            ua=request.headers.get("user-agent"),
        )
        try:
            service.record_outbound_click(click)
        except DatabaseError as e:
            logger.warning("outbound_click_not_recorded", slug=slug, error=e.reason)

        return RedirectResponse(url=product.outbound_url, status_code=302)

    except Exception as e:
        return handle_error(e)
