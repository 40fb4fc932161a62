"""
Shopee import routes.

Upload a Shopee affiliate CSV export and reconcile it with the catalog.
"""

from fastapi import APIRouter, UploadFile, File, Form
from fastapi.responses import JSONResponse
import structlog

from models.shopee_import import ShopeeImportResponse
from services.shopee_import_service import get_shopee_import_service
from exceptions import AppError, ShopeeCsvDecodeError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/products/import", tags=["Product Import"])


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


def decode_upload(content: bytes, encoding: str = "utf-8") -> str:
    """
    Decode uploaded bytes. The BOM, if any, is left for the parser.

    Raises:
        ShopeeCsvDecodeError: If the content is not valid text
    """
    try:
        return content.decode(encoding)
    except UnicodeDecodeError as e:
        raise ShopeeCsvDecodeError(encoding, str(e))


# ===================
# ROUTES
# ===================

@router.post("/shopee", response_model=ShopeeImportResponse)
async def import_shopee_csv(
    file: UploadFile = File(..., description="Shopee affiliate CSV export"),
    auto_images: bool = Form(False, description="Fetch an image for each new product")
):
    """
    Import a Shopee CSV export.

    New items become draft products; known items get price and links
    refreshed. Bad lines are reported in the response and never stop
    the import.

    Raises:
        422: File is not UTF-8 text
    """
    logger.info(
        "shopee_import_upload_started",
        filename=file.filename,
        content_type=file.content_type,
        auto_images=auto_images
    )

    try:
        content = await file.read()
        text = decode_upload(content)

        service = get_shopee_import_service()
        result = service.run_import(text, enrich_images=auto_images)

        logger.info(
            "shopee_import_upload_completed",
            filename=file.filename,
            imported=result.imported,
            updated=result.updated,
            ignored=result.ignored,
            errors=len(result.errors)
        )

        return ShopeeImportResponse(**result.to_dict())

    except Exception as e:
        return handle_error(e)
