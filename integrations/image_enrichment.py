"""
Image enrichment client.

Calls the catalog endpoint that scrapes a product page for its og:image,
stores the image and links it to the product. Only the HTTP contract
lives here; scraping and storage happen on the other side.
"""

from dataclasses import dataclass
from typing import Optional
import requests
import structlog

from config import settings
from exceptions import EnrichmentServiceError

logger = structlog.get_logger(__name__)

STATUS_OK = "ok"
STATUS_SKIPPED = "skipped"
ERROR_OG_IMAGE_NOT_FOUND = "og_image_not_found"


@dataclass
class EnrichmentOutcome:
    """Decoded enrichment response."""
    status: Optional[str] = None
    image_url: Optional[str] = None
    error: Optional[str] = None

    @property
    def image_saved(self) -> bool:
        return self.status == STATUS_OK

    @property
    def image_not_found(self) -> bool:
        return self.error == ERROR_OG_IMAGE_NOT_FOUND


class ImageEnrichmentClient:
    """HTTP client for the enrichment endpoint."""

    def __init__(
        self,
        endpoint_url: str,
        timeout_seconds: float = 20.0,
        session: Optional[requests.Session] = None
    ):
        self.endpoint_url = endpoint_url
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def enrich(self, product_id: str, origin_url: str) -> EnrichmentOutcome:
        """
        Ask the endpoint to fetch and attach an image for a product.

        The endpoint answers errors such as ``og_image_not_found`` with a
        non-2xx status and a JSON body; those come back as an outcome, not
        an exception.

        Args:
            product_id: Product UUID
            origin_url: Product page to scrape

        Returns:
            EnrichmentOutcome

        Raises:
            EnrichmentServiceError: Network failure, or an error status
                without a JSON error body
        """
        logger.debug("enrichment_request", product_id=product_id)

        try:
            response = self.session.post(
                self.endpoint_url,
                json={"productId": product_id, "originUrl": origin_url},
                timeout=self.timeout_seconds
            )
        except requests.RequestException as e:
            logger.warning("enrichment_request_failed", product_id=product_id, error=str(e))
            raise EnrichmentServiceError(f"Enrichment request failed: {e}")

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not isinstance(payload, dict):
            payload = {}

        if not response.ok and not payload.get("error"):
            raise EnrichmentServiceError(
                f"Enrichment endpoint returned HTTP {response.status_code}",
                status_code=response.status_code
            )

        outcome = EnrichmentOutcome(
            status=payload.get("status"),
            image_url=payload.get("imageUrl"),
            error=payload.get("error"),
        )

        logger.info(
            "enrichment_response",
            product_id=product_id,
            http_status=response.status_code,
            status=outcome.status,
            error=outcome.error
        )

        return outcome


def get_image_enrichment_client() -> Optional[ImageEnrichmentClient]:
    """
    Build the enrichment client from settings.

    Returns:
        ImageEnrichmentClient, or None if no endpoint is configured
    """
    if not settings.image_enrichment_configured:
        logger.warning("image_enrichment_not_configured")
        return None

    return ImageEnrichmentClient(
        endpoint_url=settings.image_enrichment_url,
        timeout_seconds=settings.image_enrichment_timeout_seconds
    )
