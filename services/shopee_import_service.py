"""
Shopee import service: reconciles parsed CSV rows with the catalog.

Rows are matched to existing products by external id with one batched
lookup taken before any write. Matches get their price and links
refreshed; everything else is inserted as a draft. Writes are applied
one row at a time, in file order, with no transaction around the batch:
a failed row is reported and the run moves on, so a partially applied
import is a normal outcome.
"""

from dataclasses import dataclass, field
from typing import Optional
import structlog

from config import settings
from integrations.image_enrichment import (
    ImageEnrichmentClient,
    STATUS_SKIPPED,
    get_image_enrichment_client,
)
from models.product import ProductDraftCreate, ProductImportUpdate
from parsers.shopee_parser import ImportRow, ImportLineError, parse_shopee_csv
from services.product_service import ProductService, get_product_service
from exceptions import AppError, DatabaseError
from utils.text_utils import slugify

logger = structlog.get_logger(__name__)

MSG_IMAGE_FAILED = "Falha ao buscar imagem."
MSG_IMAGE_UNPROCESSED = "Imagem: falha ao processar."


# ===================
# RESULT
# ===================

@dataclass
class ImportResult:
    """Aggregated outcome of one import run."""
    imported: int = 0
    updated: int = 0
    ignored: int = 0
    images_fetched: int = 0
    errors: list[ImportLineError] = field(default_factory=list)

    def add_error(self, line: int, message: str) -> None:
        self.errors.append(ImportLineError(line=line, message=message))

    def error_messages(self) -> list[str]:
        """Errors as display strings, e.g. 'Linha 4: Price ausente.'"""
        return [
            f"Linha {e.line}: {e.message}" if e.line else e.message
            for e in self.errors
        ]

    def summary(self) -> str:
        """One-line count summary for admins."""
        parts = [
            f"Importados: {self.imported}",
            f"Atualizados: {self.updated}",
            f"Ignorados: {self.ignored}",
            f"Imagens salvas: {self.images_fetched}",
            f"Erros: {len(self.errors)}",
        ]
        return " | ".join(parts)

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "imported": self.imported,
            "updated": self.updated,
            "ignored": self.ignored,
            "images_fetched": self.images_fetched,
            "errors": [e.to_dict() for e in self.errors],
            "summary": self.summary(),
            "error_messages": self.error_messages(),
        }


# ===================
# HELPERS
# ===================

def build_product_slug(title: str, external_id: str) -> str:
    """
    Slug for a newly imported product.

    The external id is always appended so two products with the same
    title never collide; titles with nothing sluggable use the id alone.
    """
    base = slugify(title)
    return f"{base}-{external_id}" if base else external_id


def build_draft(row: ImportRow, tag: str) -> ProductDraftCreate:
    """Draft record for a row with no matching product."""
    return ProductDraftCreate(
        external_id=row.external_id,
        title=row.title,
        slug=build_product_slug(row.title, row.external_id),
        description_short=None,
        price_text=row.price_text,
        image_url=None,
        image_urls=[],
        origin_url=row.origin_url,
        affiliate_url=row.affiliate_url,
        tags=[tag],
        store_name=row.store_name or None,
        category=None,
        is_active=False,
    )


def _store_message(error: AppError) -> str:
    if isinstance(error, DatabaseError):
        return error.reason
    return error.message


# ===================
# SERVICE
# ===================

class ShopeeImportService:
    """
    Runs a Shopee CSV import end to end.

    Collaborators are injected so the record store and enrichment client
    can be swapped in tests.
    """

    def __init__(
        self,
        product_service: ProductService,
        enrichment_client: Optional[ImageEnrichmentClient] = None,
        product_tag: str = "shopee"
    ):
        self.product_service = product_service
        self.enrichment_client = enrichment_client
        self.product_tag = product_tag

    def run_import(self, text: str, enrich_images: bool = False) -> ImportResult:
        """
        Parse and reconcile a Shopee CSV export.

        Never raises for bad content or failed writes; everything ends up
        in the result's error list.

        Args:
            text: Decoded CSV content
            enrich_images: Fetch an image for each newly created product

        Returns:
            ImportResult
        """
        parsed = parse_shopee_csv(text)
        return self.reconcile(parsed.rows, parsed.errors, enrich_images=enrich_images)

    def reconcile(
        self,
        rows: list[ImportRow],
        parse_errors: Optional[list[ImportLineError]] = None,
        enrich_images: bool = False
    ) -> ImportResult:
        """
        Apply parsed rows to the catalog.

        Args:
            rows: Rows accepted by the parser (external ids unique)
            parse_errors: Parser errors, reported first
            enrich_images: Fetch an image for each newly created product

        Returns:
            ImportResult with counts and all errors
        """
        result = ImportResult(errors=list(parse_errors or []))

        if not rows:
            logger.info("shopee_import_no_rows", errors=len(result.errors))
            return result

        logger.info(
            "shopee_import_started",
            rows=len(rows),
            parse_errors=len(result.errors),
            enrich_images=enrich_images
        )

        try:
            existing = self.product_service.find_by_external_ids(
                [row.external_id for row in rows]
            )
        except AppError as e:
            # Nothing written; every row is reported with the store error
            logger.error("shopee_import_lookup_failed", error=e.message)
            for row in rows:
                result.add_error(row.line, _store_message(e))
            return result

        existing_ids = {ref.external_id: ref.id for ref in existing}

        enricher = self.enrichment_client if enrich_images else None
        if enrich_images and enricher is None:
            logger.warning("shopee_import_enrichment_unavailable")

        for row in rows:
            product_id = existing_ids.get(row.external_id)
            if product_id:
                self._update_row(row, product_id, result)
            else:
                new_id = self._insert_row(row, result)
                if new_id and enricher is not None:
                    self._enrich_row(row, new_id, enricher, result)

        logger.info(
            "shopee_import_completed",
            imported=result.imported,
            updated=result.updated,
            ignored=result.ignored,
            images_fetched=result.images_fetched,
            errors=len(result.errors)
        )

        return result

    # ===================
    # PER-ROW OPERATIONS
    # ===================

    def _update_row(self, row: ImportRow, product_id: str, result: ImportResult) -> None:
        update = ProductImportUpdate(
            price_text=row.price_text,
            origin_url=row.origin_url,
            affiliate_url=row.affiliate_url,
        )
        try:
            self.product_service.update_import_fields(product_id, update)
        except AppError as e:
            logger.warning(
                "shopee_row_update_failed",
                line=row.line,
                external_id=row.external_id,
                error=e.message
            )
            result.add_error(row.line, _store_message(e))
            return

        result.updated += 1
        logger.debug("shopee_row_updated", line=row.line, product_id=product_id)

    def _insert_row(self, row: ImportRow, result: ImportResult) -> Optional[str]:
        draft = build_draft(row, self.product_tag)
        try:
            product_id = self.product_service.insert_draft(draft)
        except AppError as e:
            logger.warning(
                "shopee_row_insert_failed",
                line=row.line,
                external_id=row.external_id,
                error=e.message
            )
            result.add_error(row.line, _store_message(e))
            result.ignored += 1
            return None

        result.imported += 1
        logger.debug("shopee_row_inserted", line=row.line, product_id=product_id, slug=draft.slug)
        return product_id

    def _enrich_row(
        self,
        row: ImportRow,
        product_id: str,
        enricher: ImageEnrichmentClient,
        result: ImportResult
    ) -> None:
        try:
            outcome = enricher.enrich(product_id, row.origin_url)
        except AppError as e:
            logger.warning("shopee_row_enrichment_failed", line=row.line, error=e.message)
            result.add_error(row.line, MSG_IMAGE_FAILED)
            return

        if outcome.image_saved:
            result.images_fetched += 1
        elif outcome.error:
            if not outcome.image_not_found:
                result.add_error(row.line, f"Imagem: {outcome.error}")
        elif outcome.status != STATUS_SKIPPED:
            result.add_error(row.line, MSG_IMAGE_UNPROCESSED)


# Singleton instance for convenience
_shopee_import_service: Optional[ShopeeImportService] = None

def get_shopee_import_service() -> ShopeeImportService:
    """Get or create ShopeeImportService instance."""
    global _shopee_import_service
    if _shopee_import_service is None:
        _shopee_import_service = ShopeeImportService(
            product_service=get_product_service(),
            enrichment_client=get_image_enrichment_client(),
            product_tag=settings.import_product_tag
        )
    return _shopee_import_service
