"""
Product service: the catalog record store.

Reads and writes the Supabase ``products`` table. Every failure is raised
as DatabaseError carrying the store's own message so the import can
attach it to the offending line.
"""

from typing import Optional
import structlog

from config import get_supabase_client
from models.product import (
    ExistingProductRef,
    ProductDraftCreate,
    ProductImportUpdate,
    ProductRecord,
    OutboundClickCreate,
)
from exceptions import ProductNotFoundError, DatabaseError

logger = structlog.get_logger(__name__)


class ProductService:
    """
    Product persistence.

    Handles the batched lookup, draft inserts, import updates and
    storefront reads, plus outbound click logging.
    """

    def __init__(self, client=None):
        self.db = client or get_supabase_client()
        self.table = "products"

    # ===================
    # READ OPERATIONS
    # ===================

    def find_by_external_ids(self, external_ids: list[str]) -> list[ExistingProductRef]:
        """
        Get the products matching any of the given external ids.

        Issues a single query for the whole list.

        Args:
            external_ids: Marketplace item ids (e.g., ['22570123456'])

        Returns:
            List of (id, external_id) refs; ids with no product are absent

        Raises:
            DatabaseError: If the query fails
        """
        if not external_ids:
            return []

        logger.debug("finding_products_by_external_ids", count=len(external_ids))

        try:
            result = (
                self.db.table(self.table)
                .select("id, external_id")
                .in_("external_id", external_ids)
                .execute()
            )

            refs = [ExistingProductRef(**row) for row in result.data or []]

            logger.info(
                "products_found_by_external_ids",
                requested=len(external_ids),
                found=len(refs)
            )

            return refs

        except Exception as e:
            logger.error(
                "find_products_by_external_ids_failed",
                count=len(external_ids),
                error=str(e)
            )
            raise DatabaseError("select", str(e))

    def get_by_slug(self, slug: str, active_only: bool = True) -> ProductRecord:
        """
        Get a single product by its public slug.

        Args:
            slug: Product slug
            active_only: Hide drafts (storefront lookups)

        Returns:
            ProductRecord

        Raises:
            ProductNotFoundError: If no matching product exists
        """
        logger.debug("getting_product_by_slug", slug=slug, active_only=active_only)

        try:
            query = self.db.table(self.table).select("*").eq("slug", slug)
            if active_only:
                query = query.eq("is_active", True)
            result = query.limit(1).execute()

        except Exception as e:
            logger.error("get_product_by_slug_failed", slug=slug, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            raise ProductNotFoundError(slug)

        return ProductRecord(**result.data[0])

    # ===================
    # WRITE OPERATIONS
    # ===================

    def insert_draft(self, data: ProductDraftCreate) -> str:
        """
        Insert a new product.

        Args:
            data: Draft product fields

        Returns:
            ID of the created product

        Raises:
            DatabaseError: If the insert fails (e.g., slug already taken)
        """
        logger.debug("inserting_product_draft", external_id=data.external_id, slug=data.slug)

        try:
            result = (
                self.db.table(self.table)
                .insert(data.model_dump())
                .execute()
            )

            if not result.data:
                raise DatabaseError("insert", "insert returned no rows")

            product_id = result.data[0]["id"]

            logger.info(
                "product_draft_created",
                product_id=product_id,
                external_id=data.external_id,
                slug=data.slug
            )

            return product_id

        except DatabaseError:
            raise
        except Exception as e:
            logger.error(
                "insert_product_draft_failed",
                external_id=data.external_id,
                error=str(e)
            )
            raise DatabaseError("insert", str(e))

    def update_import_fields(self, product_id: str, data: ProductImportUpdate) -> None:
        """
        Refresh the import-owned fields of an existing product.

        Args:
            product_id: Product UUID
            data: New price text and links

        Raises:
            DatabaseError: If the update fails
        """
        logger.debug("updating_product_import_fields", product_id=product_id)

        try:
            (
                self.db.table(self.table)
                .update(data.model_dump())
                .eq("id", product_id)
                .execute()
            )

            logger.info(
                "product_import_fields_updated",
                product_id=product_id,
                fields=list(ProductImportUpdate.model_fields.keys())
            )

        except Exception as e:
            logger.error(
                "update_product_import_fields_failed",
                product_id=product_id,
                error=str(e)
            )
            raise DatabaseError("update", str(e))

    # ===================
    # CLICK TRACKING
    # ===================

    def record_outbound_click(self, click: OutboundClickCreate) -> None:
        """
        Log a visitor following a product's outbound link.

        Args:
            click: Product id plus optional source, campaign and user agent

        Raises:
            DatabaseError: If the insert fails
        """
        try:
            (
                self.db.table("outbound_clicks")
                .insert(click.model_dump())
                .execute()
            )

            logger.info(
                "outbound_click_recorded",
                product_id=click.product_id,
                src=click.src,
                camp=click.camp
            )

        except Exception as e:
            logger.error(
                "record_outbound_click_failed",
                product_id=click.product_id,
                error=str(e)
            )
            raise DatabaseError("insert", str(e))


# Singleton instance for convenience
_product_service: Optional[ProductService] = None

def get_product_service() -> ProductService:
    """Get or create ProductService instance."""
    global _product_service
    if _product_service is None:
        _product_service = ProductService()
    return _product_service
