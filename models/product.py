"""
Catalog product schemas.

The products table is owned by the catalog; the import only needs the
draft shape it inserts, the three fields it refreshes, and enough of an
existing row to reconcile against it.
"""

from pydantic import Field
from typing import Optional

from models.base import BaseSchema, TimestampMixin
from utils.text_utils import resolve_product_url


class ExistingProductRef(BaseSchema):
    """Result row of the batched existence lookup."""

    id: str = Field(..., description="Product UUID")
    external_id: str = Field(..., description="Marketplace item id")


class ProductDraftCreate(BaseSchema):
    """
    New catalog record created by an import.

    Always a draft: an admin completes category, description and images
    and activates it afterwards.
    """

    external_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    description_short: Optional[str] = None
    price_text: str = Field(..., min_length=1)
    image_url: Optional[str] = None
    image_urls: list[str] = Field(default_factory=list)
    origin_url: str = Field(..., min_length=1)
    affiliate_url: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    store_name: Optional[str] = None
    category: Optional[str] = None
    is_active: bool = False


class ProductImportUpdate(BaseSchema):
    """
    Fields a re-import is allowed to change.

    Title, slug, tags and activation state are left alone so admin edits
    survive later imports.
    """

    price_text: str = Field(..., min_length=1)
    origin_url: str = Field(..., min_length=1)
    affiliate_url: Optional[str] = None


class ProductRecord(BaseSchema, TimestampMixin):
    """Full catalog row as stored in the products table."""

    id: str
    slug: str
    external_id: Optional[str] = None
    title: str
    description_short: Optional[str] = None
    price_text: Optional[str] = None
    image_url: Optional[str] = None
    image_urls: list[str] = Field(default_factory=list)
    origin_url: str
    affiliate_url: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    store_name: Optional[str] = None
    category: Optional[str] = None
    is_active: bool = False

    @property
    def outbound_url(self) -> str:
        """Link used for outbound redirects (affiliate link wins)."""
        return resolve_product_url(self.affiliate_url, self.origin_url)


class OutboundClickCreate(BaseSchema):
    """Row written to outbound_clicks when a visitor follows a product link."""

    product_id: str
    src: Optional[str] = Field(None, description="Traffic source, e.g. 'instagram'")
    camp: Optional[str] = Field(None, description="Campaign tag")
    ua: Optional[str] = Field(None, description="Visitor user agent")
