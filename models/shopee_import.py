"""
Shopee import API schemas.
"""

from pydantic import BaseModel, Field


class ImportLineErrorSchema(BaseModel):
    """One line-addressed error. Line 0 is a file-level error."""

    line: int = Field(ge=0, description="1-based source line, 0 for the whole file")
    message: str


class ShopeeImportResponse(BaseModel):
    """Outcome of one Shopee CSV import run."""

    imported: int = Field(ge=0, description="New drafts created")
    updated: int = Field(ge=0, description="Existing products refreshed")
    ignored: int = Field(ge=0, description="New rows whose insert failed")
    images_fetched: int = Field(default=0, ge=0, description="Images saved by enrichment")
    errors: list[ImportLineErrorSchema] = Field(default_factory=list)
    summary: str = Field(description="Human-readable count summary")
    error_messages: list[str] = Field(
        default_factory=list,
        description="Errors rendered as 'Linha N: message'"
    )
