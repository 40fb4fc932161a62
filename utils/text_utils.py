"""
Text utilities for catalog slugs and links.

Product titles come from Brazilian marketplace exports, so slugs have to
drop Portuguese accents before anything else.
"""

import re
import unicodedata
from typing import Optional
from urllib.parse import urlsplit

SLUG_MAX_LENGTH = 80

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")
_URL_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


def strip_accents(text: str) -> str:
    """
    Remove accent marks, keeping the base characters.

    - "Decoração" → "Decoracao"
    - "Pão de Açúcar" → "Pao de Acucar"
    """
    # NFD decomposition separates base chars from accents
    normalized = unicodedata.normalize("NFD", text)
    return "".join(c for c in normalized if unicodedata.category(c) != "Mn")


def slugify(value: Optional[str], max_length: int = SLUG_MAX_LENGTH) -> str:
    """
    Build a URL-safe slug from a product title.

    - "Fone Bluetooth Lite" → "fone-bluetooth-lite"
    - "  Câmera 4K (Pro)!  " → "camera-4k-pro"
    - "***" → ""

    Args:
        value: Raw title
        max_length: Cap applied after hyphen trimming

    Returns:
        Slug, or an empty string when nothing alphanumeric survives
    """
    if value is None:
        return ""

    text = str(value).strip()
    if not text:
        return ""

    slug = _NON_ALNUM_RUN.sub("-", strip_accents(text).lower())
    return slug.strip("-")[:max_length]


def is_valid_url(value: Optional[str]) -> bool:
    """
    Check that a value is a syntactically valid absolute URL.

    Requires a scheme and a network location, and rejects whitespace.
    """
    if not value or any(c.isspace() for c in value):
        return False

    try:
        parts = urlsplit(value)
        # Accessing port validates it
        parts.port
    except ValueError:
        return False

    return bool(_URL_SCHEME.match(parts.scheme)) and bool(parts.netloc)


def resolve_product_url(affiliate_url: Optional[str], origin_url: str) -> str:
    """Outbound link for a product: the affiliate link when set, else the origin."""
    return affiliate_url or origin_url
