"""
Shopee affiliate CSV parser.

Parses the product export downloaded from the Shopee affiliate panel:

    Item Id,Item Name,Price,Sales,Shop Name,Commission Rate,Commission,Product Link,Offer Link

Some spreadsheet tools re-save this export with the whole row packed
into one over-quoted cell, e.g.

    "123,""Fone Bluetooth Lite"",R$ 49.90,10,Loja,5%,R$ 2.49,https://...,https://..."

so every line is tokenized once as plain CSV and then run through
``unpack_columns`` before validation.

Parsing never raises for content problems: each rejected line becomes an
``ImportLineError`` and the caller decides what to do with the rest.
"""

import csv
import re
from dataclasses import dataclass, field
from typing import Optional
import structlog

from utils.text_utils import is_valid_url

logger = structlog.get_logger(__name__)


# ===================
# CONSTANTS
# ===================

EXPECTED_HEADER = [
    "Item Id",
    "Item Name",
    "Price",
    "Sales",
    "Shop Name",
    "Commission Rate",
    "Commission",
    "Product Link",
    "Offer Link",
]
EXPECTED_COLUMNS = len(EXPECTED_HEADER)

BOM = "\ufeff"
_LINE_BREAK = re.compile(r"\r?\n")

MSG_EMPTY_FILE = "Arquivo vazio."
MSG_INVALID_HEADER = f"Cabecalho invalido. Esperado: {', '.join(EXPECTED_HEADER)}"
MSG_INVALID_COLUMNS = f"Colunas invalidas (esperado {EXPECTED_COLUMNS})."
MSG_MISSING_ITEM_ID = "Item Id ausente."
MSG_MISSING_ITEM_NAME = "Item Name ausente."
MSG_MISSING_PRICE = "Price ausente."
MSG_MISSING_PRODUCT_LINK = "Product Link ausente."
MSG_INVALID_PRODUCT_LINK = "Product Link invalido."
MSG_INVALID_OFFER_LINK = "Offer Link invalido."
MSG_DUPLICATE_ITEM_ID = "Item Id duplicado no arquivo."


# ===================
# DATA CLASSES
# ===================

@dataclass
class ImportRow:
    """Validated export row ready for reconciliation."""
    line: int
    external_id: str
    title: str
    price_text: str
    store_name: str
    origin_url: str
    affiliate_url: Optional[str] = None


@dataclass
class ImportLineError:
    """Error tied to a source line (0 = whole file)."""
    line: int
    message: str

    def to_dict(self) -> dict:
        return {"line": self.line, "message": self.message}


@dataclass
class ShopeeParseResult:
    """Result of parsing a Shopee CSV export."""
    rows: list[ImportRow] = field(default_factory=list)
    errors: list[ImportLineError] = field(default_factory=list)


# ===================
# TOKENIZING
# ===================

def tokenize_line(line: str) -> list[str]:
    """
    Split a single CSV line into fields.

    Raises:
        csv.Error: If the line cannot be tokenized
    """
    return next(csv.reader([line]), [])


def _unpack_field(value: str) -> list[str]:
    """Undo one layer of row packing and tokenize the inner row."""
    cleaned = value.strip()
    if len(cleaned) >= 2 and cleaned.startswith('"') and cleaned.endswith('"'):
        cleaned = cleaned[1:-1]
    cleaned = cleaned.replace('""', '"')
    return tokenize_line(cleaned)


def unpack_columns(columns: list[str]) -> list[str]:
    """
    Recover the real columns of a possibly packed row.

    A row is treated as packed when the tokenizer produced a single
    column, or when only the first column has content and the rest are
    empty padding (exactly EXPECTED_COLUMNS or more). Anything else is
    returned untouched.

    Args:
        columns: Fields from the first tokenizing pass

    Returns:
        Columns to validate (count may still be wrong)
    """
    count = len(columns)
    trailing_empty = all(value == "" for value in columns[1:])

    if count == 1:
        return _unpack_field(columns[0])
    if count >= EXPECTED_COLUMNS and trailing_empty:
        return _unpack_field(columns[0])
    return columns


# ===================
# VALIDATION
# ===================

def _header_matches(columns: list[str]) -> bool:
    normalized = [value.strip().lower() for value in columns]
    expected = [value.lower() for value in EXPECTED_HEADER]
    return normalized == expected


def _validate_row(
    line_number: int,
    columns: list[str],
    seen_ids: set[str],
) -> tuple[Optional[ImportRow], Optional[str]]:
    """
    Validate one row's fields, stopping at the first problem.

    Returns:
        (ImportRow, None) on success, (None, message) on failure
    """
    (
        item_id,
        item_name,
        price,
        _sales,
        shop_name,
        _commission_rate,
        _commission,
        product_link,
        offer_link,
    ) = (value.strip() for value in columns)

    if not item_id:
        return None, MSG_MISSING_ITEM_ID
    if not item_name:
        return None, MSG_MISSING_ITEM_NAME
    if not price:
        return None, MSG_MISSING_PRICE
    if not product_link:
        return None, MSG_MISSING_PRODUCT_LINK
    if not is_valid_url(product_link):
        return None, MSG_INVALID_PRODUCT_LINK
    if offer_link and not is_valid_url(offer_link):
        return None, MSG_INVALID_OFFER_LINK
    if item_id in seen_ids:
        return None, MSG_DUPLICATE_ITEM_ID

    seen_ids.add(item_id)

    return ImportRow(
        line=line_number,
        external_id=item_id,
        title=item_name,
        price_text=price,
        store_name=shop_name,
        origin_url=product_link,
        affiliate_url=offer_link or None,
    ), None


# ===================
# MAIN PARSER
# ===================

def parse_shopee_csv(text: str) -> ShopeeParseResult:
    """
    Parse the text of a Shopee affiliate CSV export.

    Line numbers are physical (1-based) so errors point at the line an
    admin sees in an editor, blank lines included.

    Args:
        text: Decoded file content, with or without a leading BOM

    Returns:
        ShopeeParseResult with accepted rows and line-addressed errors
    """
    result = ShopeeParseResult()

    if text.startswith(BOM):
        text = text[len(BOM):]

    lines = [
        (number, raw)
        for number, raw in enumerate(_LINE_BREAK.split(text), start=1)
        if raw.strip()
    ]

    if not lines:
        logger.warning("shopee_csv_empty")
        result.errors.append(ImportLineError(line=0, message=MSG_EMPTY_FILE))
        return result

    header_line, header_raw = lines[0]
    try:
        header = tokenize_line(header_raw.strip())
    except csv.Error:
        header = []

    if not _header_matches(header):
        logger.warning("shopee_csv_invalid_header", line=header_line, header=header)
        result.errors.append(ImportLineError(line=header_line, message=MSG_INVALID_HEADER))
        return result

    seen_ids: set[str] = set()

    for line_number, raw in lines[1:]:
        try:
            columns = unpack_columns(tokenize_line(raw.strip()))
        except csv.Error as e:
            logger.debug("shopee_csv_tokenize_failed", line=line_number, error=str(e))
            columns = []

        if len(columns) != EXPECTED_COLUMNS:
            result.errors.append(ImportLineError(line=line_number, message=MSG_INVALID_COLUMNS))
            continue

        row, message = _validate_row(line_number, columns, seen_ids)
        if message:
            result.errors.append(ImportLineError(line=line_number, message=message))
            continue

        result.rows.append(row)

    logger.info(
        "shopee_csv_parsed",
        data_lines=len(lines) - 1,
        rows=len(result.rows),
        errors=len(result.errors),
    )

    return result
