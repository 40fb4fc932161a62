"""
File parsers module.
"""

from parsers.shopee_parser import (
    parse_shopee_csv,
    unpack_columns,
    ImportRow,
    ImportLineError,
    ShopeeParseResult,
    EXPECTED_HEADER,
)

__all__ = [
    "parse_shopee_csv",
    "unpack_columns",
    "ImportRow",
    "ImportLineError",
    "ShopeeParseResult",
    "EXPECTED_HEADER",
]
