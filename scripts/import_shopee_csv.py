"""
Import a Shopee affiliate CSV export from the command line.

Runs the same pipeline as POST /api/products/import/shopee against the
configured Supabase project and prints the summary.

Usage:
    python scripts/import_shopee_csv.py exports/shopee_2026-10.csv
    python scripts/import_shopee_csv.py exports/shopee_2026-10.csv --auto-images
"""

import argparse
import os
import sys

# Allow imports from the project root when running as a script
_root_dir = os.path.join(os.path.dirname(__file__), "..")
sys.path.insert(0, _root_dir)

from dotenv import load_dotenv
load_dotenv(os.path.join(_root_dir, ".env"))

from config import configure_logging
from services.shopee_import_service import get_shopee_import_service


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Import a Shopee affiliate CSV export")
    parser.add_argument("file", help="Path to the CSV export")
    parser.add_argument(
        "--auto-images",
        action="store_true",
        help="Fetch an image for each newly created product"
    )
    parser.add_argument(
        "--encoding",
        default="utf-8",
        help="File encoding (default: utf-8; a BOM is handled either way)"
    )
    args = parser.parse_args(argv)

    configure_logging()

    try:
        with open(args.file, encoding=args.encoding) as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"[ERROR] Could not read {args.file}: {e}")
        return 2

    result = get_shopee_import_service().run_import(text, enrich_images=args.auto_images)

    print(result.summary())
    for message in result.error_messages():
        print(f"  - {message}")

    return 1 if result.errors else 0


if __name__ == "__main__":
    sys.exit(main())
