"""
Test suite for the affiliate catalog import.

Run all tests: pytest
Run specific file: pytest tests/unit/test_shopee_parser.py -v
"""
