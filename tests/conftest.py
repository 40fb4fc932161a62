"""
Shared test fixtures.
"""

import os
import sys
from pathlib import Path

# Add project root to Python path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

# Settings are loaded at import time; give them something to load
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("ENVIRONMENT", "development")

import pytest
from unittest.mock import patch
from datetime import datetime, timezone
from typing import Generator
from uuid import uuid4

# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseError(Exception):
    """Error raised by the mock, standing in for a PostgREST APIError."""
    pass


class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data if data is not None else []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """
    Mock Supabase query builder with chainable methods.

    Operates on the owning table's rows, so inserts and updates are
    visible to later queries.
    """

    def __init__(self, table: "MockSupabaseTable", operation: str, payload: dict = None):
        self._table = table
        self._operation = operation
        self._payload = payload
        self._filters = []
        self._limit = None

    def select(self, *args, **kwargs):
        return self

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        allowed = set(values)
        self._filters.append(lambda row: row.get(column) in allowed)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _matching(self) -> list:
        return [row for row in self._table.rows if all(f(row) for f in self._filters)]

    def execute(self) -> MockSupabaseResponse:
        self._table.client.calls.append((self._table.name, self._operation))

        failure = self._table.client.next_failure(self._table.name, self._operation, self._payload)
        if failure:
            raise MockSupabaseError(failure)

        if self._operation == "select":
            rows = [dict(row) for row in self._matching()]
            if self._limit is not None:
                rows = rows[:self._limit]
            return MockSupabaseResponse(data=rows)

        if self._operation == "insert":
            return MockSupabaseResponse(data=[self._table.insert_row(self._payload)])

        if self._operation == "update":
            now = datetime.now(timezone.utc).isoformat()
            updated = []
            for row in self._matching():
                row.update(self._payload)
                row["updated_at"] = now
                updated.append(dict(row))
            return MockSupabaseResponse(data=updated)

        raise AssertionError(f"Unsupported operation {self._operation}")


class MockSupabaseTable:
    """In-memory table with unique-constraint checks."""

    def __init__(self, client: "MockSupabaseClient", name: str):
        self.client = client
        self.name = name
        self.rows: list[dict] = []
        self.unique_columns = ("slug", "external_id") if name == "products" else ()

    def insert_row(self, payload: dict) -> dict:
        for column in self.unique_columns:
            value = payload.get(column)
            if value is not None and any(row.get(column) == value for row in self.rows):
                raise MockSupabaseError(
                    f'duplicate key value violates unique constraint "{self.name}_{column}_key"'
                )
        now = datetime.now(timezone.utc).isoformat()
        row = {"id": str(uuid4()), "created_at": now, "updated_at": now, **payload}
        self.rows.append(row)
        return dict(row)

    def select(self, *args, **kwargs):
        return MockSupabaseQuery(self, "select")

    def insert(self, data):
        return MockSupabaseQuery(self, "insert", dict(data))

    def update(self, data):
        return MockSupabaseQuery(self, "update", dict(data))


class MockSupabaseClient:
    """Mock Supabase client."""

    def __init__(self):
        self._tables = {}
        self._failures = []
        self.calls = []

    def set_table_data(self, table_name: str, data: list):
        """Configure rows for a table."""
        self.table(table_name).rows = [dict(row) for row in data]

    def rows(self, table_name: str) -> list:
        """Current rows of a table."""
        return self.table(table_name).rows

    def fail_next(self, table_name: str, operation: str, message: str, when=None):
        """
        Make the next matching operation raise.

        Args:
            when: Optional predicate on the insert/update payload
        """
        self._failures.append((table_name, operation, message, when))

    def next_failure(self, table_name: str, operation: str, payload: dict):
        for index, (name, op, message, when) in enumerate(self._failures):
            if name == table_name and op == operation and (when is None or when(payload or {})):
                del self._failures[index]
                return message
        return None

    def table(self, name: str) -> MockSupabaseTable:
        """Get mock table."""
        if name not in self._tables:
            self._tables[name] = MockSupabaseTable(self, name)
        return self._tables[name]


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("products", [
                {"id": "1", "external_id": "123", ...}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the database client with mock.

    Any code using get_supabase_client() gets the mock.
    """
    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        with patch("services.product_service.get_supabase_client", return_value=mock_supabase):
            yield mock_supabase


@pytest.fixture
def shopee_header() -> str:
    """Header line of a Shopee affiliate export."""
    return "Item Id,Item Name,Price,Sales,Shop Name,Commission Rate,Commission,Product Link,Offer Link"


@pytest.fixture
def sample_shopee_csv(shopee_header) -> str:
    """Small valid export with three products."""
    return "\n".join([
        shopee_header,
        "1001,Fone Bluetooth Lite,R$ 49.90,120,Loja Som,5%,R$ 2.49,https://shopee.com.br/product/1/1001,https://s.shopee.com.br/abc1001",
        "1002,Garrafa Térmica 1L,R$ 89.00,40,Casa Boa,7%,R$ 6.23,https://shopee.com.br/product/1/1002,",
        "1003,Cabo USB-C 2m,R$ 19.90,900,Tech BR,3%,R$ 0.60,https://shopee.com.br/product/1/1003,https://s.shopee.com.br/abc1003",
    ]) + "\n"


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client_with_mock_db(mock_supabase):
    """
    Create FastAPI test client with mocked database.

    The import service singleton is reset so it picks up the mock.
    """
    from fastapi.testclient import TestClient
    import services.product_service as product_service_module
    import services.shopee_import_service as import_service_module
    from main import app

    product_service_module._product_service = None
    import_service_module._shopee_import_service = None

    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        with patch("services.product_service.get_supabase_client", return_value=mock_supabase):
            with patch("main.check_connection", return_value={"status": "healthy", "products_count": 0}):
                yield TestClient(app)

    product_service_module._product_service = None
    import_service_module._shopee_import_service = None
