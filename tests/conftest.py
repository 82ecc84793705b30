"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add project root to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import pytest
from unittest.mock import patch
from typing import Generator

from models.shop import ShopDraftCreate, SkuCatalogEntry
from services.catalog_service import SkuCatalog
from services.draft_service import DraftService

# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data or []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """Mock Supabase query builder with chainable methods."""

    def __init__(self, data: list = None, count: int = None):
        self._data = data or []
        self._count = count
        self.filters: list[tuple[str, str]] = []

    def select(self, *args, **kwargs):
        return self

    def eq(self, column, value):
        # Applied for real so org scoping can be asserted
        self._data = [row for row in self._data if row.get(column) == value]
        self.filters.append((column, value))
        return self

    def execute(self) -> MockSupabaseResponse:
        return MockSupabaseResponse(
            data=self._data,
            count=self._count if self._count is not None else len(self._data)
        )


class MockSupabaseTable:
    """Mock Supabase table with configurable responses."""

    def __init__(self, data: list = None, count: int = None, error: Exception = None):
        self._data = data or []
        self._count = count
        self._error = error

    def select(self, *args, **kwargs):
        if self._error is not None:
            raise self._error
        return MockSupabaseQuery(self._data.copy(), self._count)


class MockSupabaseClient:
    """Mock Supabase client."""

    def __init__(self):
        self._tables = {}

    def set_table_data(self, table_name: str, data: list, count: int = None):
        """Configure mock data for a table."""
        self._tables[table_name] = {"data": data, "count": count, "error": None}

    def set_table_error(self, table_name: str, error: Exception):
        """Make every query on a table raise."""
        self._tables[table_name] = {"data": [], "count": None, "error": error}

    def table(self, name: str) -> MockSupabaseTable:
        """Get mock table."""
        config = self._tables.get(name, {"data": [], "count": None, "error": None})
        return MockSupabaseTable(config["data"], config["count"], config["error"])


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("skus", [
                {"org_id": "org-1", "sku_id": "SKU1", "sku_name": "Widget"}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the database client with mock.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("skus", [...])
            # Now any code using get_supabase_client() gets the mock
    """
    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        with patch("services.catalog_service.get_supabase_client", return_value=mock_supabase):
            yield mock_supabase


@pytest.fixture
def catalog_entries() -> list[SkuCatalogEntry]:
    """SKUs registered for the test organization."""
    return [
        SkuCatalogEntry(sku_id="A", sku_name="Cola 330ml"),
        SkuCatalogEntry(sku_id="B", sku_name="Cola 1.5L"),
        SkuCatalogEntry(sku_id="C", sku_name="Lemonade 330ml"),
        SkuCatalogEntry(sku_id="SKU1", sku_name="Widget"),
    ]


@pytest.fixture
def catalog(catalog_entries) -> SkuCatalog:
    """In-memory catalog built from catalog_entries."""
    return SkuCatalog(catalog_entries)


@pytest.fixture
def draft_data() -> ShopDraftCreate:
    """Identity of the shop being created."""
    return ShopDraftCreate(
        org_id="org-1",
        shop_id="shop-001",
        shop_name="Corner Market",
        shop_location="12 High Street",
        shop_type="convenience",
    )


@pytest.fixture
def draft_service(catalog) -> DraftService:
    """DraftService whose catalog lookups return the test catalog."""
    return DraftService(catalog_loader=lambda org_id: catalog)


@pytest.fixture
def draft(draft_service, draft_data):
    """Empty draft opened on draft_service."""
    return draft_service.open_draft(draft_data)


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client(draft_service):
    """
    Create FastAPI test client wired to an isolated DraftService.

    Usage:
        def test_endpoint(test_client):
            response = test_client.post("/api/shop-drafts", json={...})
            assert response.status_code == 201
    """
    from fastapi.testclient import TestClient
    from main import app

    with patch("routes.shop_drafts.get_draft_service", return_value=draft_service):
        yield TestClient(app)
