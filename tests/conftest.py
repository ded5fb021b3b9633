"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import aiosqlite
import pytest
from httpx import ASGITransport, AsyncClient

import hotelstock.infrastructure.storage.sqlite.connection as conn_module
from hotelstock.api.main import app
from hotelstock.core.entities import Product, Sector, SectorKind, WeeklyReport
from hotelstock.infrastructure.storage.sqlite.connection import close_pool
from hotelstock.infrastructure.storage.sqlite.migrations.migrator import initialize_database
from tests.factories import SEED_SQL, WEEK_END, WEEK_START


@pytest.fixture
def products() -> list[Product]:
    return [
        Product(
            id="p-rice", property_id="h1", name="Rice", category="Dry goods", quantity=40
        ),
        Product(
            id="p-soap",
            property_id="h1",
            name="Soap",
            category="Cleaning",
            quantity=12,
            is_starred=True,
        ),
    ]


@pytest.fixture
def sectors() -> list[Sector]:
    return [
        Sector(id="s-kitchen", property_id="h1", name="Kitchen"),
        Sector(
            id="s-maint",
            property_id="h1",
            name="Maintenance",
            kind=SectorKind.DERIVED_CONSUMPTION,
        ),
    ]


@pytest.fixture
def weekly_report() -> WeeklyReport:
    return WeeklyReport(id=1, property_id="h1", period_start=WEEK_START, period_end=WEEK_END)


@pytest.fixture
def mock_inventory_source(products, sectors) -> AsyncMock:
    """Inventory source with an empty history for the sample catalog."""
    source = AsyncMock()
    source.list_products.return_value = products
    source.list_sectors.return_value = sectors
    source.get_snapshot.return_value = None
    source.get_current_stock.return_value = 0.0
    source.get_movements.return_value = []
    source.get_completed_deliveries.return_value = []
    source.get_completed_transfers.return_value = []
    source.get_sector_balances.return_value = {}
    source.get_sector_consumption.return_value = {}
    source.get_stock_counts.return_value = []
    return source


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Async test client; the lifespan (migrations, pool) is not run."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# --- SQLite ---


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def migrated_db(temp_db_path: Path) -> AsyncGenerator[Path, None]:
    """
    Database with every migration applied, wired into the shared pool.

    The pool reads its location from settings, so settings are patched for
    the duration of the test.
    """
    results = await initialize_database(temp_db_path, create_backup_before=False)
    assert results and all(r.success for r in results)

    conn_module._pool = None
    mock_settings = MagicMock()
    mock_settings.storage.db_path = temp_db_path
    mock_settings.storage.pool_size = 2
    mock_settings.storage.busy_timeout = 5000

    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield temp_db_path
        finally:
            await close_pool()


@pytest.fixture
async def seeded_db(migrated_db: Path) -> Path:
    """Migrated database holding one week of inventory history."""
    async with aiosqlite.connect(migrated_db) as conn:
        await conn.executescript(SEED_SQL)
        await conn.commit()
    return migrated_db
