"""SQLite storage implementations."""

from hotelstock.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from hotelstock.infrastructure.storage.sqlite.inventory_source import SQLiteInventorySource
from hotelstock.infrastructure.storage.sqlite.report_store import SQLiteReportStore

# Singleton instances
_inventory_source: SQLiteInventorySource | None = None
_report_store: SQLiteReportStore | None = None


async def get_inventory_source() -> SQLiteInventorySource:
    """Get singleton inventory source instance."""
    global _inventory_source
    if _inventory_source is None:
        _inventory_source = SQLiteInventorySource()
    return _inventory_source


async def get_report_store() -> SQLiteReportStore:
    """Get singleton report store instance."""
    global _report_store
    if _report_store is None:
        _report_store = SQLiteReportStore()
    return _report_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteInventorySource",
    "SQLiteReportStore",
    # Factory functions
    "get_inventory_source",
    "get_report_store",
]
