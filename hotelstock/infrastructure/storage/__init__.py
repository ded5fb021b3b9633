"""Storage infrastructure implementations."""

from hotelstock.infrastructure.storage.sqlite import (
    SQLiteInventorySource,
    SQLiteReportStore,
    close_pool,
    get_connection,
    get_inventory_source,
    get_pool,
    get_report_store,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteInventorySource",
    "SQLiteReportStore",
    "get_inventory_source",
    "get_report_store",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
