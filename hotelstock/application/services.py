"""
Service factory functions for dependency injection.

Wires the SQLite implementations and report settings into the core
services. Use cases import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from hotelstock.config import get_settings
from hotelstock.core.services import StockCountReconciler, WeeklyReportBuilder

if TYPE_CHECKING:
    from hotelstock.core.interfaces import IInventorySource, IReportStore


# Singleton service instances
_report_builder: WeeklyReportBuilder | None = None
_stock_count_reconciler: StockCountReconciler | None = None


def get_report_builder(
    source: "IInventorySource | None" = None,
    store: "IReportStore | None" = None,
) -> WeeklyReportBuilder:
    """
    Get or create the WeeklyReportBuilder.

    Batch sizes and pacing delays come from `settings.report`. Passing either
    dependency builds a fresh, uncached instance.
    """
    global _report_builder

    if _report_builder is not None and source is None and store is None:
        return _report_builder

    # Lazy import infrastructure to avoid circular imports
    from hotelstock.infrastructure.storage.sqlite import (
        SQLiteInventorySource,
        SQLiteReportStore,
    )

    report_settings = get_settings().report
    builder = WeeklyReportBuilder(
        source=source or SQLiteInventorySource(),
        store=store or SQLiteReportStore(),
        batch_size=report_settings.batch_size,
        batch_delay=report_settings.batch_delay_seconds,
        child_batch_delay=report_settings.child_batch_delay_seconds,
        week_starts_on=report_settings.week_starts_on,
    )

    if source is None and store is None:
        _report_builder = builder

    return builder


def get_stock_count_reconciler(
    source: "IInventorySource | None" = None,
) -> StockCountReconciler:
    """Get or create the StockCountReconciler."""
    global _stock_count_reconciler

    if _stock_count_reconciler is not None and source is None:
        return _stock_count_reconciler

    from hotelstock.infrastructure.storage.sqlite import SQLiteInventorySource

    report_settings = get_settings().report
    reconciler = StockCountReconciler(
        source=source or SQLiteInventorySource(),
        batch_size=report_settings.batch_size,
        batch_delay=report_settings.batch_delay_seconds,
    )

    if source is None:
        _stock_count_reconciler = reconciler

    return reconciler


def reset_services() -> None:
    """Drop cached service instances (tests, settings reload)."""
    global _report_builder, _stock_count_reconciler
    _report_builder = None
    _stock_count_reconciler = None
