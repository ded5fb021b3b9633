"""
Core reconciliation services.

Layer-pure services that depend only on:
- hotelstock/core/entities/*
- hotelstock/core/interfaces/*
- hotelstock/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from hotelstock.core.services.batching import chunked, run_in_waves
from hotelstock.core.services.count_reconciliation import StockCountReconciler
from hotelstock.core.services.movement_aggregator import (
    MovementAggregate,
    MovementAggregator,
)
from hotelstock.core.services.reconciliation import (
    build_reconciliation_report,
    group_by_category,
    present_sector,
    present_warehouse,
)
from hotelstock.core.services.report_builder import WeeklyReportBuilder
from hotelstock.core.services.snapshot_resolver import (
    ResolvedStock,
    SnapshotResolver,
    StockSource,
)

__all__ = [
    # Batching
    "chunked",
    "run_in_waves",
    # Snapshot Resolver
    "SnapshotResolver",
    "ResolvedStock",
    "StockSource",
    # Movement Aggregator
    "MovementAggregator",
    "MovementAggregate",
    # Report Builder
    "WeeklyReportBuilder",
    # Presenter
    "build_reconciliation_report",
    "present_warehouse",
    "present_sector",
    "group_by_category",
    # Stock counts
    "StockCountReconciler",
]
