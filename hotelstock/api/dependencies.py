"""
Dependency injection container for FastAPI.

Provides use case instances to route handlers; tests replace them through
`app.dependency_overrides`.
"""

from functools import lru_cache

from hotelstock.application.use_cases import (
    DeleteWeeklyReportUseCase,
    GenerateWeeklyReportUseCase,
    GetReportDataUseCase,
    ListWeeklyReportsUseCase,
    ReconcileReportUseCase,
    ReconcileStockCountsUseCase,
    UpdateReportItemUseCase,
)
from hotelstock.config import Settings, get_settings


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


def get_generate_report_use_case() -> GenerateWeeklyReportUseCase:
    return GenerateWeeklyReportUseCase()


def get_report_data_use_case() -> GetReportDataUseCase:
    return GetReportDataUseCase()


def get_update_report_item_use_case() -> UpdateReportItemUseCase:
    return UpdateReportItemUseCase()


def get_delete_report_use_case() -> DeleteWeeklyReportUseCase:
    return DeleteWeeklyReportUseCase()


def get_list_reports_use_case() -> ListWeeklyReportsUseCase:
    return ListWeeklyReportsUseCase()


def get_reconcile_report_use_case() -> ReconcileReportUseCase:
    return ReconcileReportUseCase()


def get_reconcile_stock_counts_use_case() -> ReconcileStockCountsUseCase:
    return ReconcileStockCountsUseCase()
