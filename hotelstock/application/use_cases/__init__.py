"""Application use cases."""

from hotelstock.application.use_cases.delete_weekly_report import DeleteWeeklyReportUseCase
from hotelstock.application.use_cases.generate_weekly_report import (
    GenerateWeeklyReportUseCase,
)
from hotelstock.application.use_cases.get_report_data import GetReportDataUseCase
from hotelstock.application.use_cases.list_weekly_reports import ListWeeklyReportsUseCase
from hotelstock.application.use_cases.reconcile_report import ReconcileReportUseCase
from hotelstock.application.use_cases.reconcile_stock_counts import (
    ReconcileStockCountsUseCase,
)
from hotelstock.application.use_cases.update_report_item import UpdateReportItemUseCase

__all__ = [
    "GenerateWeeklyReportUseCase",
    "GetReportDataUseCase",
    "UpdateReportItemUseCase",
    "DeleteWeeklyReportUseCase",
    "ListWeeklyReportsUseCase",
    "ReconcileReportUseCase",
    "ReconcileStockCountsUseCase",
]
