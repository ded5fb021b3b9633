"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers.
"""

from hotelstock.application.dto.requests import (
    GenerateWeeklyReportRequest,
    ReconcileReportRequest,
    ReconcileStockCountsRequest,
    UpdateReportItemRequest,
)
from hotelstock.application.dto.responses import (
    ErrorResponse,
    FullReportResponse,
    HealthResponse,
    OperationResult,
    ReconciliationResponse,
)
from hotelstock.application.services import (
    get_report_builder,
    get_stock_count_reconciler,
    reset_services,
)
from hotelstock.application.use_cases import (
    DeleteWeeklyReportUseCase,
    GenerateWeeklyReportUseCase,
    GetReportDataUseCase,
    ListWeeklyReportsUseCase,
    ReconcileReportUseCase,
    ReconcileStockCountsUseCase,
    UpdateReportItemUseCase,
)

__all__ = [
    # Request DTOs
    "GenerateWeeklyReportRequest",
    "UpdateReportItemRequest",
    "ReconcileReportRequest",
    "ReconcileStockCountsRequest",
    # Response DTOs
    "OperationResult",
    "FullReportResponse",
    "ReconciliationResponse",
    "HealthResponse",
    "ErrorResponse",
    # Use Cases
    "GenerateWeeklyReportUseCase",
    "GetReportDataUseCase",
    "UpdateReportItemUseCase",
    "DeleteWeeklyReportUseCase",
    "ListWeeklyReportsUseCase",
    "ReconcileReportUseCase",
    "ReconcileStockCountsUseCase",
    # Service factories
    "get_report_builder",
    "get_stock_count_reconciler",
    "reset_services",
]
