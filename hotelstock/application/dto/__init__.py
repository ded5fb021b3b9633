"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from hotelstock.application.dto.requests import (
    CountSelectionRequest,
    GenerateWeeklyReportRequest,
    ReconcileReportRequest,
    ReconcileStockCountsRequest,
    SectorEditRequest,
    UpdateReportItemRequest,
)
from hotelstock.application.dto.responses import (
    AckResponse,
    ErrorResponse,
    FullReportResponse,
    HealthResponse,
    OperationResult,
    ProviderHealthResponse,
    ReconciliationResponse,
    ReportItemResponse,
    ReportListResponse,
    SectorMovementResponse,
    SectorRowResponse,
    SectorViewResponse,
    TransferResponse,
    WarehouseRowResponse,
    WeeklyReportResponse,
)

__all__ = [
    # Requests
    "GenerateWeeklyReportRequest",
    "UpdateReportItemRequest",
    "SectorEditRequest",
    "ReconcileReportRequest",
    "CountSelectionRequest",
    "ReconcileStockCountsRequest",
    # Responses
    "OperationResult",
    "ErrorResponse",
    "HealthResponse",
    "ProviderHealthResponse",
    "WeeklyReportResponse",
    "SectorMovementResponse",
    "TransferResponse",
    "ReportItemResponse",
    "FullReportResponse",
    "ReportListResponse",
    "AckResponse",
    "WarehouseRowResponse",
    "SectorRowResponse",
    "SectorViewResponse",
    "ReconciliationResponse",
]
