"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field


class OperationResult(BaseModel):
    """
    Structured outcome of a use case.

    Failures are returned, never raised across the application boundary, so
    callers can render a retry affordance from `error` and `error_code`.
    """

    success: bool
    data: Any = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, data: Any = None) -> "OperationResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, error_code: str) -> "OperationResult":
        return cls(success=False, error=error, error_code=error_code)


class ProviderHealthResponse(BaseModel):
    """Health of a backing component."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. REPORT_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)


# --- Weekly reports ---


class WeeklyReportResponse(BaseModel):
    """Weekly report header."""

    id: int
    property_id: str
    period_start: date
    period_end: date
    created_at: datetime
    updated_at: datetime


class SectorMovementResponse(BaseModel):
    sector_id: str | None = None
    sector_name: str
    quantity: float


class TransferResponse(BaseModel):
    destination_property_id: str | None = None
    destination_property_name: str
    quantity: float


class ReportItemResponse(BaseModel):
    """One product's row with its warehouse balance."""

    id: int
    product_id: str
    product_name: str
    category: str
    initial_stock: float
    purchases: float
    sales: float
    losses: float
    final_stock: float
    delivered_to_sectors: float
    transferred_out: float
    calculated_final_stock: float
    warehouse_loss: float
    is_estimated: bool = Field(default=False, description="Row was zero-filled after a lookup failure")
    sector_movements: list[SectorMovementResponse] = Field(default_factory=list)
    transfers: list[TransferResponse] = Field(default_factory=list)


class FullReportResponse(BaseModel):
    """Report with every item and child record."""

    report: WeeklyReportResponse
    items: list[ReportItemResponse]
    estimated_items: int = 0


class ReportListResponse(BaseModel):
    """A property's reports, newest period first."""

    reports: list[WeeklyReportResponse]
    total: int


class AckResponse(BaseModel):
    """Acknowledgement of a mutation."""

    id: int
    message: str


# --- Reconciliation ---


class WarehouseRowResponse(BaseModel):
    product_id: str
    product_name: str
    category: str
    initial_stock: float
    purchases: float
    delivered_to_sectors: float
    calculated_final_stock: float
    actual_final_stock: float
    loss: float


class SectorRowResponse(BaseModel):
    product_id: str
    product_name: str
    category: str
    initial_stock: float
    received: float
    sales: float
    consumption: float
    counted_stock: float
    loss: float
    consumption_derived: bool = False


class SectorViewResponse(BaseModel):
    """One sector's recomputed rows."""

    sector_id: str
    sector_name: str
    kind: str
    rows: list[SectorRowResponse]
    groups: dict[str, list[SectorRowResponse]] | None = None
    total_loss: float
    total_consumption: float


class ReconciliationResponse(BaseModel):
    """Warehouse and sector views for one period or count window."""

    period_start: date
    period_end: date
    warehouse: list[WarehouseRowResponse] = Field(default_factory=list)
    warehouse_groups: dict[str, list[WarehouseRowResponse]] | None = None
    sectors: list[SectorViewResponse] = Field(default_factory=list)
