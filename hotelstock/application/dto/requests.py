"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date

from pydantic import BaseModel, Field, model_validator


# --- Weekly reports ---


class GenerateWeeklyReportRequest(BaseModel):
    """Request to generate (or reuse) a property's weekly report."""

    property_id: str = Field(..., min_length=1, description="Property (hotel) ID")
    period_start: date = Field(
        ...,
        description="First day of the period; the period ends on the last day of that week",
        examples=["2024-06-03"],
    )


class UpdateReportItemRequest(BaseModel):
    """Manual entry of a report item's sales and losses."""

    sales: float = Field(..., ge=0, description="Units sold during the period")
    losses: float = Field(..., ge=0, description="Units recorded as lost")


# --- Reconciliation ---


class SectorEditRequest(BaseModel):
    """Manual inputs for one product in one sector."""

    sector_id: str = Field(..., description="Sector ID")
    product_id: str = Field(..., description="Product ID")
    sales: float = Field(default=0.0, ge=0, description="Units sold (ignored in derived-consumption sectors)")
    consumption: float | None = Field(
        default=None,
        ge=0,
        description="Units consumed (defaults to the consumption the sector recorded)",
    )
    counted_stock: float | None = Field(
        default=None,
        ge=0,
        description="Physically counted stock (defaults to the expected stock)",
    )


class ReconcileReportRequest(BaseModel):
    """Request to recompute the reconciliation views of a stored report."""

    sector_ids: list[str] | None = Field(
        default=None,
        description="Sectors to present (default: every sector of the property)",
    )
    edits: list[SectorEditRequest] = Field(default_factory=list)
    only_starred: bool = Field(default=False, description="Restrict to starred products")
    group_by_category: bool = Field(default=False, description="Also return rows grouped by category")


class CountSelectionRequest(BaseModel):
    """Start and end count for one location."""

    sector_id: str | None = Field(default=None, description="Sector ID, null for the warehouse")
    start_count_id: str = Field(..., description="Count opening the window")
    end_count_id: str = Field(..., description="Count closing the window")


class ReconcileStockCountsRequest(BaseModel):
    """Request to reconcile locations between two physical counts each."""

    property_id: str = Field(..., min_length=1, description="Property (hotel) ID")
    selections: list[CountSelectionRequest] = Field(..., min_length=1)
    edits: list[SectorEditRequest] = Field(default_factory=list)
    only_starred: bool = Field(default=False)
    group_by_category: bool = Field(default=False)

    @model_validator(mode="after")
    def edits_target_selected_sectors(self) -> "ReconcileStockCountsRequest":
        selected = {s.sector_id for s in self.selections if s.sector_id is not None}
        unknown = sorted({e.sector_id for e in self.edits} - selected)
        if unknown:
            raise ValueError(f"edits reference unselected sectors: {', '.join(unknown)}")
        return self
