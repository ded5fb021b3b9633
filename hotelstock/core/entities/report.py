"""
Weekly report entities.

A WeeklyReport is one reconciliation run for a property and a weekly period.
Each WeeklyReportItem is one product's row, carrying the warehouse flow plus
the per-destination sector movements and property transfers computed when the
report was generated.
"""

from datetime import date, datetime, time, timedelta
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class ReportState(str, Enum):
    """Lifecycle of a report generation run."""

    ABSENT = "absent"
    CREATING = "creating"
    ITEMS_PENDING = "items_pending"
    ITEMS_COMPLETE = "items_complete"


class ReportPeriod(BaseModel):
    """A closed date range [start, end], both days included."""

    start: date
    end: date

    @model_validator(mode="after")
    def check_order(self) -> "ReportPeriod":
        if self.end < self.start:
            raise ValueError("period end must not precede period start")
        return self

    @classmethod
    def for_week(cls, start: date, week_starts_on: int = 0) -> "ReportPeriod":
        """Period from `start` to the last day of its week (weekday 0 = Monday)."""
        last_weekday = (week_starts_on + 6) % 7
        days_to_end = (last_weekday - start.weekday()) % 7
        return cls(start=start, end=start + timedelta(days=days_to_end))

    @property
    def start_at(self) -> datetime:
        return datetime.combine(self.start, time.min)

    @property
    def end_before(self) -> datetime:
        """Exclusive upper bound covering the whole end day."""
        return datetime.combine(self.end + timedelta(days=1), time.min)


class SectorMovement(BaseModel):
    """Quantity delivered to one sector during the period."""

    sector_id: str | None = None
    sector_name: str
    quantity: float


class TransferTotal(BaseModel):
    """Quantity transferred to one destination property during the period."""

    destination_property_id: str | None = None
    destination_property_name: str
    quantity: float


class WeeklyReport(BaseModel):
    """One reconciliation run for a property and period."""

    id: int | None = None
    property_id: str
    period_start: date
    period_end: date
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def period(self) -> ReportPeriod:
        return ReportPeriod(start=self.period_start, end=self.period_end)


class WeeklyReportItem(BaseModel):
    """One product's row within a weekly report."""

    id: int | None = None
    report_id: int | None = None
    product_id: str
    product_name: str = ""
    category: str = ""
    initial_stock: float = 0.0
    purchases: float = 0.0
    sales: float = 0.0  # manual entry
    losses: float = 0.0  # manual entry
    final_stock: float = 0.0  # warehouse stock when the report was generated
    # Set when the row was zero-filled after a per-item failure
    is_estimated: bool = False
    sector_movements: list[SectorMovement] = Field(default_factory=list)
    transfers: list[TransferTotal] = Field(default_factory=list)

    @property
    def delivered_to_sectors(self) -> float:
        return sum(m.quantity for m in self.sector_movements)

    @property
    def transferred_out(self) -> float:
        return sum(t.quantity for t in self.transfers)

    @property
    def calculated_final_stock(self) -> float:
        return self.initial_stock + self.purchases - self.delivered_to_sectors

    @property
    def warehouse_loss(self) -> float:
        """Negative means shrinkage."""
        return self.final_stock - self.calculated_final_stock


class SectorMovementRecord(BaseModel):
    """Persisted per-item, per-sector aggregate."""

    id: int | None = None
    report_item_id: int
    sector_id: str | None = None
    sector_name: str
    quantity: float


class TransferRecord(BaseModel):
    """Persisted per-item, per-destination transfer aggregate."""

    id: int | None = None
    report_item_id: int
    destination_property_id: str | None = None
    destination_property_name: str
    quantity: float


class FullReport(BaseModel):
    """A report with every item and its child movement records."""

    report: WeeklyReport
    items: list[WeeklyReportItem] = Field(default_factory=list)

    @property
    def estimated_items(self) -> list[WeeklyReportItem]:
        return [item for item in self.items if item.is_estimated]
