"""
Reconciliation entities.

A ReconciliationReport is an immutable value holding, per product, the
warehouse flow and the flow of every sector for one period. Views derived
from it (warehouse view, sector views) are recomputed from manual edits and
never mutate it.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from hotelstock.core.entities.catalog import Sector, SectorKind


class MainStockData(BaseModel):
    """Warehouse flow for one product."""

    model_config = ConfigDict(frozen=True)

    initial_stock: float = 0.0
    purchases: float = 0.0
    delivered_to_sectors: float = 0.0
    calculated_final_stock: float = 0.0
    actual_final_stock: float = 0.0
    loss: float = 0.0  # actual - calculated; negative means shrinkage


class SectorStockData(BaseModel):
    """Sector flow for one product before manual edits."""

    model_config = ConfigDict(frozen=True)

    sector_id: str
    sector_name: str
    kind: SectorKind = SectorKind.ORDINARY
    initial_stock: float = 0.0
    received: float = 0.0
    # Consumption the sector recorded during the period
    consumption: float = 0.0
    # Physical count when one exists (stock-count reconciliation)
    counted_stock: float | None = None

    @property
    def calculated_final_stock(self) -> float:
        return self.initial_stock + self.received - self.consumption

    @property
    def has_footprint(self) -> bool:
        return self.initial_stock != 0 or self.received != 0 or self.consumption != 0


class ReconciliationRow(BaseModel):
    """One product across the warehouse and every sector."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    product_name: str
    category: str
    is_starred: bool = False
    main_stock: MainStockData | None = None
    sector_stocks: dict[str, SectorStockData] = Field(default_factory=dict)


class ReconciliationReport(BaseModel):
    """Assembled report the presenter works on."""

    model_config = ConfigDict(frozen=True)

    period_start: date
    period_end: date
    sectors: list[Sector] = Field(default_factory=list)
    rows: list[ReconciliationRow] = Field(default_factory=list)

    def sector(self, sector_id: str) -> Sector | None:
        return next((s for s in self.sectors if s.id == sector_id), None)


class SectorEdit(BaseModel):
    """Manual inputs for one product in one sector."""

    sales: float = 0.0
    # None falls back to the consumption the sector recorded
    consumption: float | None = None
    counted_stock: float | None = None


class WarehouseRowView(BaseModel):
    """Warehouse view row."""

    product_id: str
    product_name: str
    category: str
    initial_stock: float
    purchases: float
    delivered_to_sectors: float
    calculated_final_stock: float
    actual_final_stock: float
    loss: float


class SectorRowView(BaseModel):
    """Sector view row after applying the sector's flow equation."""

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


class SectorView(BaseModel):
    """Every product with a footprint in one sector, recomputed."""

    sector: Sector
    rows: list[SectorRowView] = Field(default_factory=list)

    @property
    def total_loss(self) -> float:
        return sum(row.loss for row in self.rows)

    @property
    def total_consumption(self) -> float:
        return sum(row.consumption for row in self.rows)


class CountSelection(BaseModel):
    """A pair of physical counts bounding one location's reconciliation window."""

    sector_id: str | None = None  # None selects the warehouse
    start_count_id: str
    end_count_id: str
