"""Read-only stock history entities consumed by the reconciliation engine."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class MovementType(str, Enum):
    """Types of warehouse inventory movements."""

    ENTRY = "entry"  # purchase / inbound
    EXIT = "exit"
    ADJUSTMENT = "adjustment"
    TRANSFER = "transfer"


class InventoryMovement(BaseModel):
    """A signed quantity change for one product at one property."""

    id: int | None = None
    property_id: str
    product_id: str
    quantity_change: float  # signed
    movement_type: MovementType
    created_at: datetime


class StockSnapshot(BaseModel):
    """A point-in-time full count of a property's warehouse."""

    id: int | None = None
    property_id: str
    snapshot_date: date
    items: dict[str, float] = Field(default_factory=dict)  # product_id -> quantity

    def quantity_for(self, product_id: str) -> float | None:
        return self.items.get(product_id)


class SectorDelivery(BaseModel):
    """A completed delivery (requisition) of a product to a sector."""

    id: int | None = None
    property_id: str
    product_id: str
    substituted_product_id: str | None = None
    sector_id: str
    delivered_quantity: float = 0.0
    completed_at: datetime

    @property
    def attributed_product_id(self) -> str:
        """The product that physically left the warehouse."""
        return self.substituted_product_id or self.product_id


class PropertyTransfer(BaseModel):
    """A completed transfer of a product between two properties."""

    id: int | None = None
    product_id: str
    source_property_id: str
    destination_property_id: str
    destination_property_name: str
    quantity: float = 0.0
    completed_at: datetime


class StockCount(BaseModel):
    """A finished physical count of a warehouse (sector_id None) or a sector."""

    id: str
    property_id: str
    sector_id: str | None = None
    finished_at: datetime
    items: dict[str, float] = Field(default_factory=dict)  # product_id -> counted quantity

    def counted(self, product_id: str) -> float:
        return self.items.get(product_id, 0.0)
