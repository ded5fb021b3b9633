"""Catalog entities: properties, products and their consumption sectors."""

from enum import Enum

from pydantic import BaseModel, field_validator

UNCATEGORIZED = "Uncategorized"


class SectorKind(str, Enum):
    """How a sector's weekly flow is reconciled."""

    ORDINARY = "ordinary"
    # No sales concept: consumption is derived from the count, loss is always 0
    DERIVED_CONSUMPTION = "derived_consumption"


class Property(BaseModel):
    """A hotel in the group."""

    id: str
    name: str


class Product(BaseModel):
    """A trackable item in a property's warehouse."""

    id: str
    property_id: str
    name: str
    category: str = UNCATEGORIZED
    quantity: float = 0.0  # current warehouse stock
    is_active: bool = True
    is_starred: bool = False

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v: str | None) -> str:
        return v or UNCATEGORIZED

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_not_none(cls, v: float | None) -> float:
        return v if v is not None else 0.0


class Sector(BaseModel):
    """An internal consumption location within a property."""

    id: str
    property_id: str
    name: str
    kind: SectorKind = SectorKind.ORDINARY

    @property
    def derives_consumption(self) -> bool:
        return self.kind is SectorKind.DERIVED_CONSUMPTION
