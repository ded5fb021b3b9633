"""Abstract interface for the read-only inventory history the engine reconciles."""

from abc import ABC, abstractmethod
from datetime import date, datetime

from hotelstock.core.entities.catalog import Product, Property, Sector
from hotelstock.core.entities.stock import (
    InventoryMovement,
    MovementType,
    PropertyTransfer,
    SectorDelivery,
    StockCount,
    StockSnapshot,
)


class IInventorySource(ABC):
    """
    Interface for catalog, stock history and physical counts.

    Everything behind this interface is owned by other parts of the system;
    the reconciliation engine only reads it. Time windows are half-open:
    `start <= t < end_before`.
    """

    @abstractmethod
    async def get_property(self, property_id: str) -> Property | None:
        """Get a property by ID."""
        pass

    @abstractmethod
    async def list_products(
        self,
        property_id: str,
        only_active: bool = True,
        only_starred: bool = False,
    ) -> list[Product]:
        """List a property's product catalog ordered by category and name."""
        pass

    @abstractmethod
    async def list_sectors(self, property_id: str) -> list[Sector]:
        """List a property's sectors with their kind resolved."""
        pass

    @abstractmethod
    async def get_snapshot(
        self,
        property_id: str,
        at_or_before: date,
        product_ids: list[str] | None = None,
    ) -> StockSnapshot | None:
        """
        Get the most recent snapshot dated at or before the given day.

        When product_ids is given only those entries are loaded into items.
        """
        pass

    @abstractmethod
    async def get_current_stock(self, product_id: str) -> float | None:
        """Get a product's current warehouse quantity, None if unknown."""
        pass

    @abstractmethod
    async def get_movements(
        self,
        product_id: str,
        start: datetime,
        end_before: datetime,
        property_id: str | None = None,
        movement_type: MovementType | None = None,
    ) -> list[InventoryMovement]:
        """Get a product's inventory movements in a window."""
        pass

    @abstractmethod
    async def get_completed_deliveries(
        self,
        property_id: str,
        start: datetime,
        end_before: datetime,
        product_id: str | None = None,
    ) -> list[SectorDelivery]:
        """
        Get completed sector deliveries in a window.

        A product_id filter matches both the requested and the substituted
        product of a delivery.
        """
        pass

    @abstractmethod
    async def get_completed_transfers(
        self,
        source_property_id: str,
        start: datetime,
        end_before: datetime,
        product_id: str | None = None,
    ) -> list[PropertyTransfer]:
        """Get completed transfers leaving a property in a window."""
        pass

    @abstractmethod
    async def get_sector_balances(
        self, property_id: str, at: date
    ) -> dict[str, dict[str, float]]:
        """Get the last known balance per sector and product at or before a day."""
        pass

    @abstractmethod
    async def get_sector_consumption(
        self, property_id: str, start: datetime, end_before: datetime
    ) -> dict[str, dict[str, float]]:
        """Get recorded consumption per sector and product summed over a window."""
        pass

    @abstractmethod
    async def get_stock_counts(self, count_ids: list[str]) -> list[StockCount]:
        """Get finished stock counts with their counted items."""
        pass

    @abstractmethod
    async def list_stock_counts(
        self, property_id: str, sector_id: str | None = None
    ) -> list[StockCount]:
        """List a location's finished counts, newest first, without items."""
        pass
