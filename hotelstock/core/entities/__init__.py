"""Core domain entities."""

from hotelstock.core.entities.catalog import (
    UNCATEGORIZED,
    Product,
    Property,
    Sector,
    SectorKind,
)
from hotelstock.core.entities.reconciliation import (
    CountSelection,
    MainStockData,
    ReconciliationReport,
    ReconciliationRow,
    SectorEdit,
    SectorRowView,
    SectorStockData,
    SectorView,
    WarehouseRowView,
)
from hotelstock.core.entities.report import (
    FullReport,
    ReportPeriod,
    ReportState,
    SectorMovement,
    SectorMovementRecord,
    TransferRecord,
    TransferTotal,
    WeeklyReport,
    WeeklyReportItem,
)
from hotelstock.core.entities.stock import (
    InventoryMovement,
    MovementType,
    PropertyTransfer,
    SectorDelivery,
    StockCount,
    StockSnapshot,
)

__all__ = [
    # Catalog entities
    "UNCATEGORIZED",
    "Property",
    "Product",
    "Sector",
    "SectorKind",
    # Stock history entities
    "InventoryMovement",
    "MovementType",
    "StockSnapshot",
    "SectorDelivery",
    "PropertyTransfer",
    "StockCount",
    # Report entities
    "ReportPeriod",
    "ReportState",
    "WeeklyReport",
    "WeeklyReportItem",
    "SectorMovement",
    "TransferTotal",
    "SectorMovementRecord",
    "TransferRecord",
    "FullReport",
    # Reconciliation entities
    "CountSelection",
    "MainStockData",
    "SectorStockData",
    "ReconciliationRow",
    "ReconciliationReport",
    "SectorEdit",
    "WarehouseRowView",
    "SectorRowView",
    "SectorView",
]
