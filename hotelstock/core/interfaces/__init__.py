"""Core interfaces (ports) for dependency injection."""

from hotelstock.core.interfaces.inventory_source import IInventorySource
from hotelstock.core.interfaces.report_store import IReportStore

__all__ = [
    "IInventorySource",
    "IReportStore",
]
