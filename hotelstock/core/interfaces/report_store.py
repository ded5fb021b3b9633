"""Abstract interface for weekly report storage."""

from abc import ABC, abstractmethod
from datetime import date

from hotelstock.core.entities.report import (
    SectorMovementRecord,
    TransferRecord,
    WeeklyReport,
    WeeklyReportItem,
)


class IReportStore(ABC):
    """
    Interface for weekly report persistence.

    A report is unique per (property_id, period_start, period_end) and an
    item is unique per (report_id, product_id). Deleting a report removes its
    items and their movement/transfer records.
    """

    @abstractmethod
    async def get_report(self, report_id: int) -> WeeklyReport | None:
        """Get report by ID."""
        pass

    @abstractmethod
    async def find_report(
        self, property_id: str, period_start: date, period_end: date
    ) -> WeeklyReport | None:
        """Find the report for a property and period."""
        pass

    @abstractmethod
    async def get_or_create_report(
        self, property_id: str, period_start: date, period_end: date
    ) -> tuple[WeeklyReport, bool]:
        """
        Return the report for a property and period, creating it if absent.

        The boolean is True only for the caller whose insert created the row.
        """
        pass

    @abstractmethod
    async def list_reports(
        self, property_id: str, limit: int | None = None
    ) -> list[WeeklyReport]:
        """List a property's reports, newest period first."""
        pass

    @abstractmethod
    async def list_report_items(self, report_id: int) -> list[WeeklyReportItem]:
        """List a report's items ordered by product name, without child records."""
        pass

    @abstractmethod
    async def bulk_insert_report_items(
        self, report_id: int, items: list[WeeklyReportItem]
    ) -> list[WeeklyReportItem]:
        """
        Insert items in one transaction.

        Items whose product already has a row in the report are skipped; only
        newly inserted items are returned, with their IDs set.
        """
        pass

    @abstractmethod
    async def bulk_insert_movement_records(
        self, records: list[SectorMovementRecord]
    ) -> int:
        """Insert sector movement records in one transaction."""
        pass

    @abstractmethod
    async def bulk_insert_transfer_records(self, records: list[TransferRecord]) -> int:
        """Insert transfer records in one transaction."""
        pass

    @abstractmethod
    async def list_movement_records(
        self, item_ids: list[int]
    ) -> list[SectorMovementRecord]:
        """List sector movement records for the given items."""
        pass

    @abstractmethod
    async def list_transfer_records(self, item_ids: list[int]) -> list[TransferRecord]:
        """List transfer records for the given items."""
        pass

    @abstractmethod
    async def update_report_item(
        self, item_id: int, sales: float, losses: float
    ) -> WeeklyReportItem | None:
        """Set an item's manually entered sales and losses."""
        pass

    @abstractmethod
    async def delete_report(self, report_id: int) -> bool:
        """Delete a report with its items and their child records."""
        pass
