"""SQLite implementation of weekly report storage."""

from datetime import date, datetime

import aiosqlite

from hotelstock.config import get_logger
from hotelstock.core.entities.report import (
    SectorMovementRecord,
    TransferRecord,
    WeeklyReport,
    WeeklyReportItem,
)
from hotelstock.core.exceptions import DatabaseError
from hotelstock.core.interfaces.report_store import IReportStore
from hotelstock.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


def _placeholders(values: list) -> str:
    return ", ".join("?" for _ in values)


class SQLiteReportStore(IReportStore):
    """
    SQLite implementation of weekly report storage.

    Uniqueness of reports and items is enforced by the schema; items and
    their child records are removed by ON DELETE CASCADE.
    """

    async def get_report(self, report_id: int) -> WeeklyReport | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM weekly_reports WHERE id = ?", (report_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_report(row) if row else None

    async def find_report(
        self, property_id: str, period_start: date, period_end: date
    ) -> WeeklyReport | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM weekly_reports
                WHERE property_id = ? AND period_start = ? AND period_end = ?
                """,
                (property_id, period_start.isoformat(), period_end.isoformat()),
            )
            row = await cursor.fetchone()
            return self._row_to_report(row) if row else None

    async def get_or_create_report(
        self, property_id: str, period_start: date, period_end: date
    ) -> tuple[WeeklyReport, bool]:
        existing = await self.find_report(property_id, period_start, period_end)
        if existing is not None:
            return existing, False

        report = WeeklyReport(
            property_id=property_id,
            period_start=period_start,
            period_end=period_end,
        )
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO weekly_reports (
                        property_id, period_start, period_end, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        report.property_id,
                        report.period_start.isoformat(),
                        report.period_end.isoformat(),
                        report.created_at.isoformat(),
                        report.updated_at.isoformat(),
                    ),
                )
                report.id = cursor.lastrowid
        except aiosqlite.IntegrityError:
            # Another caller created the same period between our check and insert
            logger.info(
                "weekly_report_creation_conflict",
                property_id=property_id,
                period_start=period_start.isoformat(),
            )
            existing = await self.find_report(property_id, period_start, period_end)
            if existing is None:
                raise DatabaseError(
                    "get_or_create_report", "conflicting report vanished before re-fetch"
                )
            return existing, False

        logger.info(
            "weekly_report_created",
            report_id=report.id,
            property_id=property_id,
            period_start=period_start.isoformat(),
            period_end=period_end.isoformat(),
        )
        return report, True

    async def list_reports(
        self, property_id: str, limit: int | None = None
    ) -> list[WeeklyReport]:
        query = """
            SELECT * FROM weekly_reports
            WHERE property_id = ?
            ORDER BY period_start DESC, id DESC
        """
        params: list = [property_id]
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_report(row) for row in rows]

    async def list_report_items(self, report_id: int) -> list[WeeklyReportItem]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM weekly_report_items
                WHERE report_id = ?
                ORDER BY product_name, id
                """,
                (report_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_item(row) for row in rows]

    async def bulk_insert_report_items(
        self, report_id: int, items: list[WeeklyReportItem]
    ) -> list[WeeklyReportItem]:
        inserted: list[WeeklyReportItem] = []
        if not items:
            return inserted

        async with get_transaction() as conn:
            for item in items:
                cursor = await conn.execute(
                    """
                    INSERT INTO weekly_report_items (
                        report_id, product_id, product_name, category,
                        initial_stock, purchases, sales, losses, final_stock,
                        is_estimated
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT (report_id, product_id) DO NOTHING
                    """,
                    (
                        report_id,
                        item.product_id,
                        item.product_name,
                        item.category,
                        item.initial_stock,
                        item.purchases,
                        item.sales,
                        item.losses,
                        item.final_stock,
                        int(item.is_estimated),
                    ),
                )
                if cursor.rowcount == 1:
                    inserted.append(
                        item.model_copy(update={"id": cursor.lastrowid, "report_id": report_id})
                    )

            await conn.execute(
                "UPDATE weekly_reports SET updated_at = ? WHERE id = ?",
                (datetime.utcnow().isoformat(), report_id),
            )

        logger.info(
            "report_items_inserted",
            report_id=report_id,
            inserted=len(inserted),
            skipped=len(items) - len(inserted),
        )
        return inserted

    async def bulk_insert_movement_records(
        self, records: list[SectorMovementRecord]
    ) -> int:
        if not records:
            return 0

        async with get_transaction() as conn:
            await conn.executemany(
                """
                INSERT INTO report_sector_movements (
                    report_item_id, sector_id, sector_name, quantity
                ) VALUES (?, ?, ?, ?)
                """,
                [
                    (r.report_item_id, r.sector_id, r.sector_name, r.quantity)
                    for r in records
                ],
            )

        logger.debug("report_sector_movements_inserted", count=len(records))
        return len(records)

    async def bulk_insert_transfer_records(self, records: list[TransferRecord]) -> int:
        if not records:
            return 0

        async with get_transaction() as conn:
            await conn.executemany(
                """
                INSERT INTO report_transfers (
                    report_item_id, destination_property_id,
                    destination_property_name, quantity
                ) VALUES (?, ?, ?, ?)
                """,
                [
                    (
                        r.report_item_id,
                        r.destination_property_id,
                        r.destination_property_name,
                        r.quantity,
                    )
                    for r in records
                ],
            )

        logger.debug("report_transfers_inserted", count=len(records))
        return len(records)

    async def list_movement_records(
        self, item_ids: list[int]
    ) -> list[SectorMovementRecord]:
        if not item_ids:
            return []

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM report_sector_movements
                WHERE report_item_id IN ({_placeholders(item_ids)})
                ORDER BY report_item_id, sector_name
                """,
                item_ids,
            )
            rows = await cursor.fetchall()
            return [
                SectorMovementRecord(
                    id=row["id"],
                    report_item_id=row["report_item_id"],
                    sector_id=row["sector_id"],
                    sector_name=row["sector_name"],
                    quantity=row["quantity"],
                )
                for row in rows
            ]

    async def list_transfer_records(self, item_ids: list[int]) -> list[TransferRecord]:
        if not item_ids:
            return []

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM report_transfers
                WHERE report_item_id IN ({_placeholders(item_ids)})
                ORDER BY report_item_id, destination_property_name
                """,
                item_ids,
            )
            rows = await cursor.fetchall()
            return [
                TransferRecord(
                    id=row["id"],
                    report_item_id=row["report_item_id"],
                    destination_property_id=row["destination_property_id"],
                    destination_property_name=row["destination_property_name"],
                    quantity=row["quantity"],
                )
                for row in rows
            ]

    async def update_report_item(
        self, item_id: int, sales: float, losses: float
    ) -> WeeklyReportItem | None:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "UPDATE weekly_report_items SET sales = ?, losses = ? WHERE id = ?",
                (sales, losses, item_id),
            )
            if cursor.rowcount == 0:
                return None

            cursor = await conn.execute(
                "SELECT * FROM weekly_report_items WHERE id = ?", (item_id,)
            )
            row = await cursor.fetchone()
            await conn.execute(
                "UPDATE weekly_reports SET updated_at = ? WHERE id = ?",
                (datetime.utcnow().isoformat(), row["report_id"]),
            )

        logger.info("report_item_updated", item_id=item_id, sales=sales, losses=losses)
        return self._row_to_item(row)

    async def delete_report(self, report_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM weekly_reports WHERE id = ?", (report_id,)
            )
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("weekly_report_deleted", report_id=report_id)
        return deleted

    def _row_to_report(self, row: aiosqlite.Row) -> WeeklyReport:
        return WeeklyReport(
            id=row["id"],
            property_id=row["property_id"],
            period_start=date.fromisoformat(row["period_start"]),
            period_end=date.fromisoformat(row["period_end"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _row_to_item(self, row: aiosqlite.Row) -> WeeklyReportItem:
        return WeeklyReportItem(
            id=row["id"],
            report_id=row["report_id"],
            product_id=row["product_id"],
            product_name=row["product_name"],
            category=row["category"],
            initial_stock=row["initial_stock"],
            purchases=row["purchases"],
            sales=row["sales"],
            losses=row["losses"],
            final_stock=row["final_stock"],
            is_estimated=bool(row["is_estimated"]),
        )
