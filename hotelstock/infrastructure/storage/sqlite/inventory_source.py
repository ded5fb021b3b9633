"""SQLite implementation of the read-only inventory source."""

from datetime import date, datetime

import aiosqlite

from hotelstock.config import get_logger, get_settings
from hotelstock.core.entities.catalog import Product, Property, Sector, SectorKind
from hotelstock.core.entities.stock import (
    InventoryMovement,
    MovementType,
    PropertyTransfer,
    SectorDelivery,
    StockCount,
    StockSnapshot,
)
from hotelstock.core.interfaces.inventory_source import IInventorySource
from hotelstock.infrastructure.storage.sqlite.connection import get_connection

logger = get_logger(__name__)


def _placeholders(values: list) -> str:
    return ", ".join("?" for _ in values)


def _timestamp(column: str) -> str:
    """
    SQL expression reading a stored timestamp in ISO 8601 'T' form.

    Source rows may carry SQLite's own 'YYYY-MM-DD HH:MM:SS' form, which
    sorts before the 'T' form on the same day when compared as text.
    """
    return f"replace({column}, ' ', 'T')"


class SQLiteInventorySource(IInventorySource):
    """
    Reads catalog, stock history and physical counts from SQLite.

    Sectors stored without a kind are resolved by name against
    `derived_consumption_names` (case-insensitive).
    """

    def __init__(self, derived_consumption_names: list[str] | None = None):
        if derived_consumption_names is None:
            derived_consumption_names = get_settings().report.derived_consumption_sector_names
        self._derived_names = {name.strip().lower() for name in derived_consumption_names}

    async def get_property(self, property_id: str) -> Property | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT id, name FROM properties WHERE id = ?", (property_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return Property(id=row["id"], name=row["name"])

    async def list_products(
        self,
        property_id: str,
        only_active: bool = True,
        only_starred: bool = False,
    ) -> list[Product]:
        query = "SELECT * FROM products WHERE property_id = ?"
        params: list = [property_id]
        if only_active:
            query += " AND is_active = 1"
        if only_starred:
            query += " AND is_starred = 1"
        query += " ORDER BY COALESCE(category, ''), name"

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_product(row) for row in rows]

    async def list_sectors(self, property_id: str) -> list[Sector]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM sectors WHERE property_id = ? ORDER BY name",
                (property_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_sector(row) for row in rows]

    async def get_snapshot(
        self,
        property_id: str,
        at_or_before: date,
        product_ids: list[str] | None = None,
    ) -> StockSnapshot | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT id, property_id, date(snapshot_date) AS snapshot_date
                FROM inventory_snapshots
                WHERE property_id = ? AND date(snapshot_date) <= ?
                ORDER BY date(snapshot_date) DESC, id DESC
                LIMIT 1
                """,
                (property_id, at_or_before.isoformat()),
            )
            row = await cursor.fetchone()
            if row is None:
                return None

            query = "SELECT product_id, quantity FROM inventory_snapshot_items WHERE snapshot_id = ?"
            params: list = [row["id"]]
            if product_ids:
                query += f" AND product_id IN ({_placeholders(product_ids)})"
                params.extend(product_ids)

            cursor = await conn.execute(query, params)
            items = {r["product_id"]: r["quantity"] for r in await cursor.fetchall()}

            return StockSnapshot(
                id=row["id"],
                property_id=row["property_id"],
                snapshot_date=date.fromisoformat(row["snapshot_date"]),
                items=items,
            )

    async def get_current_stock(self, product_id: str) -> float | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT quantity FROM products WHERE id = ?", (product_id,)
            )
            row = await cursor.fetchone()
            return row["quantity"] if row else None

    async def get_movements(
        self,
        product_id: str,
        start: datetime,
        end_before: datetime,
        property_id: str | None = None,
        movement_type: MovementType | None = None,
    ) -> list[InventoryMovement]:
        query = f"""
            SELECT * FROM inventory_movements
            WHERE product_id = ?
              AND {_timestamp("created_at")} >= ? AND {_timestamp("created_at")} < ?
        """
        params: list = [product_id, start.isoformat(), end_before.isoformat()]
        if property_id is not None:
            query += " AND property_id = ?"
            params.append(property_id)
        if movement_type is not None:
            query += " AND movement_type = ?"
            params.append(movement_type.value)
        query += f" ORDER BY {_timestamp('created_at')}"

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [
                InventoryMovement(
                    id=row["id"],
                    property_id=row["property_id"],
                    product_id=row["product_id"],
                    quantity_change=row["quantity_change"],
                    movement_type=MovementType(row["movement_type"]),
                    created_at=datetime.fromisoformat(row["created_at"]),
                )
                for row in rows
            ]

    async def get_completed_deliveries(
        self,
        property_id: str,
        start: datetime,
        end_before: datetime,
        product_id: str | None = None,
    ) -> list[SectorDelivery]:
        query = f"""
            SELECT * FROM sector_deliveries
            WHERE property_id = ? AND status = 'completed'
              AND {_timestamp("completed_at")} >= ? AND {_timestamp("completed_at")} < ?
        """
        params: list = [property_id, start.isoformat(), end_before.isoformat()]
        if product_id is not None:
            query += " AND (product_id = ? OR substituted_product_id = ?)"
            params.extend([product_id, product_id])
        query += f" ORDER BY {_timestamp('completed_at')}"

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [
                SectorDelivery(
                    id=row["id"],
                    property_id=row["property_id"],
                    product_id=row["product_id"],
                    substituted_product_id=row["substituted_product_id"],
                    sector_id=row["sector_id"],
                    delivered_quantity=row["delivered_quantity"] or 0.0,
                    completed_at=datetime.fromisoformat(row["completed_at"]),
                )
                for row in rows
            ]

    async def get_completed_transfers(
        self,
        source_property_id: str,
        start: datetime,
        end_before: datetime,
        product_id: str | None = None,
    ) -> list[PropertyTransfer]:
        query = f"""
            SELECT t.*, p.name AS destination_property_name
            FROM property_transfers t
            JOIN properties p ON p.id = t.destination_property_id
            WHERE t.source_property_id = ? AND t.status = 'completed'
              AND {_timestamp("t.completed_at")} >= ? AND {_timestamp("t.completed_at")} < ?
        """
        params: list = [source_property_id, start.isoformat(), end_before.isoformat()]
        if product_id is not None:
            query += " AND t.product_id = ?"
            params.append(product_id)
        query += f" ORDER BY {_timestamp('t.completed_at')}"

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [
                PropertyTransfer(
                    id=row["id"],
                    product_id=row["product_id"],
                    source_property_id=row["source_property_id"],
                    destination_property_id=row["destination_property_id"],
                    destination_property_name=row["destination_property_name"],
                    quantity=row["quantity"] or 0.0,
                    completed_at=datetime.fromisoformat(row["completed_at"]),
                )
                for row in rows
            ]

    async def get_sector_balances(
        self, property_id: str, at: date
    ) -> dict[str, dict[str, float]]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT b.sector_id, b.product_id, b.quantity
                FROM sector_balances b
                JOIN sectors s ON s.id = b.sector_id
                WHERE s.property_id = ?
                  AND date(b.balance_date) = (
                      SELECT MAX(date(b2.balance_date)) FROM sector_balances b2
                      WHERE b2.sector_id = b.sector_id
                        AND b2.product_id = b.product_id
                        AND date(b2.balance_date) <= ?
                  )
                ORDER BY b.id
                """,
                (property_id, at.isoformat()),
            )
            rows = await cursor.fetchall()

        balances: dict[str, dict[str, float]] = {}
        for row in rows:
            balances.setdefault(row["sector_id"], {})[row["product_id"]] = row["quantity"]
        return balances

    async def get_sector_consumption(
        self, property_id: str, start: datetime, end_before: datetime
    ) -> dict[str, dict[str, float]]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT c.sector_id, c.product_id, SUM(c.quantity) AS quantity
                FROM sector_consumption c
                JOIN sectors s ON s.id = c.sector_id
                WHERE s.property_id = ?
                  AND {_timestamp("c.consumed_at")} >= ?
                  AND {_timestamp("c.consumed_at")} < ?
                GROUP BY c.sector_id, c.product_id
                """,
                (property_id, start.isoformat(), end_before.isoformat()),
            )
            rows = await cursor.fetchall()

        consumption: dict[str, dict[str, float]] = {}
        for row in rows:
            consumption.setdefault(row["sector_id"], {})[row["product_id"]] = row["quantity"]
        return consumption

    async def get_stock_counts(self, count_ids: list[str]) -> list[StockCount]:
        if not count_ids:
            return []

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM stock_counts
                WHERE status = 'finished' AND id IN ({_placeholders(count_ids)})
                """,
                count_ids,
            )
            count_rows = await cursor.fetchall()

            cursor = await conn.execute(
                f"""
                SELECT count_id, product_id, counted_quantity FROM stock_count_items
                WHERE count_id IN ({_placeholders(count_ids)})
                """,
                count_ids,
            )
            items: dict[str, dict[str, float]] = {}
            for row in await cursor.fetchall():
                items.setdefault(row["count_id"], {})[row["product_id"]] = row[
                    "counted_quantity"
                ]

        return [
            self._row_to_stock_count(row, items.get(row["id"], {})) for row in count_rows
        ]

    async def list_stock_counts(
        self, property_id: str, sector_id: str | None = None
    ) -> list[StockCount]:
        query = "SELECT * FROM stock_counts WHERE property_id = ? AND status = 'finished'"
        params: list = [property_id]
        if sector_id is None:
            query += " AND sector_id IS NULL"
        else:
            query += " AND sector_id = ?"
            params.append(sector_id)
        query += f" ORDER BY {_timestamp('finished_at')} DESC"

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_stock_count(row, {}) for row in rows]

    def _row_to_product(self, row: aiosqlite.Row) -> Product:
        return Product(
            id=row["id"],
            property_id=row["property_id"],
            name=row["name"],
            category=row["category"],
            quantity=row["quantity"],
            is_active=bool(row["is_active"]),
            is_starred=bool(row["is_starred"]),
        )

    def _row_to_sector(self, row: aiosqlite.Row) -> Sector:
        kind = row["kind"]
        if kind is None:
            kind = (
                SectorKind.DERIVED_CONSUMPTION
                if row["name"].strip().lower() in self._derived_names
                else SectorKind.ORDINARY
            )
        return Sector(
            id=row["id"],
            property_id=row["property_id"],
            name=row["name"],
            kind=SectorKind(kind),
        )

    def _row_to_stock_count(
        self, row: aiosqlite.Row, items: dict[str, float]
    ) -> StockCount:
        return StockCount(
            id=row["id"],
            property_id=row["property_id"],
            sector_id=row["sector_id"],
            finished_at=datetime.fromisoformat(row["finished_at"]),
            items=items,
        )
