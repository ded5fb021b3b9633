"""Tests for SQLiteInventorySource against a seeded database."""

from datetime import date, datetime

import aiosqlite
import pytest

from hotelstock.core.entities import MovementType, SectorKind
from hotelstock.infrastructure.storage.sqlite.inventory_source import SQLiteInventorySource

WEEK_START_AT = datetime(2024, 6, 3)
WEEK_END_BEFORE = datetime(2024, 6, 10)


@pytest.fixture
def source(seeded_db):
    return SQLiteInventorySource(derived_consumption_names=["Maintenance"])


class TestCatalog:
    async def test_get_property(self, source):
        assert (await source.get_property("h2")).name == "Hotel Serra"
        assert await source.get_property("h9") is None

    async def test_list_active_products_by_category(self, source):
        products = await source.list_products("h1")
        assert [p.id for p in products] == ["p-soap", "p-rice"]

    async def test_list_all_and_starred(self, source):
        everything = await source.list_products("h1", only_active=False)
        starred = await source.list_products("h1", only_active=False, only_starred=True)

        assert {p.id for p in everything} == {"p-rice", "p-soap", "p-old"}
        assert [p.id for p in starred] == ["p-soap"]
        old = next(p for p in everything if p.id == "p-old")
        assert old.category == "Uncategorized"
        assert not old.is_active

    async def test_sector_kind_resolved_by_name(self, source):
        sectors = {s.id: s for s in await source.list_sectors("h1")}

        assert sectors["s-kitchen"].kind is SectorKind.ORDINARY
        assert sectors["s-maint"].kind is SectorKind.DERIVED_CONSUMPTION

    async def test_sector_kind_without_configured_names(self, seeded_db):
        source = SQLiteInventorySource(derived_consumption_names=[])
        sectors = {s.id: s for s in await source.list_sectors("h1")}
        assert sectors["s-maint"].kind is SectorKind.ORDINARY


class TestStockHistory:
    async def test_latest_snapshot_at_or_before(self, source):
        snapshot = await source.get_snapshot("h1", date(2024, 6, 3))

        assert snapshot.snapshot_date == date(2024, 6, 2)
        assert snapshot.quantity_for("p-rice") == 42.0

    async def test_snapshot_filtered_by_product(self, source):
        snapshot = await source.get_snapshot("h1", date(2024, 6, 3), product_ids=["p-soap"])
        assert snapshot.items == {}

    async def test_no_snapshot(self, source):
        assert await source.get_snapshot("h1", date(2024, 1, 1)) is None

    async def test_current_stock(self, source):
        assert await source.get_current_stock("p-soap") == 12.0
        assert await source.get_current_stock("p-none") is None

    async def test_movements_half_open_window(self, source):
        movements = await source.get_movements("p-soap", WEEK_START_AT, WEEK_END_BEFORE)

        # the 2024-06-10T00:00 entry is outside, the 2024-06-02 one before
        assert [m.quantity_change for m in movements] == [10.0, -3.0]

    async def test_movements_filtered_by_type(self, source):
        entries = await source.get_movements(
            "p-soap",
            WEEK_START_AT,
            WEEK_END_BEFORE,
            property_id="h1",
            movement_type=MovementType.ENTRY,
        )
        assert [m.quantity_change for m in entries] == [10.0]

    async def test_only_completed_deliveries(self, source):
        deliveries = await source.get_completed_deliveries("h1", WEEK_START_AT, WEEK_END_BEFORE)
        assert sorted(d.delivered_quantity for d in deliveries) == [2.0, 15.0]

    async def test_delivery_filter_matches_substitute(self, source):
        for_soap = await source.get_completed_deliveries(
            "h1", WEEK_START_AT, WEEK_END_BEFORE, product_id="p-soap"
        )

        (delivery,) = for_soap
        assert delivery.product_id == "p-rice"
        assert delivery.attributed_product_id == "p-soap"

    async def test_completed_transfers_carry_destination_name(self, source):
        (transfer,) = await source.get_completed_transfers(
            "h1", WEEK_START_AT, WEEK_END_BEFORE, product_id="p-rice"
        )

        assert transfer.destination_property_name == "Hotel Serra"
        assert transfer.quantity == 5.0

    async def test_sector_balances_latest_at_date(self, source):
        balances = await source.get_sector_balances("h1", date(2024, 6, 3))

        assert balances == {"s-kitchen": {"p-rice": 3.0}, "s-maint": {"p-soap": 1.0}}

    async def test_sector_balances_before_any_record(self, source):
        assert await source.get_sector_balances("h1", date(2024, 1, 1)) == {}

    async def test_sector_consumption_summed_in_window(self, source):
        consumption = await source.get_sector_consumption("h1", WEEK_START_AT, WEEK_END_BEFORE)

        # 4 + 2; the 2024-06-10T00:00 record is outside
        assert consumption == {"s-kitchen": {"p-rice": 6.0}}

    async def test_sector_consumption_scoped_to_property(self, source):
        assert await source.get_sector_consumption("h2", WEEK_START_AT, WEEK_END_BEFORE) == {}


class TestStockCounts:
    async def test_get_finished_counts_with_items(self, source):
        counts = {c.id: c for c in await source.get_stock_counts(["c-w1", "c-k2", "c-open"])}

        assert set(counts) == {"c-w1", "c-k2"}
        assert counts["c-w1"].sector_id is None
        assert counts["c-w1"].items == {"p-rice": 42.0, "p-soap": 5.0}
        assert counts["c-k2"].counted("p-rice") == 4.0

    async def test_get_no_ids(self, source):
        assert await source.get_stock_counts([]) == []

    async def test_list_counts_per_location(self, source):
        warehouse = await source.list_stock_counts("h1")
        kitchen = await source.list_stock_counts("h1", sector_id="s-kitchen")

        assert [c.id for c in warehouse] == ["c-w2", "c-w1"]
        assert [c.id for c in kitchen] == ["c-k2", "c-k1"]
        assert warehouse[0].items == {}


class TestSpaceSeparatedTimestamps:
    """Rows written with SQLite's datetime() form, 'YYYY-MM-DD HH:MM:SS'."""

    @pytest.fixture
    async def space_rows(self, seeded_db):
        async with aiosqlite.connect(seeded_db) as conn:
            await conn.executescript(
                """
                INSERT INTO inventory_movements
                    (property_id, product_id, quantity_change, movement_type, created_at)
                VALUES
                    ('h1', 'p-rice', 4, 'entry', '2024-06-03 09:00:00'),
                    ('h1', 'p-rice', 100, 'entry', '2024-06-10 00:00:00');
                INSERT INTO sector_deliveries
                    (property_id, product_id, substituted_product_id, sector_id,
                     delivered_quantity, status, completed_at)
                VALUES ('h1', 'p-rice', NULL, 's-kitchen', 1, 'completed', '2024-06-03 10:00:00');
                INSERT INTO property_transfers
                    (product_id, source_property_id, destination_property_id, quantity, status, completed_at)
                VALUES ('p-rice', 'h1', 'h2', 2, 'completed', '2024-06-03 10:00:00');
                INSERT INTO inventory_snapshots (id, property_id, snapshot_date)
                    VALUES (4, 'h1', '2024-06-03 00:00:00');
                INSERT INTO sector_balances (sector_id, product_id, quantity, balance_date)
                    VALUES ('s-maint', 'p-soap', 7, '2024-06-03 08:00:00');
                """
            )
            await conn.commit()
        return seeded_db

    async def test_start_day_movement_counts(self, source, space_rows):
        entries = await source.get_movements(
            "p-rice", WEEK_START_AT, WEEK_END_BEFORE, movement_type=MovementType.ENTRY
        )

        # the start-day row first; the 2024-06-10 row stays outside
        assert [m.quantity_change for m in entries] == [4.0, 20.0]
        assert entries[0].created_at == datetime(2024, 6, 3, 9, 0)

    async def test_start_day_delivery_and_transfer_count(self, source, space_rows):
        deliveries = await source.get_completed_deliveries(
            "h1", WEEK_START_AT, WEEK_END_BEFORE, product_id="p-rice"
        )
        transfers = await source.get_completed_transfers(
            "h1", WEEK_START_AT, WEEK_END_BEFORE, product_id="p-rice"
        )

        assert sorted(d.delivered_quantity for d in deliveries) == [1.0, 2.0, 15.0]
        assert sorted(t.quantity for t in transfers) == [2.0, 5.0]

    async def test_snapshot_with_time_part(self, source, space_rows):
        snapshot = await source.get_snapshot("h1", date(2024, 6, 3))

        assert snapshot.id == 4
        assert snapshot.snapshot_date == date(2024, 6, 3)

    async def test_balance_with_time_part_is_latest(self, source, space_rows):
        balances = await source.get_sector_balances("h1", date(2024, 6, 3))
        assert balances["s-maint"] == {"p-soap": 7.0}
