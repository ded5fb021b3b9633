"""Tests for StockCountReconciler."""

from datetime import date, datetime, timedelta

import pytest

from hotelstock.core.entities import CountSelection, StockCount
from hotelstock.core.exceptions import (
    SectorNotFoundError,
    StockCountNotFoundError,
    ValidationError,
)
from hotelstock.core.services.count_reconciliation import StockCountReconciler
from hotelstock.core.services.reconciliation import present_sector, present_warehouse
from tests.factories import make_delivery, make_movement

COUNTS = [
    StockCount(
        id="c-w1",
        property_id="h1",
        finished_at=datetime(2024, 6, 3, 8, 0),
        items={"p-rice": 42.0, "p-soap": 5.0},
    ),
    StockCount(
        id="c-w2",
        property_id="h1",
        finished_at=datetime(2024, 6, 9, 20, 0),
        items={"p-rice": 38.0, "p-soap": 12.0},
    ),
    StockCount(
        id="c-k1",
        property_id="h1",
        sector_id="s-kitchen",
        finished_at=datetime(2024, 6, 3, 9, 0),
        items={"p-rice": 3.0},
    ),
    StockCount(
        id="c-k2",
        property_id="h1",
        sector_id="s-kitchen",
        finished_at=datetime(2024, 6, 9, 21, 0),
        items={"p-rice": 4.0},
    ),
]

WAREHOUSE = CountSelection(sector_id=None, start_count_id="c-w1", end_count_id="c-w2")
KITCHEN = CountSelection(sector_id="s-kitchen", start_count_id="c-k1", end_count_id="c-k2")


@pytest.fixture
def source(mock_inventory_source):
    async def get_stock_counts(count_ids):
        return [c for c in COUNTS if c.id in count_ids]

    async def get_movements(product_id, start, end_before, property_id=None, movement_type=None):
        return [make_movement("p-rice", 20)] if product_id == "p-rice" else []

    mock_inventory_source.get_stock_counts.side_effect = get_stock_counts
    mock_inventory_source.get_movements.side_effect = get_movements
    mock_inventory_source.get_completed_deliveries.return_value = [
        make_delivery("p-rice", "s-kitchen", 15),
        make_delivery("p-rice", "s-maint", 2, substituted_product_id="p-soap"),
    ]
    return mock_inventory_source


@pytest.fixture
def reconciler(source):
    return StockCountReconciler(source, batch_size=1, batch_delay=0)


class TestReconcile:
    async def test_window_spans_selected_counts(self, reconciler, source):
        report = await reconciler.reconcile("h1", [WAREHOUSE, KITCHEN])

        assert report.period_start == date(2024, 6, 3)
        assert report.period_end == date(2024, 6, 9)

        start, end_before = source.get_completed_deliveries.call_args.args[1:3]
        assert start == datetime(2024, 6, 3, 8, 0)
        # the latest count is included
        assert end_before == datetime(2024, 6, 9, 21, 0) + timedelta(microseconds=1)

    async def test_warehouse_between_counts(self, reconciler):
        report = await reconciler.reconcile("h1", [WAREHOUSE, KITCHEN])
        rows = {r.product_id: r for r in present_warehouse(report)}

        rice = rows["p-rice"]
        assert rice.initial_stock == 42.0
        assert rice.purchases == 20.0
        # deliveries to every sector leave the warehouse
        assert rice.delivered_to_sectors == 15.0
        assert rice.actual_final_stock == 38.0
        assert rice.loss == -9.0

        soap = rows["p-soap"]
        assert soap.delivered_to_sectors == 2.0
        assert soap.loss == 12.0 - (5.0 + 0.0 - 2.0)

    async def test_sector_uses_end_count(self, reconciler):
        report = await reconciler.reconcile("h1", [WAREHOUSE, KITCHEN])
        view = present_sector(report, "s-kitchen")

        (rice,) = view.rows
        assert rice.initial_stock == 3.0
        assert rice.received == 15.0
        assert rice.counted_stock == 4.0
        assert rice.loss == 14.0

    async def test_only_selected_sectors_reported(self, reconciler):
        report = await reconciler.reconcile("h1", [KITCHEN])

        assert [s.id for s in report.sectors] == ["s-kitchen"]
        assert all(row.main_stock is None for row in report.rows)
        with pytest.raises(SectorNotFoundError):
            present_sector(report, "s-maint")

    async def test_purchases_only_fetched_for_warehouse(self, reconciler, source):
        await reconciler.reconcile("h1", [KITCHEN])
        source.get_movements.assert_not_awaited()

    async def test_purchase_failure_is_soft(self, reconciler, source):
        source.get_movements.side_effect = RuntimeError("timeout")

        report = await reconciler.reconcile("h1", [WAREHOUSE])
        assert all(row.purchases == 0.0 for row in present_warehouse(report))

    async def test_starred_flag_carried(self, reconciler):
        report = await reconciler.reconcile("h1", [WAREHOUSE])
        assert {r.product_id for r in report.rows if r.is_starred} == {"p-soap"}


class TestValidation:
    async def test_requires_a_selection(self, reconciler):
        with pytest.raises(ValidationError):
            await reconciler.reconcile("h1", [])

    async def test_location_selected_once(self, reconciler):
        with pytest.raises(ValidationError, match="once"):
            await reconciler.reconcile("h1", [WAREHOUSE, WAREHOUSE])

    async def test_start_and_end_differ(self, reconciler):
        same = CountSelection(start_count_id="c-w1", end_count_id="c-w1")
        with pytest.raises(ValidationError, match="differ"):
            await reconciler.reconcile("h1", [same])

    async def test_missing_count(self, reconciler):
        missing = CountSelection(start_count_id="c-w1", end_count_id="c-nope")
        with pytest.raises(StockCountNotFoundError) as exc_info:
            await reconciler.reconcile("h1", [missing])
        assert exc_info.value.details["count_ids"] == ["c-nope"]

    async def test_count_of_another_location(self, reconciler):
        mixed = CountSelection(start_count_id="c-w1", end_count_id="c-k2")
        with pytest.raises(ValidationError, match="location"):
            await reconciler.reconcile("h1", [mixed])

    async def test_count_of_another_property(self, reconciler):
        with pytest.raises(ValidationError):
            await reconciler.reconcile("h2", [WAREHOUSE])

    async def test_end_before_start(self, reconciler):
        reversed_pair = CountSelection(start_count_id="c-w2", end_count_id="c-w1")
        with pytest.raises(ValidationError, match="before"):
            await reconciler.reconcile("h1", [reversed_pair])

    async def test_unknown_sector(self, reconciler, source, sectors):
        source.list_sectors.return_value = [s for s in sectors if s.id != "s-kitchen"]
        with pytest.raises(SectorNotFoundError):
            await reconciler.reconcile("h1", [KITCHEN])
