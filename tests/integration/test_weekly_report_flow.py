"""End-to-end weekly report flow over a seeded SQLite database."""

from unittest.mock import AsyncMock, patch

import aiosqlite
import pytest

from hotelstock.application.dto.requests import (
    CountSelectionRequest,
    GenerateWeeklyReportRequest,
    ReconcileReportRequest,
    ReconcileStockCountsRequest,
    SectorEditRequest,
)
from hotelstock.application.use_cases import (
    DeleteWeeklyReportUseCase,
    GenerateWeeklyReportUseCase,
    ReconcileReportUseCase,
    ReconcileStockCountsUseCase,
)
from hotelstock.core.exceptions import ReportGenerationError
from hotelstock.core.services.count_reconciliation import StockCountReconciler
from hotelstock.core.services.report_builder import WeeklyReportBuilder
from hotelstock.infrastructure.storage.sqlite import SQLiteInventorySource, SQLiteReportStore
from tests.factories import WEEK_END, WEEK_START


@pytest.fixture
def source(seeded_db):
    return SQLiteInventorySource(derived_consumption_names=["maintenance"])


@pytest.fixture
def store(seeded_db):
    return SQLiteReportStore()


@pytest.fixture
def builder(source, store):
    return WeeklyReportBuilder(source, store, batch_size=1, batch_delay=0, child_batch_delay=0)


async def test_generate_then_reuse(builder, store):
    use_case = GenerateWeeklyReportUseCase(builder=builder)
    request = GenerateWeeklyReportRequest(property_id="h1", period_start=WEEK_START)

    first = await use_case.execute(request)
    assert first.success, first.error

    report = first.data
    assert report.report.period_end == WEEK_END
    assert report.estimated_items == 0
    items = {item.product_id: item for item in report.items}
    assert set(items) == {"p-rice", "p-soap"}

    rice = items["p-rice"]
    assert rice.initial_stock == 42.0
    assert rice.purchases == 20.0
    assert [(m.sector_id, m.quantity) for m in rice.sector_movements] == [("s-kitchen", 15.0)]
    assert [(t.destination_property_name, t.quantity) for t in rice.transfers] == [
        ("Hotel Serra", 5.0)
    ]
    assert rice.warehouse_loss == -7.0

    soap = items["p-soap"]
    # no snapshot row: 12 on hand minus the week's net +7
    assert soap.initial_stock == 5.0
    assert soap.purchases == 10.0
    assert [(m.sector_id, m.quantity) for m in soap.sector_movements] == [("s-maint", 2.0)]
    assert soap.warehouse_loss == -1.0

    second = await use_case.execute(request)
    assert second.data.report.id == report.report.id
    assert len(await store.list_report_items(report.report.id)) == 2


async def test_reconcile_generated_report(builder, source):
    generated = await builder.generate("h1", WEEK_START)

    use_case = ReconcileReportUseCase(builder=builder, inventory_source=source)
    result = await use_case.execute(
        generated.report.id,
        ReconcileReportRequest(
            edits=[
                SectorEditRequest(
                    sector_id="s-kitchen", product_id="p-rice", sales=10, counted_stock=4
                ),
                SectorEditRequest(sector_id="s-maint", product_id="p-soap", counted_stock=1.5),
            ]
        ),
    )

    assert result.success, result.error
    sectors = {s.sector_id: s for s in result.data.sectors}

    kitchen_rice = next(r for r in sectors["s-kitchen"].rows if r.product_id == "p-rice")
    assert kitchen_rice.initial_stock == 3.0
    # consumption not edited: the 6 units the kitchen recorded that week
    assert kitchen_rice.consumption == 6.0
    assert kitchen_rice.loss == 3 + 15 - 10 - 6 - 4

    maint_soap = next(r for r in sectors["s-maint"].rows if r.product_id == "p-soap")
    assert maint_soap.consumption == 1 + 2 - 1.5
    assert maint_soap.loss == 0.0


async def test_reconcile_stock_counts(source):
    use_case = ReconcileStockCountsUseCase(
        reconciler=StockCountReconciler(source, batch_size=1, batch_delay=0)
    )

    result = await use_case.execute(
        ReconcileStockCountsRequest(
            property_id="h1",
            selections=[
                CountSelectionRequest(start_count_id="c-w1", end_count_id="c-w2"),
                CountSelectionRequest(
                    sector_id="s-kitchen", start_count_id="c-k1", end_count_id="c-k2"
                ),
            ],
        )
    )

    assert result.success, result.error
    warehouse = {r.product_id: r for r in result.data.warehouse}
    assert warehouse["p-rice"].loss == 38 - (42 + 20 - 15)
    assert warehouse["p-soap"].loss == 12 - (5 + 10 - 2)

    (kitchen,) = result.data.sectors
    (rice,) = [r for r in kitchen.rows if r.product_id == "p-rice"]
    assert rice.loss == 3 + 15 - 4


async def test_unfinished_count_rejected(source):
    use_case = ReconcileStockCountsUseCase(
        reconciler=StockCountReconciler(source, batch_size=1, batch_delay=0)
    )

    result = await use_case.execute(
        ReconcileStockCountsRequest(
            property_id="h1",
            selections=[CountSelectionRequest(start_count_id="c-w1", end_count_id="c-open")],
        )
    )

    assert result.error_code == "STOCK_COUNT_NOT_FOUND"


async def test_delete_then_regenerate(builder, store):
    generated = await builder.generate("h1", WEEK_START)

    deleted = await DeleteWeeklyReportUseCase(report_store=store).execute(generated.report.id)
    assert deleted.success

    regenerated = await builder.generate("h1", WEEK_START)
    assert regenerated.report.id != generated.report.id
    assert len(regenerated.items) == 2


async def test_edited_consumption_overrides_recorded(builder, source):
    generated = await builder.generate("h1", WEEK_START)
    use_case = ReconcileReportUseCase(builder=builder, inventory_source=source)

    recorded = await use_case.execute(
        generated.report.id, ReconcileReportRequest(sector_ids=["s-kitchen"])
    )
    edited = await use_case.execute(
        generated.report.id,
        ReconcileReportRequest(
            sector_ids=["s-kitchen"],
            edits=[
                SectorEditRequest(
                    sector_id="s-kitchen", product_id="p-rice", consumption=9, counted_stock=4
                )
            ],
        ),
    )

    (recorded_rice,) = recorded.data.sectors[0].rows
    assert recorded_rice.consumption == 6.0
    # expected stock left after the recorded consumption, so nothing lost
    assert recorded_rice.counted_stock == 3 + 15 - 6
    assert recorded_rice.loss == 0.0

    (edited_rice,) = edited.data.sectors[0].rows
    assert edited_rice.consumption == 9.0
    assert edited_rice.loss == 3 + 15 - 9 - 4


async def test_start_day_rows_stored_with_space_separator(builder, seeded_db):
    async with aiosqlite.connect(seeded_db) as conn:
        await conn.execute(
            """
            INSERT INTO inventory_movements
                (property_id, product_id, quantity_change, movement_type, created_at)
            VALUES ('h1', 'p-rice', 4, 'entry', '2024-06-03 09:00:00')
            """
        )
        await conn.commit()

    full = await builder.generate("h1", WEEK_START)

    rice = next(item for item in full.items if item.product_id == "p-rice")
    assert rice.purchases == 24.0


async def test_retry_after_child_record_failure(builder, store):
    with patch.object(
        store,
        "bulk_insert_movement_records",
        AsyncMock(side_effect=RuntimeError("disk I/O error")),
    ):
        with pytest.raises(ReportGenerationError) as exc_info:
            await builder.generate("h1", WEEK_START)
    assert exc_info.value.details["stage"] == "child_record_insert"
    assert await store.list_reports("h1") == []

    full = await builder.generate("h1", WEEK_START)

    rice = next(item for item in full.items if item.product_id == "p-rice")
    assert [(m.sector_id, m.quantity) for m in rice.sector_movements] == [("s-kitchen", 15.0)]
    assert rice.warehouse_loss == -7.0
    assert len(await store.list_reports("h1")) == 1


async def test_catalog_failure_leaves_no_report(builder, source, store):
    with patch.object(
        source, "list_products", AsyncMock(side_effect=RuntimeError("catalog unavailable"))
    ):
        with pytest.raises(ReportGenerationError):
            await builder.generate("h1", WEEK_START)

    assert await store.list_reports("h1") == []

    regenerated = await builder.generate("h1", WEEK_START)
    assert len(regenerated.items) == 2
