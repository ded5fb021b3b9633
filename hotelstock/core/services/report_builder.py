"""
Weekly report builder.

Generates the reconciliation report of a property for one weekly period:
resolves every product's initial stock, aggregates the week's movements,
persists the items and their per-sector / per-destination child records.

Generation is idempotent per (property, period): an existing report with
items is reused as is. A report created by a run that then fails is deleted
again, so the next run starts from scratch.
"""

import asyncio
from datetime import date

from hotelstock.config import get_logger, report_log_context
from hotelstock.core.entities.catalog import Product, Sector
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
from hotelstock.core.exceptions import ReportGenerationError, ReportNotFoundError
from hotelstock.core.interfaces import IInventorySource, IReportStore
from hotelstock.core.services.batching import chunked, run_in_waves
from hotelstock.core.services.movement_aggregator import MovementAggregator
from hotelstock.core.services.snapshot_resolver import SnapshotResolver, StockSource

logger = get_logger(__name__)


class WeeklyReportBuilder:
    """
    Builds and reads weekly reconciliation reports.

    Products are processed in waves of `batch_size`; every product of a wave
    is resolved concurrently and waves are separated by `batch_delay`
    seconds. Child records are written in a second pass with
    `child_batch_delay` between chunks.
    """

    DEFAULT_BATCH_SIZE = 50

    def __init__(
        self,
        source: IInventorySource,
        store: IReportStore,
        batch_size: int | None = None,
        batch_delay: float = 0.1,
        child_batch_delay: float = 0.2,
        week_starts_on: int = 0,
        resolver: SnapshotResolver | None = None,
        aggregator: MovementAggregator | None = None,
    ):
        self._source = source
        self._store = store
        self._batch_size = batch_size or self.DEFAULT_BATCH_SIZE
        self._batch_delay = batch_delay
        self._child_batch_delay = child_batch_delay
        self._week_starts_on = week_starts_on
        self._resolver = resolver or SnapshotResolver(source, week_starts_on)
        self._aggregator = aggregator or MovementAggregator(source)

    async def generate(self, property_id: str, period_start: date) -> FullReport:
        """
        Generate (or reuse) the report for the week starting at period_start.

        Raises:
            ReportGenerationError: report creation, catalog fetch or item
                persistence failed
        """
        period = ReportPeriod.for_week(period_start, self._week_starts_on)

        with report_log_context(
            property_id=property_id,
            period_start=period.start.isoformat(),
            period_end=period.end.isoformat(),
        ):
            self._log_state(ReportState.ABSENT)

            try:
                report, is_new = await self._store.get_or_create_report(
                    property_id, period.start, period.end
                )
            except Exception as e:
                logger.error("report_creation_failed", error=str(e))
                raise ReportGenerationError("report_creation", str(e), property_id) from e

            self._log_state(ReportState.CREATING, report_id=report.id, is_new=is_new)

            existing = await self._store.list_report_items(report.id)
            if existing:
                logger.info("report_items_reused", report_id=report.id, items=len(existing))
                self._log_state(ReportState.ITEMS_COMPLETE, report_id=report.id)
                return await self.get_report_data(report.id)

            self._log_state(ReportState.ITEMS_PENDING, report_id=report.id)
            try:
                await self._populate(report, period)
            except Exception:
                # A created report must not survive half-written, or a retry
                # would reuse its items
                if is_new:
                    await self._discard(report)
                raise
            self._log_state(ReportState.ITEMS_COMPLETE, report_id=report.id)

            return await self.get_report_data(report.id)

    async def get_report_data(self, report_id: int) -> FullReport:
        """
        Load a report with its items and their child records.

        Items are ordered by product name; child records are fetched in
        chunks of `batch_size` item ids.
        """
        report = await self._store.get_report(report_id)
        if report is None:
            raise ReportNotFoundError(report_id)

        items = await self._store.list_report_items(report_id)
        item_ids = [item.id for item in items if item.id is not None]

        movements: dict[int, list[SectorMovement]] = {}
        transfers: dict[int, list[TransferTotal]] = {}

        for chunk in chunked(item_ids, self._batch_size):
            movement_records, transfer_records = await asyncio.gather(
                self._store.list_movement_records(chunk),
                self._store.list_transfer_records(chunk),
            )
            for record in movement_records:
                movements.setdefault(record.report_item_id, []).append(
                    SectorMovement(
                        sector_id=record.sector_id,
                        sector_name=record.sector_name,
                        quantity=record.quantity,
                    )
                )
            for record in transfer_records:
                transfers.setdefault(record.report_item_id, []).append(
                    TransferTotal(
                        destination_property_id=record.destination_property_id,
                        destination_property_name=record.destination_property_name,
                        quantity=record.quantity,
                    )
                )

        return FullReport(
            report=report,
            items=[
                item.model_copy(
                    update={
                        "sector_movements": movements.get(item.id, []),
                        "transfers": transfers.get(item.id, []),
                    }
                )
                for item in items
            ],
        )

    async def _populate(self, report: WeeklyReport, period: ReportPeriod) -> None:
        """Compute, insert and attach child records for every catalog product."""
        try:
            products, sectors = await asyncio.gather(
                self._source.list_products(report.property_id, only_active=True),
                self._source.list_sectors(report.property_id),
            )
        except Exception as e:
            logger.error("catalog_fetch_failed", report_id=report.id, error=str(e))
            raise ReportGenerationError(
                "catalog_fetch", str(e), report.property_id
            ) from e

        logger.info(
            "report_catalog_loaded",
            report_id=report.id,
            products=len(products),
            sectors=len(sectors),
        )

        async def build(product: Product) -> WeeklyReportItem:
            return await self._build_item(report, product, period, sectors)

        items = await run_in_waves(
            products,
            build,
            self._batch_size,
            delay=self._batch_delay,
            label="report_item_wave",
        )

        estimated = sum(1 for item in items if item.is_estimated)
        if estimated:
            logger.warning("report_items_estimated", report_id=report.id, count=estimated)

        try:
            inserted = await self._store.bulk_insert_report_items(report.id, items)
        except Exception as e:
            logger.error("report_items_insert_failed", report_id=report.id, error=str(e))
            raise ReportGenerationError(
                "item_insert", str(e), report.property_id
            ) from e

        built = {item.product_id: item for item in items}
        await self._insert_child_records(report, inserted, built)

    async def _build_item(
        self,
        report: WeeklyReport,
        product: Product,
        period: ReportPeriod,
        sectors: list[Sector],
    ) -> WeeklyReportItem:
        try:
            resolved, movements = await asyncio.gather(
                self._resolver.resolve_initial_stock_detailed(
                    report.property_id, product.id, period.start
                ),
                self._aggregator.aggregate(
                    report.property_id, product.id, period, sectors
                ),
            )
            return WeeklyReportItem(
                report_id=report.id,
                product_id=product.id,
                product_name=product.name,
                category=product.category,
                initial_stock=resolved.quantity,
                purchases=movements.purchases,
                sales=0.0,
                losses=0.0,
                final_stock=product.quantity,
                is_estimated=resolved.source is StockSource.FALLBACK,
                sector_movements=movements.sector_movements,
                transfers=movements.transfers,
            )

        except Exception:
            logger.warning(
                "report_item_failed",
                report_id=report.id,
                product_id=product.id,
                exc_info=True,
            )
            return WeeklyReportItem(
                report_id=report.id,
                product_id=product.id,
                product_name=product.name,
                category=product.category,
                is_estimated=True,
            )

    async def _insert_child_records(
        self,
        report: WeeklyReport,
        inserted: list[WeeklyReportItem],
        built: dict[str, WeeklyReportItem],
    ) -> None:
        chunks = chunked(inserted, self._batch_size)
        movement_count = 0
        transfer_count = 0

        for index, chunk in enumerate(chunks):
            movement_records: list[SectorMovementRecord] = []
            transfer_records: list[TransferRecord] = []

            for item in chunk:
                source_item = built.get(item.product_id, item)
                movement_records.extend(
                    SectorMovementRecord(
                        report_item_id=item.id,
                        sector_id=m.sector_id,
                        sector_name=m.sector_name,
                        quantity=m.quantity,
                    )
                    for m in source_item.sector_movements
                )
                transfer_records.extend(
                    TransferRecord(
                        report_item_id=item.id,
                        destination_property_id=t.destination_property_id,
                        destination_property_name=t.destination_property_name,
                        quantity=t.quantity,
                    )
                    for t in source_item.transfers
                )

            try:
                if movement_records:
                    movement_count += await self._store.bulk_insert_movement_records(
                        movement_records
                    )
                if transfer_records:
                    transfer_count += await self._store.bulk_insert_transfer_records(
                        transfer_records
                    )
            except Exception as e:
                logger.error(
                    "report_child_records_insert_failed",
                    report_id=report.id,
                    chunk=index + 1,
                    error=str(e),
                )
                raise ReportGenerationError(
                    "child_record_insert", str(e), report.property_id
                ) from e

            if self._child_batch_delay > 0 and index < len(chunks) - 1:
                await asyncio.sleep(self._child_batch_delay)

        logger.info(
            "report_child_records_inserted",
            report_id=report.id,
            items=len(inserted),
            sector_movements=movement_count,
            transfers=transfer_count,
        )

    async def _discard(self, report: WeeklyReport) -> None:
        """Delete a report created by a failed run, items and children included."""
        try:
            await self._store.delete_report(report.id)
        except Exception as e:
            logger.error("report_discard_failed", report_id=report.id, error=str(e))
            return
        self._log_state(ReportState.ABSENT, report_id=report.id, discarded=True)

    @staticmethod
    def _log_state(state: ReportState, **context) -> None:
        logger.info("report_state_changed", state=state.value, **context)
