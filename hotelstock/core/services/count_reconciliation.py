"""
Stock-count reconciliation.

Reconciles the warehouse and selected sectors between two finished physical
counts per location instead of a calendar week. The window spans from the
earliest to the latest selected count; the result is an ordinary
ReconciliationReport so the presenter applies unchanged.
"""

from collections import defaultdict
from datetime import datetime, timedelta

from hotelstock.config import get_logger
from hotelstock.core.entities.catalog import Product, Sector
from hotelstock.core.entities.reconciliation import (
    CountSelection,
    MainStockData,
    ReconciliationReport,
    ReconciliationRow,
    SectorStockData,
)
from hotelstock.core.entities.stock import MovementType, StockCount
from hotelstock.core.exceptions import (
    SectorNotFoundError,
    StockCountNotFoundError,
    ValidationError,
)
from hotelstock.core.interfaces import IInventorySource
from hotelstock.core.services.batching import run_in_waves

logger = get_logger(__name__)

# Count timestamps are inclusive bounds
_INCLUSIVE = timedelta(microseconds=1)


class StockCountReconciler:
    """Builds reconciliation reports bounded by physical stock counts."""

    def __init__(
        self,
        source: IInventorySource,
        batch_size: int = 50,
        batch_delay: float = 0.1,
    ):
        self._source = source
        self._batch_size = batch_size
        self._batch_delay = batch_delay

    async def reconcile(
        self, property_id: str, selections: list[CountSelection]
    ) -> ReconciliationReport:
        """
        Reconcile every selected location between its start and end count.

        Raises:
            ValidationError: no selections, duplicated locations or counts
                that do not match their location
            StockCountNotFoundError: a selected count does not exist
            SectorNotFoundError: a selected sector is not in the property
        """
        self._validate_selections(selections)

        count_ids = sorted(
            {s.start_count_id for s in selections} | {s.end_count_id for s in selections}
        )
        counts = {c.id: c for c in await self._source.get_stock_counts(count_ids)}
        missing = [cid for cid in count_ids if cid not in counts]
        if missing:
            raise StockCountNotFoundError(missing)

        for selection in selections:
            self._check_pair(
                property_id,
                selection,
                counts[selection.start_count_id],
                counts[selection.end_count_id],
            )

        window_start = min(c.finished_at for c in counts.values())
        window_end = max(c.finished_at for c in counts.values())

        products = await self._source.list_products(property_id, only_active=True)
        sectors = await self._source.list_sectors(property_id)
        selected_sectors = self._selected_sectors(selections, sectors)

        received = await self._deliveries_by_sector(
            property_id, window_start, window_end
        )

        warehouse = next((s for s in selections if s.sector_id is None), None)
        purchases: dict[str, float] = {}
        if warehouse is not None:
            purchases = await self._purchases(
                property_id, products, window_start, window_end
            )

        logger.info(
            "stock_count_reconciliation_started",
            property_id=property_id,
            window_start=window_start.isoformat(),
            window_end=window_end.isoformat(),
            locations=len(selections),
            products=len(products),
        )

        rows: list[ReconciliationRow] = []
        for product in products:
            main = None
            if warehouse is not None:
                main = self._main_stock(
                    product.id,
                    counts[warehouse.start_count_id],
                    counts[warehouse.end_count_id],
                    purchases.get(product.id, 0.0),
                    sum(by_product.get(product.id, 0.0) for by_product in received.values()),
                )

            sector_stocks: dict[str, SectorStockData] = {}
            for selection in selections:
                if selection.sector_id is None:
                    continue
                sector = selected_sectors[selection.sector_id]
                sector_stocks[sector.id] = SectorStockData(
                    sector_id=sector.id,
                    sector_name=sector.name,
                    kind=sector.kind,
                    initial_stock=counts[selection.start_count_id].counted(product.id),
                    received=received.get(sector.id, {}).get(product.id, 0.0),
                    counted_stock=counts[selection.end_count_id].counted(product.id),
                )

            rows.append(
                ReconciliationRow(
                    product_id=product.id,
                    product_name=product.name,
                    category=product.category,
                    is_starred=product.is_starred,
                    main_stock=main,
                    sector_stocks=sector_stocks,
                )
            )

        return ReconciliationReport(
            period_start=window_start.date(),
            period_end=window_end.date(),
            sectors=list(selected_sectors.values()),
            rows=rows,
        )

    @staticmethod
    def _validate_selections(selections: list[CountSelection]) -> None:
        if not selections:
            raise ValidationError("selections", "at least one location must be selected")

        locations = [s.sector_id for s in selections]
        if len(set(locations)) != len(locations):
            raise ValidationError(
                "selections", "each location may be selected once", locations
            )

        for selection in selections:
            if selection.start_count_id == selection.end_count_id:
                raise ValidationError(
                    "selections",
                    "start and end counts must differ",
                    selection.start_count_id,
                )

    @staticmethod
    def _check_pair(
        property_id: str,
        selection: CountSelection,
        start: StockCount,
        end: StockCount,
    ) -> None:
        for count in (start, end):
            if count.property_id != property_id or count.sector_id != selection.sector_id:
                raise ValidationError(
                    "selections",
                    "count does not belong to the selected location",
                    count.id,
                )
        if end.finished_at < start.finished_at:
            raise ValidationError(
                "selections", "end count finished before start count", end.id
            )

    @staticmethod
    def _selected_sectors(
        selections: list[CountSelection], sectors: list[Sector]
    ) -> dict[str, Sector]:
        by_id = {s.id: s for s in sectors}
        selected: dict[str, Sector] = {}
        for selection in selections:
            if selection.sector_id is None:
                continue
            sector = by_id.get(selection.sector_id)
            if sector is None:
                raise SectorNotFoundError(selection.sector_id)
            selected[sector.id] = sector
        return selected

    async def _deliveries_by_sector(
        self, property_id: str, start: datetime, end: datetime
    ) -> dict[str, dict[str, float]]:
        """Delivered quantity per sector and attributed product."""
        deliveries = await self._source.get_completed_deliveries(
            property_id, start, end + _INCLUSIVE
        )
        totals: dict[str, dict[str, float]] = defaultdict(lambda: defaultdict(float))
        for delivery in deliveries:
            totals[delivery.sector_id][delivery.attributed_product_id] += (
                delivery.delivered_quantity or 0.0
            )
        return totals

    async def _purchases(
        self,
        property_id: str,
        products: list[Product],
        start: datetime,
        end: datetime,
    ) -> dict[str, float]:
        async def purchased(product: Product) -> float:
            try:
                movements = await self._source.get_movements(
                    product.id,
                    start,
                    end + _INCLUSIVE,
                    property_id=property_id,
                    movement_type=MovementType.ENTRY,
                )
            except Exception:
                logger.warning(
                    "purchases_query_failed",
                    property_id=property_id,
                    product_id=product.id,
                    exc_info=True,
                )
                return 0.0
            return sum(max(0.0, m.quantity_change) for m in movements)

        totals = await run_in_waves(
            products,
            purchased,
            self._batch_size,
            delay=self._batch_delay,
            label="count_purchases_wave",
        )
        return {product.id: total for product, total in zip(products, totals)}

    @staticmethod
    def _main_stock(
        product_id: str,
        start: StockCount,
        end: StockCount,
        purchases: float,
        delivered: float,
    ) -> MainStockData:
        initial = start.counted(product_id)
        actual = end.counted(product_id)
        calculated = initial + purchases - delivered
        return MainStockData(
            initial_stock=initial,
            purchases=purchases,
            delivered_to_sectors=delivered,
            calculated_final_stock=calculated,
            actual_final_stock=actual,
            loss=actual - calculated,
        )
