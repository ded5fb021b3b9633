"""
Movement aggregation for one product over a report period.

Three independent movement classes are summed: purchases into the
warehouse, deliveries to sectors and transfers to other properties. A failing
class degrades to an empty result without affecting the other two.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from dataclasses import dataclass, field

from hotelstock.config import get_logger
from hotelstock.core.entities.catalog import Sector
from hotelstock.core.entities.report import ReportPeriod, SectorMovement, TransferTotal
from hotelstock.core.entities.stock import MovementType
from hotelstock.core.interfaces.inventory_source import IInventorySource

logger = get_logger(__name__)


@dataclass
class MovementAggregate:
    """Everything that moved for one product during a period."""

    purchases: float = 0.0
    sector_movements: list[SectorMovement] = field(default_factory=list)
    transfers: list[TransferTotal] = field(default_factory=list)


class MovementAggregator:
    """Sums purchases, sector deliveries and outbound transfers per product."""

    def __init__(self, source: IInventorySource) -> None:
        self._source = source

    async def aggregate(
        self,
        property_id: str,
        product_id: str,
        period: ReportPeriod,
        sectors: list[Sector],
    ) -> MovementAggregate:
        """Run the three sub-queries concurrently."""
        purchases, sector_movements, transfers = await asyncio.gather(
            self.purchases(property_id, product_id, period),
            self.sector_movements(property_id, product_id, period, sectors),
            self.property_transfers(property_id, product_id, period),
        )
        return MovementAggregate(
            purchases=purchases,
            sector_movements=sector_movements,
            transfers=transfers,
        )

    async def purchases(
        self, property_id: str, product_id: str, period: ReportPeriod
    ) -> float:
        """Sum of positive inbound movements."""
        try:
            movements = await self._source.get_movements(
                product_id,
                period.start_at,
                period.end_before,
                property_id=property_id,
                movement_type=MovementType.ENTRY,
            )
        except Exception:
            logger.warning(
                "purchases_query_failed",
                property_id=property_id,
                product_id=product_id,
                exc_info=True,
            )
            return 0.0

        return sum(max(0.0, m.quantity_change) for m in movements)

    async def sector_movements(
        self,
        property_id: str,
        product_id: str,
        period: ReportPeriod,
        sectors: list[Sector],
    ) -> list[SectorMovement]:
        """
        Completed deliveries grouped by sector.

        A delivery fulfilled with a substitute counts for the substitute, the
        product that actually left the warehouse.
        """
        if not sectors:
            return []

        try:
            deliveries = await self._source.get_completed_deliveries(
                property_id,
                period.start_at,
                period.end_before,
                product_id=product_id,
            )
        except Exception:
            logger.warning(
                "sector_movements_query_failed",
                property_id=property_id,
                product_id=product_id,
                exc_info=True,
            )
            return []

        sectors_by_id = {s.id: s for s in sectors}
        totals: dict[str, float] = defaultdict(float)

        for delivery in deliveries:
            if delivery.attributed_product_id != product_id:
                continue
            if delivery.sector_id not in sectors_by_id:
                continue
            totals[delivery.sector_id] += delivery.delivered_quantity or 0.0

        return [
            SectorMovement(
                sector_id=sector_id,
                sector_name=sectors_by_id[sector_id].name,
                quantity=quantity,
            )
            for sector_id, quantity in totals.items()
            if quantity > 0
        ]

    async def property_transfers(
        self, property_id: str, product_id: str, period: ReportPeriod
    ) -> list[TransferTotal]:
        """Completed outbound transfers grouped by destination property."""
        try:
            transfers = await self._source.get_completed_transfers(
                property_id,
                period.start_at,
                period.end_before,
                product_id=product_id,
            )
        except Exception:
            logger.warning(
                "property_transfers_query_failed",
                property_id=property_id,
                product_id=product_id,
                exc_info=True,
            )
            return []

        totals: dict[str, float] = defaultdict(float)
        destination_ids: dict[str, str] = {}

        for transfer in transfers:
            if transfer.product_id != product_id:
                continue
            name = transfer.destination_property_name
            if not name:
                continue
            totals[name] += transfer.quantity or 0.0
            destination_ids.setdefault(name, transfer.destination_property_id)

        return [
            TransferTotal(
                destination_property_id=destination_ids.get(name),
                destination_property_name=name,
                quantity=quantity,
            )
            for name, quantity in totals.items()
            if quantity > 0
        ]
