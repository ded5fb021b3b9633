"""
Initial stock resolution for a product at the start of a period.

Prefers a persisted snapshot; without one, reverses the current stock through
the movements recorded since the period started.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from hotelstock.config import get_logger
from hotelstock.core.entities.report import ReportPeriod
from hotelstock.core.interfaces.inventory_source import IInventorySource

logger = get_logger(__name__)


class StockSource(str, Enum):
    """Where a resolved initial stock came from."""

    SNAPSHOT = "snapshot"
    REVERSE = "reverse"
    FALLBACK = "fallback"  # lookup failed, zero substituted


@dataclass(frozen=True)
class ResolvedStock:
    """Initial stock plus its provenance."""

    quantity: float
    source: StockSource


class SnapshotResolver:
    """Resolves the best-known stock quantity at the start of a period."""

    def __init__(self, source: IInventorySource, week_starts_on: int = 0) -> None:
        self._source = source
        self._week_starts_on = week_starts_on

    async def resolve_initial_stock(
        self, property_id: str, product_id: str, period_start: date
    ) -> float:
        """Return the product's stock at period start, never negative."""
        resolved = await self.resolve_initial_stock_detailed(
            property_id, product_id, period_start
        )
        return resolved.quantity

    async def resolve_initial_stock_detailed(
        self, property_id: str, product_id: str, period_start: date
    ) -> ResolvedStock:
        """Resolve initial stock and report which strategy produced it."""
        try:
            snapshot = await self._source.get_snapshot(
                property_id, period_start, product_ids=[product_id]
            )
            if snapshot is not None:
                quantity = snapshot.quantity_for(product_id)
                if quantity is not None:
                    return ResolvedStock(quantity=quantity, source=StockSource.SNAPSHOT)

            return ResolvedStock(
                quantity=await self._reverse_compute(product_id, period_start),
                source=StockSource.REVERSE,
            )

        except Exception:
            logger.warning(
                "initial_stock_resolution_failed",
                property_id=property_id,
                product_id=product_id,
                period_start=period_start.isoformat(),
                exc_info=True,
            )
            return ResolvedStock(quantity=0.0, source=StockSource.FALLBACK)

    async def _reverse_compute(self, product_id: str, period_start: date) -> float:
        """Current stock minus the net movements since period start, floored at 0."""
        current = await self._source.get_current_stock(product_id) or 0.0

        period = ReportPeriod.for_week(period_start, self._week_starts_on)
        movements = await self._source.get_movements(
            product_id, period.start_at, period.end_before
        )
        net_change = sum(m.quantity_change for m in movements)

        # A negative result means the history is inconsistent, not a real stock level
        return max(0.0, current - net_change)
