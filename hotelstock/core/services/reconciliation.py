"""
Reconciliation presenter.

Pure functions turning an assembled ReconciliationReport plus manual edits
into warehouse and sector views. Nothing here performs I/O or keeps state
between calls; recomputing a view is just calling the function again with
the new edits.

Flow equations:
    warehouse           calculated = initial + purchases - delivered
                        loss = actual - calculated
    ordinary sector     loss = initial + received - sales - consumption - counted
    derived consumption consumption = initial + received - counted, loss = 0
"""

from collections.abc import Iterable, Mapping
from typing import TypeVar

from hotelstock.core.entities.catalog import Sector
from hotelstock.core.entities.reconciliation import (
    MainStockData,
    ReconciliationReport,
    ReconciliationRow,
    SectorEdit,
    SectorRowView,
    SectorStockData,
    SectorView,
    WarehouseRowView,
)
from hotelstock.core.entities.report import FullReport
from hotelstock.core.exceptions import SectorNotFoundError

RowT = TypeVar("RowT", WarehouseRowView, SectorRowView)


def build_reconciliation_report(
    full_report: FullReport,
    sectors: list[Sector],
    sector_balances: Mapping[str, Mapping[str, float]] | None = None,
    sector_consumption: Mapping[str, Mapping[str, float]] | None = None,
    starred_product_ids: Iterable[str] | None = None,
) -> ReconciliationReport:
    """
    Assemble a stored weekly report into the presenter's input.

    Args:
        full_report: Report with items and child movement records
        sectors: The property's sectors
        sector_balances: Opening balance per sector and product
        sector_consumption: Consumption recorded per sector and product
        starred_product_ids: Products flagged for the starred-items view
    """
    balances = sector_balances or {}
    consumed = sector_consumption or {}
    starred = set(starred_product_ids or ())
    rows: list[ReconciliationRow] = []

    for item in full_report.items:
        received_by_sector: dict[str, float] = {}
        for movement in item.sector_movements:
            if movement.sector_id is None:
                continue
            received_by_sector[movement.sector_id] = (
                received_by_sector.get(movement.sector_id, 0.0) + movement.quantity
            )

        main = MainStockData(
            initial_stock=item.initial_stock,
            purchases=item.purchases,
            delivered_to_sectors=item.delivered_to_sectors,
            calculated_final_stock=item.calculated_final_stock,
            actual_final_stock=item.final_stock,
            loss=item.warehouse_loss,
        )

        sector_stocks = {
            sector.id: SectorStockData(
                sector_id=sector.id,
                sector_name=sector.name,
                kind=sector.kind,
                initial_stock=balances.get(sector.id, {}).get(item.product_id, 0.0),
                received=received_by_sector.get(sector.id, 0.0),
                consumption=consumed.get(sector.id, {}).get(item.product_id, 0.0),
            )
            for sector in sectors
        }

        rows.append(
            ReconciliationRow(
                product_id=item.product_id,
                product_name=item.product_name,
                category=item.category,
                is_starred=item.product_id in starred,
                main_stock=main,
                sector_stocks=sector_stocks,
            )
        )

    return ReconciliationReport(
        period_start=full_report.report.period_start,
        period_end=full_report.report.period_end,
        sectors=sectors,
        rows=rows,
    )


def present_warehouse(
    report: ReconciliationReport, only_starred: bool = False
) -> list[WarehouseRowView]:
    """Warehouse view: one row per product that has warehouse data."""
    views: list[WarehouseRowView] = []

    for row in _select_rows(report, only_starred):
        main = row.main_stock
        if main is None:
            continue
        calculated = main.initial_stock + main.purchases - main.delivered_to_sectors
        views.append(
            WarehouseRowView(
                product_id=row.product_id,
                product_name=row.product_name,
                category=row.category,
                initial_stock=main.initial_stock,
                purchases=main.purchases,
                delivered_to_sectors=main.delivered_to_sectors,
                calculated_final_stock=calculated,
                actual_final_stock=main.actual_final_stock,
                loss=main.actual_final_stock - calculated,
            )
        )

    return views


def present_sector(
    report: ReconciliationReport,
    sector_id: str,
    edits: Mapping[str, SectorEdit] | None = None,
    only_starred: bool = False,
) -> SectorView:
    """
    Sector view recomputed from manual edits keyed by product id.

    Only products with opening stock, receipts or recorded consumption in the
    sector are listed.
    Without an edited count, the expected stock (initial + received -
    consumption) is used. Without an edited consumption, the consumption the
    sector recorded in the period is used.

    Raises:
        SectorNotFoundError: sector_id is not part of the report
    """
    sector = report.sector(sector_id)
    if sector is None:
        raise SectorNotFoundError(sector_id)

    edits = edits or {}
    views: list[SectorRowView] = []

    for row in _select_rows(report, only_starred):
        data = row.sector_stocks.get(sector_id)
        if data is None or not data.has_footprint:
            continue
        views.append(
            _recompute_sector_row(row, data, edits.get(row.product_id), sector)
        )

    return SectorView(sector=sector, rows=views)


def group_by_category(rows: Iterable[RowT]) -> dict[str, list[RowT]]:
    """Group view rows by category, categories sorted by name."""
    groups: dict[str, list[RowT]] = {}
    for row in rows:
        groups.setdefault(row.category, []).append(row)
    return {category: groups[category] for category in sorted(groups)}


def _select_rows(
    report: ReconciliationReport, only_starred: bool
) -> list[ReconciliationRow]:
    if not only_starred:
        return list(report.rows)
    return [row for row in report.rows if row.is_starred]


def _recompute_sector_row(
    row: ReconciliationRow,
    data: SectorStockData,
    edit: SectorEdit | None,
    sector: Sector,
) -> SectorRowView:
    edit = edit or SectorEdit()
    available = data.initial_stock + data.received

    if sector.derives_consumption:
        counted = _counted_or(edit, data, data.calculated_final_stock)
        sales = 0.0
        consumption = available - counted
        loss = 0.0
    else:
        sales = edit.sales
        consumption = edit.consumption if edit.consumption is not None else data.consumption
        counted = _counted_or(edit, data, available - consumption)
        loss = available - sales - consumption - counted

    return SectorRowView(
        product_id=row.product_id,
        product_name=row.product_name,
        category=row.category,
        initial_stock=data.initial_stock,
        received=data.received,
        sales=sales,
        consumption=consumption,
        counted_stock=counted,
        loss=loss,
        consumption_derived=sector.derives_consumption,
    )


def _counted_or(edit: SectorEdit, data: SectorStockData, expected: float) -> float:
    if edit.counted_stock is not None:
        return edit.counted_stock
    if data.counted_stock is not None:
        return data.counted_stock
    return expected
