"""Fixtures for core service tests."""

from unittest.mock import AsyncMock

import pytest


@pytest.fixture
def mock_report_store(weekly_report) -> AsyncMock:
    """
    Report store double that keeps inserted rows in memory.

    `store.rows` exposes what was written so tests can assert on it.
    """
    store = AsyncMock()
    rows: dict[str, list] = {"items": [], "movements": [], "transfers": []}
    store.rows = rows

    store.get_or_create_report.return_value = (weekly_report, True)
    store.get_report.return_value = weekly_report

    async def list_report_items(report_id):
        return [item.model_copy(update={"sector_movements": [], "transfers": []})
                for item in rows["items"]]

    async def bulk_insert_report_items(report_id, items):
        existing = {item.product_id for item in rows["items"]}
        inserted = []
        for item in items:
            if item.product_id in existing:
                continue
            inserted.append(
                item.model_copy(update={"id": len(rows["items"]) + 1, "report_id": report_id})
            )
            rows["items"].append(inserted[-1])
        return inserted

    async def bulk_insert_movement_records(records):
        rows["movements"].extend(records)
        return len(records)

    async def bulk_insert_transfer_records(records):
        rows["transfers"].extend(records)
        return len(records)

    async def list_movement_records(item_ids):
        return [r for r in rows["movements"] if r.report_item_id in item_ids]

    async def list_transfer_records(item_ids):
        return [r for r in rows["transfers"] if r.report_item_id in item_ids]

    async def delete_report(report_id):
        deleted = bool(rows["items"])
        for records in rows.values():
            records.clear()
        return deleted

    store.list_report_items.side_effect = list_report_items
    store.delete_report.side_effect = delete_report
    store.bulk_insert_report_items.side_effect = bulk_insert_report_items
    store.bulk_insert_movement_records.side_effect = bulk_insert_movement_records
    store.bulk_insert_transfer_records.side_effect = bulk_insert_transfer_records
    store.list_movement_records.side_effect = list_movement_records
    store.list_transfer_records.side_effect = list_transfer_records
    return store
