"""Tests for the aiosqlite connection pool."""

from pathlib import Path

import pytest

from hotelstock.infrastructure.storage.sqlite.connection import ConnectionPool, get_connection


@pytest.fixture
async def pool(temp_db_path: Path):
    pool = ConnectionPool(temp_db_path, pool_size=2, busy_timeout=1000)
    async with pool.transaction() as conn:
        await conn.execute("CREATE TABLE notes (id INTEGER PRIMARY KEY, body TEXT NOT NULL)")
    yield pool
    await pool.close()


class TestConnectionPool:
    def test_defaults(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)

        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert not pool._initialized

    async def test_lazy_initialization(self, pool):
        assert pool._initialized
        assert len(pool._connections) == 2

    async def test_pragmas(self, pool):
        async with pool.acquire() as conn:
            cursor = await conn.execute("PRAGMA foreign_keys")
            assert (await cursor.fetchone())[0] == 1
            cursor = await conn.execute("PRAGMA journal_mode")
            assert (await cursor.fetchone())[0] == "wal"

    async def test_transaction_commits(self, pool):
        async with pool.transaction() as conn:
            await conn.execute("INSERT INTO notes (body) VALUES ('kept')")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT body FROM notes")
            assert [row["body"] for row in await cursor.fetchall()] == ["kept"]

    async def test_transaction_rolls_back(self, pool):
        with pytest.raises(RuntimeError):
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO notes (body) VALUES ('lost')")
                raise RuntimeError("abort")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM notes")
            assert (await cursor.fetchone())[0] == 0

    async def test_close_resets(self, pool):
        await pool.close()

        assert not pool._initialized
        assert pool._connections == []


async def test_shared_pool_uses_settings(migrated_db):
    async with get_connection() as conn:
        cursor = await conn.execute("SELECT COUNT(*) FROM schema_migrations")
        assert (await cursor.fetchone())[0] >= 1
