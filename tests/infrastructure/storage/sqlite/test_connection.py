"""Unit tests for SQLite connection pool."""

from pathlib import Path

import aiosqlite
import pytest

from jewelpos.core.exceptions import DatabaseError
from jewelpos.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    database_errors,
    get_pool,
    get_transaction,
    parse_date,
)


class TestConnectionPool:
    def test_defaults(self, tmp_path: Path):
        pool = ConnectionPool(tmp_path / "pos.db")
        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert pool.initialized is False

    async def test_initialize_opens_connections(self, tmp_path: Path):
        pool = ConnectionPool(tmp_path / "nested" / "pos.db", pool_size=2)
        await pool.initialize()
        try:
            assert pool.initialized
            assert len(pool._connections) == 2
            assert await pool.ping()
        finally:
            await pool.close()
        assert not pool.initialized

    async def test_connections_use_wal(self, tmp_path: Path):
        pool = ConnectionPool(tmp_path / "pos.db", pool_size=1)
        try:
            async with pool.acquire() as conn:
                cursor = await conn.execute("PRAGMA journal_mode")
                assert (await cursor.fetchone())[0] == "wal"
        finally:
            await pool.close()

    async def test_transaction_rolls_back(self, tmp_path: Path):
        pool = ConnectionPool(tmp_path / "pos.db", pool_size=1)
        try:
            async with pool.transaction() as conn:
                await conn.execute("CREATE TABLE t (x INTEGER)")

            with pytest.raises(RuntimeError):
                async with pool.transaction() as conn:
                    await conn.execute("INSERT INTO t VALUES (1)")
                    raise RuntimeError("boom")

            async with pool.acquire() as conn:
                cursor = await conn.execute("SELECT COUNT(*) FROM t")
                assert (await cursor.fetchone())[0] == 0
        finally:
            await pool.close()


class TestGlobalPool:
    async def test_get_pool_is_singleton(self):
        try:
            assert await get_pool() is await get_pool()
        finally:
            await close_pool()

    async def test_get_transaction_uses_settings_path(self):
        try:
            async with get_transaction() as conn:
                await conn.execute("CREATE TABLE t (x INTEGER)")
            pool = await get_pool()
            assert pool.db_path.exists()
        finally:
            await close_pool()


class TestHelpers:
    def test_database_errors_wraps_driver_errors(self):
        with pytest.raises(DatabaseError) as exc_info:
            with database_errors("lookup"):
                raise aiosqlite.OperationalError("no such table: x")
        assert exc_info.value.details["operation"] == "lookup"

    def test_parse_date(self):
        assert parse_date("2024-03-16").isoformat() == "2024-03-16"
        assert parse_date(None) is None
        assert parse_date("not a date") is None
