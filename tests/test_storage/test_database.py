"""Tests for Database and schema creation with a mocked asyncpg pool."""

import re
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from trustlens.storage.database import Database
from trustlens.storage.schema import SCHEMA_SQL, create_tables


def _mock_pool(conn):
    acquire_cm = MagicMock()
    acquire_cm.__aenter__ = AsyncMock(return_value=conn)
    acquire_cm.__aexit__ = AsyncMock(return_value=False)
    pool = MagicMock()
    pool.acquire.return_value = acquire_cm
    pool.close = AsyncMock()
    return pool


class TestDatabase:
    def test_pool_requires_connect(self):
        with pytest.raises(RuntimeError, match="not connected"):
            Database("postgresql://localhost/test").pool

    @pytest.mark.asyncio
    async def test_connect_and_close(self):
        conn = AsyncMock()
        pool = _mock_pool(conn)

        with patch("asyncpg.create_pool", AsyncMock(return_value=pool)) as create_pool:
            db = Database("postgresql://localhost/test", min_size=1, max_size=2)
            await db.connect()

        create_pool.assert_awaited_once_with(
            "postgresql://localhost/test", min_size=1, max_size=2, command_timeout=60.0,
        )
        await db.close()
        pool.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_context_manager_connects_once(self):
        pool = _mock_pool(AsyncMock())

        with patch("asyncpg.create_pool", AsyncMock(return_value=pool)) as create_pool:
            async with Database("postgresql://localhost/test") as db:
                await db.connect()
                assert db.connected

        create_pool.assert_awaited_once()
        assert not db.connected
        pool.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_health_check(self):
        conn = AsyncMock()
        conn.fetchval.return_value = 1
        db = Database("postgresql://localhost/test")
        db._pool = _mock_pool(conn)

        assert await db.health_check() is True

    @pytest.mark.asyncio
    async def test_health_check_failure(self):
        conn = AsyncMock()
        conn.fetchval.side_effect = OSError("connection refused")
        db = Database("postgresql://localhost/test")
        db._pool = _mock_pool(conn)

        assert await db.health_check() is False

    @pytest.mark.asyncio
    async def test_transaction_wraps_connection(self):
        conn = AsyncMock()
        txn_cm = MagicMock()
        txn_cm.__aenter__ = AsyncMock()
        txn_cm.__aexit__ = AsyncMock(return_value=False)
        conn.transaction = MagicMock(return_value=txn_cm)
        db = Database("postgresql://localhost/test")
        db._pool = _mock_pool(conn)

        async with db.transaction() as tx_conn:
            await tx_conn.execute("SELECT 1")

        txn_cm.__aenter__.assert_awaited_once()
        txn_cm.__aexit__.assert_awaited_once()


class TestSchema:
    def test_tables_present(self):
        for table in ("users", "vendors", "products", "reviews", "review_authentications", "alerts"):
            assert f"CREATE TABLE IF NOT EXISTS {table}" in SCHEMA_SQL

    def test_review_authentication_unique_per_review(self):
        assert re.search(r"review_id\s+TEXT NOT NULL UNIQUE", SCHEMA_SQL)

    @pytest.mark.asyncio
    async def test_create_tables(self):
        db = AsyncMock()
        await create_tables(db)
        db.execute.assert_awaited_once_with(SCHEMA_SQL)
