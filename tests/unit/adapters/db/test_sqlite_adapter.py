"""
SQLite 어댑터 테스트

SQLiteAdapter 및 관련 함수 테스트.
"""

import asyncio
from pathlib import Path

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter, create_connection, init_schema


class TestCreateConnection:
    """create_connection 테스트"""

    @pytest.mark.asyncio
    async def test_create_connection(self, tmp_path: Path) -> None:
        """연결 생성 (WAL 모드)"""
        db_path = tmp_path / "test.db"

        conn = await create_connection(db_path)

        cursor = await conn.execute("PRAGMA journal_mode")
        row = await cursor.fetchone()
        assert row[0].upper() == "WAL"

        await conn.close()

    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, tmp_path: Path) -> None:
        """부모 디렉토리 생성"""
        db_path = tmp_path / "subdir" / "test.db"

        conn = await create_connection(db_path)

        assert db_path.parent.exists()

        await conn.close()


class TestSQLiteAdapter:
    """SQLiteAdapter 테스트"""

    @pytest.mark.asyncio
    async def test_context_manager(self, tmp_path: Path) -> None:
        """async with 사용 시 연결/종료"""
        adapter = SQLiteAdapter(tmp_path / "test.db")

        async with adapter:
            assert adapter.is_connected

        assert not adapter.is_connected

    @pytest.mark.asyncio
    async def test_execute_without_connection(self) -> None:
        """연결 전 실행 → RuntimeError"""
        adapter = SQLiteAdapter(":memory:")

        with pytest.raises(RuntimeError):
            await adapter.execute("SELECT 1")

    @pytest.mark.asyncio
    async def test_transaction_rollback(self) -> None:
        """예외 발생 시 롤백"""
        async with SQLiteAdapter(":memory:") as adapter:
            await adapter.execute("CREATE TABLE t (v TEXT)")
            await adapter.commit()

            with pytest.raises(ValueError):
                async with adapter.transaction():
                    await adapter.execute("INSERT INTO t (v) VALUES ('x')")
                    raise ValueError("boom")

            assert await adapter.fetchall("SELECT v FROM t") == []

    @pytest.mark.asyncio
    async def test_transaction_commit(self) -> None:
        """정상 종료 시 커밋"""
        async with SQLiteAdapter(":memory:") as adapter:
            await adapter.execute("CREATE TABLE t (v TEXT)")
            await adapter.commit()

            async with adapter.transaction():
                await adapter.execute("INSERT INTO t (v) VALUES ('x')")

            assert await adapter.fetchone("SELECT v FROM t") == ("x",)

    @pytest.mark.asyncio
    async def test_concurrent_transactions_isolated(self) -> None:
        """한 트랜잭션의 롤백이 동시 실행 중인 다른 트랜잭션의 쓰기를 건드리지 않음"""
        async with SQLiteAdapter(":memory:") as adapter:
            await adapter.execute("CREATE TABLE t (v TEXT)")
            await adapter.commit()

            async def failing() -> None:
                async with adapter.transaction():
                    await adapter.execute("INSERT INTO t (v) VALUES ('bad')")
                    await asyncio.sleep(0)
                    raise ValueError("boom")

            async def succeeding() -> None:
                async with adapter.transaction():
                    await adapter.execute("INSERT INTO t (v) VALUES ('good')")

            results = await asyncio.gather(failing(), succeeding(), return_exceptions=True)

            assert isinstance(results[0], ValueError)
            assert results[1] is None
            assert await adapter.fetchall("SELECT v FROM t") == [("good",)]


class TestInitSchema:
    """init_schema 테스트"""

    @pytest.mark.asyncio
    async def test_creates_tables(self) -> None:
        """config_store + Ledger/Registry 테이블 생성"""
        async with SQLiteAdapter(":memory:") as adapter:
            await init_schema(adapter)

            assert await adapter.table_exists("config_store")
            assert await adapter.table_exists("asset_registry")
            assert await adapter.table_exists("vault_balance")
            assert await adapter.table_exists("vault_total")
            assert await adapter.table_exists("settlement_journal")

    @pytest.mark.asyncio
    async def test_idempotent(self) -> None:
        """두 번 실행해도 에러 없음"""
        async with SQLiteAdapter(":memory:") as adapter:
            await init_schema(adapter)
            await init_schema(adapter)

            assert await adapter.table_exists("config_store")
