"""
Ledger 스키마 초기화

Vault/Web 시작 시 자동으로 원장·레지스트리·저널 테이블 생성.
CREATE IF NOT EXISTS 패턴으로 안전하게 동작.

금액 컬럼은 모두 TEXT (정수 문자열) - SQLite INTEGER는 64bit라
18자리 자산의 큰 수량을 담지 못할 수 있음.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


async def init_ledger_schema(db: "SQLiteAdapter") -> None:
    """Ledger 스키마 초기화

    Args:
        db: SQLiteAdapter 인스턴스
    """
    await _create_ledger_tables(db)
    await _create_indexes(db)
    await _insert_initial_rows(db)
    logger.info("Ledger 스키마 초기화 완료")


async def _create_ledger_tables(db: "SQLiteAdapter") -> None:
    """Ledger 테이블 생성"""

    # 자산 등록 정보 (행이 없으면 미등록)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS asset_registry (
            asset            TEXT PRIMARY KEY,
            accepted         INTEGER NOT NULL DEFAULT 1,
            price_reference  TEXT NOT NULL,
            decimal_override INTEGER NOT NULL DEFAULT 0,
            updated_by       TEXT NOT NULL,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # (asset, account) 잔고
    await db.execute("""
        CREATE TABLE IF NOT EXISTS vault_balance (
            asset            TEXT NOT NULL,
            account          TEXT NOT NULL,
            amount           TEXT NOT NULL DEFAULT '0',
            last_entry_id    TEXT,
            updated_at       TEXT NOT NULL DEFAULT (datetime('now')),
            PRIMARY KEY (asset, account)
        )
    """)

    # 전체 평가 합계 (단일 행)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS vault_total (
            id               INTEGER PRIMARY KEY CHECK (id = 1),
            total_valued     TEXT NOT NULL DEFAULT '0',
            last_entry_id    TEXT,
            updated_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # 정산 저널
    await db.execute("""
        CREATE TABLE IF NOT EXISTS settlement_journal (
            seq              INTEGER PRIMARY KEY AUTOINCREMENT,
            entry_id         TEXT NOT NULL UNIQUE,
            ts               TEXT NOT NULL,
            kind             TEXT NOT NULL,
            asset            TEXT NOT NULL,
            account          TEXT NOT NULL,
            amount           TEXT NOT NULL,
            value            TEXT NOT NULL,
            reported_amount  TEXT,
            memo             TEXT,
            extra_json       TEXT,
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)


async def _create_indexes(db: "SQLiteAdapter") -> None:
    """인덱스 생성"""
    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_settlement_journal_kind
        ON settlement_journal(kind, seq)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_settlement_journal_account
        ON settlement_journal(account, seq)
    """)


async def _insert_initial_rows(db: "SQLiteAdapter") -> None:
    """전체 합계 행 생성"""
    await db.execute(
        "INSERT OR IGNORE INTO vault_total (id, total_valued) VALUES (1, '0')"
    )
    await db.commit()
