"""
Balance Ledger 저장소

(asset, account) 잔고와 전체 평가 합계(running total)를 관리.
잔고와 합계를 변경하는 것은 Direct/Swap 흐름뿐이며,
한 흐름의 변경은 항상 하나의 트랜잭션으로 묶인다.

주의: 전체 합계는 시가 재평가(mark-to-market)가 아니라
각 흐름 완료 시점의 평가액을 누적한 값이다. 가격이 움직여도 재계산하지 않음.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from core.errors import InsufficientBalanceError
from core.ledger.types import JournalEntry
from core.types import OperationKind

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class BalanceLedger:
    """Balance Ledger

    잔고/합계 변경 메서드(credit, debit, add_to_total, subtract_from_total)는
    커밋하지 않는다. 호출자가 SQLiteAdapter.transaction() 안에서 호출해야 하며,
    흐름 단위 정산은 settle_credit / settle_debit 을 사용한다.

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # =========================================================================
    # 조회
    # =========================================================================

    async def get_balance(self, asset: str, account: str) -> int:
        """잔고 조회 (없으면 0)"""
        row = await self.db.fetchone(
            "SELECT amount FROM vault_balance WHERE asset = ? AND account = ?",
            (asset, account),
        )
        return int(row[0]) if row else 0

    async def sum_balances(self, asset: str) -> int:
        """자산별 모든 계정 잔고 합계

        TEXT 컬럼이라 SQL SUM 대신 Python 정수로 합산.
        """
        rows = await self.db.fetchall(
            "SELECT amount FROM vault_balance WHERE asset = ?",
            (asset,),
        )
        return sum(int(row[0]) for row in rows)

    async def list_balances(self, account: str) -> dict[str, int]:
        """계정의 자산별 잔고 (0 잔고 제외)"""
        rows = await self.db.fetchall(
            """
            SELECT asset, amount FROM vault_balance
            WHERE account = ?
            ORDER BY asset
            """,
            (account,),
        )
        return {row[0]: int(row[1]) for row in rows if int(row[1]) > 0}

    async def total_valued(self) -> int:
        """전체 평가 합계 (내부 6자리 스케일)"""
        row = await self.db.fetchone("SELECT total_valued FROM vault_total WHERE id = 1")
        return int(row[0]) if row else 0

    # =========================================================================
    # 변경 (트랜잭션 내부에서만 호출)
    # =========================================================================

    async def credit(
        self,
        asset: str,
        account: str,
        amount: int,
        entry_id: str | None = None,
    ) -> int:
        """잔고 증가

        Returns:
            변경 후 잔고
        """
        if amount < 0:
            raise ValueError(f"credit amount must be non-negative: {amount}")

        new_balance = await self.get_balance(asset, account) + amount
        await self._write_balance(asset, account, new_balance, entry_id)
        return new_balance

    async def debit(
        self,
        asset: str,
        account: str,
        amount: int,
        entry_id: str | None = None,
    ) -> int:
        """잔고 감소

        Returns:
            변경 후 잔고

        Raises:
            InsufficientBalanceError: amount > 현재 잔고
        """
        if amount < 0:
            raise ValueError(f"debit amount must be non-negative: {amount}")

        current = await self.get_balance(asset, account)
        if amount > current:
            raise InsufficientBalanceError(
                "잔고가 부족합니다",
                asset=asset,
                account=account,
                requested=amount,
                available=current,
            )

        new_balance = current - amount
        await self._write_balance(asset, account, new_balance, entry_id)
        return new_balance

    async def add_to_total(self, value: int, entry_id: str | None = None) -> int:
        """전체 합계 증가

        Returns:
            변경 후 합계
        """
        if value < 0:
            raise ValueError(f"value must be non-negative: {value}")

        new_total = await self.total_valued() + value
        await self._write_total(new_total, entry_id)
        return new_total

    async def subtract_from_total(self, value: int, entry_id: str | None = None) -> int:
        """전체 합계 감소 (0에서 포화)

        평가 시점 차이로 합계보다 큰 값이 들어와도 음수가 되지 않는다.

        Returns:
            실제로 감소한 양 (보상 트랜잭션에서 그대로 되돌릴 때 사용)
        """
        if value < 0:
            raise ValueError(f"value must be non-negative: {value}")

        current = await self.total_valued()
        decrement = min(value, current)
        await self._write_total(current - decrement, entry_id)

        if decrement < value:
            logger.warning(
                "전체 합계 감소량이 포화되었습니다",
                extra={"requested": value, "applied": decrement},
            )
        return decrement

    async def _write_balance(
        self,
        asset: str,
        account: str,
        amount: int,
        entry_id: str | None,
    ) -> None:
        await self.db.execute(
            """
            INSERT INTO vault_balance (asset, account, amount, last_entry_id)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(asset, account) DO UPDATE SET
                amount = excluded.amount,
                last_entry_id = excluded.last_entry_id,
                updated_at = datetime('now')
            """,
            (asset, account, str(amount), entry_id),
        )

    async def _write_total(self, total: int, entry_id: str | None) -> None:
        await self.db.execute(
            """
            UPDATE vault_total
            SET total_valued = ?, last_entry_id = ?, updated_at = datetime('now')
            WHERE id = 1
            """,
            (str(total), entry_id),
        )

    # =========================================================================
    # 흐름 단위 정산 (단일 트랜잭션)
    # =========================================================================

    async def settle_credit(
        self,
        entry: JournalEntry,
        credited_asset: str,
        credited_amount: int,
    ) -> int:
        """입금 정산: 잔고 증가 + 합계 증가 + 저널 기록

        Args:
            entry: 저널 항목 (value가 합계에 더해짐)
            credited_asset: 잔고를 늘릴 자산 (Swap이면 스테이블 자산)
            credited_amount: 잔고 증가량

        Returns:
            정산 후 전체 합계
        """
        async with self.db.transaction():
            await self.credit(credited_asset, entry.account, credited_amount, entry.entry_id)
            total_after = await self.add_to_total(entry.value, entry.entry_id)
            await self.record(entry)
        return total_after

    async def settle_debit(self, entry: JournalEntry) -> tuple[int, int]:
        """출금 정산: 잔고 감소 + 합계 포화 감소 + 저널 기록

        Returns:
            (정산 후 전체 합계, 실제 합계 감소량)
        """
        async with self.db.transaction():
            await self.debit(entry.asset, entry.account, entry.amount, entry.entry_id)
            decrement = await self.subtract_from_total(entry.value, entry.entry_id)
            await self.record(entry)
            total_after = await self.total_valued()
        return total_after, decrement

    async def revert_debit(self, entry: JournalEntry, decrement: int) -> int:
        """출금 정산 보상: 외부 이동 실패 시 settle_debit 효과를 정확히 되돌림

        Args:
            entry: settle_debit 에 사용한 저널 항목
            decrement: settle_debit 이 반환한 실제 합계 감소량

        Returns:
            보상 후 전체 합계
        """
        async with self.db.transaction():
            await self.credit(entry.asset, entry.account, entry.amount, entry.entry_id)
            total_after = await self.add_to_total(decrement, entry.entry_id)
            await self.db.execute(
                "DELETE FROM settlement_journal WHERE entry_id = ?",
                (entry.entry_id,),
            )
        logger.info(
            f"Withdraw reverted: {entry.entry_id}",
            extra={"asset": entry.asset, "account": entry.account, "amount": entry.amount},
        )
        return total_after

    # =========================================================================
    # 정산 저널
    # =========================================================================

    async def record(self, entry: JournalEntry) -> None:
        """저널 기록 (커밋하지 않음)"""
        await self.db.execute(
            """
            INSERT INTO settlement_journal (
                entry_id, ts, kind, asset, account,
                amount, value, reported_amount, memo, extra_json
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry.entry_id,
                entry.ts.isoformat(),
                entry.kind.value,
                entry.asset,
                entry.account,
                str(entry.amount),
                str(entry.value),
                str(entry.reported_amount) if entry.reported_amount is not None else None,
                entry.memo,
                json.dumps(entry.extra, ensure_ascii=False) if entry.extra else None,
            ),
        )

    async def record_standalone(self, entry: JournalEntry) -> None:
        """저널만 단독 기록 (잔고/합계 변경 없음, 즉시 커밋)"""
        async with self.db.transaction():
            await self.record(entry)

    async def list_entries(
        self,
        kind: OperationKind | None = None,
        account: str | None = None,
        limit: int = 100,
    ) -> list[JournalEntry]:
        """저널 조회 (최신순)

        Args:
            kind: 작업 종류 필터 (선택)
            account: 계정 필터 (선택)
            limit: 조회 개수 제한
        """
        sql = """
            SELECT entry_id, ts, kind, asset, account,
                   amount, value, reported_amount, memo, extra_json
            FROM settlement_journal
            WHERE 1 = 1
        """
        params: list[Any] = []

        if kind is not None:
            sql += " AND kind = ?"
            params.append(kind.value)

        if account is not None:
            sql += " AND account = ?"
            params.append(account)

        sql += " ORDER BY seq DESC LIMIT ?"
        params.append(limit)

        rows = await self.db.fetchall(sql, tuple(params))

        return [
            JournalEntry(
                entry_id=row[0],
                ts=datetime.fromisoformat(row[1]),
                kind=OperationKind(row[2]),
                asset=row[3],
                account=row[4],
                amount=int(row[5]),
                value=int(row[6]),
                reported_amount=int(row[7]) if row[7] is not None else None,
                memo=row[8],
                extra=json.loads(row[9]) if row[9] else {},
            )
            for row in rows
        ]
