"""
Ledger 타입 정의

정산 저널 항목 등 Ledger 시스템에서 사용하는 데이터 구조
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from core.types import OperationKind


@dataclass
class JournalEntry:
    """정산 저널 항목

    완료된 작업(또는 Cap 초과로 계정에 반영되지 못한 Swap, 회수)을 기록.
    amount는 자산 네이티브 단위, value는 내부 6자리 스케일.
    """

    entry_id: str
    kind: OperationKind
    asset: str
    account: str
    amount: int
    value: int
    ts: datetime
    reported_amount: int | None = None
    memo: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def create(
        kind: OperationKind,
        asset: str,
        account: str,
        amount: int,
        value: int,
        reported_amount: int | None = None,
        memo: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> "JournalEntry":
        """새 저널 항목 생성 (entry_id, ts 자동 할당)"""
        return JournalEntry(
            entry_id=str(uuid4()),
            kind=kind,
            asset=asset,
            account=account,
            amount=amount,
            value=value,
            ts=datetime.now(timezone.utc),
            reported_amount=reported_amount,
            memo=memo,
            extra=extra or {},
        )

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리로 변환 (직렬화용)"""
        return {
            "entry_id": self.entry_id,
            "kind": self.kind.value,
            "asset": self.asset,
            "account": self.account,
            "amount": str(self.amount),
            "value": str(self.value),
            "ts": self.ts.isoformat(),
            "reported_amount": (
                str(self.reported_amount) if self.reported_amount is not None else None
            ),
            "memo": self.memo,
            "extra": self.extra,
        }
