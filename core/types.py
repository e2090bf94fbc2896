"""
타입 정의 모듈

Enum, Dataclass 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class TradingMode(str, Enum):
    """운영 모드 (실운영 / 테스트넷)"""

    PRODUCTION = "production"
    TESTNET = "testnet"


class OperationKind(str, Enum):
    """정산 저널에 기록되는 작업 종류"""

    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    SWAP_DEPOSIT = "SWAP_DEPOSIT"
    SWAP_STRANDED = "SWAP_STRANDED"  # Cap 초과로 계정에 반영되지 못한 Swap 결과
    RECOVERY = "RECOVERY"


class FlowStage(str, Enum):
    """요청 처리 단계 (로그/에러 컨텍스트용)

    Direct: VALIDATING → VALUING → CAPPING/LIMITING → SETTLING
    Swap:   INTAKE → EXCHANGE → RECONCILE → CAPPING → SETTLING
    """

    VALIDATING = "VALIDATING"
    VALUING = "VALUING"
    CAPPING = "CAPPING"
    LIMITING = "LIMITING"
    INTAKE = "INTAKE"
    EXCHANGE = "EXCHANGE"
    RECONCILE = "RECONCILE"
    SETTLING = "SETTLING"


class AdminAction(str, Enum):
    """Access Gate 권한 검사 대상 관리 작업"""

    REGISTER_ASSET = "REGISTER_ASSET"
    UNREGISTER_ASSET = "UNREGISTER_ASSET"
    SET_MAX_WITHDRAW = "SET_MAX_WITHDRAW"
    SET_STALENESS = "SET_STALENESS"
    RECOVER_FUNDS = "RECOVER_FUNDS"


@dataclass(frozen=True)
class AssetRegistration:
    """자산 등록 정보 (불변)

    decimal_override == 0 이면 자산 자체가 보고하는 자릿수 사용.
    """

    asset: str
    accepted: bool
    price_reference: str
    decimal_override: int = 0
    updated_by: str | None = None
    updated_at: str | None = None

    @property
    def has_decimal_override(self) -> bool:
        """자릿수 오버라이드 여부"""
        return self.decimal_override > 0


@dataclass(frozen=True)
class VaultConfig:
    """런타임 설정 (config_store 'vault' 키)

    모든 금액은 내부 6자리 스케일, staleness는 초 단위.
    """

    bank_cap: int
    max_withdraw_value: int
    staleness_tolerance_sec: int

    def to_dict(self) -> dict[str, Any]:
        """JSON 저장용 (정수는 문자열로 저장)"""
        return {
            "bank_cap": str(self.bank_cap),
            "max_withdraw_value": str(self.max_withdraw_value),
            "staleness_tolerance_sec": self.staleness_tolerance_sec,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VaultConfig":
        return cls(
            bank_cap=int(data["bank_cap"]),
            max_withdraw_value=int(data["max_withdraw_value"]),
            staleness_tolerance_sec=int(data["staleness_tolerance_sec"]),
        )


@dataclass(frozen=True)
class SettlementReceipt:
    """완료된 작업의 결과

    Attributes:
        entry_id: 정산 저널 ID
        kind: 작업 종류
        asset: 입력/출금 자산
        account: 대상 계정
        amount: 자산 네이티브 단위 수량
        value: 내부 6자리 스케일 평가액
        credited_asset: 실제로 잔고가 변경된 자산 (Swap이면 스테이블 자산)
        credited_amount: 실제 변경 수량
        reported_amount: 거래소가 보고한 수령량 (Swap 전용, 참고값)
        total_after: 작업 후 전체 평가 합계
    """

    entry_id: str
    kind: OperationKind
    asset: str
    account: str
    amount: int
    value: int
    credited_asset: str
    credited_amount: int
    total_after: int
    reported_amount: int | None = None
    ts: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리로 변환 (직렬화용)"""
        return {
            "entry_id": self.entry_id,
            "kind": self.kind.value,
            "asset": self.asset,
            "account": self.account,
            "amount": str(self.amount),
            "value": str(self.value),
            "credited_asset": self.credited_asset,
            "credited_amount": str(self.credited_amount),
            "reported_amount": (
                str(self.reported_amount) if self.reported_amount is not None else None
            ),
            "total_after": str(self.total_after),
            "ts": self.ts.isoformat() if self.ts else None,
        }
