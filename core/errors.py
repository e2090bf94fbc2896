"""
Vault 에러 정의

모든 에러는 호출 경계에서 복구 가능 (영속 상태를 손상시키지 않음).
kind는 호출자가 분기할 수 있는 고정 문자열이며,
details에는 원인 값(시도 금액, 한도 등)이 담긴다.
"""

from typing import Any


class VaultError(Exception):
    """Vault 에러 기본 클래스

    Args:
        message: 사람이 읽을 수 있는 메시지
        **details: 원인 값 (시도 금액, cap 등)
    """

    kind: str = "VaultError"

    def __init__(self, message: str, **details: Any):
        self.message = message
        self.details: dict[str, Any] = details
        super().__init__(f"[{self.kind}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """API 응답용 딕셔너리 (정수는 문자열로 직렬화)"""
        return {
            "kind": self.kind,
            "message": self.message,
            "details": {
                key: str(value) if isinstance(value, int) and not isinstance(value, bool) else value
                for key, value in self.details.items()
            },
        }


class ZeroAmountError(VaultError):
    """수량 0 요청"""

    kind = "ZeroAmount"


class CapExceededError(VaultError):
    """전체 평가 합계가 bank cap을 초과"""

    kind = "CapExceeded"


class InsufficientBalanceError(VaultError):
    """잔고 부족"""

    kind = "InsufficientBalance"


class AssetNotSupportedError(VaultError):
    """등록되지 않은(또는 허용되지 않은) 자산"""

    kind = "AssetNotSupported"


class PriceUnavailableError(VaultError):
    """가격이 0 이하이거나 조회 불가"""

    kind = "PriceUnavailable"


class PriceStaleError(VaultError):
    """가격이 staleness 허용 범위를 벗어남"""

    kind = "PriceStale"


class MaxWithdrawExceededError(VaultError):
    """1회 출금 한도 초과"""

    kind = "MaxWithdrawExceeded"


class TransferFailureError(VaultError):
    """자산 이동 서비스 실패"""

    kind = "TransferFailure"


class SwapFailureError(VaultError):
    """거래소 변환 실패 또는 실현 수령량 0"""

    kind = "SwapFailure"


class InvalidReferenceError(VaultError):
    """잘못된 자산 ID / 가격 참조"""

    kind = "InvalidReference"


class ReentrancyError(VaultError):
    """진행 중인 원장 변경 작업 내부에서의 재진입 호출"""

    kind = "Reentrancy"


class UnauthorizedError(VaultError):
    """Access Gate 권한 없음"""

    kind = "Unauthorized"


ERROR_KINDS: dict[str, type[VaultError]] = {
    cls.kind: cls
    for cls in (
        ZeroAmountError,
        CapExceededError,
        InsufficientBalanceError,
        AssetNotSupportedError,
        PriceUnavailableError,
        PriceStaleError,
        MaxWithdrawExceededError,
        TransferFailureError,
        SwapFailureError,
        InvalidReferenceError,
        ReentrancyError,
        UnauthorizedError,
    )
}
