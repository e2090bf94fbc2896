"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
수량은 정수 또는 정수 문자열로 받는다 (큰 값의 JSON 정밀도 손실 방지).
"""

from pydantic import BaseModel, Field


class DepositRequest(BaseModel):
    """직접 입금 요청"""

    asset: str = Field(..., min_length=1, description="입금 자산")
    account: str = Field(..., min_length=1, description="예치 계정")
    amount: int = Field(..., ge=0, description="자산 네이티브 단위 수량")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"asset": "USDC", "account": "alice", "amount": "100000000"},
                {"asset": "WETH", "account": "alice", "amount": "100000000000000000"},
            ]
        }
    }


class WithdrawRequest(BaseModel):
    """직접 출금 요청"""

    asset: str = Field(..., min_length=1, description="출금 자산")
    account: str = Field(..., min_length=1, description="잔고 차감 계정")
    amount: int = Field(..., ge=0, description="자산 네이티브 단위 수량")
    recipient: str | None = Field(default=None, description="수령 계정 (생략 시 account)")


class SwapDepositRequest(BaseModel):
    """Swap 입금 요청"""

    asset_in: str = Field(..., min_length=1, description="입력 자산 (스테이블 자산 제외)")
    account: str = Field(..., min_length=1, description="적립 계정")
    amount: int = Field(..., ge=0, description="입력 수량")
    min_amount_out: int = Field(default=0, ge=0, description="최소 수령량 (1 미만이면 1)")


class AssetRegisterRequest(BaseModel):
    """자산 등록 요청"""

    price_reference: str = Field(..., description="가격 참조 (예: ETHUSDT)")
    decimal_override: int = Field(default=0, ge=0, description="자릿수 오버라이드 (0 = 자산 보고값)")
    accepted: bool = Field(default=True, description="직접 입금 허용 여부")


class VaultConfigUpdateRequest(BaseModel):
    """런타임 설정 변경 요청 (bank_cap은 변경 불가)"""

    max_withdraw_value: int | None = Field(default=None, ge=0, description="1회 출금 한도")
    staleness_tolerance_sec: int | None = Field(
        default=None, ge=0, description="가격 staleness 허용 시간 (초)"
    )

    model_config = {"extra": "forbid"}


class RecoverRequest(BaseModel):
    """미귀속 보관 자산 회수 요청"""

    asset: str = Field(..., min_length=1, description="회수 자산")
    to_account: str = Field(..., min_length=1, description="수령 계정")
    amount: int = Field(..., ge=0, description="회수 수량")
