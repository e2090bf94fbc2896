"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
금액은 모두 문자열 (정수 정밀도 유지).
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    mode: str = Field(..., description="운영 모드 (testnet/production)")
    version: str = Field(..., description="API 버전")
    stable_asset: str = Field(..., description="기준 스테이블 자산")


class ErrorResponse(BaseModel):
    """에러 응답"""

    kind: str = Field(..., description="에러 종류 (CapExceeded 등)")
    message: str = Field(..., description="에러 메시지")
    details: dict[str, Any] = Field(default_factory=dict, description="원인 값")


class ReceiptResponse(BaseModel):
    """정산 결과 응답"""

    entry_id: str = Field(..., description="정산 저널 ID")
    kind: str = Field(..., description="작업 종류")
    asset: str = Field(..., description="입력/출금 자산")
    account: str = Field(..., description="대상 계정")
    amount: str = Field(..., description="네이티브 단위 수량")
    value: str = Field(..., description="내부 6자리 스케일 평가액")
    credited_asset: str = Field(..., description="잔고가 변경된 자산")
    credited_amount: str = Field(..., description="잔고 변경량")
    reported_amount: str | None = Field(default=None, description="거래소 보고 수령량 (참고값)")
    total_after: str = Field(..., description="작업 후 전체 평가 합계")
    ts: str | None = Field(default=None, description="정산 시각 (UTC)")


class AssetResponse(BaseModel):
    """자산 등록 정보 응답"""

    asset: str
    accepted: bool
    price_reference: str
    decimal_override: int
    updated_by: str | None = None
    updated_at: str | None = None


class StatusResponse(BaseModel):
    """Vault 현황 응답"""

    mode: str
    stable_asset: str
    total_valued: str
    bank_cap: str
    headroom: str = Field(..., description="Cap까지 남은 평가액")
    max_withdraw_value: str
    staleness_tolerance_sec: int
    busy: bool = Field(..., description="진행 중인 원장 변경 작업 존재 여부")
    assets: list[dict[str, Any]] = Field(default_factory=list)


class BalanceResponse(BaseModel):
    """계정 잔고 응답"""

    asset: str
    account: str
    amount: str


class VaultConfigResponse(BaseModel):
    """런타임 설정 응답"""

    bank_cap: str
    max_withdraw_value: str
    staleness_tolerance_sec: int


class JournalEntryResponse(BaseModel):
    """정산 저널 항목 응답"""

    entry_id: str
    kind: str
    asset: str
    account: str
    amount: str
    value: str
    reported_amount: str | None = None
    memo: str | None = None
    extra: dict[str, Any] = Field(default_factory=dict)
    ts: str
