"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    AssetRegisterRequest,
    DepositRequest,
    RecoverRequest,
    SwapDepositRequest,
    VaultConfigUpdateRequest,
    WithdrawRequest,
)
from web.models.responses import (
    AssetResponse,
    BalanceResponse,
    ErrorResponse,
    HealthResponse,
    JournalEntryResponse,
    ReceiptResponse,
    StatusResponse,
    VaultConfigResponse,
)

__all__ = [
    # Requests
    "AssetRegisterRequest",
    "DepositRequest",
    "RecoverRequest",
    "SwapDepositRequest",
    "VaultConfigUpdateRequest",
    "WithdrawRequest",
    # Responses
    "AssetResponse",
    "BalanceResponse",
    "ErrorResponse",
    "HealthResponse",
    "JournalEntryResponse",
    "ReceiptResponse",
    "StatusResponse",
    "VaultConfigResponse",
]
