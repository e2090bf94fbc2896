"""
Vault 라우트

입금/출금/Swap 입금 및 현황 조회 API.
VaultError는 app.py의 예외 핸들러가 {kind, message, details}로 변환한다.
"""

from fastapi import APIRouter, Depends, Path

from vault.custodian import Custodian
from web.dependencies import get_custodian
from web.models.requests import DepositRequest, SwapDepositRequest, WithdrawRequest
from web.models.responses import BalanceResponse, ReceiptResponse, StatusResponse

router = APIRouter(prefix="/api/vault", tags=["Vault"])


@router.post("/deposit", response_model=ReceiptResponse)
async def deposit(
    request: DepositRequest,
    custodian: Custodian = Depends(get_custodian),
) -> ReceiptResponse:
    """직접 입금"""
    receipt = await custodian.deposit(request.asset, request.account, request.amount)
    return ReceiptResponse(**receipt.to_dict())


@router.post("/withdraw", response_model=ReceiptResponse)
async def withdraw(
    request: WithdrawRequest,
    custodian: Custodian = Depends(get_custodian),
) -> ReceiptResponse:
    """직접 출금"""
    receipt = await custodian.withdraw(
        request.asset,
        request.account,
        request.amount,
        recipient=request.recipient,
    )
    return ReceiptResponse(**receipt.to_dict())


@router.post("/swap-deposit", response_model=ReceiptResponse)
async def swap_deposit(
    request: SwapDepositRequest,
    custodian: Custodian = Depends(get_custodian),
) -> ReceiptResponse:
    """Swap 입금 (스테이블 자산으로 적립)"""
    receipt = await custodian.swap_deposit(
        request.asset_in,
        request.account,
        request.amount,
        min_amount_out=request.min_amount_out,
    )
    return ReceiptResponse(**receipt.to_dict())


@router.get("/status", response_model=StatusResponse)
async def get_status(
    custodian: Custodian = Depends(get_custodian),
) -> StatusResponse:
    """Vault 현황 (합계, Cap 여유, 한도, 등록 자산)"""
    return StatusResponse(**await custodian.status())


@router.get("/balances/{asset}/{account}", response_model=BalanceResponse)
async def get_balance(
    asset: str = Path(..., description="자산"),
    account: str = Path(..., description="계정"),
    custodian: Custodian = Depends(get_custodian),
) -> BalanceResponse:
    """계정 잔고 조회"""
    amount = await custodian.balance_of(asset, account)
    return BalanceResponse(asset=asset, account=account, amount=str(amount))
