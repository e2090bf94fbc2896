"""
관리 라우트

자산 등록/해제, 런타임 설정 변경, 미귀속 보관 자산 회수.
요청 주체는 X-Principal 헤더로 전달하며 Access Gate가 권한을 판단한다.
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from core.types import AdminAction
from vault.custodian import Custodian
from web.dependencies import get_custodian, get_principal
from web.models.requests import AssetRegisterRequest, RecoverRequest, VaultConfigUpdateRequest
from web.models.responses import AssetResponse, JournalEntryResponse, VaultConfigResponse

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.put("/assets/{asset}", response_model=AssetResponse)
async def register_asset(
    request: AssetRegisterRequest,
    asset: str = Path(..., description="자산 ID"),
    principal: str = Depends(get_principal),
    custodian: Custodian = Depends(get_custodian),
) -> AssetResponse:
    """자산 등록 (기존 등록 덮어씀)"""
    registration = await custodian.admin.register_asset(
        principal,
        asset,
        request.price_reference,
        decimal_override=request.decimal_override,
        accepted=request.accepted,
    )
    return AssetResponse(
        asset=registration.asset,
        accepted=registration.accepted,
        price_reference=registration.price_reference,
        decimal_override=registration.decimal_override,
        updated_by=registration.updated_by,
        updated_at=registration.updated_at,
    )


@router.delete("/assets/{asset}")
async def unregister_asset(
    asset: str = Path(..., description="자산 ID"),
    principal: str = Depends(get_principal),
    custodian: Custodian = Depends(get_custodian),
) -> dict[str, str]:
    """자산 등록 해제"""
    await custodian.admin.unregister_asset(principal, asset)
    return {"message": f"Asset unregistered: {asset}"}


@router.patch("/config", response_model=VaultConfigResponse)
async def update_config(
    request: VaultConfigUpdateRequest,
    principal: str = Depends(get_principal),
    custodian: Custodian = Depends(get_custodian),
) -> VaultConfigResponse:
    """런타임 설정 변경 (bank_cap 제외)"""
    if request.max_withdraw_value is None and request.staleness_tolerance_sec is None:
        raise HTTPException(status_code=422, detail="No config field to update")

    config = None
    if request.max_withdraw_value is not None:
        config = await custodian.admin.set_max_withdraw_value(
            principal, request.max_withdraw_value
        )
    if request.staleness_tolerance_sec is not None:
        config = await custodian.admin.set_staleness_tolerance(
            principal, request.staleness_tolerance_sec
        )

    assert config is not None
    return VaultConfigResponse(**config.to_dict())


@router.post("/recover", response_model=JournalEntryResponse)
async def recover_funds(
    request: RecoverRequest,
    principal: str = Depends(get_principal),
    custodian: Custodian = Depends(get_custodian),
) -> JournalEntryResponse:
    """미귀속 보관 자산 회수"""
    entry = await custodian.admin.recover_funds(
        principal,
        request.asset,
        request.to_account,
        request.amount,
    )
    return JournalEntryResponse(**entry.to_dict())


@router.get("/stranded", response_model=list[JournalEntryResponse])
async def list_stranded(
    limit: int = Query(default=100, ge=1, le=1000, description="조회 개수"),
    principal: str = Depends(get_principal),
    custodian: Custodian = Depends(get_custodian),
) -> list[JournalEntryResponse]:
    """Cap 초과로 계정에 반영되지 못한 Swap 결과 (회수 대상)"""
    custodian.admin.authorize(principal, AdminAction.RECOVER_FUNDS)
    entries = await custodian.admin.stranded_entries(limit=limit)
    return [JournalEntryResponse(**e.to_dict()) for e in entries]
