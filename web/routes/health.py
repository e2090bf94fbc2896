"""
헬스 체크 엔드포인트

GET /api/health - 서버 상태 확인
"""

from fastapi import APIRouter, Depends

from core.constants import VERSION
from vault.custodian import Custodian
from web.dependencies import get_custodian
from web.models.responses import HealthResponse

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    custodian: Custodian = Depends(get_custodian),
) -> HealthResponse:
    """서버 상태 확인

    Returns:
        HealthResponse: status, mode, version, stable_asset
    """
    return HealthResponse(
        status="ok",
        mode=custodian.settings.mode.value,
        version=VERSION,
        stable_asset=custodian.stable_asset,
    )
