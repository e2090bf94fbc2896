"""
FastAPI 애플리케이션

라우터 등록, 에러 변환, Custodian 생명주기 관리.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.constants import VERSION
from core.errors import VaultError
from vault.custodian import Custodian
from web.routes import admin, health, vault

logger = logging.getLogger(__name__)


# VaultError.kind → HTTP 상태 코드 (없으면 400)
ERROR_STATUS: dict[str, int] = {
    "Unauthorized": 403,
    "Reentrancy": 409,
    "ZeroAmount": 422,
    "InvalidReference": 422,
}


async def vault_error_handler(request: Request, exc: VaultError) -> JSONResponse:
    """VaultError → {kind, message, details}"""
    status_code = ERROR_STATUS.get(exc.kind, 400)
    logger.info(
        f"Request rejected: {exc.kind}",
        extra={"path": request.url.path, "status_code": status_code},
    )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """입력 값 오류 (음수 설정값, 변경 불가 필드 등)"""
    return JSONResponse(
        status_code=422,
        content={"kind": "InvalidRequest", "message": str(exc), "details": {}},
    )


def create_app(custodian: Custodian | None = None) -> FastAPI:
    """앱 생성

    Args:
        custodian: 미리 구성된 Custodian (None이면 시작 시 vault.yaml로 구성)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """앱 생명주기 관리"""
        runtime = None
        if app.state.custodian is None:
            from core.config.loader import get_settings
            from vault.bootstrap import open_vault

            settings = get_settings()
            runtime = await open_vault(settings.vault)
            app.state.custodian = runtime.custodian
            logger.info("Web: Custodian 초기화 완료")

        yield

        if runtime is not None:
            await runtime.close()
            app.state.custodian = None

    app = FastAPI(
        title="Vault API",
        description="다중 자산 보관 Vault API",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.custodian = custodian

    # CORS 설정 (개발용)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(VaultError, vault_error_handler)
    app.add_exception_handler(ValueError, value_error_handler)

    # =========================================================================
    # API 라우터 등록
    # =========================================================================

    app.include_router(health.router)
    app.include_router(vault.router)
    app.include_router(admin.router)

    return app
