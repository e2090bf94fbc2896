"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
Custodian은 앱 생명주기 동안 app.state에 보관된다.
"""

from fastapi import Header, HTTPException, Request

from vault.custodian import Custodian


def get_custodian(request: Request) -> Custodian:
    """앱에 연결된 Custodian 반환

    Raises:
        HTTPException: 503 (아직 시작되지 않음)
    """
    custodian = getattr(request.app.state, "custodian", None)
    if custodian is None:
        raise HTTPException(status_code=503, detail="Vault not ready")
    return custodian


def get_principal(x_principal: str | None = Header(default=None)) -> str:
    """요청 주체 (X-Principal 헤더, 없으면 빈 문자열)

    권한 판단은 Access Gate가 한다.
    """
    return (x_principal or "").strip()
