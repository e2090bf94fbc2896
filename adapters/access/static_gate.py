"""
정적 Access Gate

vault.yaml의 admins 목록(허용 목록) 기반 권한 검사.
IAccessGate Protocol 준수.
"""

import logging
from typing import Iterable

logger = logging.getLogger(__name__)


class StaticAccessGate:
    """허용 목록 기반 Access Gate

    Args:
        admins: 모든 관리 작업이 허용되는 principal 목록
        grants: principal별 개별 허용 작업 (선택)

    사용 예시:
    ```python
    gate = StaticAccessGate(admins=["admin:ops"])
    gate.is_authorized("admin:ops", "RECOVER_FUNDS")  # True
    ```
    """

    def __init__(
        self,
        admins: Iterable[str] = (),
        grants: dict[str, Iterable[str]] | None = None,
    ):
        self.admins = frozenset(admins)
        self.grants = {
            principal: frozenset(actions) for principal, actions in (grants or {}).items()
        }

    def is_authorized(self, principal: str, action: str) -> bool:
        """principal이 action을 수행할 수 있는지 여부"""
        if not principal:
            return False

        allowed = principal in self.admins or action in self.grants.get(principal, frozenset())
        if not allowed:
            logger.warning(
                "Access denied",
                extra={"principal": principal, "action": action},
            )
        return allowed
