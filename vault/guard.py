"""
Operation Guard

원장을 변경하는 모든 작업(입금, 출금, Swap 입금, 회수)이 공유하는 단일 가드.

- 서로 다른 요청은 asyncio.Lock으로 직렬화 (한 번에 하나만 진행)
- 진행 중인 작업의 협력자 콜백 안에서 다시 작업을 호출하면
  락을 기다리지 않고 즉시 ReentrancyError (ContextVar로 감지)
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import AsyncIterator

from core.errors import ReentrancyError

logger = logging.getLogger(__name__)


class OperationGuard:
    """원장 변경 작업 가드

    사용 예시:
    ```python
    guard = OperationGuard()

    async with guard.hold("deposit"):
        ...  # 이 블록 안의 협력자 호출이 다시 hold()에 들어오면 ReentrancyError
    ```
    """

    def __init__(self):
        self._lock = asyncio.Lock()
        self._active: ContextVar[str | None] = ContextVar(
            f"vault_guard_{id(self)}", default=None
        )

    @property
    def is_busy(self) -> bool:
        """진행 중인 작업 존재 여부"""
        return self._lock.locked()

    @property
    def active_operation(self) -> str | None:
        """현재 컨텍스트에서 진행 중인 작업 이름"""
        return self._active.get()

    @asynccontextmanager
    async def hold(self, operation: str) -> AsyncIterator[None]:
        """작업 구간 진입

        Args:
            operation: 작업 이름 (로그/에러 컨텍스트)

        Raises:
            ReentrancyError: 같은 실행 컨텍스트에서 이미 작업이 진행 중
        """
        active = self._active.get()
        if active is not None:
            logger.warning(
                "Re-entrant operation rejected",
                extra={"operation": operation, "active": active},
            )
            raise ReentrancyError(
                "진행 중인 작업 안에서 다시 호출할 수 없습니다",
                operation=operation,
                active=active,
            )

        async with self._lock:
            token = self._active.set(operation)
            try:
                yield
            finally:
                self._active.reset(token)
