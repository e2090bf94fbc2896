"""
Binance Rate Limit 관리

응답 헤더에서 사용 가중치를 추적하고,
임계값 초과 시 경고 또는 요청 제한.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from core.constants import RateLimitThresholds


class RateLimitError(Exception):
    """Rate Limit 초과 에러

    429/418 응답 수신 또는 자체 임계값 도달 시 발생.
    retry_after 초 후 재시도 필요.
    """

    def __init__(self, retry_after: int, message: str = "Rate limit exceeded"):
        self.retry_after = retry_after
        self.message = message
        super().__init__(f"{message}. Retry after {retry_after} seconds.")


class BinanceApiError(Exception):
    """Binance API 에러

    API 응답에서 에러 코드를 받았거나 응답 형식이 잘못되었을 때 발생.
    """

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(f"Binance API Error [{code}]: {message}")


@dataclass
class RateLimitTracker:
    """Rate Limit 추적기

    Binance Spot 응답 헤더:
    - X-MBX-USED-WEIGHT-1m: 1분간 사용된 요청 가중치
    - Retry-After: 429 응답 시 대기 시간 (초)
    """

    used_weight_1m: int = 0
    retry_after: int = 0
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def update_from_headers(self, headers: dict[str, Any]) -> None:
        """응답 헤더에서 Rate Limit 정보 업데이트

        Args:
            headers: HTTP 응답 헤더 (대소문자 무관)
        """
        headers_lower = {k.lower(): v for k, v in headers.items()}

        weight = headers_lower.get("x-mbx-used-weight-1m")
        if weight is not None:
            self.used_weight_1m = int(weight)

        retry_after = headers_lower.get("retry-after")
        if retry_after is not None:
            self.retry_after = int(retry_after)

        self.last_updated = datetime.now(timezone.utc)

    @property
    def should_warn(self) -> bool:
        """경고 임계값 도달 여부"""
        return self.used_weight_1m >= RateLimitThresholds.WEIGHT_WARN

    @property
    def should_stop(self) -> bool:
        """요청 중단 필요 여부"""
        return self.used_weight_1m >= RateLimitThresholds.WEIGHT_STOP

    def reset(self) -> None:
        """카운터 리셋"""
        self.used_weight_1m = 0
        self.retry_after = 0
        self.last_updated = datetime.now(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리로 변환 (로깅용)"""
        return {
            "used_weight_1m": self.used_weight_1m,
            "retry_after": self.retry_after,
            "last_updated": self.last_updated.isoformat(),
            "should_warn": self.should_warn,
            "should_stop": self.should_stop,
        }
