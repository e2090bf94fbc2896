"""
Binance Spot 시세 기반 가격 오라클

공개 시세 엔드포인트(/api/v3/ticker/24hr)를 사용하므로 API 키 불필요.
IPriceOracle Protocol 준수.

가격 참조(price_reference)는 Binance 심볼 (예: ETHUSDT).
"""

import asyncio
import logging
from typing import Any

import httpx

from adapters.binance.models import parse_ticker
from adapters.binance.rate_limiter import (
    BinanceApiError,
    RateLimitError,
    RateLimitTracker,
)
from adapters.models import PriceReading
from core.constants import BinanceEndpoints

logger = logging.getLogger(__name__)


class BinanceTickerOracle:
    """Binance 티커 가격 오라클

    IPriceOracle Protocol 구현.
    반환 가격의 유효성(0 이하, staleness)은 검증하지 않는다.

    Args:
        base_url: REST API 베이스 URL
        timeout: 요청 타임아웃 (초)
        max_retries: 최대 재시도 횟수 (타임아웃/네트워크 오류 시)
        transport: httpx 전송 계층 (테스트에서 MockTransport 주입)
    """

    def __init__(
        self,
        base_url: str = BinanceEndpoints.PROD_REST_URL,
        timeout: float = 10.0,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.transport = transport

        self.rate_tracker = RateLimitTracker()
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 가져오기 (lazy initialization)"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self.transport)
        return self._client

    async def close(self) -> None:
        """HTTP 클라이언트 종료"""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """공개 API GET 요청

        Raises:
            RateLimitError: 429/418 응답 또는 가중치 임계값 도달
            BinanceApiError: API 에러 응답
        """
        if self.rate_tracker.should_stop:
            logger.warning(
                "Rate limit threshold reached",
                extra={"rate_info": self.rate_tracker.to_dict()},
            )
            raise RateLimitError(retry_after=60, message="Request weight threshold reached")

        url = f"{self.base_url}{path}"
        client = await self._get_client()

        for attempt in range(self.max_retries):
            try:
                response = await client.get(url, params=params)
            except httpx.TimeoutException:
                logger.warning("Request timeout", extra={"path": path, "attempt": attempt + 1})
                if attempt < self.max_retries - 1:
                    await asyncio.sleep(1 * (attempt + 1))
                    continue
                raise
            except httpx.RequestError as e:
                logger.error(
                    "Request error",
                    extra={"path": path, "error": str(e), "attempt": attempt + 1},
                )
                if attempt < self.max_retries - 1:
                    await asyncio.sleep(1 * (attempt + 1))
                    continue
                raise

            self.rate_tracker.update_from_headers(dict(response.headers))
            if self.rate_tracker.should_warn:
                logger.warning(
                    "Rate limit weight high",
                    extra={"used_weight_1m": self.rate_tracker.used_weight_1m},
                )

            # 시세 조회는 가격 평가 경로에 있으므로 429를 기다리지 않고 즉시 실패
            if response.status_code in (418, 429):
                retry_after = int(response.headers.get("Retry-After", 30))
                logger.warning("Rate limited by Binance", extra={"retry_after": retry_after})
                raise RateLimitError(retry_after=retry_after)

            if response.status_code >= 400:
                try:
                    error_data = response.json()
                    code = error_data.get("code", response.status_code)
                    message = error_data.get("msg", response.text)
                except ValueError:
                    code = response.status_code
                    message = response.text
                raise BinanceApiError(code=code, message=message)

            return response.json()

        raise BinanceApiError(code=-1, message="All retries failed")

    async def latest(self, reference: str) -> PriceReading:
        """최신 가격 조회

        Args:
            reference: Binance 심볼 (예: ETHUSDT)

        Returns:
            PriceReading (8자리 정수 가격, closeTime 초)
        """
        symbol = reference.strip().upper()
        data = await self._request(BinanceEndpoints.TICKER_24HR_PATH, {"symbol": symbol})
        reading = parse_ticker(data)

        logger.debug(
            f"Ticker {symbol}: {reading.as_decimal}",
            extra={"updated_at": reading.updated_at},
        )
        return reading

    async def __aenter__(self) -> "BinanceTickerOracle":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
