"""
Binance API 응답 -> 공통 모델 변환

Binance Spot 시세 응답을 adapters.models의 PriceReading으로 변환.
가격 문자열은 Decimal을 거쳐 고정 자릿수 정수로 변환.
"""

from decimal import InvalidOperation
from typing import Any

from adapters.binance.rate_limiter import BinanceApiError
from adapters.models import PriceReading, to_scaled_int
from core.constants import BinanceEndpoints


def parse_ticker(data: dict[str, Any]) -> PriceReading:
    """Binance 24hr 티커 응답 -> PriceReading 모델

    Binance GET /api/v3/ticker/24hr?symbol=ETHUSDT 응답 예시:
    {
        "symbol": "ETHUSDT",
        "priceChange": "-12.30000000",
        "lastPrice": "2000.12000000",
        "openTime": 1699913600000,
        "closeTime": 1700000000000,
        "count": 812345
    }

    closeTime(밀리초)을 가격 갱신 시각(초)으로 사용.
    """
    try:
        price = to_scaled_int(data["lastPrice"], BinanceEndpoints.PRICE_DECIMALS)
        updated_at = int(data["closeTime"]) // 1000
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        raise BinanceApiError(code=-1, message=f"Malformed ticker response: {data!r}") from e

    return PriceReading(
        price=price,
        decimals=BinanceEndpoints.PRICE_DECIMALS,
        updated_at=updated_at,
    )
