"""
Binance 어댑터

Binance Spot 공개 시세 API 기반 가격 오라클.
"""

from adapters.binance.price_oracle import BinanceTickerOracle
from adapters.binance.rate_limiter import BinanceApiError, RateLimitError, RateLimitTracker
from adapters.binance.models import parse_ticker

__all__ = [
    "BinanceTickerOracle",
    "BinanceApiError",
    "RateLimitError",
    "RateLimitTracker",
    "parse_ticker",
]
