"""
Binance 모델 변환 테스트

티커 응답 -> PriceReading 변환
"""

from decimal import Decimal

import pytest

from adapters.binance.models import parse_ticker
from adapters.binance.rate_limiter import BinanceApiError
from adapters.models import to_scaled_int


class TestParseTicker:
    """parse_ticker 테스트"""

    def test_parse(self) -> None:
        reading = parse_ticker({"lastPrice": "0.00001234", "closeTime": 1700000000999})

        assert reading.price == 1234
        assert reading.decimals == 8
        assert reading.updated_at == 1_700_000_000
        assert reading.as_decimal == Decimal("0.00001234")

    @pytest.mark.parametrize(
        "data",
        [
            {"closeTime": 1700000000000},
            {"lastPrice": "abc", "closeTime": 1700000000000},
            {"lastPrice": "1.0", "closeTime": None},
        ],
    )
    def test_malformed(self, data: dict) -> None:
        """필드 누락/형식 오류 → BinanceApiError"""
        with pytest.raises(BinanceApiError):
            parse_ticker(data)


class TestToScaledInt:
    """to_scaled_int 테스트"""

    def test_truncates_toward_zero(self) -> None:
        assert to_scaled_int("2000.123456789", 8) == 200_012_345_678
        assert to_scaled_int("-1.999", 0) == -1
