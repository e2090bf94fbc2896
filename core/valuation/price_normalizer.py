"""
Price Normalizer

오라클 가격 + 자산 자릿수 → 내부 6자리 고정소수점 USD 금액.

    internal = floor(amount * price * 10^6 / (10^asset_scale * 10^price_scale))

정수 나눗셈으로 0 방향 절사 (입금 시 Vault에 유리, 반올림 아님).
Python int는 임의 정밀도라 18자리 자산 × 큰 가격에서도 오버플로 없음.
"""

from core.constants import INTERNAL_DECIMALS
from core.errors import PriceStaleError, PriceUnavailableError


def check_price(
    price: int,
    price_timestamp: int,
    now_timestamp: int,
    staleness_tolerance: int,
) -> None:
    """가격 유효성 검증

    Raises:
        PriceUnavailableError: price <= 0
        PriceStaleError: tolerance > 0 이고 now > ts + tolerance
    """
    if price <= 0:
        raise PriceUnavailableError("가격이 0 이하입니다", price=price)

    if staleness_tolerance > 0 and now_timestamp > price_timestamp + staleness_tolerance:
        raise PriceStaleError(
            "가격이 허용 시간보다 오래되었습니다",
            price_timestamp=price_timestamp,
            now=now_timestamp,
            tolerance=staleness_tolerance,
            age=now_timestamp - price_timestamp,
        )


def value_of(
    asset_amount: int,
    asset_scale: int,
    price: int,
    price_scale: int,
    price_timestamp: int,
    now_timestamp: int,
    staleness_tolerance: int,
) -> int:
    """자산 수량의 내부 스케일 USD 평가액

    Args:
        asset_amount: 자산 네이티브 단위 수량
        asset_scale: 자산 자릿수
        price: 정수 가격
        price_scale: 가격 자릿수
        price_timestamp: 가격 갱신 시각 (초)
        now_timestamp: 현재 시각 (초)
        staleness_tolerance: 허용 경과 시간 (초, 0이면 검사 안 함)

    Returns:
        내부 6자리 스케일 평가액 (절사)

    Example:
        >>> value_of(10**14, 18, 200_000_000_000, 8, 0, 0, 0)  # 0.0001 ETH @ $2000
        200000
    """
    if asset_amount < 0:
        raise ValueError(f"asset_amount must be non-negative: {asset_amount}")
    if asset_scale < 0 or price_scale < 0:
        raise ValueError(f"scales must be non-negative: {asset_scale}, {price_scale}")

    check_price(price, price_timestamp, now_timestamp, staleness_tolerance)

    numerator = asset_amount * price * 10**INTERNAL_DECIMALS
    denominator = 10**asset_scale * 10**price_scale
    return numerator // denominator
