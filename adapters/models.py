"""
어댑터 공통 데이터 모델

외부 협력자(가격 오라클 등) 응답을 표준화한 도메인 모델.
모든 가격/수량은 정수 + 자릿수(decimals) 조합으로 표현.
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PriceReading:
    """가격 오라클 조회 결과

    Attributes:
        price: 정수 가격 (price / 10**decimals = USD 가격). 0 이하일 수 있음
        decimals: 가격 자릿수
        updated_at: 가격 갱신 시각 (Unix 초)
    """

    price: int
    decimals: int
    updated_at: int

    @property
    def as_decimal(self) -> Decimal:
        """사람이 읽는 USD 가격"""
        return Decimal(self.price).scaleb(-self.decimals)


def to_scaled_int(value: str | Decimal, decimals: int) -> int:
    """10진 문자열을 decimals 자릿수 정수로 변환 (0 방향 절사)

    Example:
        >>> to_scaled_int("2000.12345678", 8)
        200012345678
    """
    scaled = Decimal(str(value)).scaleb(decimals)
    return int(scaled)  # int(Decimal)은 0 방향 절사
