"""
Mock 가격 오라클

테스트용 고정 가격 오라클.
IPriceOracle Protocol 준수.
"""

from adapters.mock.transfer_service import MockCollaboratorError
from adapters.models import PriceReading
from core.constants import BinanceEndpoints


class MockPriceOracle:
    """Mock 가격 오라클

    사용 예시:
    ```python
    oracle = MockPriceOracle()
    oracle.set_price("ETHUSDT", 200_000_000_000, updated_at=1_700_000_000)  # $2000
    ```
    """

    def __init__(self):
        self.readings: dict[str, PriceReading] = {}
        self.calls: list[str] = []
        self.should_fail: bool = False

    def set_price(
        self,
        reference: str,
        price: int,
        decimals: int = BinanceEndpoints.PRICE_DECIMALS,
        updated_at: int = 0,
    ) -> None:
        """가격 설정 (0 이하 가격도 허용)"""
        self.readings[reference] = PriceReading(
            price=price,
            decimals=decimals,
            updated_at=updated_at,
        )

    @property
    def call_count(self) -> int:
        """latest() 호출 횟수"""
        return len(self.calls)

    async def latest(self, reference: str) -> PriceReading:
        """최신 가격 조회"""
        self.calls.append(reference)

        if self.should_fail:
            raise MockCollaboratorError("Mock oracle failure")
        if reference not in self.readings:
            raise MockCollaboratorError(f"No price for {reference}")

        return self.readings[reference]
