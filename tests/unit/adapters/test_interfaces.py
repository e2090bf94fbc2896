"""
어댑터 인터페이스 테스트

구현체가 Protocol을 준수하는지 확인 (runtime_checkable).
"""

from adapters.access.static_gate import StaticAccessGate
from adapters.binance.price_oracle import BinanceTickerOracle
from adapters.interfaces import (
    IAccessGate,
    IAssetTransferService,
    IExchangeVenue,
    IPriceOracle,
)
from adapters.mock.exchange_venue import MockExchangeVenue
from adapters.mock.price_oracle import MockPriceOracle
from adapters.mock.transfer_service import MockTransferService


class TestProtocolConformance:
    """Protocol 준수 확인"""

    def test_price_oracles(self) -> None:
        assert isinstance(MockPriceOracle(), IPriceOracle)
        assert isinstance(BinanceTickerOracle(), IPriceOracle)

    def test_transfer_service(self) -> None:
        assert isinstance(MockTransferService(), IAssetTransferService)

    def test_exchange_venue(self) -> None:
        assert isinstance(MockExchangeVenue(MockTransferService()), IExchangeVenue)

    def test_access_gate(self) -> None:
        assert isinstance(StaticAccessGate(), IAccessGate)

    def test_oracle_is_not_a_venue(self) -> None:
        assert not isinstance(MockPriceOracle(), IExchangeVenue)
