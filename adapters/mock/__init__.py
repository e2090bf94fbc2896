"""
Mock 어댑터

테스트용 Mock 구현체 제공.
Protocol 준수하여 실제 구현체와 교체 가능.
"""

from adapters.mock.exchange_venue import MockExchangeVenue, MockVenueState
from adapters.mock.price_oracle import MockPriceOracle
from adapters.mock.transfer_service import (
    MockCollaboratorError,
    MockTransferService,
    MockWalletState,
)

__all__ = [
    "MockCollaboratorError",
    "MockExchangeVenue",
    "MockVenueState",
    "MockPriceOracle",
    "MockTransferService",
    "MockWalletState",
]
