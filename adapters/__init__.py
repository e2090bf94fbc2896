"""
어댑터 레이어

외부 협력자(가격 오라클, 자산 이동, 거래소, 권한, DB)와의 연동을 담당.
Protocol 기반 인터페이스로 Mock 교체 가능.
"""

from adapters.interfaces import (
    IAccessGate,
    IAssetTransferService,
    IExchangeVenue,
    IPriceOracle,
)
from adapters.models import PriceReading

__all__ = [
    # Interfaces
    "IAccessGate",
    "IAssetTransferService",
    "IExchangeVenue",
    "IPriceOracle",
    # Models
    "PriceReading",
]
