"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
Vault가 제어하지 않는 외부 협력자(가격 오라클, 자산 이동, 거래소, 권한)의 계약.
모든 구현체는 이 Protocol을 준수해야 함.

실패는 예외로 신호한다. Vault 흐름은 협력자 예외를 잡아
TransferFailure / SwapFailure / PriceUnavailable 로 변환한다.
"""

from typing import Protocol, runtime_checkable

from adapters.models import PriceReading


@runtime_checkable
class IPriceOracle(Protocol):
    """가격 오라클 인터페이스

    반환 가격은 0 이하이거나 오래되었을 수 있다.
    유효성 검증은 Vault(Price Normalizer)의 책임.
    """

    async def latest(self, reference: str) -> PriceReading:
        """최신 가격 조회

        Args:
            reference: 가격 참조 (예: ETHUSDT)

        Returns:
            PriceReading (price, decimals, updated_at)
        """
        ...


@runtime_checkable
class IAssetTransferService(Protocol):
    """자산 이동 서비스 인터페이스

    각 호출은 실패할 수 있으며, 호출한 흐름은 부분 효과 없이 중단해야 한다.
    수량은 자산 네이티브 단위 정수.
    """

    async def move_in(self, asset: str, from_account: str, amount: int) -> None:
        """예치자 → Vault 보관 계정으로 이동"""
        ...

    async def move_out(self, asset: str, to_account: str, amount: int) -> None:
        """Vault 보관 계정 → 수령자로 이동"""
        ...

    async def custody_balance(self, asset: str) -> int:
        """Vault 보관 계정의 실제 보유량"""
        ...

    async def decimals(self, asset: str) -> int:
        """자산이 보고하는 네이티브 자릿수

        Raises:
            Exception: 자산이 자릿수를 보고하지 않는 경우
        """
        ...


@runtime_checkable
class IExchangeVenue(Protocol):
    """외부 거래소 인터페이스

    반환값(보고 수령량)은 참고용일 뿐이며 원장 반영에 사용하지 않는다.
    """

    async def convert(
        self,
        asset_in: str,
        asset_out: str,
        amount_in: int,
        min_amount_out: int,
        recipient: str,
    ) -> int:
        """asset_in → asset_out 변환

        Args:
            asset_in: 입력 자산
            asset_out: 출력 자산
            amount_in: 입력 수량
            min_amount_out: 최소 수령량 (미달 시 거래소가 실패해야 함)
            recipient: 수령 계정

        Returns:
            거래소가 보고한 수령량 (참고값)
        """
        ...


@runtime_checkable
class IAccessGate(Protocol):
    """관리 작업 권한 인터페이스"""

    def is_authorized(self, principal: str, action: str) -> bool:
        """principal이 action을 수행할 수 있는지 여부"""
        ...
