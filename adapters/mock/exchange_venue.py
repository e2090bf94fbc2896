"""
Mock 거래소

테스트용 고정 환율 거래소.
IExchangeVenue Protocol 준수.

입력 자산은 수령 계정(Vault 보관 계정)에서 가져가고,
출력 자산은 같은 계정으로 보낸다. MockTransferService 지갑을 공유.
"""

from dataclasses import dataclass, field
from typing import Awaitable, Callable

from adapters.mock.transfer_service import MockCollaboratorError, MockTransferService

# (asset_in, asset_out, amount_in) 을 받는 훅 (출력 전달 직전에 호출)
ConvertHook = Callable[[str, str, int], Awaitable[None]]


@dataclass
class MockVenueState:
    """Mock 거래소 상태"""

    # (asset_in, asset_out) -> (분자, 분모). 출력 = 입력 * 분자 // 분모
    rates: dict[tuple[str, str], tuple[int, int]] = field(default_factory=dict)

    # 환율 대비 불리한 체결 (bps)
    slippage_bps: int = 0

    # 전달 과정에서 빠지는 양 (fee-on-transfer 시뮬레이션, 출력 자산 단위)
    fee_skim: int = 0

    # 입력 중 실제로 소비하는 비율 (bps, 10000 = 전량)
    consume_bps: int = 10_000

    # 보고 수령량 강제값 (None이면 실제 체결량 보고)
    reported_override: int | None = None

    # 시뮬레이션 옵션
    should_fail: bool = False

    # 호출 기록 (asset_in, asset_out, amount_in, min_amount_out, recipient)
    calls: list[tuple[str, str, int, int, str]] = field(default_factory=list)


class MockExchangeVenue:
    """Mock 거래소

    사용 예시:
    ```python
    venue = MockExchangeVenue(transfers)
    venue.set_rate("WETH", "USDC", 2000 * 10**6, 10**18)  # 1 WETH = 2000 USDC
    venue.state.reported_override = 500  # 거래소가 잘못 보고
    ```

    Args:
        transfers: 지갑을 공유하는 MockTransferService
        state: 거래소 상태
    """

    def __init__(self, transfers: MockTransferService, state: MockVenueState | None = None):
        self.transfers = transfers
        self.state = state or MockVenueState()
        self.on_convert: ConvertHook | None = None

    def set_rate(self, asset_in: str, asset_out: str, numerator: int, denominator: int) -> None:
        """환율 설정"""
        self.state.rates[(asset_in, asset_out)] = (numerator, denominator)

    def quote(self, asset_in: str, asset_out: str, amount_in: int) -> int:
        """슬리피지 적용 체결량 (수수료 차감 전)"""
        if (asset_in, asset_out) not in self.state.rates:
            raise MockCollaboratorError(f"No market for {asset_in}/{asset_out}")

        numerator, denominator = self.state.rates[(asset_in, asset_out)]
        gross = amount_in * numerator // denominator
        return gross * (10_000 - self.state.slippage_bps) // 10_000

    async def convert(
        self,
        asset_in: str,
        asset_out: str,
        amount_in: int,
        min_amount_out: int,
        recipient: str,
    ) -> int:
        """asset_in → asset_out 변환"""
        self.state.calls.append((asset_in, asset_out, amount_in, min_amount_out, recipient))

        if self.state.should_fail:
            raise MockCollaboratorError("Mock venue failure")

        consumed = amount_in * self.state.consume_bps // 10_000
        filled = self.quote(asset_in, asset_out, consumed)
        if filled < min_amount_out:
            raise MockCollaboratorError(
                f"Output {filled} below minimum {min_amount_out}"
            )

        self.transfers.burn(asset_in, recipient, consumed)

        if self.on_convert is not None:
            await self.on_convert(asset_in, asset_out, amount_in)

        delivered = max(0, filled - self.state.fee_skim)
        self.transfers.mint(asset_out, recipient, delivered)

        if self.state.reported_override is not None:
            return self.state.reported_override
        return filled
