"""
Mock 자산 이동 서비스

테스트용 메모리 내 지갑.
IAssetTransferService Protocol 준수.
"""

from dataclasses import dataclass, field
from typing import Awaitable, Callable

from core.constants import Defaults


class MockCollaboratorError(Exception):
    """Mock 협력자가 시뮬레이션하는 실패"""

    pass


# (호출 이름, 자산, 계정, 수량) 을 받는 훅
TransferHook = Callable[[str, str, str, int], Awaitable[None]]


@dataclass
class MockWalletState:
    """Mock 지갑 상태 (메모리 내 저장)"""

    # (asset, account) -> 보유량
    wallets: dict[tuple[str, str], int] = field(default_factory=dict)

    # asset -> 자릿수 (없으면 decimals() 실패)
    decimals: dict[str, int] = field(default_factory=dict)

    # 시뮬레이션 옵션
    fail_next_move_in: bool = False
    fail_next_move_out: bool = False
    fail_all_move_out: bool = False

    # 호출 기록 (호출 이름, 자산, 계정, 수량)
    calls: list[tuple[str, str, str, int]] = field(default_factory=list)


class MockTransferService:
    """Mock 자산 이동 서비스

    IAssetTransferService Protocol 구현.
    Vault 보관 계정과 사용자 계정을 같은 지갑 테이블에서 관리한다.

    사용 예시:
    ```python
    transfers = MockTransferService()
    transfers.mint("WETH", "alice", 10**18)
    transfers.set_decimals("WETH", 18)

    await transfers.move_in("WETH", "alice", 10**17)
    await transfers.custody_balance("WETH")  # 10**17
    ```

    Args:
        custody_account: Vault 보관 계정
        state: 지갑 상태 (None이면 빈 상태)
    """

    def __init__(
        self,
        custody_account: str = Defaults.CUSTODIAN_ACCOUNT,
        state: MockWalletState | None = None,
    ):
        self.custody_account = custody_account
        self.state = state or MockWalletState()
        self.on_transfer: TransferHook | None = None

    # -------------------------------------------------------------------------
    # 상태 조작 메서드 (테스트용)
    # -------------------------------------------------------------------------

    def mint(self, asset: str, account: str, amount: int) -> None:
        """계정에 자산 발행"""
        key = (asset, account)
        self.state.wallets[key] = self.state.wallets.get(key, 0) + amount

    def burn(self, asset: str, account: str, amount: int) -> None:
        """계정에서 자산 소각 (부족하면 실패)"""
        self._take(asset, account, amount)

    def balance_of(self, asset: str, account: str) -> int:
        """계정 보유량"""
        return self.state.wallets.get((asset, account), 0)

    def set_decimals(self, asset: str, decimals: int) -> None:
        """자산 자릿수 설정"""
        self.state.decimals[asset] = decimals

    def transfer(self, asset: str, from_account: str, to_account: str, amount: int) -> None:
        """계정 간 직접 이동 (거래소 Mock이 사용)"""
        self._take(asset, from_account, amount)
        self.mint(asset, to_account, amount)

    def _take(self, asset: str, account: str, amount: int) -> None:
        current = self.balance_of(asset, account)
        if amount > current:
            raise MockCollaboratorError(
                f"insufficient {asset} in {account}: {current} < {amount}"
            )
        self.state.wallets[(asset, account)] = current - amount

    async def _notify(self, name: str, asset: str, account: str, amount: int) -> None:
        self.state.calls.append((name, asset, account, amount))
        if self.on_transfer is not None:
            await self.on_transfer(name, asset, account, amount)

    # -------------------------------------------------------------------------
    # IAssetTransferService 구현
    # -------------------------------------------------------------------------

    async def move_in(self, asset: str, from_account: str, amount: int) -> None:
        """예치자 → 보관 계정"""
        await self._notify("move_in", asset, from_account, amount)

        if self.state.fail_next_move_in:
            self.state.fail_next_move_in = False
            raise MockCollaboratorError("Mock move_in failure")

        self.transfer(asset, from_account, self.custody_account, amount)

    async def move_out(self, asset: str, to_account: str, amount: int) -> None:
        """보관 계정 → 수령자"""
        await self._notify("move_out", asset, to_account, amount)

        if self.state.fail_all_move_out:
            raise MockCollaboratorError("Mock move_out failure")
        if self.state.fail_next_move_out:
            self.state.fail_next_move_out = False
            raise MockCollaboratorError("Mock move_out failure")

        self.transfer(asset, self.custody_account, to_account, amount)

    async def custody_balance(self, asset: str) -> int:
        """보관 계정 보유량"""
        return self.balance_of(asset, self.custody_account)

    async def decimals(self, asset: str) -> int:
        """자산 자릿수 (설정되지 않았으면 실패)"""
        if asset not in self.state.decimals:
            raise MockCollaboratorError(f"{asset} does not report decimals")
        return self.state.decimals[asset]
