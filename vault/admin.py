"""
Vault 관리 작업

모든 작업은 Access Gate 권한 검사를 통과해야 한다.

- 자산 등록/해제
- 1회 출금 한도, 가격 staleness 허용 시간 변경 (bank cap은 생성 후 불변)
- 회수: 어떤 계정에도 귀속되지 않은 보관 자산 (Cap 초과로 남은 Swap 결과 등)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.errors import InsufficientBalanceError, TransferFailureError, UnauthorizedError
from core.ledger.types import JournalEntry
from core.types import AdminAction, AssetRegistration, OperationKind, VaultConfig
from vault.direct_flow import require_positive

if TYPE_CHECKING:
    from adapters.interfaces import IAccessGate, IAssetTransferService
    from core.ledger.store import BalanceLedger
    from core.registry.asset_registry import AssetRegistry
    from core.storage.config_store import ConfigStore
    from vault.guard import OperationGuard

logger = logging.getLogger(__name__)


class VaultAdmin:
    """관리 작업

    Args:
        gate: Access Gate
        registry: Asset Registry
        config_store: 런타임 설정
        ledger: Balance Ledger
        transfers: 자산 이동 서비스
        guard: 공유 Operation Guard
        stable_asset: 기준 스테이블 자산
    """

    def __init__(
        self,
        gate: IAccessGate,
        registry: AssetRegistry,
        config_store: ConfigStore,
        ledger: BalanceLedger,
        transfers: IAssetTransferService,
        guard: OperationGuard,
        stable_asset: str,
    ):
        self.gate = gate
        self.registry = registry
        self.config_store = config_store
        self.ledger = ledger
        self.transfers = transfers
        self.guard = guard
        self.stable_asset = stable_asset

    def authorize(self, principal: str, action: AdminAction) -> None:
        """권한 검사

        Raises:
            UnauthorizedError: 권한 없음
        """
        if not self.gate.is_authorized(principal, action.value):
            raise UnauthorizedError(
                "관리 작업 권한이 없습니다",
                principal=principal,
                action=action.value,
            )

    # =========================================================================
    # 자산 등록
    # =========================================================================

    async def register_asset(
        self,
        principal: str,
        asset: str,
        price_reference: str,
        decimal_override: int = 0,
        accepted: bool = True,
    ) -> AssetRegistration:
        """자산 등록 (기존 등록 덮어씀)"""
        self.authorize(principal, AdminAction.REGISTER_ASSET)
        return await self.registry.register(
            asset,
            price_reference,
            decimal_override=decimal_override,
            accepted=accepted,
            updated_by=principal,
        )

    async def unregister_asset(self, principal: str, asset: str) -> None:
        """자산 등록 해제"""
        self.authorize(principal, AdminAction.UNREGISTER_ASSET)
        await self.registry.unregister(asset, updated_by=principal)

    # =========================================================================
    # 런타임 설정
    # =========================================================================

    async def set_max_withdraw_value(self, principal: str, value: int) -> VaultConfig:
        """1회 출금 한도 변경"""
        self.authorize(principal, AdminAction.SET_MAX_WITHDRAW)
        return await self.config_store.set_max_withdraw_value(value, updated_by=principal)

    async def set_staleness_tolerance(self, principal: str, seconds: int) -> VaultConfig:
        """가격 staleness 허용 시간 변경"""
        self.authorize(principal, AdminAction.SET_STALENESS)
        return await self.config_store.set_staleness_tolerance(seconds, updated_by=principal)

    # =========================================================================
    # 회수
    # =========================================================================

    async def recoverable(self, asset: str) -> int:
        """어떤 계정에도 귀속되지 않은 보관량"""
        custody = await self.transfers.custody_balance(asset)
        owed = await self.ledger.sum_balances(asset)
        return max(0, custody - owed)

    async def recover_funds(
        self,
        principal: str,
        asset: str,
        to_account: str,
        amount: int,
    ) -> JournalEntry:
        """미귀속 보관 자산 회수

        계정 잔고 합계를 넘는 보관량만 회수할 수 있다.

        Raises:
            UnauthorizedError: 권한 없음
            ZeroAmountError: 수량 0
            InsufficientBalanceError: 회수 가능량 초과
            TransferFailureError: 자산 이동 실패
        """
        self.authorize(principal, AdminAction.RECOVER_FUNDS)
        require_positive(amount)

        async with self.guard.hold("recover_funds"):
            available = await self.recoverable(asset)
            if amount > available:
                raise InsufficientBalanceError(
                    "회수 가능한 보관량이 부족합니다",
                    asset=asset,
                    requested=amount,
                    available=available,
                )

            try:
                await self.transfers.move_out(asset, to_account, amount)
            except Exception as e:
                raise TransferFailureError(
                    "회수 자산 이동에 실패했습니다",
                    asset=asset,
                    to_account=to_account,
                    amount=amount,
                ) from e

            entry = JournalEntry.create(
                OperationKind.RECOVERY,
                asset,
                to_account,
                amount,
                amount if asset == self.stable_asset else 0,
                memo=f"recovered by {principal}",
                extra={"principal": principal, "available_before": str(available)},
            )
            await self.ledger.record_standalone(entry)

        logger.warning(
            f"Recovered {amount} {asset} → {to_account}",
            extra={"entry_id": entry.entry_id, "principal": principal},
        )
        return entry

    async def stranded_entries(self, limit: int = 100) -> list[JournalEntry]:
        """Cap 초과로 계정에 반영되지 못한 Swap 결과 목록"""
        return await self.ledger.list_entries(kind=OperationKind.SWAP_STRANDED, limit=limit)
