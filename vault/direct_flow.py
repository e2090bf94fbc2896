"""
Direct Deposit / Withdraw Flow

입금: VALIDATING → VALUING → CAPPING → SETTLING
출금: VALIDATING → VALUING → LIMITING → SETTLING

어느 단계에서 실패하든 잔고/합계/보관 자산에 흔적이 남지 않는다.
외부 이동은 되돌릴 수 없으므로 보상 이동/보상 트랜잭션으로 원상복구.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.errors import (
    AssetNotSupportedError,
    CapExceededError,
    InsufficientBalanceError,
    MaxWithdrawExceededError,
    TransferFailureError,
    ZeroAmountError,
)
from core.ledger.types import JournalEntry
from core.types import AssetRegistration, FlowStage, OperationKind, SettlementReceipt

if TYPE_CHECKING:
    from adapters.interfaces import IAssetTransferService
    from core.ledger.store import BalanceLedger
    from core.registry.asset_registry import AssetRegistry
    from core.storage.config_store import ConfigStore
    from core.valuation.valuator import AssetValuator
    from vault.guard import OperationGuard

logger = logging.getLogger(__name__)


def require_positive(amount: int, stage: FlowStage = FlowStage.VALIDATING) -> None:
    """수량 검증 (0이면 ZeroAmountError, 음수는 호출 오류)"""
    if amount < 0:
        raise ValueError(f"amount must be non-negative: {amount}")
    if amount == 0:
        raise ZeroAmountError("수량이 0입니다", stage=stage.value)


class DirectFlow:
    """직접 입출금 흐름

    Args:
        ledger: Balance Ledger
        registry: Asset Registry
        valuator: 자산 평가기
        transfers: 자산 이동 서비스
        config_store: 런타임 설정 (cap, 출금 한도)
        guard: 공유 Operation Guard
    """

    def __init__(
        self,
        ledger: BalanceLedger,
        registry: AssetRegistry,
        valuator: AssetValuator,
        transfers: IAssetTransferService,
        config_store: ConfigStore,
        guard: OperationGuard,
    ):
        self.ledger = ledger
        self.registry = registry
        self.valuator = valuator
        self.transfers = transfers
        self.config_store = config_store
        self.guard = guard

    @property
    def stable_asset(self) -> str:
        return self.valuator.stable_asset

    # =========================================================================
    # 입금
    # =========================================================================

    async def deposit(self, asset: str, account: str, amount: int) -> SettlementReceipt:
        """자산 직접 입금

        Raises:
            ZeroAmountError, AssetNotSupportedError, PriceUnavailableError,
            PriceStaleError, CapExceededError, TransferFailureError
        """
        require_positive(amount)

        async with self.guard.hold("deposit"):
            # VALIDATING
            registration: AssetRegistration | None = None
            if not self.valuator.is_stable(asset):
                registration = await self.registry.lookup(asset)
                if registration is None or not registration.accepted:
                    raise AssetNotSupportedError(
                        "직접 입금이 허용되지 않은 자산입니다",
                        asset=asset,
                        registered=registration is not None,
                    )

            # VALUING
            if registration is None:
                value = amount
            else:
                value = await self.valuator.value_registered(registration, amount)

            # CAPPING
            config = await self.config_store.get_vault_config()
            total = await self.ledger.total_valued()
            if total + value > config.bank_cap:
                raise CapExceededError(
                    "전체 평가 합계가 한도를 초과합니다",
                    attempted_total=total + value,
                    cap=config.bank_cap,
                    value=value,
                )

            # SETTLING
            try:
                await self.transfers.move_in(asset, account, amount)
            except Exception as e:
                raise TransferFailureError(
                    "입금 자산 이동에 실패했습니다",
                    asset=asset,
                    account=account,
                    amount=amount,
                    stage=FlowStage.SETTLING.value,
                ) from e

            entry = JournalEntry.create(OperationKind.DEPOSIT, asset, account, amount, value)
            try:
                total_after = await self.ledger.settle_credit(entry, asset, amount)
            except Exception:
                logger.exception(
                    "입금 정산 실패, 보상 환불 시도",
                    extra={"entry_id": entry.entry_id, "asset": asset, "account": account},
                )
                await self._refund(asset, account, amount, entry.entry_id)
                raise

        logger.info(
            f"Deposit settled: {amount} {asset} → {account}",
            extra={"entry_id": entry.entry_id, "value": value, "total_after": total_after},
        )

        return SettlementReceipt(
            entry_id=entry.entry_id,
            kind=OperationKind.DEPOSIT,
            asset=asset,
            account=account,
            amount=amount,
            value=value,
            credited_asset=asset,
            credited_amount=amount,
            total_after=total_after,
            ts=entry.ts,
        )

    async def _refund(self, asset: str, account: str, amount: int, entry_id: str) -> None:
        """보상 환불 (실패 시 수동 조치가 필요하므로 CRITICAL 로그)"""
        try:
            await self.transfers.move_out(asset, account, amount)
        except Exception:
            logger.critical(
                "보상 환불 실패, 수동 조치 필요",
                exc_info=True,
                extra={"entry_id": entry_id, "asset": asset, "account": account, "amount": amount},
            )
            return
        logger.warning(
            f"Refunded {amount} {asset} → {account}",
            extra={"entry_id": entry_id},
        )

    # =========================================================================
    # 출금
    # =========================================================================

    async def withdraw(
        self,
        asset: str,
        account: str,
        amount: int,
        recipient: str | None = None,
    ) -> SettlementReceipt:
        """자산 직접 출금

        스테이블 자산은 1회 출금 한도 검사에서 제외된다.

        Args:
            asset: 출금 자산
            account: 잔고를 차감할 계정
            amount: 자산 네이티브 단위 수량
            recipient: 수령 계정 (None이면 account)

        Raises:
            ZeroAmountError, InsufficientBalanceError, AssetNotSupportedError,
            PriceUnavailableError, PriceStaleError, MaxWithdrawExceededError,
            TransferFailureError
        """
        require_positive(amount)
        recipient = recipient or account

        async with self.guard.hold("withdraw"):
            # VALIDATING
            balance = await self.ledger.get_balance(asset, account)
            if amount > balance:
                raise InsufficientBalanceError(
                    "잔고가 부족합니다",
                    asset=asset,
                    account=account,
                    requested=amount,
                    available=balance,
                )

            # VALUING
            is_stable = self.valuator.is_stable(asset)
            if is_stable:
                value = amount
            else:
                registration = await self.registry.lookup(asset)
                if registration is None:
                    raise AssetNotSupportedError(
                        "가격 참조가 등록되지 않은 자산입니다",
                        asset=asset,
                    )
                value = await self.valuator.value_registered(registration, amount)

            # LIMITING
            config = await self.config_store.get_vault_config()
            if not is_stable and value > config.max_withdraw_value:
                raise MaxWithdrawExceededError(
                    "1회 출금 한도를 초과합니다",
                    value=value,
                    limit=config.max_withdraw_value,
                )

            # SETTLING
            entry = JournalEntry.create(
                OperationKind.WITHDRAW,
                asset,
                account,
                amount,
                value,
                extra={"recipient": recipient} if recipient != account else None,
            )
            total_after, decrement = await self.ledger.settle_debit(entry)

            try:
                await self.transfers.move_out(asset, recipient, amount)
            except Exception as e:
                logger.error(
                    "출금 자산 이동 실패, 정산 되돌림",
                    extra={"entry_id": entry.entry_id, "asset": asset, "error": str(e)},
                )
                try:
                    await self.ledger.revert_debit(entry, decrement)
                except Exception as revert_error:
                    logger.critical(
                        "출금 정산 되돌림 실패, 수동 조치 필요",
                        exc_info=True,
                        extra={
                            "entry_id": entry.entry_id,
                            "asset": asset,
                            "account": account,
                            "amount": amount,
                            "decrement": decrement,
                        },
                    )
                    raise TransferFailureError(
                        "출금 자산 이동에 실패했고 정산을 되돌리지 못했습니다",
                        asset=asset,
                        account=account,
                        amount=amount,
                        stage=FlowStage.SETTLING.value,
                        entry_id=entry.entry_id,
                        reverted=False,
                        transfer_error=str(e),
                    ) from revert_error
                raise TransferFailureError(
                    "출금 자산 이동에 실패했습니다",
                    asset=asset,
                    account=account,
                    amount=amount,
                    stage=FlowStage.SETTLING.value,
                ) from e

        logger.info(
            f"Withdraw settled: {amount} {asset} ← {account}",
            extra={
                "entry_id": entry.entry_id,
                "value": value,
                "total_decrement": decrement,
                "total_after": total_after,
            },
        )

        return SettlementReceipt(
            entry_id=entry.entry_id,
            kind=OperationKind.WITHDRAW,
            asset=asset,
            account=account,
            amount=amount,
            value=value,
            credited_asset=asset,
            credited_amount=amount,
            total_after=total_after,
            ts=entry.ts,
        )
