"""
Swap Settlement Flow

INTAKE → EXCHANGE → RECONCILE → CAPPING → SETTLING

예치자는 스테이블 자산이 아닌 자산을 넣고, 스테이블 자산으로 적립받는다.
적립량은 거래소가 보고한 값이 아니라 보관 계정의 스테이블 잔고가
실제로 늘어난 양(realized)이다.

    realized = max(0, custody_after - custody_before)

Cap을 넘으면 교환은 되돌리지 않는다. 결과는 보관 계정에 남고
SWAP_STRANDED 저널로 기록되어 관리자 회수(recover_funds) 대상이 된다.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.constants import MIN_SWAP_OUTPUT
from core.errors import (
    AssetNotSupportedError,
    CapExceededError,
    SwapFailureError,
    TransferFailureError,
)
from core.ledger.types import JournalEntry
from core.types import FlowStage, OperationKind, SettlementReceipt
from vault.direct_flow import require_positive

if TYPE_CHECKING:
    from adapters.interfaces import IAssetTransferService, IExchangeVenue
    from core.ledger.store import BalanceLedger
    from core.storage.config_store import ConfigStore
    from vault.guard import OperationGuard

logger = logging.getLogger(__name__)


class SwapFlow:
    """Swap 입금 흐름

    Args:
        ledger: Balance Ledger
        transfers: 자산 이동 서비스
        venue: 외부 거래소
        config_store: 런타임 설정 (cap)
        guard: 공유 Operation Guard
        stable_asset: 기준 스테이블 자산
        custodian_account: Vault 보관 계정 (거래소 수령 계정)
    """

    def __init__(
        self,
        ledger: BalanceLedger,
        transfers: IAssetTransferService,
        venue: IExchangeVenue,
        config_store: ConfigStore,
        guard: OperationGuard,
        stable_asset: str,
        custodian_account: str,
    ):
        self.ledger = ledger
        self.transfers = transfers
        self.venue = venue
        self.config_store = config_store
        self.guard = guard
        self.stable_asset = stable_asset
        self.custodian_account = custodian_account

    async def swap_deposit(
        self,
        asset_in: str,
        account: str,
        amount: int,
        min_amount_out: int = 0,
    ) -> SettlementReceipt:
        """비스테이블 자산을 스테이블 자산으로 교환 후 적립

        Args:
            asset_in: 입력 자산
            account: 적립 계정 (입력 자산 제공 계정)
            amount: 입력 수량 (네이티브 단위)
            min_amount_out: 최소 수령량 (1 미만이면 1로 올림)

        Raises:
            ZeroAmountError, AssetNotSupportedError, TransferFailureError,
            SwapFailureError, CapExceededError
        """
        require_positive(amount)
        if asset_in == self.stable_asset:
            raise AssetNotSupportedError(
                "스테이블 자산은 직접 입금을 사용해야 합니다",
                asset=asset_in,
            )

        async with self.guard.hold("swap_deposit"):
            # INTAKE
            try:
                await self.transfers.move_in(asset_in, account, amount)
            except Exception as e:
                raise TransferFailureError(
                    "Swap 입력 자산 이동에 실패했습니다",
                    asset=asset_in,
                    account=account,
                    amount=amount,
                    stage=FlowStage.INTAKE.value,
                ) from e

            try:
                stable_before = await self.transfers.custody_balance(self.stable_asset)
                input_before = await self.transfers.custody_balance(asset_in)
            except Exception as e:
                logger.warning(
                    "교환 전 보관 잔고 조회 실패, 입력 자산 전량 환불",
                    extra={"asset": asset_in, "account": account, "error": str(e)},
                )
                await self._return_input(asset_in, account, amount)
                raise SwapFailureError(
                    "교환 전 보관 잔고를 조회할 수 없습니다",
                    asset=asset_in,
                    amount=amount,
                    stage=FlowStage.INTAKE.value,
                ) from e

            min_out = max(MIN_SWAP_OUTPUT, min_amount_out)

            # EXCHANGE
            try:
                reported = int(
                    await self.venue.convert(
                        asset_in,
                        self.stable_asset,
                        amount,
                        min_out,
                        self.custodian_account,
                    )
                )
            except Exception as e:
                logger.warning(
                    "거래소 변환 실패, 입력 자산 환불",
                    extra={"asset": asset_in, "account": account, "error": str(e)},
                )
                await self._refund_unconsumed(asset_in, account, amount, input_before)
                raise SwapFailureError(
                    "거래소 변환에 실패했습니다",
                    asset=asset_in,
                    amount=amount,
                    min_amount_out=min_out,
                    stage=FlowStage.EXCHANGE.value,
                ) from e

            # RECONCILE
            try:
                stable_after = await self.transfers.custody_balance(self.stable_asset)
            except Exception as e:
                # 교환은 이미 끝났고 실제 수령량을 알 수 없음
                stranded = JournalEntry.create(
                    OperationKind.SWAP_STRANDED,
                    asset_in,
                    account,
                    amount,
                    0,
                    reported_amount=reported,
                    memo="custody balance unavailable after exchange",
                    extra={
                        "credited_asset": self.stable_asset,
                        "stage": FlowStage.RECONCILE.value,
                    },
                )
                await self.ledger.record_standalone(stranded)
                logger.critical(
                    "교환 후 보관 잔고 조회 실패, 결과가 보관 계정에 남았습니다",
                    exc_info=True,
                    extra={
                        "entry_id": stranded.entry_id,
                        "asset": asset_in,
                        "account": account,
                        "reported": reported,
                    },
                )
                raise SwapFailureError(
                    "교환 후 보관 잔고를 조회할 수 없습니다",
                    asset=asset_in,
                    amount=amount,
                    reported=reported,
                    stage=FlowStage.RECONCILE.value,
                    stranded_entry_id=stranded.entry_id,
                ) from e

            realized = max(0, stable_after - stable_before)

            if reported != realized:
                logger.warning(
                    "거래소 보고 수령량과 실제 수령량이 다릅니다",
                    extra={"asset": asset_in, "reported": reported, "realized": realized},
                )

            if realized == 0:
                await self._refund_unconsumed(asset_in, account, amount, input_before)
                raise SwapFailureError(
                    "실제 수령량이 0입니다",
                    asset=asset_in,
                    amount=amount,
                    reported=reported,
                    stage=FlowStage.RECONCILE.value,
                )

            # CAPPING
            config = await self.config_store.get_vault_config()
            total = await self.ledger.total_valued()
            if total + realized > config.bank_cap:
                stranded = JournalEntry.create(
                    OperationKind.SWAP_STRANDED,
                    asset_in,
                    account,
                    amount,
                    realized,
                    reported_amount=reported,
                    memo="cap exceeded after exchange",
                    extra={
                        "credited_asset": self.stable_asset,
                        "attempted_total": str(total + realized),
                        "cap": str(config.bank_cap),
                    },
                )
                await self.ledger.record_standalone(stranded)
                logger.warning(
                    f"Swap 결과 {realized} {self.stable_asset}가 Cap 초과로 보관 계정에 남았습니다",
                    extra={
                        "entry_id": stranded.entry_id,
                        "account": account,
                        "attempted_total": total + realized,
                        "cap": config.bank_cap,
                    },
                )
                raise CapExceededError(
                    "전체 평가 합계가 한도를 초과합니다",
                    attempted_total=total + realized,
                    cap=config.bank_cap,
                    value=realized,
                    stranded_entry_id=stranded.entry_id,
                )

            # SETTLING
            entry = JournalEntry.create(
                OperationKind.SWAP_DEPOSIT,
                asset_in,
                account,
                amount,
                realized,
                reported_amount=reported,
                extra={"credited_asset": self.stable_asset, "min_amount_out": str(min_out)},
            )
            total_after = await self.ledger.settle_credit(entry, self.stable_asset, realized)

        logger.info(
            f"Swap deposit settled: {amount} {asset_in} → {realized} {self.stable_asset} for {account}",
            extra={"entry_id": entry.entry_id, "reported": reported, "total_after": total_after},
        )

        return SettlementReceipt(
            entry_id=entry.entry_id,
            kind=OperationKind.SWAP_DEPOSIT,
            asset=asset_in,
            account=account,
            amount=amount,
            value=realized,
            credited_asset=self.stable_asset,
            credited_amount=realized,
            total_after=total_after,
            reported_amount=reported,
            ts=entry.ts,
        )

    async def _refund_unconsumed(
        self,
        asset_in: str,
        account: str,
        amount: int,
        input_before: int,
    ) -> None:
        """거래소가 소비하지 않은 입력 자산 환불

        보관 계정에는 다른 예치자의 같은 자산도 있으므로
        교환 전후 보관량 차이로 소비량을 구한다.
        """
        try:
            input_after = await self.transfers.custody_balance(asset_in)
        except Exception:
            logger.critical(
                "교환 후 입력 자산 보관량 조회 실패, 환불량 산정 불가 (회수 대상)",
                exc_info=True,
                extra={"asset": asset_in, "account": account, "amount": amount},
            )
            return

        consumed = max(0, input_before - input_after)
        refund = max(0, amount - consumed)
        if refund == 0:
            logger.warning(
                "환불할 입력 자산이 없습니다 (전량 소비됨)",
                extra={"asset": asset_in, "account": account, "amount": amount},
            )
            return

        await self._return_input(asset_in, account, refund, consumed)

    async def _return_input(
        self,
        asset_in: str,
        account: str,
        refund: int,
        consumed: int = 0,
    ) -> None:
        """입력 자산을 예치자에게 되돌림 (실패 시 CRITICAL 로그)"""
        try:
            await self.transfers.move_out(asset_in, account, refund)
        except Exception:
            logger.critical(
                "Swap 입력 자산 환불 실패, 수동 조치 필요",
                exc_info=True,
                extra={"asset": asset_in, "account": account, "refund": refund},
            )
            return

        logger.info(
            f"Refunded {refund} {asset_in} → {account}",
            extra={"consumed": consumed},
        )
