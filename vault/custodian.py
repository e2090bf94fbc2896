"""
Custodian

Vault 구성 요소(Registry, Ledger, Valuator, 흐름, 관리 작업)를 묶는 진입점.
Web과 CLI는 이 클래스만 사용한다.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from core.ledger.store import BalanceLedger
from core.registry.asset_registry import AssetRegistry
from core.storage.config_store import ConfigStore
from core.types import SettlementReceipt, VaultConfig
from core.valuation.valuator import AssetValuator
from vault.admin import VaultAdmin
from vault.direct_flow import DirectFlow
from vault.guard import OperationGuard
from vault.swap_flow import SwapFlow

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from adapters.interfaces import (
        IAccessGate,
        IAssetTransferService,
        IExchangeVenue,
        IPriceOracle,
    )
    from core.config.loader import VaultSettings

logger = logging.getLogger(__name__)


class Custodian:
    """다중 자산 보관 Vault

    Args:
        db: 연결된 SQLiteAdapter (스키마 초기화 완료 상태)
        settings: Vault 설정
        oracle: 가격 오라클
        transfers: 자산 이동 서비스
        venue: 외부 거래소
        gate: Access Gate
        clock: 현재 시각 함수 (None이면 시스템 시각)

    사용 예시:
    ```python
    custodian = Custodian(db, settings, oracle, transfers, venue, gate)
    await custodian.start()

    receipt = await custodian.deposit("USDC", "alice", 100_000_000)
    await custodian.withdraw("USDC", "alice", 50_000_000)
    ```
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        settings: VaultSettings,
        oracle: IPriceOracle,
        transfers: IAssetTransferService,
        venue: IExchangeVenue,
        gate: IAccessGate,
        clock: Callable[[], int] | None = None,
    ):
        self.db = db
        self.settings = settings
        self.stable_asset = settings.stable_asset
        self.custodian_account = settings.custodian_account

        self.registry = AssetRegistry(db)
        self.ledger = BalanceLedger(db)
        self.config_store = ConfigStore(db)
        self.guard = OperationGuard()

        self.valuator = AssetValuator(
            registry=self.registry,
            oracle=oracle,
            transfer_service=transfers,
            config_store=self.config_store,
            stable_asset=self.stable_asset,
            clock=clock,
        )
        self.direct = DirectFlow(
            ledger=self.ledger,
            registry=self.registry,
            valuator=self.valuator,
            transfers=transfers,
            config_store=self.config_store,
            guard=self.guard,
        )
        self.swap = SwapFlow(
            ledger=self.ledger,
            transfers=transfers,
            venue=venue,
            config_store=self.config_store,
            guard=self.guard,
            stable_asset=self.stable_asset,
            custodian_account=self.custodian_account,
        )
        self.admin = VaultAdmin(
            gate=gate,
            registry=self.registry,
            config_store=self.config_store,
            ledger=self.ledger,
            transfers=transfers,
            guard=self.guard,
            stable_asset=self.stable_asset,
        )

    async def start(self) -> VaultConfig:
        """런타임 설정 준비 (최초 실행 시 생성)"""
        config = await self.config_store.ensure_vault_config(self.settings)
        logger.info(
            "Custodian ready",
            extra={
                "stable_asset": self.stable_asset,
                "bank_cap": config.bank_cap,
                "mode": self.settings.mode.value,
            },
        )
        return config

    # =========================================================================
    # 흐름
    # =========================================================================

    async def deposit(self, asset: str, account: str, amount: int) -> SettlementReceipt:
        """직접 입금"""
        return await self.direct.deposit(asset, account, amount)

    async def withdraw(
        self,
        asset: str,
        account: str,
        amount: int,
        recipient: str | None = None,
    ) -> SettlementReceipt:
        """직접 출금"""
        return await self.direct.withdraw(asset, account, amount, recipient)

    async def swap_deposit(
        self,
        asset_in: str,
        account: str,
        amount: int,
        min_amount_out: int = 0,
    ) -> SettlementReceipt:
        """Swap 입금 (스테이블 자산으로 적립)"""
        return await self.swap.swap_deposit(asset_in, account, amount, min_amount_out)

    # =========================================================================
    # 조회
    # =========================================================================

    async def total_valued(self) -> int:
        """전체 평가 합계"""
        return await self.ledger.total_valued()

    async def balance_of(self, asset: str, account: str) -> int:
        """계정 잔고"""
        return await self.ledger.get_balance(asset, account)

    async def status(self) -> dict[str, Any]:
        """Vault 현황 (금액은 문자열)"""
        config = await self.config_store.get_vault_config()
        total = await self.ledger.total_valued()
        assets = await self.registry.list_all()

        return {
            "mode": self.settings.mode.value,
            "stable_asset": self.stable_asset,
            "total_valued": str(total),
            "bank_cap": str(config.bank_cap),
            "headroom": str(max(0, config.bank_cap - total)),
            "max_withdraw_value": str(config.max_withdraw_value),
            "staleness_tolerance_sec": config.staleness_tolerance_sec,
            "busy": self.guard.is_busy,
            "assets": [
                {
                    "asset": a.asset,
                    "accepted": a.accepted,
                    "price_reference": a.price_reference,
                    "decimal_override": a.decimal_override,
                }
                for a in assets
            ],
        }
