"""
Vault Bootstrap

설정 로드, DB 스키마 초기화, 협력자 주입, Custodian 생성.

자산 이동 서비스와 거래소는 Vault 외부 시스템이다.
운영(production) 모드에서는 호출자가 반드시 주입해야 하며,
testnet 모드에서 주입하지 않으면 메모리 내 모의 보관(paper custody)을 사용한다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from adapters.access.static_gate import StaticAccessGate
from adapters.binance.price_oracle import BinanceTickerOracle
from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from adapters.mock.exchange_venue import MockExchangeVenue
from adapters.mock.transfer_service import MockTransferService
from core.types import TradingMode
from vault.custodian import Custodian

if TYPE_CHECKING:
    from adapters.interfaces import (
        IAccessGate,
        IAssetTransferService,
        IExchangeVenue,
        IPriceOracle,
    )
    from core.config.loader import VaultSettings

logger = logging.getLogger(__name__)


class BootstrapError(Exception):
    """Vault 구성 실패"""

    pass


@dataclass
class VaultRuntime:
    """실행 중인 Vault와 정리 대상 리소스"""

    custodian: Custodian
    db: SQLiteAdapter
    oracle: Any

    async def close(self) -> None:
        """리소스 정리 (오라클 HTTP 클라이언트, DB 연결)"""
        close = getattr(self.oracle, "close", None)
        if close is not None:
            await close()
        await self.db.close()
        logger.info("Vault 종료 완료")


def _paper_collaborators(
    settings: VaultSettings,
) -> tuple[MockTransferService, MockExchangeVenue]:
    transfers = MockTransferService(custody_account=settings.custodian_account)
    venue = MockExchangeVenue(transfers)
    logger.warning(
        "testnet 모드: 메모리 내 모의 보관 사용 (재시작 시 보관 자산 초기화)",
        extra={"custodian_account": settings.custodian_account},
    )
    return transfers, venue


async def open_vault(
    settings: VaultSettings,
    db_path: Path | str | None = None,
    transfers: IAssetTransferService | None = None,
    venue: IExchangeVenue | None = None,
    oracle: IPriceOracle | None = None,
    gate: IAccessGate | None = None,
) -> VaultRuntime:
    """Vault 구성 및 시작

    Args:
        settings: Vault 설정
        db_path: DB 경로 (None이면 모드별 기본 경로)
        transfers: 자산 이동 서비스
        venue: 외부 거래소
        oracle: 가격 오라클 (None이면 Binance 티커 오라클)
        gate: Access Gate (None이면 settings.admins 허용 목록)

    Raises:
        BootstrapError: 운영 모드에서 자산 이동 서비스/거래소 미주입
    """
    if transfers is None or venue is None:
        if settings.mode == TradingMode.PRODUCTION:
            raise BootstrapError(
                "production 모드에서는 자산 이동 서비스와 거래소를 주입해야 합니다"
            )
        paper_transfers, paper_venue = _paper_collaborators(settings)
        transfers = transfers or paper_transfers
        venue = venue or paper_venue

    if oracle is None:
        oracle = BinanceTickerOracle(base_url=settings.oracle_base_url)
    if gate is None:
        gate = StaticAccessGate(admins=settings.admins)

    db = SQLiteAdapter(db_path if db_path is not None else settings.db_path)
    await db.connect()
    try:
        await init_schema(db)
        custodian = Custodian(
            db=db,
            settings=settings,
            oracle=oracle,
            transfers=transfers,
            venue=venue,
            gate=gate,
        )
        await custodian.start()
    except BaseException:
        await db.close()
        raise

    return VaultRuntime(custodian=custodian, db=db, oracle=oracle)
