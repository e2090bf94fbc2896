"""
Asset Valuator

Registry + 가격 오라클 + 런타임 staleness 설정 + 시계를 묶어
"자산 X를 amount만큼" → 내부 스케일 평가액으로 변환.

스테이블 자산은 내부 스케일과 동일하므로 오라클을 조회하지 않는다.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable

from core.constants import FALLBACK_ASSET_DECIMALS
from core.errors import AssetNotSupportedError, PriceUnavailableError
from core.types import AssetRegistration
from core.valuation.price_normalizer import value_of

if TYPE_CHECKING:
    from adapters.interfaces import IAssetTransferService, IPriceOracle
    from core.registry.asset_registry import AssetRegistry
    from core.storage.config_store import ConfigStore

logger = logging.getLogger(__name__)


def unix_now() -> int:
    """현재 Unix 시각 (초)"""
    return int(time.time())


class AssetValuator:
    """자산 평가기

    Args:
        registry: 자산 등록 저장소
        oracle: 가격 오라클
        transfer_service: 자산 자릿수 조회용
        config_store: staleness 허용 시간 조회용
        stable_asset: 기준 스테이블 자산 ID
        clock: 현재 시각 함수 (테스트에서 고정 시각 주입)
    """

    def __init__(
        self,
        registry: AssetRegistry,
        oracle: IPriceOracle,
        transfer_service: IAssetTransferService,
        config_store: ConfigStore,
        stable_asset: str,
        clock: Callable[[], int] | None = None,
    ):
        self.registry = registry
        self.oracle = oracle
        self.transfer_service = transfer_service
        self.config_store = config_store
        self.stable_asset = stable_asset
        self.clock = clock or unix_now

    def is_stable(self, asset: str) -> bool:
        """기준 스테이블 자산 여부"""
        return asset == self.stable_asset

    async def value(self, asset: str, amount: int) -> int:
        """내부 스케일 평가액

        Raises:
            AssetNotSupportedError: 스테이블 자산이 아니고 미등록
            PriceUnavailableError: 가격 0 이하 또는 오라클 조회 실패
            PriceStaleError: 가격이 오래됨
        """
        if self.is_stable(asset):
            return amount

        registration = await self.registry.lookup(asset)
        if registration is None:
            raise AssetNotSupportedError("가격 참조가 등록되지 않은 자산입니다", asset=asset)

        return await self.value_registered(registration, amount)

    async def value_registered(self, registration: AssetRegistration, amount: int) -> int:
        """등록 정보를 이미 조회한 경우의 평가"""
        asset_scale = await self.resolve_scale(registration)

        try:
            reading = await self.oracle.latest(registration.price_reference)
        except Exception as e:
            raise PriceUnavailableError(
                "가격 오라클 조회에 실패했습니다",
                asset=registration.asset,
                price_reference=registration.price_reference,
                error=str(e),
            ) from e

        config = await self.config_store.get_vault_config()

        value = value_of(
            asset_amount=amount,
            asset_scale=asset_scale,
            price=reading.price,
            price_scale=reading.decimals,
            price_timestamp=reading.updated_at,
            now_timestamp=self.clock(),
            staleness_tolerance=config.staleness_tolerance_sec,
        )

        logger.debug(
            f"Valued {amount} {registration.asset} = {value}",
            extra={
                "price": reading.price,
                "price_decimals": reading.decimals,
                "asset_scale": asset_scale,
            },
        )
        return value

    async def resolve_scale(self, registration: AssetRegistration) -> int:
        """자산 자릿수 결정

        오버라이드가 있으면 우선, 없으면 자산에 직접 조회.
        자산이 자릿수를 보고하지 않으면 18로 간주.
        """
        if registration.has_decimal_override:
            return registration.decimal_override

        try:
            return int(await self.transfer_service.decimals(registration.asset))
        except Exception as e:
            logger.warning(
                f"자산 자릿수 조회 실패, {FALLBACK_ASSET_DECIMALS}자리로 간주: {registration.asset}",
                extra={"error": str(e)},
            )
            return FALLBACK_ASSET_DECIMALS
