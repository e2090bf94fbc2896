"""
Asset Registry

자산 ID → (허용 여부, 가격 참조, 자릿수 오버라이드) 매핑.
행이 없으면 "미등록"이며 직접 평가 불가 (Swap 경로는 여전히 가능).

관리자(Access Gate 통과)만 변경하며, 평가 경로는 읽기만 한다.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.errors import AssetNotSupportedError, InvalidReferenceError
from core.types import AssetRegistration

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class AssetRegistry:
    """자산 등록 저장소

    Args:
        db: SQLite 어댑터

    사용 예시:
    ```python
    registry = AssetRegistry(db)
    await registry.register("WETH", price_reference="ETHUSDT")
    await registry.register("WBTC", price_reference="BTCUSDT", decimal_override=8)

    registration = await registry.lookup("WETH")
    if registration is None:
        ...  # 미등록
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def register(
        self,
        asset: str,
        price_reference: str,
        decimal_override: int = 0,
        accepted: bool = True,
        updated_by: str = "vault:system",
    ) -> AssetRegistration:
        """자산 등록 (UPSERT)

        이전 등록을 그대로 덮어쓴다. 누적되는 상태 없음.

        Args:
            asset: 자산 ID
            price_reference: 가격 참조 (예: ETHUSDT)
            decimal_override: 자릿수 오버라이드 (0 = 자산이 보고하는 값 사용)
            accepted: 직접 입금 허용 여부
            updated_by: 변경 주체

        Returns:
            저장된 등록 정보

        Raises:
            InvalidReferenceError: 자산 ID 또는 가격 참조가 비어 있음
            ValueError: decimal_override가 음수
        """
        asset = (asset or "").strip()
        price_reference = (price_reference or "").strip()

        if not asset:
            raise InvalidReferenceError("자산 ID가 비어 있습니다", asset=asset)
        if not price_reference:
            raise InvalidReferenceError(
                "가격 참조가 비어 있습니다",
                asset=asset,
                price_reference=price_reference,
            )
        if decimal_override < 0:
            raise ValueError(f"decimal_override must be >= 0: {decimal_override}")

        async with self.db.transaction():
            await self.db.execute(
                """
                INSERT INTO asset_registry (
                    asset, accepted, price_reference, decimal_override, updated_by
                ) VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(asset) DO UPDATE SET
                    accepted = excluded.accepted,
                    price_reference = excluded.price_reference,
                    decimal_override = excluded.decimal_override,
                    updated_by = excluded.updated_by,
                    updated_at = datetime('now')
                """,
                (asset, 1 if accepted else 0, price_reference, decimal_override, updated_by),
            )

        logger.info(
            f"Asset registered: {asset}",
            extra={
                "price_reference": price_reference,
                "decimal_override": decimal_override,
                "accepted": accepted,
                "updated_by": updated_by,
            },
        )

        registration = await self.lookup(asset)
        assert registration is not None
        return registration

    async def unregister(self, asset: str, updated_by: str = "vault:system") -> None:
        """자산 등록 해제

        Raises:
            AssetNotSupportedError: 등록되지 않은 자산
        """
        async with self.db.transaction():
            cursor = await self.db.execute(
                "DELETE FROM asset_registry WHERE asset = ?",
                (asset,),
            )
            if cursor.rowcount == 0:
                raise AssetNotSupportedError("등록되지 않은 자산입니다", asset=asset)

        logger.info(f"Asset unregistered: {asset}", extra={"updated_by": updated_by})

    async def lookup(self, asset: str) -> AssetRegistration | None:
        """등록 정보 조회

        Returns:
            등록 정보 (미등록이면 None)
        """
        row = await self.db.fetchone(
            """
            SELECT asset, accepted, price_reference, decimal_override, updated_by, updated_at
            FROM asset_registry
            WHERE asset = ?
            """,
            (asset,),
        )
        if not row:
            return None
        return self._row_to_registration(row)

    async def list_all(self) -> list[AssetRegistration]:
        """전체 등록 목록 (자산 ID 순)"""
        rows = await self.db.fetchall(
            """
            SELECT asset, accepted, price_reference, decimal_override, updated_by, updated_at
            FROM asset_registry
            ORDER BY asset
            """
        )
        return [self._row_to_registration(row) for row in rows]

    @staticmethod
    def _row_to_registration(row: tuple) -> AssetRegistration:
        return AssetRegistration(
            asset=row[0],
            accepted=bool(row[1]),
            price_reference=row[2],
            decimal_override=int(row[3]),
            updated_by=row[4],
            updated_at=row[5],
        )
