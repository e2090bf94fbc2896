"""
ConfigStore - 런타임 설정 저장소

config_store 테이블을 통해 런타임 설정 관리.
Vault 흐름과 Web 관리 API가 공유하는 설정을 저장/조회.

설정 키 구조:
- "vault": {bank_cap, max_withdraw_value, staleness_tolerance_sec}
  금액은 내부 6자리 스케일 정수를 문자열로 저장.
  bank_cap은 최초 생성 후 변경 불가.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import Defaults
from core.types import VaultConfig

if TYPE_CHECKING:
    from core.config.loader import VaultSettings

logger = logging.getLogger(__name__)


VAULT_CONFIG_KEY = "vault"

# 기본 설정값
DEFAULT_CONFIGS: dict[str, dict[str, Any]] = {
    VAULT_CONFIG_KEY: {
        "bank_cap": str(Defaults.BANK_CAP),
        "max_withdraw_value": str(Defaults.MAX_WITHDRAW_VALUE),
        "staleness_tolerance_sec": Defaults.STALENESS_TOLERANCE_SEC,
    },
}

# 런타임에 변경 불가한 필드
IMMUTABLE_FIELDS: dict[str, frozenset[str]] = {
    VAULT_CONFIG_KEY: frozenset({"bank_cap"}),
}


class ConfigStore:
    """설정 저장소

    config_store 테이블을 읽고 쓰는 클래스.

    Args:
        db: SQLiteAdapter 인스턴스

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as db:
        config_store = ConfigStore(db)

        config = await config_store.get_vault_config()
        cap = config.bank_cap

        await config_store.update_field("vault", "max_withdraw_value", "5000000000")
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self._cache: dict[str, dict[str, Any]] = {}
        self._cache_version: dict[str, int] = {}

    async def get(self, key: str, use_cache: bool = True) -> dict[str, Any]:
        """설정 조회

        Args:
            key: 설정 키
            use_cache: 캐시 사용 여부 (기본 True)

        Returns:
            설정 값 (dict 복사본). 없으면 기본값 반환.
        """
        if use_cache and key in self._cache:
            return dict(self._cache[key])

        row = await self.db.fetchone(
            """
            SELECT value_json, version
            FROM config_store
            WHERE config_key = ?
            """,
            (key,),
        )

        if row:
            value = json.loads(row[0]) if isinstance(row[0], str) else row[0]
            self._cache[key] = value
            self._cache_version[key] = row[1]
            return dict(value)

        return dict(DEFAULT_CONFIGS.get(key, {}))

    async def get_version(self, key: str) -> int:
        """설정 버전 조회 (없으면 0)"""
        row = await self.db.fetchone(
            "SELECT version FROM config_store WHERE config_key = ?",
            (key,),
        )
        return int(row[0]) if row else 0

    async def exists(self, key: str) -> bool:
        """DB에 실제로 저장된 설정인지 여부"""
        row = await self.db.fetchone(
            "SELECT 1 FROM config_store WHERE config_key = ?",
            (key,),
        )
        return row is not None

    async def set(
        self,
        key: str,
        value: dict[str, Any],
        updated_by: str = "vault:system",
    ) -> None:
        """설정 저장 (UPSERT)

        Args:
            key: 설정 키
            value: 설정 값
            updated_by: 업데이트 주체
        """
        now = datetime.now(timezone.utc).isoformat()
        value_json = json.dumps(value, ensure_ascii=False)

        async with self.db.transaction():
            await self.db.execute(
                """
                INSERT INTO config_store (config_key, value_json, version, updated_by, created_at, updated_at)
                VALUES (?, ?, 1, ?, ?, ?)
                ON CONFLICT(config_key) DO UPDATE SET
                    value_json = excluded.value_json,
                    version = config_store.version + 1,
                    updated_by = excluded.updated_by,
                    updated_at = excluded.updated_at
                """,
                (key, value_json, updated_by, now, now),
            )

        # 캐시 무효화
        self._cache.pop(key, None)
        self._cache_version.pop(key, None)

        logger.info(f"Config '{key}' updated by {updated_by}")

    async def update_field(
        self,
        key: str,
        field: str,
        value: Any,
        updated_by: str = "vault:system",
    ) -> dict[str, Any]:
        """설정의 특정 필드만 업데이트

        Raises:
            ValueError: 변경 불가 필드

        Returns:
            업데이트된 설정 값
        """
        if field in IMMUTABLE_FIELDS.get(key, frozenset()):
            raise ValueError(f"'{key}.{field}' is immutable after creation")

        config = await self.get(key, use_cache=False)
        config[field] = value
        await self.set(key, config, updated_by)
        return config

    def clear_cache(self) -> None:
        """캐시 초기화"""
        self._cache.clear()
        self._cache_version.clear()

    # =========================================================================
    # Vault 런타임 설정
    # =========================================================================

    async def ensure_vault_config(self, settings: VaultSettings) -> VaultConfig:
        """Vault 설정이 없으면 YAML 초기값으로 생성

        이미 저장된 설정이 있으면 그대로 사용한다.
        저장된 bank_cap과 YAML 값이 다르면 저장값 우선 (생성 후 불변).

        Returns:
            유효한 VaultConfig
        """
        if not await self.exists(VAULT_CONFIG_KEY):
            initial = VaultConfig(
                bank_cap=settings.bank_cap,
                max_withdraw_value=settings.max_withdraw_value,
                staleness_tolerance_sec=settings.staleness_tolerance_sec,
            )
            await self.set(VAULT_CONFIG_KEY, initial.to_dict(), updated_by="vault:init")
            logger.info(
                "Created vault config",
                extra={
                    "bank_cap": initial.bank_cap,
                    "max_withdraw_value": initial.max_withdraw_value,
                    "staleness_tolerance_sec": initial.staleness_tolerance_sec,
                },
            )
            return initial

        stored = await self.get_vault_config()
        if stored.bank_cap != settings.bank_cap:
            logger.warning(
                f"설정 파일의 bank_cap({settings.bank_cap})을 무시합니다. "
                f"저장된 값 {stored.bank_cap} 사용 (생성 후 변경 불가)"
            )
        return stored

    async def get_vault_config(self) -> VaultConfig:
        """Vault 런타임 설정 조회"""
        return VaultConfig.from_dict(await self.get(VAULT_CONFIG_KEY))

    async def set_max_withdraw_value(self, value: int, updated_by: str) -> VaultConfig:
        """1회 출금 한도 변경 (내부 6자리 스케일)"""
        if value < 0:
            raise ValueError(f"max_withdraw_value must be non-negative: {value}")
        config = await self.update_field(
            VAULT_CONFIG_KEY, "max_withdraw_value", str(value), updated_by
        )
        return VaultConfig.from_dict(config)

    async def set_staleness_tolerance(self, seconds: int, updated_by: str) -> VaultConfig:
        """가격 staleness 허용 시간 변경 (초, 0이면 검사 안 함)"""
        if seconds < 0:
            raise ValueError(f"staleness_tolerance_sec must be non-negative: {seconds}")
        config = await self.update_field(
            VAULT_CONFIG_KEY, "staleness_tolerance_sec", seconds, updated_by
        )
        return VaultConfig.from_dict(config)
