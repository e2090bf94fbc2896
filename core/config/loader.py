"""
설정 로더

vault.yaml 로드 및 Vault 설정 생성
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from core.constants import BinanceEndpoints, Defaults, Paths
from core.types import TradingMode


@dataclass(frozen=True)
class VaultSettings:
    """Vault 설정 (vault.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지.
    금액 필드는 내부 6자리 스케일 정수.
    """

    mode: TradingMode
    stable_asset: str
    custodian_account: str
    bank_cap: int
    max_withdraw_value: int
    staleness_tolerance_sec: int
    admins: frozenset[str] = field(default_factory=frozenset)
    oracle_base_url: str = ""

    @property
    def db_path(self) -> Path:
        """현재 모드의 DB 경로"""
        return get_db_path(self.mode)


class SettingsLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def _parse_amount(section: dict[str, Any], name: str, default: int) -> int:
    """정수 금액 필드 파싱 (int 또는 숫자 문자열 허용)"""
    raw = section.get(name, default)
    if isinstance(raw, bool):
        raise SettingsLoadError(f"vault.yaml의 '{name}' 값이 올바르지 않습니다: {raw!r}")
    try:
        value = int(str(raw).replace("_", ""))
    except ValueError as e:
        raise SettingsLoadError(
            f"vault.yaml의 '{name}' 값은 정수여야 합니다: {raw!r}"
        ) from e
    if value < 0:
        raise SettingsLoadError(f"vault.yaml의 '{name}' 값은 음수일 수 없습니다: {value}")
    return value


def load_settings(path: Path | None = None) -> VaultSettings:
    """vault.yaml 파일 로드

    Args:
        path: vault.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        VaultSettings 인스턴스

    Raises:
        SettingsLoadError: 파일이 없거나 형식이 잘못된 경우
        ValueError: 유효하지 않은 mode인 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        raise SettingsLoadError(f"vault.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"vault.yaml 파싱 실패: {e}") from e

    if data is None:
        raise SettingsLoadError("vault.yaml이 비어 있습니다")

    # mode 검증
    mode_str = data.get("mode")
    if mode_str is None:
        raise SettingsLoadError("vault.yaml에 'mode' 필드가 없습니다")

    try:
        mode = TradingMode(mode_str)
    except ValueError as e:
        valid_modes = [m.value for m in TradingMode]
        raise ValueError(
            f"유효하지 않은 mode입니다: '{mode_str}'. "
            f"유효한 값: {valid_modes}"
        ) from e

    vault_config = data.get("vault") or {}
    stable_asset = str(vault_config.get("stable_asset", Defaults.STABLE_ASSET)).strip()
    if not stable_asset:
        raise SettingsLoadError("vault.yaml의 vault 섹션에 'stable_asset'이 비어 있습니다")

    custodian_account = str(
        vault_config.get("custodian_account", Defaults.CUSTODIAN_ACCOUNT)
    ).strip()
    if not custodian_account:
        raise SettingsLoadError("vault.yaml의 vault 섹션에 'custodian_account'가 비어 있습니다")

    bank_cap = _parse_amount(vault_config, "bank_cap", Defaults.BANK_CAP)
    max_withdraw_value = _parse_amount(
        vault_config, "max_withdraw_value", Defaults.MAX_WITHDRAW_VALUE
    )
    staleness = _parse_amount(
        vault_config, "staleness_tolerance_sec", Defaults.STALENESS_TOLERANCE_SEC
    )

    admins = data.get("admins") or []
    if not isinstance(admins, list):
        raise SettingsLoadError("vault.yaml의 'admins'는 목록이어야 합니다")

    oracle_config = data.get("oracle") or {}
    oracle_base_url = oracle_config.get("base_url") or get_oracle_base_url(mode)

    return VaultSettings(
        mode=mode,
        stable_asset=stable_asset,
        custodian_account=custodian_account,
        bank_cap=bank_cap,
        max_withdraw_value=max_withdraw_value,
        staleness_tolerance_sec=staleness,
        admins=frozenset(str(a) for a in admins),
        oracle_base_url=oracle_base_url,
    )


def get_oracle_base_url(mode: TradingMode) -> str:
    """모드에 따른 시세 REST URL 반환"""
    if mode == TradingMode.PRODUCTION:
        return BinanceEndpoints.PROD_REST_URL
    return BinanceEndpoints.TEST_REST_URL


def get_db_path(mode: TradingMode) -> Path:
    """모드에 따른 DB 경로 반환

    Args:
        mode: 운영 모드

    Returns:
        DB 파일 경로 (Path 타입)
    """
    if mode == TradingMode.PRODUCTION:
        return Paths.PROD_DB
    return Paths.TEST_DB


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    vault.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _settings: VaultSettings | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._settings is None:
            self._settings = load_settings(settings_path)

    @property
    def vault(self) -> VaultSettings:
        """로드된 Vault 설정"""
        assert self._settings is not None
        return self._settings

    @property
    def mode(self) -> TradingMode:
        """현재 운영 모드"""
        return self.vault.mode

    @property
    def db_path(self) -> Path:
        """현재 모드의 DB 경로"""
        return self.vault.db_path

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._settings = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: vault.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)
