"""
core/config/loader.py 테스트

vault.yaml 로드, 검증, 모드별 경로 테스트
"""

from pathlib import Path

import pytest

from core.config.loader import (
    Settings,
    SettingsLoadError,
    VaultSettings,
    get_db_path,
    get_oracle_base_url,
    get_settings,
    load_settings,
)
from core.constants import BinanceEndpoints, Paths
from core.types import TradingMode


class TestLoadSettings:
    """load_settings() 테스트"""

    def test_load_valid_file(self, temp_settings_file: Path) -> None:
        """정상 파일 로드 (밑줄 숫자, 문자열 숫자 허용)"""
        settings = load_settings(temp_settings_file)

        assert settings.mode == TradingMode.TESTNET
        assert settings.stable_asset == "USDC"
        assert settings.custodian_account == "vault:custody"
        assert settings.bank_cap == 1_000_000_000_000
        assert settings.max_withdraw_value == 10_000_000_000
        assert settings.staleness_tolerance_sec == 60
        assert settings.admins == frozenset({"admin:ops", "admin:risk"})

    def test_oracle_url_defaults_by_mode(self, temp_settings_file: Path) -> None:
        """oracle.base_url 생략 시 모드별 URL"""
        settings = load_settings(temp_settings_file)

        assert settings.oracle_base_url == BinanceEndpoints.TEST_REST_URL

    def test_missing_file(self, temp_dir: Path) -> None:
        """파일 없음"""
        with pytest.raises(SettingsLoadError):
            load_settings(temp_dir / "nope.yaml")

    def test_empty_file(self, temp_dir: Path) -> None:
        """빈 파일"""
        path = temp_dir / "empty.yaml"
        path.write_text("", encoding="utf-8")

        with pytest.raises(SettingsLoadError):
            load_settings(path)

    def test_missing_mode(self, temp_dir: Path) -> None:
        """mode 누락"""
        path = temp_dir / "no_mode.yaml"
        path.write_text("vault:\n  stable_asset: USDC\n", encoding="utf-8")

        with pytest.raises(SettingsLoadError):
            load_settings(path)

    def test_invalid_mode(self, temp_dir: Path) -> None:
        """유효하지 않은 mode"""
        path = temp_dir / "bad_mode.yaml"
        path.write_text("mode: invalid_mode\n", encoding="utf-8")

        with pytest.raises(ValueError, match="유효하지 않은 mode"):
            load_settings(path)

    def test_defaults_when_vault_section_missing(self, temp_dir: Path) -> None:
        """vault 섹션 없으면 기본값"""
        path = temp_dir / "minimal.yaml"
        path.write_text("mode: production\n", encoding="utf-8")

        settings = load_settings(path)

        assert settings.stable_asset == "USDC"
        assert settings.admins == frozenset()
        assert settings.oracle_base_url == BinanceEndpoints.PROD_REST_URL

    @pytest.mark.parametrize("raw", ["-1", "abc", "true"])
    def test_invalid_amount(self, temp_dir: Path, raw: str) -> None:
        """음수/비숫자/불리언 금액 거부"""
        path = temp_dir / "bad_amount.yaml"
        path.write_text(f"mode: testnet\nvault:\n  bank_cap: {raw}\n", encoding="utf-8")

        with pytest.raises(SettingsLoadError):
            load_settings(path)

    def test_admins_must_be_list(self, temp_dir: Path) -> None:
        """admins가 목록이 아니면 거부"""
        path = temp_dir / "bad_admins.yaml"
        path.write_text("mode: testnet\nadmins: admin:ops\n", encoding="utf-8")

        with pytest.raises(SettingsLoadError):
            load_settings(path)


class TestVaultSettings:
    """VaultSettings 데이터클래스 테스트"""

    def test_frozen(self, vault_settings: VaultSettings) -> None:
        """불변성 확인"""
        with pytest.raises(AttributeError):
            vault_settings.bank_cap = 1  # type: ignore

    def test_db_path(self, vault_settings: VaultSettings) -> None:
        """모드별 DB 경로"""
        assert vault_settings.db_path == Paths.TEST_DB


class TestPaths:
    """모드별 경로/URL"""

    def test_db_path(self) -> None:
        assert get_db_path(TradingMode.PRODUCTION) == Paths.PROD_DB
        assert get_db_path(TradingMode.TESTNET) == Paths.TEST_DB

    def test_oracle_url(self) -> None:
        assert get_oracle_base_url(TradingMode.PRODUCTION) == BinanceEndpoints.PROD_REST_URL
        assert get_oracle_base_url(TradingMode.TESTNET) == BinanceEndpoints.TEST_REST_URL


class TestSettingsSingleton:
    """Settings 싱글턴 테스트"""

    def setup_method(self) -> None:
        Settings.reset()

    def teardown_method(self) -> None:
        Settings.reset()

    def test_singleton(self, temp_settings_file: Path) -> None:
        """같은 인스턴스 반환"""
        first = get_settings(temp_settings_file)
        second = get_settings()

        assert first is second
        assert second.mode == TradingMode.TESTNET
        assert second.vault.stable_asset == "USDC"
        assert second.db_path == Paths.TEST_DB
