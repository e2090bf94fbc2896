"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


VERSION: str = "0.1.0"


# 내부 고정소수점 자릿수 (모든 평가액은 소수 6자리 정수로 정규화)
INTERNAL_DECIMALS: int = 6
INTERNAL_UNIT: int = 10**INTERNAL_DECIMALS

# decimals()를 보고하지 않는 자산의 기본 자릿수
FALLBACK_ASSET_DECIMALS: int = 18

# Swap 최소 수령량 하한 (0 수령 거래 방지)
MIN_SWAP_OUTPUT: int = 1


class BinanceEndpoints:
    """Binance Spot 시세 엔드포인트 (고정값)

    공식 문서: https://developers.binance.com/docs/binance-spot-api-docs/rest-api/market-data-endpoints
    """

    PROD_REST_URL: str = "https://api.binance.com"
    TEST_REST_URL: str = "https://testnet.binance.vision"

    TICKER_24HR_PATH: str = "/api/v3/ticker/24hr"

    # 시세 문자열을 정수로 변환할 때 사용하는 자릿수
    PRICE_DECIMALS: int = 8


class RateLimitThresholds:
    """Rate Limit 임계값 (Spot 1분 가중치 한도 6000 기준)"""

    WEIGHT_WARN: int = 4000  # 경고
    WEIGHT_STOP: int = 5500  # 요청 중단


class Defaults:
    """기본값 상수"""

    STABLE_ASSET: str = "USDC"
    CUSTODIAN_ACCOUNT: str = "vault:custody"

    BANK_CAP: int = 1_000_000 * INTERNAL_UNIT  # $1,000,000
    MAX_WITHDRAW_VALUE: int = 10_000 * INTERNAL_UNIT  # $10,000
    STALENESS_TOLERANCE_SEC: int = 3600

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    VAULT_LOGS_DIR: Path = LOGS_DIR / "vault"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "vault.yaml"

    # DB 파일
    PROD_DB: Path = DATA_DIR / "vault_prod.db"
    TEST_DB: Path = DATA_DIR / "vault_test.db"
