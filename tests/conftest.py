"""
pytest 공통 fixture 정의

인메모리 DB, Mock 협력자, 고정 시계를 사용하는 Custodian 구성.
"""

import tempfile
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from adapters.access.static_gate import StaticAccessGate
from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from adapters.mock.exchange_venue import MockExchangeVenue
from adapters.mock.price_oracle import MockPriceOracle
from adapters.mock.transfer_service import MockTransferService
from core.config.loader import VaultSettings
from core.constants import INTERNAL_UNIT
from core.types import TradingMode
from vault.custodian import Custodian

# 테스트 기준 시각 (Unix 초)
NOW = 1_700_000_000

# $2000 (8자리)
ETH_PRICE = 2000 * 10**8

ONE_WETH = 10**18
ADMIN = "admin:ops"


class FakeClock:
    """이동 가능한 고정 시계"""

    def __init__(self, now: int = NOW):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 vault.yaml 파일 생성"""
    content = """# 테스트용 vault.yaml
mode: testnet

vault:
  stable_asset: USDC
  custodian_account: "vault:custody"
  bank_cap: 1_000_000_000_000
  max_withdraw_value: "10_000_000_000"
  staleness_tolerance_sec: 60

admins:
  - "admin:ops"
  - "admin:risk"
"""
    path = temp_dir / "vault.yaml"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def vault_settings() -> VaultSettings:
    """테스트용 Vault 설정 (Cap $1,000,000, 출금 한도 $10,000, staleness 60초)"""
    return VaultSettings(
        mode=TradingMode.TESTNET,
        stable_asset="USDC",
        custodian_account="vault:custody",
        bank_cap=1_000_000 * INTERNAL_UNIT,
        max_withdraw_value=10_000 * INTERNAL_UNIT,
        staleness_tolerance_sec=60,
        admins=frozenset({ADMIN}),
        oracle_base_url="https://testnet.binance.vision",
    )


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[SQLiteAdapter, None]:
    """스키마가 초기화된 인메모리 DB"""
    adapter = SQLiteAdapter(":memory:")
    await adapter.connect()
    await init_schema(adapter)
    yield adapter
    await adapter.close()


@pytest.fixture
def clock() -> FakeClock:
    """고정 시계"""
    return FakeClock()


@pytest.fixture
def transfers(vault_settings: VaultSettings) -> MockTransferService:
    """alice에게 USDC $1,000,000, WETH 100개 지급된 지갑"""
    service = MockTransferService(custody_account=vault_settings.custodian_account)
    service.set_decimals("USDC", 6)
    service.set_decimals("WETH", 18)
    service.mint("USDC", "alice", 1_000_000 * INTERNAL_UNIT)
    service.mint("WETH", "alice", 100 * ONE_WETH)
    service.mint("WETH", "bob", 100 * ONE_WETH)
    return service


@pytest.fixture
def oracle() -> MockPriceOracle:
    """ETHUSDT = $2000 (NOW 시점)"""
    mock = MockPriceOracle()
    mock.set_price("ETHUSDT", ETH_PRICE, decimals=8, updated_at=NOW)
    return mock


@pytest.fixture
def venue(transfers: MockTransferService) -> MockExchangeVenue:
    """1 WETH = 2000 USDC 거래소"""
    mock = MockExchangeVenue(transfers)
    mock.set_rate("WETH", "USDC", 2000 * INTERNAL_UNIT, ONE_WETH)
    return mock


@pytest.fixture
def gate() -> StaticAccessGate:
    """admin:ops만 허용"""
    return StaticAccessGate(admins=[ADMIN])


@pytest_asyncio.fixture
async def custodian(
    db: SQLiteAdapter,
    vault_settings: VaultSettings,
    oracle: MockPriceOracle,
    transfers: MockTransferService,
    venue: MockExchangeVenue,
    gate: StaticAccessGate,
    clock: FakeClock,
) -> Custodian:
    """WETH(ETHUSDT)가 등록된 Custodian"""
    vault = Custodian(
        db=db,
        settings=vault_settings,
        oracle=oracle,
        transfers=transfers,
        venue=venue,
        gate=gate,
        clock=clock,
    )
    await vault.start()
    await vault.registry.register("WETH", price_reference="ETHUSDT")
    return vault
