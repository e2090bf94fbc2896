"""
Web API 라우트 테스트

httpx.ASGITransport 로 테스트와 같은 이벤트 루프에서 앱 호출
(aiosqlite 연결과 Operation Guard 락을 공유하기 위함)
"""

from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio

from adapters.mock.exchange_venue import MockExchangeVenue
from core.constants import INTERNAL_UNIT, VERSION
from vault.custodian import Custodian
from web.app import create_app

ADMIN = "admin:ops"
ONE_WETH = 10**18


@pytest_asyncio.fixture
async def client(custodian: Custodian) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Custodian이 연결된 앱 클라이언트"""
    app = create_app(custodian)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


class TestHealth:
    """헬스 체크"""

    @pytest.mark.asyncio
    async def test_health(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "ok",
            "mode": "testnet",
            "version": VERSION,
            "stable_asset": "USDC",
        }

    @pytest.mark.asyncio
    async def test_not_ready(self) -> None:
        """Custodian 없이 시작 전 → 503"""
        transport = httpx.ASGITransport(app=create_app())
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
            response = await http.get("/api/health")

        assert response.status_code == 503


class TestVaultRoutes:
    """입금/출금/Swap 입금"""

    @pytest.mark.asyncio
    async def test_deposit_and_balance(self, client: httpx.AsyncClient) -> None:
        response = await client.post(
            "/api/vault/deposit",
            json={"asset": "WETH", "account": "alice", "amount": str(ONE_WETH)},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["kind"] == "DEPOSIT"
        assert body["amount"] == str(ONE_WETH)
        assert body["value"] == str(2_000 * INTERNAL_UNIT)

        balance = await client.get("/api/vault/balances/WETH/alice")
        assert balance.json() == {"asset": "WETH", "account": "alice", "amount": str(ONE_WETH)}

    @pytest.mark.asyncio
    async def test_cap_exceeded_error_body(self, client: httpx.AsyncClient) -> None:
        """VaultError → 400 {kind, message, details}"""
        response = await client.post(
            "/api/vault/deposit",
            json={"asset": "USDC", "account": "alice", "amount": str(10**13)},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["kind"] == "CapExceeded"
        assert body["details"]["cap"] == str(1_000_000 * INTERNAL_UNIT)

    @pytest.mark.asyncio
    async def test_zero_amount_is_422(self, client: httpx.AsyncClient) -> None:
        response = await client.post(
            "/api/vault/deposit",
            json={"asset": "USDC", "account": "alice", "amount": 0},
        )

        assert response.status_code == 422
        assert response.json()["kind"] == "ZeroAmount"

    @pytest.mark.asyncio
    async def test_negative_amount_rejected_by_schema(self, client: httpx.AsyncClient) -> None:
        response = await client.post(
            "/api/vault/deposit",
            json={"asset": "USDC", "account": "alice", "amount": -1},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_withdraw(self, client: httpx.AsyncClient) -> None:
        await client.post(
            "/api/vault/deposit",
            json={"asset": "USDC", "account": "alice", "amount": "100"},
        )

        response = await client.post(
            "/api/vault/withdraw",
            json={"asset": "USDC", "account": "alice", "amount": "60", "recipient": "bob"},
        )

        assert response.status_code == 200
        assert response.json()["total_after"] == "40"

    @pytest.mark.asyncio
    async def test_insufficient_balance(self, client: httpx.AsyncClient) -> None:
        response = await client.post(
            "/api/vault/withdraw",
            json={"asset": "USDC", "account": "alice", "amount": "1"},
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "InsufficientBalance"

    @pytest.mark.asyncio
    async def test_swap_deposit(self, client: httpx.AsyncClient, venue: MockExchangeVenue) -> None:
        venue.state.reported_override = 1

        response = await client.post(
            "/api/vault/swap-deposit",
            json={"asset_in": "WETH", "account": "alice", "amount": str(ONE_WETH)},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["credited_asset"] == "USDC"
        assert body["credited_amount"] == str(2_000 * INTERNAL_UNIT)
        assert body["reported_amount"] == "1"

    @pytest.mark.asyncio
    async def test_status(self, client: httpx.AsyncClient) -> None:
        await client.post(
            "/api/vault/deposit",
            json={"asset": "USDC", "account": "alice", "amount": "100"},
        )

        response = await client.get("/api/vault/status")

        assert response.status_code == 200
        body = response.json()
        assert body["total_valued"] == "100"
        assert body["headroom"] == str(1_000_000 * INTERNAL_UNIT - 100)
        assert body["busy"] is False
        assert [a["asset"] for a in body["assets"]] == ["WETH"]


class TestAdminRoutes:
    """관리 API"""

    @pytest.mark.asyncio
    async def test_register_requires_principal(self, client: httpx.AsyncClient) -> None:
        response = await client.put("/api/admin/assets/WBTC", json={"price_reference": "BTCUSDT"})

        assert response.status_code == 403
        assert response.json()["kind"] == "Unauthorized"

    @pytest.mark.asyncio
    async def test_register_and_unregister(self, client: httpx.AsyncClient) -> None:
        headers = {"X-Principal": ADMIN}

        response = await client.put(
            "/api/admin/assets/WBTC",
            json={"price_reference": "BTCUSDT", "decimal_override": 8},
            headers=headers,
        )
        assert response.status_code == 200
        assert response.json()["updated_by"] == ADMIN

        response = await client.delete("/api/admin/assets/WBTC", headers=headers)
        assert response.status_code == 200

        response = await client.delete("/api/admin/assets/WBTC", headers=headers)
        assert response.status_code == 400
        assert response.json()["kind"] == "AssetNotSupported"

    @pytest.mark.asyncio
    async def test_empty_reference_is_422(self, client: httpx.AsyncClient) -> None:
        response = await client.put(
            "/api/admin/assets/WBTC",
            json={"price_reference": " "},
            headers={"X-Principal": ADMIN},
        )

        assert response.status_code == 422
        assert response.json()["kind"] == "InvalidReference"

    @pytest.mark.asyncio
    async def test_update_config(self, client: httpx.AsyncClient) -> None:
        response = await client.patch(
            "/api/admin/config",
            json={"max_withdraw_value": "5000000", "staleness_tolerance_sec": 120},
            headers={"X-Principal": ADMIN},
        )

        assert response.status_code == 200
        assert response.json() == {
            "bank_cap": str(1_000_000 * INTERNAL_UNIT),
            "max_withdraw_value": "5000000",
            "staleness_tolerance_sec": 120,
        }

    @pytest.mark.asyncio
    async def test_bank_cap_not_updatable(self, client: httpx.AsyncClient) -> None:
        response = await client.patch(
            "/api/admin/config",
            json={"bank_cap": "1"},
            headers={"X-Principal": ADMIN},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_empty_config_update(self, client: httpx.AsyncClient) -> None:
        response = await client.patch(
            "/api/admin/config",
            json={},
            headers={"X-Principal": ADMIN},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_stranded_and_recover(self, client: httpx.AsyncClient) -> None:
        """Cap 초과 Swap → 목록 조회 → 회수"""
        await client.post(
            "/api/vault/deposit",
            json={"asset": "USDC", "account": "alice", "amount": str(1_000_000 * INTERNAL_UNIT)},
        )
        swap = await client.post(
            "/api/vault/swap-deposit",
            json={"asset_in": "WETH", "account": "bob", "amount": str(ONE_WETH)},
        )
        assert swap.status_code == 400
        assert swap.json()["kind"] == "CapExceeded"

        headers = {"X-Principal": ADMIN}
        stranded = await client.get("/api/admin/stranded", headers=headers)
        assert stranded.status_code == 200
        assert [e["kind"] for e in stranded.json()] == ["SWAP_STRANDED"]

        forbidden = await client.get("/api/admin/stranded")
        assert forbidden.status_code == 403

        recovered = await client.post(
            "/api/admin/recover",
            json={"asset": "USDC", "to_account": "treasury", "amount": str(2_000 * INTERNAL_UNIT)},
            headers=headers,
        )
        assert recovered.status_code == 200
        assert recovered.json()["kind"] == "RECOVERY"
