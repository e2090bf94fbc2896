"""
Swap Settlement 흐름 테스트

적립량은 거래소 보고값이 아니라 보관 계정 스테이블 잔고의 실제 증가량
"""

from unittest.mock import AsyncMock, patch

import pytest

from adapters.mock.exchange_venue import MockExchangeVenue
from adapters.mock.transfer_service import MockCollaboratorError, MockTransferService
from core.constants import INTERNAL_UNIT
from core.errors import (
    AssetNotSupportedError,
    CapExceededError,
    SwapFailureError,
    TransferFailureError,
    ZeroAmountError,
)
from core.types import OperationKind
from vault.custodian import Custodian

ONE_WETH = 10**18
CUSTODY = "vault:custody"


class TestSwapDeposit:
    """정상 Swap 입금"""

    @pytest.mark.asyncio
    async def test_credits_realized_not_reported(
        self,
        custodian: Custodian,
        transfers: MockTransferService,
        venue: MockExchangeVenue,
    ) -> None:
        """보관 1000 → 거래소 보고 500, 실제 도착 300 → 300 적립"""
        transfers.mint("USDC", CUSTODY, 1_000)
        venue.set_rate("WETH", "USDC", 300, ONE_WETH)
        venue.state.reported_override = 500

        receipt = await custodian.swap_deposit("WETH", "alice", ONE_WETH)

        assert receipt.kind == OperationKind.SWAP_DEPOSIT
        assert receipt.credited_asset == "USDC"
        assert receipt.credited_amount == 300
        assert receipt.value == 300
        assert receipt.reported_amount == 500
        assert receipt.total_after == 300
        assert await transfers.custody_balance("USDC") == 1_300
        assert await custodian.balance_of("USDC", "alice") == 300
        assert await custodian.balance_of("WETH", "alice") == 0

    @pytest.mark.asyncio
    async def test_fee_on_transfer_credits_arrived_amount(
        self,
        custodian: Custodian,
        venue: MockExchangeVenue,
    ) -> None:
        """전달 과정 수수료만큼 적게 적립"""
        venue.state.fee_skim = 1_000

        receipt = await custodian.swap_deposit("WETH", "alice", ONE_WETH)

        assert receipt.credited_amount == 2_000 * INTERNAL_UNIT - 1_000
        assert receipt.reported_amount == 2_000 * INTERNAL_UNIT

    @pytest.mark.asyncio
    async def test_min_out_floored_at_one(
        self,
        custodian: Custodian,
        venue: MockExchangeVenue,
    ) -> None:
        """요청 최소 수령량 0 → 거래소에는 1 전달"""
        await custodian.swap_deposit("WETH", "alice", ONE_WETH, min_amount_out=0)

        assert venue.state.calls[0] == ("WETH", "USDC", ONE_WETH, 1, CUSTODY)

    @pytest.mark.asyncio
    async def test_journal_entry(self, custodian: Custodian) -> None:
        await custodian.swap_deposit("WETH", "alice", ONE_WETH, min_amount_out=5)

        entries = await custodian.ledger.list_entries(kind=OperationKind.SWAP_DEPOSIT)

        assert len(entries) == 1
        assert entries[0].asset == "WETH"
        assert entries[0].extra["credited_asset"] == "USDC"
        assert entries[0].extra["min_amount_out"] == "5"


class TestSwapRejections:
    """거부/실패"""

    @pytest.mark.asyncio
    async def test_zero_amount(self, custodian: Custodian) -> None:
        with pytest.raises(ZeroAmountError):
            await custodian.swap_deposit("WETH", "alice", 0)

    @pytest.mark.asyncio
    async def test_stable_input_rejected(
        self,
        custodian: Custodian,
        transfers: MockTransferService,
    ) -> None:
        """스테이블 자산 입력은 직접 입금 사용"""
        with pytest.raises(AssetNotSupportedError):
            await custodian.swap_deposit("USDC", "alice", 10)

        assert transfers.state.calls == []

    @pytest.mark.asyncio
    async def test_intake_failure(self, custodian: Custodian, transfers: MockTransferService) -> None:
        transfers.state.fail_next_move_in = True

        with pytest.raises(TransferFailureError):
            await custodian.swap_deposit("WETH", "alice", ONE_WETH)

        assert transfers.balance_of("WETH", "alice") == 100 * ONE_WETH

    @pytest.mark.asyncio
    async def test_venue_failure_refunds_intake(
        self,
        custodian: Custodian,
        transfers: MockTransferService,
        venue: MockExchangeVenue,
    ) -> None:
        """거래소 실패 → 입력 전량 환불, 흔적 없음"""
        venue.state.should_fail = True

        with pytest.raises(SwapFailureError) as exc_info:
            await custodian.swap_deposit("WETH", "alice", ONE_WETH)

        assert exc_info.value.details["stage"] == "EXCHANGE"
        assert transfers.balance_of("WETH", "alice") == 100 * ONE_WETH
        assert await transfers.custody_balance("WETH") == 0
        assert await custodian.total_valued() == 0
        assert await custodian.ledger.list_entries() == []

    @pytest.mark.asyncio
    async def test_min_out_not_met_refunds(
        self,
        custodian: Custodian,
        transfers: MockTransferService,
    ) -> None:
        with pytest.raises(SwapFailureError):
            await custodian.swap_deposit("WETH", "alice", ONE_WETH, min_amount_out=10**15)

        assert transfers.balance_of("WETH", "alice") == 100 * ONE_WETH

    @pytest.mark.asyncio
    async def test_zero_realized_refunds_unconsumed(
        self,
        custodian: Custodian,
        transfers: MockTransferService,
        venue: MockExchangeVenue,
    ) -> None:
        """실제 도착량 0 → SwapFailure, 소비되지 않은 입력만 환불"""
        venue.state.consume_bps = 5_000
        venue.state.fee_skim = 10**30

        with pytest.raises(SwapFailureError) as exc_info:
            await custodian.swap_deposit("WETH", "alice", 2 * ONE_WETH)

        assert exc_info.value.details["stage"] == "RECONCILE"
        assert transfers.balance_of("WETH", "alice") == 99 * ONE_WETH
        assert await custodian.balance_of("USDC", "alice") == 0

    @pytest.mark.asyncio
    async def test_cap_exceeded_strands_result(
        self,
        custodian: Custodian,
        transfers: MockTransferService,
    ) -> None:
        """Cap 초과 → 잔고/합계 불변, 결과는 보관 계정에 남고 저널 기록"""
        headroom = 100
        await custodian.deposit("USDC", "alice", 1_000_000 * INTERNAL_UNIT - headroom)
        custody_before = await transfers.custody_balance("USDC")

        with pytest.raises(CapExceededError) as exc_info:
            await custodian.swap_deposit("WETH", "bob", ONE_WETH)

        assert await custodian.total_valued() == 1_000_000 * INTERNAL_UNIT - headroom
        assert await custodian.balance_of("USDC", "bob") == 0
        assert await transfers.custody_balance("USDC") == custody_before + 2_000 * INTERNAL_UNIT

        stranded = await custodian.admin.stranded_entries()
        assert len(stranded) == 1
        assert stranded[0].account == "bob"
        assert stranded[0].value == 2_000 * INTERNAL_UNIT
        assert exc_info.value.details["stranded_entry_id"] == stranded[0].entry_id


class TestCustodyBalanceFailure:
    """보관 잔고 조회 실패"""

    @pytest.mark.asyncio
    async def test_snapshot_before_exchange_refunds_intake(
        self,
        custodian: Custodian,
        transfers: MockTransferService,
        venue: MockExchangeVenue,
    ) -> None:
        """교환 전 조회 실패 → 입력 전량 환불, SwapFailure(INTAKE)"""
        broken = AsyncMock(side_effect=MockCollaboratorError("balance unavailable"))

        with patch.object(transfers, "custody_balance", broken):
            with pytest.raises(SwapFailureError) as exc_info:
                await custodian.swap_deposit("WETH", "alice", ONE_WETH)

        assert exc_info.value.details["stage"] == "INTAKE"
        assert isinstance(exc_info.value.__cause__, MockCollaboratorError)
        assert venue.state.calls == []
        assert transfers.balance_of("WETH", "alice") == 100 * ONE_WETH
        assert await transfers.custody_balance("WETH") == 0
        assert await custodian.ledger.list_entries() == []

    @pytest.mark.asyncio
    async def test_snapshot_after_exchange_strands_result(
        self,
        custodian: Custodian,
        transfers: MockTransferService,
    ) -> None:
        """교환 후 조회 실패 → 적립 없음, 회수 대상 저널 기록 후 SwapFailure(RECONCILE)"""
        real_balance = transfers.custody_balance
        seen = {"USDC": 0}

        async def fail_second_stable_read(asset: str) -> int:
            if asset == "USDC":
                seen["USDC"] += 1
                if seen["USDC"] == 2:
                    raise MockCollaboratorError("balance unavailable")
            return await real_balance(asset)

        with patch.object(
            transfers,
            "custody_balance",
            AsyncMock(side_effect=fail_second_stable_read),
        ):
            with pytest.raises(SwapFailureError) as exc_info:
                await custodian.swap_deposit("WETH", "alice", ONE_WETH)

        assert exc_info.value.details["stage"] == "RECONCILE"
        assert await custodian.balance_of("USDC", "alice") == 0
        assert await custodian.total_valued() == 0
        assert await transfers.custody_balance("USDC") == 2_000 * INTERNAL_UNIT

        stranded = await custodian.admin.stranded_entries()
        assert len(stranded) == 1
        assert stranded[0].account == "alice"
        assert stranded[0].reported_amount == 2_000 * INTERNAL_UNIT
        assert exc_info.value.details["stranded_entry_id"] == stranded[0].entry_id
