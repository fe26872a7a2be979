"""Tests for the account synchronization loop."""

from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest

from aptos_wallet.features.assets.service import AssetDiscoveryService
from aptos_wallet.features.balance.service import UNKNOWN
from aptos_wallet.features.sync import (
    AccountSynchronizer,
    PendingTransfer,
    ViewTab,
    build_transfer_notification,
    compute_gas_consumed,
)
from aptos_wallet.features.transfer import (
    TransferOutcome,
    TransferResult,
    TransferService,
)
from aptos_wallet.models import BusyFlag, TransferRequest
from aptos_wallet.shared.notifications import Severity
from tests.factories import (
    COIN_ADDRESS,
    RECIPIENT_ADDRESS,
    FakeLedger,
    coin_info,
    coin_store,
    native_store,
)

MOON = f"{COIN_ADDRESS}::Moon::Moon"
ACCOUNT = "0x" + "a" * 64


class GatedLedger(FakeLedger):
    """Holds the next resource lookup until ``gate`` is set, answering with the state seen at call time."""

    def __init__(self):
        super().__init__()
        self.gate = asyncio.Event()
        self.hold_next = False

    async def get_account_resources(self, address):
        if not self.hold_next:
            return await super().get_account_resources(address)
        self.hold_next = False
        self.calls.append(("get_account_resources", address))
        stale = list(self.resources.get(address.lower(), []))
        await self.gate.wait()
        return stale


class TestResync:
    @pytest.mark.asyncio
    async def test_builds_balance_and_assets(self, synchronizer, ledger, identity):
        ledger.set_resources(identity.address, [native_store(1000), coin_store(MOON, 25)])
        ledger.set_resources(COIN_ADDRESS, [coin_info(MOON, "Moon Coin", "MOON")])

        snapshot = await synchronizer.resync()

        assert snapshot.address == identity.address
        assert snapshot.balance == 1000
        assert [(a.symbol, a.balance) for a in snapshot.assets] == [("MOON", Decimal(25))]
        assert synchronizer.balance == 1000

    @pytest.mark.asyncio
    async def test_version_increases_on_every_commit(self, synchronizer, ledger, identity):
        ledger.set_resources(identity.address, [native_store(1)])
        start = synchronizer.snapshot.version

        first = await synchronizer.resync()
        second = await synchronizer.resync()

        assert start < first.version < second.version

    @pytest.mark.asyncio
    async def test_resync_is_idempotent(self, synchronizer, ledger, identity):
        ledger.set_resources(identity.address, [native_store(1000), coin_store(MOON, 3)])
        ledger.set_resources(COIN_ADDRESS, [coin_info(MOON, "Moon Coin", "MOON")])

        first = await synchronizer.resync()
        second = await synchronizer.resync()

        assert (first.balance, first.assets, first.resources) == (
            second.balance,
            second.assets,
            second.resources,
        )

    @pytest.mark.asyncio
    async def test_unfunded_account_keeps_unknown_balance(self, synchronizer, ledger):
        snapshot = await synchronizer.resync()

        assert snapshot.balance is UNKNOWN
        assert snapshot.assets == ()
        assert ledger.count("get_account_resources") == 1

    @pytest.mark.asyncio
    async def test_missing_account_keeps_previous_state(self, synchronizer, ledger, identity):
        ledger.set_resources(identity.address, [native_store(70)])
        await synchronizer.resync()
        ledger.set_resources(identity.address, None)

        snapshot = await synchronizer.resync()

        assert snapshot.balance == 70

    @pytest.mark.asyncio
    async def test_fetch_failure_keeps_previous_state(self, synchronizer, ledger, identity):
        ledger.set_resources(identity.address, [native_store(70)])
        await synchronizer.resync()
        ledger.errors["get_account_resources"] = ConnectionError("offline")

        snapshot = await synchronizer.resync()

        assert snapshot.balance == 70

    @pytest.mark.asyncio
    async def test_malformed_native_balance_is_unknown(self, synchronizer, ledger, identity):
        ledger.set_resources(identity.address, [native_store("not-a-number")])

        snapshot = await synchronizer.resync()

        assert snapshot.balance is UNKNOWN

    @pytest.mark.asyncio
    async def test_non_ascii_digits_make_balance_unknown(self, synchronizer, ledger, identity):
        ledger.set_resources(identity.address, [native_store("\u00b2")])

        snapshot = await synchronizer.resync()

        assert snapshot.balance is UNKNOWN
        assert snapshot.resources is not None

    @pytest.mark.asyncio
    async def test_no_address_skips_fetch(self, ledger):
        synchronizer = AccountSynchronizer(ledger, AssetDiscoveryService(ledger))

        snapshot = await synchronizer.resync()

        assert snapshot.address is None
        assert ledger.calls == []

    @pytest.mark.asyncio
    async def test_explicit_address_switches_account(self, synchronizer, ledger):
        ledger.set_resources(ACCOUNT, [native_store(9)])

        snapshot = await synchronizer.resync(ACCOUNT)

        assert snapshot.address == ACCOUNT
        assert snapshot.balance == 9


class TestCoalescing:
    @pytest.mark.asyncio
    async def test_superseded_pass_is_discarded(self):
        ledger = GatedLedger()
        ledger.set_resources(ACCOUNT, [native_store(100)])
        synchronizer = AccountSynchronizer(
            ledger, AssetDiscoveryService(ledger), address=ACCOUNT
        )

        ledger.hold_next = True
        stale_pass = asyncio.create_task(synchronizer.resync())
        await asyncio.sleep(0)

        ledger.set_resources(ACCOUNT, [native_store(200)])
        await synchronizer.resync()
        assert synchronizer.balance == 200

        ledger.gate.set()
        result = await stale_pass

        assert result.balance == 200
        assert synchronizer.balance == 200

    @pytest.mark.asyncio
    async def test_pending_transfer_survives_superseded_pass(self):
        ledger = GatedLedger()
        ledger.set_resources(ACCOUNT, [native_store(1000)])
        synchronizer = AccountSynchronizer(
            ledger, AssetDiscoveryService(ledger), address=ACCOUNT
        )
        synchronizer.record_transfer(TransferOutcome.success(), 500, 1000)

        ledger.hold_next = True
        stale_pass = asyncio.create_task(synchronizer.resync())
        await asyncio.sleep(0)
        ledger.set_resources(ACCOUNT, [native_store(499)])
        await synchronizer.resync()
        ledger.gate.set()
        await stale_pass

        assert synchronizer.pending_transfer is None
        assert len(synchronizer.notifications.history) == 1
        assert "gas consumed: 1" in synchronizer.notifications.history[0].description


class TestBusyFlags:
    @pytest.mark.asyncio
    async def test_flag_set_inside_scope_and_cleared_after(self, synchronizer):
        async with synchronizer.busy(BusyFlag.IMPORT):
            assert synchronizer.snapshot.import_busy is True
            assert synchronizer.snapshot.transfer_busy is False

        assert synchronizer.snapshot.import_busy is False

    @pytest.mark.asyncio
    async def test_flag_cleared_when_scope_raises(self, synchronizer):
        with pytest.raises(ValueError):
            async with synchronizer.busy(BusyFlag.FAUCET):
                raise ValueError("boom")

        assert synchronizer.snapshot.faucet_busy is False

    @pytest.mark.asyncio
    async def test_overlapping_scopes_hold_flag_until_last_exit(self, synchronizer):
        outer = synchronizer.busy(BusyFlag.TRANSFER)
        inner = synchronizer.busy(BusyFlag.TRANSFER)

        await outer.__aenter__()
        await inner.__aenter__()
        await inner.__aexit__(None, None, None)
        assert synchronizer.snapshot.transfer_busy is True

        await outer.__aexit__(None, None, None)
        assert synchronizer.snapshot.transfer_busy is False

    @pytest.mark.asyncio
    async def test_resync_does_not_clear_in_flight_flag(self, synchronizer, ledger, identity):
        ledger.set_resources(identity.address, [native_store(5)])

        async with synchronizer.busy(BusyFlag.TRANSFER):
            snapshot = await synchronizer.resync()
            assert snapshot.transfer_busy is True

        assert synchronizer.snapshot.transfer_busy is False


class TestFieldErrors:
    def test_set_and_clear(self, synchronizer):
        synchronizer.set_field_error("to_address", "Account does not exist")
        assert synchronizer.snapshot.field_errors == {"to_address": "Account does not exist"}

        synchronizer.set_field_error("to_address", None)
        assert synchronizer.snapshot.field_errors == {}

    def test_errors_are_read_only(self, synchronizer):
        synchronizer.set_field_error("to_address", "bad")

        with pytest.raises(TypeError):
            synchronizer.snapshot.field_errors["to_address"] = "changed"


class TestListeners:
    def test_listener_receives_each_snapshot(self, synchronizer):
        received = []
        synchronizer.subscribe(received.append)

        synchronizer.set_field_error("to_address", "bad")

        assert received == [synchronizer.snapshot]

    def test_failing_listener_does_not_block_commit(self, synchronizer):
        def broken(snapshot):
            raise RuntimeError("listener failed")

        synchronizer.subscribe(broken)
        synchronizer.set_field_error("to_address", "bad")

        assert synchronizer.snapshot.field_errors["to_address"] == "bad"


class TestTabs:
    @pytest.mark.asyncio
    async def test_activity_tab_gets_placeholder_list(self, synchronizer, ledger, identity):
        ledger.set_resources(identity.address, [native_store(5)])

        snapshot = await synchronizer.switch_tab(ViewTab.ACTIVITY)

        assert snapshot.active_tab is ViewTab.ACTIVITY
        assert snapshot.activity == ()
        assert ledger.count("get_account_resources") == 1

    @pytest.mark.asyncio
    async def test_assets_tab_leaves_activity_unloaded(self, synchronizer, ledger, identity):
        ledger.set_resources(identity.address, [native_store(5)])

        snapshot = await synchronizer.switch_tab(ViewTab.ASSETS)

        assert snapshot.activity is None


class TestTransferNotifications:
    @pytest.mark.asyncio
    async def test_success_reports_gas_consumed(
        self, synchronizer, ledger, identity, notifications
    ):
        ledger.set_resources(identity.address, [native_store(1000)])
        ledger.set_resources(RECIPIENT_ADDRESS, [native_store(0)])
        await synchronizer.resync()
        ledger.on_confirm = lambda: ledger.set_resources(identity.address, [native_store(499)])
        transfers = TransferService(ledger, synchronizer, gas_reserve=40)

        await transfers.submit_transfer(
            TransferRequest(from_account=identity, to_address=RECIPIENT_ADDRESS, amount=500)
        )

        [notification] = notifications.history
        assert notification.title == "Transaction succeeded"
        assert notification.severity is Severity.SUCCESS
        assert notification.duration_ms == 7000
        assert "Amount transferred: 500" in notification.description
        assert "gas consumed: 1" in notification.description
        assert synchronizer.balance == 499
        assert synchronizer.pending_transfer is None

    @pytest.mark.asyncio
    async def test_refused_transfer_emits_nothing(
        self, synchronizer, ledger, identity, notifications
    ):
        ledger.set_resources(identity.address, [native_store(1000)])
        await synchronizer.resync()
        transfers = TransferService(ledger, synchronizer, gas_reserve=40)

        outcome = await transfers.submit_transfer(
            TransferRequest(from_account=identity, to_address=RECIPIENT_ADDRESS, amount=500)
        )

        assert outcome.result is TransferResult.UNDEFINED_ACCOUNT
        assert list(notifications.history) == []
        assert synchronizer.pending_transfer is None

    @pytest.mark.asyncio
    async def test_failed_follow_up_fetch_settles_with_unknown_gas(
        self, synchronizer, ledger, identity, notifications
    ):
        ledger.set_resources(identity.address, [native_store(1000)])
        ledger.set_resources(RECIPIENT_ADDRESS, [native_store(0)])
        await synchronizer.resync()

        def node_goes_down():
            ledger.errors["get_account_resources"] = ConnectionError("node down")

        ledger.on_confirm = node_goes_down
        transfers = TransferService(ledger, synchronizer, gas_reserve=40)

        await transfers.submit_transfer(
            TransferRequest(from_account=identity, to_address=RECIPIENT_ADDRESS, amount=500)
        )

        [notification] = notifications.history
        assert notification.title == "Transaction succeeded"
        assert "gas consumed: unknown" in notification.description
        assert synchronizer.pending_transfer is None

        del ledger.errors["get_account_resources"]
        ledger.set_resources(identity.address, [native_store(5000)])
        await synchronizer.resync()

        assert len(notifications.history) == 1
        assert synchronizer.balance == 5000

    @pytest.mark.asyncio
    async def test_missing_account_after_transfer_settles_pending(
        self, synchronizer, ledger, notifications
    ):
        synchronizer.record_transfer(TransferOutcome.success(), 500, 1000)

        await synchronizer.resync()
        await synchronizer.resync()

        [notification] = notifications.history
        assert "gas consumed: unknown" in notification.description
        assert synchronizer.pending_transfer is None

    def test_failed_transaction_notification(self):
        pending = PendingTransfer(
            outcome=TransferOutcome(TransferResult.INCORRECT_PAYLOAD, message="ABORTED"),
            amount=10,
            balance_before=100,
        )

        notification = build_transfer_notification(pending, 85)

        assert notification.title == "Transaction failed"
        assert notification.severity is Severity.ERROR
        assert "gas consumed: 5" in notification.description

    def test_ledger_gas_is_reported_alongside(self):
        pending = PendingTransfer(
            outcome=TransferOutcome.success(gas_used=3), amount=10, balance_before=100
        )

        notification = build_transfer_notification(pending, 87)

        assert "gas consumed: 3" in notification.description
        assert "ledger reported gas used: 3" in notification.description

    def test_unknown_balance_reports_unknown_gas(self):
        pending = PendingTransfer(
            outcome=TransferOutcome.success(), amount=10, balance_before=100
        )

        notification = build_transfer_notification(pending, UNKNOWN)

        assert "gas consumed: unknown" in notification.description


class TestComputeGasConsumed:
    def test_difference(self):
        assert compute_gas_consumed(1000, 500, 499) == 1

    def test_unknown_before(self):
        assert compute_gas_consumed(UNKNOWN, 500, 499) is None

    def test_unknown_after(self):
        assert compute_gas_consumed(1000, 500, UNKNOWN) is None
