"""Account synchronization loop and the view-state snapshot it owns.

The synchronizer is the only writer of :class:`AccountSnapshot`. Every change
replaces the snapshot wholesale and bumps its version. Overlapping ``resync``
calls are coalesced: each call takes a generation number and a pass that has
been superseded by a newer call discards its results instead of overwriting
the newer state.
"""

from __future__ import annotations

import logging
from collections import Counter
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, AsyncIterator, Callable, Iterable, Mapping, Protocol

from aptos_wallet.features.assets.service import AssetDiscoveryService
from aptos_wallet.features.balance.service import (
    UNKNOWN,
    Balance,
    BalanceParseError,
    extract_balance,
)
from aptos_wallet.features.transfer.outcomes import (
    GAS_REPORTING_RESULTS,
    TransferOutcome,
    TransferResult,
    describe_outcome,
)
from aptos_wallet.models import AccountResource, Asset, BusyFlag
from aptos_wallet.shared.notifications import Notification, NotificationCenter, Severity

logger = logging.getLogger(__name__)

TRANSFER_NOTIFICATION_DURATION_MS = 7000


class ViewTab(Enum):
    ASSETS = "assets"
    ACTIVITY = "activity"


class LedgerProtocol(Protocol):
    """Ledger interface needed for synchronization."""

    async def get_account_resources(self, address: str) -> list[AccountResource] | None: ...


@dataclass(frozen=True)
class AccountSnapshot:
    version: int = 0
    address: str | None = None
    resources: tuple[AccountResource, ...] | None = None
    balance: Balance = UNKNOWN
    assets: tuple[Asset, ...] = ()
    activity: tuple[Any, ...] | None = None
    active_tab: ViewTab = ViewTab.ASSETS
    transfer_busy: bool = False
    import_busy: bool = False
    faucet_busy: bool = False
    field_errors: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class PendingTransfer:
    outcome: TransferOutcome
    amount: int
    balance_before: Balance


def compute_gas_consumed(balance_before: Balance, amount: int, balance_after: Balance) -> int | None:
    """Gas inferred from local balances; ``None`` when either balance is unknown.

    This is an estimate from the balance captured before submission, not the
    ledger's receipt, and is reported next to the receipt's figure when one exists.
    """
    if balance_before is UNKNOWN or balance_after is UNKNOWN:
        return None
    return balance_before - amount - balance_after


def build_transfer_notification(pending: PendingTransfer, balance_after: Balance) -> Notification:
    outcome = pending.outcome
    gas_consumed = compute_gas_consumed(pending.balance_before, pending.amount, balance_after)
    description = (
        f"{describe_outcome(outcome)}. Amount transferred: {pending.amount}, "
        f"gas consumed: {gas_consumed if gas_consumed is not None else 'unknown'}"
    )
    if outcome.gas_used is not None:
        description += f" (ledger reported gas used: {outcome.gas_used})"

    succeeded = outcome.result is TransferResult.SUCCESS
    return Notification(
        title="Transaction succeeded" if succeeded else "Transaction failed",
        description=description,
        severity=Severity.SUCCESS if succeeded else Severity.ERROR,
        duration_ms=TRANSFER_NOTIFICATION_DURATION_MS,
    )


SnapshotListener = Callable[[AccountSnapshot], None]


class AccountSynchronizer:
    def __init__(
        self,
        ledger: LedgerProtocol,
        discovery: AssetDiscoveryService,
        notifications: NotificationCenter | None = None,
        address: str | None = None,
    ):
        self.ledger = ledger
        self.discovery = discovery
        self.notifications = notifications or NotificationCenter()
        self._snapshot = AccountSnapshot(address=address)
        self._generation = 0
        self._pending_transfer: PendingTransfer | None = None
        self._active_scopes: Counter[BusyFlag] = Counter()
        self._listeners: list[SnapshotListener] = []

    @property
    def snapshot(self) -> AccountSnapshot:
        return self._snapshot

    @property
    def balance(self) -> Balance:
        return self._snapshot.balance

    @property
    def pending_transfer(self) -> PendingTransfer | None:
        return self._pending_transfer

    def subscribe(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def _commit(self, **changes: Any) -> AccountSnapshot:
        self._snapshot = replace(
            self._snapshot, version=self._snapshot.version + 1, **changes
        )
        for listener in list(self._listeners):
            try:
                listener(self._snapshot)
            except Exception as e:
                logger.error("Error in snapshot listener: %s", e)
        return self._snapshot

    def _busy_flags(self) -> dict[str, bool]:
        return {flag.value: self._active_scopes[flag] > 0 for flag in BusyFlag}

    @asynccontextmanager
    async def busy(self, flag: BusyFlag) -> AsyncIterator[None]:
        """Hold ``flag`` for the duration of the block; released on every exit path."""
        self._active_scopes[flag] += 1
        self._commit(**{flag.value: True})
        try:
            yield
        finally:
            self._active_scopes[flag] -= 1
            self._commit(**{flag.value: self._active_scopes[flag] > 0})

    def set_field_error(self, field_name: str, message: str | None) -> None:
        errors = dict(self._snapshot.field_errors)
        if message is None:
            errors.pop(field_name, None)
        else:
            errors[field_name] = message
        self._commit(field_errors=MappingProxyType(errors))

    def record_transfer(
        self, outcome: TransferOutcome, amount: int, balance_before: Balance
    ) -> None:
        self._pending_transfer = PendingTransfer(
            outcome=outcome, amount=amount, balance_before=balance_before
        )

    def _settle_pending_transfer(self, balance_after: Balance) -> None:
        """Report the recorded transfer against the first pass that completes after it.

        A pass that ends without resources settles it with an unknown balance, so a
        later refresh never reports gas against an unrelated balance.
        """
        pending, self._pending_transfer = self._pending_transfer, None
        if pending is not None and pending.outcome.result in GAS_REPORTING_RESULTS:
            self.notifications.emit(build_transfer_notification(pending, balance_after))

    async def switch_tab(self, tab: ViewTab) -> AccountSnapshot:
        self._commit(active_tab=tab)
        return await self.resync()

    async def resync(self, address: str | None = None) -> AccountSnapshot:
        """Re-fetch the account's resources and rebuild balance and assets from them."""
        target = address or self._snapshot.address
        if not target:
            logger.debug("Resync skipped: no account address")
            return self._snapshot

        self._generation += 1
        generation = self._generation

        try:
            resources = await self.ledger.get_account_resources(target)
        except Exception as e:
            logger.warning("Failed to fetch resources for %s: %s", target, e)
            resources = None

        if generation != self._generation:
            logger.debug("Discarding superseded sync pass %d", generation)
            return self._snapshot

        if resources is None:
            logger.debug("No resources for %s; keeping previous state", target)
            self._settle_pending_transfer(UNKNOWN)
            return self._commit(**self._busy_flags())

        assets = await self.discovery.discover_assets(resources)

        if generation != self._generation:
            logger.debug("Discarding superseded sync pass %d", generation)
            return self._snapshot

        return self._apply(target, resources, assets)

    def _apply(
        self,
        address: str,
        resources: Iterable[AccountResource],
        assets: list[Asset],
    ) -> AccountSnapshot:
        resources = tuple(resources)
        try:
            balance = extract_balance(resources)
        except BalanceParseError as e:
            logger.warning("Native coin balance unreadable for %s: %s", address, e)
            balance = UNKNOWN

        self._settle_pending_transfer(balance)

        changes: dict[str, Any] = {
            "address": address,
            "resources": resources,
            "balance": balance,
            "assets": tuple(assets),
            **self._busy_flags(),
        }
        if self._snapshot.active_tab is ViewTab.ACTIVITY:
            changes["activity"] = ()

        snapshot = self._commit(**changes)
        logger.info(
            "Synced %s: balance=%r, %d assets (v%d)",
            address,
            balance,
            len(snapshot.assets),
            snapshot.version,
        )
        return snapshot
