"""Faucet funding flow for test networks."""

from __future__ import annotations

import logging
from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol

from aptos_wallet.models import BusyFlag

logger = logging.getLogger(__name__)


class FaucetProtocol(Protocol):
    async def fund_account(self, address: str, amount: int) -> list[str]: ...


class LedgerProtocol(Protocol):
    async def wait_for_transaction(self, tx_hash: str) -> dict[str, Any]: ...


class SynchronizerProtocol(Protocol):
    def busy(self, flag: BusyFlag) -> AbstractAsyncContextManager[None]: ...
    async def resync(self, address: str | None = None) -> Any: ...


class FaucetService:
    def __init__(
        self,
        faucet: FaucetProtocol,
        ledger: LedgerProtocol,
        synchronizer: SynchronizerProtocol,
        amount: int,
    ):
        self.faucet = faucet
        self.ledger = ledger
        self.synchronizer = synchronizer
        self.amount = amount

    async def fund(self, address: str) -> list[str]:
        """Mint test tokens to ``address``, wait for the mint transactions, then resync."""
        async with self.synchronizer.busy(BusyFlag.FAUCET):
            try:
                hashes = await self.faucet.fund_account(address, self.amount)
                for tx_hash in hashes:
                    await self.ledger.wait_for_transaction(tx_hash)
            finally:
                await self.synchronizer.resync(address)
            return hashes
