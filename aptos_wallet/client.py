"""Async façade over the ledger node's REST API.

Blocking ``requests`` I/O from :class:`NetworkClient` runs in a worker thread so
that every ledger call is a suspension point on the caller's event loop.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from aptos_wallet.account import SigningIdentity
from aptos_wallet.config import WalletConfig
from aptos_wallet.models import AccountResource
from aptos_wallet.shared.network import NetworkClient
from aptos_wallet.shared.validation import normalize_address

logger = logging.getLogger(__name__)

PENDING_TRANSACTION_TYPE = "pending_transaction"


class LedgerError(Exception):
    """Base class for ledger-level failures that are not transport errors."""


class TransactionFailedError(LedgerError):
    def __init__(self, tx_hash: str, vm_status: str):
        super().__init__(f"Transaction {tx_hash} failed: {vm_status}")
        self.tx_hash = tx_hash
        self.vm_status = vm_status


class TransactionTimeoutError(LedgerError):
    def __init__(self, tx_hash: str, timeout_seconds: float):
        super().__init__(
            f"Transaction {tx_hash} was not confirmed within {timeout_seconds} seconds"
        )
        self.tx_hash = tx_hash


class LedgerClient:
    def __init__(
        self,
        config: WalletConfig | None = None,
        network_client: NetworkClient | None = None,
    ):
        self.config = config or WalletConfig()
        self._network_client = network_client or NetworkClient(
            base_url=self.config.node_url,
            timeout_config=self.config.timeout_config,
        )

    @property
    def node_url(self) -> str:
        return self._network_client.base_url

    async def _call(self, method: str, *args: Any, **kwargs: Any) -> Any:
        operation = getattr(self._network_client, method)
        return await asyncio.to_thread(operation, *args, **kwargs)

    async def get_account_resources(self, address: str) -> list[AccountResource] | None:
        normalized = normalize_address(address)
        result = await self._call(
            "get_optional",
            f"/accounts/{normalized}/resources",
            context="Fetch account resources",
        )
        if result is None:
            logger.debug("No resources found for %s", normalized)
            return None
        return [AccountResource.from_api_response(item) for item in result]

    async def get_account(self, address: str) -> dict[str, Any]:
        return await self._call(
            "get",
            f"/accounts/{normalize_address(address)}",
            context="Fetch account",
        )

    async def get_transaction(self, tx_hash: str) -> dict[str, Any] | None:
        return await self._call(
            "get_optional",
            f"/transactions/{tx_hash}",
            context="Fetch transaction",
        )

    async def generate_transaction(
        self, sender: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        account = await self.get_account(sender)
        return {
            "sender": normalize_address(sender),
            "sequence_number": str(account["sequence_number"]),
            "max_gas_amount": str(self.config.max_gas_amount),
            "gas_unit_price": str(self.config.gas_unit_price),
            "gas_currency_code": self.config.gas_currency_code,
            "expiration_timestamp_secs": str(
                int(time.time()) + self.config.expiration_seconds
            ),
            "payload": payload,
        }

    async def sign_transaction(
        self, identity: SigningIdentity, raw_transaction: dict[str, Any]
    ) -> dict[str, Any]:
        result = await self._call(
            "post",
            "/transactions/signing_message",
            context="Create signing message",
            json=raw_transaction,
        )
        message = str(result["message"])
        if message.startswith("0x"):
            message = message[2:]
        signature = identity.sign(bytes.fromhex(message))
        return {
            **raw_transaction,
            "signature": {
                "type": "ed25519_signature",
                "public_key": identity.public_key_hex,
                "signature": signature,
            },
        }

    async def submit_transaction(self, signed_transaction: dict[str, Any]) -> dict[str, Any]:
        result = await self._call(
            "post",
            "/transactions",
            context="Submit transaction",
            json=signed_transaction,
        )
        logger.info("Transaction submitted: %s", result.get("hash", "unknown"))
        return result

    async def wait_for_transaction(self, tx_hash: str) -> dict[str, Any]:
        timeout = self.config.confirmation_timeout_seconds
        deadline = time.monotonic() + timeout

        while True:
            transaction = await self.get_transaction(tx_hash)
            if transaction and transaction.get("type") != PENDING_TRANSACTION_TYPE:
                if transaction.get("success") is False:
                    vm_status = str(transaction.get("vm_status", "unknown failure"))
                    logger.warning("Transaction %s failed: %s", tx_hash, vm_status)
                    raise TransactionFailedError(tx_hash, vm_status)
                logger.info("Transaction %s confirmed", tx_hash)
                return transaction

            if time.monotonic() >= deadline:
                raise TransactionTimeoutError(tx_hash, timeout)
            await asyncio.sleep(self.config.confirmation_poll_seconds)

    async def execute_script_function(
        self, identity: SigningIdentity, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """Generate, sign, submit and confirm a transaction carrying ``payload``."""
        raw_transaction = await self.generate_transaction(identity.address, payload)
        signed_transaction = await self.sign_transaction(identity, raw_transaction)
        submitted = await self.submit_transaction(signed_transaction)
        return await self.wait_for_transaction(submitted["hash"])
