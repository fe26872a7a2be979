"""Client for the test-token faucet."""

from __future__ import annotations

import asyncio
import logging

from aptos_wallet.config import WalletConfig
from aptos_wallet.shared.network import NetworkClient
from aptos_wallet.shared.validation import normalize_address

logger = logging.getLogger(__name__)


class FaucetClient:
    def __init__(
        self,
        config: WalletConfig | None = None,
        network_client: NetworkClient | None = None,
    ):
        self.config = config or WalletConfig()
        self._network_client = network_client or NetworkClient(
            base_url=self.config.faucet_url,
            timeout_config=self.config.timeout_config,
        )

    async def fund_account(self, address: str, amount: int) -> list[str]:
        """Request ``amount`` test tokens and return the minting transaction hashes."""
        result = await asyncio.to_thread(
            self._network_client.post,
            "/mint",
            context="Fund account",
            params={"address": normalize_address(address), "amount": amount},
        )
        hashes = [str(tx_hash) for tx_hash in result] if isinstance(result, list) else []
        logger.info("Faucet funded %s with %d (%d txns)", address, amount, len(hashes))
        return hashes
