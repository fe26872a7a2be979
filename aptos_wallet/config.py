"""Runtime configuration for the Aptos wallet core."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from aptos_wallet.shared.network import TimeoutConfig

logger = logging.getLogger(__name__)

DEFAULT_NODE_URL = "https://fullnode.devnet.aptoslabs.com"
DEFAULT_FAUCET_URL = "https://faucet.devnet.aptoslabs.com"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring malformed %s=%r, using %d", name, raw, default)
        return default


@dataclass
class WalletConfig:
    node_url: str = DEFAULT_NODE_URL
    faucet_url: str = DEFAULT_FAUCET_URL
    gas_reserve: int = 150
    faucet_amount: int = 5000
    timeout_config: TimeoutConfig | None = None
    confirmation_timeout_seconds: float = 20.0
    confirmation_poll_seconds: float = 1.0
    max_gas_amount: int = 1000
    gas_unit_price: int = 1
    gas_currency_code: str = "XUS"
    expiration_seconds: int = 10
    discovery_concurrency: int = 1

    def __post_init__(self):
        if self.timeout_config is None:
            self.timeout_config = TimeoutConfig()
        if self.gas_reserve < 0:
            raise ValueError("gas_reserve cannot be negative")
        if self.discovery_concurrency < 1:
            raise ValueError("discovery_concurrency must be at least 1")

    @classmethod
    def from_environment(cls) -> "WalletConfig":
        defaults = cls()
        return cls(
            node_url=os.getenv("APTOS_WALLET_NODE_URL", defaults.node_url),
            faucet_url=os.getenv("APTOS_WALLET_FAUCET_URL", defaults.faucet_url),
            gas_reserve=_env_int("APTOS_WALLET_GAS_RESERVE", defaults.gas_reserve),
            faucet_amount=_env_int("APTOS_WALLET_FAUCET_AMOUNT", defaults.faucet_amount),
            discovery_concurrency=max(
                1,
                _env_int(
                    "APTOS_WALLET_DISCOVERY_CONCURRENCY",
                    defaults.discovery_concurrency,
                ),
            ),
        )
