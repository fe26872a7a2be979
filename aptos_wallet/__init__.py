"""Aptos Quick Wallet core - account state, transfers and coin tracking for an Aptos wallet.

This package is organized into feature-based modules:
- features.sync: Account synchronization loop and view-state snapshot
- features.transfer: Native coin transfers and their outcomes
- features.assets: Discovery of the coins an account holds
- features.coin_import: Registration of new coin types
- shared: Shared utilities (network, validation, logging, notifications)
"""

from aptos_wallet.account import SigningIdentity
from aptos_wallet.client import (
    LedgerClient,
    LedgerError,
    TransactionFailedError,
    TransactionTimeoutError,
)
from aptos_wallet.config import WalletConfig
from aptos_wallet.faucet import FaucetClient
from aptos_wallet.wallet import Wallet

__version__ = "0.1.0"
__all__ = [
    "Wallet",
    "WalletConfig",
    "SigningIdentity",
    "LedgerClient",
    "LedgerError",
    "TransactionFailedError",
    "TransactionTimeoutError",
    "FaucetClient",
]
