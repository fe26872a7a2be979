"""Account synchronization feature module for the Aptos wallet core."""

from aptos_wallet.features.sync.service import (
    AccountSnapshot,
    AccountSynchronizer,
    PendingTransfer,
    ViewTab,
    build_transfer_notification,
    compute_gas_consumed,
)

__all__ = [
    "AccountSnapshot",
    "AccountSynchronizer",
    "PendingTransfer",
    "ViewTab",
    "build_transfer_notification",
    "compute_gas_consumed",
]
