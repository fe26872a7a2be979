"""Asset discovery feature module for the Aptos wallet core."""

from aptos_wallet.features.assets.service import (
    AssetDiscoveryService,
    extract_type_argument,
    find_coin_info,
    get_coin_address,
    is_foreign_coin_store,
)

__all__ = [
    "AssetDiscoveryService",
    "extract_type_argument",
    "find_coin_info",
    "get_coin_address",
    "is_foreign_coin_store",
]
