"""Coin import feature module for the Aptos wallet core."""

from aptos_wallet.features.coin_import.service import (
    TOKEN_ADDRESS_FIELD,
    CoinImportError,
    CoinImportService,
    build_register_payload,
)

__all__ = [
    "TOKEN_ADDRESS_FIELD",
    "CoinImportError",
    "CoinImportService",
    "build_register_payload",
]
