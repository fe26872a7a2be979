"""Balance feature module for the Aptos wallet core."""

from aptos_wallet.features.balance.service import (
    UNKNOWN,
    Balance,
    BalanceParseError,
    extract_balance,
    parse_coin_value,
)

__all__ = [
    "UNKNOWN",
    "Balance",
    "BalanceParseError",
    "extract_balance",
    "parse_coin_value",
]
