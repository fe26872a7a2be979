"""Ledger records and derived view entities shared by the wallet features."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from aptos_wallet.account import SigningIdentity

CORE_ADDRESS = "0x1"
NATIVE_COIN_TYPE = "0x1::TestCoin::TestCoin"
COIN_STORE_TYPE = "0x1::Coin::CoinStore"
COIN_INFO_TYPE = "0x1::Coin::CoinInfo"
NATIVE_COIN_STORE_TYPE = f"{COIN_STORE_TYPE}<{NATIVE_COIN_TYPE}>"
COIN_TRANSFER_FUNCTION = "0x1::Coin::transfer"
COIN_REGISTER_FUNCTION = "0x1::Coin::register"
SCRIPT_FUNCTION_PAYLOAD = "script_function_payload"


class BusyFlag(Enum):
    TRANSFER = "transfer_busy"
    IMPORT = "import_busy"
    FAUCET = "faucet_busy"


@dataclass(frozen=True)
class AccountResource:
    type: str
    data: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api_response(cls, item: dict[str, Any]) -> "AccountResource":
        return cls(
            type=str(item.get("type", "")),
            data=MappingProxyType(dict(item.get("data") or {})),
        )


@dataclass(frozen=True)
class Asset:
    coin_address: str
    exact_type_tag: str
    display_name: str
    symbol: str
    balance: Decimal
    decimals: int | None = None


@dataclass(frozen=True)
class TransferRequest:
    from_account: "SigningIdentity"
    to_address: str
    amount: int


def script_function_payload(
    function: str, type_arguments: list[str], arguments: list[str]
) -> dict[str, Any]:
    return {
        "type": SCRIPT_FUNCTION_PAYLOAD,
        "function": function,
        "type_arguments": list(type_arguments),
        "arguments": list(arguments),
    }
