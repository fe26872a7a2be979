"""Native coin balance extraction from an account resource snapshot."""

from __future__ import annotations

import enum
from typing import Final, Iterable, Literal

from aptos_wallet.models import NATIVE_COIN_STORE_TYPE, AccountResource


class _Unknown(enum.Enum):
    UNKNOWN = "unknown"

    def __repr__(self) -> str:
        return "UNKNOWN"

    def __bool__(self) -> bool:
        return False


UNKNOWN: Final = _Unknown.UNKNOWN

Balance = int | Literal[_Unknown.UNKNOWN]


class BalanceParseError(ValueError):
    """The native coin store carried a value that is not a non-negative integer."""


def parse_coin_value(resource: AccountResource) -> int:
    """Read ``data.coin.value`` from a coin store as a non-negative integer."""
    try:
        raw_value = resource.data["coin"]["value"]
    except (KeyError, TypeError) as e:
        raise BalanceParseError(f"{resource.type} has no coin value") from e

    text = str(raw_value).strip()
    if not (text.isascii() and text.isdigit()):
        raise BalanceParseError(f"{resource.type} has malformed coin value {raw_value!r}")
    return int(text)


def extract_balance(resources: Iterable[AccountResource] | None) -> Balance:
    """Return the native coin balance, or ``UNKNOWN`` when it cannot be determined.

    ``UNKNOWN`` is returned both when no snapshot has been fetched and when the
    snapshot holds no native coin store; it is never conflated with zero.
    """
    if resources is None:
        return UNKNOWN

    for resource in resources:
        if resource.type == NATIVE_COIN_STORE_TYPE:
            return parse_coin_value(resource)
    return UNKNOWN
