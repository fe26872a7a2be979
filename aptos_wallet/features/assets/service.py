"""Asset discovery by scanning account resources for non-native coin stores."""

from __future__ import annotations

import asyncio
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Protocol

from aptos_wallet.models import (
    COIN_INFO_TYPE,
    COIN_STORE_TYPE,
    NATIVE_COIN_TYPE,
    AccountResource,
    Asset,
)

logger = logging.getLogger(__name__)

COIN_ADDRESS_PATTERN = re.compile(r"<\s*(0x[0-9a-fA-F]+)::")


class LedgerProtocol(Protocol):
    """Ledger interface needed for asset discovery."""

    async def get_account_resources(self, address: str) -> list[AccountResource] | None: ...


def get_coin_address(type_tag: str) -> str | None:
    """Return the address of the module defining the coin in a ``CoinStore<...>`` tag."""
    match = COIN_ADDRESS_PATTERN.search(type_tag)
    if match is None:
        return None
    return match.group(1).lower()


def extract_type_argument(type_tag: str) -> str | None:
    """Return the outermost generic argument, e.g. ``0xa::M::C`` from ``0x1::Coin::CoinInfo<0xa::M::C>``."""
    start = type_tag.find("<")
    end = type_tag.rfind(">")
    if start == -1 or end <= start:
        return None
    inner = type_tag[start + 1 : end].strip()
    return inner or None


def is_foreign_coin_store(resource: AccountResource) -> bool:
    return COIN_STORE_TYPE in resource.type and NATIVE_COIN_TYPE not in resource.type


def find_coin_info(resources: Iterable[AccountResource]) -> AccountResource | None:
    for resource in resources:
        if COIN_INFO_TYPE in resource.type:
            return resource
    return None


def _parse_decimals(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class AssetDiscoveryService:
    """Builds the owned-asset list for one resource snapshot.

    Lookups run one at a time unless ``max_concurrency`` is raised; either way
    the output follows the scan order of ``resources``.
    """

    def __init__(self, ledger: LedgerProtocol, max_concurrency: int = 1):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.ledger = ledger
        self.max_concurrency = max_concurrency

    async def discover_assets(self, resources: Iterable[AccountResource]) -> list[Asset]:
        candidates = [r for r in resources if is_foreign_coin_store(r)]
        if not candidates:
            return []

        if self.max_concurrency == 1:
            assets = []
            for resource in candidates:
                assets.append(await self._load_asset(resource))
        else:
            semaphore = asyncio.Semaphore(self.max_concurrency)

            async def bounded(resource: AccountResource) -> Asset | None:
                async with semaphore:
                    return await self._load_asset(resource)

            assets = await asyncio.gather(*(bounded(r) for r in candidates))

        found = [asset for asset in assets if asset is not None]
        logger.debug("Discovered %d of %d coin stores", len(found), len(candidates))
        return found

    async def _load_asset(self, resource: AccountResource) -> Asset | None:
        coin_address = get_coin_address(resource.type)
        if coin_address is None:
            logger.debug("Skipping %s: no coin address in type tag", resource.type)
            return None

        try:
            coin_resources = await self.ledger.get_account_resources(coin_address)
        except Exception as e:
            logger.warning("Coin info lookup failed for %s: %s", coin_address, e)
            return None

        if not coin_resources:
            logger.debug("Skipping %s: coin address has no resources", resource.type)
            return None

        coin_info = find_coin_info(coin_resources)
        if coin_info is None:
            logger.debug("Skipping %s: no CoinInfo published", resource.type)
            return None

        try:
            balance = Decimal(str(resource.data["coin"]["value"]))
            if not balance.is_finite() or balance < 0:
                raise InvalidOperation(balance)
            name = str(coin_info.data["name"])
            symbol = str(coin_info.data["symbol"])
        except (KeyError, TypeError, InvalidOperation) as e:
            logger.debug("Skipping %s: malformed coin data (%s)", resource.type, e)
            return None

        return Asset(
            coin_address=coin_address,
            exact_type_tag=resource.type,
            display_name=name,
            symbol=symbol,
            balance=balance,
            decimals=_parse_decimals(
                coin_info.data.get("decimals", coin_info.data.get("decimal"))
            ),
        )
