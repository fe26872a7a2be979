"""Coin import: register a coin type under the active account so it can hold a balance."""

from __future__ import annotations

import logging
import re
from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol

from aptos_wallet.account import SigningIdentity
from aptos_wallet.client import LedgerError
from aptos_wallet.features.assets.service import extract_type_argument, find_coin_info
from aptos_wallet.models import (
    COIN_REGISTER_FUNCTION,
    AccountResource,
    BusyFlag,
    script_function_payload,
)
from aptos_wallet.shared.logging import format_error_for_user
from aptos_wallet.shared.validation import AddressValidator

logger = logging.getLogger(__name__)

TOKEN_ADDRESS_FIELD = "token_address"

STRUCT_TAG_PATTERN = re.compile(r"^0x[0-9a-fA-F]{1,64}::\w+::\w+(<.+>)?$")


class CoinImportError(Exception):
    """Registration of a coin type failed."""


class LedgerProtocol(Protocol):
    """Ledger interface needed for coin registration."""

    async def get_account_resources(self, address: str) -> list[AccountResource] | None: ...
    async def execute_script_function(
        self, identity: SigningIdentity, payload: dict[str, Any]
    ) -> dict[str, Any]: ...


class SynchronizerProtocol(Protocol):
    def busy(self, flag: BusyFlag) -> AbstractAsyncContextManager[None]: ...
    def set_field_error(self, field_name: str, message: str | None) -> None: ...
    async def resync(self, address: str | None = None) -> Any: ...


def build_register_payload(coin_type: str) -> dict[str, Any]:
    return script_function_payload(
        COIN_REGISTER_FUNCTION,
        type_arguments=[coin_type],
        arguments=[],
    )


class CoinImportService:
    def __init__(self, ledger: LedgerProtocol, synchronizer: SynchronizerProtocol):
        self.ledger = ledger
        self.synchronizer = synchronizer

    async def resolve_coin_type(self, coin: str) -> str:
        """Accept a full coin type tag, or a coin address whose ``CoinInfo`` names the type."""
        value = (coin or "").strip()
        if "::" in value:
            if not STRUCT_TAG_PATTERN.match(value):
                raise CoinImportError(f"Invalid coin type: {value}")
            return value

        result = AddressValidator.validate(value, require_full_length=False)
        if not result.is_valid:
            raise CoinImportError(result.error_message or "Invalid coin address")

        resources = await self.ledger.get_account_resources(result.normalized_value)
        coin_info = find_coin_info(resources or [])
        coin_type = extract_type_argument(coin_info.type) if coin_info else None
        if coin_type is None:
            raise CoinImportError(f"No coin is published at {result.normalized_value}")
        return coin_type

    async def register_coin_type(self, coin: str, identity: SigningIdentity) -> str:
        """Register ``coin`` for ``identity`` and resync; returns the registered type tag."""
        async with self.synchronizer.busy(BusyFlag.IMPORT):
            try:
                coin_type = await self.resolve_coin_type(coin)
                await self.ledger.execute_script_function(
                    identity, build_register_payload(coin_type)
                )
            except Exception as e:
                logger.error("Coin import failed for %s: %s", coin, e)
                if isinstance(e, (CoinImportError, LedgerError)):
                    message = str(e)
                else:
                    message = format_error_for_user(e)
                self.synchronizer.set_field_error(TOKEN_ADDRESS_FIELD, message)
                await self.synchronizer.resync(identity.address)
                if isinstance(e, CoinImportError):
                    raise
                raise CoinImportError(str(e)) from e

            logger.info("Registered coin %s for %s", coin_type, identity.address)
            self.synchronizer.set_field_error(TOKEN_ADDRESS_FIELD, None)
            await self.synchronizer.resync(identity.address)
            return coin_type
