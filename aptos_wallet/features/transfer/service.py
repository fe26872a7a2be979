"""Transfer orchestration: pre-flight checks, submission and outcome classification."""

from __future__ import annotations

import logging
from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol

from aptos_wallet.account import SigningIdentity
from aptos_wallet.client import TransactionFailedError
from aptos_wallet.features.balance.service import Balance
from aptos_wallet.features.transfer.outcomes import (
    TransferOutcome,
    TransferResult,
    describe_outcome,
)
from aptos_wallet.features.transfer.validators import TransferLimitValidator
from aptos_wallet.models import (
    COIN_TRANSFER_FUNCTION,
    NATIVE_COIN_TYPE,
    AccountResource,
    BusyFlag,
    TransferRequest,
    script_function_payload,
)
from aptos_wallet.shared.network import NetworkError
from aptos_wallet.shared.validation import normalize_address

logger = logging.getLogger(__name__)

TO_ADDRESS_FIELD = "to_address"


class LedgerProtocol(Protocol):
    """Ledger interface needed for transfers."""

    async def get_account_resources(self, address: str) -> list[AccountResource] | None: ...
    async def generate_transaction(self, sender: str, payload: dict[str, Any]) -> dict[str, Any]: ...
    async def sign_transaction(
        self, identity: SigningIdentity, raw_transaction: dict[str, Any]
    ) -> dict[str, Any]: ...
    async def submit_transaction(self, signed_transaction: dict[str, Any]) -> dict[str, Any]: ...
    async def wait_for_transaction(self, tx_hash: str) -> dict[str, Any]: ...


class SynchronizerProtocol(Protocol):
    """The parts of the synchronization loop a transfer drives."""

    @property
    def balance(self) -> Balance: ...
    def busy(self, flag: BusyFlag) -> AbstractAsyncContextManager[None]: ...
    def record_transfer(self, outcome: TransferOutcome, amount: int, balance_before: Balance) -> None: ...
    def set_field_error(self, field_name: str, message: str | None) -> None: ...
    async def resync(self, address: str | None = None) -> Any: ...


def build_transfer_payload(to_address: str, amount: int) -> dict[str, Any]:
    return script_function_payload(
        COIN_TRANSFER_FUNCTION,
        type_arguments=[NATIVE_COIN_TYPE],
        arguments=[to_address, str(amount)],
    )


def _gas_used(transaction: dict[str, Any]) -> int | None:
    try:
        return int(transaction["gas_used"])
    except (KeyError, TypeError, ValueError):
        return None


class TransferService:
    """Service for submitting native coin transfers."""

    def __init__(
        self,
        ledger: LedgerProtocol,
        synchronizer: SynchronizerProtocol,
        gas_reserve: int,
    ):
        self.ledger = ledger
        self.synchronizer = synchronizer
        self.gas_reserve = gas_reserve

    async def submit_transfer(self, request: TransferRequest) -> TransferOutcome:
        """Run one submission attempt and return its single terminal outcome.

        Every outcome, success or not, is recorded on the synchronizer and
        followed by a resync of the sender's account; non-success outcomes are
        attached to the recipient address field.
        """
        async with self.synchronizer.busy(BusyFlag.TRANSFER):
            balance_before = self.synchronizer.balance
            outcome = await self._attempt(request, balance_before)

            if outcome.is_success:
                logger.info(
                    "Transferred %d to %s (tx %s)",
                    request.amount,
                    request.to_address,
                    outcome.tx_hash,
                )
                self.synchronizer.set_field_error(TO_ADDRESS_FIELD, None)
            else:
                logger.warning(
                    "Transfer to %s refused: %s",
                    request.to_address,
                    outcome.result.value,
                )
                self.synchronizer.set_field_error(TO_ADDRESS_FIELD, describe_outcome(outcome))

            self.synchronizer.record_transfer(outcome, request.amount, balance_before)
            await self.synchronizer.resync(request.from_account.address)
            return outcome

    async def _attempt(self, request: TransferRequest, balance: Balance) -> TransferOutcome:
        refusal = TransferLimitValidator.check(request.amount, balance, self.gas_reserve)
        if refusal is not None:
            return refusal

        to_address = normalize_address(request.to_address)

        try:
            recipient_resources = await self.ledger.get_account_resources(to_address)
        except Exception as e:
            logger.error("Recipient lookup failed for %s: %s", to_address, e)
            return TransferOutcome(TransferResult.REMOTE_FAILURE, message=str(e))

        if not recipient_resources:
            return TransferOutcome(TransferResult.UNDEFINED_ACCOUNT)

        payload = build_transfer_payload(to_address, request.amount)
        try:
            raw_transaction = await self.ledger.generate_transaction(
                request.from_account.address, payload
            )
            signed_transaction = await self.ledger.sign_transaction(
                request.from_account, raw_transaction
            )
            submitted = await self.ledger.submit_transaction(signed_transaction)
            tx_hash = submitted["hash"]
            confirmed = await self.ledger.wait_for_transaction(tx_hash)
        except TransactionFailedError as e:
            return TransferOutcome(
                TransferResult.INCORRECT_PAYLOAD,
                message=e.vm_status,
                tx_hash=e.tx_hash,
            )
        except NetworkError as e:
            if e.is_client_error:
                return TransferOutcome(
                    TransferResult.INCORRECT_PAYLOAD,
                    message=e.response_text or e.message,
                )
            logger.error("Transfer submission failed: %s", e.message)
            return TransferOutcome(TransferResult.REMOTE_FAILURE, message=e.message)
        except Exception as e:
            logger.error("Transfer submission failed: %s", e)
            return TransferOutcome(TransferResult.REMOTE_FAILURE, message=str(e))

        return TransferOutcome.success(tx_hash=tx_hash, gas_used=_gas_used(confirmed))
