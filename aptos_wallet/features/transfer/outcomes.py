"""Closed result taxonomy for transfer submissions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from aptos_wallet.shared.logging import format_error_for_user


class TransferResult(Enum):
    AMOUNT_OVER_LIMIT = "AmountOverLimit"
    AMOUNT_WITH_GAS_OVER_LIMIT = "AmountWithGasOverLimit"
    BALANCE_UNKNOWN = "BalanceUnknown"
    INCORRECT_PAYLOAD = "IncorrectPayload"
    REMOTE_FAILURE = "RemoteFailure"
    SUCCESS = "Success"
    UNDEFINED_ACCOUNT = "UndefinedAccount"


TRANSFER_RESULT_MESSAGES: dict[TransferResult, str] = {
    TransferResult.AMOUNT_OVER_LIMIT: "Amount is over limit",
    TransferResult.AMOUNT_WITH_GAS_OVER_LIMIT: "Amount with gas is over limit",
    TransferResult.BALANCE_UNKNOWN: "Account balance is not available yet",
    TransferResult.INCORRECT_PAYLOAD: "Incorrect transaction payload",
    TransferResult.REMOTE_FAILURE: "Transaction could not be completed",
    TransferResult.SUCCESS: "Transaction executed successfully",
    TransferResult.UNDEFINED_ACCOUNT: "Account does not exist",
}

# Outcomes whose confirmation pass reports the gas the transfer consumed.
GAS_REPORTING_RESULTS = frozenset({TransferResult.SUCCESS, TransferResult.INCORRECT_PAYLOAD})


@dataclass(frozen=True)
class TransferOutcome:
    result: TransferResult
    message: str | None = None
    over_by: int | None = None
    tx_hash: str | None = None
    gas_used: int | None = None

    @property
    def is_success(self) -> bool:
        return self.result is TransferResult.SUCCESS

    @classmethod
    def success(cls, tx_hash: str | None = None, gas_used: int | None = None) -> "TransferOutcome":
        return cls(TransferResult.SUCCESS, tx_hash=tx_hash, gas_used=gas_used)


def describe_outcome(outcome: TransferOutcome) -> str:
    """Display text for an outcome; the only place result codes become prose."""
    text = TRANSFER_RESULT_MESSAGES[outcome.result]
    if outcome.result in (
        TransferResult.AMOUNT_OVER_LIMIT,
        TransferResult.AMOUNT_WITH_GAS_OVER_LIMIT,
    ) and outcome.over_by is not None:
        return f"{text} by {outcome.over_by}"
    if outcome.message and outcome.result is TransferResult.INCORRECT_PAYLOAD:
        return f"{text}: {outcome.message}"
    if outcome.message and outcome.result is TransferResult.REMOTE_FAILURE:
        # Transport failures carry node URLs and HTTP noise.
        return f"{text}. {format_error_for_user(outcome.message)}"
    return text
