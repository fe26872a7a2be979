"""Transfer feature module for the Aptos wallet core."""

from aptos_wallet.features.transfer.outcomes import (
    GAS_REPORTING_RESULTS,
    TRANSFER_RESULT_MESSAGES,
    TransferOutcome,
    TransferResult,
    describe_outcome,
)
from aptos_wallet.features.transfer.validators import TransferLimitValidator
from aptos_wallet.features.transfer.service import (
    TO_ADDRESS_FIELD,
    TransferService,
    build_transfer_payload,
)

__all__ = [
    "GAS_REPORTING_RESULTS",
    "TRANSFER_RESULT_MESSAGES",
    "TO_ADDRESS_FIELD",
    "TransferLimitValidator",
    "TransferOutcome",
    "TransferResult",
    "TransferService",
    "build_transfer_payload",
    "describe_outcome",
]
