"""Transfer-specific pre-flight checks run before any ledger call."""

from aptos_wallet.features.balance.service import UNKNOWN, Balance
from aptos_wallet.features.transfer.outcomes import TransferOutcome, TransferResult
from aptos_wallet.shared.validation import AmountValidator


class TransferLimitValidator:
    """Checks a requested amount against the held balance and the gas reserve."""

    MAX_AMOUNT = AmountValidator.MAX_AMOUNT

    @staticmethod
    def max_transferable(balance: int, gas_reserve: int) -> int:
        """Largest amount that still passes the strict ``amount < balance - gas_reserve`` rule."""
        return balance - gas_reserve - 1

    @classmethod
    def check(cls, amount: int, balance: Balance, gas_reserve: int) -> TransferOutcome | None:
        """Return a refusal outcome, or ``None`` when the transfer may proceed."""
        if balance is UNKNOWN:
            return TransferOutcome(TransferResult.BALANCE_UNKNOWN)

        if amount > cls.MAX_AMOUNT:
            return TransferOutcome(
                TransferResult.AMOUNT_OVER_LIMIT,
                over_by=amount - cls.MAX_AMOUNT,
            )

        if amount >= balance - gas_reserve:
            return TransferOutcome(
                TransferResult.AMOUNT_WITH_GAS_OVER_LIMIT,
                over_by=amount - cls.max_transferable(balance, gas_reserve),
            )

        return None
