"""Validation of the transfer and coin-import form fields.

Validators never raise on bad input; they return a :class:`ValidationResult`
whose ``error_message`` is shown next to the offending field.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

HEX_DIGITS = re.compile(r"^[0-9a-fA-F]+$")


@dataclass
class ValidationResult:
    is_valid: bool
    error_message: str | None = None
    normalized_value: Any = None

    @classmethod
    def ok(cls, value: Any) -> "ValidationResult":
        return cls(is_valid=True, normalized_value=value)

    @classmethod
    def fail(cls, message: str) -> "ValidationResult":
        return cls(is_valid=False, error_message=message)


def normalize_address(address: str) -> str:
    """Lower-case, ``0x``-prefixed form used for every ledger path and payload."""
    value = address.strip().lower()
    return "0x" + value.removeprefix("0x")


class AddressValidator:
    ADDRESS_HEX_LENGTH = 64

    @classmethod
    def validate(cls, value: str | None, require_full_length: bool = True) -> ValidationResult:
        """Check an account address; short forms like ``0x1`` pass only when allowed."""
        if not value or not value.strip():
            return ValidationResult.fail("Address is required")

        normalized = normalize_address(value)
        digits = normalized[2:]
        if not HEX_DIGITS.match(digits):
            return ValidationResult.fail("Address must be a hexadecimal string")

        length = cls.ADDRESS_HEX_LENGTH
        if len(digits) > length:
            return ValidationResult.fail(f"Address must be at most {length} hex characters")
        if require_full_length and len(digits) != length:
            return ValidationResult.fail(f"Address must be {length} hex characters")

        return ValidationResult.ok(normalized)


class AmountValidator:
    """Native coin amounts are whole base units that fit in a u64."""

    MAX_AMOUNT = 18_446_744_073_709_551_615

    @classmethod
    def parse_amount(cls, value: Any) -> ValidationResult:
        if isinstance(value, bool):
            return ValidationResult.fail("Amount must be a valid number")
        if value is None or not str(value).strip():
            return ValidationResult.fail("Amount is required")

        text = str(value).strip().replace(",", "").replace(" ", "")
        if text.startswith("-"):
            return ValidationResult.fail("Amount must be a positive number")

        try:
            amount = Decimal(text)
        except InvalidOperation:
            return ValidationResult.fail("Amount must be a valid number")

        if not amount.is_finite():
            return ValidationResult.fail("Invalid numeric format (special value detected)")
        if amount <= 0:
            return ValidationResult.fail("Amount must be greater than zero")
        if amount != amount.to_integral_value():
            return ValidationResult.fail("Amount must be a whole number of coins")
        if amount > cls.MAX_AMOUNT:
            return ValidationResult.fail("Amount exceeds maximum allowed value")

        return ValidationResult.ok(int(amount))
