"""Shared utilities for the Aptos wallet core."""

from aptos_wallet.shared.logging import (
    LoggingConfig,
    LogLevel,
    format_error_for_user,
    get_user_friendly_error,
    sanitize_dict,
    sanitize_message,
    setup_logging,
)
from aptos_wallet.shared.network import (
    NetworkClient,
    NetworkError,
    NetworkErrorType,
    TimeoutConfig,
)
from aptos_wallet.shared.notifications import (
    Notification,
    NotificationCenter,
    Severity,
)
from aptos_wallet.shared.validation import (
    AddressValidator,
    AmountValidator,
    ValidationResult,
    normalize_address,
)

__all__ = [
    "NetworkClient",
    "NetworkError",
    "NetworkErrorType",
    "TimeoutConfig",
    "AddressValidator",
    "AmountValidator",
    "ValidationResult",
    "normalize_address",
    "Notification",
    "NotificationCenter",
    "Severity",
    "LoggingConfig",
    "LogLevel",
    "format_error_for_user",
    "get_user_friendly_error",
    "sanitize_dict",
    "sanitize_message",
    "setup_logging",
]
