"""Logging setup for the Aptos wallet core.

Every handler installed by :func:`setup_logging` formats through a sanitizing
formatter, so labelled signing keys and passwords never reach stdout or the log
file. :func:`format_error_for_user` turns raw node and transport failures into
short text fit for a form field or a notification.
"""

from __future__ import annotations

import json
import logging
import os
import re
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, NamedTuple

REDACTED = "[REDACTED]"
TRUTHY = ("1", "true", "yes", "on")


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @classmethod
    def parse(cls, value: str | None, default: "LogLevel") -> "LogLevel":
        try:
            return cls((value or "").strip().upper())
        except ValueError:
            return default


@dataclass
class LoggingConfig:
    log_level: LogLevel = LogLevel.INFO
    log_to_stdout: bool = True
    log_dir: Path | None = None
    log_filename: str = "wallet.log"
    json_format: bool = False
    sanitize_sensitive: bool = True

    @property
    def log_to_file(self) -> bool:
        return self.log_dir is not None

    @classmethod
    def from_environment(cls) -> "LoggingConfig":
        log_dir = os.getenv("APTOS_WALLET_LOG_DIR", "").strip()
        return cls(
            log_level=LogLevel.parse(os.getenv("APTOS_WALLET_LOG_LEVEL"), LogLevel.INFO),
            log_to_stdout=os.getenv("APTOS_WALLET_LOG_STDOUT", "1").strip().lower() in TRUTHY,
            log_dir=Path(log_dir).expanduser() if log_dir else None,
            json_format=os.getenv("APTOS_WALLET_LOG_FORMAT", "").strip().lower() == "json",
        )


class Redaction(NamedTuple):
    pattern: re.Pattern[str]
    replacement: str


# Addresses are 64 hex digits too, so key material is only redacted behind a label.
REDACTIONS = (
    Redaction(
        re.compile(
            r"((?:private|signing|secret)[_-]?key['\"]?\s*[:=]\s*['\"]?)(?:0x)?[0-9a-f]{64}",
            re.IGNORECASE,
        ),
        rf"\1{REDACTED}",
    ),
    Redaction(
        re.compile(r"(password['\"]?\s*[:=]\s*['\"]?)[^\s'\"]+", re.IGNORECASE),
        rf"\1{REDACTED}",
    ),
)

SENSITIVE_KEYS = ("private_key", "privatekey", "signing_key", "password", "secret")


def sanitize_message(message: str) -> str:
    for redaction in REDACTIONS:
        message = redaction.pattern.sub(redaction.replacement, message)
    return message


def sanitize_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Copy of ``data`` with sensitive keys blanked and string values scrubbed."""

    def clean(key: str, value: Any) -> Any:
        if any(name in key.lower() for name in SENSITIVE_KEYS):
            return REDACTED
        if isinstance(value, str):
            return sanitize_message(value)
        if isinstance(value, dict):
            return sanitize_dict(value)
        return value

    return {key: clean(key, value) for key, value in data.items()}


@dataclass(frozen=True)
class ErrorMapping:
    pattern: re.Pattern[str]
    user_message: str
    suggest_action: str | None = None


def _mapping(pattern: str, user_message: str, suggest_action: str | None = None) -> ErrorMapping:
    return ErrorMapping(re.compile(pattern, re.IGNORECASE), user_message, suggest_action)


# First match wins.
ERROR_MAPPINGS = (
    _mapping(
        r"timeout|timed out",
        "Connection timed out. The node may be slow or unavailable.",
        "Try again later or check your network connection.",
    ),
    _mapping(
        r"connection refused|cannot connect|connection error",
        "Unable to connect to the node.",
        "Check your internet connection and try again.",
    ),
    _mapping(
        r"e?insufficient[_ ]balance",
        "Insufficient balance for this transaction.",
        "Ensure you have enough coins for the transfer and gas.",
    ),
    _mapping(
        r"sequence[_ ]number",
        "The account sequence number is out of date.",
        "Wait for pending transactions to settle and try again.",
    ),
    _mapping(
        r"account.*not found|resource.*not found|account does not exist",
        "The account does not exist on the ledger.",
        "Check the address, or fund the account with the faucet first.",
    ),
    _mapping(
        r"invalid.*address|address.*invalid",
        "The address provided is not valid.",
        "Please check the recipient address format.",
    ),
    _mapping(
        r"max_gas|gas.*exceed|out_of_gas",
        "The transaction ran out of gas.",
        "Keep a larger balance reserved for gas.",
    ),
    _mapping(
        r"rate limit|too many requests|\b429\b",
        "Too many requests. Please slow down.",
        "Wait a moment and try again.",
    ),
    _mapping(
        r"not confirmed within|expired",
        "The transaction was not confirmed in time.",
        "Refresh the wallet to see whether it was committed.",
    ),
)

UNEXPECTED_ERROR = "An unexpected error occurred."


def get_user_friendly_error(error: Exception | str) -> tuple[str, str | None]:
    text = str(error)
    for mapping in ERROR_MAPPINGS:
        if mapping.pattern.search(text):
            return mapping.user_message, mapping.suggest_action
    return UNEXPECTED_ERROR, None


def format_error_for_user(error: Exception | str) -> str:
    user_message, suggestion = get_user_friendly_error(error)
    return f"{user_message} {suggestion}" if suggestion else user_message


class SanitizingFormatter(logging.Formatter):
    """Base formatter that scrubs the finished text when ``sanitize`` is on."""

    def __init__(self, sanitize: bool = True, **kwargs: Any):
        super().__init__(**kwargs)
        self.sanitize = sanitize

    def clean(self, text: str) -> str:
        return sanitize_message(text) if self.sanitize else text


class StructuredFormatter(SanitizingFormatter):
    """One JSON object per record; a ``context`` dict passed via ``extra`` is included."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": self.clean(record.getMessage()),
            "function": record.funcName,
            "line": record.lineno,
        }

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            entry["context"] = sanitize_dict(context) if self.sanitize else context

        if record.exc_info:
            entry["exception"] = self.clean(self.formatException(record.exc_info))

        return json.dumps(entry, default=str)


class HumanReadableFormatter(SanitizingFormatter):
    def __init__(self, sanitize: bool = True):
        super().__init__(
            sanitize=sanitize,
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        return self.clean(super().format(record))


def _build_handlers(config: LoggingConfig) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if config.log_dir is not None:
        config.log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.FileHandler(config.log_dir / config.log_filename, encoding="utf-8")
        )
    if config.log_to_stdout:
        handlers.append(logging.StreamHandler(sys.stdout))
    return handlers


_logging_initialized = False


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure the root logger once per process; later calls are no-ops."""
    global _logging_initialized
    if _logging_initialized:
        return

    config = config or LoggingConfig.from_environment()
    formatter_class = StructuredFormatter if config.json_format else HumanReadableFormatter
    formatter = formatter_class(sanitize=config.sanitize_sensitive)

    root_logger = logging.getLogger()
    root_logger.setLevel(config.log_level.value)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    for handler in _build_handlers(config):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    _logging_initialized = True


__all__ = [
    "LogLevel",
    "LoggingConfig",
    "StructuredFormatter",
    "HumanReadableFormatter",
    "sanitize_message",
    "sanitize_dict",
    "get_user_friendly_error",
    "format_error_for_user",
    "setup_logging",
]
