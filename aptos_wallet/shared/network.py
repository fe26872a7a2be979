"""Blocking JSON transport to a ledger node or faucet.

Failures of any kind leave this module as :class:`NetworkError`, classified by
:class:`NetworkErrorType` and, for HTTP failures, carrying the status code and
the node's own error message. Requests are made once; there is no retry.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import requests
from requests.exceptions import ConnectionError, HTTPError, Timeout

logger = logging.getLogger(__name__)


class NetworkErrorType(Enum):
    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"
    HTTP_ERROR = "http_error"
    UNKNOWN = "unknown"


@dataclass
class NetworkError(Exception):
    error_type: NetworkErrorType
    message: str
    original_error: Exception | None = None
    status_code: int | None = None
    response_text: str | None = None

    def __str__(self) -> str:
        return self.message

    @property
    def is_client_error(self) -> bool:
        """True for 4xx responses, i.e. the node rejected what was sent."""
        return self.status_code is not None and 400 <= self.status_code < 500


@dataclass
class TimeoutConfig:
    connect_timeout: float = 5.0
    read_timeout: float = 15.0

    @property
    def request_timeout(self) -> tuple[float, float]:
        return (self.connect_timeout, self.read_timeout)


DEFAULT_TIMEOUT_CONFIG = TimeoutConfig()

# Checked in order: ConnectTimeout is both a Timeout and a ConnectionError.
_ERROR_CLASSES: tuple[tuple[type[Exception], NetworkErrorType], ...] = (
    (Timeout, NetworkErrorType.TIMEOUT),
    (ConnectionError, NetworkErrorType.CONNECTION_ERROR),
    (HTTPError, NetworkErrorType.HTTP_ERROR),
)


def classify_error(error: Exception) -> NetworkErrorType:
    for error_class, error_type in _ERROR_CLASSES:
        if isinstance(error, error_class):
            return error_type
    return NetworkErrorType.UNKNOWN


def _extract_ledger_message(response: Any) -> str | None:
    """The ``message`` field of a node error body, or the raw body text."""
    if response is None:
        return None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return getattr(response, "text", None)


def create_network_error(
    error: Exception, node_url: str, context: str = ""
) -> NetworkError:
    error_type = classify_error(error)
    status_code = None
    response_text = None

    if error_type is NetworkErrorType.TIMEOUT:
        detail = f"Connection timeout. Node may be unavailable: {node_url}"
    elif error_type is NetworkErrorType.CONNECTION_ERROR:
        detail = f"Cannot connect to node: {node_url}. Check your network connection."
    elif error_type is NetworkErrorType.HTTP_ERROR:
        response = getattr(error, "response", None)
        status_code = getattr(response, "status_code", None)
        response_text = _extract_ledger_message(response)
        detail = f"HTTP error {status_code}: {response_text or 'Unknown error'}"
    else:
        detail = f"Network error: {error}"

    return NetworkError(
        error_type=error_type,
        message=f"{context}: {detail}" if context else detail,
        original_error=error,
        status_code=status_code,
        response_text=response_text,
    )


class NetworkClient:
    """JSON client bound to one base URL.

    ``get_optional`` is the variant for lookups where a 404 means "does not
    exist yet" rather than failure.
    """

    def __init__(
        self,
        base_url: str,
        timeout_config: TimeoutConfig | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_config = timeout_config or DEFAULT_TIMEOUT_CONFIG

    def _request(
        self,
        method: str,
        endpoint: str,
        context: str,
        missing_ok: bool = False,
        **kwargs: Any,
    ) -> Any:
        kwargs.setdefault("timeout", self.timeout_config.request_timeout)
        send = getattr(requests, method)
        try:
            response = send(f"{self.base_url}{endpoint}", **kwargs)
            if missing_ok and response.status_code == 404:
                return None
            response.raise_for_status()
            if not response.content:
                return {}
            try:
                return response.json()
            except ValueError:
                return {"message": response.text}
        except Exception as e:
            logger.warning("%s %s failed (%s): %s", method.upper(), endpoint, context, e)
            raise create_network_error(e, self.base_url, context) from e

    def get(self, endpoint: str, context: str = "", **kwargs: Any) -> Any:
        return self._request("get", endpoint, context, **kwargs)

    def get_optional(self, endpoint: str, context: str = "", **kwargs: Any) -> Any | None:
        return self._request("get", endpoint, context, missing_ok=True, **kwargs)

    def post(self, endpoint: str, context: str = "", **kwargs: Any) -> Any:
        return self._request("post", endpoint, context, **kwargs)
