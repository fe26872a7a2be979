"""User-facing notification events emitted by the wallet core."""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 100


class Severity(Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    severity: Severity
    duration_ms: int = 7000


NotificationListener = Callable[[Notification], None]


class NotificationCenter:
    """Fan-out of notifications to presentation-layer listeners.

    The most recent ``history_limit`` notifications are kept in ``history`` so a
    caller that subscribes late, or a test, can inspect what was produced.
    """

    def __init__(self, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self._listeners: list[NotificationListener] = []
        self.history: deque[Notification] = deque(maxlen=history_limit)

    def subscribe(self, listener: NotificationListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: NotificationListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def clear_history(self) -> None:
        self.history.clear()

    def emit(self, notification: Notification) -> None:
        self.history.append(notification)
        logger.info("Notification: %s - %s", notification.title, notification.description)
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception as e:
                logger.error("Error in notification listener: %s", e)
