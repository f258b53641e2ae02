"""
MedRestock Notifications — Subscriber Registry
================================================
Controls which viewers hear about restock request changes.

Rules:
- Event types must follow engine.domain.action format
- Multiple subscribers per event type allowed
- The same handler may not register twice for one event type
- In-memory only, thread-safe
"""

import logging
from threading import Lock
from typing import Callable

from core.events.errors import (
    DuplicateSubscriberError,
    EventBusError,
    InvalidEventTypeFormat,
)

logger = logging.getLogger("medrestock.events")


class SubscriberRegistry:
    """Maps event_type → list of (handler, subscriber_name)."""

    def __init__(self):
        self._subscribers: dict[str, list[tuple[Callable, str]]] = {}
        self._lock = Lock()

    @staticmethod
    def _validate_event_type_format(event_type: str) -> None:
        if not event_type or not isinstance(event_type, str):
            raise InvalidEventTypeFormat(event_type or "")
        parts = event_type.strip().split(".")
        if len(parts) < 3 or not all(parts):
            raise InvalidEventTypeFormat(event_type)

    def register_subscriber(
        self,
        event_type: str,
        handler: Callable,
        subscriber_name: str = "viewer",
    ) -> None:
        """
        Register a handler for an event type.

        Raises:
            InvalidEventTypeFormat:   Bad event type format
            DuplicateSubscriberError: Handler already registered
        """
        self._validate_event_type_format(event_type)

        if not callable(handler):
            raise EventBusError(
                f"Handler must be callable, got {type(handler)}."
            )

        handler_name = getattr(handler, "__qualname__", str(handler))

        with self._lock:
            subscribers = self._subscribers.setdefault(event_type, [])
            for existing_handler, _ in subscribers:
                if existing_handler is handler:
                    raise DuplicateSubscriberError(event_type, handler_name)
            subscribers.append((handler, subscriber_name))

        logger.info(
            f"Subscriber registered: {handler_name} → {event_type} "
            f"({subscriber_name})"
        )

    def unregister_subscriber(self, event_type: str, handler: Callable) -> bool:
        """Remove a handler. Returns False when it was not registered."""
        with self._lock:
            subscribers = self._subscribers.get(event_type, [])
            for index, (existing_handler, _) in enumerate(subscribers):
                if existing_handler is handler:
                    del subscribers[index]
                    return True
        return False

    def get_subscribers(self, event_type: str) -> list[tuple[Callable, str]]:
        with self._lock:
            return list(self._subscribers.get(event_type, []))

    def has_subscribers(self, event_type: str) -> bool:
        with self._lock:
            return bool(self._subscribers.get(event_type))

    def subscriber_count(self, event_type: str) -> int:
        with self._lock:
            return len(self._subscribers.get(event_type, []))
