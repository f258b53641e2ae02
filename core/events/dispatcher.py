"""
MedRestock Notifications — Dispatcher
=======================================
Routes a notification to registered subscribers after the underlying
store write has succeeded.

Subscriber failure must NOT:
- Break dispatch to other subscribers
- Undo or alter the stored record

The dispatcher never raises. Failures are logged and reported.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from core.events.registry import SubscriberRegistry

logger = logging.getLogger("medrestock.events")


@dataclass(frozen=True)
class Notification:
    """Something a viewer may want to refresh on."""
    event_type: str
    subject_id: str
    occurred_at: datetime
    payload: Dict[str, Any] = field(default_factory=dict)


def dispatch(notification: Notification, registry: SubscriberRegistry) -> dict:
    """
    Deliver a notification to every subscriber of its event type.

    Returns:
        {
            'event_type': str,
            'subject_id': str,
            'subscribers_notified': int,
            'subscribers_failed': int,
            'failures': list[dict]
        }
    """
    event_type = notification.event_type
    subscribers = registry.get_subscribers(event_type)

    result = {
        "event_type": event_type,
        "subject_id": notification.subject_id,
        "subscribers_notified": 0,
        "subscribers_failed": 0,
        "failures": [],
    }

    if not subscribers:
        logger.debug(
            f"No subscribers for '{event_type}' "
            f"(subject: {notification.subject_id})"
        )
        return result

    for handler, subscriber_name in subscribers:
        handler_name = getattr(handler, "__qualname__", str(handler))
        try:
            handler(notification)
            result["subscribers_notified"] += 1
        except Exception as exc:
            result["subscribers_failed"] += 1
            result["failures"].append({
                "handler": handler_name,
                "subscriber": subscriber_name,
                "error": str(exc),
                "error_type": type(exc).__name__,
            })
            logger.error(
                f"Subscriber failed: {handler_name} for {event_type} "
                f"(subject: {notification.subject_id}): {exc}",
                exc_info=True,
            )

    logger.debug(
        f"Dispatch complete: {event_type} ({notification.subject_id}) — "
        f"{result['subscribers_notified']} notified, "
        f"{result['subscribers_failed']} failed"
    )
    return result
