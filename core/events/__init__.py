"""
MedRestock Notifications — Public API
=======================================
In-process channel from the lifecycle manager to dashboards.
Polling the read accessors remains a valid alternative.
"""

from core.events.dispatcher import Notification, dispatch
from core.events.errors import (
    DuplicateSubscriberError,
    EventBusError,
    InvalidEventTypeFormat,
)
from core.events.registry import SubscriberRegistry

__all__ = [
    "dispatch",
    "Notification",
    "SubscriberRegistry",
    "EventBusError",
    "InvalidEventTypeFormat",
    "DuplicateSubscriberError",
]
