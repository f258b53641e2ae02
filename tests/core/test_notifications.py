"""
MedRestock — Notification Channel Tests
=========================================
"""

from datetime import datetime, timezone

import pytest

from core.events import (
    DuplicateSubscriberError,
    InvalidEventTypeFormat,
    Notification,
    SubscriberRegistry,
    dispatch,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
EVENT = "restock.request.status_changed"


def _notification():
    return Notification(
        event_type=EVENT,
        subject_id="r-1",
        occurred_at=NOW,
        payload={"from_status": "pending", "to_status": "processing"},
    )


class TestSubscriberRegistry:
    def test_register_and_count(self):
        registry = SubscriberRegistry()
        registry.register_subscriber(EVENT, lambda n: None)
        assert registry.has_subscribers(EVENT)
        assert registry.subscriber_count(EVENT) == 1

    def test_bad_event_type_rejected(self):
        registry = SubscriberRegistry()
        with pytest.raises(InvalidEventTypeFormat):
            registry.register_subscriber("status_changed", lambda n: None)

    def test_duplicate_handler_rejected(self):
        registry = SubscriberRegistry()

        def handler(n):
            pass

        registry.register_subscriber(EVENT, handler)
        with pytest.raises(DuplicateSubscriberError):
            registry.register_subscriber(EVENT, handler)

    def test_unregister(self):
        registry = SubscriberRegistry()

        def handler(n):
            pass

        registry.register_subscriber(EVENT, handler)
        assert registry.unregister_subscriber(EVENT, handler) is True
        assert registry.unregister_subscriber(EVENT, handler) is False
        assert not registry.has_subscribers(EVENT)


class TestDispatch:
    def test_delivers_to_every_subscriber(self):
        registry = SubscriberRegistry()
        seen = []
        registry.register_subscriber(EVENT, lambda n: seen.append(("a", n.subject_id)))
        registry.register_subscriber(EVENT, lambda n: seen.append(("b", n.subject_id)))

        result = dispatch(_notification(), registry)

        assert result["subscribers_notified"] == 2
        assert seen == [("a", "r-1"), ("b", "r-1")]

    def test_failing_subscriber_is_isolated(self):
        registry = SubscriberRegistry()
        seen = []

        def broken(n):
            raise RuntimeError("dashboard offline")

        registry.register_subscriber(EVENT, broken)
        registry.register_subscriber(EVENT, lambda n: seen.append(n.subject_id))

        result = dispatch(_notification(), registry)

        assert result["subscribers_failed"] == 1
        assert result["subscribers_notified"] == 1
        assert result["failures"][0]["error_type"] == "RuntimeError"
        assert seen == ["r-1"]

    def test_no_subscribers(self):
        result = dispatch(_notification(), SubscriberRegistry())
        assert result["subscribers_notified"] == 0
        assert result["failures"] == []
