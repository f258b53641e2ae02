"""
MedRestock — Request Lifecycle Tests
======================================
Forward-only status machine, request lookups and change notifications.
"""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from core.errors import (
    DuplicateRequestError,
    InvalidTransitionError,
    NotFoundError,
    RestockError,
)
from core.events import SubscriberRegistry
from core.store import InMemoryStore, StorageError
from core.time import FixedClock
from engines.restock.events import (
    RESTOCK_NOTIFICATION_TYPES,
    RESTOCK_REQUEST_STATUS_CHANGED,
    RESTOCK_REQUEST_SUBMITTED,
)
from engines.restock.lifecycle import (
    REQUEST_INDEX_NAMESPACE,
    REQUESTS_NAMESPACE,
    RequestLifecycleManager,
)
from engines.restock.models import (
    DeliveryTimeline,
    Priority,
    RequestStatus,
    RestockLineItem,
    RestockRequest,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

FORWARD = ["processing", "prepared", "shipped", "delivered"]


def _request(request_id="r1", pharmacy_id="ph-1", priority=Priority.MEDIUM):
    return RestockRequest(
        request_id=request_id,
        pharmacy_id=pharmacy_id,
        pharmacy_name="Green Cross",
        pharmacy_address="12 Main St, Springfield, IL",
        pharmacy_phone="555-0100",
        line_items=(
            RestockLineItem("m1", "Amoxicillin", 2, 10, 18),
            RestockLineItem("m2", "Ibuprofen", 0, 5, 10),
        ),
        priority=priority,
        delivery_timeline=DeliveryTimeline.STANDARD,
        status=RequestStatus.PENDING,
        created_at=NOW,
        updated_at=NOW,
    )


class FailingStore(InMemoryStore):
    """Raises on writes to the listed namespaces."""

    def __init__(self, *failing):
        super().__init__()
        self.failing = set(failing)

    def put(self, namespace, key, record):
        if namespace in self.failing:
            raise StorageError("put", namespace, key, "disk full")
        super().put(namespace, key, record)


def _manager(clock=None, subscribers=None):
    return RequestLifecycleManager(
        InMemoryStore(),
        clock=clock or FixedClock(NOW),
        subscribers=subscribers,
    )


# ══════════════════════════════════════════════════════════════
# TRANSITIONS
# ══════════════════════════════════════════════════════════════

class TestAdvance:
    def test_full_forward_sequence(self):
        clock = FixedClock(NOW)
        manager = _manager(clock=clock)
        manager.record(_request())

        for step, status in enumerate(FORWARD, start=1):
            clock.advance(60)
            updated = manager.advance("r1", status)
            assert updated.status.value == status
            assert updated.updated_at == NOW + timedelta(minutes=step)
            assert updated.created_at == NOW

        assert manager.find_by_id("r1").status is RequestStatus.DELIVERED

    def test_accepts_enum_target(self):
        manager = _manager()
        manager.record(_request())
        assert manager.advance("r1", RequestStatus.PROCESSING).status is RequestStatus.PROCESSING

    def test_skip_is_rejected_and_status_unchanged(self):
        manager = _manager()
        manager.record(_request())

        with pytest.raises(InvalidTransitionError, match="pending → shipped") as exc_info:
            manager.advance("r1", "shipped")

        assert exc_info.value.current_status == "pending"
        assert exc_info.value.target_status == "shipped"
        assert exc_info.value.allowed == ("processing",)
        assert manager.find_by_id("r1").status is RequestStatus.PENDING

    def test_revert_is_rejected(self):
        manager = _manager()
        manager.record(_request())
        manager.advance("r1", "processing")
        with pytest.raises(InvalidTransitionError):
            manager.advance("r1", "pending")

    def test_repeat_is_rejected(self):
        manager = _manager()
        manager.record(_request())
        manager.advance("r1", "processing")
        with pytest.raises(InvalidTransitionError):
            manager.advance("r1", "processing")

    def test_delivered_is_terminal(self):
        manager = _manager()
        manager.record(_request())
        for status in FORWARD:
            manager.advance("r1", status)
        for status in ("pending", "processing", "delivered"):
            with pytest.raises(InvalidTransitionError) as exc_info:
                manager.advance("r1", status)
            assert exc_info.value.allowed == ()
        assert manager.next_status("r1") is None

    def test_unknown_status_is_rejected(self):
        manager = _manager()
        manager.record(_request())
        with pytest.raises(InvalidTransitionError, match="cancelled"):
            manager.advance("r1", "cancelled")

    def test_unknown_request(self):
        with pytest.raises(NotFoundError, match="r404"):
            _manager().advance("r404", "processing")

    def test_next_status(self):
        manager = _manager()
        manager.record(_request())
        assert manager.next_status("r1") is RequestStatus.PROCESSING

    def test_concurrent_advance_has_one_winner(self):
        manager = _manager()
        manager.record(_request())
        barrier = threading.Barrier(4)
        outcomes = []

        def attempt():
            barrier.wait()
            try:
                manager.advance("r1", "processing")
                outcomes.append("ok")
            except InvalidTransitionError:
                outcomes.append("rejected")

        threads = [threading.Thread(target=attempt) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("ok") == 1
        assert outcomes.count("rejected") == 3


# ══════════════════════════════════════════════════════════════
# RECORD & READS
# ══════════════════════════════════════════════════════════════

class TestRecordAndRead:
    def test_round_trip_keeps_totals(self):
        manager = _manager()
        manager.record(_request())
        stored = manager.find_by_id("r1")
        assert stored == _request()
        assert stored.total_items == 2
        assert stored.total_quantity == 28

    def test_stored_document_shape(self):
        store = InMemoryStore()
        manager = RequestLifecycleManager(store, clock=FixedClock(NOW))
        manager.record(_request())
        doc = store.get("restock_requests", "r1")
        assert doc["id"] == "r1"
        assert doc["total_items"] == 2
        assert doc["total_quantity"] == 28
        assert doc["status"] == "pending"
        assert doc["delivery_timeline"] == "3-5 days"
        assert store.get(REQUEST_INDEX_NAMESPACE, "ph-1")["request_ids"] == ["r1"]

    def test_duplicate_id_rejected(self):
        manager = _manager()
        manager.record(_request())
        with pytest.raises(DuplicateRequestError, match="already exists") as exc_info:
            manager.record(_request())
        assert isinstance(exc_info.value, RestockError)
        assert exc_info.value.request_id == "r1"
        assert len(manager.list_by_pharmacy("ph-1")) == 1

    def test_list_by_pharmacy_in_submission_order(self):
        manager = _manager()
        manager.record(_request("r2", "ph-1"))
        manager.record(_request("r1", "ph-1"))
        manager.record(_request("r3", "ph-2"))
        assert [r.request_id for r in manager.list_by_pharmacy("ph-1")] == ["r2", "r1"]
        assert [r.request_id for r in manager.list_by_pharmacy("ph-2")] == ["r3"]
        assert manager.list_by_pharmacy("ph-9") == ()

    def test_list_all_spans_pharmacies(self):
        manager = _manager()
        manager.record(_request("r1", "ph-1"))
        manager.record(_request("r2", "ph-2"))
        assert {r.request_id for r in manager.list_all()} == {"r1", "r2"}

    def test_find_unknown(self):
        with pytest.raises(NotFoundError):
            _manager().find_by_id("missing")

    def test_request_requires_line_items(self):
        with pytest.raises(ValueError, match="at least one line item"):
            RestockRequest(
                request_id="r1",
                pharmacy_id="ph-1",
                pharmacy_name="x",
                pharmacy_address="x",
                pharmacy_phone="x",
                line_items=(),
                priority=Priority.LOW,
                delivery_timeline=DeliveryTimeline.REGULAR,
                status=RequestStatus.PENDING,
                created_at=NOW,
                updated_at=NOW,
            )


class TestFilterRequests:
    def test_filter_by_status_and_priority(self):
        manager = _manager()
        manager.record(_request("r1", priority=Priority.HIGH))
        manager.record(_request("r2", priority=Priority.LOW))
        manager.record(_request("r3", priority=Priority.HIGH))
        manager.advance("r3", "processing")
        requests = manager.list_all()

        pending = manager.filter_requests(requests, status="pending")
        assert [r.request_id for r in pending] == ["r1", "r2"]

        high = manager.filter_requests(requests, priority=Priority.HIGH)
        assert [r.request_id for r in high] == ["r1", "r3"]

        both = manager.filter_requests(requests, status="processing", priority="high")
        assert [r.request_id for r in both] == ["r3"]

        assert len(manager.filter_requests(requests)) == 3

    def test_all_means_no_filter(self):
        manager = _manager()
        manager.record(_request("r1", priority=Priority.HIGH))
        manager.record(_request("r2", priority=Priority.LOW))
        requests = manager.list_all()

        assert manager.filter_requests(requests, status="all", priority="all") == requests
        low = manager.filter_requests(requests, status="all", priority="low")
        assert [r.request_id for r in low] == ["r2"]

    def test_unknown_filter_value(self):
        with pytest.raises(ValueError):
            RequestLifecycleManager.filter_requests((), status="lost")


# ══════════════════════════════════════════════════════════════
# NOTIFICATIONS
# ══════════════════════════════════════════════════════════════

class TestNotifications:
    def test_submitted_and_status_changed(self):
        subscribers = SubscriberRegistry()
        seen = []
        subscribers.register_subscriber(RESTOCK_REQUEST_SUBMITTED, seen.append)
        subscribers.register_subscriber(RESTOCK_REQUEST_STATUS_CHANGED, seen.append)
        manager = _manager(subscribers=subscribers)

        manager.record(_request())
        manager.advance("r1", "processing")

        assert [n.event_type for n in seen] == [
            RESTOCK_REQUEST_SUBMITTED,
            RESTOCK_REQUEST_STATUS_CHANGED,
        ]
        assert seen[0].payload["total_quantity"] == 28
        assert seen[1].payload == {
            "pharmacy_id": "ph-1",
            "from_status": "pending",
            "to_status": "processing",
        }

    def test_failing_subscriber_does_not_undo_write(self):
        subscribers = SubscriberRegistry()

        def broken(notification):
            raise RuntimeError("viewer crashed")

        subscribers.register_subscriber(RESTOCK_REQUEST_STATUS_CHANGED, broken)
        manager = _manager(subscribers=subscribers)
        manager.record(_request())

        manager.advance("r1", "processing")

        assert manager.find_by_id("r1").status is RequestStatus.PROCESSING

    def test_rejected_transition_notifies_nobody(self):
        subscribers = SubscriberRegistry()
        seen = []
        subscribers.register_subscriber(RESTOCK_REQUEST_STATUS_CHANGED, seen.append)
        manager = _manager(subscribers=subscribers)
        manager.record(_request())

        with pytest.raises(InvalidTransitionError):
            manager.advance("r1", "delivered")
        assert seen == []


# ══════════════════════════════════════════════════════════════
# FAILED WRITES
# ══════════════════════════════════════════════════════════════

class TestFailedRecord:
    def test_index_failure_leaves_nothing_visible(self):
        store = FailingStore(REQUEST_INDEX_NAMESPACE)
        manager = RequestLifecycleManager(store, clock=FixedClock(NOW))

        with pytest.raises(StorageError, match="request_index"):
            manager.record(_request())

        assert manager.list_all() == ()
        assert manager.list_by_pharmacy("ph-1") == ()
        with pytest.raises(NotFoundError):
            manager.find_by_id("r1")

    def test_document_failure_is_skipped_by_pharmacy_listing(self):
        store = FailingStore(REQUESTS_NAMESPACE)
        manager = RequestLifecycleManager(store, clock=FixedClock(NOW))

        with pytest.raises(StorageError):
            manager.record(_request())

        assert manager.list_all() == ()
        assert manager.list_by_pharmacy("ph-1") == ()

    def test_retry_after_failure_records_once(self):
        store = FailingStore(REQUESTS_NAMESPACE)
        manager = RequestLifecycleManager(store, clock=FixedClock(NOW))
        with pytest.raises(StorageError):
            manager.record(_request())

        store.failing.clear()
        manager.record(_request())

        assert [r.request_id for r in manager.list_by_pharmacy("ph-1")] == ["r1"]
        assert store.get(REQUEST_INDEX_NAMESPACE, "ph-1")["request_ids"] == ["r1"]
        assert len(manager.list_all()) == 1

    def test_failed_record_notifies_nobody(self):
        seen = []
        manager = RequestLifecycleManager(
            FailingStore(REQUESTS_NAMESPACE), clock=FixedClock(NOW),
        )
        manager.subscribe(seen.append)
        with pytest.raises(StorageError):
            manager.record(_request())
        assert seen == []


class TestSubscribe:
    def test_one_handler_hears_every_notification_type(self):
        seen = []
        manager = _manager()
        manager.subscribe(seen.append)

        manager.record(_request())
        manager.advance("r1", "processing")

        assert [n.event_type for n in seen] == list(RESTOCK_NOTIFICATION_TYPES)
        assert manager.subscribers.subscriber_count(RESTOCK_REQUEST_SUBMITTED) == 1
