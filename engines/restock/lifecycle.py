"""
MedRestock Restock Engine — Request Lifecycle Manager
=======================================================
Owns every restock request after submission and enforces

    pending → processing → prepared → shipped → delivered

Storage layout:
    namespace "restock_requests", key = request_id
        the request document (flat table, looked up by id alone)
    namespace "request_index", key = pharmacy_id
        {"pharmacy_id": ..., "request_ids": [...]} in submission order

record() writes the index entry before the document. A request exists
only once its document is stored; index ids without a document are
skipped on read, so a failed submission is invisible everywhere.

advance() is check-then-set under the request's lock: read the stored
status, validate the transition, write, all in one critical section.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, Tuple

from core.errors import (
    DuplicateRequestError,
    InvalidTransitionError,
    NotFoundError,
)
from core.events import SubscriberRegistry, dispatch
from core.primitives.workflow import WorkflowDefinition
from core.store import KeyedLocks, Store
from core.time import Clock, SystemClock
from engines.restock.events import (
    RESTOCK_NOTIFICATION_TYPES,
    build_status_changed_notification,
    build_submitted_notification,
)
from engines.restock.models import Priority, RequestStatus, RestockRequest
from engines.restock.policies import RESTOCK_REQUEST_WORKFLOW, parse_choice

logger = logging.getLogger("medrestock.restock")

REQUESTS_NAMESPACE = "restock_requests"
REQUEST_INDEX_NAMESPACE = "request_index"

ALL_FILTER = "all"


class RequestLifecycleManager:
    """
    Global restock request collection and its status state machine.

    Usage:
        manager = RequestLifecycleManager(store, clock=clock)
        manager.advance(request_id, "processing")
        manager.list_by_pharmacy("ph-1")
    """

    def __init__(
        self,
        store: Store,
        *,
        clock: Optional[Clock] = None,
        subscribers: Optional[SubscriberRegistry] = None,
        workflow: WorkflowDefinition = RESTOCK_REQUEST_WORKFLOW,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._subscribers = (
            subscribers if subscribers is not None else SubscriberRegistry()
        )
        self._workflow = workflow
        self._request_locks = KeyedLocks(REQUESTS_NAMESPACE)
        self._index_locks = KeyedLocks(REQUEST_INDEX_NAMESPACE)

    # ══════════════════════════════════════════════════════════
    # WRITES
    # ══════════════════════════════════════════════════════════

    def record(self, request: RestockRequest) -> RestockRequest:
        """
        Persist a freshly submitted request and index it under its pharmacy.

        Raises:
            DuplicateRequestError: a document with this id already exists.
            StorageError:          a store write failed; the request is not
                                   listed anywhere.
        """
        with self._request_locks.hold(request.request_id):
            if self._store.get(REQUESTS_NAMESPACE, request.request_id) is not None:
                raise DuplicateRequestError(request.request_id)

            with self._index_locks.hold(request.pharmacy_id):
                index = self._load_index(request.pharmacy_id)
                if request.request_id not in index:
                    index.append(request.request_id)
                    self._store.put(
                        REQUEST_INDEX_NAMESPACE,
                        request.pharmacy_id,
                        {"pharmacy_id": request.pharmacy_id, "request_ids": index},
                    )

            self._store.put(REQUESTS_NAMESPACE, request.request_id, request.to_dict())

        logger.info(
            f"Restock request recorded: {request.request_id} "
            f"(pharmacy: {request.pharmacy_id}, items: {request.total_items}, "
            f"quantity: {request.total_quantity}, priority: {request.priority.value})"
        )
        self._notify(build_submitted_notification(request))
        return request

    def advance(
        self,
        request_id: str,
        target_status: RequestStatus | str,
    ) -> RestockRequest:
        """
        Move a request to the immediate successor of its current status.

        Raises:
            NotFoundError:          request_id unknown.
            InvalidTransitionError: target is not the next status
                                    (skip, revert, repeat, terminal, unknown).
        """
        with self._request_locks.hold(request_id):
            current = self.find_by_id(request_id)
            current_value = current.status.value

            try:
                target = parse_choice(RequestStatus, target_status)
            except ValueError:
                target = None
            target_value = target.value if target else str(target_status)

            if target is None or not self._workflow.is_valid_transition(
                current_value, target_value
            ):
                logger.warning(
                    f"Rejected transition for {request_id}: "
                    f"{current_value} → {target_value}"
                )
                raise InvalidTransitionError(
                    request_id,
                    current_value,
                    target_value,
                    self._workflow.allowed_next_states(current_value),
                )

            updated = current.with_status(target, self._clock.now_utc())
            self._store.put(REQUESTS_NAMESPACE, request_id, updated.to_dict())

        logger.info(
            f"Restock request advanced: {request_id} "
            f"{current_value} → {target_value}"
        )
        self._notify(build_status_changed_notification(updated, current_value))
        return updated

    def next_status(self, request_id: str) -> Optional[RequestStatus]:
        """The only status advance() would accept now, or None when terminal."""
        current = self.find_by_id(request_id)
        successor = self._workflow.successor(current.status.value)
        return RequestStatus(successor) if successor else None

    # ══════════════════════════════════════════════════════════
    # READS
    # ══════════════════════════════════════════════════════════

    def find_by_id(self, request_id: str) -> RestockRequest:
        record = self._store.get(REQUESTS_NAMESPACE, request_id)
        if record is None:
            raise NotFoundError("Restock request", request_id)
        return RestockRequest.from_dict(record)

    def list_by_pharmacy(self, pharmacy_id: str) -> Tuple[RestockRequest, ...]:
        requests = []
        for request_id in self._load_index(pharmacy_id):
            record = self._store.get(REQUESTS_NAMESPACE, request_id)
            if record is None:
                # indexed but never stored: the submission failed
                continue
            requests.append(RestockRequest.from_dict(record))
        return tuple(requests)

    def list_all(self) -> Tuple[RestockRequest, ...]:
        return tuple(
            RestockRequest.from_dict(record)
            for _, record in self._store.scan_by_prefix(REQUESTS_NAMESPACE)
        )

    @staticmethod
    def filter_requests(
        requests: Iterable[RestockRequest],
        *,
        status: Any = None,
        priority: Any = None,
    ) -> Tuple[RestockRequest, ...]:
        """Pure predicate over already-loaded requests. None or "all" means no filter."""
        wanted_status = _filter_choice(RequestStatus, status)
        wanted_priority = _filter_choice(Priority, priority)
        return tuple(
            r for r in requests
            if (wanted_status is None or r.status is wanted_status)
            and (wanted_priority is None or r.priority is wanted_priority)
        )

    @property
    def workflow(self) -> WorkflowDefinition:
        return self._workflow

    # ══════════════════════════════════════════════════════════
    # NOTIFICATIONS
    # ══════════════════════════════════════════════════════════

    def subscribe(self, handler: Callable, subscriber_name: str = "viewer") -> None:
        """Register one handler for every restock notification type."""
        for event_type in RESTOCK_NOTIFICATION_TYPES:
            self._subscribers.register_subscriber(event_type, handler, subscriber_name)

    @property
    def subscribers(self) -> SubscriberRegistry:
        return self._subscribers

    # ══════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════

    def _load_index(self, pharmacy_id: str) -> list[str]:
        record = self._store.get(REQUEST_INDEX_NAMESPACE, pharmacy_id)
        if record is None:
            return []
        return list(record.get("request_ids", []))

    def _notify(self, notification) -> None:
        dispatch(notification, self._subscribers)


def _filter_choice(enum_type, value):
    if value is None or value == "" or value == ALL_FILTER:
        return None
    return parse_choice(enum_type, value)
