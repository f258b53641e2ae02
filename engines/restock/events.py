"""
MedRestock Restock Engine — Notification Types
================================================
Published by the lifecycle manager after a successful store write.
Viewers subscribe through core.events.SubscriberRegistry.
"""

from __future__ import annotations

from core.events import Notification
from engines.restock.models import RestockRequest

RESTOCK_REQUEST_SUBMITTED = "restock.request.submitted"
RESTOCK_REQUEST_STATUS_CHANGED = "restock.request.status_changed"

RESTOCK_NOTIFICATION_TYPES = (
    RESTOCK_REQUEST_SUBMITTED,
    RESTOCK_REQUEST_STATUS_CHANGED,
)


def build_submitted_notification(request: RestockRequest) -> Notification:
    return Notification(
        event_type=RESTOCK_REQUEST_SUBMITTED,
        subject_id=request.request_id,
        occurred_at=request.created_at,
        payload={
            "pharmacy_id": request.pharmacy_id,
            "priority": request.priority.value,
            "status": request.status.value,
            "total_items": request.total_items,
            "total_quantity": request.total_quantity,
        },
    )


def build_status_changed_notification(
    request: RestockRequest,
    previous_status: str,
) -> Notification:
    return Notification(
        event_type=RESTOCK_REQUEST_STATUS_CHANGED,
        subject_id=request.request_id,
        occurred_at=request.updated_at,
        payload={
            "pharmacy_id": request.pharmacy_id,
            "from_status": previous_status,
            "to_status": request.status.value,
        },
    )
