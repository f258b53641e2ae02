"""
MedRestock Restock Engine — Request Records
=============================================
Enumerations, line items and the immutable restock request.

RULES (NON-NEGOTIABLE):
- A request always has at least one line item
- Line items are snapshotted at submission and never change
- total_items / total_quantity are recomputed from line items on access
- Only status and updated_at change after creation
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Tuple


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class Priority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DeliveryTimeline(Enum):
    URGENT = "1-2 days"
    STANDARD = "3-5 days"
    REGULAR = "1 week"
    NON_URGENT = "2 weeks"


class RequestStatus(Enum):
    """Declaration order is the lifecycle order."""
    PENDING = "pending"
    PROCESSING = "processing"
    PREPARED = "prepared"
    SHIPPED = "shipped"
    DELIVERED = "delivered"


# ══════════════════════════════════════════════════════════════
# LINE ITEM
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RestockLineItem:
    """
    One medicine in a restock request.

    current_quantity and threshold are the ledger values at the moment
    the line was drafted; requested_quantity is what the pharmacy asks for.
    """
    medicine_id: str
    medicine_name: str
    current_quantity: int
    threshold: int
    requested_quantity: int

    def with_quantity(self, requested_quantity: int) -> RestockLineItem:
        return replace(self, requested_quantity=requested_quantity)

    def to_dict(self) -> dict:
        return {
            "medicine_id": self.medicine_id,
            "medicine_name": self.medicine_name,
            "current_quantity": self.current_quantity,
            "threshold": self.threshold,
            "requested_quantity": self.requested_quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> RestockLineItem:
        return cls(
            medicine_id=data["medicine_id"],
            medicine_name=data["medicine_name"],
            current_quantity=data["current_quantity"],
            threshold=data["threshold"],
            requested_quantity=data["requested_quantity"],
        )


# ══════════════════════════════════════════════════════════════
# RESTOCK REQUEST
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RestockRequest:
    """
    A submitted restock request, owned by the lifecycle manager.

    Fields:
        request_id:           Opaque unique id
        pharmacy_id:          Originating pharmacy
        pharmacy_name:        Snapshot of the profile name
        pharmacy_address:     Snapshot of the profile address
        pharmacy_phone:       Snapshot of the profile phone
        line_items:           Non-empty, immutable
        priority:             low | medium | high
        delivery_timeline:    One of the fixed timeline labels
        status:               Current lifecycle status
        created_at:           Submission time (immutable)
        updated_at:           Last status change
        special_instructions: Free text ("" when absent)
    """
    request_id: str
    pharmacy_id: str
    pharmacy_name: str
    pharmacy_address: str
    pharmacy_phone: str
    line_items: Tuple[RestockLineItem, ...]
    priority: Priority
    delivery_timeline: DeliveryTimeline
    status: RequestStatus
    created_at: datetime
    updated_at: datetime
    special_instructions: str = ""

    def __post_init__(self):
        if not self.request_id:
            raise ValueError("request_id must be non-empty.")
        if not self.pharmacy_id:
            raise ValueError("pharmacy_id must be non-empty.")
        if not isinstance(self.line_items, tuple):
            object.__setattr__(self, "line_items", tuple(self.line_items))
        if not self.line_items:
            raise ValueError("A restock request needs at least one line item.")
        for item in self.line_items:
            if not isinstance(item, RestockLineItem):
                raise TypeError("line_items must contain RestockLineItem.")
            if item.requested_quantity < 1:
                raise ValueError("requested_quantity must be >= 1.")
        if not isinstance(self.priority, Priority):
            raise ValueError("priority must be Priority enum.")
        if not isinstance(self.delivery_timeline, DeliveryTimeline):
            raise ValueError("delivery_timeline must be DeliveryTimeline enum.")
        if not isinstance(self.status, RequestStatus):
            raise ValueError("status must be RequestStatus enum.")

    @property
    def total_items(self) -> int:
        return len(self.line_items)

    @property
    def total_quantity(self) -> int:
        return sum(item.requested_quantity for item in self.line_items)

    def with_status(self, status: RequestStatus, at: datetime) -> RestockRequest:
        """New snapshot with the status changed. Original is unchanged."""
        return replace(self, status=status, updated_at=at)

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "pharmacy_id": self.pharmacy_id,
            "pharmacy_name": self.pharmacy_name,
            "pharmacy_address": self.pharmacy_address,
            "pharmacy_phone": self.pharmacy_phone,
            "medicines": [item.to_dict() for item in self.line_items],
            "total_items": self.total_items,
            "total_quantity": self.total_quantity,
            "priority": self.priority.value,
            "delivery_timeline": self.delivery_timeline.value,
            "special_instructions": self.special_instructions,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> RestockRequest:
        # Stored totals are for rendering only; the properties recompute them.
        return cls(
            request_id=data["id"],
            pharmacy_id=data["pharmacy_id"],
            pharmacy_name=data["pharmacy_name"],
            pharmacy_address=data["pharmacy_address"],
            pharmacy_phone=data["pharmacy_phone"],
            line_items=tuple(
                RestockLineItem.from_dict(item) for item in data["medicines"]
            ),
            priority=Priority(data["priority"]),
            delivery_timeline=DeliveryTimeline(data["delivery_timeline"]),
            special_instructions=data.get("special_instructions") or "",
            status=RequestStatus(data["status"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )
