"""
MedRestock Restock Engine — Policies
======================================
Quantity suggestions, input clamping, enum parsing and the request
status workflow.
"""

from __future__ import annotations

import re
from typing import Any, Type, TypeVar

from core.primitives.workflow import WorkflowDefinition
from engines.inventory.models import Medicine
from engines.restock.models import DeliveryTimeline, Priority, RequestStatus

MIN_REQUESTED_QUANTITY = 1

RESTOCK_REQUEST_WORKFLOW = WorkflowDefinition.linear(
    "RestockRequest",
    [status.value for status in RequestStatus],
)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

E = TypeVar("E", Priority, DeliveryTimeline, RequestStatus)


def suggested_quantity_for(quantity: int, threshold: int) -> int:
    """Refill to twice the threshold, never less than the threshold itself."""
    return max(threshold * 2 - quantity, threshold)


def suggested_quantity(medicine: Medicine) -> int:
    return suggested_quantity_for(medicine.quantity, medicine.threshold)


def clamp_requested_quantity(raw: Any) -> int:
    """
    Parse a user-entered quantity. Leading digits are read the way a form
    field would read them ("12 boxes" → 12); non-numeric, zero or negative
    input clamps to 1.
    """
    value = 0
    if isinstance(raw, bool):
        value = 0
    elif isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        value = int(raw) if raw == raw and abs(raw) != float("inf") else 0
    elif isinstance(raw, str):
        match = _LEADING_INT.match(raw)
        if match:
            value = int(match.group(1))
    return max(MIN_REQUESTED_QUANTITY, value)


def parse_choice(enum_type: Type[E], value: Any) -> E:
    """Accept an enum member or its exact string value."""
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        return enum_type(value.strip())
    raise ValueError(f"{value!r} is not a valid {enum_type.__name__}")


def allowed_values(enum_type: Type[E]) -> list[str]:
    return [member.value for member in enum_type]
