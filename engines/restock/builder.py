"""
MedRestock Restock Engine — Request Builder
=============================================
Turns a pharmacy's low-stock medicines into an editable draft, then
submits the draft as an immutable restock request.

The ledger is consulted while drafting and to check that every submitted
line is one of the pharmacy's own medicines. Once submitted, the request
carries its own snapshot and belongs to the lifecycle manager.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from core.errors import EmptySelectionError, ValidationError
from core.time import Clock, SystemClock
from engines.inventory.models import Medicine
from engines.inventory.services import InventoryLedger
from engines.pharmacy.services import PharmacyProfileService
from engines.restock.lifecycle import RequestLifecycleManager
from engines.restock.models import (
    DeliveryTimeline,
    Priority,
    RequestStatus,
    RestockLineItem,
    RestockRequest,
)
from engines.restock.policies import (
    MIN_REQUESTED_QUANTITY,
    allowed_values,
    clamp_requested_quantity,
    parse_choice,
    suggested_quantity,
)

logger = logging.getLogger("medrestock.restock")


def _new_id() -> str:
    return uuid.uuid4().hex


def line_item_for(medicine: Medicine, requested_quantity: Optional[int] = None) -> RestockLineItem:
    """Snapshot a medicine into a line, defaulting to the suggested quantity."""
    if requested_quantity is None:
        requested_quantity = suggested_quantity(medicine)
    return RestockLineItem(
        medicine_id=medicine.medicine_id,
        medicine_name=medicine.name,
        current_quantity=medicine.quantity,
        threshold=medicine.threshold,
        requested_quantity=requested_quantity,
    )


# ══════════════════════════════════════════════════════════════
# DRAFT
# ══════════════════════════════════════════════════════════════

class RestockDraft:
    """
    Mutable, unsubmitted selection of line items.

    Lines keep the order in which they were added. Quantities entered by
    the user go through clamp_requested_quantity(), so a draft line is
    never below 1.
    """

    def __init__(self, pharmacy_id: str, lines: Iterable[RestockLineItem] = ()):
        self.pharmacy_id = pharmacy_id
        self._lines: Dict[str, RestockLineItem] = {}
        for line in lines:
            self._lines[line.medicine_id] = line

    def add_medicine(self, medicine: Medicine) -> RestockLineItem:
        """Add any medicine (low stock or not). Re-adding keeps the existing line."""
        existing = self._lines.get(medicine.medicine_id)
        if existing is not None:
            return existing
        line = line_item_for(medicine)
        self._lines[medicine.medicine_id] = line
        return line

    def remove(self, medicine_id: str) -> bool:
        return self._lines.pop(medicine_id, None) is not None

    def toggle(self, medicine: Medicine) -> bool:
        """Select when absent, deselect when present. Returns new selection state."""
        if medicine.medicine_id in self._lines:
            self.remove(medicine.medicine_id)
            return False
        self.add_medicine(medicine)
        return True

    def set_quantity(self, medicine_id: str, raw_quantity: Any) -> RestockLineItem:
        line = self._lines.get(medicine_id)
        if line is None:
            raise KeyError(f"Medicine '{medicine_id}' is not in the draft.")
        updated = line.with_quantity(clamp_requested_quantity(raw_quantity))
        self._lines[medicine_id] = updated
        return updated

    @property
    def lines(self) -> Tuple[RestockLineItem, ...]:
        return tuple(self._lines.values())

    @property
    def total_items(self) -> int:
        return len(self._lines)

    @property
    def total_quantity(self) -> int:
        return sum(line.requested_quantity for line in self._lines.values())

    def __contains__(self, medicine_id: object) -> bool:
        return medicine_id in self._lines

    def __len__(self) -> int:
        return len(self._lines)


# ══════════════════════════════════════════════════════════════
# BUILDER
# ══════════════════════════════════════════════════════════════

class RestockRequestBuilder:
    """
    Drafts and submits restock requests for one pharmacy at a time.

    Overlapping requests are allowed: a medicine may appear in several
    outstanding requests from the same pharmacy.
    """

    def __init__(
        self,
        ledger: InventoryLedger,
        profiles: PharmacyProfileService,
        lifecycle: RequestLifecycleManager,
        *,
        clock: Optional[Clock] = None,
        id_factory: Callable[[], str] = _new_id,
    ):
        self._ledger = ledger
        self._profiles = profiles
        self._lifecycle = lifecycle
        self._clock = clock or SystemClock()
        self._id_factory = id_factory

    @staticmethod
    def suggested_quantity(medicine: Medicine) -> int:
        return suggested_quantity(medicine)

    def draft_from_low_stock(self, pharmacy_id: str) -> RestockDraft:
        """Pre-select every LowStock / OutOfStock medicine at its suggested quantity."""
        lines = [line_item_for(m) for m in self._ledger.list_low_stock(pharmacy_id)]
        return RestockDraft(pharmacy_id, lines)

    def submit(
        self,
        pharmacy_id: str,
        line_items: RestockDraft | Iterable[RestockLineItem | Mapping[str, Any]],
        priority: Priority | str = Priority.MEDIUM,
        timeline: DeliveryTimeline | str = DeliveryTimeline.STANDARD,
        instructions: Optional[str] = "",
    ) -> RestockRequest:
        """
        Validate the selection and persist a pending restock request.

        Raises:
            EmptySelectionError: no line items (nothing is persisted).
            ValidationError:     bad quantity, priority, timeline or instructions,
                                 or a medicine not in this pharmacy's ledger.
            StorageError:        the store write failed.
        """
        if isinstance(line_items, RestockDraft):
            lines = list(line_items.lines)
        else:
            lines = list(line_items)

        if not lines:
            logger.warning(f"Empty restock selection from pharmacy {pharmacy_id}")
            raise EmptySelectionError()

        errors: Dict[str, str] = {}
        if not pharmacy_id or not isinstance(pharmacy_id, str):
            errors["pharmacy_id"] = "must be a non-empty string"

        positioned = self._coerce_lines(lines, errors)
        self._check_ownership(pharmacy_id, positioned, errors)
        items = [line for _, line in positioned]

        try:
            chosen_priority = parse_choice(Priority, priority)
        except ValueError:
            errors["priority"] = f"must be one of {allowed_values(Priority)}"
        try:
            chosen_timeline = parse_choice(DeliveryTimeline, timeline)
        except ValueError:
            errors["delivery_timeline"] = (
                f"must be one of {allowed_values(DeliveryTimeline)}"
            )
        if instructions is not None and not isinstance(instructions, str):
            errors["special_instructions"] = "must be a string"

        if errors:
            logger.warning(
                f"Restock request rejected for pharmacy {pharmacy_id}: {errors}"
            )
            raise ValidationError(errors)

        snapshot = self._profiles.snapshot(pharmacy_id)
        now = self._clock.now_utc()
        request = RestockRequest(
            request_id=self._id_factory(),
            pharmacy_id=pharmacy_id,
            pharmacy_name=snapshot.pharmacy_name,
            pharmacy_address=snapshot.pharmacy_address,
            pharmacy_phone=snapshot.pharmacy_phone,
            line_items=tuple(items),
            priority=chosen_priority,
            delivery_timeline=chosen_timeline,
            special_instructions=(instructions or "").strip(),
            status=RequestStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        return self._lifecycle.record(request)

    @staticmethod
    def _coerce_lines(
        lines: List[RestockLineItem | Mapping[str, Any]],
        errors: Dict[str, str],
    ) -> List[Tuple[int, RestockLineItem]]:
        """Lines paired with their submitted position."""
        items: List[Tuple[int, RestockLineItem]] = []
        seen: set[str] = set()
        for position, line in enumerate(lines):
            prefix = f"line_items[{position}]"
            if isinstance(line, Mapping):
                try:
                    line = RestockLineItem.from_dict(dict(line))
                except KeyError as exc:
                    errors[prefix] = f"missing {exc.args[0]}"
                    continue
            if not isinstance(line, RestockLineItem):
                errors[prefix] = "must be a line item"
                continue

            quantity = line.requested_quantity
            if (
                isinstance(quantity, bool)
                or not isinstance(quantity, int)
                or quantity < MIN_REQUESTED_QUANTITY
            ):
                errors[f"{prefix}.requested_quantity"] = (
                    f"must be an integer >= {MIN_REQUESTED_QUANTITY}"
                )
            if not line.medicine_id:
                errors[f"{prefix}.medicine_id"] = "must be non-empty"
            elif line.medicine_id in seen:
                errors[f"{prefix}.medicine_id"] = "appears more than once"
            seen.add(line.medicine_id)
            items.append((position, line))
        return items

    def _check_ownership(
        self,
        pharmacy_id: str,
        items: List[Tuple[int, RestockLineItem]],
        errors: Dict[str, str],
    ) -> None:
        """A pharmacy may only request medicines from its own ledger."""
        if not pharmacy_id or not isinstance(pharmacy_id, str):
            return
        owned = {m.medicine_id for m in self._ledger.list_medicines(pharmacy_id)}
        for position, line in items:
            key = f"line_items[{position}].medicine_id"
            if line.medicine_id and key not in errors and line.medicine_id not in owned:
                errors[key] = "not in this pharmacy's ledger"
