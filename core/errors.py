"""
MedRestock Core — Error Taxonomy
==================================
Errors surfaced by the inventory ledger, the restock builder and the
request lifecycle manager.

Every error is terminal for the call that raised it. Nothing here is
retried by the core; the caller decides what to show.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping


class RestockError(Exception):
    """Base error for all MedRestock core operations."""
    pass


class ValidationError(RestockError):
    """One or more field values were rejected."""

    def __init__(self, errors: Mapping[str, str]):
        self.errors: Dict[str, str] = dict(errors)
        details = "; ".join(
            f"{field}: {message}" for field, message in self.errors.items()
        )
        super().__init__(f"Validation failed — {details}")

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(self.errors)


class NotFoundError(RestockError):
    """Referenced entity does not exist for the given owner."""

    def __init__(self, entity: str, identifier: str):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} '{identifier}' not found.")


class EmptySelectionError(RestockError):
    """A restock request was submitted with no line items."""

    def __init__(self):
        super().__init__(
            "Please select at least one medicine — a restock request "
            "cannot be submitted without line items."
        )


class DuplicateRequestError(RestockError):
    """A request id was recorded twice."""

    def __init__(self, request_id: str):
        self.request_id = request_id
        super().__init__(f"Restock request '{request_id}' already exists.")


class InvalidTransitionError(RestockError):
    """Status change is not the immediate forward successor."""

    def __init__(
        self,
        request_id: str,
        current_status: str,
        target_status: str,
        allowed: Iterable[str] = (),
    ):
        self.request_id = request_id
        self.current_status = current_status
        self.target_status = target_status
        self.allowed = tuple(sorted(allowed))
        super().__init__(
            f"Invalid transition for request '{request_id}': "
            f"{current_status} → {target_status}. "
            f"Allowed: {list(self.allowed)}."
        )
