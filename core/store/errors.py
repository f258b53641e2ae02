"""
MedRestock Store — Errors
===========================
Storage failures are reported separately from business rejections.
"""

from __future__ import annotations

from core.errors import RestockError


class StorageError(RestockError):
    """A store read or write could not be completed."""

    def __init__(
        self,
        operation: str,
        namespace: str,
        key: str | None = None,
        detail: str = "",
    ):
        self.operation = operation
        self.namespace = namespace
        self.key = key
        self.detail = detail
        target = f"{namespace}/{key}" if key is not None else f"{namespace}*"
        message = f"Store {operation} failed for '{target}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
