"""
MedRestock Bootstrap — Wiring Errors
======================================
Raised when the restock system cannot be composed safely.
"""

from core.errors import RestockError


class SystemBootstrapError(RestockError):
    """
    A wiring precondition failed.

    The system is not composed; nothing falls back to another store.
    """

    def __init__(self, invariant: str, detail: str):
        self.invariant = invariant
        self.detail = detail
        super().__init__(
            f"MEDRESTOCK BOOTSTRAP FAILURE — {invariant}: {detail}"
        )
