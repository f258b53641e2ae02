"""
MedRestock Projections — Restock Reporting
============================================
Read-only cross-pharmacy views for the warehouse and pharmacy
dashboards.

Nothing is cached: every call re-reads the ledger and the request
collection through their public operations.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Tuple

from core.time import Clock
from engines.inventory.models import Medicine
from engines.inventory.policies import is_expiring_soon, is_low_stock
from engines.inventory.services import InventoryLedger
from engines.restock.lifecycle import RequestLifecycleManager
from engines.restock.models import Priority, RequestStatus, RestockRequest


def _zero_filled(enum_type) -> Dict[str, int]:
    return {member.value: 0 for member in enum_type}


class RestockReportingView:
    """
    Aggregations over every pharmacy's ledger and every restock request.

    Usage:
        view = RestockReportingView(ledger, lifecycle)
        view.counts_by_status()    # {"pending": 2, "processing": 0, ...}
        view.warehouse_summary()
    """

    def __init__(
        self,
        ledger: InventoryLedger,
        lifecycle: RequestLifecycleManager,
        *,
        clock: Optional[Clock] = None,
    ) -> None:
        self._ledger = ledger
        self._lifecycle = lifecycle
        self._clock = clock or ledger.clock

    # ══════════════════════════════════════════════════════════
    # STOCK
    # ══════════════════════════════════════════════════════════

    def system_wide_low_stock(self) -> Tuple[Tuple[str, Medicine], ...]:
        """(pharmacy_id, medicine) for every LowStock/OutOfStock medicine."""
        return tuple(
            (pharmacy_id, medicine)
            for pharmacy_id, medicines in self._ledger.all_ledgers().items()
            for medicine in medicines
            if is_low_stock(medicine)
        )

    def system_wide_expiring_soon(
        self,
        as_of: Optional[date] = None,
    ) -> Tuple[Tuple[str, Medicine], ...]:
        as_of = as_of or self._clock.today()
        window = self._ledger.settings.expiry_warning_days
        return tuple(
            (pharmacy_id, medicine)
            for pharmacy_id, medicines in self._ledger.all_ledgers().items()
            for medicine in medicines
            if is_expiring_soon(medicine, as_of, window)
        )

    # ══════════════════════════════════════════════════════════
    # REQUESTS
    # ══════════════════════════════════════════════════════════

    def counts_by_status(self) -> Dict[str, int]:
        counts = _zero_filled(RequestStatus)
        for request in self._lifecycle.list_all():
            counts[request.status.value] += 1
        return counts

    def counts_by_priority(self) -> Dict[str, int]:
        counts = _zero_filled(Priority)
        for request in self._lifecycle.list_all():
            counts[request.priority.value] += 1
        return counts

    # ══════════════════════════════════════════════════════════
    # DASHBOARDS
    # ══════════════════════════════════════════════════════════

    def pharmacy_summary(
        self,
        pharmacy_id: str,
        as_of: Optional[date] = None,
    ) -> Dict[str, Any]:
        as_of = as_of or self._clock.today()
        window = self._ledger.settings.expiry_warning_days
        medicines = self._ledger.list_medicines(pharmacy_id)

        requests_by_status = _zero_filled(RequestStatus)
        for request in self._lifecycle.list_by_pharmacy(pharmacy_id):
            requests_by_status[request.status.value] += 1

        return {
            "pharmacy_id": pharmacy_id,
            "total_medicines": len(medicines),
            "low_stock": sum(1 for m in medicines if is_low_stock(m)),
            "expiring_soon": sum(
                1 for m in medicines if is_expiring_soon(m, as_of, window)
            ),
            "total_quantity": sum(m.quantity for m in medicines),
            "requests_by_status": requests_by_status,
        }

    def warehouse_summary(self) -> Dict[str, int]:
        requests: Tuple[RestockRequest, ...] = self._lifecycle.list_all()
        by_status = _zero_filled(RequestStatus)
        for request in requests:
            by_status[request.status.value] += 1
        return {
            "total_requests": len(requests),
            "pending": by_status[RequestStatus.PENDING.value],
            "processing": by_status[RequestStatus.PROCESSING.value],
            "delivered": by_status[RequestStatus.DELIVERED.value],
            "low_stock_items": len(self.system_wide_low_stock()),
        }
