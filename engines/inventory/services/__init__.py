"""
MedRestock Inventory Engine — Ledger Service
==============================================
CRUD over one pharmacy's medicines plus derived stock views.

Storage layout:
    namespace "medicines", key = pharmacy_id
    record    {"pharmacy_id": ..., "items": [medicine dict, ...]}

The items list keeps insertion order. Every read-modify-write of a
pharmacy's collection runs under that pharmacy's lock, and the whole
collection is written back as one record.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from core.config import RestockSettings
from core.errors import NotFoundError, ValidationError
from core.store import KeyedLocks, Store
from core.time import Clock, SystemClock
from engines.inventory.models import Medicine, StockStatus
from engines.inventory.policies import (
    compute_stock_status,
    is_expiring_soon,
    validate_medicine_fields,
)

logger = logging.getLogger("medrestock.inventory")

MEDICINES_NAMESPACE = "medicines"


def _new_id() -> str:
    return uuid.uuid4().hex


class InventoryLedger:
    """
    Authoritative per-pharmacy medicine collections.

    Usage:
        ledger = InventoryLedger(store, clock=clock)
        med = ledger.add_medicine("ph-1", {
            "name": "Amoxicillin 500mg",
            "quantity": 2,
            "threshold": 10,
            "expiry_date": "2027-01-31",
        })
        ledger.list_low_stock("ph-1")   # (med,)
    """

    def __init__(
        self,
        store: Store,
        *,
        clock: Optional[Clock] = None,
        settings: Optional[RestockSettings] = None,
        id_factory: Callable[[], str] = _new_id,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._settings = settings or RestockSettings()
        self._id_factory = id_factory
        self._locks = KeyedLocks(MEDICINES_NAMESPACE)

    # ══════════════════════════════════════════════════════════
    # STORAGE HELPERS
    # ══════════════════════════════════════════════════════════

    def _load(self, pharmacy_id: str) -> List[Medicine]:
        record = self._store.get(MEDICINES_NAMESPACE, pharmacy_id)
        if record is None:
            return []
        return [Medicine.from_dict(item) for item in record.get("items", [])]

    def _save(self, pharmacy_id: str, medicines: List[Medicine]) -> None:
        self._store.put(
            MEDICINES_NAMESPACE,
            pharmacy_id,
            {
                "pharmacy_id": pharmacy_id,
                "items": [m.to_dict() for m in medicines],
            },
        )

    @staticmethod
    def _require_pharmacy(pharmacy_id: str) -> None:
        if not pharmacy_id or not isinstance(pharmacy_id, str):
            raise ValidationError({"pharmacy_id": "must be a non-empty string"})

    # ══════════════════════════════════════════════════════════
    # MUTATIONS
    # ══════════════════════════════════════════════════════════

    def add_medicine(self, pharmacy_id: str, fields: Mapping[str, Any]) -> Medicine:
        """
        Validate and append a new medicine to the pharmacy's ledger.

        Raises:
            ValidationError: listing every violated field.
            StorageError:    if the store write fails (nothing is appended).
        """
        self._require_pharmacy(pharmacy_id)
        try:
            cleaned = validate_medicine_fields(fields)
        except ValidationError as exc:
            logger.warning(
                f"Medicine rejected for pharmacy {pharmacy_id}: {exc}"
            )
            raise

        now = self._clock.now_utc()
        medicine = Medicine(
            medicine_id=self._id_factory(),
            created_by=pharmacy_id,
            created_at=now,
            updated_at=now,
            **cleaned,
        )

        with self._locks.hold(pharmacy_id):
            medicines = self._load(pharmacy_id)
            medicines.append(medicine)
            self._save(pharmacy_id, medicines)

        logger.info(
            f"Medicine added: {medicine.medicine_id} '{medicine.name}' "
            f"(pharmacy: {pharmacy_id}, qty: {medicine.quantity}, "
            f"threshold: {medicine.threshold})"
        )
        return medicine

    def update_medicine(
        self,
        pharmacy_id: str,
        medicine_id: str,
        fields: Mapping[str, Any],
    ) -> Medicine:
        """
        Merge the supplied fields into an existing medicine.

        Raises:
            NotFoundError:   medicine_id absent for this pharmacy.
            ValidationError: any supplied field is invalid.
        """
        self._require_pharmacy(pharmacy_id)
        try:
            cleaned = validate_medicine_fields(fields, partial=True)
        except ValidationError as exc:
            logger.warning(
                f"Medicine update rejected: {medicine_id} "
                f"(pharmacy: {pharmacy_id}): {exc}"
            )
            raise

        with self._locks.hold(pharmacy_id):
            medicines = self._load(pharmacy_id)
            index = self._index_of(medicines, medicine_id)
            if index is None:
                raise NotFoundError("Medicine", medicine_id)

            merged = replace(
                medicines[index],
                updated_at=self._clock.now_utc(),
                **cleaned,
            )
            medicines[index] = merged
            self._save(pharmacy_id, medicines)

        logger.info(
            f"Medicine updated: {medicine_id} (pharmacy: {pharmacy_id}, "
            f"fields: {sorted(cleaned)})"
        )
        return merged

    def delete_medicine(self, pharmacy_id: str, medicine_id: str) -> Medicine:
        """
        Remove a medicine. Not idempotent.

        Raises:
            NotFoundError: medicine_id absent for this pharmacy.
        """
        self._require_pharmacy(pharmacy_id)
        with self._locks.hold(pharmacy_id):
            medicines = self._load(pharmacy_id)
            index = self._index_of(medicines, medicine_id)
            if index is None:
                raise NotFoundError("Medicine", medicine_id)
            removed = medicines.pop(index)
            self._save(pharmacy_id, medicines)

        logger.info(
            f"Medicine deleted: {medicine_id} '{removed.name}' "
            f"(pharmacy: {pharmacy_id})"
        )
        return removed

    @staticmethod
    def _index_of(medicines: List[Medicine], medicine_id: str) -> Optional[int]:
        for index, medicine in enumerate(medicines):
            if medicine.medicine_id == medicine_id:
                return index
        return None

    # ══════════════════════════════════════════════════════════
    # READS
    # ══════════════════════════════════════════════════════════

    def get_medicine(self, pharmacy_id: str, medicine_id: str) -> Medicine:
        for medicine in self._load(pharmacy_id):
            if medicine.medicine_id == medicine_id:
                return medicine
        raise NotFoundError("Medicine", medicine_id)

    def list_medicines(self, pharmacy_id: str) -> Tuple[Medicine, ...]:
        return tuple(self._load(pharmacy_id))

    def list_low_stock(self, pharmacy_id: str) -> Tuple[Medicine, ...]:
        """Medicines that are LowStock or OutOfStock, in insertion order."""
        return tuple(
            m for m in self._load(pharmacy_id)
            if compute_stock_status(m) is not StockStatus.IN_STOCK
        )

    def list_expiring_soon(
        self,
        pharmacy_id: str,
        as_of: Optional[date] = None,
    ) -> Tuple[Medicine, ...]:
        as_of = as_of or self._clock.today()
        window = self._settings.expiry_warning_days
        return tuple(
            m for m in self._load(pharmacy_id)
            if is_expiring_soon(m, as_of, window)
        )

    def known_pharmacies(self) -> Tuple[str, ...]:
        """Pharmacy ids that have a ledger record (possibly empty)."""
        return tuple(key for key, _ in self._store.scan_by_prefix(MEDICINES_NAMESPACE))

    def all_ledgers(self) -> Dict[str, Tuple[Medicine, ...]]:
        """Every pharmacy's medicines in one store scan."""
        return {
            key: tuple(Medicine.from_dict(item) for item in record.get("items", []))
            for key, record in self._store.scan_by_prefix(MEDICINES_NAMESPACE)
        }

    @property
    def settings(self) -> RestockSettings:
        return self._settings

    @property
    def clock(self) -> Clock:
        return self._clock
