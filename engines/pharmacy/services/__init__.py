"""
MedRestock Pharmacy Engine — Profile Service
==============================================
Save and read pharmacy profiles; build request snapshots.

Storage layout:
    namespace "pharmacy_profiles", key = pharmacy_id
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from core.config import RestockSettings
from core.errors import ValidationError
from core.store import Store
from core.time import Clock, SystemClock
from engines.pharmacy.models import PharmacyProfile, PharmacySnapshot

logger = logging.getLogger("medrestock.pharmacy")

PROFILES_NAMESPACE = "pharmacy_profiles"

PROFILE_FIELDS = ("pharmacy_name", "address", "city", "state", "phone")


class PharmacyProfileService:
    def __init__(
        self,
        store: Store,
        *,
        clock: Optional[Clock] = None,
        settings: Optional[RestockSettings] = None,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._settings = settings or RestockSettings()

    def save_profile(
        self,
        pharmacy_id: str,
        fields: Mapping[str, Any],
    ) -> PharmacyProfile:
        """
        Merge the supplied fields into the stored profile (creating it
        when absent). Blank values clear a field.
        """
        if not pharmacy_id or not isinstance(pharmacy_id, str):
            raise ValidationError({"pharmacy_id": "must be a non-empty string"})

        errors: Dict[str, str] = {}
        cleaned: Dict[str, str] = {}
        for key, value in fields.items():
            if key not in PROFILE_FIELDS:
                errors[key] = "unknown field"
            elif value is not None and not isinstance(value, str):
                errors[key] = "must be a string"
            else:
                cleaned[key] = (value or "").strip()
        if errors:
            raise ValidationError(errors)

        current = self.get_profile(pharmacy_id) or PharmacyProfile(pharmacy_id)
        data = current.to_dict()
        data.update(cleaned)
        data["updated_at"] = self._clock.now_utc().isoformat()
        profile = PharmacyProfile.from_dict(data)

        self._store.put(PROFILES_NAMESPACE, pharmacy_id, profile.to_dict())
        logger.info(
            f"Pharmacy profile saved: {pharmacy_id} (fields: {sorted(cleaned)})"
        )
        return profile

    def get_profile(self, pharmacy_id: str) -> Optional[PharmacyProfile]:
        record = self._store.get(PROFILES_NAMESPACE, pharmacy_id)
        if record is None:
            return None
        return PharmacyProfile.from_dict(record)

    def snapshot(self, pharmacy_id: str) -> PharmacySnapshot:
        """Current display details with placeholders for anything missing."""
        profile = self.get_profile(pharmacy_id)
        settings = self._settings
        if profile is None:
            return PharmacySnapshot(
                pharmacy_name=settings.unknown_pharmacy_name,
                pharmacy_address=settings.missing_address,
                pharmacy_phone=settings.missing_phone,
            )
        return PharmacySnapshot(
            pharmacy_name=profile.pharmacy_name or settings.unknown_pharmacy_name,
            pharmacy_address=profile.full_address or settings.missing_address,
            pharmacy_phone=profile.phone or settings.missing_phone,
        )
