"""
MedRestock Core Config — Runtime Settings
===========================================
Domain settings resolved once at wiring time.

Resolution order for each value:
    1. Django settings (when configured)
    2. Environment variable
    3. Built-in default

Engines receive a RestockSettings instance; they never read Django
settings or the environment themselves.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from django.conf import settings as django_settings


STORE_BACKENDS = ("memory", "django")

_SETTING_NAMES = {
    "expiry_warning_days": "MEDRESTOCK_EXPIRY_WARNING_DAYS",
    "store_backend": "MEDRESTOCK_STORE_BACKEND",
    "unknown_pharmacy_name": "MEDRESTOCK_UNKNOWN_PHARMACY_NAME",
    "missing_address": "MEDRESTOCK_MISSING_ADDRESS",
    "missing_phone": "MEDRESTOCK_MISSING_PHONE",
}


@dataclass(frozen=True)
class RestockSettings:
    """
    Settings consumed by the ledger, builder and reporting view.

    Fields:
        expiry_warning_days:   Inclusive look-ahead window for expiry warnings.
        store_backend:         "memory" or "django".
        unknown_pharmacy_name: Snapshot placeholder when no profile name exists.
        missing_address:       Snapshot placeholder when no address exists.
        missing_phone:         Snapshot placeholder when no phone exists.
    """

    expiry_warning_days: int = 30
    store_backend: str = "memory"
    unknown_pharmacy_name: str = "Unknown Pharmacy"
    missing_address: str = "Address not provided"
    missing_phone: str = "Phone not provided"

    def __post_init__(self) -> None:
        if not isinstance(self.expiry_warning_days, int) or self.expiry_warning_days < 0:
            raise ValueError(
                f"expiry_warning_days must be a non-negative integer, "
                f"got {self.expiry_warning_days!r}."
            )
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"store_backend must be one of {STORE_BACKENDS}, "
                f"got {self.store_backend!r}."
            )
        for name in ("unknown_pharmacy_name", "missing_address", "missing_phone"):
            if not getattr(self, name):
                raise ValueError(f"{name} must be a non-empty string.")


def _django_value(setting_name: str) -> Any:
    if not django_settings.configured:
        return None
    return getattr(django_settings, setting_name, None)


def load_restock_settings(
    environ: Optional[Mapping[str, str]] = None,
) -> RestockSettings:
    """Build RestockSettings from Django settings, then the environment."""
    environ = os.environ if environ is None else environ
    defaults = RestockSettings()
    values: dict[str, Any] = {}

    for field_name, setting_name in _SETTING_NAMES.items():
        value = _django_value(setting_name)
        if value is None:
            value = environ.get(setting_name)
        if value is None:
            continue
        if field_name == "expiry_warning_days":
            try:
                value = int(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(
                    f"{setting_name} must be an integer, got {value!r}."
                ) from exc
        values[field_name] = value

    if not values:
        return defaults
    return RestockSettings(**values)
