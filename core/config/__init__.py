"""
MedRestock Core Config — Public API
=====================================
Runtime settings for the restock engines.
"""

from core.config.settings import (
    STORE_BACKENDS,
    RestockSettings,
    load_restock_settings,
)

__all__ = [
    "STORE_BACKENDS",
    "RestockSettings",
    "load_restock_settings",
]
