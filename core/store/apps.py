"""
MedRestock Core — Store App Configuration
===========================================
Registers the StoreRecord table used by DjangoStore.

This app:
- Owns the medrestock_store_records table
- Persists opaque JSON records keyed by (namespace, key)

This app does NOT:
- Validate records
- Interpret namespaces
- Enforce stock or workflow rules
"""

from django.apps import AppConfig


class StoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.store"
    label = "medrestock_store"
    verbose_name = "MedRestock Store"
