"""
MedRestock Bootstrap — Invariant Checks
=========================================
Each function verifies one wiring precondition.
If any check fails → SystemBootstrapError is raised.

These checks do NOT run migrations or create tables.
"""

import logging

from core.bootstrap.errors import SystemBootstrapError

logger = logging.getLogger("medrestock.bootstrap")

STORE_TABLE = "medrestock_store_records"


# ══════════════════════════════════════════════════════════════
# CHECK: Django store is usable
# ══════════════════════════════════════════════════════════════

def check_django_store_ready(using: str = "default") -> None:
    """
    Verify Django apps are loaded and the store table exists.
    If not → refuse to wire the Django backend.
    """
    from django.apps import apps

    if not apps.ready:
        raise SystemBootstrapError(
            invariant="DJANGO_APPS_READY",
            detail=(
                "store_backend is 'django' but Django is not set up. "
                "Call django.setup() with config.settings first."
            ),
        )

    from django.db import connections

    table_names = connections[using].introspection.table_names()
    if STORE_TABLE not in table_names:
        raise SystemBootstrapError(
            invariant="STORE_TABLE",
            detail=(
                f"Table '{STORE_TABLE}' does not exist. "
                "Run migrations before using the django store backend."
            ),
        )

    logger.info("✓ Store table exists.")
