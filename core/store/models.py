"""
MedRestock Store — Relational Record Model
============================================
Backing table for DjangoStore. One row per (namespace, key).

This file contains NO business logic. Records are opaque JSON documents;
validation happens in the engines before anything reaches this table.
"""

from __future__ import annotations

from django.db import models


class StoreRecord(models.Model):
    namespace = models.CharField(
        max_length=128,
        help_text="Logical collection, e.g. 'medicines' or 'restock_requests'.",
    )
    key = models.CharField(
        max_length=255,
        help_text="Owner identity or record id inside the namespace.",
    )
    record = models.JSONField(
        help_text="Full record document. Overwritten as a whole on every put.",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "medrestock_store_records"
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["namespace", "key"],
                name="uq_store_namespace_key",
            ),
        ]
        indexes = [
            models.Index(fields=["namespace"], name="idx_store_namespace"),
        ]

    def __str__(self) -> str:
        return f"{self.namespace}/{self.key}"
