"""
MedRestock Store — Django ORM Implementation
==============================================
Database-backed Store over the StoreRecord table.

Each put() runs in its own transaction.atomic() block, so a failed write
leaves the previous version of the record in place. Database errors are
translated into StorageError; nothing from django.db leaks to callers.
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional, Tuple

from django.db import DatabaseError, transaction

from core.store.errors import StorageError
from core.store.models import StoreRecord

logger = logging.getLogger("medrestock.store")


class DjangoStore:
    """Store protocol implementation persisted through the Django ORM."""

    def __init__(self, using: str = "default"):
        self._using = using

    def _records(self):
        return StoreRecord.objects.using(self._using)

    def get(self, namespace: str, key: str) -> Optional[dict]:
        try:
            row = (
                self._records()
                .filter(namespace=namespace, key=key)
                .values_list("record", flat=True)
                .first()
            )
        except DatabaseError as exc:
            logger.error(
                f"Store read failed for {namespace}/{key}: {exc}",
                exc_info=True,
            )
            raise StorageError("get", namespace, key, str(exc)) from exc
        return row

    def put(self, namespace: str, key: str, record: dict) -> None:
        if not isinstance(record, dict):
            raise StorageError(
                "put", namespace, key,
                f"record must be dict, got {type(record).__name__}",
            )
        # Reject unserializable documents before opening a transaction.
        try:
            json.dumps(record)
        except (TypeError, ValueError) as exc:
            raise StorageError("put", namespace, key, str(exc)) from exc

        try:
            with transaction.atomic(using=self._using):
                self._records().update_or_create(
                    namespace=namespace,
                    key=key,
                    defaults={"record": record},
                )
        except DatabaseError as exc:
            logger.error(
                f"Store write failed for {namespace}/{key}: {exc}",
                exc_info=True,
            )
            raise StorageError("put", namespace, key, str(exc)) from exc

    def scan_by_prefix(self, namespace_prefix: str) -> List[Tuple[str, dict]]:
        try:
            rows = (
                self._records()
                .filter(namespace__startswith=namespace_prefix)
                .order_by("namespace", "id")
                .values_list("key", "record")
            )
            return [(key, record) for key, record in rows]
        except DatabaseError as exc:
            logger.error(
                f"Store scan failed for prefix '{namespace_prefix}': {exc}",
                exc_info=True,
            )
            raise StorageError("scan", namespace_prefix, None, str(exc)) from exc
