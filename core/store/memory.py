"""
MedRestock Store — In-Memory Implementation
=============================================
Process-local store for tests and single-process deployments.

Records are serialized to JSON on write and decoded on read, so callers
never share mutable state with the store and an unserializable record
fails before anything is written.
"""

from __future__ import annotations

import json
import logging
from threading import Lock
from typing import Dict, List, Optional, Tuple

from core.store.errors import StorageError

logger = logging.getLogger("medrestock.store")


class InMemoryStore:
    """Dict-of-dicts store: namespace → key → encoded record."""

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, str]] = {}
        self._lock = Lock()

    def get(self, namespace: str, key: str) -> Optional[dict]:
        with self._lock:
            encoded = self._data.get(namespace, {}).get(key)
        if encoded is None:
            return None
        return json.loads(encoded)

    def put(self, namespace: str, key: str, record: dict) -> None:
        if not isinstance(record, dict):
            raise StorageError(
                "put", namespace, key,
                f"record must be dict, got {type(record).__name__}",
            )
        try:
            encoded = json.dumps(record, sort_keys=True)
        except (TypeError, ValueError) as exc:
            logger.error(
                f"Serialization failed for {namespace}/{key}: {exc}",
                exc_info=True,
            )
            raise StorageError("put", namespace, key, str(exc)) from exc

        with self._lock:
            self._data.setdefault(namespace, {})[key] = encoded

    def scan_by_prefix(self, namespace_prefix: str) -> List[Tuple[str, dict]]:
        with self._lock:
            snapshot = [
                (key, encoded)
                for namespace, records in self._data.items()
                if namespace.startswith(namespace_prefix)
                for key, encoded in records.items()
            ]
        return [(key, json.loads(encoded)) for key, encoded in snapshot]

    def namespaces(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._data)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
