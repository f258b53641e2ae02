"""
MedRestock Store — Contract
=============================
Namespaced key-value persistence used by every engine.

RULES:
- Records are plain JSON-compatible dicts
- put() is a full overwrite of one record, all-or-nothing
- scan_by_prefix() matches on the namespace, not on the key
- No schema enforcement: validation belongs to the engines

Namespaces used by the engines:
    medicines                 key = pharmacy_id  → {"items": [...]}
    pharmacy_profiles         key = pharmacy_id  → profile dict
    restock_requests          key = request_id   → request dict
    request_index             key = pharmacy_id  → {"request_ids": [...]}
"""

from __future__ import annotations

from typing import List, Optional, Protocol, Tuple


class Store(Protocol):
    """Key-value store keyed by (namespace, key)."""

    def get(self, namespace: str, key: str) -> Optional[dict]:
        """Return a copy of the record, or None when absent."""
        ...  # pragma: no cover

    def put(self, namespace: str, key: str, record: dict) -> None:
        """Overwrite the record. Raises StorageError on failure."""
        ...  # pragma: no cover

    def scan_by_prefix(self, namespace_prefix: str) -> List[Tuple[str, dict]]:
        """Return (key, record) pairs for every namespace with the prefix."""
        ...  # pragma: no cover
