"""
MedRestock Store — Public API
===============================
Pure-Python parts of the store layer. The Django-backed implementation
lives in core.store.django_store and is imported only once Django apps
are ready.
"""

from core.store.base import Store
from core.store.errors import StorageError
from core.store.locks import KeyedLocks
from core.store.memory import InMemoryStore

__all__ = [
    "Store",
    "StorageError",
    "KeyedLocks",
    "InMemoryStore",
]
