"""
MedRestock Store — Keyed Locks
================================
One exclusive lock per logical owner (pharmacy id, request id).

A lock exists only while some thread holds or waits for it. Each entry
counts its users under the guard lock and is dropped when the count
returns to zero, so the registry stays as small as the current
contention. Acquisition of the per-key lock happens outside the guard
lock, so different keys never contend with each other.
"""

from __future__ import annotations

from contextlib import contextmanager
from threading import Lock
from typing import Dict, Iterator


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = Lock()
        self.users = 0


class KeyedLocks:
    """
    Registry of per-key mutexes.

    Usage:
        locks = KeyedLocks("medicines")
        with locks.hold(pharmacy_id):
            ... read-modify-write ...
    """

    def __init__(self, name: str = ""):
        self._name = name
        self._entries: Dict[str, _Entry] = {}
        self._guard = Lock()

    def _acquire_entry(self, key: str) -> _Entry:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry()
                self._entries[key] = entry
            entry.users += 1
            return entry

    def _release_entry(self, key: str, entry: _Entry) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._entries[key]

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        entry = self._acquire_entry(key)
        try:
            with entry.lock:
                yield
        finally:
            self._release_entry(key, entry)

    @property
    def name(self) -> str:
        return self._name

    def __len__(self) -> int:
        """Keys currently held or awaited."""
        with self._guard:
            return len(self._entries)
