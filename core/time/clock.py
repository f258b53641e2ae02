"""
MedRestock Core Time — Injectable Clock
=========================================
Engines never call datetime.now() directly. Timestamps for created_at /
updated_at and the "as of" date for expiry warnings come from a Clock
handed to each service at construction.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Protocol


# ══════════════════════════════════════════════════════════════
# CLOCK PROTOCOL
# ══════════════════════════════════════════════════════════════

class Clock(Protocol):
    """Injectable time source."""

    def now_utc(self) -> datetime:
        """Return current UTC time (timezone-aware)."""
        ...  # pragma: no cover

    def today(self) -> date:
        """Return the current UTC calendar date."""
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IMPLEMENTATIONS
# ══════════════════════════════════════════════════════════════

class SystemClock:
    """Production clock — real system time."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)

    def today(self) -> date:
        return self.now_utc().date()


class FixedClock:
    """
    Test clock — returns a fixed timestamp until advanced.

    Usage:
        clock = FixedClock(datetime(2026, 3, 1, tzinfo=timezone.utc))
        ledger = InventoryLedger(store, clock=clock)
        clock.advance(60)
    """

    def __init__(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._fixed_dt = fixed_dt

    def now_utc(self) -> datetime:
        return self._fixed_dt

    def today(self) -> date:
        return self._fixed_dt.date()

    def advance(self, seconds: float = 0, *, days: int = 0) -> None:
        self._fixed_dt = self._fixed_dt + timedelta(seconds=seconds, days=days)


# ══════════════════════════════════════════════════════════════
# DEFAULT CLOCK
# ══════════════════════════════════════════════════════════════

_default_clock: Clock = SystemClock()


def set_default_clock(clock: Clock) -> None:
    """Override the default clock (testing only)."""
    global _default_clock
    _default_clock = clock


def get_default_clock() -> Clock:
    return _default_clock


def now_utc() -> datetime:
    """Convenience: current UTC time from the default clock."""
    return _default_clock.now_utc()
