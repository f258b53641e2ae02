"""
MedRestock Core Time — Public API
===================================
Injectable clock. No datetime.now() in engine logic.
"""

from core.time.clock import (
    Clock,
    FixedClock,
    SystemClock,
    get_default_clock,
    now_utc,
    set_default_clock,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "get_default_clock",
    "set_default_clock",
    "now_utc",
]
