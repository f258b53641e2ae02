"""
MedRestock — Reporting View Tests
===================================
Cross-pharmacy aggregates for the warehouse and pharmacy dashboards.
"""

from datetime import date, datetime, timezone

import pytest

from core.bootstrap import build_restock_system
from core.config import RestockSettings
from core.store import InMemoryStore
from core.time import FixedClock

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _add(system, pharmacy_id, name, quantity, threshold, expiry="2027-01-31"):
    return system.ledger.add_medicine(pharmacy_id, {
        "name": name,
        "quantity": quantity,
        "threshold": threshold,
        "expiry_date": expiry,
    })


@pytest.fixture
def system():
    system = build_restock_system(
        InMemoryStore(),
        settings=RestockSettings(),
        clock=FixedClock(NOW),
    )
    _add(system, "ph-1", "Amoxicillin", 2, 10)
    _add(system, "ph-1", "Ibuprofen", 80, 10, expiry="2026-03-20")
    _add(system, "ph-2", "Insulin", 0, 5, expiry="2026-02-01")
    _add(system, "ph-2", "Cetirizine", 30, 10)
    return system


# ══════════════════════════════════════════════════════════════
# STOCK
# ══════════════════════════════════════════════════════════════

class TestStockAggregates:
    def test_system_wide_low_stock(self, system):
        rows = system.reporting.system_wide_low_stock()
        assert [(ph, m.name) for ph, m in rows] == [
            ("ph-1", "Amoxicillin"),
            ("ph-2", "Insulin"),
        ]

    def test_system_wide_expiring_soon(self, system):
        rows = system.reporting.system_wide_expiring_soon()
        assert [(ph, m.name) for ph, m in rows] == [
            ("ph-1", "Ibuprofen"),
            ("ph-2", "Insulin"),
        ]

    def test_expiring_soon_as_of(self, system):
        rows = system.reporting.system_wide_expiring_soon(as_of=date(2026, 1, 10))
        assert [m.name for _, m in rows] == ["Insulin"]

    def test_low_stock_reflects_ledger_changes(self, system):
        amox = system.ledger.list_low_stock("ph-1")[0]
        system.ledger.update_medicine("ph-1", amox.medicine_id, {"quantity": 50})
        assert [m.name for _, m in system.reporting.system_wide_low_stock()] == ["Insulin"]


# ══════════════════════════════════════════════════════════════
# REQUESTS
# ══════════════════════════════════════════════════════════════

class TestRequestCounts:
    def test_empty_counts_are_zero_filled(self, system):
        assert system.reporting.counts_by_status() == {
            "pending": 0,
            "processing": 0,
            "prepared": 0,
            "shipped": 0,
            "delivered": 0,
        }
        assert system.reporting.counts_by_priority() == {
            "low": 0, "medium": 0, "high": 0,
        }

    def test_counts_follow_lifecycle(self, system):
        builder, lifecycle = system.builder, system.lifecycle
        r1 = builder.submit("ph-1", builder.draft_from_low_stock("ph-1"), priority="high")
        builder.submit("ph-2", builder.draft_from_low_stock("ph-2"))
        lifecycle.advance(r1.request_id, "processing")

        assert system.reporting.counts_by_status() == {
            "pending": 1,
            "processing": 1,
            "prepared": 0,
            "shipped": 0,
            "delivered": 0,
        }
        assert system.reporting.counts_by_priority() == {
            "low": 0, "medium": 1, "high": 1,
        }


# ══════════════════════════════════════════════════════════════
# DASHBOARDS
# ══════════════════════════════════════════════════════════════

class TestSummaries:
    def test_pharmacy_summary(self, system):
        system.builder.submit("ph-1", system.builder.draft_from_low_stock("ph-1"))
        summary = system.reporting.pharmacy_summary("ph-1")
        assert summary["pharmacy_id"] == "ph-1"
        assert summary["total_medicines"] == 2
        assert summary["low_stock"] == 1
        assert summary["expiring_soon"] == 1
        assert summary["total_quantity"] == 82
        assert summary["requests_by_status"]["pending"] == 1

    def test_warehouse_summary(self, system):
        builder = system.builder
        r1 = builder.submit("ph-1", builder.draft_from_low_stock("ph-1"))
        builder.submit("ph-2", builder.draft_from_low_stock("ph-2"))
        for status in ("processing", "prepared", "shipped", "delivered"):
            system.lifecycle.advance(r1.request_id, status)

        assert system.reporting.warehouse_summary() == {
            "total_requests": 2,
            "pending": 1,
            "processing": 0,
            "delivered": 1,
            "low_stock_items": 2,
        }
