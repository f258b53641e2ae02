"""
MedRestock Bootstrap — System Composition
===========================================
Builds the ledger, profile service, lifecycle manager, request builder
and reporting view over one shared store, clock and settings.

Usage:
    system = build_restock_system()
    system.ledger.add_medicine("ph-1", {...})
    draft = system.builder.draft_from_low_stock("ph-1")
    request = system.builder.submit("ph-1", draft)
    system.lifecycle.advance(request.request_id, "processing")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from core.bootstrap.invariants import check_django_store_ready
from core.config import RestockSettings, load_restock_settings
from core.events import SubscriberRegistry
from core.store import InMemoryStore, Store
from core.time import Clock, get_default_clock
from engines.inventory.services import InventoryLedger
from engines.pharmacy.services import PharmacyProfileService
from engines.restock.builder import RestockRequestBuilder
from engines.restock.lifecycle import RequestLifecycleManager
from projections.reporting import RestockReportingView

logger = logging.getLogger("medrestock.bootstrap")


@dataclass(frozen=True)
class RestockSystem:
    store: Store
    settings: RestockSettings
    clock: Clock
    subscribers: SubscriberRegistry
    ledger: InventoryLedger
    profiles: PharmacyProfileService
    lifecycle: RequestLifecycleManager
    builder: RestockRequestBuilder
    reporting: RestockReportingView


def _store_for(settings: RestockSettings) -> Store:
    if settings.store_backend == "django":
        check_django_store_ready()
        from core.store.django_store import DjangoStore
        return DjangoStore()
    return InMemoryStore()


def build_restock_system(
    store: Optional[Store] = None,
    *,
    settings: Optional[RestockSettings] = None,
    clock: Optional[Clock] = None,
    subscribers: Optional[SubscriberRegistry] = None,
) -> RestockSystem:
    """
    Compose every service. An explicit store wins over settings.store_backend.

    Raises:
        SystemBootstrapError: django backend requested but not usable.
    """
    settings = settings or load_restock_settings()
    clock = clock or get_default_clock()
    subscribers = subscribers or SubscriberRegistry()
    if store is None:
        store = _store_for(settings)

    ledger = InventoryLedger(store, clock=clock, settings=settings)
    profiles = PharmacyProfileService(store, clock=clock, settings=settings)
    lifecycle = RequestLifecycleManager(
        store, clock=clock, subscribers=subscribers,
    )
    builder = RestockRequestBuilder(ledger, profiles, lifecycle, clock=clock)
    reporting = RestockReportingView(ledger, lifecycle, clock=clock)

    logger.info(
        f"Restock system wired (store: {type(store).__name__}, "
        f"expiry window: {settings.expiry_warning_days} days)"
    )
    return RestockSystem(
        store=store,
        settings=settings,
        clock=clock,
        subscribers=subscribers,
        ledger=ledger,
        profiles=profiles,
        lifecycle=lifecycle,
        builder=builder,
        reporting=reporting,
    )
