from fastapi import FastAPI
from pathlib import Path
from typing import Optional
import logging

from kitchen.api.routes import items, events
from kitchen.events.Event_Bus import EventBus
from kitchen.events.activity_feed import ActivityFeed
from kitchen.infra.Ledger_Store import LedgerStore, hydrate_ledger
from kitchen.utilities.backup import BackupManager

# Logging
logger = logging.getLogger("kitchen_app")


def create_app(store: Optional[LedgerStore] = None, data_dir: Optional[Path] = None) -> FastAPI:
    """Build the FastAPI app around one Ledger hydrated from the store.

    The ledger, event bus and activity feed are owned by the returned app
    (``app.state``); nothing is shared between apps.
    """
    if store is None:
        store = LedgerStore(data_dir) if data_dir is not None else LedgerStore()

    bus = EventBus()
    feed = ActivityFeed().attach(bus)
    ledger, warning = hydrate_ledger(store, backups=BackupManager(store.data_dir), event_bus=bus)
    logger.info("Ledger loaded from %s with %d items", store.path, len(ledger))

    app = FastAPI(title="Kitchen Costing API")
    app.state.store = store
    app.state.ledger = ledger
    app.state.event_bus = bus
    app.state.activity = feed
    app.state.warnings = [warning] if warning else []

    app.include_router(items.router)
    app.include_router(events.router)
    return app


__all__ = ['create_app']
