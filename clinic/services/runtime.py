"""
Process-wide entity store.

The store is built lazily on first use from the ``CLINIC_*`` settings and
hydrated from the configured storage.  Tests swap it with :func:`set_store`.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from django.conf import settings

from clinic.services.persistence import BaseStorage, get_storage
from clinic.services.store import EntityStore

logger = logging.getLogger(__name__)

_store: Optional[EntityStore] = None
_lock = threading.Lock()


def build_store(storage: Optional[BaseStorage] = None) -> EntityStore:
    store = EntityStore(
        storage or get_storage(),
        referential_policy=getattr(settings, 'CLINIC_REFERENTIAL_POLICY', 'cascade'),
    )
    if getattr(settings, 'CLINIC_BROADCAST_CHANGES', False):
        from clinic.realtime.consumers import broadcast_change
        store.subscribe(broadcast_change)
    return store


def get_store() -> EntityStore:
    global _store
    if _store is None:
        with _lock:
            if _store is None:
                _store = build_store().hydrate()
    return _store


def set_store(store: Optional[EntityStore]) -> Optional[EntityStore]:
    """Install ``store`` (``None`` drops it); returns the previous one."""
    global _store
    with _lock:
        previous, _store = _store, store
    return previous
