from __future__ import annotations

import logging
from typing import Optional

from greentransit.core.config import Settings, settings
from greentransit.core.database import get_database_url, init_engine
from greentransit.features.storage.store import InMemoryStore, KeyValueStore
from greentransit.features.storage.store_sql import SqlStore

logger = logging.getLogger("greentransit")


def build_store(settings_obj: Optional[Settings] = None) -> KeyValueStore:
    """Pick the snapshot store from STORE_BACKEND (memory | sql)."""
    cfg = settings_obj or settings
    backend = (cfg.STORE_BACKEND or "memory").lower()

    if backend == "sql":
        url = cfg.TEST_DATABASE_URL or cfg.DATABASE_URL or get_database_url()
        if not url:
            raise ValueError("STORE_BACKEND=sql requires DATABASE_URL")
        logger.info("storage.backend", extra={"backend": "sql"})
        return SqlStore(init_engine(url))

    if backend != "memory":
        logger.warning(f"Unknown STORE_BACKEND {backend!r}; using in-memory store")
    logger.info("storage.backend", extra={"backend": "memory"})
    return InMemoryStore()
