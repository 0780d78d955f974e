from __future__ import annotations

import threading

from fastapi import Request

from greentransit.core.config import settings
from greentransit.features.ledger.service import ProfileLedger
from greentransit.features.storage.factory import build_store

_build_lock = threading.Lock()


def get_ledger(request: Request) -> ProfileLedger:
    """One ledger per app, built on first use. Tests override this dependency."""
    app_state = request.app.state
    ledger = getattr(app_state, "ledger", None)
    if ledger is None:
        with _build_lock:
            ledger = getattr(app_state, "ledger", None)
            if ledger is None:
                ledger = ProfileLedger(build_store(settings), history_limit=settings.HISTORY_LIMIT)
                app_state.ledger = ledger
    return ledger
