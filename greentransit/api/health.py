"""
Health endpoints: liveness and store readiness.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from greentransit.api.deps import get_ledger
from greentransit.features.ledger.service import ProfileLedger

logger = logging.getLogger("greentransit")

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz():
    """Lightweight liveness check (no deps)."""
    return {"status": "ok"}


@router.get("/readyz")
def readyz(ledger: ProfileLedger = Depends(get_ledger)):
    """Readiness check: the snapshot store answers."""
    if not ledger.store_ready():
        logger.warning("[readyz] store unreachable")
        return JSONResponse(status_code=503, content={"status": "error", "detail": "store unreachable"})
    return {"status": "ok"}
