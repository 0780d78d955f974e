from fastapi import APIRouter, Depends

from greentransit.api.deps import get_ledger
from greentransit.features.ledger.service import ProfileLedger
from greentransit.features.stats.service import summarize

router = APIRouter()


@router.get("/v1/stats")
def get_stats(ledger: ProfileLedger = Depends(get_ledger)):
    snapshot = ledger.get_snapshot()
    return summarize(snapshot.profile, snapshot.records)
