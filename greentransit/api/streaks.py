from fastapi import APIRouter, Depends

from greentransit.api.deps import get_ledger
from greentransit.features.ledger.service import ProfileLedger

router = APIRouter()


@router.get("/v1/streaks/verify")
def verify_streak(ledger: ProfileLedger = Depends(get_ledger)):
    """Compare the stored streak with a scan of the trip history."""
    return ledger.verify_streak().to_dict()
