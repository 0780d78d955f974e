from fastapi import APIRouter, Depends

from greentransit.api.deps import get_ledger
from greentransit.features.ledger.service import ProfileLedger

router = APIRouter()


@router.get("/v1/profile")
def get_profile(ledger: ProfileLedger = Depends(get_ledger)):
    return ledger.get_profile().to_dict()
