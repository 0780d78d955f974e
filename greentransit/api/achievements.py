from fastapi import APIRouter, Depends

from greentransit.api.deps import get_ledger
from greentransit.features.achievements.service import catalog_view
from greentransit.features.ledger.service import ProfileLedger

router = APIRouter()


@router.get("/v1/achievements")
def list_achievements(ledger: ProfileLedger = Depends(get_ledger)):
    """Persisted achievement states merged with catalog descriptions."""
    return {"achievements": catalog_view(ledger.get_profile().achievements)}


@router.get("/v1/achievements/preview")
def preview_achievements(ledger: ProfileLedger = Depends(get_ledger)):
    """Recompute without writing; `newlyUnlocked` is relative to stored state."""
    evaluation = ledger.preview_achievements()
    return {
        "achievements": catalog_view(evaluation.states),
        "newlyUnlocked": list(evaluation.newly_unlocked),
    }
