from fastapi import APIRouter, Depends

from greentransit.api.deps import get_ledger
from greentransit.features.ledger.service import ProfileLedger

router = APIRouter()


@router.get("/v1/tasks")
def list_tasks(ledger: ProfileLedger = Depends(get_ledger)):
    return {"tasks": [t.to_dict() for t in ledger.get_tasks()]}


@router.post("/v1/tasks/reset")
def reset_tasks(ledger: ProfileLedger = Depends(get_ledger)):
    tasks = ledger.reset_tasks()
    return {"tasks": [t.to_dict() for t in tasks]}
