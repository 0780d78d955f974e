from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from greentransit.api.deps import get_ledger
from greentransit.core.errors import ValidationError
from greentransit.features.ledger.service import ProfileLedger
from greentransit.features.stats.service import filter_records
from greentransit.models.trip import to_utc

router = APIRouter()


class TripSubmission(BaseModel):
    mode: str = Field(..., min_length=1)
    distance: float
    start_location: str = Field(..., alias="startLocation")
    end_location: str = Field(..., alias="endLocation")
    route: Optional[str] = None
    occurred_at: Optional[datetime] = Field(None, alias="occurredAt")

    model_config = {"populate_by_name": True}


@router.post("/v1/trips")
def record_trip(body: TripSubmission, ledger: ProfileLedger = Depends(get_ledger)):
    """Record one trip; returns the earned deltas and the updated profile."""
    result = ledger.record_trip(
        body.mode,
        body.distance,
        body.start_location,
        body.end_location,
        route=body.route,
        occurred_at=body.occurred_at,
    )
    return result.to_dict()


@router.get("/v1/trips")
def list_trips(
    limit: Optional[int] = Query(None, ge=1),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    ledger: ProfileLedger = Depends(get_ledger),
):
    if start and end and to_utc(start) > to_utc(end):
        raise ValidationError("start must not be after end")
    records = filter_records(ledger.get_records(), start, end)
    if limit is not None:
        records = records[:limit]
    return {"records": [r.to_dict() for r in records], "count": len(records)}
