from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from greentransit.core.errors import NotFoundError
from greentransit.features.routes.catalog import CAMPUS_CENTER, get_route, list_danger_zones, list_locations, list_routes
from greentransit.features.routes.service import recommend_route
from greentransit.models.route import RoutePreference

router = APIRouter(prefix="/v1/routes")


class PreferenceBody(BaseModel):
    safety: float = Field(5, ge=1, le=10)
    eco: float = Field(5, ge=1, le=10)
    time: float = Field(5, ge=1, le=10)
    weather: Optional[Literal["sunny", "cloudy", "rainy"]] = None
    time_of_day: Optional[Literal["morning", "afternoon", "evening", "night"]] = Field(None, alias="timeOfDay")

    model_config = {"populate_by_name": True}


class RecommendRequest(BaseModel):
    start: str = Field(..., min_length=1)
    end: str = Field(..., min_length=1)
    preferences: PreferenceBody = Field(default_factory=PreferenceBody)


@router.get("/locations")
def get_locations():
    return {
        "center": list(CAMPUS_CENTER),
        "locations": [loc.to_dict() for loc in list_locations()],
    }


@router.get("/danger-zones")
def get_danger_zones():
    return {"dangerZones": [zone.to_dict() for zone in list_danger_zones()]}


@router.get("")
def get_routes():
    return {"routes": [route.to_dict() for route in list_routes()]}


@router.post("/recommend")
def recommend(body: RecommendRequest):
    """Best-scoring route between two locations, or found=false."""
    prefs = RoutePreference(
        safety=body.preferences.safety,
        eco=body.preferences.eco,
        time=body.preferences.time,
        weather=body.preferences.weather,
        time_of_day=body.preferences.time_of_day,
    )
    recommendation = recommend_route(body.start, body.end, prefs)
    if recommendation is None:
        return {"found": False, "route": None}
    return {"found": True, **recommendation.to_dict()}


@router.get("/{route_id}")
def get_route_by_id(route_id: str):
    route = get_route(route_id)
    if route is None:
        raise NotFoundError(f"Unknown route: {route_id}")
    return route.to_dict()
