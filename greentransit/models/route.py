"""
Campus map domain model.

Locations, danger zones and predefined routes are static reference data;
RoutePreference is an ephemeral scoring input and is never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

LatLng = Tuple[float, float]

LocationType = Literal["building", "facility", "entrance", "transport"]
RouteType = Literal["walking", "cycling", "bus"]
Weather = Literal["sunny", "cloudy", "rainy"]
TimeOfDay = Literal["morning", "afternoon", "evening", "night"]


@dataclass(frozen=True)
class CampusLocation:
    id: str
    name: str
    position: LatLng
    type: LocationType
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "position": list(self.position),
            "type": self.type,
            "description": self.description,
        }


@dataclass(frozen=True)
class DangerZone:
    id: str
    name: str
    description: str
    polygon: Tuple[LatLng, ...]
    risk_level: int  # 1-10

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "polygon": [list(p) for p in self.polygon],
            "riskLevel": self.risk_level,
        }


@dataclass(frozen=True)
class Route:
    id: str
    name: str
    start: str  # location id
    end: str  # location id
    path: Tuple[LatLng, ...]
    distance: float  # km
    estimated_time: float  # minutes
    type: str
    safety_index: int  # 1-10
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "start": self.start,
            "end": self.end,
            "path": [list(p) for p in self.path],
            "distance": self.distance,
            "estimatedTime": self.estimated_time,
            "type": self.type,
            "safetyIndex": self.safety_index,
            "description": self.description,
        }


@dataclass(frozen=True)
class RoutePreference:
    safety: float = 5
    eco: float = 5
    time: float = 5
    weather: Optional[Weather] = None
    time_of_day: Optional[TimeOfDay] = None


@dataclass(frozen=True)
class ScoreBreakdown:
    safety: float = 0.0
    eco: float = 0.0
    time: float = 0.0
    weather: float = 0.0
    time_of_day: float = 0.0

    def total(self) -> float:
        return self.safety + self.eco + self.time + self.weather + self.time_of_day

    def to_dict(self) -> dict:
        return {
            "safety": self.safety,
            "eco": self.eco,
            "time": self.time,
            "weather": self.weather,
            "timeOfDay": self.time_of_day,
        }


@dataclass(frozen=True)
class RouteRecommendation:
    route: Route
    score: float
    breakdown: ScoreBreakdown
    reversed: bool = False
    candidates_considered: int = 1

    def to_dict(self) -> dict:
        return {
            "route": self.route.to_dict(),
            "score": round(self.score, 3),
            "breakdown": self.breakdown.to_dict(),
            "reversed": self.reversed,
            "candidatesConsidered": self.candidates_considered,
        }
