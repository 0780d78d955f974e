from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional

from greentransit.models.trip import format_timestamp, parse_timestamp

PROFILE_ID = "profile"


@dataclass(frozen=True)
class AchievementState:
    id: int
    title: str
    progress: float = 0.0  # 0..100
    unlocked: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "progress": self.progress,
            "unlocked": self.unlocked,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AchievementState":
        if not isinstance(data, dict):
            raise ValueError("achievement must be an object")
        progress = float(data.get("progress", 0.0))
        if progress != progress:  # NaN
            progress = 0.0
        return cls(
            id=int(data["id"]),
            title=str(data.get("title", "")),
            progress=max(0.0, min(100.0, progress)),
            unlocked=bool(data.get("unlocked", False)),
        )


@dataclass(frozen=True)
class UserProfile:
    """
    Aggregate commuter profile. Only the profile ledger produces new
    instances; totals are always `previous + delta`.

    `reward_points` and `badges` hold task rewards so that `total_points`
    stays equal to the sum of recorded trip points.
    """

    id: str = PROFILE_ID
    total_points: int = 0
    total_carbon_saved: float = 0.0
    streak_days: int = 0
    travel_count: int = 0
    last_travel_date: Optional[datetime] = None
    achievements: List[AchievementState] = field(default_factory=list)
    reward_points: int = 0
    badges: List[str] = field(default_factory=list)

    def evolve(self, **changes) -> "UserProfile":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "totalPoints": self.total_points,
            "totalCarbonSaved": self.total_carbon_saved,
            "streakDays": self.streak_days,
            "travelCount": self.travel_count,
            "lastTravelDate": format_timestamp(self.last_travel_date),
            "achievements": [a.to_dict() for a in self.achievements],
            "rewardPoints": self.reward_points,
            "badges": list(self.badges),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        """Strict decode; raises ValueError/KeyError/TypeError on malformed input."""
        if not isinstance(data, dict):
            raise ValueError("profile must be an object")
        achievements = data.get("achievements", [])
        if not isinstance(achievements, list):
            raise ValueError("achievements must be a list")
        profile = cls(
            id=str(data.get("id", PROFILE_ID)),
            total_points=int(data["totalPoints"]),
            total_carbon_saved=float(data["totalCarbonSaved"]),
            streak_days=int(data["streakDays"]),
            travel_count=int(data["travelCount"]),
            last_travel_date=parse_timestamp(data.get("lastTravelDate")),
            achievements=[AchievementState.from_dict(a) for a in achievements],
            reward_points=int(data.get("rewardPoints", 0)),
            badges=[str(b) for b in data.get("badges", [])],
        )
        profile.validate()
        return profile

    def validate(self) -> None:
        if self.total_points < 0 or self.reward_points < 0:
            raise ValueError("points must be non-negative")
        if not (self.total_carbon_saved >= 0):  # also rejects NaN
            raise ValueError("total_carbon_saved must be non-negative")
        if self.streak_days < 0 or self.travel_count < 0:
            raise ValueError("counters must be non-negative")
