from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Tuple

from greentransit.models.profile import UserProfile
from greentransit.models.streak import StreakUpdate
from greentransit.models.task import Task, TaskRewards
from greentransit.models.trip import TravelRecord

ChangeKind = Literal["trip.recorded", "tasks.reset", "profile.initialized"]


@dataclass(frozen=True)
class LedgerSnapshot:
    """The unit the ledger reads and writes: profile, history (newest first), tasks."""

    profile: UserProfile
    records: List[TravelRecord]
    tasks: List[Task]


@dataclass(frozen=True)
class TripResult:
    points_earned: int
    carbon_saved: float
    record: TravelRecord
    profile: UserProfile
    streak: StreakUpdate
    rewards: TaskRewards
    newly_unlocked: Tuple[int, ...] = ()
    emitted: List[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "pointsEarned": self.points_earned,
            "carbonSaved": self.carbon_saved,
            "record": self.record.to_dict(),
            "profile": self.profile.to_dict(),
            "streakDays": self.streak.streak_days,
            "rewards": self.rewards.to_dict(),
            "newlyUnlocked": list(self.newly_unlocked),
            "celebrate": bool(self.newly_unlocked),
            "emitted": self.emitted,
        }


@dataclass(frozen=True)
class LedgerChange:
    """Notification delivered to subscribers after a committed write."""

    kind: ChangeKind
    snapshot: LedgerSnapshot
    emitted: List[dict] = field(default_factory=list)
