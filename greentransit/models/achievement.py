from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from greentransit.models.profile import AchievementState, UserProfile
from greentransit.models.trip import TravelRecord

AchievementMetric = Callable[[UserProfile, Sequence[TravelRecord]], float]


@dataclass(frozen=True)
class AchievementDefinition:
    """Catalog entry: progress is metric / target, clamped to 0..100."""

    id: int
    title: str
    description: str
    icon: str
    target: float
    metric: AchievementMetric


@dataclass(frozen=True)
class AchievementEvaluation:
    states: List[AchievementState]
    newly_unlocked: Tuple[int, ...] = ()

    @property
    def celebrate(self) -> bool:
        return bool(self.newly_unlocked)

    def to_event(self) -> dict:
        """Single edge-triggered notification per recompute pass."""
        return {
            "type": "achievement.unlocked",
            "payload": {
                "achievementIds": list(self.newly_unlocked),
                "titles": [s.title for s in self.states if s.id in self.newly_unlocked],
            },
        }
