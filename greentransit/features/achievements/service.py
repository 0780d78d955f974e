"""
Achievement evaluator.

Stateless recompute of the fixed achievement catalog from a profile and a
history snapshot. Always returns the full catalog in catalog order.

Location-based achievements (safe corridor, campus coverage) match marker
strings against the free-text trip endpoints. This is an approximate
heuristic kept for compatibility with existing history: a label that merely
contains a marker counts as a visit.
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence, Tuple

from greentransit.models.achievement import AchievementDefinition, AchievementEvaluation
from greentransit.models.profile import AchievementState, UserProfile
from greentransit.models.trip import ZERO_CARBON_MODES, TravelRecord

SAFE_CORRIDOR_MARKERS: Tuple[str, ...] = ("龍潭", "dragon pond")

# landmark key -> markers (Chinese labels first, then English)
CAMPUS_LANDMARKS: Dict[str, Tuple[str, ...]] = {
    "library": ("圖書館", "library"),
    "administration": ("行政大樓", "administration"),
    "dormitory": ("學生宿舍", "dormitory"),
    "gymnasium": ("體育館", "gymnasium"),
    "engineering": ("工程學院", "engineering"),
}


def _mentions(record: TravelRecord, markers: Sequence[str]) -> bool:
    labels = (record.start_location.lower(), record.end_location.lower())
    return any(marker in label for marker in markers for label in labels)


def count_safe_corridor_trips(records: Sequence[TravelRecord]) -> int:
    return sum(1 for r in records if _mentions(r, SAFE_CORRIDOR_MARKERS))


def count_zero_carbon_trips(records: Sequence[TravelRecord]) -> int:
    return sum(1 for r in records if r.mode in ZERO_CARBON_MODES)


def visited_landmarks(records: Sequence[TravelRecord]) -> List[str]:
    return [
        key
        for key, markers in CAMPUS_LANDMARKS.items()
        if any(_mentions(r, markers) for r in records)
    ]


ACHIEVEMENT_CATALOG: Tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        id=1,
        title="Eco Beginner",
        description="Save a total of 1 kg of CO2",
        icon="🌱",
        target=1,
        metric=lambda profile, records: profile.total_carbon_saved,
    ),
    AchievementDefinition(
        id=2,
        title="Green Pioneer",
        description="Commute green 7 days in a row",
        icon="🚲",
        target=7,
        metric=lambda profile, records: profile.streak_days,
    ),
    AchievementDefinition(
        id=3,
        title="Dragon Pond Road Safety Expert",
        description="Use the Dragon Pond Road safe route 10 times",
        icon="🛣️",
        target=10,
        metric=lambda profile, records: count_safe_corridor_trips(records),
    ),
    AchievementDefinition(
        id=4,
        title="Zero-Carbon Commuter",
        description="Make 30 zero-carbon trips",
        icon="🌍",
        target=30,
        metric=lambda profile, records: count_zero_carbon_trips(records),
    ),
    AchievementDefinition(
        id=5,
        title="Green Transit Master",
        description="Earn 1000 green points",
        icon="🏆",
        target=1000,
        metric=lambda profile, records: profile.total_points,
    ),
    AchievementDefinition(
        id=6,
        title="Campus Explorer",
        description="Visit every major campus building",
        icon="🧭",
        target=len(CAMPUS_LANDMARKS),
        metric=lambda profile, records: len(visited_landmarks(records)),
    ),
)


def default_achievements() -> List[AchievementState]:
    return [AchievementState(id=d.id, title=d.title) for d in ACHIEVEMENT_CATALOG]


def progress_percent(value: float, target: float) -> float:
    try:
        ratio = value / target
    except ZeroDivisionError:
        ratio = math.nan
    if math.isnan(ratio):
        return 0.0
    return max(0.0, min(ratio, 1.0) * 100)


def evaluate_achievements(
    profile: UserProfile,
    records: Sequence[TravelRecord],
    previous: Optional[Sequence[AchievementState]] = None,
) -> AchievementEvaluation:
    """
    Recompute every achievement. Unlocks are sticky: anything unlocked in
    `previous` (defaults to the profile's stored states) stays unlocked even if
    the metric later drops, e.g. after history truncation.
    """
    prior = {s.id: s for s in (profile.achievements if previous is None else previous)}

    states: List[AchievementState] = []
    newly_unlocked: List[int] = []
    for definition in ACHIEVEMENT_CATALOG:
        progress = progress_percent(definition.metric(profile, records), definition.target)
        was_unlocked = prior[definition.id].unlocked if definition.id in prior else False
        unlocked = was_unlocked or progress >= 100
        if unlocked and not was_unlocked:
            newly_unlocked.append(definition.id)
        states.append(
            AchievementState(
                id=definition.id,
                title=definition.title,
                progress=progress,
                unlocked=unlocked,
            )
        )

    return AchievementEvaluation(states=states, newly_unlocked=tuple(newly_unlocked))


def catalog_view(states: Sequence[AchievementState]) -> List[dict]:
    """Merge runtime state with catalog descriptions for display."""
    by_id = {s.id: s for s in states}
    view = []
    for definition in ACHIEVEMENT_CATALOG:
        state = by_id.get(definition.id, AchievementState(id=definition.id, title=definition.title))
        view.append(
            {
                **state.to_dict(),
                "description": definition.description,
                "icon": definition.icon,
                "target": definition.target,
            }
        )
    return view
