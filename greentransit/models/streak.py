from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Literal, Optional

StreakTransition = Literal["started", "incremented", "unchanged", "reset"]


@dataclass(frozen=True)
class StreakUpdate:
    """
    Result of applying one trip to the stored streak. Day-level, UTC only.
    """

    streak_days: int
    previous_streak: int
    transition: StreakTransition
    day: date
    day_gap: Optional[int] = None  # None on the first ever trip

    def to_event(self) -> dict:
        return {
            "type": "streak.updated",
            "payload": {
                "streakDays": self.streak_days,
                "previousStreak": self.previous_streak,
                "transition": self.transition,
                "streakDay": self.day.isoformat(),
            },
        }


@dataclass(frozen=True)
class StreakVerification:
    stored_streak: int
    scanned_streak: int
    last_travel_date: Optional[date]
    as_of: date

    @property
    def consistent(self) -> bool:
        return self.stored_streak == self.scanned_streak

    def to_dict(self) -> dict:
        return {
            "storedStreak": self.stored_streak,
            "scannedStreak": self.scanned_streak,
            "lastTravelDate": self.last_travel_date.isoformat() if self.last_travel_date else None,
            "asOf": self.as_of.isoformat(),
            "consistent": self.consistent,
        }
