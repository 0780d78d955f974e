from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional

from greentransit.models.profile import UserProfile
from greentransit.models.streak import StreakTransition, StreakUpdate, StreakVerification
from greentransit.models.trip import TravelRecord


class StreakTracker:
    """
    Deterministic day-level streak rules.

    `advance` (delta-based) is authoritative for persisted state. `scan` walks
    the trip history and exists only for read-time verification; it cannot see
    days that fell out of the bounded history window.
    """

    def advance(
        self,
        *,
        previous_streak: int,
        last_travel_date: Optional[datetime],
        occurred_at: datetime,
    ) -> StreakUpdate:
        day = self._normalize_day(occurred_at)
        previous = max(0, previous_streak)

        # First ever trip
        if last_travel_date is None:
            return StreakUpdate(streak_days=1, previous_streak=previous, transition="started", day=day)

        gap_days = (day - self._normalize_day(last_travel_date)).days
        transition: StreakTransition
        if gap_days == 1:
            streak, transition = previous + 1, "incremented"
        elif gap_days > 1:
            streak, transition = 1, "reset"
        else:
            # Same day, or a back-dated trip: never rewinds the streak
            streak, transition = previous, "unchanged"

        return StreakUpdate(
            streak_days=streak,
            previous_streak=previous,
            transition=transition,
            day=day,
            day_gap=gap_days,
        )

    def scan(self, records: Iterable[TravelRecord], *, today: Optional[date] = None) -> int:
        """Count consecutive days with a trip, walking back from yesterday."""
        current = today or self._utc_today()
        active_days = {self._normalize_day(r.date) for r in records}

        streak = 0
        cursor = current - timedelta(days=1)
        while cursor in active_days:
            streak += 1
            cursor -= timedelta(days=1)
        return streak

    def verify(self, profile: UserProfile, records: Iterable[TravelRecord]) -> StreakVerification:
        """
        Cross-check the stored streak against a history scan anchored on the
        day after the last trip, so both count the run ending on that trip.
        """
        records = list(records)
        if profile.last_travel_date is not None:
            last_day = self._normalize_day(profile.last_travel_date)
        elif records:
            # No stored date (legacy snapshot): fall back to the newest record
            last_day = max(self._normalize_day(r.date) for r in records)
        else:
            last_day = None

        as_of = (last_day + timedelta(days=1)) if last_day else self._utc_today()
        return StreakVerification(
            stored_streak=profile.streak_days,
            scanned_streak=self.scan(records, today=as_of),
            last_travel_date=last_day,
            as_of=as_of,
        )

    @staticmethod
    def _normalize_day(occurred_at: datetime) -> date:
        aware = occurred_at if occurred_at.tzinfo else occurred_at.replace(tzinfo=timezone.utc)
        return aware.astimezone(timezone.utc).date()

    @staticmethod
    def _utc_today() -> date:
        return datetime.now(timezone.utc).date()


streak_tracker = StreakTracker()
