"""
Profile ledger.

The only component that writes the persisted snapshot (profile, trip history,
tasks). Each trip is applied as one read-modify-write under a single-flight
lock keyed by the profile identity, and committed to the store in one atomic
write: either the profile, the new record and the task list all land, or none
of them do.

Reads go through a derived in-process cache that is dropped after every
commit. Subscribers are notified after each committed change instead of
polling.
"""

from __future__ import annotations

import logging
import math
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from greentransit.core.errors import PersistenceError, ValidationError
from greentransit.core.logging import log_event
from greentransit.features.achievements.service import default_achievements, evaluate_achievements
from greentransit.features.calculator.service import calculate_emission_saved, calculate_points
from greentransit.features.storage.store import PROFILE_KEY, RECORDS_KEY, TASKS_KEY, KeyValueStore
from greentransit.features.streaks.service import StreakTracker, streak_tracker
from greentransit.features.tasks.service import TaskEvaluator, task_evaluator
from greentransit.models.achievement import AchievementEvaluation
from greentransit.models.ledger import LedgerChange, LedgerSnapshot, TripResult
from greentransit.models.profile import PROFILE_ID, AchievementState, UserProfile
from greentransit.models.streak import StreakVerification
from greentransit.models.task import Task
from greentransit.models.trip import TRANSPORT_MODES, TravelRecord, to_utc

logger = logging.getLogger("greentransit")

DEFAULT_HISTORY_LIMIT = 50

Subscriber = Callable[[LedgerChange], None]


def default_profile() -> UserProfile:
    return UserProfile(id=PROFILE_ID, achievements=default_achievements())


class ProfileLedger:
    def __init__(
        self,
        store: KeyValueStore,
        *,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        clock: Optional[Callable[[], datetime]] = None,
        streaks: Optional[StreakTracker] = None,
        tasks: Optional[TaskEvaluator] = None,
    ):
        if history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        self._store = store
        self._history_limit = history_limit
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._streaks = streaks or streak_tracker
        self._tasks = tasks or task_evaluator

        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()
        self._cache: Optional[LedgerSnapshot] = None
        self._subscribers: List[Subscriber] = []
        self._last_id_ms = 0

    # Public API -------------------------------------------------------
    def record_trip(
        self,
        mode: str,
        distance_km: float,
        start: str,
        end: str,
        *,
        route: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ) -> TripResult:
        """Apply one trip and return the deltas that were committed."""
        mode, distance_km, start, end = self._validate_trip(mode, distance_km, start, end)
        moment = to_utc(occurred_at) if occurred_at else to_utc(self._clock())

        with self._lock_for(PROFILE_ID):
            snapshot = self._load_snapshot()
            previous = snapshot.profile

            # Points use the streak as it stood before this trip
            points = calculate_points(mode, distance_km, previous.streak_days)
            carbon_saved = calculate_emission_saved(mode, distance_km)
            streak = self._streaks.advance(
                previous_streak=previous.streak_days,
                last_travel_date=previous.last_travel_date,
                occurred_at=moment,
            )

            record = TravelRecord(
                id=self._next_record_id(snapshot.records),
                date=moment,
                mode=mode,
                distance=distance_km,
                start_location=start,
                end_location=end,
                carbon_saved=carbon_saved,
                points=points,
            )
            records = ([record] + snapshot.records)[: self._history_limit]

            last_travel_date = moment
            if previous.last_travel_date and previous.last_travel_date > moment:
                last_travel_date = previous.last_travel_date

            updated = previous.evolve(
                total_points=previous.total_points + points,
                total_carbon_saved=previous.total_carbon_saved + carbon_saved,
                streak_days=streak.streak_days,
                travel_count=previous.travel_count + 1,
                last_travel_date=last_travel_date,
            )

            achievements = evaluate_achievements(updated, records, previous=previous.achievements)
            updated = updated.evolve(achievements=achievements.states)

            task_result = self._tasks.evaluate(snapshot.tasks, updated, mode=mode, route=route)
            rewards = task_result.rewards
            if rewards.points or rewards.badges:
                badges = list(updated.badges)
                badges.extend(b for b in rewards.badges if b not in badges)
                updated = updated.evolve(
                    reward_points=updated.reward_points + rewards.points,
                    badges=badges,
                )

            new_snapshot = LedgerSnapshot(profile=updated, records=records, tasks=task_result.tasks)
            self._commit(new_snapshot, operation="record_trip")

        emitted: List[dict] = [
            {
                "type": "trip.recorded",
                "payload": {
                    "recordId": record.id,
                    "mode": mode,
                    "pointsEarned": points,
                    "carbonSaved": carbon_saved,
                },
            },
            streak.to_event(),
        ]
        if achievements.celebrate:
            emitted.append(achievements.to_event())
        emitted.extend(task_result.to_events())

        log_event(
            "info",
            "trip.recorded",
            event_type="trip.recorded",
            record_id=record.id,
            mode=mode,
            points=points,
            carbon_saved=round(carbon_saved, 4),
            streak_days=streak.streak_days,
            unlocked=list(achievements.newly_unlocked),
            tasks_completed=list(rewards.completed_task_ids),
        )
        self._notify(LedgerChange(kind="trip.recorded", snapshot=new_snapshot, emitted=emitted))

        return TripResult(
            points_earned=points,
            carbon_saved=carbon_saved,
            record=record,
            profile=updated,
            streak=streak,
            rewards=rewards,
            newly_unlocked=achievements.newly_unlocked,
            emitted=emitted,
        )

    def get_snapshot(self) -> LedgerSnapshot:
        cached = self._cache
        if cached is not None:
            return cached
        with self._lock_for(PROFILE_ID):
            if self._cache is None:
                self._cache = self._load_snapshot(materialize=True)
            return self._cache

    def get_profile(self) -> UserProfile:
        return self.get_snapshot().profile

    def get_records(self, limit: Optional[int] = None) -> List[TravelRecord]:
        records = self.get_snapshot().records
        return list(records if limit is None else records[: max(0, limit)])

    def get_tasks(self) -> List[Task]:
        return list(self.get_snapshot().tasks)

    def reset_tasks(self) -> List[Task]:
        """Explicit rollover trigger; rewrites only the task list."""
        with self._lock_for(PROFILE_ID):
            snapshot = self._load_snapshot()
            tasks = self._tasks.reset()
            new_snapshot = LedgerSnapshot(profile=snapshot.profile, records=snapshot.records, tasks=tasks)
            self._commit(new_snapshot, operation="reset_tasks", keys=(TASKS_KEY,))

        log_event("info", "tasks.reset", event_type="tasks.reset", count=len(tasks))
        self._notify(
            LedgerChange(kind="tasks.reset", snapshot=new_snapshot, emitted=[{"type": "tasks.reset", "payload": {}}])
        )
        return tasks

    def preview_achievements(self) -> AchievementEvaluation:
        """Read-only recompute for display refreshes. Never writes."""
        snapshot = self.get_snapshot()
        return evaluate_achievements(snapshot.profile, snapshot.records)

    def verify_streak(self) -> StreakVerification:
        snapshot = self.get_snapshot()
        return self._streaks.verify(snapshot.profile, snapshot.records)

    def store_ready(self) -> bool:
        try:
            return bool(self._store.ping())
        except Exception as e:
            log_event("warning", "storage.ping_failed", error=e)
            return False

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register for change notifications; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # Internal helpers -------------------------------------------------
    def _validate_trip(self, mode: Any, distance_km: Any, start: Any, end: Any):
        start = start.strip() if isinstance(start, str) else ""
        end = end.strip() if isinstance(end, str) else ""
        if not start or not end:
            raise ValidationError("Start and end locations are required")

        try:
            distance = float(distance_km)
        except (TypeError, ValueError):
            raise ValidationError("Distance must be a number") from None
        if not math.isfinite(distance) or distance <= 0:
            raise ValidationError("Distance must be greater than zero")

        normalized_mode = mode.strip().lower() if isinstance(mode, str) else ""
        if normalized_mode not in TRANSPORT_MODES:
            raise ValidationError(f"Unknown transport mode: {mode!r}")

        return normalized_mode, distance, start, end

    def _lock_for(self, key: str) -> threading.RLock:
        with self._locks_guard:
            if key not in self._locks:
                self._locks[key] = threading.RLock()
            return self._locks[key]

    def _next_record_id(self, existing: Sequence[TravelRecord]) -> str:
        taken = {r.id for r in existing}
        ms = max(int(self._clock().timestamp() * 1000), self._last_id_ms + 1)
        while f"travel_{ms}" in taken:
            ms += 1
        self._last_id_ms = ms
        return f"travel_{ms}"

    def _read(self, key: str) -> Any:
        try:
            return self._store.get(key)
        except Exception as e:
            log_event("error", "storage.read_failed", error_code="persistence_error", key=key, error=e)
            raise PersistenceError(f"Could not read {key} from storage") from e

    def _commit(self, snapshot: LedgerSnapshot, *, operation: str, keys: Sequence[str] = (PROFILE_KEY, RECORDS_KEY, TASKS_KEY)) -> None:
        values = {
            PROFILE_KEY: snapshot.profile.to_dict(),
            RECORDS_KEY: [r.to_dict() for r in snapshot.records],
            TASKS_KEY: [t.to_dict() for t in snapshot.tasks],
        }
        try:
            self._store.commit({k: values[k] for k in keys})
        except Exception as e:
            log_event(
                "error",
                "storage.commit_failed",
                error_code="persistence_error",
                operation=operation,
                keys=list(keys),
                error=e,
            )
            raise PersistenceError("Could not save changes; nothing was recorded") from e
        finally:
            # Whatever happened, the next read must come from the store
            self._cache = None

    def _load_snapshot(self, *, materialize: bool = False) -> LedgerSnapshot:
        """
        Decode the stored snapshot. Absent or corrupt values fall back to
        defaults; with `materialize` those defaults are written back once.
        """
        repaired: List[str] = []

        profile = self._decode_profile(self._read(PROFILE_KEY), repaired)
        records = self._decode_records(self._read(RECORDS_KEY), repaired)
        tasks = self._decode_tasks(self._read(TASKS_KEY), repaired)
        snapshot = LedgerSnapshot(profile=profile, records=records, tasks=tasks)

        if materialize and repaired:
            self._commit(snapshot, operation="materialize_defaults", keys=tuple(repaired))
            self._notify(LedgerChange(kind="profile.initialized", snapshot=snapshot))
        return snapshot

    def _decode_profile(self, raw: Any, repaired: List[str]) -> UserProfile:
        if raw is None:
            repaired.append(PROFILE_KEY)
            return default_profile()
        try:
            profile = UserProfile.from_dict(raw)
        except (KeyError, TypeError, ValueError) as e:
            log_event(
                "warning",
                "storage.corrupt",
                error_code="corrupt_profile",
                key=PROFILE_KEY,
                error=e,
            )
            repaired.append(PROFILE_KEY)
            return default_profile()
        return profile.evolve(achievements=self._merge_achievements(profile.achievements))

    def _decode_records(self, raw: Any, repaired: List[str]) -> List[TravelRecord]:
        if raw is None:
            repaired.append(RECORDS_KEY)
            return []
        if not isinstance(raw, list):
            log_event("warning", "storage.corrupt", error_code="corrupt_records", key=RECORDS_KEY)
            repaired.append(RECORDS_KEY)
            return []

        records: List[TravelRecord] = []
        for item in raw:
            try:
                records.append(TravelRecord.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                log_event(
                    "warning",
                    "storage.corrupt",
                    error_code="corrupt_record",
                    key=RECORDS_KEY,
                    error=e,
                )
        if len(records) != len(raw):
            repaired.append(RECORDS_KEY)
        return records[: self._history_limit]

    def _decode_tasks(self, raw: Any, repaired: List[str]) -> List[Task]:
        if raw is None:
            repaired.append(TASKS_KEY)
            return self._tasks.default_tasks()
        try:
            if not isinstance(raw, list):
                raise ValueError("tasks must be a list")
            return [Task.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError) as e:
            log_event("warning", "storage.corrupt", error_code="corrupt_tasks", key=TASKS_KEY, error=e)
            repaired.append(TASKS_KEY)
            return self._tasks.default_tasks()

    @staticmethod
    def _merge_achievements(stored: Sequence[AchievementState]) -> List[AchievementState]:
        """Always the full catalog in catalog order, keeping stored progress/unlocks."""
        by_id = {a.id: a for a in stored}
        return [by_id.get(default.id, default) for default in default_achievements()]

    def _notify(self, change: LedgerChange) -> None:
        for callback in list(self._subscribers):
            try:
                callback(change)
            except Exception:
                logger.exception("ledger.subscriber_failed", extra={"kind": change.kind})
