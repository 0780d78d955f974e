from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from greentransit.features.achievements.service import progress_percent
from greentransit.models.profile import UserProfile
from greentransit.models.task import Task, TaskRequirement, TaskReward, TaskRewards
from greentransit.models.trip import GREEN_MODES


# Static catalog of 12 tasks across daily / weekly / special cadence.
# "exploration" and "rainy_green" are modes no trip carries today; those tasks
# only complete if an event ever reports that exact mode.
TASK_CATALOG: Tuple[Task, ...] = (
    Task(1, "Green Commute Today", "Walk, cycle or take the bus today", "daily",
         TaskRequirement("travel_count", 1, mode="green"), TaskReward(20)),
    Task(2, "Carbon Cutter", "Save a total of 5 kg of CO2", "weekly",
         TaskRequirement("carbon_saved", 5), TaskReward(50, "Carbon Cutter")),
    Task(3, "Green Streak", "Commute green 3 days in a row", "special",
         TaskRequirement("streak", 3), TaskReward(100, "Eco Expert")),
    Task(4, "Dragon Pond Road Safe Passage", "Take the Dragon Pond Road safe route", "daily",
         TaskRequirement("specific_route", 1, route="dragon_pond_safe"), TaskReward(30)),
    Task(5, "Commute Pro", "Use several green modes in one day", "daily",
         TaskRequirement("travel_count", 2, mode="green"), TaskReward(30)),
    Task(6, "Campus Walker", "Walk 1 km on campus", "daily",
         TaskRequirement("travel_count", 1, mode="walking"), TaskReward(15)),
    Task(7, "Weekly Cyclist", "Cycle at least 3 times this week", "weekly",
         TaskRequirement("travel_count", 3, mode="cycling"), TaskReward(50, "Cycling Fan")),
    Task(8, "Public Transit Supporter", "Take the bus at least 5 times this week", "weekly",
         TaskRequirement("travel_count", 5, mode="bus"), TaskReward(60, "Bus Regular")),
    Task(9, "Campus Explorer", "Visit 5 different campus buildings", "special",
         TaskRequirement("travel_count", 5, mode="exploration"), TaskReward(75, "Campus Adventurer")),
    Task(10, "Train Commute Challenge", "Complete a round trip on the station route", "special",
         TaskRequirement("specific_route", 1, route="station_route"), TaskReward(40, "Rail Fan")),
    Task(11, "Climate Warrior", "Commute green on a rainy day", "special",
         TaskRequirement("travel_count", 1, mode="rainy_green"), TaskReward(50, "All-Weather Eco Hero")),
    Task(12, "Carbon Master", "Save a total of 10 kg of CO2", "special",
         TaskRequirement("carbon_saved", 10), TaskReward(100, "Earth Guardian")),
)


@dataclass(frozen=True)
class TaskEvaluation:
    tasks: List[Task]
    rewards: TaskRewards

    def to_events(self) -> List[dict]:
        by_id = {t.id: t for t in self.tasks}
        return [
            {
                "type": "task.completed",
                "payload": {
                    "taskId": task_id,
                    "title": by_id[task_id].title,
                    "rewardPoints": by_id[task_id].reward.points,
                    "badge": by_id[task_id].reward.badge,
                },
            }
            for task_id in self.rewards.completed_task_ids
        ]


class TaskEvaluator:
    """
    Evaluates the task catalog against one trip event.

    Pure with respect to its inputs: it returns the updated task list and the
    reward batch, and leaves applying rewards to the profile ledger.
    """

    def default_tasks(self) -> List[Task]:
        return [task.evolve(completed=False, progress=0.0) for task in TASK_CATALOG]

    def reset(self) -> List[Task]:
        """Rollover: every task incomplete with zero progress."""
        return self.default_tasks()

    def evaluate(
        self,
        tasks: Sequence[Task],
        profile: UserProfile,
        *,
        mode: str,
        route: Optional[str] = None,
    ) -> TaskEvaluation:
        updated: List[Task] = []
        points = 0
        badges: List[str] = []
        completed_ids: List[int] = []

        for task in tasks:
            if task.completed:
                updated.append(task)
                continue

            progress, completed = self._check(task.requirement, profile, mode, route, task.progress)
            if progress != task.progress or completed != task.completed:
                task = task.evolve(progress=progress, completed=completed)
                if completed:
                    points += task.reward.points
                    if task.reward.badge:
                        badges.append(task.reward.badge)
                    completed_ids.append(task.id)
            updated.append(task)

        return TaskEvaluation(
            tasks=updated,
            rewards=TaskRewards(points=points, badges=tuple(badges), completed_task_ids=tuple(completed_ids)),
        )

    @staticmethod
    def _check(
        requirement: TaskRequirement,
        profile: UserProfile,
        mode: str,
        route: Optional[str],
        current_progress: float,
    ) -> Tuple[float, bool]:
        if requirement.type == "travel_count":
            if requirement.mode == "green" and mode in GREEN_MODES:
                return 100.0, True
            if requirement.mode == mode:
                return 100.0, True
            return current_progress, False

        if requirement.type == "carbon_saved":
            progress = progress_percent(profile.total_carbon_saved, requirement.value)
            return progress, progress >= 100

        if requirement.type == "streak":
            progress = progress_percent(profile.streak_days, requirement.value)
            return progress, progress >= 100

        if requirement.type == "specific_route":
            if route is not None and route == requirement.route:
                return 100.0, True
            return current_progress, False

        return current_progress, False


task_evaluator = TaskEvaluator()
