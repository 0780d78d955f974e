from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, Optional

TaskType = Literal["daily", "weekly", "special"]
RequirementType = Literal["travel_count", "carbon_saved", "streak", "specific_route"]

REQUIREMENT_TYPES = ("travel_count", "carbon_saved", "streak", "specific_route")


@dataclass(frozen=True)
class TaskRequirement:
    """Tagged requirement; `mode` applies to travel_count, `route` to specific_route."""

    type: RequirementType
    value: float
    mode: Optional[str] = None
    route: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict = {"type": self.type, "value": self.value}
        if self.mode is not None:
            data["mode"] = self.mode
        if self.route is not None:
            data["route"] = self.route
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "TaskRequirement":
        req_type = data["type"]
        if req_type not in REQUIREMENT_TYPES:
            raise ValueError(f"unknown requirement type: {req_type!r}")
        return cls(
            type=req_type,
            value=float(data["value"]),
            mode=data.get("mode"),
            route=data.get("route"),
        )


@dataclass(frozen=True)
class TaskReward:
    points: int
    badge: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict = {"points": self.points}
        if self.badge:
            data["badge"] = self.badge
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "TaskReward":
        return cls(points=int(data["points"]), badge=data.get("badge"))


@dataclass(frozen=True)
class Task:
    id: int
    title: str
    description: str
    type: TaskType
    requirement: TaskRequirement
    reward: TaskReward
    completed: bool = False
    progress: float = 0.0

    def evolve(self, **changes) -> "Task":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "type": self.type,
            "requirement": self.requirement.to_dict(),
            "reward": self.reward.to_dict(),
            "completed": self.completed,
            "progress": self.progress,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        return cls(
            id=int(data["id"]),
            title=str(data["title"]),
            description=str(data.get("description", "")),
            type=data.get("type", "daily"),
            requirement=TaskRequirement.from_dict(data["requirement"]),
            reward=TaskReward.from_dict(data["reward"]),
            completed=bool(data.get("completed", False)),
            progress=float(data.get("progress", 0.0)),
        )


@dataclass(frozen=True)
class TaskRewards:
    """Reward batch produced by one evaluation pass."""

    points: int = 0
    badges: tuple[str, ...] = ()
    completed_task_ids: tuple[int, ...] = ()

    def to_dict(self) -> dict:
        return {
            "points": self.points,
            "badges": list(self.badges),
            "completedTaskIds": list(self.completed_task_ids),
        }
