"""Typed dataclasses for the balancer data model.

All persisted models use from_dict/to_dict for YAML/JSON serialization.
camelCase on disk is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any


def _number(value: Any, default: float = 0) -> float:
    """Keep ints as ints so YAML round-trips stay tidy."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    f = float(value)
    return int(f) if f.is_integer() else f


def _date_part(value: Any) -> str | None:
    if not value:
        return None
    # PyYAML loads unquoted timestamps as date/datetime
    if isinstance(value, date):
        return value.isoformat()[:10]
    return str(value).split("T")[0]


def _timestamp_str(value: Any) -> str | None:
    if isinstance(value, date):
        return value.isoformat()
    return value


# ── Linked goals ──────────────────────────────────────────────


@dataclass
class GoalMetric:
    label: str = ""
    current: float = 0
    target: float = 0

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> GoalMetric:
        return cls(
            label=str(d.get("label", "")),
            current=_number(d.get("current")),
            target=_number(d.get("target")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "current": self.current, "target": self.target}


@dataclass
class LinkedGoal:
    """A day-scoped task linked to a milestone through parent_goal_id."""

    id: str = ""
    text: str = ""
    completed: bool = False
    metrics: list[GoalMetric] = field(default_factory=list)
    due_date: str | None = None
    parent_goal_id: str | None = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> LinkedGoal:
        metrics = [GoalMetric.from_dict(m) for m in (d.get("metrics") or []) if isinstance(m, dict)]
        return cls(
            id=str(d.get("id", "")),
            text=str(d.get("text", "")),
            completed=bool(d.get("completed", False)),
            metrics=metrics,
            due_date=_timestamp_str(d.get("dueDate", d.get("due_date"))),
            parent_goal_id=d.get("parentGoalId", d.get("parent_goal_id")),
            created_at=str(_timestamp_str(d.get("createdAt", ""))),
            updated_at=str(_timestamp_str(d.get("updatedAt", ""))),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "metrics": [m.to_dict() for m in self.metrics],
            "dueDate": self.due_date,
            "parentGoalId": self.parent_goal_id,
        }
        if self.created_at:
            d["createdAt"] = self.created_at
        if self.updated_at:
            d["updatedAt"] = self.updated_at
        return d

    @property
    def due_day(self) -> str | None:
        """due_date without its time component."""
        return _date_part(self.due_date)

    def find_metric(self, label: str) -> GoalMetric | None:
        for m in self.metrics:
            if m.label == label:
                return m
        return None


@dataclass
class GoalsFile:
    goals: list[LinkedGoal] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> GoalsFile:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(goals=[LinkedGoal.from_dict(g) for g in (d.get("goals") or []) if isinstance(g, dict)])

    def to_dict(self) -> dict[str, Any]:
        return {"goals": [g.to_dict() for g in self.goals]}


# ── Milestones ────────────────────────────────────────────────


@dataclass
class Milestone:
    """A period-scoped numeric goal, e.g. 3000 pushups by month end."""

    id: str = ""
    target_metric: str = ""
    target_value: float = 0
    current_value: float = 0
    period_start: str = ""  # ISO date, inclusive
    period_end: str = ""  # ISO date, inclusive
    strategy: str = "EvenDistribution"  # EvenDistribution, FrontLoad, Manual
    label: str | None = None
    unit: str | None = None
    daily_amount: float | None = None  # Manual strategy only
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Milestone:
        daily = d.get("dailyAmount", d.get("daily_amount"))
        return cls(
            id=str(d.get("id", "")),
            target_metric=str(d.get("targetMetric", d.get("target_metric", ""))),
            target_value=_number(d.get("targetValue", d.get("target_value"))),
            current_value=_number(d.get("currentValue", d.get("current_value"))),
            period_start=_date_part(d.get("periodStart", d.get("period_start"))) or "",
            period_end=_date_part(d.get("periodEnd", d.get("period_end"))) or "",
            strategy=str(d.get("strategy") or "EvenDistribution"),
            label=d.get("label"),
            unit=d.get("unit"),
            daily_amount=_number(daily) if daily is not None else None,
            created_at=str(_timestamp_str(d.get("createdAt", ""))),
            updated_at=str(_timestamp_str(d.get("updatedAt", ""))),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "targetMetric": self.target_metric,
            "targetValue": self.target_value,
            "currentValue": self.current_value,
            "periodStart": self.period_start,
            "periodEnd": self.period_end,
            "strategy": self.strategy,
        }
        if self.label:
            d["label"] = self.label
        if self.unit:
            d["unit"] = self.unit
        if self.daily_amount is not None:
            d["dailyAmount"] = self.daily_amount
        if self.created_at:
            d["createdAt"] = self.created_at
        if self.updated_at:
            d["updatedAt"] = self.updated_at
        return d

    @property
    def remaining_target(self) -> float:
        """target_value - current_value, never negative."""
        return max(0, self.target_value - self.current_value)


@dataclass
class MilestonesFile:
    milestones: list[Milestone] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> MilestonesFile:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            milestones=[Milestone.from_dict(m) for m in (d.get("milestones") or []) if isinstance(m, dict)]
        )

    def to_dict(self) -> dict[str, Any]:
        return {"milestones": [m.to_dict() for m in self.milestones]}


# ── Engine output ─────────────────────────────────────────────


@dataclass
class DailyDistribution:
    date: str = ""
    target: int = 0
    actual: float = 0

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "target": self.target, "actual": self.actual}


@dataclass
class BalancerResult:
    milestone_id: str = ""
    daily_target: int = 0
    updated_goals: int = 0
    message: str = ""

    @property
    def daily_required(self) -> int:
        return self.daily_target

    def to_dict(self) -> dict[str, Any]:
        return {
            "milestoneId": self.milestone_id,
            "dailyTarget": self.daily_target,
            "dailyRequired": self.daily_target,
            "updatedGoals": self.updated_goals,
            "message": self.message,
        }


@dataclass
class MilestoneBriefing:
    milestone_id: str = ""
    target_metric: str = ""
    current_value: float = 0
    target_value: float = 0
    progress_percent: int = 0
    daily_target: float = 0
    status: str = "on-track"  # ahead, on-track, behind
    estimated_completion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "milestoneId": self.milestone_id,
            "targetMetric": self.target_metric,
            "currentValue": self.current_value,
            "targetValue": self.target_value,
            "progressPercent": self.progress_percent,
            "dailyTarget": self.daily_target,
            "status": self.status,
            "estimatedCompletion": self.estimated_completion,
        }


@dataclass
class BriefingStats:
    total_milestones: int = 0
    milestones_on_track: int = 0
    milestones_behind: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalMilestones": self.total_milestones,
            "milestonesOnTrack": self.milestones_on_track,
            "milestonesBehind": self.milestones_behind,
        }
