"""Milestone and linked-goal CRUD over the workspace YAML files."""

from __future__ import annotations

import logging
import secrets
from pathlib import Path
from typing import Any

from balancer.distribution import MANUAL, VALID_STRATEGIES
from balancer.fileio import file_lock, read_yaml, write_yaml_atomic
from balancer.models import GoalsFile, LinkedGoal, Milestone, MilestonesFile
from balancer.periods import to_date
from balancer.workspace import goals_path, milestones_path, now_local, store_lock_path

logger = logging.getLogger(__name__)


def _gen_id() -> str:
    return secrets.token_hex(8)


def _timestamp(root: Path | None = None) -> str:
    return now_local(root).isoformat(timespec="seconds")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def store_lock(root: Path | None = None):
    """Hold around any load-modify-save of milestones.yaml or goals.yaml."""
    return file_lock(store_lock_path(root))


# ── Validation ────────────────────────────────────────────────


def validate_milestone(data: dict[str, Any]) -> list[str]:
    """Validate milestone fields (camelCase) and return errors (empty if valid)."""
    errors = []
    if not data.get("targetMetric"):
        errors.append("Missing required field: targetMetric")

    if "targetValue" not in data:
        errors.append("Missing required field: targetValue")
    elif not _is_number(data["targetValue"]) or data["targetValue"] <= 0:
        errors.append("targetValue must be a number greater than 0")

    if "currentValue" in data and (not _is_number(data["currentValue"]) or data["currentValue"] < 0):
        errors.append("currentValue must be a non-negative number")

    start = end = None
    for key in ("periodStart", "periodEnd"):
        if not data.get(key):
            errors.append(f"Missing required field: {key}")
            continue
        try:
            parsed = to_date(data[key])
        except ValueError:
            errors.append(f"Invalid {key}: {data[key]}")
            continue
        if key == "periodStart":
            start = parsed
        else:
            end = parsed
    if start and end and end < start:
        errors.append("periodEnd must not be before periodStart")

    strategy = data.get("strategy")
    if strategy is not None and strategy not in VALID_STRATEGIES:
        errors.append(f"Invalid strategy: {strategy}")

    daily = data.get("dailyAmount")
    if daily is not None and (not _is_number(daily) or daily < 0):
        errors.append("dailyAmount must be a non-negative number")
    if strategy == MANUAL and daily is None:
        errors.append("Manual strategy requires dailyAmount")

    return errors


def validate_goal(data: dict[str, Any]) -> list[str]:
    """Validate linked-goal fields (camelCase) and return errors."""
    errors = []
    if not data.get("text"):
        errors.append("Missing required field: text")
    if data.get("dueDate"):
        try:
            to_date(data["dueDate"])
        except ValueError:
            errors.append(f"Invalid dueDate: {data['dueDate']}")
    metrics = data.get("metrics") or []
    if not isinstance(metrics, list):
        errors.append("metrics must be a list")
    else:
        for i, m in enumerate(metrics):
            if not isinstance(m, dict):
                errors.append(f"metrics[{i}] must be a mapping")
            elif "current" in m and not _is_number(m["current"]):
                errors.append(f"metrics[{i}].current must be numeric")
    return errors


# ── Milestones ────────────────────────────────────────────────


def load_milestones(root: Path | None = None) -> MilestonesFile:
    return MilestonesFile.from_dict(read_yaml(milestones_path(root)))


def save_milestones(milestones_file: MilestonesFile, root: Path | None = None) -> None:
    write_yaml_atomic(milestones_path(root), milestones_file.to_dict())


def find_milestone(milestones_file: MilestonesFile, milestone_id: str) -> Milestone | None:
    for m in milestones_file.milestones:
        if m.id == milestone_id:
            return m
    return None


def create_milestone(
    milestones_file: MilestonesFile,
    data: dict[str, Any],
    default_strategy: str = "EvenDistribution",
    root: Path | None = None,
) -> tuple[Milestone, list[str]]:
    """Create and add a milestone with current_value 0. Returns (milestone, errors)."""
    data = dict(data)
    data.setdefault("strategy", default_strategy)
    data["currentValue"] = 0
    errors = validate_milestone(data)
    if errors:
        return Milestone(), errors

    milestone_id = str(data.get("id") or _gen_id())
    if find_milestone(milestones_file, milestone_id):
        return Milestone(), [f"Milestone ID already exists: {milestone_id}"]

    now = _timestamp(root)
    data.update({"id": milestone_id, "createdAt": now, "updatedAt": now})
    milestone = Milestone.from_dict(data)
    milestones_file.milestones.append(milestone)
    logger.info("Created milestone %s for %s", milestone.id, milestone.target_metric)
    return milestone, []


def update_milestone(
    milestones_file: MilestonesFile,
    milestone_id: str,
    updates: dict[str, Any],
    root: Path | None = None,
) -> tuple[Milestone | None, list[str]]:
    """Apply camelCase updates to a milestone. Returns (updated, errors)."""
    milestone = find_milestone(milestones_file, milestone_id)
    if not milestone:
        return None, [f"Milestone not found: {milestone_id}"]

    merged = milestone.to_dict()
    merged.update({k: v for k, v in updates.items() if k not in ("id", "createdAt")})
    errors = validate_milestone(merged)
    if errors:
        return None, errors

    merged["updatedAt"] = _timestamp(root)
    updated = Milestone.from_dict(merged)
    for i, m in enumerate(milestones_file.milestones):
        if m.id == milestone_id:
            milestones_file.milestones[i] = updated
            break
    logger.info("Updated milestone %s", milestone_id)
    return updated, []


def delete_milestone(milestones_file: MilestonesFile, milestone_id: str) -> bool:
    for i, m in enumerate(milestones_file.milestones):
        if m.id == milestone_id:
            milestones_file.milestones.pop(i)
            logger.info("Deleted milestone %s", milestone_id)
            return True
    return False


# ── Linked goals ──────────────────────────────────────────────


def load_goals(root: Path | None = None) -> GoalsFile:
    return GoalsFile.from_dict(read_yaml(goals_path(root)))


def save_goals(goals_file: GoalsFile, root: Path | None = None) -> None:
    write_yaml_atomic(goals_path(root), goals_file.to_dict())


def find_goal(goals_file: GoalsFile, goal_id: str) -> LinkedGoal | None:
    for g in goals_file.goals:
        if g.id == goal_id:
            return g
    return None


def goals_for_milestone(goals_file: GoalsFile, milestone_id: str) -> list[LinkedGoal]:
    return [g for g in goals_file.goals if g.parent_goal_id == milestone_id]


def create_goal(
    goals_file: GoalsFile,
    data: dict[str, Any],
    root: Path | None = None,
) -> tuple[LinkedGoal, list[str]]:
    errors = validate_goal(data)
    if errors:
        return LinkedGoal(), errors

    goal_id = str(data.get("id") or _gen_id())
    if find_goal(goals_file, goal_id):
        return LinkedGoal(), [f"Goal ID already exists: {goal_id}"]

    now = _timestamp(root)
    goal = LinkedGoal.from_dict({**data, "id": goal_id, "createdAt": now, "updatedAt": now})
    goals_file.goals.append(goal)
    return goal, []


def update_goal(
    goals_file: GoalsFile,
    goal_id: str,
    updates: dict[str, Any],
    root: Path | None = None,
) -> tuple[LinkedGoal | None, list[str]]:
    goal = find_goal(goals_file, goal_id)
    if not goal:
        return None, [f"Goal not found: {goal_id}"]

    merged = goal.to_dict()
    merged.update({k: v for k, v in updates.items() if k not in ("id", "createdAt")})
    errors = validate_goal(merged)
    if errors:
        return None, errors

    merged["updatedAt"] = _timestamp(root)
    updated = LinkedGoal.from_dict(merged)
    for i, g in enumerate(goals_file.goals):
        if g.id == goal_id:
            goals_file.goals[i] = updated
            break
    return updated, []


def delete_goal(goals_file: GoalsFile, goal_id: str) -> bool:
    for i, g in enumerate(goals_file.goals):
        if g.id == goal_id:
            goals_file.goals.pop(i)
            return True
    return False
