"""Progress aggregation over linked day-scoped goals."""

from __future__ import annotations

import math
from collections.abc import Iterable

from balancer.models import LinkedGoal


def aggregate_completed(linked_goals: Iterable[LinkedGoal], metric_name: str | None = None) -> float:
    """Sum the real-world progress recorded on completed linked goals.

    - incomplete goals are skipped
    - with metric_name, only that metric's current counts (0 if absent)
    - without it, every metric's current is summed
    - a completed goal without metrics counts as one unit
    """
    total: float = 0
    for goal in linked_goals:
        if not goal.completed:
            continue
        if goal.metrics:
            if metric_name:
                metric = goal.find_metric(metric_name)
                if metric is not None:
                    total += metric.current
            else:
                total += sum(m.current for m in goal.metrics)
        else:
            total += 1
    return total


def day_actual(goal: LinkedGoal | None) -> float:
    """Realized value of a single day's goal: first metric, else 1 if completed."""
    if goal is None or not goal.completed:
        return 0
    if goal.metrics and goal.metrics[0].current:
        return goal.metrics[0].current
    return 1


def progress_percent(current: float, target: float) -> int:
    """Display percentage, capped at 100 (current itself is never clamped)."""
    if target == 0:
        return 0
    return min(100, math.floor(current / target * 100 + 0.5))
