"""Redistribution trigger and the balancer run.

needs_redistribution is the pure drift check. run_balancer is the calling
service around the engine: it loads a milestone and its linked goals from the
workspace, pushes today's target onto the open goals, writes the aggregated
progress back to current_value and saves both files.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from pathlib import Path

from balancer.config import DEFAULT_REDISTRIBUTION_THRESHOLD, load_settings
from balancer.distribution import MANUAL, daily_target
from balancer.fileio import read_json, update_json
from balancer.hooks import run_hooks
from balancer.models import BalancerResult, GoalMetric, LinkedGoal, Milestone
from balancer.periods import remaining_days, to_date
from balancer.progress import aggregate_completed
from balancer.store import (
    find_milestone,
    goals_for_milestone,
    load_goals,
    load_milestones,
    save_goals,
    save_milestones,
    store_lock,
)
from balancer.workspace import last_runs_path, now_local, today_local, workspace_root

logger = logging.getLogger(__name__)


def needs_redistribution(
    milestone: Milestone,
    linked_goals: Iterable[LinkedGoal],
    threshold: float = DEFAULT_REDISTRIBUTION_THRESHOLD,
) -> bool:
    """True when recorded progress drifted more than threshold * target from reality.

    Manual milestones are never redistributed.
    """
    if milestone.strategy == MANUAL:
        return False
    actual_progress = aggregate_completed(linked_goals)
    return abs(actual_progress - milestone.current_value) > milestone.target_value * threshold


def _apply_daily_target(goal: LinkedGoal, target: int, metric_label: str) -> None:
    if goal.metrics:
        goal.metrics[0].target = target
    else:
        goal.metrics.append(GoalMetric(label=metric_label, current=0, target=target))


def _record_run(result: BalancerResult, root: Path, ran_at: str) -> None:
    def mutate(runs: dict) -> None:
        runs[result.milestone_id] = {**result.to_dict(), "ranAt": ran_at}

    update_json(last_runs_path(root), mutate)


def load_last_runs(root: Path | None = None) -> dict[str, dict]:
    """Most recent BalancerResult per milestone id, as written by run_balancer."""
    return read_json(last_runs_path(root))

def run_balancer(
    milestone_id: str,
    root: Path | None = None,
    today: date | None = None,
    only_if_drifted: bool = False,
) -> BalancerResult:
    """Redistribute a milestone's remaining work across its open linked goals.

    The load-update-save of milestones.yaml and goals.yaml runs under the
    store lock, after the pre_balance hook, so writes made by the hook or by
    other store users before the lock is taken are kept.

    Raises ValueError when the milestone does not exist or its period has
    already ended.
    """
    if root is None:
        root = workspace_root()
    if today is None:
        today = today_local(root)
    today = to_date(today)
    settings = load_settings(root)

    milestone = find_milestone(load_milestones(root), milestone_id)
    if milestone is None:
        raise ValueError(f"Milestone not found: {milestone_id}")

    linked = goals_for_milestone(load_goals(root), milestone_id)
    completed = aggregate_completed(linked)
    remaining_target = milestone.target_value - completed
    days_left = remaining_days(milestone.period_end, today)

    context = {
        "milestoneId": milestone.id,
        "targetMetric": milestone.target_metric,
        "today": today.isoformat(),
        "completed": completed,
        "targetValue": milestone.target_value,
    }

    if only_if_drifted and not needs_redistribution(
        milestone, linked, settings.redistribution_threshold
    ):
        logger.debug("Milestone %s within drift threshold; skipping", milestone_id)
        return BalancerResult(
            milestone_id=milestone_id,
            daily_target=daily_target(milestone.strategy, remaining_target, days_left),
            updated_goals=0,
            message="No redistribution needed",
        )

    if remaining_target <= 0:
        logger.info("Milestone %s (%s) already complete", milestone_id, milestone.target_metric)
        with store_lock(root):
            milestones_file = load_milestones(root)
            stored = find_milestone(milestones_file, milestone_id)
            if stored is not None and stored.current_value != completed:
                stored.current_value = completed
                stored.updated_at = now_local(root).isoformat(timespec="seconds")
                save_milestones(milestones_file, root)
        run_hooks("on_milestone_complete", context, root)
        return BalancerResult(
            milestone_id=milestone_id,
            message="Milestone already complete!",
        )

    if today > to_date(milestone.period_end):
        raise ValueError("Milestone period has ended")

    if milestone.strategy == MANUAL:
        return BalancerResult(
            milestone_id=milestone_id,
            message="Manual strategy - no auto-redistribution",
        )

    run_hooks("pre_balance", context, root)

    with store_lock(root):
        milestones_file = load_milestones(root)
        milestone = find_milestone(milestones_file, milestone_id)
        if milestone is None:
            raise ValueError(f"Milestone not found: {milestone_id}")
        goals_file = load_goals(root)
        linked = goals_for_milestone(goals_file, milestone_id)
        completed = aggregate_completed(linked)
        daily = daily_target(
            milestone.strategy,
            milestone.target_value - completed,
            remaining_days(milestone.period_end, today),
            0,
        )

        ran_at = now_local(root).isoformat(timespec="seconds")
        updated_count = 0
        for goal in linked:
            if goal.completed or not goal.due_day or to_date(goal.due_day) < today:
                continue
            _apply_daily_target(goal, daily, milestone.target_metric)
            goal.updated_at = ran_at
            updated_count += 1

        milestone.current_value = completed
        milestone.updated_at = ran_at
        save_goals(goals_file, root)
        save_milestones(milestones_file, root)

    logger.info(
        "Redistributed %s across %d future goals (daily: %d)",
        milestone.target_metric, updated_count, daily,
    )

    result = BalancerResult(
        milestone_id=milestone_id,
        daily_target=daily,
        updated_goals=updated_count,
        message=f"Redistributed to {updated_count} goals, {daily} per day",
    )
    _record_run(result, root, ran_at)
    run_hooks("post_balance", {**context, "result": result.to_dict()}, root)
    return result
