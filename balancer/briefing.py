"""Daily briefing: where every active milestone stands on a given day."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any

from balancer.config import load_settings
from balancer.distribution import MANUAL, daily_target
from balancer.models import BriefingStats, LinkedGoal, Milestone, MilestoneBriefing
from balancer.periods import is_in_period, remaining_days, to_date
from balancer.progress import aggregate_completed, progress_percent
from balancer.status import BEHIND, estimate_completion_date, schedule_status
from balancer.store import goals_for_milestone, load_goals, load_milestones
from balancer.workspace import today_local, workspace_root

logger = logging.getLogger(__name__)


def todays_target(milestone: Milestone, current: float, today: date) -> float:
    """Manual milestones use their fixed daily_amount; the others ask the engine."""
    if milestone.strategy == MANUAL:
        return milestone.daily_amount or 0
    return daily_target(
        milestone.strategy,
        milestone.target_value - current,
        remaining_days(milestone.period_end, today),
    )


def brief_milestone(
    milestone: Milestone,
    linked_goals: list[LinkedGoal],
    today: date,
    band_percent: float = 10.0,
) -> MilestoneBriefing:
    """Summarize one milestone from the progress actually logged on its goals."""
    current = aggregate_completed(linked_goals)
    return MilestoneBriefing(
        milestone_id=milestone.id,
        target_metric=milestone.target_metric,
        current_value=current,
        target_value=milestone.target_value,
        progress_percent=progress_percent(current, milestone.target_value),
        daily_target=todays_target(milestone, current, today),
        status=schedule_status(
            current,
            milestone.target_value,
            milestone.period_start,
            milestone.period_end,
            today,
            band_percent,
        ),
        estimated_completion=estimate_completion_date(
            current, milestone.target_value, milestone.period_start, today
        ),
    )


def get_daily_briefing(local_date: str | date | None = None, root: Path | None = None) -> dict[str, Any]:
    """Briefing for every milestone whose period contains local_date."""
    if root is None:
        root = workspace_root()
    day = to_date(local_date) if local_date else today_local(root)
    settings = load_settings(root)

    goals_file = load_goals(root)
    active = [
        m for m in load_milestones(root).milestones
        if is_in_period(day, m.period_start, m.period_end)
    ]
    active.sort(key=lambda m: m.period_start)

    briefings = [
        brief_milestone(m, goals_for_milestone(goals_file, m.id), day, settings.status_band_percent)
        for m in active
    ]
    behind = sum(1 for b in briefings if b.status == BEHIND)
    stats = BriefingStats(
        total_milestones=len(briefings),
        milestones_on_track=len(briefings) - behind,
        milestones_behind=behind,
    )
    logger.debug("Briefing for %s: %d active milestones, %d behind", day, len(briefings), behind)

    return {
        "date": day.isoformat(),
        "milestones": [b.to_dict() for b in briefings],
        "stats": stats.to_dict(),
    }
