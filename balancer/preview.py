"""Day-by-day distribution preview for a milestone period."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from balancer.distribution import daily_target
from balancer.models import DailyDistribution, LinkedGoal, Milestone
from balancer.periods import date_range, remaining_days, to_date
from balancer.progress import day_actual


def _goals_by_day(linked_goals: Iterable[LinkedGoal]) -> dict[str, LinkedGoal]:
    """First goal due on each day wins."""
    by_day: dict[str, LinkedGoal] = {}
    for goal in linked_goals:
        day = goal.due_day
        if day and day not in by_day:
            by_day[day] = goal
    return by_day


def build_preview(
    milestone: Milestone,
    linked_goals: Iterable[LinkedGoal],
    today: date | None = None,
) -> list[DailyDistribution]:
    """Walk the whole period and show each day's target and actual.

    remaining_target and remaining_days are seeded once and then walked
    forward: every past day subtracts its actual and one day, so the targets
    shown for today onward follow from that simulated history rather than
    from a fresh recomputation per day. Past days carry target 0; today and
    later carry actual 0.
    """
    if today is None:
        today = date.today()
    today = to_date(today)

    by_day = _goals_by_day(linked_goals)
    remaining_target = max(0, milestone.target_value - milestone.current_value)
    days_left = remaining_days(milestone.period_end, today)

    distribution: list[DailyDistribution] = []
    future_index = 0
    for day in date_range(milestone.period_start, milestone.period_end):
        if to_date(day) < today:
            actual = day_actual(by_day.get(day))
            distribution.append(DailyDistribution(date=day, target=0, actual=actual))
            remaining_target = max(0, remaining_target - actual)
            days_left -= 1
            continue

        target = 0
        if days_left > 0:
            target = daily_target(milestone.strategy, remaining_target, days_left, future_index)
        distribution.append(DailyDistribution(date=day, target=target, actual=0))
        future_index += 1

    return distribution
