"""Schedule status, velocity and completion-date estimation."""

from __future__ import annotations

import math
from datetime import date, timedelta

from balancer.periods import DateLike, remaining_days, to_date, total_days

AHEAD = "ahead"
ON_TRACK = "on-track"
BEHIND = "behind"


def schedule_status(
    current: float,
    target: float,
    period_start: DateLike,
    period_end: DateLike,
    today: date | None = None,
    band_percent: float = 10.0,
) -> str:
    """Compare progress with the linear expectation at today's point in the period.

    Deviation is measured in percent of the whole target; anything within
    +/- band_percent is on-track. Before any day has elapsed the answer is
    always on-track.
    """
    total = total_days(period_start, period_end)
    elapsed = total - remaining_days(period_end, today)
    if elapsed <= 0 or target <= 0:
        return ON_TRACK

    expected = target * elapsed / total
    deviation = (current - expected) / target * 100

    if deviation > band_percent:
        return AHEAD
    if deviation < -band_percent:
        return BEHIND
    return ON_TRACK


def velocity(current: float, elapsed_days: int) -> float:
    """Average progress per elapsed day; 0 before any day has elapsed."""
    if elapsed_days == 0:
        return 0
    return current / elapsed_days


def elapsed_days(period_start: DateLike, today: date | None = None) -> int:
    if today is None:
        today = date.today()
    return (to_date(today) - to_date(period_start)).days


def estimate_completion_date(
    current: float,
    target: float,
    period_start: DateLike,
    today: date | None = None,
) -> str | None:
    """Project when target is reached at the current pace.

    Linear extrapolation from today; the result may fall after the period
    end. None when there is no pace to extrapolate from.
    """
    if current == 0:
        return None
    if today is None:
        today = date.today()

    days = elapsed_days(period_start, today)
    if days <= 0:
        return None

    days_to_complete = math.ceil((target - current) / velocity(current, days))
    return (to_date(today) + timedelta(days=days_to_complete)).isoformat()
