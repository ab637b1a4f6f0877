"""Daily target distribution strategies.

Given what is left of a milestone and how many days remain, decide how much
should be done on one of those days.
"""

from __future__ import annotations

import math
from fractions import Fraction

EVEN_DISTRIBUTION = "EvenDistribution"
FRONT_LOAD = "FrontLoad"
MANUAL = "Manual"

VALID_STRATEGIES = {EVEN_DISTRIBUTION, FRONT_LOAD, MANUAL}

_STRATEGY_ALIASES = {
    "even": EVEN_DISTRIBUTION,
    "evendistribution": EVEN_DISTRIBUTION,
    "even_distribution": EVEN_DISTRIBUTION,
    "frontload": FRONT_LOAD,
    "front_load": FRONT_LOAD,
    "manual": MANUAL,
}


def normalize_strategy(value: str | None) -> str:
    """Map user input ('front_load', 'Manual', None, ...) to a strategy tag.

    Unknown or empty values fall back to EvenDistribution.
    """
    if not value:
        return EVEN_DISTRIBUTION
    s = str(value).strip()
    if s in VALID_STRATEGIES:
        return s
    return _STRATEGY_ALIASES.get(s.lower().replace("-", "_"), EVEN_DISTRIBUTION)


def even_target(remaining_target: float, remaining_days: int) -> int:
    return math.ceil(Fraction(remaining_target) / remaining_days)


def front_load_target(remaining_target: float, remaining_days: int, day_index: int) -> int:
    """Exponential decay: day i weighs 2^(remaining_days - i - 1).

    The weights for days 0..remaining_days-1 sum to 2^remaining_days - 1.
    Exact rational arithmetic keeps long periods from overflowing.
    """
    weight = Fraction(2) ** (remaining_days - day_index - 1)
    total_weight = 2 ** remaining_days - 1
    return math.ceil(Fraction(remaining_target) * weight / total_weight)


def daily_target(
    strategy: str,
    remaining_target: float,
    remaining_days: int,
    day_index: int = 0,
) -> int:
    """Target for the day at day_index (0 = first remaining day).

    Returns 0 when there is nothing left to do, no day left to do it in,
    or the strategy is Manual (the user's daily_amount applies instead).
    """
    if remaining_days <= 0 or remaining_target <= 0:
        return 0

    if strategy == MANUAL:
        return 0
    if strategy == FRONT_LOAD:
        return front_load_target(remaining_target, remaining_days, day_index)
    return even_target(remaining_target, remaining_days)
