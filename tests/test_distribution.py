"""Tests for balancer/distribution.py — daily target strategies."""

import pytest

from balancer.distribution import (
    EVEN_DISTRIBUTION,
    FRONT_LOAD,
    MANUAL,
    daily_target,
    normalize_strategy,
)


@pytest.mark.parametrize("strategy", [EVEN_DISTRIBUTION, FRONT_LOAD, MANUAL, "Bogus"])
def test_nothing_left_or_no_days_gives_zero(strategy):
    assert daily_target(strategy, 0, 10, 0) == 0
    assert daily_target(strategy, -50, 10, 0) == 0
    assert daily_target(strategy, 100, 0, 0) == 0
    assert daily_target(strategy, 100, -3, 0) == 0


def test_even_split_scenarios():
    assert daily_target(EVEN_DISTRIBUTION, 3000, 28) == 108
    assert daily_target(EVEN_DISTRIBUTION, 1800, 14) == 129
    assert daily_target(EVEN_DISTRIBUTION, 100, 4) == 25


@pytest.mark.parametrize("remaining,days", [(1, 1), (7, 3), (100, 7), (3000, 28), (1, 30), (999, 31)])
def test_even_split_never_under_allocates(remaining, days):
    total = sum(daily_target(EVEN_DISTRIBUTION, remaining, days, i) for i in range(days))
    assert remaining <= total < remaining + days


def test_even_split_handles_fractional_remaining():
    assert daily_target(EVEN_DISTRIBUTION, 10.5, 2) == 6


def test_front_load_halves_each_day():
    # 2 days: weights 2 and 1 over 3
    assert daily_target(FRONT_LOAD, 300, 2, 0) == 200
    assert daily_target(FRONT_LOAD, 300, 2, 1) == 100
    # 3 days: weights 4, 2, 1 over 7
    assert daily_target(FRONT_LOAD, 70, 3, 0) == 40
    assert daily_target(FRONT_LOAD, 70, 3, 1) == 20
    assert daily_target(FRONT_LOAD, 70, 3, 2) == 10


def test_front_load_single_day_takes_everything():
    assert daily_target(FRONT_LOAD, 42, 1, 0) == 42


@pytest.mark.parametrize("remaining,days", [(100, 2), (3000, 28), (5, 10), (1, 60)])
def test_front_load_earlier_days_never_smaller(remaining, days):
    targets = [daily_target(FRONT_LOAD, remaining, days, i) for i in range(days)]
    assert targets[0] >= targets[-1]
    assert targets == sorted(targets, reverse=True)


def test_front_load_long_period_stays_exact():
    # 2^400 would overflow a float; the first day still gets just over half
    first = daily_target(FRONT_LOAD, 1000, 400, 0)
    assert first == 501
    assert daily_target(FRONT_LOAD, 1000, 400, 399) == 1


def test_front_load_index_past_window_gets_fractional_weight():
    assert daily_target(FRONT_LOAD, 70, 3, 5) == 2  # 70 * (1/8) / 7 = 1.25


@pytest.mark.parametrize("remaining,days,index", [(100, 10, 0), (1, 1, 0), (5000, 3, 2)])
def test_manual_is_inert(remaining, days, index):
    assert daily_target(MANUAL, remaining, days, index) == 0


def test_unknown_strategy_falls_back_to_even():
    assert daily_target("Whatever", 3000, 28) == 108


def test_normalize_strategy():
    assert normalize_strategy("FrontLoad") == FRONT_LOAD
    assert normalize_strategy("front_load") == FRONT_LOAD
    assert normalize_strategy("front-load") == FRONT_LOAD
    assert normalize_strategy("manual") == MANUAL
    assert normalize_strategy(None) == EVEN_DISTRIBUTION
    assert normalize_strategy("nonsense") == EVEN_DISTRIBUTION
