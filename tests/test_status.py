"""Tests for balancer/status.py — schedule status and completion estimates."""

from datetime import date

import pytest

from balancer.status import (
    AHEAD,
    BEHIND,
    ON_TRACK,
    elapsed_days,
    estimate_completion_date,
    schedule_status,
    velocity,
)

START = "2026-02-01"
END = "2026-02-28"
MID = date(2026, 2, 15)  # 14 of 28 days elapsed


def test_exactly_on_pace_is_on_track():
    assert schedule_status(1500, 3000, START, END, today=MID) == ON_TRACK


def test_beyond_band_is_ahead_or_behind():
    assert schedule_status(1500 + 3000 * 0.11, 3000, START, END, today=MID) == AHEAD
    assert schedule_status(1500 - 3000 * 0.11, 3000, START, END, today=MID) == BEHIND


def test_within_band_is_on_track():
    assert schedule_status(1500 + 3000 * 0.09, 3000, START, END, today=MID) == ON_TRACK
    assert schedule_status(1500 - 3000 * 0.09, 3000, START, END, today=MID) == ON_TRACK


def test_custom_band():
    assert schedule_status(1500 + 3000 * 0.06, 3000, START, END, today=MID, band_percent=5) == AHEAD


@pytest.mark.parametrize("current", [0, 10, 2999, 100000])
def test_first_day_is_always_on_track(current):
    assert schedule_status(current, 3000, START, END, today=date(2026, 2, 1)) == ON_TRACK


def test_before_period_is_on_track():
    assert schedule_status(0, 3000, START, END, today=date(2026, 1, 20)) == ON_TRACK


def test_after_period_expects_full_target():
    assert schedule_status(3000, 3000, START, END, today=date(2026, 3, 10)) == ON_TRACK
    assert schedule_status(2000, 3000, START, END, today=date(2026, 3, 10)) == BEHIND


def test_velocity():
    assert velocity(500, 10) == 50
    assert velocity(500, 0) == 0


def test_elapsed_days():
    assert elapsed_days(START, date(2026, 2, 11)) == 10
    assert elapsed_days("2026-02-01T00:00:00Z", date(2026, 2, 1)) == 0


def test_estimate_without_progress_is_none():
    assert estimate_completion_date(0, 100, START, today=date(2026, 2, 10)) is None


def test_estimate_on_first_day_is_none():
    assert estimate_completion_date(50, 100, START, today=date(2026, 2, 1)) is None


def test_estimate_extrapolates_past_period_end():
    # 500 in 10 days -> 50/day -> 2500 more takes 50 days
    assert estimate_completion_date(500, 3000, START, today=date(2026, 2, 11)) == "2026-04-02"


def test_estimate_fast_pace_finishes_early():
    # 1500 in 10 days -> 150/day -> 1500 more takes 10 days
    assert estimate_completion_date(1500, 3000, START, today=date(2026, 2, 11)) == "2026-02-21"
