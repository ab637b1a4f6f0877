"""Tests for balancer/periods.py — inclusive calendar arithmetic."""

from datetime import date, datetime

import pytest

from balancer.periods import (
    current_month_period,
    date_range,
    format_month,
    is_in_period,
    remaining_days,
    to_date,
    total_days,
)


def test_to_date_strips_time_component():
    assert to_date("2026-02-01T23:59:00Z") == date(2026, 2, 1)
    assert to_date(datetime(2026, 2, 1, 18, 30)) == date(2026, 2, 1)
    assert to_date(date(2026, 2, 1)) == date(2026, 2, 1)


def test_to_date_malformed():
    with pytest.raises(ValueError):
        to_date("not-a-date")


def test_total_days_inclusive():
    assert total_days("2026-02-01", "2026-02-28") == 28
    assert total_days("2026-02-01T00:00:00Z", "2026-02-28T00:00:00Z") == 28


def test_total_days_single_day():
    assert total_days("2026-02-10", "2026-02-10") == 1


def test_remaining_days_counts_today():
    assert remaining_days("2026-02-28", today=date(2026, 2, 1)) == 28
    assert remaining_days("2026-02-28", today=date(2026, 2, 15)) == 14
    assert remaining_days("2026-02-28", today=date(2026, 2, 28)) == 1


def test_remaining_days_after_period_is_zero():
    assert remaining_days("2026-02-28", today=date(2026, 3, 5)) == 0


def test_date_range_inclusive_and_restartable():
    rng = date_range("2026-02-27", "2026-03-02")
    expected = ["2026-02-27", "2026-02-28", "2026-03-01", "2026-03-02"]
    assert list(rng) == expected
    assert list(rng) == expected  # second pass yields the same days
    assert len(rng) == 4


def test_date_range_single_day():
    assert list(date_range("2026-02-10", "2026-02-10")) == ["2026-02-10"]


def test_date_range_membership():
    rng = date_range("2026-02-01", "2026-02-28")
    assert "2026-02-14" in rng
    assert "2026-03-01" not in rng


def test_is_in_period_inclusive():
    assert is_in_period("2026-02-01", "2026-02-01", "2026-02-28")
    assert is_in_period("2026-02-28T12:00:00Z", "2026-02-01", "2026-02-28")
    assert not is_in_period("2026-01-31", "2026-02-01", "2026-02-28")
    assert not is_in_period("2026-03-01", "2026-02-01", "2026-02-28")


def test_current_month_period():
    assert current_month_period(date(2026, 2, 14)) == ("2026-02-01", "2026-02-28")
    assert current_month_period(date(2028, 2, 1)) == ("2028-02-01", "2028-02-29")


def test_format_month():
    assert format_month("2026-02") == "February 2026"
