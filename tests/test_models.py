"""Tests for balancer/models.py."""

from balancer.models import (
    BalancerResult,
    BriefingStats,
    GoalsFile,
    LinkedGoal,
    Milestone,
    MilestonesFile,
)


def test_milestone_from_dict_camel_case():
    m = Milestone.from_dict({
        "id": "m1",
        "targetMetric": "Pushups",
        "targetValue": "3000",
        "currentValue": 250.0,
        "periodStart": "2026-02-01T00:00:00Z",
        "periodEnd": "2026-02-28T23:59:59Z",
        "strategy": "FrontLoad",
        "unit": "reps",
    })
    assert m.target_value == 3000
    assert isinstance(m.target_value, int)
    assert m.current_value == 250
    assert m.period_start == "2026-02-01"
    assert m.period_end == "2026-02-28"
    assert m.strategy == "FrontLoad"
    assert m.remaining_target == 2750


def test_milestone_snake_case_fallback_and_defaults():
    m = Milestone.from_dict({"target_metric": "Pages", "target_value": 100, "daily_amount": 5})
    assert m.target_metric == "Pages"
    assert m.strategy == "EvenDistribution"
    assert m.daily_amount == 5


def test_milestone_remaining_target_never_negative():
    assert Milestone(target_value=100, current_value=130).remaining_target == 0


def test_milestone_to_dict_omits_empty_optionals():
    d = Milestone(id="m1", target_metric="Pushups", target_value=10).to_dict()
    assert "label" not in d
    assert "dailyAmount" not in d
    assert d["targetMetric"] == "Pushups"


def test_milestones_file_ignores_garbage():
    assert MilestonesFile.from_dict(None).milestones == []
    mf = MilestonesFile.from_dict({"milestones": [{"id": "a"}, "nope"]})
    assert [m.id for m in mf.milestones] == ["a"]


def test_linked_goal_round_trip():
    data = {
        "id": "g1",
        "text": "Pushups",
        "completed": True,
        "metrics": [{"label": "Pushups", "current": 40, "target": 50}],
        "dueDate": "2026-02-03T00:00:00Z",
        "parentGoalId": "m1",
    }
    goal = LinkedGoal.from_dict(data)
    assert goal.due_day == "2026-02-03"
    assert goal.find_metric("Pushups").current == 40
    assert goal.find_metric("Squats") is None
    assert LinkedGoal.from_dict(goal.to_dict()) == goal


def test_goals_file_empty():
    assert GoalsFile.from_dict({}).goals == []


def test_balancer_result_dict():
    result = BalancerResult(milestone_id="m1", daily_target=107, updated_goals=2, message="ok")
    assert result.daily_required == 107
    assert result.to_dict() == {
        "milestoneId": "m1",
        "dailyTarget": 107,
        "dailyRequired": 107,
        "updatedGoals": 2,
        "message": "ok",
    }


def test_briefing_stats_dict():
    stats = BriefingStats(total_milestones=3, milestones_on_track=2, milestones_behind=1)
    assert stats.to_dict() == {"totalMilestones": 3, "milestonesOnTrack": 2, "milestonesBehind": 1}


def test_unquoted_yaml_timestamps_become_dates():
    import yaml

    data = yaml.safe_load(
        "id: m1\n"
        "targetMetric: Pushups\n"
        "targetValue: 3000\n"
        "periodStart: 2026-02-01T00:00:00Z\n"
        "periodEnd: 2026-02-28\n"
        "createdAt: 2026-01-31T08:00:00Z\n"
    )
    m = Milestone.from_dict(data)
    assert m.period_start == "2026-02-01"
    assert m.period_end == "2026-02-28"
    assert m.created_at.startswith("2026-01-31T08:00:00")


def test_unquoted_yaml_due_date():
    import yaml

    goal = LinkedGoal.from_dict(yaml.safe_load("id: g1\ndueDate: 2026-02-03T00:00:00Z\n"))
    assert goal.due_day == "2026-02-03"
