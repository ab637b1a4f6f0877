"""Shared test fixtures for balancer tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with config, milestones and linked goals."""
    root = tmp_path / "workspace"
    (root / "balancer" / "latest").mkdir(parents=True)

    config = {
        "timezone": "UTC",
        "redistribution_threshold": 0.1,
        "status_band_percent": 10,
        "default_strategy": "EvenDistribution",
        "log_level": "DEBUG",
    }
    (root / "balancer" / "config.yaml").write_text(
        yaml.dump(config, default_flow_style=False), encoding="utf-8"
    )

    milestones = {
        "milestones": [
            {
                "id": "pushups-feb",
                "targetMetric": "Pushups",
                "targetValue": 3000,
                "currentValue": 0,
                "periodStart": "2026-02-01T00:00:00Z",
                "periodEnd": "2026-02-28T00:00:00Z",
                "strategy": "EvenDistribution",
                "unit": "reps",
            },
            {
                "id": "pages-feb",
                "targetMetric": "Pages",
                "targetValue": 300,
                "currentValue": 0,
                "periodStart": "2026-02-01",
                "periodEnd": "2026-02-28",
                "strategy": "Manual",
                "dailyAmount": 10,
            },
        ],
    }
    (root / "balancer" / "milestones.yaml").write_text(
        yaml.dump(milestones, default_flow_style=False, sort_keys=False), encoding="utf-8"
    )

    goals = {
        "goals": [
            {
                "id": "pushups-0201",
                "text": "Pushups",
                "completed": True,
                "metrics": [{"label": "Pushups", "current": 100, "target": 108}],
                "dueDate": "2026-02-01T00:00:00Z",
                "parentGoalId": "pushups-feb",
            },
            {
                "id": "pushups-0202",
                "text": "Pushups",
                "completed": True,
                "metrics": [{"label": "Pushups", "current": 120, "target": 108}],
                "dueDate": "2026-02-02T00:00:00Z",
                "parentGoalId": "pushups-feb",
            },
            {
                "id": "pushups-0203",
                "text": "Pushups",
                "completed": False,
                "metrics": [{"label": "Pushups", "current": 0, "target": 108}],
                "dueDate": "2026-02-03T00:00:00Z",
                "parentGoalId": "pushups-feb",
            },
            {
                "id": "pushups-0204",
                "text": "Pushups",
                "completed": False,
                "metrics": [],
                "dueDate": "2026-02-04",
                "parentGoalId": "pushups-feb",
            },
            {
                "id": "read-0201",
                "text": "Read",
                "completed": True,
                "metrics": [],
                "dueDate": "2026-02-01",
                "parentGoalId": "pages-feb",
            },
        ],
    }
    (root / "balancer" / "goals.yaml").write_text(
        yaml.dump(goals, default_flow_style=False, sort_keys=False), encoding="utf-8"
    )

    os.environ["BALANCER_ROOT"] = str(root)
    yield root
    if "BALANCER_ROOT" in os.environ:
        del os.environ["BALANCER_ROOT"]
