"""Workspace root, timezone and path helpers."""

from __future__ import annotations

import os
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from balancer.fileio import read_yaml


def workspace_root() -> Path:
    """Get the workspace root directory (contains balancer/)."""
    return Path(
        os.environ.get("BALANCER_ROOT", str(Path.home() / "balancer"))
    ).expanduser().resolve()


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Get the user's timezone from config.yaml, defaulting to UTC."""
    config = read_yaml(config_path(root))
    name = config.get("timezone")
    if name:
        try:
            return ZoneInfo(str(name))
        except (ZoneInfoNotFoundError, ValueError):
            pass
    return ZoneInfo("UTC")


def today_local(root: Path | None = None) -> date:
    """Today's calendar date in the user's timezone."""
    return datetime.now(get_user_timezone(root)).date()


def now_local(root: Path | None = None) -> datetime:
    return datetime.now(get_user_timezone(root))


# ── Path helpers ──────────────────────────────────────────────

def config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "balancer" / "config.yaml"


def milestones_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "balancer" / "milestones.yaml"


def goals_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "balancer" / "goals.yaml"


def hooks_config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "balancer" / "hooks.yaml"


def store_lock_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "balancer" / ".store.lock"


def last_runs_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "balancer" / "latest" / "balancer_runs.json"
