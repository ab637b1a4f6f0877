"""Milestone balancer — daily target distribution for period-scoped goals.

Public API re-exports for convenient imports:
    from balancer import daily_target, build_preview, needs_redistribution, ...
"""

# Workspace & config
from balancer.workspace import (
    workspace_root,
    store_lock_path,
    get_user_timezone,
    today_local,
    now_local,
    config_path,
    milestones_path,
    goals_path,
    hooks_config_path,
    last_runs_path,
)
from balancer.config import Settings, load_settings, configure_logging

# Period arithmetic
from balancer.periods import (
    DateRange,
    to_date,
    total_days,
    remaining_days,
    date_range,
    is_in_period,
    current_month_period,
    format_month,
)

# Progress
from balancer.progress import aggregate_completed, day_actual, progress_percent

# Distribution strategies
from balancer.distribution import (
    EVEN_DISTRIBUTION,
    FRONT_LOAD,
    MANUAL,
    VALID_STRATEGIES,
    daily_target,
    normalize_strategy,
)

# Status & estimation
from balancer.status import (
    AHEAD,
    ON_TRACK,
    BEHIND,
    schedule_status,
    velocity,
    elapsed_days,
    estimate_completion_date,
)

# Preview
from balancer.preview import build_preview

# Redistribution
from balancer.redistribution import needs_redistribution, run_balancer, load_last_runs

# Briefing
from balancer.briefing import brief_milestone, get_daily_briefing, todays_target

# Store
from balancer.store import (
    validate_milestone,
    validate_goal,
    load_milestones,
    save_milestones,
    find_milestone,
    create_milestone,
    update_milestone,
    delete_milestone,
    load_goals,
    save_goals,
    find_goal,
    goals_for_milestone,
    create_goal,
    update_goal,
    delete_goal,
    store_lock,
)

# Hooks
from balancer.hooks import run_hooks

# Models
from balancer.models import (
    GoalMetric,
    LinkedGoal,
    GoalsFile,
    Milestone,
    MilestonesFile,
    DailyDistribution,
    BalancerResult,
    MilestoneBriefing,
    BriefingStats,
)
