from __future__ import annotations

import logging
import os
import secrets
from datetime import date
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Query, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from balancer import (
    build_preview,
    configure_logging,
    create_goal,
    create_milestone,
    delete_goal,
    delete_milestone,
    estimate_completion_date,
    find_milestone,
    get_daily_briefing,
    goals_for_milestone,
    load_goals,
    load_last_runs,
    load_milestones,
    load_settings,
    needs_redistribution,
    normalize_strategy,
    progress_percent,
    remaining_days,
    run_balancer,
    run_hooks,
    save_goals,
    save_milestones,
    schedule_status,
    store_lock,
    to_date,
    today_local,
    todays_target,
    update_goal,
    update_milestone,
    workspace_root as _workspace_root,
)

configure_logging(load_settings())
logger = logging.getLogger(__name__)

app = FastAPI(title="Milestone Balancer", version="0.1.0")

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("BALANCER_USERNAME", "")
    expected_password = os.environ.get("BALANCER_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


def _parse_day(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return to_date(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid date: {value}")


def _load_milestone_or_404(milestone_id: str):
    root = _workspace_root()
    milestone = find_milestone(load_milestones(root), milestone_id)
    if milestone is None:
        raise HTTPException(status_code=404, detail=f"Milestone not found: {milestone_id}")
    linked = goals_for_milestone(load_goals(root), milestone_id)
    return milestone, linked


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


# ── Milestones ────────────────────────────────────────────────

@app.get("/api/milestones")
def api_list_milestones(username: str = Depends(get_current_user)) -> dict[str, Any]:
    """List milestones with display progress and the last balancer run."""
    root = _workspace_root()
    runs = load_last_runs(root)
    out = []
    for m in load_milestones(root).milestones:
        d = m.to_dict()
        d["progressPercent"] = progress_percent(m.current_value, m.target_value)
        d["lastRun"] = runs.get(m.id)
        out.append(d)
    return {"milestones": out}


@app.post("/api/milestones")
def api_create_milestone(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    settings = load_settings(root)
    if "strategy" in payload:
        payload["strategy"] = normalize_strategy(payload["strategy"])
    with store_lock(root):
        milestones_file = load_milestones(root)
        milestone, errors = create_milestone(milestones_file, payload, settings.default_strategy, root)
        if errors:
            raise HTTPException(status_code=400, detail="; ".join(errors))
        save_milestones(milestones_file, root)
    run_hooks("on_milestone_created", milestone.to_dict(), root)
    return {"ok": True, "milestone": milestone.to_dict()}


@app.get("/api/milestones/{milestone_id}")
def api_get_milestone(milestone_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    milestone, linked = _load_milestone_or_404(milestone_id)
    return {"milestone": milestone.to_dict(), "goals": [g.to_dict() for g in linked]}


@app.put("/api/milestones/{milestone_id}")
def api_update_milestone(milestone_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    if "strategy" in payload:
        payload["strategy"] = normalize_strategy(payload["strategy"])
    with store_lock(root):
        milestones_file = load_milestones(root)
        updated, errors = update_milestone(milestones_file, milestone_id, payload, root)
        if errors:
            code = 404 if updated is None and any("not found" in e for e in errors) else 400
            raise HTTPException(status_code=code, detail="; ".join(errors))
        save_milestones(milestones_file, root)
    return {"ok": True, "milestone": updated.to_dict() if updated else None}


@app.delete("/api/milestones/{milestone_id}")
def api_delete_milestone(milestone_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    with store_lock(root):
        milestones_file = load_milestones(root)
        if not delete_milestone(milestones_file, milestone_id):
            raise HTTPException(status_code=404, detail=f"Milestone not found: {milestone_id}")
        save_milestones(milestones_file, root)
    return {"ok": True, "milestone_id": milestone_id}


@app.get("/api/milestones/{milestone_id}/preview")
def api_preview(
    milestone_id: str,
    day: str | None = Query(default=None, alias="date"),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Day-by-day target/actual table for the whole period."""
    milestone, linked = _load_milestone_or_404(milestone_id)
    today = _parse_day(day) or today_local()
    rows = build_preview(milestone, linked, today)
    return {"milestoneId": milestone_id, "date": today.isoformat(), "distribution": [r.to_dict() for r in rows]}


@app.get("/api/milestones/{milestone_id}/status")
def api_status(
    milestone_id: str,
    day: str | None = Query(default=None, alias="date"),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Schedule status, today's target, completion estimate and drift check."""
    root = _workspace_root()
    settings = load_settings(root)
    milestone, linked = _load_milestone_or_404(milestone_id)
    today = _parse_day(day) or today_local(root)
    days_left = remaining_days(milestone.period_end, today)
    return {
        "milestoneId": milestone_id,
        "date": today.isoformat(),
        "status": schedule_status(
            milestone.current_value,
            milestone.target_value,
            milestone.period_start,
            milestone.period_end,
            today,
            settings.status_band_percent,
        ),
        "progressPercent": progress_percent(milestone.current_value, milestone.target_value),
        "remainingDays": days_left,
        "remainingTarget": milestone.remaining_target,
        "dailyTarget": todays_target(milestone, milestone.current_value, today),
        "estimatedCompletion": estimate_completion_date(
            milestone.current_value, milestone.target_value, milestone.period_start, today
        ),
        "needsRedistribution": needs_redistribution(milestone, linked, settings.redistribution_threshold),
    }


@app.post("/api/milestones/{milestone_id}/balance")
def api_run_balancer(
    milestone_id: str,
    payload: dict[str, Any] = Body(default={}),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Run the balancer; {"onlyIfDrifted": true} skips milestones within the threshold."""
    root = _workspace_root()
    if find_milestone(load_milestones(root), milestone_id) is None:
        raise HTTPException(status_code=404, detail=f"Milestone not found: {milestone_id}")
    try:
        result = run_balancer(
            milestone_id,
            root=root,
            today=_parse_day(payload.get("date")),
            only_if_drifted=bool(payload.get("onlyIfDrifted", False)),
        )
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"ok": True, "result": result.to_dict()}


# ── Linked goals ──────────────────────────────────────────────

@app.get("/api/goals")
def api_list_goals(
    milestone_id: str | None = Query(default=None, alias="milestoneId"),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    goals_file = load_goals(_workspace_root())
    goals = goals_for_milestone(goals_file, milestone_id) if milestone_id else goals_file.goals
    return {"goals": [g.to_dict() for g in goals]}


@app.post("/api/goals")
def api_create_goal(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    with store_lock(root):
        goals_file = load_goals(root)
        goal, errors = create_goal(goals_file, payload, root)
        if errors:
            raise HTTPException(status_code=400, detail="; ".join(errors))
        save_goals(goals_file, root)
    return {"ok": True, "goal": goal.to_dict()}


@app.put("/api/goals/{goal_id}")
def api_update_goal(goal_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    with store_lock(root):
        goals_file = load_goals(root)
        updated, errors = update_goal(goals_file, goal_id, payload, root)
        if errors:
            code = 404 if updated is None and any("not found" in e for e in errors) else 400
            raise HTTPException(status_code=code, detail="; ".join(errors))
        save_goals(goals_file, root)
    return {"ok": True, "goal": updated.to_dict() if updated else None}


@app.delete("/api/goals/{goal_id}")
def api_delete_goal(goal_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = _workspace_root()
    with store_lock(root):
        goals_file = load_goals(root)
        if not delete_goal(goals_file, goal_id):
            raise HTTPException(status_code=404, detail=f"Goal not found: {goal_id}")
        save_goals(goals_file, root)
    return {"ok": True, "goal_id": goal_id}


# ── Briefing ──────────────────────────────────────────────────

@app.get("/api/briefing")
def api_briefing(
    day: str | None = Query(default=None, alias="date"),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Active milestones for a day with on-track/behind counts."""
    return get_daily_briefing(_parse_day(day), _workspace_root())
