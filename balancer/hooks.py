"""Shell-command hooks around balancer runs.

Configured via balancer/hooks.yaml, one list of commands per hook point:

    post_balance:
      - notify-send "balanced"
      - command: ./sync.sh
        timeout: 10

Hook points:
- pre_balance, post_balance
- on_milestone_complete
- on_milestone_created
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from balancer.fileio import read_yaml
from balancer.workspace import hooks_config_path, workspace_root

logger = logging.getLogger(__name__)

VALID_HOOK_POINTS = {
    "pre_balance",
    "post_balance",
    "on_milestone_complete",
    "on_milestone_created",
}

DEFAULT_TIMEOUT = 30
OUTPUT_CAP = 4096


def load_hooks_config(root: Path | None = None) -> dict[str, Any]:
    return read_yaml(hooks_config_path(root))


def _hook_entries(raw: Any) -> list[tuple[str, float]]:
    """(command, timeout) pairs from a hook list; malformed entries are skipped."""
    if not isinstance(raw, list):
        return []
    entries = []
    for item in raw:
        if isinstance(item, str):
            command, timeout = item, DEFAULT_TIMEOUT
        elif isinstance(item, dict):
            command, timeout = item.get("command", ""), item.get("timeout", DEFAULT_TIMEOUT)
        else:
            continue
        if command:
            entries.append((str(command), timeout))
    return entries


def _run_hook(command: str, timeout: float, hook_point: str, payload: str, root: Path) -> dict[str, Any]:
    result: dict[str, Any] = {"command": command, "hook_point": hook_point}
    try:
        proc = subprocess.run(
            command,
            shell=True,
            cwd=str(root),
            input=payload,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning("Hook %r (%s) timed out after %ss", command, hook_point, timeout)
        return {**result, "exit_code": -1, "error": f"Hook timed out after {timeout}s"}
    except OSError as e:
        logger.error("Hook %r (%s) failed: %s", command, hook_point, e)
        return {**result, "exit_code": -1, "error": str(e)}

    if proc.returncode != 0:
        logger.warning("Hook %r (%s) exited with %d", command, hook_point, proc.returncode)
    return {
        **result,
        "exit_code": proc.returncode,
        "stdout": proc.stdout[:OUTPUT_CAP],
        "stderr": proc.stderr[:OUTPUT_CAP],
    }


def run_hooks(
    hook_point: str,
    context: dict[str, Any],
    root: Path | None = None,
) -> list[dict[str, Any]]:
    """Run every hook registered for hook_point, in order.

    Context is passed as JSON on stdin. A failing or hanging hook is
    recorded in its result entry and never aborts the caller.
    """
    if hook_point not in VALID_HOOK_POINTS:
        logger.warning("Ignoring unknown hook point %s", hook_point)
        return []
    if root is None:
        root = workspace_root()

    entries = _hook_entries(load_hooks_config(root).get(hook_point))
    if entries:
        logger.debug("Running %d %s hook(s)", len(entries), hook_point)
    payload = json.dumps(context, ensure_ascii=False)
    return [_run_hook(command, timeout, hook_point, payload, root) for command, timeout in entries]
