#!/usr/bin/env python3
"""Milestone Balancer TUI — milestones, daily previews and balancer runs, powered by Textual."""

from __future__ import annotations

import logging
import sys

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.logging import TextualHandler
from textual.widgets import DataTable, Footer, Header, Label, Static

from balancer import (
    AHEAD,
    BEHIND,
    build_preview,
    configure_logging,
    estimate_completion_date,
    format_month,
    goals_for_milestone,
    load_goals,
    load_milestones,
    load_settings,
    needs_redistribution,
    progress_percent,
    run_balancer,
    schedule_status,
    today_local,
    workspace_root,
)

logger = logging.getLogger(__name__)


CSS = """
Screen {
    layout: vertical;
}

#main-layout {
    height: 1fr;
}

#left-pane {
    width: 1fr;
    min-width: 40;
    border-right: solid $primary-background;
    padding: 0 1;
}

#right-pane {
    width: 1fr;
    padding: 0 1;
}

.section-title {
    text-style: bold;
    color: $accent;
    margin: 1 0 0 0;
}

#milestone-info {
    height: auto;
    margin: 0 0 1 0;
    color: $text-muted;
}
"""


_STATUS_MARK = {AHEAD: "▲ ahead", BEHIND: "▼ behind"}


class BalancerApp(App):
    """Milestone Balancer — interactive terminal view."""

    TITLE = "Milestone Balancer"
    CSS = CSS

    BINDINGS = [
        Binding("b", "run_balancer", "Balance"),
        Binding("r", "refresh", "Refresh"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._root = workspace_root()
        self._milestone_ids: list[str] = []
        self._selected: str | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Vertical(
                Label("Milestones", classes="section-title"),
                DataTable(id="milestone-table", cursor_type="row"),
                id="left-pane",
            ),
            Vertical(
                Label("Distribution", classes="section-title"),
                Static(id="milestone-info"),
                DataTable(id="preview-table"),
                id="right-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#milestone-table", DataTable)
        table.add_columns("Metric", "Progress", "Strategy", "Period", "Status")
        preview = self.query_one("#preview-table", DataTable)
        preview.add_columns("Date", "Target", "Actual")
        self._load_data()

    def _load_data(self) -> None:
        """Reload milestones and rebuild the left table."""
        settings = load_settings(self._root)
        today = today_local(self._root)
        self.sub_title = f"{format_month(today.isoformat()[:7])} — today {today.isoformat()}"

        table = self.query_one("#milestone-table", DataTable)
        table.clear()
        self._milestone_ids = []
        for m in load_milestones(self._root).milestones:
            status = schedule_status(
                m.current_value, m.target_value, m.period_start, m.period_end,
                today, settings.status_band_percent,
            )
            pct = progress_percent(m.current_value, m.target_value)
            table.add_row(
                m.label or m.target_metric,
                f"{m.current_value}/{m.target_value} ({pct}%)",
                m.strategy,
                f"{m.period_start} → {m.period_end}",
                _STATUS_MARK.get(status, "● on-track"),
                key=m.id,
            )
            self._milestone_ids.append(m.id)

        if self._selected not in self._milestone_ids:
            self._selected = self._milestone_ids[0] if self._milestone_ids else None
        self._show_preview()

    def _show_preview(self) -> None:
        info = self.query_one("#milestone-info", Static)
        preview = self.query_one("#preview-table", DataTable)
        preview.clear()

        if self._selected is None:
            info.update("(no milestones yet)")
            return

        milestone = next(
            (m for m in load_milestones(self._root).milestones if m.id == self._selected), None
        )
        if milestone is None:
            info.update("(milestone not found)")
            return

        settings = load_settings(self._root)
        today = today_local(self._root)
        linked = goals_for_milestone(load_goals(self._root), milestone.id)
        eta = estimate_completion_date(
            milestone.current_value, milestone.target_value, milestone.period_start, today
        )
        lines = [
            f"{milestone.target_metric}: {milestone.current_value}/{milestone.target_value}"
            + (f" {milestone.unit}" if milestone.unit else ""),
            f"Estimated completion: {eta or 'n/a'}",
        ]
        if needs_redistribution(milestone, linked, settings.redistribution_threshold):
            lines.append("Logged progress has drifted; press b to rebalance.")
        info.update("\n".join(lines))

        today_str = today.isoformat()
        for row in build_preview(milestone, linked, today):
            marker = " ◀" if row.date == today_str else ""
            preview.add_row(f"{row.date}{marker}", str(row.target), str(row.actual))

    @on(DataTable.RowHighlighted, "#milestone-table")
    def _on_milestone_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if event.row_key is None or event.row_key.value == self._selected:
            return
        self._selected = event.row_key.value
        self._show_preview()

    def action_refresh(self) -> None:
        self._load_data()

    def action_run_balancer(self) -> None:
        if self._selected is None:
            self.notify("No milestone selected", severity="warning")
            return
        self._do_balance(self._selected)

    @work(thread=True)
    def _do_balance(self, milestone_id: str) -> None:
        """Run the balancer in a worker thread and report the result."""
        try:
            result = run_balancer(milestone_id, root=self._root)
        except ValueError as e:
            logger.warning("Balancer run for %s failed: %s", milestone_id, e)
            self.call_from_thread(self.notify, str(e), title="Balancer", severity="warning")
            return
        self.call_from_thread(self.notify, result.message, title="Balancer", severity="information")
        self.call_from_thread(self._load_data)


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    if not root.exists():
        print(f"Workspace not found: {root}")
        print("Set BALANCER_ROOT to a directory containing balancer/milestones.yaml.")
        sys.exit(1)

    configure_logging(load_settings(root), handlers=[TextualHandler()])
    BalancerApp().run()


if __name__ == "__main__":
    main()
