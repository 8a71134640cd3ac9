"""Display and formatting service for command results"""
import dataclasses
import json
from typing import Any, List, Literal, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from workbox.constants import CLI_COLORS, LEGEND_TEXT, LIST_COLUMNS, STATUS_COLUMNS
from workbox.formatters import (
    format_branch,
    format_changes,
    format_clean,
    format_state,
    get_worktree_style_type,
)
from workbox.models.bootstrap import CommandResult
from workbox.models.worktree import WorktreeRecord, WorktreeStatus

console = Console()
err_console = Console(stderr=True)

OutputMode = Literal["text", "json"]


def to_jsonable(value: Any) -> Any:
    """Convert dataclasses (and containers of them) into plain JSON data."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


class DisplayService:
    def __init__(self, mode: OutputMode = "text", show_legend: bool = False):
        self.mode = mode
        self.show_legend = show_legend

    def render_result(self, command: str, result: CommandResult) -> None:
        """Print a command result to stdout."""
        if self.mode == "json":
            payload = {
                "ok": True,
                "command": command,
                "message": result.message,
                "data": to_jsonable(result.data),
            }
            console.out(json.dumps(payload, indent=2), highlight=False)
            return

        rows = result.data if isinstance(result.data, list) else None
        if rows and all(isinstance(row, WorktreeStatus) for row in rows):
            self.display_status_table(rows)
        elif rows and all(isinstance(row, WorktreeRecord) for row in rows):
            self.display_worktree_table(rows)
        elif result.message.strip():
            console.print(result.message, markup=False, highlight=False)

    def render_help(self, help_text: str, command: Optional[str] = None) -> None:
        if self.mode == "json":
            payload = {"ok": True, "command": command, "help": help_text}
            console.out(json.dumps(payload, indent=2), highlight=False)
        else:
            console.print(help_text, markup=False, highlight=False)

    def render_error(self, message: str) -> None:
        """Print an error to stderr."""
        if self.mode == "json":
            payload = {"ok": False, "message": f"Error: {message}", "errors": [message]}
            err_console.out(json.dumps(payload, indent=2), highlight=False)
        else:
            err_console.print(f"[red]Error: {escape(message)}[/red]")

    def display_worktree_table(self, records: List[WorktreeRecord]) -> None:
        """Display a table of worktrees."""
        table = Table()
        for col in LIST_COLUMNS:
            table.add_column(col.label, min_width=col.width or None)

        for record in records:
            row_style = CLI_COLORS.get(get_worktree_style_type(record))
            cells = {
                "name": record.name,
                "branch": format_branch(record.branch),
                "state": format_state(record.managed),
                "path": record.path,
            }
            table.add_row(*(cells[col.key] for col in LIST_COLUMNS), style=row_style)

        console.print(table)

    def display_status_table(self, statuses: List[WorktreeStatus]) -> None:
        """Display a table of worktree statuses."""
        table = Table()
        for col in STATUS_COLUMNS:
            table.add_column(col.label, min_width=col.width or None)

        for status in statuses:
            row_style = CLI_COLORS.get(get_worktree_style_type(status))
            cells = {
                "name": status.name,
                "clean": format_clean(status.clean, status.missing),
                "changes": format_changes(status),
                "branch": format_branch(status.branch),
                "path": status.path,
            }
            table.add_row(*(cells[col.key] for col in STATUS_COLUMNS), style=row_style)

        console.print(table)

        if self.show_legend:
            console.print(LEGEND_TEXT, markup=False)
