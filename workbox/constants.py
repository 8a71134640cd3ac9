"""Shared constants for workbox."""

import os
from dataclasses import dataclass
from typing import List

TOOL_NAME = "workbox"
TOOL_ALIAS = "wkb"

CONFIG_PRIMARY = os.path.join(".workbox", "config.toml")
CONFIG_SECONDARY = "workbox.toml"

# Environment variables that switch off interactive prompts
NON_INTERACTIVE_ENV_VARS = ("WORKBOX_NON_INTERACTIVE", "CI")


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str
    width: int = 0  # 0 means auto-width


LIST_COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("name", "Name", 20),
    ColumnDefinition("branch", "Branch", 30),
    ColumnDefinition("state", "State", 10),
    ColumnDefinition("path", "Path"),
]

STATUS_COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("name", "Name", 20),
    ColumnDefinition("clean", "Status", 8),
    ColumnDefinition("changes", "Changes", 8),
    ColumnDefinition("branch", "Branch", 30),
    ColumnDefinition("path", "Path"),
]


SYMBOL_CLEAN = "✓"
SYMBOL_MISSING = "✗"
DETACHED_LABEL = "(detached)"


class WorktreeStyleType:
    """Style types for worktree rows."""

    MANAGED = "managed"
    UNMANAGED = "unmanaged"
    DIRTY = "dirty"
    MISSING = "missing"


# CLI colors (Rich color names)
CLI_COLORS = {
    WorktreeStyleType.MANAGED: None,  # Default color
    WorktreeStyleType.UNMANAGED: "cyan",
    WorktreeStyleType.DIRTY: "yellow",
    WorktreeStyleType.MISSING: "red",
}


LEGEND_TEXT = """
Legend:
M = Modified files   U = Untracked files   S = Staged files   ✗ = Directory missing (run prune)

Colors:
Yellow = Uncommitted changes
Red = Directory missing
Cyan = Unmanaged (not on its workbox branch)
"""
