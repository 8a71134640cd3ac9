"""Formatting utilities for workbox.

- worktree: branch, state and change formatting for worktree rows
"""

from .worktree import (
    format_branch,
    format_state,
    format_clean,
    format_changes,
    get_worktree_style_type,
)

__all__ = [
    "format_branch",
    "format_state",
    "format_clean",
    "format_changes",
    "get_worktree_style_type",
]
