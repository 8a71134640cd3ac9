"""Git-related services for workbox."""

from .runner import GitRunner
from .porcelain import PorcelainEntry, WorktreePorcelainParser, parse_worktree_porcelain
from .worktrees import WorktreeService, validate_worktree_name

__all__ = [
    "GitRunner",
    "PorcelainEntry",
    "WorktreePorcelainParser",
    "parse_worktree_porcelain",
    "WorktreeService",
    "validate_worktree_name",
]
