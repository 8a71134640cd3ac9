"""Worktree row formatting utilities."""

from typing import Optional

from workbox.constants import DETACHED_LABEL, SYMBOL_CLEAN, SYMBOL_MISSING, WorktreeStyleType
from workbox.models.worktree import WorktreeRecord, WorktreeStatus


def format_branch(branch: Optional[str]) -> str:
    """Branch name, or "(detached)" when there is none."""
    return branch if branch else DETACHED_LABEL


def format_state(managed: bool) -> str:
    return "managed" if managed else "unmanaged"


def format_clean(clean: bool, missing: bool = False) -> str:
    if missing:
        return "missing"
    return "clean" if clean else "dirty"


def format_changes(status: WorktreeStatus) -> str:
    """
    Format change indicators for a worktree.

    Returns:
        ✓ when clean, ✗ when the directory is gone, otherwise a combination of
        M = Modified files, U = Untracked files, S = Staged files

    Example:
        "MU" for modified and untracked files
    """
    if status.missing:
        return SYMBOL_MISSING
    indicators = []
    if status.modified:
        indicators.append("M")
    if status.untracked:
        indicators.append("U")
    if status.staged:
        indicators.append("S")
    return "".join(indicators) if indicators else SYMBOL_CLEAN


def get_worktree_style_type(record: WorktreeRecord) -> str:
    """
    Determine the style type for a worktree row.

    Missing beats dirty, which beats unmanaged.
    """
    if isinstance(record, WorktreeStatus):
        if record.missing:
            return WorktreeStyleType.MISSING
        if not record.clean:
            return WorktreeStyleType.DIRTY
    if not record.managed:
        return WorktreeStyleType.UNMANAGED
    return WorktreeStyleType.MANAGED
