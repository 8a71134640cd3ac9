"""Worktree data models."""

from dataclasses import asdict, dataclass
from typing import Optional


@dataclass
class WorktreeRecord:
    """A linked worktree living directly under the worktrees directory.

    Records are rebuilt from `git worktree list` on every query; nothing here
    is persisted.
    """

    name: str
    path: str  # Canonical (symlink-resolved) absolute path
    branch: Optional[str]  # None when detached or unreported
    managed_branch: str  # branch_prefix + name
    managed: bool  # branch == managed_branch
    head: Optional[str] = None
    detached: bool = False
    prunable: bool = False  # git reports the checkout directory as gone

    def to_dict(self) -> dict:
        return asdict(self)

    def __str__(self) -> str:
        """String representation of worktree."""
        state = "managed" if self.managed else "unmanaged"
        return f"{self.name} @ {self.path} ({self.branch or 'detached'}) [{state}]"


@dataclass
class WorktreeStatus(WorktreeRecord):
    """A worktree record plus the state of its working tree."""

    clean: bool = True
    modified: bool = False
    untracked: bool = False
    staged: bool = False
    missing: bool = False  # checkout directory no longer exists

    @classmethod
    def from_record(cls, record: WorktreeRecord, changes: dict, missing: bool = False) -> "WorktreeStatus":
        return cls(
            **record.to_dict(),
            clean=not missing and not any(changes.values()),
            missing=missing,
            modified=changes.get("modified", False),
            untracked=changes.get("untracked", False),
            staged=changes.get("staged", False),
        )
