"""Custom exceptions for workbox"""

from typing import Optional, Sequence


class WorkboxError(Exception):
    """Base exception for all workbox errors."""

    exit_code = 1


class UsageError(WorkboxError):
    """Exception raised for invalid command-line usage."""

    exit_code = 2


class ValidationError(UsageError):
    """Exception raised when a worktree name, branch or ref is malformed."""


class ConfigError(WorkboxError):
    """Exception raised for missing or invalid configuration."""


class RepositoryNotFoundError(WorkboxError):
    """Exception raised when the working directory is not inside a Git repository."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Not inside a Git repository: {path}")


class PathContainmentError(ConfigError):
    """Exception raised when a path escapes its trust boundary."""

    def __init__(self, label: str, root: str, candidate: str, reason: str):
        self.label = label
        self.root = root
        self.candidate = candidate
        self.reason = reason
        super().__init__(reason)


class WorktreeNotFoundError(WorkboxError):
    """Exception raised when a named worktree does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Worktree "{name}" not found.')


class WorktreePathMismatchError(WorkboxError):
    """Exception raised when a worktree's on-disk path diverges from its name."""

    def __init__(self, name: str, expected_path: str, actual_path: str):
        self.name = name
        self.expected_path = expected_path
        self.actual_path = actual_path
        super().__init__(
            f'Worktree "{name}" resolved to {actual_path}, expected {expected_path}.'
        )


class ConflictError(WorkboxError):
    """Exception raised when a creation target already exists."""


class BranchExistsError(ConflictError):
    """Exception raised when the managed branch for a worktree already exists."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f'Branch "{branch}" already exists.')


class WorktreePathExistsError(ConflictError):
    """Exception raised when the worktree directory already exists."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Worktree path already exists: {path}")


class GitCommandFailedError(WorkboxError):
    """Exception raised when a git invocation exits non-zero."""

    def __init__(self, args: Sequence[str], status: Optional[int] = None, message: Optional[str] = None):
        self.args_used = list(args)
        self.status = status
        self.message = message or "Unknown git error."

        super().__init__(f"Git command failed (git {' '.join(self.args_used)}): {self.message}")
