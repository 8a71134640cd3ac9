"""Worktree operations service for workbox."""

import os
from typing import Optional

from workbox.exceptions import (
    BranchExistsError,
    GitCommandFailedError,
    ValidationError,
    WorktreeNotFoundError,
    WorktreePathExistsError,
    WorktreePathMismatchError,
)
from workbox.models.worktree import WorktreeRecord, WorktreeStatus
from workbox.services.git.porcelain import parse_worktree_porcelain
from workbox.services.git.runner import GitRunner
from workbox.services.path_guard import ensure_path_within_root
from workbox.utils.logging import get_logger

logger = get_logger(__name__)

WORKTREES_DIR_LABEL = "worktrees.directory"


def validate_worktree_name(name: str) -> str:
    """Reject names that could address anything other than a direct child directory.

    Args:
        name: Requested worktree name

    Returns:
        The name, unchanged

    Raises:
        ValidationError: name is empty, "." or "..", contains a path separator,
            a NUL byte, or a ".." sequence
    """
    if not name or not name.strip():
        raise ValidationError("Worktree name must not be empty.")
    if name in (".", ".."):
        raise ValidationError(f'Invalid worktree name "{name}".')
    separators = {"/", "\\", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in name for sep in separators) or "\0" in name:
        raise ValidationError(f'Worktree name must not contain path separators: "{name}".')
    if ".." in name:
        raise ValidationError(f'Worktree name must not contain "..": "{name}".')
    return name


def parse_status_porcelain(output: str) -> dict:
    """Summarise `git status --porcelain` output.

    Returns:
        Dict with 'modified', 'untracked', 'staged' boolean flags
    """
    has_modified = False
    has_untracked = False
    has_staged = False

    for line in output.split("\n"):
        if len(line) < 2:
            continue

        # Untracked files
        if line.startswith("??"):
            has_untracked = True
            continue

        index_status = line[0]
        worktree_status = line[1]
        if index_status != " ":
            has_staged = True
        if worktree_status != " ":
            has_modified = True

    return {
        "modified": has_modified,
        "untracked": has_untracked,
        "staged": has_staged,
    }


class WorktreeService:
    """Service for managing the worktrees under a single worktrees directory.

    The worktrees directory must stay inside the repository root; it is
    re-certified on every operation. Nothing is cached: every read asks git.
    Two workbox processes working on the same repository are not coordinated,
    so e.g. both may pass the "branch does not exist" check before either
    creates it; the loser then fails inside `git worktree add`.
    """

    def __init__(self, repo_root: str, worktrees_dir: str, branch_prefix: str):
        """Initialize the worktree service.

        Args:
            repo_root: Repository root, the trust boundary for every path
            worktrees_dir: Directory under which workbox worktrees live
            branch_prefix: Prefix of the branch names workbox creates
        """
        self.repo_root = str(repo_root)
        self.worktrees_dir = str(worktrees_dir)
        self.branch_prefix = branch_prefix
        self.git = GitRunner(self.repo_root)

    def _ensure_worktrees_dir(self) -> None:
        ensure_path_within_root(self.repo_root, self.worktrees_dir, WORKTREES_DIR_LABEL)

    def managed_branch(self, name: str) -> str:
        """Branch name workbox uses for a worktree name."""
        return f"{self.branch_prefix}{name}"

    def expected_path(self, name: str) -> str:
        """Canonical path a worktree with this name must have."""
        return os.path.realpath(os.path.join(self.worktrees_dir, name))

    def list_all(self) -> list[WorktreeRecord]:
        """List every worktree that lives directly under the worktrees directory.

        Returns:
            Records sorted by name; empty if the directory does not exist yet
        """
        self._ensure_worktrees_dir()
        if not os.path.isdir(self.worktrees_dir):
            logger.debug(f"Worktrees directory {self.worktrees_dir} does not exist yet")
            return []

        container = os.path.realpath(self.worktrees_dir)
        output = self.git.run("worktree", "list", "--porcelain")

        records = []
        for entry in parse_worktree_porcelain(output):
            path = os.path.realpath(entry.path)
            if os.path.dirname(path) != container:
                continue
            name = validate_worktree_name(os.path.basename(path))
            managed_branch = self.managed_branch(name)
            records.append(
                WorktreeRecord(
                    name=name,
                    path=path,
                    branch=entry.branch,
                    managed_branch=managed_branch,
                    managed=entry.branch == managed_branch,
                    head=entry.head,
                    detached=entry.detached,
                    prunable=entry.prunable,
                )
            )

        records.sort(key=lambda record: record.name)
        logger.debug(f"Found {len(records)} worktrees under {container}")
        for record in records:
            logger.debug(f"  {record}")
        return records

    def list_managed(self) -> list[WorktreeRecord]:
        """List only the worktrees checked out on their managed branch."""
        return [record for record in self.list_all() if record.managed]

    def get(self, name: str) -> WorktreeRecord:
        """Look up a worktree by name.

        Raises:
            ValidationError: invalid name
            WorktreeNotFoundError: no worktree with that name
            WorktreePathMismatchError: the found worktree no longer resolves to
                the path its name implies
        """
        validate_worktree_name(name)
        expected = self.expected_path(name)

        record = next((item for item in self.list_all() if item.name == name), None)
        if record is None:
            raise WorktreeNotFoundError(name)

        actual = os.path.realpath(record.path)
        if actual != expected:
            raise WorktreePathMismatchError(name, expected, actual)
        return record

    def create(self, name: str, base_ref: str) -> WorktreeRecord:
        """Create a worktree on a new managed branch started from base_ref.

        Raises:
            ValidationError: invalid name, branch name or base ref
            BranchExistsError: the managed branch already exists
            WorktreePathExistsError: the worktree directory already exists
            GitCommandFailedError: `git worktree add` failed
        """
        validate_worktree_name(name)
        self._ensure_worktrees_dir()
        os.makedirs(self.worktrees_dir, exist_ok=True)

        path = os.path.join(self.worktrees_dir, name)
        ensure_path_within_root(self.repo_root, path, f'worktree "{name}"')

        branch = self.managed_branch(name)
        try:
            self.git.run("check-ref-format", "--branch", branch)
        except GitCommandFailedError as e:
            raise ValidationError(f'Invalid branch name "{branch}".') from e

        try:
            self.git.run("rev-parse", "--verify", base_ref)
        except GitCommandFailedError as e:
            raise ValidationError(f'Base ref "{base_ref}" does not resolve to a revision.') from e

        if self.git.succeeds("show-ref", "--verify", "--quiet", f"refs/heads/{branch}"):
            raise BranchExistsError(branch)
        if os.path.lexists(path):
            raise WorktreePathExistsError(path)

        self.git.run("worktree", "add", "-b", branch, path, base_ref)
        logger.info(f"Created worktree {name} at {path} on {branch} from {base_ref}")

        return self.get(name)

    def remove(self, name: str, force: bool = False) -> WorktreeRecord:
        """Remove a worktree's checkout directory.

        The branch is left in place.

        Args:
            name: Worktree name
            force: Remove even with uncommitted changes

        Returns:
            The record of the removed worktree
        """
        record = self.get(name)

        args = ["worktree", "remove"]
        if force:
            args.append("--force")
        args.extend(["--", record.path])
        self.git.run(*args)
        logger.info(f"Removed worktree at {record.path}")

        return record

    def prune(self) -> str:
        """Prune metadata of worktrees whose directories are gone.

        Returns:
            Whatever git printed
        """
        # --verbose reports on stderr
        stdout, stderr = self.git.run_with_stderr("worktree", "prune", "--verbose")
        logger.info("Pruned orphaned worktree metadata")
        return "\n".join(part.strip() for part in (stdout, stderr) if part.strip())

    def status(self, name: Optional[str] = None) -> list[WorktreeStatus]:
        """Report whether each worktree (or only the named one) is clean.

        A worktree whose directory was deleted is reported with missing=True
        (and clean=False) until `prune` drops it.
        """
        records = [self.get(name)] if name is not None else self.list_all()

        statuses = []
        for record in records:
            if record.prunable or not os.path.isdir(record.path):
                logger.debug(f"Worktree {record.name} is missing its directory {record.path}")
                statuses.append(WorktreeStatus.from_record(record, {}, missing=True))
                continue
            output = GitRunner(record.path).run("status", "--porcelain")
            statuses.append(WorktreeStatus.from_record(record, parse_status_porcelain(output)))
        return statuses
