"""Core functionality for workbox"""

import sys
from typing import Optional, Sequence

import git
from rich.console import Console

from workbox.config import CliFlags, WorkboxConfig, load_config
from workbox.exceptions import RepositoryNotFoundError, UsageError
from workbox.formatters import format_branch, format_clean, format_state
from workbox.models.bootstrap import CommandResult
from workbox.services.bootstrap_service import run_bootstrap
from workbox.services.git import WorktreeService
from workbox.services.process import RunMode, run_command, run_shell_command
from workbox.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)

NO_WORKTREES_MESSAGE = "No workbox worktrees found."


def find_repo_root(cwd: str) -> str:
    """Return the top-level directory of the repository containing cwd.

    Raises:
        RepositoryNotFoundError: cwd is not inside a non-bare repository
    """
    try:
        repo = git.Repo(cwd, search_parent_directories=True)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
        raise RepositoryNotFoundError(cwd) from e
    try:
        if repo.working_tree_dir is None:
            raise RepositoryNotFoundError(cwd)
        return str(repo.working_tree_dir)
    finally:
        repo.close()


class Workbox:
    """Command handlers for workbox.

    Each handler returns a CommandResult or raises a WorkboxError.
    """

    def __init__(self, repo_root: str, config: WorkboxConfig, flags: Optional[CliFlags] = None):
        """Initialize Workbox.

        Args:
            repo_root: Repository root (trust boundary for every managed path)
            config: Resolved configuration (worktrees.directory is absolute)
            flags: Process-wide switches such as JSON output or non-interactive mode
        """
        self.repo_root = str(repo_root)
        self.config = config
        self.flags = flags or CliFlags()
        self.worktrees = WorktreeService(
            self.repo_root,
            config.worktrees.directory,
            config.worktrees.branch_prefix,
        )

    @classmethod
    def from_cwd(cls, cwd: str, flags: Optional[CliFlags] = None) -> "Workbox":
        """Locate the repository around cwd and load its config."""
        repo_root = find_repo_root(cwd)
        loaded = load_config(repo_root)
        logger.debug(f"Using config {loaded.path} for {repo_root}")
        return cls(repo_root, loaded.config, flags)

    @property
    def run_mode(self) -> RunMode:
        # JSON mode never streams child output to the terminal
        return "capture" if self.flags.json else "inherit"

    def _can_prompt(self) -> bool:
        return not self.flags.non_interactive and not self.flags.json and sys.stdin.isatty()

    def _require_name(self, name: Optional[str]) -> str:
        if name:
            return name
        if self._can_prompt():
            name = console.input("Worktree name: ").strip()
            if name:
                return name
        if self.flags.non_interactive:
            raise UsageError("Missing worktree name in non-interactive mode.")
        raise UsageError("Missing worktree name.")

    def new(self, name: Optional[str], base_ref: Optional[str] = None) -> CommandResult:
        """Create a worktree on a fresh managed branch."""
        name = self._require_name(name)
        base_ref = base_ref or self.config.worktrees.base_ref
        if not base_ref:
            raise UsageError("Missing base ref. Pass --from <ref> or set worktrees.base_ref.")

        record = self.worktrees.create(name, base_ref)
        return CommandResult(
            message=f'Created worktree "{record.name}" at {record.path} on branch {record.branch}.',
            data=record,
        )

    def remove(self, name: Optional[str], force: bool = False, unmanaged: bool = False) -> CommandResult:
        """Remove a worktree directory; its branch is never deleted."""
        name = self._require_name(name)
        record = self.worktrees.get(name)
        if not record.managed and not unmanaged:
            raise UsageError(
                f'Refusing to remove unmanaged worktree "{name}". Re-run with --unmanaged to confirm.'
            )

        self.worktrees.remove(name, force=force)
        return CommandResult(
            message=f'Removed worktree "{record.name}" at {record.path}. No branches were deleted.',
            data=record,
        )

    def list_worktrees(self) -> CommandResult:
        records = self.worktrees.list_all()
        if not records:
            return CommandResult(message=NO_WORKTREES_MESSAGE, data=[])

        lines = ["Workbox worktrees:"]
        for record in records:
            lines.append(
                f"- {record.name}\t{format_branch(record.branch)}\t"
                f"{format_state(record.managed)}\t{record.path}"
            )
        return CommandResult(message="\n".join(lines), data=records)

    def status(self, name: Optional[str] = None) -> CommandResult:
        statuses = self.worktrees.status(name)
        if not statuses:
            return CommandResult(message=NO_WORKTREES_MESSAGE, data=[])

        lines = [
            f"- {item.name}\t{format_clean(item.clean, item.missing)}\t{format_branch(item.branch)}\t{item.path}"
            for item in statuses
        ]
        return CommandResult(message="\n".join(lines), data=statuses)

    def prune(self) -> CommandResult:
        output = self.worktrees.prune()
        message = f"Pruned worktree metadata:\n{output}" if output else "Pruned worktree metadata."
        return CommandResult(message=message, data={"output": output})

    def setup(self, name: Optional[str] = None) -> CommandResult:
        """Run the bootstrap steps in a worktree, or in the repository root."""
        bootstrap = self.config.bootstrap
        if not bootstrap.enabled:
            return CommandResult(
                message="bootstrap is disabled in config.",
                data={"status": "disabled", "steps": [step.name for step in bootstrap.steps]},
            )

        root_dir = self.worktrees.get(name).path if name else self.repo_root
        result = run_bootstrap(bootstrap.steps, root_dir, self.run_mode)
        return CommandResult(message=result.message, data=result, exit_code=result.exit_code)

    def dev(self, name: Optional[str]) -> CommandResult:
        """Bootstrap a worktree, run the optional open command, then the dev command."""
        name = self._require_name(name)
        dev = self.config.dev
        if dev is None:
            raise UsageError('Dev is not configured. Add a [dev] section with a "command".')

        record = self.worktrees.get(name)
        data = {"worktree": record, "bootstrap": None, "open": None, "dev": None}

        if self.config.bootstrap.enabled:
            bootstrap = run_bootstrap(self.config.bootstrap.steps, record.path, self.run_mode)
            data["bootstrap"] = bootstrap
            if bootstrap.exit_code != 0:
                return CommandResult(message=bootstrap.message, data=data, exit_code=bootstrap.exit_code)

        if dev.open:
            opened = run_shell_command(dev.open, record.path, self.run_mode)
            data["open"] = opened
            if opened.exit_code != 0:
                return CommandResult(
                    message=f"dev open command failed (exit {opened.exit_code}).",
                    data=data,
                    exit_code=opened.exit_code,
                )

        result = run_shell_command(dev.command, record.path, self.run_mode)
        data["dev"] = result
        message = "" if result.exit_code == 0 else f"dev command exited with {result.exit_code}."
        return CommandResult(message=message, data=data, exit_code=result.exit_code)

    def exec(self, name: Optional[str], command: Sequence[str]) -> CommandResult:
        """Run a command (argv, no shell) inside a worktree."""
        if not name:
            raise UsageError("Missing worktree name.")
        if not command:
            raise UsageError("Missing command to execute after '--'.")

        record = self.worktrees.get(name)
        result = run_command(list(command), record.path, self.run_mode)
        message = "" if result.exit_code == 0 else f"command exited with {result.exit_code}."
        return CommandResult(
            message=message,
            data={
                "name": record.name,
                "path": record.path,
                "command": list(command),
                "exit_code": result.exit_code,
                "stdout": result.stdout,
                "stderr": result.stderr,
            },
            exit_code=result.exit_code,
        )
