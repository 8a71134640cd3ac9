"""Thin wrapper around GitPython's command execution."""

import os

import git

from workbox.exceptions import GitCommandFailedError
from workbox.utils.logging import get_logger

logger = get_logger(__name__)


class GitRunner:
    """Run git subcommands in a fixed working directory.

    Every call blocks until git exits. Nothing is retried and no timeout is
    applied; a non-zero exit surfaces as GitCommandFailedError.
    """

    def __init__(self, cwd: str):
        self.cwd = str(cwd)

    def _execute(self, args: tuple[str, ...]) -> tuple[int, str, str]:
        logger.debug(f"git {' '.join(args)} (cwd={self.cwd})")
        if not os.path.isdir(self.cwd):
            raise GitCommandFailedError(args, message=f"Working directory does not exist: {self.cwd}")
        try:
            return git.Git(self.cwd).execute(
                ["git", *args],
                with_extended_output=True,
                with_exceptions=False,
            )
        except git.exc.GitCommandNotFound as e:
            raise GitCommandFailedError(args, message=str(e)) from e

    def run_with_stderr(self, *args: str) -> tuple[str, str]:
        """Run git with args and return (stdout, stderr).

        Raises:
            GitCommandFailedError: git exited non-zero
        """
        status, stdout, stderr = self._execute(args)
        if status != 0:
            message = stderr.strip() or stdout.strip() or None
            logger.debug(f"git {' '.join(args)} exited {status}: {message}")
            raise GitCommandFailedError(args, status=status, message=message)
        return stdout, stderr

    def run(self, *args: str) -> str:
        """Run git with args and return its stdout.

        Leading whitespace is significant in some porcelain formats, so only
        the trailing newline is dropped.
        """
        stdout, _ = self.run_with_stderr(*args)
        return stdout

    def succeeds(self, *args: str) -> bool:
        """Return True if git exits zero for args."""
        status, _, _ = self._execute(args)
        return status == 0
