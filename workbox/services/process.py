"""Subprocess helpers for running user commands inside worktrees."""

import os
import subprocess
import sys
from typing import Literal, Optional, Sequence

from workbox.models.bootstrap import RunResult
from workbox.utils.logging import get_logger

logger = get_logger(__name__)

RunMode = Literal["inherit", "capture"]


def run_command(
    cmd: Sequence[str],
    cwd: str,
    mode: RunMode,
    env: Optional[dict[str, str]] = None,
) -> RunResult:
    """Run a command and wait for it to exit.

    Args:
        cmd: argv to execute
        cwd: Working directory
        mode: "inherit" streams output to the terminal, "capture" collects it
        env: Variables layered on top of the current environment

    Returns:
        RunResult with stripped stdout/stderr (empty in inherit mode)
    """
    logger.debug(f"Running {list(cmd)} in {cwd} ({mode})")
    capture = mode == "capture"
    try:
        completed = subprocess.run(
            list(cmd),
            cwd=cwd,
            env={**os.environ, **env} if env else None,
            stdout=subprocess.PIPE if capture else None,
            stderr=subprocess.PIPE if capture else None,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except FileNotFoundError as e:
        # Same exit codes a shell reports for an unknown or non-executable command
        logger.error(f"Could not start {cmd[0]}: {e}")
        return RunResult(exit_code=127, stderr=str(e))
    except PermissionError as e:
        logger.error(f"Could not start {cmd[0]}: {e}")
        return RunResult(exit_code=126, stderr=str(e))
    return RunResult(
        exit_code=completed.returncode,
        stdout=(completed.stdout or "").strip(),
        stderr=(completed.stderr or "").strip(),
    )


def run_shell_command(
    command: str,
    cwd: str,
    mode: RunMode,
    env: Optional[dict[str, str]] = None,
) -> RunResult:
    """Run a command line through the platform shell."""
    if sys.platform == "win32":
        cmd = ["cmd.exe", "/d", "/s", "/c", command]
    else:
        cmd = ["sh", "-c", command]
    return run_command(cmd, cwd, mode, env)
