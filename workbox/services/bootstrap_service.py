"""Bootstrap step runner for workbox."""

import os

from workbox.config import BootstrapStep
from workbox.exceptions import ConfigError
from workbox.models.bootstrap import BootstrapResult, StepResult
from workbox.services.path_guard import ensure_path_within_root
from workbox.services.process import RunMode, run_shell_command
from workbox.utils.logging import get_logger

logger = get_logger(__name__)


def resolve_step_cwd(step: BootstrapStep, root_dir: str) -> str:
    """Resolve a step's cwd against root_dir and make sure it stays inside.

    Raises:
        PathContainmentError: the cwd escapes root_dir, lexically or via a symlink
    """
    cwd = os.path.abspath(os.path.join(root_dir, step.cwd or os.curdir))
    ensure_path_within_root(root_dir, cwd, f'bootstrap step "{step.name}" cwd')
    if not os.path.isdir(cwd):
        raise ConfigError(f'bootstrap step "{step.name}" cwd does not exist: {cwd}')
    return cwd


def run_bootstrap(steps: list[BootstrapStep], root_dir: str, mode: RunMode) -> BootstrapResult:
    """
    Run bootstrap steps one after another, stopping at the first failure.

    Args:
        steps: Steps from the [bootstrap] config section
        root_dir: Directory the steps run in (usually a worktree path)
        mode: "inherit" or "capture" output

    Returns:
        BootstrapResult; status is "failed" and exit_code is the step's exit
        code when a step fails
    """
    if not steps:
        return BootstrapResult(status="ok", exit_code=0, message="no bootstrap steps configured.")

    results = []
    for step in steps:
        cwd = resolve_step_cwd(step, root_dir)
        logger.info(f"Running bootstrap step {step.name}: {step.run}")
        run = run_shell_command(step.run, cwd, mode, step.env or None)
        results.append(
            StepResult(
                name=step.name,
                command=step.run,
                cwd=cwd,
                exit_code=run.exit_code,
                stdout=run.stdout,
                stderr=run.stderr,
            )
        )
        if run.exit_code != 0:
            logger.warning(f"Bootstrap step {step.name} exited {run.exit_code}")
            return BootstrapResult(
                status="failed",
                exit_code=run.exit_code,
                message=f'bootstrap step "{step.name}" failed (exit {run.exit_code}).',
                steps=results,
            )

    return BootstrapResult(status="ok", exit_code=0, message="bootstrap completed.", steps=results)
