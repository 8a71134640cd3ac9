"""Bootstrap and command result models."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class RunResult:
    """Outcome of a subprocess run."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""


@dataclass
class StepResult:
    """Outcome of a single bootstrap step."""

    name: str
    command: str
    cwd: str
    exit_code: int
    stdout: str = ""
    stderr: str = ""


@dataclass
class BootstrapResult:
    """Outcome of a bootstrap run."""

    status: str  # "ok" or "failed"
    exit_code: int
    message: str
    steps: list[StepResult] = field(default_factory=list)


@dataclass
class CommandResult:
    """What a command handler hands back to the CLI for rendering."""

    message: str
    data: Optional[Any] = None
    exit_code: int = 0
