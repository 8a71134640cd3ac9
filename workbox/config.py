"""Configuration handling for workbox"""

import os
import tomllib
from dataclasses import dataclass, field, fields
from typing import Optional

from workbox.constants import CONFIG_PRIMARY, CONFIG_SECONDARY, NON_INTERACTIVE_ENV_VARS
from workbox.exceptions import ConfigError
from workbox.services.path_guard import check_path_within_root
from workbox.utils.logging import get_logger

logger = get_logger(__name__)


def _reject_unknown_keys(cls, data: dict, section: str) -> None:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"{section}: unknown key(s) {', '.join(unknown)}")


def _require_text(value, name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be a non-empty string")


@dataclass
class WorktreesConfig:
    """The [worktrees] section."""

    directory: str
    branch_prefix: str
    base_ref: Optional[str] = None

    def __post_init__(self):
        _require_text(self.directory, "worktrees.directory")
        _require_text(self.branch_prefix, "worktrees.branch_prefix")
        if self.base_ref is not None:
            _require_text(self.base_ref, "worktrees.base_ref")


@dataclass
class BootstrapStep:
    """A single shell command run while bootstrapping a worktree."""

    name: str
    run: str
    cwd: Optional[str] = None
    env: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        _require_text(self.name, "bootstrap step name")
        _require_text(self.run, f'bootstrap step "{self.name}" run')
        if self.cwd is not None:
            _require_text(self.cwd, f'bootstrap step "{self.name}" cwd')
        if not isinstance(self.env, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in self.env.items()
        ):
            raise ValueError(f'bootstrap step "{self.name}" env must map strings to strings')


@dataclass
class BootstrapConfig:
    """The [bootstrap] section."""

    enabled: bool = False
    steps: list[BootstrapStep] = field(default_factory=list)

    def __post_init__(self):
        if not isinstance(self.enabled, bool):
            raise ValueError("bootstrap.enabled must be a boolean")
        seen = set()
        for step in self.steps:
            if step.name in seen:
                raise ValueError(f'Duplicate bootstrap step name "{step.name}".')
            seen.add(step.name)


@dataclass
class DevConfig:
    """The optional [dev] section."""

    command: str
    open: Optional[str] = None

    def __post_init__(self):
        _require_text(self.command, "dev.command")
        if self.open is not None:
            _require_text(self.open, "dev.open")


@dataclass
class WorkboxConfig:
    """Configuration for workbox with validation."""

    worktrees: WorktreesConfig
    bootstrap: BootstrapConfig = field(default_factory=BootstrapConfig)
    dev: Optional[DevConfig] = None

    @classmethod
    def from_dict(cls, config_dict: dict) -> "WorkboxConfig":
        """Create WorkboxConfig from a parsed TOML document.

        Raises:
            ValueError: unknown keys, missing keys or invalid values
        """
        _reject_unknown_keys(cls, config_dict, "(root)")

        worktrees = config_dict.get("worktrees")
        if not isinstance(worktrees, dict):
            raise ValueError("worktrees: section is required")
        _reject_unknown_keys(WorktreesConfig, worktrees, "worktrees")

        bootstrap = config_dict.get("bootstrap", {})
        if not isinstance(bootstrap, dict):
            raise ValueError("bootstrap: must be a table")
        _reject_unknown_keys(BootstrapConfig, bootstrap, "bootstrap")

        dev = config_dict.get("dev")
        if dev is not None:
            if not isinstance(dev, dict):
                raise ValueError("dev: must be a table")
            _reject_unknown_keys(DevConfig, dev, "dev")

        try:
            steps = []
            for index, step in enumerate(bootstrap.get("steps", [])):
                if not isinstance(step, dict):
                    raise ValueError(f"bootstrap.steps.{index}: must be a table")
                _reject_unknown_keys(BootstrapStep, step, f"bootstrap.steps.{index}")
                steps.append(BootstrapStep(**step))

            return cls(
                worktrees=WorktreesConfig(**worktrees),
                bootstrap=BootstrapConfig(enabled=bootstrap.get("enabled", False), steps=steps),
                dev=DevConfig(**dev) if dev is not None else None,
            )
        except TypeError as e:
            # Missing required keys surface as TypeError from the dataclass __init__
            raise ValueError(str(e)) from e

    def to_dict(self) -> dict:
        """Convert config to dictionary (for --debug output)."""
        return {
            "worktrees": vars(self.worktrees),
            "bootstrap": {
                "enabled": self.bootstrap.enabled,
                "steps": [vars(step) for step in self.bootstrap.steps],
            },
            "dev": vars(self.dev) if self.dev else None,
        }


@dataclass
class CliFlags:
    """Process-wide switches, read once at the CLI edge and passed down."""

    json: bool = False
    non_interactive: bool = False
    verbose: bool = False
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Optional[dict] = None, **kwargs) -> "CliFlags":
        """Build flags, forcing non-interactive mode when the environment asks for it."""
        environ = os.environ if environ is None else environ
        flags = cls(**kwargs)
        for var in NON_INTERACTIVE_ENV_VARS:
            if environ.get(var, "").strip().lower() not in ("", "0", "false", "no"):
                flags.non_interactive = True
        return flags


@dataclass
class LoadedConfig:
    """A validated config together with the file it came from."""

    config: WorkboxConfig
    path: str


def get_config_candidate_paths(repo_root: str) -> list[str]:
    """Config files workbox looks for, in order of preference."""
    return [os.path.join(repo_root, CONFIG_PRIMARY), os.path.join(repo_root, CONFIG_SECONDARY)]


def resolve_worktrees_dir(directory: str, repo_root: str) -> str:
    """Resolve worktrees.directory relative to the repository root."""
    return os.path.abspath(os.path.join(repo_root, os.path.expanduser(directory)))


def parse_config(source: str, file_path: str) -> WorkboxConfig:
    """Parse and validate TOML source.

    Raises:
        ConfigError: invalid TOML or schema violations
    """
    try:
        parsed = tomllib.loads(source)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {file_path}: {e}") from e

    try:
        return WorkboxConfig.from_dict(parsed)
    except ValueError as e:
        raise ConfigError(f"Invalid workbox config in {file_path}: {e}") from e


def resolve_config(config: WorkboxConfig, repo_root: str) -> WorkboxConfig:
    """Make worktrees.directory absolute and certify it stays inside the repo."""
    resolved = resolve_worktrees_dir(config.worktrees.directory, repo_root)
    result = check_path_within_root(repo_root, resolved, "worktrees.directory")
    if not result.ok:
        raise ConfigError(result.reason)

    config.worktrees.directory = resolved
    return config


def load_config(repo_root: str) -> LoadedConfig:
    """Find, parse and resolve the workbox config for a repository.

    Raises:
        ConfigError: no config file, or the file is invalid
    """
    for config_path in get_config_candidate_paths(repo_root):
        if os.path.isfile(config_path):
            logger.debug(f"Loading config from {config_path}")
            with open(config_path, encoding="utf-8") as f:
                contents = f.read()
            config = parse_config(contents, config_path)
            return LoadedConfig(config=resolve_config(config, repo_root), path=config_path)

    raise ConfigError(
        f"No workbox config found. Expected {CONFIG_PRIMARY} or {CONFIG_SECONDARY} in {repo_root}."
    )
