"""Tests for configuration loading"""
import os

import pytest

from workbox.config import (
    BootstrapStep,
    CliFlags,
    WorkboxConfig,
    get_config_candidate_paths,
    load_config,
    parse_config,
)
from workbox.exceptions import ConfigError

FULL_CONFIG = """
[worktrees]
directory = ".workbox/worktrees"
branch_prefix = "wkb/"
base_ref = "main"

[bootstrap]
enabled = true

[[bootstrap.steps]]
name = "deps"
run = "echo deps"

[[bootstrap.steps]]
name = "web"
run = "echo web"
cwd = "web"
env = { NODE_ENV = "development" }

[dev]
command = "echo dev"
open = "echo open"
"""


class TestParseConfig:
    """Test parsing and validating TOML."""

    def test_full_config(self):
        config = parse_config(FULL_CONFIG, "workbox.toml")

        assert config.worktrees.directory == ".workbox/worktrees"
        assert config.worktrees.branch_prefix == "wkb/"
        assert config.worktrees.base_ref == "main"
        assert config.bootstrap.enabled is True
        assert config.bootstrap.steps[1] == BootstrapStep(
            name="web", run="echo web", cwd="web", env={"NODE_ENV": "development"}
        )
        assert config.dev.command == "echo dev"
        assert config.dev.open == "echo open"

    def test_minimal_config_defaults(self):
        config = parse_config('[worktrees]\ndirectory = "wt"\nbranch_prefix = "wkb/"\n', "workbox.toml")

        assert config.worktrees.base_ref is None
        assert config.bootstrap.enabled is False
        assert config.bootstrap.steps == []
        assert config.dev is None

    def test_invalid_toml(self):
        with pytest.raises(ConfigError, match="Invalid TOML in workbox.toml"):
            parse_config("[worktrees\n", "workbox.toml")

    @pytest.mark.parametrize(
        "source, message",
        [
            ("", "worktrees: section is required"),
            ('[worktrees]\ndirectory = "wt"\n', "branch_prefix"),
            ('[worktrees]\ndirectory = ""\nbranch_prefix = "wkb/"\n', "worktrees.directory"),
            ('[worktrees]\ndirectory = "wt"\nbranch_prefix = "wkb/"\ncolour = "red"\n', "unknown key"),
            ('[worktrees]\ndirectory = "wt"\nbranch_prefix = "wkb/"\n[extra]\n', "unknown key"),
            ('[worktrees]\ndirectory = "wt"\nbranch_prefix = "wkb/"\n[bootstrap]\nenabled = "yes"\n', "boolean"),
            ('[worktrees]\ndirectory = "wt"\nbranch_prefix = "wkb/"\n[dev]\nopen = "x"\n', "command"),
        ],
    )
    def test_schema_violations(self, source, message):
        with pytest.raises(ConfigError, match="Invalid workbox config in workbox.toml") as exc_info:
            parse_config(source, "workbox.toml")
        assert message in str(exc_info.value)

    def test_duplicate_step_names(self):
        source = """
[worktrees]
directory = "wt"
branch_prefix = "wkb/"

[bootstrap]
enabled = true
steps = [{ name = "a", run = "x" }, { name = "a", run = "y" }]
"""
        with pytest.raises(ConfigError, match='Duplicate bootstrap step name "a"'):
            parse_config(source, "workbox.toml")

    def test_step_without_run(self):
        source = '[worktrees]\ndirectory = "wt"\nbranch_prefix = "p/"\n[bootstrap]\nsteps = [{ name = "a" }]\n'
        with pytest.raises(ConfigError):
            parse_config(source, "workbox.toml")

    def test_step_env_must_be_strings(self):
        source = (
            '[worktrees]\ndirectory = "wt"\nbranch_prefix = "p/"\n'
            '[bootstrap]\nsteps = [{ name = "a", run = "x", env = { PORT = 3000 } }]\n'
        )
        with pytest.raises(ConfigError, match="env must map strings to strings"):
            parse_config(source, "workbox.toml")

    def test_to_dict(self):
        data = parse_config(FULL_CONFIG, "workbox.toml").to_dict()
        assert data["worktrees"]["branch_prefix"] == "wkb/"
        assert [step["name"] for step in data["bootstrap"]["steps"]] == ["deps", "web"]
        assert data["dev"] == {"command": "echo dev", "open": "echo open"}


class TestLoadConfig:
    """Test finding and resolving config files."""

    def test_no_config(self, repo_root):
        with pytest.raises(ConfigError, match="No workbox config found"):
            load_config(str(repo_root))

    def test_primary_config(self, repo_root, write_config):
        path = write_config()

        loaded = load_config(str(repo_root))

        assert loaded.path == str(path)
        assert loaded.config.worktrees.directory == os.path.join(str(repo_root), ".workbox", "worktrees")

    def test_secondary_config(self, repo_root):
        (repo_root / "workbox.toml").write_text('[worktrees]\ndirectory = "sandboxes"\nbranch_prefix = "sb/"\n')

        loaded = load_config(str(repo_root))

        assert loaded.path == str(repo_root / "workbox.toml")
        assert loaded.config.worktrees.directory == str(repo_root / "sandboxes")

    def test_primary_wins(self, repo_root, write_config):
        write_config()
        (repo_root / "workbox.toml").write_text('[worktrees]\ndirectory = "sandboxes"\nbranch_prefix = "sb/"\n')

        loaded = load_config(str(repo_root))

        assert loaded.config.worktrees.branch_prefix == "wkb/"

    def test_candidate_order(self, repo_root):
        assert get_config_candidate_paths(str(repo_root)) == [
            os.path.join(str(repo_root), ".workbox", "config.toml"),
            os.path.join(str(repo_root), "workbox.toml"),
        ]

    def test_directory_outside_repo(self, repo_root, write_config):
        write_config('[worktrees]\ndirectory = "../sandboxes"\nbranch_prefix = "wkb/"\n')

        with pytest.raises(ConfigError, match="worktrees.directory must be within repo root"):
            load_config(str(repo_root))

    @pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
    def test_directory_through_escaping_symlink(self, repo_root, temp_dir):
        outside = temp_dir / "outside"
        outside.mkdir()
        (repo_root / "sandboxes").symlink_to(outside, target_is_directory=True)
        (repo_root / "workbox.toml").write_text('[worktrees]\ndirectory = "sandboxes/wt"\nbranch_prefix = "wkb/"\n')

        with pytest.raises(ConfigError, match="escapes repo root via symlink"):
            load_config(str(repo_root))

    def test_from_dict_rejects_non_table_sections(self):
        with pytest.raises(ValueError, match="bootstrap: must be a table"):
            WorkboxConfig.from_dict({"worktrees": {"directory": "wt", "branch_prefix": "p/"}, "bootstrap": 1})


class TestCliFlags:
    """Test process-wide flags."""

    def test_defaults(self):
        assert CliFlags.from_env(environ={}) == CliFlags()

    @pytest.mark.parametrize("var", ["CI", "WORKBOX_NON_INTERACTIVE"])
    def test_environment_forces_non_interactive(self, var):
        assert CliFlags.from_env(environ={var: "1"}).non_interactive is True

    @pytest.mark.parametrize("value", ["", "0", "false", "no"])
    def test_falsy_environment_values(self, value):
        assert CliFlags.from_env(environ={"CI": value}).non_interactive is False

    def test_explicit_flags_are_kept(self):
        flags = CliFlags.from_env(environ={}, json=True, non_interactive=True)
        assert flags.json is True
        assert flags.non_interactive is True
