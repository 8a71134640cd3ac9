"""Pytest fixtures for workbox tests"""
import tempfile
from pathlib import Path

import git
import pytest

from workbox.config import WorkboxConfig, resolve_config
from workbox.services.git import WorktreeService

BRANCH_PREFIX = "wkb/"

BASIC_CONFIG = """
[worktrees]
directory = ".workbox/worktrees"
branch_prefix = "wkb/"
base_ref = "main"
"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing (symlinks resolved)."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    # Initialize repository
    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    # Create initial commit on main branch
    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    repo.git.branch("-M", "main")

    yield repo

    # Cleanup
    repo.close()


@pytest.fixture
def repo_root(git_repo):
    return Path(git_repo.working_dir)


@pytest.fixture
def worktrees_dir(repo_root):
    return repo_root / ".workbox" / "worktrees"


@pytest.fixture
def service(repo_root, worktrees_dir):
    """WorktreeService over the test repository."""
    return WorktreeService(str(repo_root), str(worktrees_dir), BRANCH_PREFIX)


@pytest.fixture
def write_config(repo_root):
    """Return a function that writes .workbox/config.toml into the test repository."""

    def _write(text: str = BASIC_CONFIG) -> Path:
        config_path = repo_root / ".workbox" / "config.toml"
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(text)
        return config_path

    return _write


@pytest.fixture
def make_config(repo_root):
    """Return a function building a resolved WorkboxConfig from a dict."""

    def _make(**sections) -> WorkboxConfig:
        data = {
            "worktrees": {
                "directory": ".workbox/worktrees",
                "branch_prefix": BRANCH_PREFIX,
            }
        }
        data.update(sections)
        return resolve_config(WorkboxConfig.from_dict(data), str(repo_root))

    return _make
