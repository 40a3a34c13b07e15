"""Pytest fixtures for claude-trees tests"""
import json
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import git
import pytest

from claude_trees.models.worktree import Worktree
from claude_trees.services.git.runner import GitRunner
from claude_trees.services.git.worktrees import WorktreeService


MAIN_SHA = "1111111aaaaaaabbbbbbbcccccccdddddddeeee"
FEATURE_SHA = "2222222aaaaaaabbbbbbbcccccccdddddddeeee"
DETACHED_SHA = "3333333aaaaaaabbbbbbbcccccccdddddddeeee"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        # git reports resolved paths (/private/var on macOS)
        yield Path(tmpdir).resolve()


@pytest.fixture
def mock_config(temp_dir):
    """Create a configuration dictionary pointing at temporary files."""
    return {
        'verbose': False,
        'debug': False,
        'preferred_terminal': 'Terminal',
        'claude_cli_path': '~/.local/bin/claude',
        'repos_file': str(temp_dir / "state" / "repos.json"),
        'mcp_settings_path': str(temp_dir / "claude" / "settings.json"),
    }


@pytest.fixture
def config_file(temp_dir, mock_config):
    """Write the mock configuration to a JSON file."""
    path = temp_dir / "config.json"
    path.write_text(json.dumps(mock_config))
    return path


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with one commit on main."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Independent of init.defaultBranch
    repo.git.branch('-M', 'main')

    yield repo

    repo.close()


@pytest.fixture
def git_repo_with_remote(git_repo):
    """Repository with a GitHub origin remote."""
    git_repo.create_remote('origin', 'git@github.com:test/test-repo.git')
    return git_repo


@pytest.fixture
def worktree_service():
    """Service backed by the real git binary."""
    return WorktreeService(GitRunner(timeout=30))


@pytest.fixture
def mock_runner():
    """Runner whose git calls are recorded instead of executed."""
    runner = Mock(spec=GitRunner)
    runner.run_async = AsyncMock(return_value="")
    return runner


@pytest.fixture
def porcelain_output():
    """Porcelain listing with a main, a feature and a detached worktree."""
    return (
        f"worktree /repos/app\n"
        f"HEAD {MAIN_SHA}\n"
        f"branch refs/heads/main\n"
        f"\n"
        f"worktree /repos/app-feature\n"
        f"HEAD {FEATURE_SHA}\n"
        f"branch refs/heads/feature\n"
        f"\n"
        f"worktree /repos/app-detached\n"
        f"HEAD {DETACHED_SHA}\n"
        f"detached\n"
        f"\n"
    )


@pytest.fixture
def feature_worktree():
    return Worktree(path="/repos/app-feature", branch="feature", head_commit="2222222", is_main=False)


@pytest.fixture
def main_worktree():
    return Worktree(path="/repos/app", branch="main", head_commit="1111111", is_main=True)
