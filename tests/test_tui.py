"""Tests for repository management in the TUI"""
import asyncio
import os

from textual.widgets import Input

from claude_trees.core import ClaudeTrees
from claude_trees.services.repo_store import RepoStore
from claude_trees.tui import ClaudeTreesApp
from claude_trees.ui.screens import AddRepoScreen


def run_app(mock_config, scenario):
    """Run the app headless and hand the pilot to the scenario."""
    async def _run():
        app = ClaudeTreesApp(ClaudeTrees(mock_config, tui_mode=True))
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()
            await scenario(app, pilot)

    asyncio.run(_run())


async def submit_path(app, pilot, path):
    await pilot.press("a")
    await pilot.pause()
    app.screen.query_one("#repo-path-input", Input).value = path
    await pilot.press("enter")
    await pilot.pause()
    await app.workers.wait_for_complete()
    await pilot.pause()


class TestAddRepo:
    """Test registering a repository with the a key."""

    def test_add_repository(self, mock_config, git_repo):
        """The new repository is saved and its worktrees are listed."""
        async def scenario(app, pilot):
            await submit_path(app, pilot, git_repo.working_dir)

            assert not isinstance(app.screen, AddRepoScreen)
            assert [repo.path for repo in app.trees.repos] == [git_repo.working_dir]
            assert [row.worktree.branch for row in app.rows if row.worktree] == ["main"]

        run_app(mock_config, scenario)
        assert [repo.path for repo in RepoStore(mock_config['repos_file']).repos] == [git_repo.working_dir]

    def test_missing_directory_keeps_form_open(self, mock_config, temp_dir):
        async def scenario(app, pilot):
            await submit_path(app, pilot, str(temp_dir / "nowhere"))

            assert isinstance(app.screen, AddRepoScreen)
            assert app.trees.repos == []

        run_app(mock_config, scenario)

    def test_already_registered(self, mock_config, git_repo):
        RepoStore(mock_config['repos_file']).add_repo(git_repo.working_dir)

        async def scenario(app, pilot):
            await submit_path(app, pilot, git_repo.working_dir)
            assert len(app.trees.repos) == 1

        run_app(mock_config, scenario)

    def test_escape_cancels(self, mock_config):
        async def scenario(app, pilot):
            await pilot.press("a")
            await pilot.pause()
            await pilot.press("escape")
            await pilot.pause()

            assert not isinstance(app.screen, AddRepoScreen)
            assert app.trees.repos == []

        run_app(mock_config, scenario)


class TestRemoveRepo:
    """Test unregistering a repository with the x key."""

    def test_remove_selected_repository(self, mock_config, git_repo):
        """The repository leaves the list but stays on disk."""
        RepoStore(mock_config['repos_file']).add_repo(git_repo.working_dir)

        async def scenario(app, pilot):
            assert app.rows[0].repo.path == git_repo.working_dir
            await pilot.press("x")
            await pilot.pause()
            await pilot.click("#yes")
            await pilot.pause()

            assert app.trees.repos == []
            assert app.rows == []
            assert app.worktrees_by_repo == {}

        run_app(mock_config, scenario)
        assert RepoStore(mock_config['repos_file']).repos == []
        assert os.path.isdir(git_repo.working_dir)

    def test_declined_keeps_repository(self, mock_config, git_repo):
        RepoStore(mock_config['repos_file']).add_repo(git_repo.working_dir)

        async def scenario(app, pilot):
            await pilot.press("x")
            await pilot.pause()
            await pilot.click("#no")
            await pilot.pause()

            assert len(app.trees.repos) == 1
            assert len(app.rows) == 2

        run_app(mock_config, scenario)
