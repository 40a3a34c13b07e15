"""Tests for WorktreeService"""
import asyncio
import os
from unittest.mock import call

import pytest

from claude_trees.exceptions import GitExecutionError, RepositoryNotFoundError
from claude_trees.models.repo import Repo
from claude_trees.services.git.worktrees import WorktreeService

from conftest import MAIN_SHA


class TestWorktreePath:
    """Test the destination of new worktrees."""

    def test_sibling_of_repository(self):
        assert WorktreeService.worktree_path("/repos/app", "feature") == "/repos/app-feature"

    def test_base_branch_does_not_change_destination(self, mock_runner):
        service = WorktreeService(mock_runner)
        without_base = asyncio.run(service.create_worktree("/repos/app", "feature-x"))
        with_base = asyncio.run(service.create_worktree("/repos/app", "feature-x", "develop"))
        assert without_base == with_base == "/repos/app-feature-x"

    def test_trailing_separator(self):
        assert WorktreeService.worktree_path("/repos/app/", "feature") == "/repos/app-feature"

    def test_branch_with_slash(self):
        """Slashes in the branch name nest the worktree below the sibling prefix."""
        assert WorktreeService.worktree_path("/repos/app", "feat/x") == "/repos/app-feat/x"


class TestWorktreeServiceWithRepo:
    """Test worktree operations against a real repository."""

    def test_list_main_worktree(self, git_repo, worktree_service):
        worktrees = asyncio.run(worktree_service.list_worktrees(git_repo.working_dir))
        assert len(worktrees) == 1
        main = worktrees[0]
        assert main.path == git_repo.working_dir
        assert main.branch == "main"
        assert main.is_main is True
        assert main.head_commit == git_repo.head.commit.hexsha[:7]

    def test_create_worktree(self, git_repo, worktree_service):
        """A new worktree is created next to the repository on a new branch."""
        path = asyncio.run(worktree_service.create_worktree(git_repo.working_dir, "feature"))

        assert path == f"{git_repo.working_dir}-feature"
        assert os.path.isdir(path)
        assert "feature" in [h.name for h in git_repo.heads]

        worktrees = asyncio.run(worktree_service.list_worktrees(git_repo.working_dir))
        assert [wt.branch for wt in worktrees] == ["main", "feature"]
        assert worktrees[1].path == path
        assert worktrees[1].is_main is False

    def test_create_worktree_from_base_branch(self, git_repo, worktree_service):
        repo_path = git_repo.working_dir
        git_repo.git.checkout('-b', 'develop')
        with open(os.path.join(repo_path, "dev.txt"), "w") as f:
            f.write("develop\n")
        git_repo.index.add(["dev.txt"])
        develop_commit = git_repo.index.commit("Develop work")
        git_repo.git.checkout('main')

        path = asyncio.run(worktree_service.create_worktree(repo_path, "topic", "develop"))
        worktrees = asyncio.run(worktree_service.list_worktrees(repo_path))

        topic = next(wt for wt in worktrees if wt.path == path)
        assert topic.head_commit == develop_commit.hexsha[:7]

    def test_create_existing_branch_fails(self, git_repo, worktree_service):
        """Creating a worktree for an existing branch reports git's error."""
        git_repo.git.branch('taken')
        with pytest.raises(GitExecutionError) as exc_info:
            asyncio.run(worktree_service.create_worktree(git_repo.working_dir, "taken"))

        assert "taken" in exc_info.value.message
        assert exc_info.value.status != 0

    def test_create_with_unknown_base_fails(self, git_repo, worktree_service):
        with pytest.raises(GitExecutionError):
            asyncio.run(worktree_service.create_worktree(git_repo.working_dir, "topic", "no-such-branch"))

    def test_uncommitted_changes(self, git_repo, worktree_service):
        """Untracked and modified files count as changes."""
        path = asyncio.run(worktree_service.create_worktree(git_repo.working_dir, "feature"))
        assert asyncio.run(worktree_service.has_uncommitted_changes(path)) is False

        with open(os.path.join(path, "scratch.txt"), "w") as f:
            f.write("wip\n")
        assert asyncio.run(worktree_service.has_uncommitted_changes(path)) is True

    def test_remove_clean_worktree(self, git_repo, worktree_service):
        repo_path = git_repo.working_dir
        path = asyncio.run(worktree_service.create_worktree(repo_path, "feature"))

        asyncio.run(worktree_service.remove_worktree(repo_path, path))

        assert not os.path.exists(path)
        worktrees = asyncio.run(worktree_service.list_worktrees(repo_path))
        assert [wt.path for wt in worktrees] == [repo_path]

    def test_remove_dirty_worktree_requires_force(self, git_repo, worktree_service):
        """git refuses to remove a dirty worktree without force."""
        repo_path = git_repo.working_dir
        path = asyncio.run(worktree_service.create_worktree(repo_path, "feature"))
        with open(os.path.join(path, "scratch.txt"), "w") as f:
            f.write("wip\n")

        with pytest.raises(GitExecutionError) as exc_info:
            asyncio.run(worktree_service.remove_worktree(repo_path, path))
        assert exc_info.value.message
        assert "stderr:" not in exc_info.value.message
        assert os.path.exists(path)

        asyncio.run(worktree_service.remove_worktree(repo_path, path, force=True))
        assert not os.path.exists(path)

    def test_prune_forgets_deleted_worktree(self, git_repo, worktree_service):
        repo_path = git_repo.working_dir
        path = asyncio.run(worktree_service.create_worktree(repo_path, "feature"))
        git_repo.git.worktree('remove', path)

        asyncio.run(worktree_service.prune_worktrees(repo_path))
        worktrees = asyncio.run(worktree_service.list_worktrees(repo_path))
        assert len(worktrees) == 1

    def test_list_branches(self, git_repo, worktree_service):
        git_repo.git.branch('feature/one')
        git_repo.git.branch('other')
        branches = asyncio.run(worktree_service.list_branches(git_repo.working_dir))
        assert sorted(branches) == ["feature/one", "main", "other"]

    def test_invalid_path_raises(self, temp_dir, worktree_service):
        """A directory that isn't a repository fails with git's message."""
        not_a_repo = temp_dir / "plain"
        not_a_repo.mkdir()
        with pytest.raises(GitExecutionError) as exc_info:
            asyncio.run(worktree_service.list_worktrees(str(not_a_repo)))
        assert exc_info.value.message

    def test_remote_url(self, git_repo_with_remote, worktree_service):
        url = asyncio.run(worktree_service.get_remote_url(git_repo_with_remote.working_dir))
        assert url == "git@github.com:test/test-repo.git"

    def test_missing_remote_is_none(self, git_repo, worktree_service):
        assert asyncio.run(worktree_service.get_remote_url(git_repo.working_dir)) is None


class TestListWorktreesForRepos:
    """Test listing several repositories at once."""

    def test_failures_are_isolated(self, git_repo, temp_dir, worktree_service):
        """A missing repository doesn't affect the others."""
        good = Repo(path=git_repo.working_dir)
        missing = Repo(path=str(temp_dir / "gone"))
        plain_dir = temp_dir / "plain"
        plain_dir.mkdir()
        not_git = Repo(path=str(plain_dir))

        results = asyncio.run(worktree_service.list_worktrees_for_repos([good, missing, not_git]))

        assert len(results[good.id]) == 1
        assert isinstance(results[missing.id], RepositoryNotFoundError)
        assert str(results[missing.id]) == "Repository not found on disk"
        assert isinstance(results[not_git.id], GitExecutionError)

    def test_empty(self, worktree_service):
        assert asyncio.run(worktree_service.list_worktrees_for_repos([])) == {}


class TestWorktreeServiceCommands:
    """Test the git arguments the service passes to the runner."""

    def test_list_worktrees_command(self, mock_runner):
        mock_runner.run_async.return_value = f"worktree /repos/app\nHEAD {MAIN_SHA}\nbranch refs/heads/main\n"
        service = WorktreeService(mock_runner)

        worktrees = asyncio.run(service.list_worktrees("/repos/app"))

        mock_runner.run_async.assert_awaited_once_with("/repos/app", "worktree", "list", "--porcelain")
        assert worktrees[0].branch == "main"

    def test_create_without_base(self, mock_runner):
        service = WorktreeService(mock_runner)
        asyncio.run(service.create_worktree("/repos/app", "feature"))
        mock_runner.run_async.assert_awaited_once_with(
            "/repos/app", "worktree", "add", "-b", "feature", "/repos/app-feature"
        )

    def test_create_with_base(self, mock_runner):
        service = WorktreeService(mock_runner)
        asyncio.run(service.create_worktree("/repos/app", "feature", "develop"))
        mock_runner.run_async.assert_awaited_once_with(
            "/repos/app", "worktree", "add", "-b", "feature", "/repos/app-feature", "develop"
        )

    def test_remove_then_prune(self, mock_runner):
        service = WorktreeService(mock_runner)
        asyncio.run(service.remove_worktree("/repos/app", "/repos/app-feature"))
        assert mock_runner.run_async.await_args_list == [
            call("/repos/app", "worktree", "remove", "/repos/app-feature"),
            call("/repos/app", "worktree", "prune"),
        ]

    def test_force_remove(self, mock_runner):
        service = WorktreeService(mock_runner)
        asyncio.run(service.remove_worktree("/repos/app", "/repos/app-feature", force=True))
        assert mock_runner.run_async.await_args_list[0] == call(
            "/repos/app", "worktree", "remove", "--force", "/repos/app-feature"
        )

    def test_failed_remove_still_prunes(self, mock_runner):
        """Prune runs after a failed removal, and the removal error is raised."""
        mock_runner.run_async.side_effect = [
            GitExecutionError("fatal: '/repos/app-feature' is not a working tree"),
            GitExecutionError("prune failed"),
        ]
        service = WorktreeService(mock_runner)

        with pytest.raises(GitExecutionError) as exc_info:
            asyncio.run(service.remove_worktree("/repos/app", "/repos/app-feature"))

        assert exc_info.value.message == "fatal: '/repos/app-feature' is not a working tree"
        assert mock_runner.run_async.await_args_list[1] == call("/repos/app", "worktree", "prune")

    def test_status_output_means_changes(self, mock_runner):
        mock_runner.run_async.return_value = " M README.md\n?? notes.txt"
        service = WorktreeService(mock_runner)
        assert asyncio.run(service.has_uncommitted_changes("/repos/app-feature")) is True
        mock_runner.run_async.assert_awaited_once_with("/repos/app-feature", "status", "--porcelain")

    def test_whitespace_status_is_clean(self, mock_runner):
        mock_runner.run_async.return_value = "  \n"
        service = WorktreeService(mock_runner)
        assert asyncio.run(service.has_uncommitted_changes("/repos/app-feature")) is False

    def test_branches_skip_blank_lines(self, mock_runner):
        mock_runner.run_async.return_value = "main\n\n  feature  \n"
        service = WorktreeService(mock_runner)
        assert asyncio.run(service.list_branches("/repos/app")) == ["main", "feature"]
