"""Core functionality for claude-trees"""

import asyncio
import os
from typing import Dict, Iterable, List, Optional, Union

from rich.console import Console

from claude_trees.config import Config
from claude_trees.exceptions import ClaudeTreesError, GitExecutionError
from claude_trees.logging_config import get_logger
from claude_trees.models.repo import Repo
from claude_trees.models.worktree import Worktree
from claude_trees.services.display_service import DisplayService
from claude_trees.services.git import GitRunner, WorktreeService, derive_compare_url
from claude_trees.services.removal_flow import WorktreeRemovalFlow
from claude_trees.services.repo_store import RepoStore
from claude_trees.services.settings_service import SettingsService
from claude_trees.services.terminal_launcher import LaunchSpec, open_in_terminal

console = Console()
logger = get_logger(__name__)

DEFAULT_BASE_BRANCHES = ("main", "master")


class ClaudeTrees:
    """Ties the registry, the worktree manager and the launchers together.

    Holds no worktree state of its own: callers keep whatever they list and
    re-list after every mutation.
    """

    def __init__(self, config: Union[Config, dict], tui_mode: bool = False):
        """Initialize ClaudeTrees.

        Args:
            config: Configuration dict or Config object
            tui_mode: If True, suppresses Rich console output (for TUI mode)
        """
        if isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config
        self.tui_mode = tui_mode
        self.verbose = self.config.verbose
        self.debug_mode = self.config.debug

        self.worktree_service = WorktreeService(GitRunner(timeout=self.config.git_timeout))
        self.repo_store = RepoStore(self.config.repos_file)
        self.settings_service = SettingsService(self.config.mcp_settings_path)
        self.display_service = DisplayService(verbose=self.verbose, debug=self.debug_mode)

    def _console_print(self, *args, **kwargs):
        """Print to console only when not in TUI mode."""
        if not self.tui_mode:
            console.print(*args, **kwargs)

    @property
    def repos(self) -> List[Repo]:
        return self.repo_store.repos

    def resolve_repo(self, path_or_id: str) -> Repo:
        """Find a registered repository, or wrap an unregistered path."""
        repo = self.repo_store.find(path_or_id)
        if repo:
            return repo
        return Repo(path=os.path.abspath(os.path.expanduser(path_or_id)))

    async def load_worktrees(
        self, repos: Optional[Iterable[Repo]] = None
    ) -> Dict[str, Union[List[Worktree], ClaudeTreesError]]:
        """List worktrees of the given (default: all registered) repositories."""
        repos = list(self.repos if repos is None else repos)
        return await self.worktree_service.list_worktrees_for_repos(repos)

    async def get_github_urls(self, repos: Iterable[Repo]) -> Dict[str, Optional[str]]:
        """Web URLs of the repositories' origin remotes (None where unavailable)."""
        repos = [repo for repo in repos if os.path.exists(repo.path)]
        remote_urls = await asyncio.gather(
            *(self.worktree_service.get_remote_url(repo.path) for repo in repos)
        )
        return {
            repo.id: derive_compare_url(url) if url else None
            for repo, url in zip(repos, remote_urls)
        }

    async def default_base_branch(self, repo_path: str) -> Optional[str]:
        """Pick main or master as base for new worktrees, if the repo has one.

        Returns None when neither exists, git then branches off whatever is
        checked out.
        """
        try:
            branches = await self.worktree_service.list_branches(repo_path)
        except GitExecutionError as e:
            logger.debug(f"Could not list branches of {repo_path}: {e}")
            return None
        return next((b for b in branches if b in DEFAULT_BASE_BRANCHES), None)

    async def create_worktree(
        self, repo: Repo, branch_name: str, base_branch: Optional[str] = None
    ) -> str:
        """Create a worktree on a new branch, based on main/master when not given."""
        branch_name = branch_name.strip()
        if not branch_name:
            raise ClaudeTreesError("Branch name cannot be empty")

        if base_branch is None:
            base_branch = await self.default_base_branch(repo.path)
        return await self.worktree_service.create_worktree(repo.path, branch_name, base_branch)

    async def find_worktree(self, repo: Repo, worktree_path: str) -> Worktree:
        """Look up a worktree of a repository by its path."""
        target = os.path.realpath(os.path.expanduser(worktree_path))
        for worktree in await self.worktree_service.list_worktrees(repo.path):
            if os.path.realpath(worktree.path) == target:
                return worktree
        raise ClaudeTreesError(f"No worktree at {worktree_path} in {repo.name}")

    def start_removal(self, repo: Repo, worktree: Worktree) -> WorktreeRemovalFlow:
        return WorktreeRemovalFlow(self.worktree_service, repo.path, worktree)

    def open_terminal(self, path: str, terminal: Optional[str] = None) -> LaunchSpec:
        """Open a path in the configured (or given) terminal running the Claude CLI."""
        return open_in_terminal(
            path,
            terminal or self.config.preferred_terminal,
            self.config.claude_cli_path,
        )

    async def show_worktrees(self, repos: Optional[List[Repo]] = None) -> None:
        """Print the worktree table for the CLI."""
        repos = list(self.repos if repos is None else repos)
        if not repos:
            self.display_service.display_repos(repos)
            return

        if self.verbose:
            self._console_print(f"[dim]Listing worktrees of {len(repos)} repositories...[/dim]")

        results, github_urls = await asyncio.gather(
            self.load_worktrees(repos), self.get_github_urls(repos)
        )
        self.display_service.display_worktree_table(repos, results, github_urls)
