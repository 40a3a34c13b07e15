"""Worktree lifecycle service for claude-trees."""

import asyncio
import os
from typing import Dict, Iterable, List, Optional, Union

from claude_trees.exceptions import GitExecutionError, RepositoryNotFoundError
from claude_trees.logging_config import get_logger
from claude_trees.models.repo import Repo
from claude_trees.models.worktree import SHORT_SHA_LENGTH, Worktree
from claude_trees.services.git.runner import GitRunner

logger = get_logger(__name__)

BRANCH_REF_PREFIX = "refs/heads/"
MAIN_BRANCH_REFS = ("refs/heads/main", "refs/heads/master")


def _build_worktree(entry: Dict) -> Optional[Worktree]:
    """Turn one parsed porcelain block into a Worktree, or None if malformed."""
    path = entry.get("path")
    head = entry.get("HEAD")
    if not path or not head:
        logger.debug(f"Dropping malformed worktree block: {entry}")
        return None

    branch_ref = entry.get("branch")
    branch = None
    if branch_ref:
        if branch_ref.startswith(BRANCH_REF_PREFIX):
            branch = branch_ref[len(BRANCH_REF_PREFIX):]
        else:
            branch = branch_ref

    return Worktree(
        path=path,
        branch=branch,
        head_commit=head[:SHORT_SHA_LENGTH],
        is_main=entry.get("bare", False) or branch_ref in MAIN_BRANCH_REFS,
    )


def parse_worktree_porcelain(output: str) -> List[Worktree]:
    """Parse `git worktree list --porcelain` output.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name   (absent when detached)
        bare                            (only for the bare worktree)
        (blank line between worktrees)

    Blocks without a `worktree` or `HEAD` line are dropped. Order is preserved.
    """
    worktrees: List[Worktree] = []
    current: Dict = {}

    for raw_line in output.split("\n"):
        line = raw_line.rstrip("\r")

        if not line.strip():
            # Empty line marks end of worktree entry
            if current:
                worktree = _build_worktree(current)
                if worktree:
                    worktrees.append(worktree)
                current = {}
            continue

        if line.startswith("worktree "):
            current["path"] = line[len("worktree "):]
        elif line.startswith("HEAD "):
            current["HEAD"] = line[len("HEAD "):]
        elif line.startswith("branch "):
            current["branch"] = line[len("branch "):]
        elif line == "bare":
            current["bare"] = True
        # detached, locked and prunable lines carry nothing we model

    # Last entry when there is no trailing blank line
    if current:
        worktree = _build_worktree(current)
        if worktree:
            worktrees.append(worktree)

    return worktrees


class WorktreeService:
    """Service for discovering, creating and removing git worktrees.

    The service is stateless: every call shells out to git, and every
    operation is a coroutine that runs git in a worker thread.
    """

    def __init__(self, runner: Optional[GitRunner] = None):
        """Initialize the worktree service.

        Args:
            runner: Git runner to use (a default runner without timeout if omitted)
        """
        self.runner = runner or GitRunner()

    async def list_worktrees(self, repo_path: str) -> List[Worktree]:
        """List all worktrees of a repository in the order git reports them.

        Raises:
            GitExecutionError: If the path is not a repository or git fails
        """
        output = await self.runner.run_async(repo_path, "worktree", "list", "--porcelain")
        worktrees = parse_worktree_porcelain(output)

        logger.debug(f"Found {len(worktrees)} worktrees in {repo_path}")
        for wt in worktrees:
            logger.debug(f"  {wt}")
        return worktrees

    @staticmethod
    def worktree_path(repo_path: str, branch_name: str) -> str:
        """Compute the destination of a new worktree.

        The worktree is a sibling of the repository named
        `<repository-directory-name>-<branch_name>`.
        """
        trimmed = repo_path.rstrip(os.sep) or repo_path
        parent = os.path.dirname(trimmed)
        repo_name = os.path.basename(trimmed)
        return os.path.join(parent, f"{repo_name}-{branch_name}")

    async def create_worktree(
        self, repo_path: str, branch_name: str, base_branch: Optional[str] = None
    ) -> str:
        """Create a worktree bound to a new branch.

        Args:
            repo_path: Path to the repository
            branch_name: Name of the branch to create
            base_branch: Branch to start from. When None, git starts the new
                branch from whatever is checked out in repo_path.

        Returns:
            Path of the new worktree (as computed, not re-checked on disk)

        Raises:
            GitExecutionError: On name collision, unknown base branch or git failure
        """
        destination = self.worktree_path(repo_path, branch_name)
        args = ["worktree", "add", "-b", branch_name, destination]
        if base_branch:
            args.append(base_branch)

        await self.runner.run_async(repo_path, *args)
        logger.info(
            f"Created worktree for {branch_name} at {destination}"
            + (f" from {base_branch}" if base_branch else "")
        )
        return destination

    async def remove_worktree(self, repo_path: str, worktree_path: str, force: bool = False) -> None:
        """Remove a worktree, then prune stale worktree metadata.

        Prune runs even when the removal fails. The removal error wins in
        that case, a prune error is only logged.

        Args:
            repo_path: Path to the repository owning the worktree
            worktree_path: Path of the worktree to remove
            force: Remove even if the worktree has uncommitted changes

        Raises:
            GitExecutionError: If removal (or the follow-up prune) fails
        """
        args = ["worktree", "remove"]
        if force:
            args.append("--force")
        args.append(worktree_path)

        try:
            await self.runner.run_async(repo_path, *args)
            logger.info(f"Removed worktree at {worktree_path}")
        except GitExecutionError as e:
            logger.error(f"Failed to remove worktree at {worktree_path}: {e}")
            try:
                await self.prune_worktrees(repo_path)
            except GitExecutionError as prune_error:
                logger.warning(f"Prune after failed removal also failed: {prune_error}")
            raise

        await self.prune_worktrees(repo_path)

    async def prune_worktrees(self, repo_path: str) -> None:
        """Prune administrative data of worktrees that no longer exist."""
        await self.runner.run_async(repo_path, "worktree", "prune")
        logger.debug(f"Pruned worktree metadata in {repo_path}")

    async def has_uncommitted_changes(self, worktree_path: str) -> bool:
        """Check whether a worktree has staged, modified or untracked files.

        This is a point-in-time answer, nothing stops another process from
        touching the worktree right after.
        """
        status = await self.runner.run_async(worktree_path, "status", "--porcelain")
        return bool(status.strip())

    async def list_branches(self, repo_path: str) -> List[str]:
        """List local branch names in git's order."""
        output = await self.runner.run_async(repo_path, "branch", "--format=%(refname:short)")
        return [name.strip() for name in output.split("\n") if name.strip()]

    async def get_remote_url(self, repo_path: str, remote: str = "origin") -> Optional[str]:
        """Get the URL of a remote, or None if it isn't configured."""
        try:
            url = await self.runner.run_async(repo_path, "remote", "get-url", remote)
        except GitExecutionError as e:
            logger.debug(f"No remote '{remote}' in {repo_path}: {e}")
            return None
        return url.strip() or None

    async def list_worktrees_for_repos(
        self, repos: Iterable[Repo]
    ) -> Dict[str, Union[List[Worktree], GitExecutionError, RepositoryNotFoundError]]:
        """List worktrees of several repositories concurrently.

        A failure in one repository is returned in place of its list and does
        not affect the others.

        Returns:
            Mapping of repo id to its worktrees or the error it failed with
        """

        async def _list_one(repo: Repo):
            if not os.path.exists(repo.path):
                return RepositoryNotFoundError(repo.path)
            try:
                return await self.list_worktrees(repo.path)
            except GitExecutionError as e:
                logger.warning(f"Could not list worktrees for {repo.name}: {e}")
                return e

        repos = list(repos)
        results = await asyncio.gather(*(_list_one(repo) for repo in repos))
        return {repo.id: result for repo, result in zip(repos, results)}
