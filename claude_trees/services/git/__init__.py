"""Git-related services for claude-trees."""

from .runner import GitRunner
from .worktrees import WorktreeService, parse_worktree_porcelain
from .github import derive_compare_url, compare_url_for_branch

__all__ = [
    "GitRunner",
    "WorktreeService",
    "parse_worktree_porcelain",
    "derive_compare_url",
    "compare_url_for_branch",
]
