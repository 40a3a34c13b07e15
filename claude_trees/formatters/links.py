"""GitHub link formatting utilities."""

from typing import Optional

from claude_trees.models.worktree import Worktree
from claude_trees.services.git.github import compare_url_for_branch


def format_compare_link(
    worktree: Worktree, github_base_url: Optional[str], base_branch: Optional[str] = None
) -> str:
    """
    Format a compare link for a worktree's branch for CLI output.

    Args:
        worktree: Worktree to link
        github_base_url: Web URL of the repository (if available)
        base_branch: Branch to compare against

    Returns:
        Rich markup link, or an empty string when no link applies
    """
    if not github_base_url or not worktree.branch or worktree.is_main:
        return ""

    url = compare_url_for_branch(github_base_url, worktree.branch, base_branch)
    return f"[link={url}]compare[/link]"
