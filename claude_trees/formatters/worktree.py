"""Worktree formatting utilities."""

import os
from typing import Optional

from claude_trees.constants import SYMBOL_MAIN, SYMBOL_WORKTREE, RowStyleType
from claude_trees.models.worktree import Worktree


def abbreviate_path(path: str, home: Optional[str] = None) -> str:
    """
    Replace the home directory prefix of a path with ~.

    Args:
        path: Absolute path
        home: Home directory (defaults to the current user's)

    Returns:
        Abbreviated path
    """
    home = (home or os.path.expanduser("~")).rstrip(os.sep)
    if home and (path == home or path.startswith(home + os.sep)):
        return "~" + path[len(home):]
    return path


def format_worktree_label(worktree: Worktree) -> str:
    """
    Format the branch column of a worktree.

    Main worktrees get a star, detached worktrees show their short hash.
    """
    symbol = SYMBOL_MAIN if worktree.is_main else SYMBOL_WORKTREE
    name = worktree.branch if worktree.branch else f"{worktree.head_commit} (detached)"
    return f"{symbol} {name}"


def format_removal_prompt(worktree: Worktree, has_changes: bool) -> str:
    """
    Build the confirmation question for removing a worktree.

    Args:
        worktree: Worktree to remove
        has_changes: Whether the worktree has uncommitted changes

    Returns:
        Message to show before the user confirms
    """
    target = f"{worktree.display_name} ({abbreviate_path(worktree.path)})"
    if has_changes:
        return (
            f"Worktree {target} has uncommitted changes.\n"
            "Removing it will discard them. Remove anyway?"
        )
    return f"Remove worktree {target}?"


def get_worktree_style_type(worktree: Worktree) -> str:
    return RowStyleType.MAIN if worktree.is_main else RowStyleType.WORKTREE
