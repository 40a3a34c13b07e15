"""Formatting utilities for claude-trees.

- worktree: Worktree labels and path abbreviation
- links: GitHub link formatting
"""

from .worktree import (
    abbreviate_path,
    format_worktree_label,
    format_removal_prompt,
    get_worktree_style_type,
)
from .links import format_compare_link

__all__ = [
    "abbreviate_path",
    "format_worktree_label",
    "format_removal_prompt",
    "get_worktree_style_type",
    "format_compare_link",
]
