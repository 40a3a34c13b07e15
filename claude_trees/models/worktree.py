"""Worktree data model."""

from dataclasses import dataclass
from typing import Optional

SHORT_SHA_LENGTH = 7


@dataclass(frozen=True)
class Worktree:
    """One checked-out working copy of a repository."""

    path: str
    branch: Optional[str]  # None = detached HEAD
    head_commit: str  # Short (7-character) hash
    is_main: bool  # Bare worktree, or checked out on main/master

    @property
    def identifier(self) -> str:
        """Unique key of the worktree (git allows one worktree per path)."""
        return self.path

    @property
    def is_detached(self) -> bool:
        return self.branch is None

    @property
    def display_name(self) -> str:
        """Branch name, or the short hash when HEAD is detached."""
        return self.branch or self.head_commit

    def __str__(self) -> str:
        main_marker = " (main)" if self.is_main else ""
        return f"{self.display_name} @ {self.path}{main_marker} [{self.head_commit}]"
