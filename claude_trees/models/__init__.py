"""Data models for claude-trees."""

from .worktree import Worktree
from .repo import Repo
from .mcp_server import MCPServer

__all__ = ["Worktree", "Repo", "MCPServer"]
