"""Shared constants for claude-trees."""

from dataclasses import dataclass
from typing import List


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str


# Worktree columns shared by the CLI table and the TUI
COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("branch", "Branch"),
    ColumnDefinition("head", "HEAD"),
    ColumnDefinition("path", "Path"),
    ColumnDefinition("link", "Link"),
]


# Symbol constants
SYMBOL_MAIN = "★"
SYMBOL_WORKTREE = "⎇"
SYMBOL_REPO = "▸"
SYMBOL_ENABLED = "✓"
SYMBOL_DISABLED = "✗"


# Color/style constants
class RowStyleType:
    """Style types for table rows."""

    REPO = "repo"
    MAIN = "main"
    WORKTREE = "worktree"
    ERROR = "error"


# CLI colors (Rich color names)
CLI_COLORS = {
    RowStyleType.REPO: "bold",
    RowStyleType.MAIN: "yellow",
    RowStyleType.WORKTREE: None,
    RowStyleType.ERROR: "red",
}


# TUI colors (color names for Textual)
TUI_COLORS = {
    RowStyleType.REPO: "bold cyan",
    RowStyleType.MAIN: "yellow",
    RowStyleType.WORKTREE: "green",
    RowStyleType.ERROR: "red",
}


LEGEND_TEXT = """
Legend:
★ = Main worktree          ⎇ = Linked worktree
▸ = Repository             (detached) = No branch checked out

Keys:
n = New worktree           d = Delete worktree
o = Open in terminal       i = Worktree info
m = MCP servers            r = Refresh
a = Add repository         x = Remove repository
"""
