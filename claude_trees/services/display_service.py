"""Display service for worktree, branch and MCP server listings"""
from typing import Dict, List, Optional, Union

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from claude_trees.constants import CLI_COLORS, COLUMNS, SYMBOL_DISABLED, SYMBOL_ENABLED, RowStyleType
from claude_trees.exceptions import ClaudeTreesError
from claude_trees.formatters import (
    abbreviate_path,
    format_compare_link,
    format_worktree_label,
    get_worktree_style_type,
)
from claude_trees.logging_config import get_logger
from claude_trees.models.mcp_server import MCPServer
from claude_trees.models.repo import Repo
from claude_trees.models.worktree import Worktree

console = Console()
logger = get_logger(__name__)


class DisplayService:
    def __init__(self, verbose: bool = False, debug: bool = False):
        self.verbose = verbose
        self.debug_mode = debug

    def display_worktree_table(
        self,
        repos: List[Repo],
        results: Dict[str, Union[List[Worktree], ClaudeTreesError]],
        github_urls: Optional[Dict[str, Optional[str]]] = None,
    ) -> None:
        """Display the worktrees of each repository, one section per repo."""
        github_urls = github_urls or {}
        table = Table()

        for col in COLUMNS:
            table.add_column(col.label)

        for repo in repos:
            table.add_row(escape(repo.name), "", escape(abbreviate_path(repo.path)), "", style=CLI_COLORS[RowStyleType.REPO])

            result = results.get(repo.id)
            if isinstance(result, ClaudeTreesError):
                table.add_row(f"  {escape(str(result))}", "", "", "", style=CLI_COLORS[RowStyleType.ERROR])
                continue
            if not result:
                table.add_row("  No worktrees", "", "", "", style="dim")
                continue

            for worktree in result:
                style = CLI_COLORS.get(get_worktree_style_type(worktree))
                table.add_row(
                    f"  {escape(format_worktree_label(worktree))}",
                    worktree.head_commit,
                    escape(abbreviate_path(worktree.path)),
                    format_compare_link(worktree, github_urls.get(repo.id)),
                    style=style,
                )

        console.print(table)

        if self.verbose:
            total = sum(len(r) for r in results.values() if isinstance(r, list))
            failed = sum(1 for r in results.values() if isinstance(r, ClaudeTreesError))
            console.print(f"\n{len(repos)} repositories, {total} worktrees, {failed} failed")

    def display_repos(self, repos: List[Repo]) -> None:
        """Display the registered repositories."""
        if not repos:
            console.print("No repositories registered. Add one with [cyan]claude-trees repos add PATH[/cyan]")
            return

        table = Table()
        table.add_column("Name")
        table.add_column("Path")
        table.add_column("ID", style="dim")
        for repo in repos:
            table.add_row(escape(repo.name), escape(abbreviate_path(repo.path)), repo.id)
        console.print(table)

    def display_branches(self, branches: List[str]) -> None:
        for branch in branches:
            console.print(escape(branch))

    def display_mcp_servers(self, servers: List[MCPServer]) -> None:
        """Display MCP servers with their enabled state."""
        table = Table()
        table.add_column("Name")
        table.add_column("Status", justify="center")
        table.add_column("Command")

        for server in servers:
            status = f"[green]{SYMBOL_ENABLED}[/green]" if server.is_enabled else f"[red]{SYMBOL_DISABLED}[/red]"
            command = " ".join([server.command or ""] + (server.args or [])).strip()
            table.add_row(escape(server.id), status, escape(command or (server.type or "")))

        console.print(table)
