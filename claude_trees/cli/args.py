"""Command-line argument parsing for claude-trees."""

import argparse
from typing import List, Optional

from claude_trees.__version__ import __version__
from claude_trees.config import EDITABLE_KEYS
from claude_trees.services.terminal_launcher import TerminalApp


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="claude-trees",
        description="Manage git worktrees across repositories and open them in a terminal with Claude",
        epilog="Without a command, the interactive TUI starts when running in a terminal.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"claude-trees {__version__}")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument(
        "--config", metavar="PATH", help="Config file (default: ~/.claude-trees/config.json)"
    )
    parser.add_argument(
        "--interactive", action="store_true", help="Launch interactive TUI mode (default for TTY)"
    )
    parser.add_argument(
        "--no-interactive",
        action="store_true",
        help="Force non-interactive CLI mode (for scripts/automation)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # repos
    repos_parser = subparsers.add_parser("repos", help="Manage registered repositories")
    repos_sub = repos_parser.add_subparsers(dest="repos_command", metavar="ACTION")
    repos_sub.add_parser("list", help="List registered repositories")
    add_parser = repos_sub.add_parser("add", help="Register a repository")
    add_parser.add_argument("path", help="Path to the git repository")
    remove_repo_parser = repos_sub.add_parser("remove", help="Unregister a repository")
    remove_repo_parser.add_argument("repo", help="Path, name or id of the repository")

    # list
    list_parser = subparsers.add_parser("list", help="List worktrees of repositories")
    list_parser.add_argument(
        "paths", nargs="*", metavar="REPO", help="Repositories to list (default: all registered)"
    )

    # new
    new_parser = subparsers.add_parser("new", help="Create a worktree on a new branch")
    new_parser.add_argument("repo", help="Path, name or id of the repository")
    new_parser.add_argument("branch", help="Name of the branch to create")
    new_parser.add_argument(
        "--base", help="Branch to start from (default: main or master if present)"
    )
    new_parser.add_argument(
        "--open", action="store_true", help="Open the new worktree in the terminal"
    )

    # remove
    rm_parser = subparsers.add_parser("remove", aliases=["rm"], help="Remove a worktree")
    rm_parser.add_argument("repo", help="Path, name or id of the repository")
    rm_parser.add_argument("worktree", help="Path of the worktree to remove")
    rm_parser.add_argument(
        "-y", "--yes", action="store_true", help="Skip confirmations (dirty worktrees are forced)"
    )

    # branches
    branches_parser = subparsers.add_parser("branches", help="List local branches")
    branches_parser.add_argument("repo", help="Path, name or id of the repository")

    # open
    open_parser = subparsers.add_parser("open", help="Open a path in the terminal with Claude")
    open_parser.add_argument("path", help="Directory to open")
    open_parser.add_argument(
        "--terminal",
        choices=[app.value for app in TerminalApp],
        help="Terminal application (default: configured terminal)",
    )

    # mcp
    mcp_parser = subparsers.add_parser("mcp", help="Manage MCP servers in Claude settings")
    mcp_sub = mcp_parser.add_subparsers(dest="mcp_command", metavar="ACTION")
    mcp_sub.add_parser("list", help="List MCP servers")
    enable_parser = mcp_sub.add_parser("enable", help="Enable an MCP server")
    enable_parser.add_argument("name", help="Server name")
    disable_parser = mcp_sub.add_parser("disable", help="Disable an MCP server")
    disable_parser.add_argument("name", help="Server name")

    # config
    config_parser = subparsers.add_parser("config", help="Show or change settings")
    config_sub = config_parser.add_subparsers(dest="config_command", metavar="ACTION")
    config_sub.add_parser("show", help="Show all settings")
    get_parser = config_sub.add_parser("get", help="Show one setting")
    get_parser.add_argument("key", choices=EDITABLE_KEYS)
    set_parser = config_sub.add_parser("set", help="Change a setting and save it")
    set_parser.add_argument("key", choices=EDITABLE_KEYS)
    set_parser.add_argument("value", help="New value (git_timeout accepts 'none')")

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
