"""Command-line entry point for claude-trees"""

import asyncio
import sys
from argparse import Namespace
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from claude_trees.cli.args import parse_args
from claude_trees.config import EDITABLE_KEYS, load_config, set_config_value
from claude_trees.core import ClaudeTrees
from claude_trees.exceptions import ClaudeTreesError
from claude_trees.formatters import format_removal_prompt
from claude_trees.logging_config import get_logger, setup_logging

console = Console()
logger = get_logger(__name__)


def _confirm(question: str) -> bool:
    response = console.input(f"{escape(question)} [y/N] ")
    return response.strip().lower() == 'y'


def cmd_repos(app: ClaudeTrees, args: Namespace) -> int:
    if args.repos_command == "add":
        repo = app.repo_store.add_repo(args.path)
        if repo is None:
            console.print(f"[yellow]{escape(args.path)} is already registered[/yellow]")
        else:
            console.print(f"[green]Added {escape(repo.name)}[/green] ({escape(repo.path)})")
        return 0

    if args.repos_command == "remove":
        repo = app.repo_store.find(args.repo)
        if repo is None or not app.repo_store.remove_repo(repo.id):
            console.print(f"[red]No registered repository matches '{escape(args.repo)}'[/red]")
            return 1
        console.print(f"Removed {escape(repo.name)}")
        return 0

    app.display_service.display_repos(app.repos)
    return 0


def cmd_list(app: ClaudeTrees, args: Namespace) -> int:
    repos = [app.resolve_repo(path) for path in args.paths] if args.paths else None
    asyncio.run(app.show_worktrees(repos))
    return 0


def cmd_new(app: ClaudeTrees, args: Namespace) -> int:
    repo = app.resolve_repo(args.repo)
    path = asyncio.run(app.create_worktree(repo, args.branch, args.base))
    console.print(f"[green]Created worktree[/green] {escape(path)}")

    if args.open:
        app.open_terminal(path)
    return 0


async def _remove_worktree(app: ClaudeTrees, args: Namespace) -> int:
    repo = app.resolve_repo(args.repo)
    worktree = await app.find_worktree(repo, args.worktree)
    if worktree.is_main:
        console.print("[red]The main worktree cannot be removed[/red]")
        return 1

    flow = app.start_removal(repo, worktree)
    has_changes = await flow.check_changes()
    if flow.is_finished:
        console.print(f"[red]Error: {escape(flow.error or '')}[/red]")
        return 1

    if args.yes or _confirm(format_removal_prompt(worktree, has_changes)):
        flow.confirm()
    else:
        flow.cancel()
        console.print("[yellow]Removal cancelled[/yellow]")
        return 0

    if not await flow.delete():
        console.print(f"[red]Error: {escape(flow.error or '')}[/red]")
        return 1

    console.print(f"[green]Removed worktree[/green] {escape(worktree.path)}")
    return 0


def cmd_remove(app: ClaudeTrees, args: Namespace) -> int:
    return asyncio.run(_remove_worktree(app, args))


def cmd_branches(app: ClaudeTrees, args: Namespace) -> int:
    repo = app.resolve_repo(args.repo)
    branches = asyncio.run(app.worktree_service.list_branches(repo.path))
    app.display_service.display_branches(branches)
    return 0


def cmd_open(app: ClaudeTrees, args: Namespace) -> int:
    app.open_terminal(args.path, args.terminal)
    return 0


def cmd_mcp(app: ClaudeTrees, args: Namespace) -> int:
    settings = app.settings_service
    settings.load()
    if settings.error_message:
        console.print(f"[red]{escape(settings.error_message)}[/red]")
        return 1

    if args.mcp_command in ("enable", "disable"):
        if settings.get(args.name) is None:
            console.print(f"[red]Unknown MCP server '{escape(args.name)}'[/red]")
            return 1
        if not settings.set_enabled(args.name, args.mcp_command == "enable"):
            console.print(f"[red]{escape(settings.error_message or 'Failed to save settings')}[/red]")
            return 1
        console.print(f"{escape(args.name)}: {args.mcp_command}d")
        return 0

    app.display_service.display_mcp_servers(settings.servers)
    return 0


def cmd_config(app: ClaudeTrees, args: Namespace) -> int:
    if args.config_command == "set":
        updated = set_config_value(args.key, args.value, args.config)
        console.print(f"{args.key} = {escape(repr(updated.get(args.key)))}")
        return 0

    if args.config_command == "get":
        console.print(escape(str(app.config.get(args.key))))
        return 0

    for key in EDITABLE_KEYS:
        console.print(f"{key} = {escape(repr(app.config.get(key)))}")
    return 0


COMMANDS = {
    "repos": cmd_repos,
    "list": cmd_list,
    "new": cmd_new,
    "remove": cmd_remove,
    "rm": cmd_remove,
    "branches": cmd_branches,
    "open": cmd_open,
    "mcp": cmd_mcp,
    "config": cmd_config,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)

        # Default to the TUI in a terminal, unless a command was given or it's disabled
        use_interactive = parsed_args.command is None and (
            parsed_args.interactive or (sys.stdin.isatty() and not parsed_args.no_interactive)
        )

        setup_logging(
            verbose=parsed_args.verbose, debug=parsed_args.debug, tui_mode=use_interactive
        )

        config = load_config(parsed_args.config)
        config.verbose = config.verbose or parsed_args.verbose
        config.debug = config.debug or parsed_args.debug

        if config.debug:
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")

        app = ClaudeTrees(config, tui_mode=use_interactive)

        if use_interactive:
            from claude_trees.tui import ClaudeTreesApp
            ClaudeTreesApp(app).run()
            return 0

        command = COMMANDS.get(parsed_args.command or "list")
        return command(app, parsed_args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except (ClaudeTreesError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if parsed_args is not None and parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
