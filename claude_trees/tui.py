"""Interactive TUI for claude-trees using Textual."""

import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.coordinate import Coordinate
from textual.widgets import DataTable, Footer, Static

from .__version__ import __version__
from .constants import COLUMNS, LEGEND_TEXT, SYMBOL_REPO, TUI_COLORS, RowStyleType
from .core import DEFAULT_BASE_BRANCHES, ClaudeTrees
from .exceptions import ClaudeTreesError, GitExecutionError
from .formatters import (
    abbreviate_path,
    format_removal_prompt,
    format_worktree_label,
    get_worktree_style_type,
)
from .logging_config import get_logger
from .models.repo import Repo
from .models.worktree import Worktree
from .services.removal_flow import RemovalState, WorktreeRemovalFlow
from .ui.screens import (
    AddRepoScreen,
    ConfirmScreen,
    InfoScreen,
    MCPServersScreen,
    NewWorktreeScreen,
    build_worktree_info,
)
from .ui.widgets import NonExpandingHeader

logger = get_logger(__name__)


@dataclass
class TableRow:
    """One row of the table: a repository header, a worktree or a repo error."""

    repo: Repo
    worktree: Optional[Worktree] = None
    error: Optional[str] = None


class ClaudeTreesApp(App):
    """Interactive TUI for claude-trees."""

    ENABLE_COMMAND_PALETTE = True
    TITLE = "Claude Trees"
    SUB_TITLE = f"v{__version__}"

    CSS = """
    Screen {
        background: $surface;
    }

    DataTable {
        height: 1fr;
    }

    #status-bar {
        dock: bottom;
        height: auto;
        background: $panel;
        padding: 1;
    }

    ToastRack {
        offset: 0 -3;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("o", "open_terminal", "Open"),
        Binding("a", "add_repo", "Add Repo"),
        Binding("x", "remove_repo", "Remove Repo"),
        Binding("n", "new_worktree", "New"),
        Binding("d", "delete_worktree", "Delete"),
        Binding("i", "show_info", "Info"),
        Binding("m", "show_mcp", "MCP"),
        Binding("l", "show_legend", "Legend"),
        Binding("r", "refresh", "Refresh"),
    ]

    def __init__(self, trees: ClaudeTrees):
        super().__init__()
        self.trees = trees
        self.rows: List[TableRow] = []
        self.worktrees_by_repo: Dict[str, List[Worktree]] = {}
        self.errors_by_repo: Dict[str, str] = {}
        self.github_urls: Dict[str, Optional[str]] = {}

    def compose(self) -> ComposeResult:
        """Create child widgets."""
        yield NonExpandingHeader(show_clock=False, icon="")
        yield DataTable(id="worktree-table", cursor_type="row", zebra_stripes=True)
        yield Static(id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Set up the table and start loading."""
        table = self.query_one(DataTable)
        for col in COLUMNS:
            if col.key == "link":
                continue
            table.add_column(col.label, width=None, key=col.key)

        if not self.trees.repos:
            self._populate_table()
            self._update_status()
            return

        table.loading = True
        self.load_worktrees()

    def _populate_table(self) -> None:
        """Rebuild the rows from the per-repo caches."""
        table = self.query_one(DataTable)
        table.clear()
        self.rows = []

        for repo in self.trees.repos:
            self.rows.append(TableRow(repo=repo))
            table.add_row(
                Text(f"{SYMBOL_REPO} {repo.name}", style=TUI_COLORS[RowStyleType.REPO]),
                "",
                Text(abbreviate_path(repo.path), style="dim"),
            )

            if repo.id in self.errors_by_repo:
                message = self.errors_by_repo[repo.id]
                self.rows.append(TableRow(repo=repo, error=message))
                table.add_row(Text(f"  ⚠ {message}", style=TUI_COLORS[RowStyleType.ERROR]), "", "")
                continue

            for worktree in self.worktrees_by_repo.get(repo.id, []):
                color = TUI_COLORS[get_worktree_style_type(worktree)]
                self.rows.append(TableRow(repo=repo, worktree=worktree))
                table.add_row(
                    Text(f"  {format_worktree_label(worktree)}", style=color),
                    worktree.head_commit,
                    abbreviate_path(worktree.path),
                )

    def _update_status(self) -> None:
        """Update status bar with current stats."""
        status = self.query_one("#status-bar", Static)
        if not self.trees.repos:
            status.update("No repositories registered. Press a to add one.")
            return

        total = sum(len(trees) for trees in self.worktrees_by_repo.values())
        status.update(
            f"Repositories: {len(self.trees.repos)} | "
            f"Worktrees: {total} | "
            f"Errors: {len(self.errors_by_repo)} | "
            f"Terminal: {self.trees.config.preferred_terminal}"
        )

    def _selected_row(self) -> Optional[TableRow]:
        table = self.query_one(DataTable)
        if table.cursor_row is None or table.cursor_row >= len(self.rows):
            return None
        return self.rows[table.cursor_row]

    def _selected_worktree(self) -> Optional[Tuple[Repo, Worktree]]:
        row = self._selected_row()
        if row is None or row.worktree is None:
            self.notify("Select a worktree first", severity="warning")
            return None
        return row.repo, row.worktree

    def _apply_results(self, repos: List[Repo], results: Dict) -> None:
        for repo in repos:
            result = results.get(repo.id)
            if isinstance(result, ClaudeTreesError):
                self.errors_by_repo[repo.id] = str(result)
                self.worktrees_by_repo[repo.id] = []
            else:
                self.errors_by_repo.pop(repo.id, None)
                self.worktrees_by_repo[repo.id] = result or []

    @work(exclusive=True, thread=False)
    async def load_worktrees(self, repos: Optional[List[Repo]] = None) -> None:
        """Load worktrees of the given (default: all) repositories in the background."""
        table = self.query_one(DataTable)
        repos = list(self.trees.repos if repos is None else repos)
        saved_row = table.cursor_row

        try:
            results, github_urls = await asyncio.gather(
                self.trees.load_worktrees(repos), self.trees.get_github_urls(repos)
            )
            self._apply_results(repos, results)
            self.github_urls.update(github_urls)

            self._populate_table()
            self._update_status()

            if saved_row is not None and saved_row < len(self.rows):
                table.cursor_coordinate = Coordinate(saved_row, 0)
        except Exception as e:
            logger.error(f"Error loading worktrees: {e}", exc_info=True)
            self.push_screen(InfoScreen(f"Error loading worktrees:\n\n{e}\n\nCheck the logs for more details."))
        finally:
            table.loading = False

    def action_refresh(self) -> None:
        """Re-list every repository."""
        self.trees.repo_store.load()
        self.worktrees_by_repo.clear()
        self.errors_by_repo.clear()
        self.query_one(DataTable).loading = True
        self.load_worktrees()

    def action_open_terminal(self) -> None:
        """Open the selected worktree (or repository) in the terminal."""
        row = self._selected_row()
        if row is None:
            return
        path = row.worktree.path if row.worktree else row.repo.path

        try:
            self.trees.open_terminal(path)
        except ClaudeTreesError as e:
            self.push_screen(InfoScreen(str(e)))
            return
        self.notify(f"Opened {abbreviate_path(path)} in {self.trees.config.preferred_terminal}")

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Enter opens the selected row in the terminal."""
        self.action_open_terminal()

    def action_show_info(self) -> None:
        selected = self._selected_worktree()
        if selected is None:
            return
        repo, worktree = selected

        base_branch = next(
            (w.branch for w in self.worktrees_by_repo.get(repo.id, []) if w.is_main and w.branch),
            None,
        )
        info = build_worktree_info(repo, worktree, self.github_urls.get(repo.id), base_branch)
        self.push_screen(InfoScreen(info, markup=True))

    def action_show_legend(self) -> None:
        self.push_screen(InfoScreen(LEGEND_TEXT))

    def action_show_mcp(self) -> None:
        self.push_screen(MCPServersScreen(self.trees.settings_service))

    # Repositories

    def action_add_repo(self) -> None:
        def handle_path(path: Optional[str]) -> None:
            if not path:
                return
            repo = self.trees.repo_store.add_repo(path)
            if repo is None:
                self.notify(f"{abbreviate_path(path)} is already registered", severity="warning")
                return
            self.notify(f"✓ Added {repo.name}")
            self.load_worktrees([repo])

        self.push_screen(AddRepoScreen(), handle_path)

    def action_remove_repo(self) -> None:
        """Unregister the selected repository. Nothing on disk is touched."""
        row = self._selected_row()
        if row is None:
            self.notify("Select a repository first", severity="warning")
            return
        repo = row.repo

        def handle_confirmation(confirmed: Optional[bool]) -> None:
            if not confirmed:
                return
            self.trees.repo_store.remove_repo(repo.id)
            self.worktrees_by_repo.pop(repo.id, None)
            self.errors_by_repo.pop(repo.id, None)
            self.github_urls.pop(repo.id, None)
            self._populate_table()
            self._update_status()
            self.notify(f"Removed {repo.name} from the list")

        self.push_screen(
            ConfirmScreen(f"Remove {repo.name} ({abbreviate_path(repo.path)}) from the list?\nThe repository stays on disk."),
            handle_confirmation,
        )

    # New worktree

    def action_new_worktree(self) -> None:
        row = self._selected_row()
        if row is None:
            self.notify("Select a repository first", severity="warning")
            return
        self.prepare_new_worktree(row.repo)

    @work(exclusive=False, thread=False)
    async def prepare_new_worktree(self, repo: Repo) -> None:
        """Fetch branches for the dialog, then ask for the new branch."""
        try:
            branches = await self.trees.worktree_service.list_branches(repo.path)
        except GitExecutionError as e:
            logger.warning(f"Could not list branches of {repo.name}: {e}")
            branches = []

        default_base = next((b for b in branches if b in DEFAULT_BASE_BRANCHES), None)
        if default_base is None and branches:
            default_base = branches[0]

        def handle_result(result: Optional[Tuple[str, Optional[str]]]) -> None:
            if result:
                branch, base = result
                self.create_worktree(repo, branch, base)

        self.push_screen(NewWorktreeScreen(repo, branches, default_base), handle_result)

    @work(exclusive=False, thread=False)
    async def create_worktree(self, repo: Repo, branch: str, base: Optional[str]) -> None:
        try:
            path = await self.trees.worktree_service.create_worktree(repo.path, branch, base)
        except GitExecutionError as e:
            self.push_screen(InfoScreen(f"Could not create worktree:\n\n{e.message}"))
            return

        self.notify(f"✓ Created {abbreviate_path(path)}")
        try:
            self.trees.open_terminal(path)
        except ClaudeTreesError as e:
            self.push_screen(InfoScreen(str(e)))
        self.load_worktrees([repo])

    # Delete worktree

    def action_delete_worktree(self) -> None:
        selected = self._selected_worktree()
        if selected is None:
            return
        repo, worktree = selected
        if worktree.is_main:
            self.notify("The main worktree cannot be removed", severity="warning")
            return
        self.check_removal(self.trees.start_removal(repo, worktree))

    @work(exclusive=False, thread=False)
    async def check_removal(self, flow: WorktreeRemovalFlow) -> None:
        """Check for uncommitted changes, then ask the user."""
        has_changes = await flow.check_changes()
        if flow.state is RemovalState.FAILED:
            self.push_screen(InfoScreen(f"Could not check worktree:\n\n{flow.error}"))
            return

        def handle_confirmation(confirmed: Optional[bool]) -> None:
            if confirmed:
                flow.confirm()
                self.delete_worktree(flow)
            else:
                flow.cancel()
                self.notify("Removal cancelled")

        self.push_screen(
            ConfirmScreen(format_removal_prompt(flow.worktree, bool(has_changes))),
            handle_confirmation,
        )

    @work(exclusive=False, thread=False)
    async def delete_worktree(self, flow: WorktreeRemovalFlow) -> None:
        if await flow.delete():
            self.notify(f"✓ Removed {abbreviate_path(flow.worktree.path)}")
            repo = next((r for r in self.trees.repos if r.path == flow.repo_path), None)
            self.load_worktrees([repo] if repo else None)
        else:
            # The row stays until the next listing
            self.push_screen(InfoScreen(f"Could not remove worktree:\n\n{flow.error}"))

    async def action_quit(self) -> None:
        """Cancel background work before exiting."""
        self.workers.cancel_all()
        self.exit()
