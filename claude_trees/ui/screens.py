"""Modal screens for the claude-trees TUI."""

import os
from typing import Optional, Tuple

from rich.markup import escape
from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, DataTable, Input, Label, Static

from claude_trees.constants import SYMBOL_DISABLED, SYMBOL_ENABLED
from claude_trees.formatters import abbreviate_path
from claude_trees.logging_config import get_logger
from claude_trees.models.repo import Repo
from claude_trees.models.worktree import Worktree
from claude_trees.services.git.github import compare_url_for_branch
from claude_trees.services.settings_service import SettingsService

logger = get_logger(__name__)


class ConfirmScreen(ModalScreen[bool]):
    """Modal confirmation dialog."""

    DEFAULT_CSS = """
    ConfirmScreen {
        align: center middle;
    }

    #confirm-dialog {
        width: 80%;
        height: auto;
        border: thick $background 80%;
        background: $surface;
        padding: 1 2;
    }

    #confirm-message {
        width: 100%;
        height: auto;
        padding: 1 0;
    }

    #button-container {
        width: 100%;
        height: auto;
        align: center middle;
        padding: 1 0;
    }

    Button {
        margin: 0 1;
    }
    """

    def __init__(self, message: str):
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            yield Static(self.message, id="confirm-message", markup=False)
            with Container(id="button-container"):
                yield Button("Yes", variant="error", id="yes")
                yield Button("No", variant="primary", id="no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button press."""
        self.dismiss(event.button.id == "yes")


class InfoScreen(ModalScreen):
    """Modal info display dialog, also used for error messages."""

    DEFAULT_CSS = """
    InfoScreen {
        align: center middle;
    }

    #info-dialog {
        width: 80%;
        height: auto;
        border: thick $background 80%;
        background: $surface;
        padding: 1 2;
    }

    #info-content {
        width: 100%;
        height: auto;
        padding: 1 0;
    }

    #info-button-container {
        width: 100%;
        height: auto;
        align: center middle;
        padding: 1 0;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "Close"),
    ]

    def __init__(self, info: str, markup: bool = False):
        super().__init__()
        self.info = info
        self.markup = markup

    def compose(self) -> ComposeResult:
        with Vertical(id="info-dialog"):
            yield Static(self.info, id="info-content", markup=self.markup)
            with Container(id="info-button-container"):
                yield Button("Close", variant="primary", id="close")

    def action_close(self) -> None:
        self.dismiss()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button press."""
        self.dismiss()


def build_worktree_info(
    repo: Repo, worktree: Worktree, github_base_url: Optional[str], base_branch: Optional[str]
) -> str:
    """Markup for the worktree info dialog."""
    if github_base_url and worktree.branch and not worktree.is_main:
        url = compare_url_for_branch(github_base_url, worktree.branch, base_branch)
        link = f"[link={url}]{escape(url)}[/link]"
    elif github_base_url:
        link = f"[link={github_base_url}]{escape(github_base_url)}[/link]"
    else:
        link = "None (remote is not on GitHub)"

    return f"""[bold]Repository:[/bold] {escape(repo.name)}
[bold]Branch:[/bold] {escape(worktree.branch) if worktree.branch else "(detached)"}
[bold]HEAD:[/bold] {worktree.head_commit}
[bold]Path:[/bold] {escape(abbreviate_path(worktree.path))}
[bold]Main:[/bold] {"Yes" if worktree.is_main else "No"}
[bold]Link:[/bold] {link}"""


class NewWorktreeScreen(ModalScreen[Optional[Tuple[str, Optional[str]]]]):
    """Ask for the new branch name and its base branch.

    Dismisses with (branch, base) or None when cancelled.
    """

    DEFAULT_CSS = """
    NewWorktreeScreen {
        align: center middle;
    }

    #new-dialog {
        width: 60;
        height: auto;
        border: thick $background 80%;
        background: $surface;
        padding: 1 2;
    }

    #new-dialog Input {
        margin-bottom: 1;
    }

    #new-error {
        color: $error;
        height: auto;
    }

    #new-button-container {
        width: 100%;
        height: auto;
        align: center middle;
        padding: 1 0;
    }

    Button {
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, repo: Repo, branches: list, default_base: Optional[str]):
        super().__init__()
        self.repo = repo
        self.branches = branches
        self.default_base = default_base

    def compose(self) -> ComposeResult:
        with Vertical(id="new-dialog"):
            yield Label(f"New worktree in {self.repo.name}", markup=False)
            yield Input(placeholder="Branch name", id="branch-input")
            yield Input(
                value=self.default_base or "",
                placeholder="Base branch (empty = current HEAD)",
                id="base-input",
            )
            yield Static("", id="new-error", markup=False)
            with Container(id="new-button-container"):
                yield Button("Create & Open", variant="primary", id="create")
                yield Button("Cancel", id="cancel")

    def on_mount(self) -> None:
        self.query_one("#branch-input", Input).focus()

    def _submit(self) -> None:
        branch = self.query_one("#branch-input", Input).value.strip()
        base = self.query_one("#base-input", Input).value.strip() or None
        error = self.query_one("#new-error", Static)

        if not branch:
            error.update("Branch name cannot be empty")
            return
        if branch in self.branches:
            error.update(f"Branch '{branch}' already exists")
            return
        if base and self.branches and base not in self.branches:
            error.update(f"Unknown base branch '{base}'")
            return

        self.dismiss((branch, base))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "create":
            self._submit()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class MCPServersScreen(ModalScreen):
    """List MCP servers and toggle them with space."""

    DEFAULT_CSS = """
    MCPServersScreen {
        align: center middle;
    }

    #mcp-dialog {
        width: 80%;
        height: 80%;
        border: thick $background 80%;
        background: $surface;
        padding: 1 2;
    }

    #mcp-table {
        height: 1fr;
    }

    #mcp-status {
        height: auto;
        padding: 1 0 0 0;
    }
    """

    BINDINGS = [
        Binding("space", "toggle", "Enable/Disable"),
        Binding("r", "reload", "Reload"),
        Binding("escape", "close", "Close"),
        Binding("q", "close", "Close", show=False),
    ]

    def __init__(self, settings_service: SettingsService):
        super().__init__()
        self.settings_service = settings_service

    def compose(self) -> ComposeResult:
        with Vertical(id="mcp-dialog"):
            yield DataTable(id="mcp-table", cursor_type="row", zebra_stripes=True)
            yield Static("", id="mcp-status", markup=False)

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.add_column(Text(" ", justify="center"), key="enabled")
        table.add_column("Server", key="name")
        table.add_column("Command", key="command")
        self.action_reload()

    def _populate(self) -> None:
        table = self.query_one(DataTable)
        table.clear()
        for server in self.settings_service.servers:
            mark = (
                Text(SYMBOL_ENABLED, justify="center", style="green")
                if server.is_enabled
                else Text(SYMBOL_DISABLED, justify="center", style="red")
            )
            command = " ".join([server.command or ""] + (server.args or [])).strip()
            table.add_row(mark, server.id, command or (server.type or ""), key=server.id)

        status = self.query_one("#mcp-status", Static)
        if self.settings_service.error_message:
            status.update(self.settings_service.error_message)
        else:
            enabled = sum(1 for s in self.settings_service.servers if s.is_enabled)
            status.update(f"{enabled}/{len(self.settings_service.servers)} enabled | {self.settings_service.settings_file}")

    def action_reload(self) -> None:
        self.settings_service.load()
        self._populate()

    def action_toggle(self) -> None:
        table = self.query_one(DataTable)
        servers = self.settings_service.servers
        if table.cursor_row is None or table.cursor_row >= len(servers):
            return

        saved_row = table.cursor_row
        server = servers[saved_row]
        if not self.settings_service.set_enabled(server.id, not server.is_enabled):
            self.app.notify(self.settings_service.error_message or "Could not update settings", severity="error")
        self._populate()
        table.move_cursor(row=saved_row)

    def action_close(self) -> None:
        self.dismiss()


class AddRepoScreen(ModalScreen[Optional[str]]):
    """Ask for the path of a repository to register."""

    DEFAULT_CSS = """
    AddRepoScreen {
        align: center middle;
    }

    #add-repo-dialog {
        width: 70;
        height: auto;
        border: thick $background 80%;
        background: $surface;
        padding: 1 2;
    }

    #add-repo-error {
        color: $error;
        height: auto;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(id="add-repo-dialog"):
            yield Label("Add repository")
            yield Input(placeholder="Path to a git repository", id="repo-path-input")
            yield Static("", id="add-repo-error", markup=False)

    def on_mount(self) -> None:
        self.query_one("#repo-path-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        path = os.path.expanduser(event.value.strip())
        error = self.query_one("#add-repo-error", Static)
        if not path:
            error.update("Path cannot be empty")
            return
        if not os.path.isdir(path):
            error.update(f"{path} is not a directory")
            return
        self.dismiss(path)

    def action_cancel(self) -> None:
        self.dismiss(None)
