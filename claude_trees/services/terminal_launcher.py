"""Open a worktree in a terminal application running the Claude CLI."""

import os
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Tuple, Union

from claude_trees.exceptions import TerminalLaunchError
from claude_trees.logging_config import get_logger

logger = get_logger(__name__)

APPLICATIONS_DIR = Path("/Applications")


class TerminalApp(Enum):
    """Supported terminal applications."""
    GHOSTTY = "Ghostty"
    TERMINAL = "Terminal"
    ITERM = "iTerm2"


def available_terminals(applications_dir: Union[str, Path] = APPLICATIONS_DIR) -> List[TerminalApp]:
    """List installed terminals. Terminal.app ships with macOS and is always listed."""
    applications_dir = Path(applications_dir)
    return [
        app for app in TerminalApp
        if app is TerminalApp.TERMINAL or (applications_dir / f"{app.value}.app").exists()
    ]


def shell_escape(value: str) -> str:
    """Quote a string for a POSIX shell."""
    return "'" + value.replace("'", "'\\''") + "'"


def applescript_escape(value: str) -> str:
    """Escape a string for use inside an AppleScript string literal."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def build_command(path: str, cli_path: str) -> str:
    """Shell command that changes into the worktree and starts the CLI."""
    expanded_cli = os.path.expanduser(cli_path)
    return f"cd {shell_escape(path)} && {shell_escape(expanded_cli)}"


@dataclass(frozen=True)
class LaunchSpec:
    """Process to spawn to open a terminal."""

    argv: Tuple[str, ...]


class TerminalLauncher:
    """Base class: translates a shell command into a process to spawn."""

    app: TerminalApp

    def launch_spec(self, command: str) -> LaunchSpec:
        raise NotImplementedError


class GhosttyLauncher(TerminalLauncher):
    app = TerminalApp.GHOSTTY

    def launch_spec(self, command: str) -> LaunchSpec:
        return LaunchSpec(("open", "-a", "Ghostty", "--args", "-e", command))


class TerminalAppLauncher(TerminalLauncher):
    app = TerminalApp.TERMINAL

    def launch_spec(self, command: str) -> LaunchSpec:
        script = (
            'tell application "Terminal"\n'
            '    activate\n'
            f'    do script "{applescript_escape(command)}"\n'
            'end tell'
        )
        return LaunchSpec(("osascript", "-e", script))


class ITermLauncher(TerminalLauncher):
    app = TerminalApp.ITERM

    def launch_spec(self, command: str) -> LaunchSpec:
        script = (
            'tell application "iTerm2"\n'
            '    activate\n'
            f'    create window with default profile command "{applescript_escape(command)}"\n'
            'end tell'
        )
        return LaunchSpec(("osascript", "-e", script))


LAUNCHERS: Dict[TerminalApp, TerminalLauncher] = {
    launcher.app: launcher
    for launcher in (GhosttyLauncher(), TerminalAppLauncher(), ITermLauncher())
}


def get_launcher(terminal: Union[TerminalApp, str]) -> TerminalLauncher:
    """Get the launcher for a terminal given as enum member or display name."""
    if isinstance(terminal, str):
        try:
            terminal = TerminalApp(terminal)
        except ValueError:
            allowed = [app.value for app in TerminalApp]
            raise TerminalLaunchError(
                f"Unknown terminal '{terminal}', expected one of {allowed}"
            ) from None
    return LAUNCHERS[terminal]


def open_in_terminal(path: str, terminal: Union[TerminalApp, str], cli_path: str) -> LaunchSpec:
    """Open `path` in a terminal running the CLI at `cli_path`.

    The terminal process is started and left running on its own.

    Returns:
        The spec that was spawned

    Raises:
        TerminalLaunchError: If the process could not be started
    """
    launcher = get_launcher(terminal)
    spec = launcher.launch_spec(build_command(path, cli_path))

    logger.debug(f"Launching {launcher.app.value}: {spec.argv[:2]}")
    try:
        subprocess.Popen(
            list(spec.argv),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        raise TerminalLaunchError(f"Could not open {launcher.app.value}: {e}") from e

    logger.info(f"Opened {path} in {launcher.app.value}")
    return spec
