"""Custom exceptions for claude-trees"""

from typing import Optional, Sequence


class ClaudeTreesError(Exception):
    """Base exception for all claude-trees errors."""
    pass


class GitExecutionError(ClaudeTreesError):
    """Exception raised when the git binary exits non-zero or cannot be launched.

    The message is the trimmed standard error of the failed command, so it can be
    shown to the user verbatim.
    """

    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        status: Optional[int] = None,
    ):
        self.message = message
        self.command = list(command) if command else []
        self.status = status
        super().__init__(message)


class RepositoryNotFoundError(ClaudeTreesError):
    """Exception raised when a registered repository is missing on disk."""

    def __init__(self, path: str):
        self.path = path
        super().__init__("Repository not found on disk")


class RemovalFlowError(ClaudeTreesError):
    """Exception raised for an invalid worktree removal state transition."""
    pass


class TerminalLaunchError(ClaudeTreesError):
    """Exception raised when a terminal application could not be spawned."""
    pass


class ConfigError(ClaudeTreesError):
    """Exception raised when the config file cannot be parsed."""
    pass
