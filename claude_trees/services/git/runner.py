"""Git process runner for claude-trees."""

import asyncio
from typing import List, Optional

import git

from claude_trees.exceptions import GitExecutionError
from claude_trees.logging_config import get_logger

logger = get_logger(__name__)


class GitRunner:
    """Runs the git binary against a directory and captures its output."""

    def __init__(self, timeout: Optional[float] = None):
        """Initialize the runner.

        Args:
            timeout: Seconds after which a running git process is killed
                (None waits indefinitely)
        """
        self.timeout = timeout

    def _build_command(self, cwd: str, args: tuple) -> List[str]:
        return ["git", "-C", cwd, *args]

    def run(self, cwd: str, *args: str) -> str:
        """Run `git -C <cwd> <args...>` and return its standard output.

        Raises:
            GitExecutionError: If git exits non-zero or cannot be launched
        """
        command = self._build_command(cwd, args)
        logger.debug(f"Running: {' '.join(command)}")

        try:
            status, stdout, stderr = git.Git().execute(
                command,
                with_extended_output=True,
                with_exceptions=False,
                kill_after_timeout=self.timeout,
            )
        except git.exc.GitCommandNotFound as e:
            message = str(e).strip() or "git executable not found"
            logger.error(f"Could not launch git: {message}")
            raise GitExecutionError(message, command=command) from e

        if status != 0:
            message = (stderr or "").strip() or f"git exited with status {status}"
            logger.debug(f"git failed (exit {status}): {message}")
            raise GitExecutionError(message, command=command, status=status)

        return stdout

    async def run_async(self, cwd: str, *args: str) -> str:
        """Run git in a worker thread so the event loop stays responsive."""
        return await asyncio.to_thread(self.run, cwd, *args)
