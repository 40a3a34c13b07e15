"""Caller-driven worktree removal flow."""

from enum import Enum
from typing import Optional

from claude_trees.exceptions import GitExecutionError, RemovalFlowError
from claude_trees.logging_config import get_logger
from claude_trees.models.worktree import Worktree
from claude_trees.services.git.worktrees import WorktreeService

logger = get_logger(__name__)


class RemovalState(Enum):
    """State of a worktree removal."""
    IDLE = "idle"
    CHECKING_CHANGES = "checking-changes"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    DELETING = "deleting"
    DONE = "done"
    FAILED = "failed"


class WorktreeRemovalFlow:
    """Removal of one worktree: check for changes, confirm, delete.

    Every transition is started by the caller. The force flag is fixed when the
    user confirms and is passed unchanged into the removal. Dirty state is not
    re-checked before deleting: a worktree that turned dirty after a clean check
    is still protected, since git refuses a non-forced removal of it.
    """

    def __init__(self, service: WorktreeService, repo_path: str, worktree: Worktree):
        self.service = service
        self.repo_path = repo_path
        self.worktree = worktree
        self.state = RemovalState.IDLE
        self.has_changes: Optional[bool] = None
        self.force: Optional[bool] = None
        self.error: Optional[str] = None

    def _require(self, *allowed: RemovalState) -> None:
        if self.state not in allowed:
            expected = ", ".join(s.value for s in allowed)
            raise RemovalFlowError(
                f"Cannot go from '{self.state.value}' here (expected {expected})"
            )

    def _require_checked(self) -> None:
        self._require(RemovalState.CHECKING_CHANGES)
        if self.has_changes is None:
            raise RemovalFlowError("Changes have not been checked yet")

    def _fail(self, error: GitExecutionError) -> None:
        self.state = RemovalState.FAILED
        self.error = error.message
        logger.error(f"Removal of {self.worktree.path} failed: {error.message}")

    async def check_changes(self) -> Optional[bool]:
        """Check the worktree for uncommitted changes.

        Returns:
            True if dirty, False if clean, None if the check itself failed
            (the flow is then FAILED and `error` holds the message)
        """
        self._require(RemovalState.IDLE)
        self.state = RemovalState.CHECKING_CHANGES
        try:
            self.has_changes = await self.service.has_uncommitted_changes(self.worktree.path)
        except GitExecutionError as e:
            self._fail(e)
            return None

        logger.debug(f"{self.worktree.path} has uncommitted changes: {self.has_changes}")
        return self.has_changes

    def confirm(self) -> bool:
        """Accept the removal. Dirty worktrees are removed with force.

        Returns:
            The force flag that the removal will use
        """
        self._require_checked()
        self.force = bool(self.has_changes)
        self.state = RemovalState.CONFIRMED
        return self.force

    def cancel(self) -> None:
        """Decline the removal."""
        self._require_checked()
        self.state = RemovalState.CANCELLED
        logger.debug(f"Removal of {self.worktree.path} cancelled")

    async def delete(self) -> bool:
        """Remove the worktree with the force flag fixed at confirmation.

        Returns:
            True when removed, False when git failed (see `error`)
        """
        self._require(RemovalState.CONFIRMED)
        self.state = RemovalState.DELETING
        try:
            await self.service.remove_worktree(self.repo_path, self.worktree.path, force=bool(self.force))
        except GitExecutionError as e:
            self._fail(e)
            return False

        self.state = RemovalState.DONE
        return True

    @property
    def is_finished(self) -> bool:
        return self.state in (RemovalState.CANCELLED, RemovalState.DONE, RemovalState.FAILED)
