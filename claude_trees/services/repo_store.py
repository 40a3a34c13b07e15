"""Persistent registry of repositories."""
import json
import os
from pathlib import Path
from typing import List, Optional, Union

from claude_trees.logging_config import get_logger
from claude_trees.models.repo import Repo

logger = get_logger(__name__)

DEFAULT_REPOS_FILE = Path.home() / ".claude-trees" / "repos.json"


class RepoStore:
    """Ordered, de-duplicated list of repositories the user registered."""

    def __init__(self, repos_file: Optional[Union[str, Path]] = None):
        """Initialize the store and load saved repositories.

        Args:
            repos_file: JSON file backing the store
        """
        self.repos_file = Path(repos_file) if repos_file else DEFAULT_REPOS_FILE
        self.repos: List[Repo] = []
        self.load()

    def load(self) -> None:
        """Load repositories from disk. A missing or broken file means no repos."""
        if not self.repos_file.exists():
            logger.debug("No repository registry found")
            self.repos = []
            return

        try:
            with open(self.repos_file, 'r') as f:
                data = json.load(f)
            self.repos = [Repo.from_dict(entry) for entry in data.get('repos', [])]
            logger.debug(f"Loaded {len(self.repos)} repositories")
        except (OSError, json.JSONDecodeError, AttributeError, KeyError, TypeError) as e:
            logger.warning(f"Failed to load repository registry: {e}")
            self.repos = []

    def _save(self) -> None:
        """Write the registry atomically: temp file, then rename."""
        self.repos_file.parent.mkdir(parents=True, exist_ok=True)
        temp_file = self.repos_file.with_suffix('.tmp')
        try:
            with open(temp_file, 'w') as f:
                json.dump({"repos": [repo.to_dict() for repo in self.repos]}, f, indent=2)
                f.flush()
            temp_file.replace(self.repos_file)
        finally:
            if temp_file.exists():
                temp_file.unlink()

    @staticmethod
    def _normalize(path: str) -> str:
        return os.path.abspath(os.path.expanduser(path)).rstrip(os.sep) or os.sep

    def add_repo(self, path: str) -> Optional[Repo]:
        """Register a repository.

        Returns:
            The new Repo, or None if the path was already registered
        """
        normalized = self._normalize(path)
        if any(repo.path == normalized for repo in self.repos):
            logger.debug(f"Repository {normalized} already registered")
            return None

        repo = Repo(path=normalized)
        self.repos.append(repo)
        self._save()
        logger.info(f"Registered repository {repo.name} ({repo.path})")
        return repo

    def remove_repo(self, repo_id: str) -> bool:
        """Unregister a repository by id."""
        remaining = [repo for repo in self.repos if repo.id != repo_id]
        if len(remaining) == len(self.repos):
            return False

        self.repos = remaining
        self._save()
        logger.info(f"Unregistered repository {repo_id}")
        return True

    def find(self, path_or_id: str) -> Optional[Repo]:
        """Find a repository by id, path or name."""
        normalized = self._normalize(path_or_id)
        for repo in self.repos:
            if repo.id == path_or_id or repo.path == normalized:
                return repo
        for repo in self.repos:
            if repo.name == path_or_id:
                return repo
        return None
