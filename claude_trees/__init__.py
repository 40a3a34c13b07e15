"""
claude-trees - Manage git worktrees across repositories and open them in a terminal
"""

from .__version__ import __version__
from .services.git import WorktreeService
from .cli.main import main

__all__ = ["WorktreeService", "main", "__version__"]
