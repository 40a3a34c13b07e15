"""Configuration handling for claude-trees"""

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional, Union

from claude_trees.exceptions import ConfigError
from claude_trees.logging_config import get_logger
from claude_trees.services.terminal_launcher import TerminalApp, available_terminals

logger = get_logger(__name__)

DEFAULT_CONFIG_FILE = Path.home() / ".claude-trees" / "config.json"


def _default_terminal() -> str:
    available = available_terminals()
    return available[0].value if available else "Terminal"


@dataclass
class Config:
    """Configuration for claude-trees with validation."""

    # Terminal launching
    preferred_terminal: str = field(default_factory=_default_terminal)
    claude_cli_path: str = "~/.local/bin/claude"

    # Seconds before a hung git process is killed (None = wait forever)
    git_timeout: Optional[float] = None

    # File locations (None = default under the home directory)
    mcp_settings_path: Optional[str] = None
    repos_file: Optional[str] = None

    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_preferred_terminal()
        self._validate_claude_cli_path()
        self._validate_git_timeout()

    def _validate_preferred_terminal(self):
        """Validate preferred_terminal names a supported terminal."""
        allowed = [app.value for app in TerminalApp]
        if self.preferred_terminal not in allowed:
            raise ValueError(
                f"preferred_terminal must be one of {allowed}, got '{self.preferred_terminal}'"
            )

    def _validate_claude_cli_path(self):
        """Validate claude_cli_path is not empty."""
        if not self.claude_cli_path or not self.claude_cli_path.strip():
            raise ValueError("claude_cli_path cannot be empty")
        self.claude_cli_path = self.claude_cli_path.strip()

    def _validate_git_timeout(self):
        """Validate git_timeout is positive when set."""
        if self.git_timeout is not None and self.git_timeout <= 0:
            raise ValueError(f"git_timeout must be positive, got {self.git_timeout}")

    def to_dict(self) -> dict:
        """Convert config to a JSON-serializable dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)


def load_config(path: Optional[Union[str, Path]] = None) -> Config:
    """Load configuration from a JSON file.

    A missing file yields the defaults.

    Raises:
        ConfigError: If the file exists but is not a JSON object
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_FILE
    if not config_path.exists():
        logger.debug(f"No config file at {config_path}, using defaults")
        return Config()

    try:
        data = json.loads(config_path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a JSON object")

    logger.debug(f"Loaded config from {config_path}")
    return Config.from_dict(data)


def save_config(config: Config, path: Optional[Union[str, Path]] = None) -> None:
    """Write configuration to disk atomically."""
    config_path = Path(path) if path else DEFAULT_CONFIG_FILE
    config_path.parent.mkdir(parents=True, exist_ok=True)

    temp_file = config_path.with_suffix(".tmp")
    with open(temp_file, "w") as f:
        json.dump(config.to_dict(), f, indent=2, sort_keys=True)
    temp_file.replace(config_path)
    logger.debug(f"Saved config to {config_path}")


# Settings the user may change from the command line
EDITABLE_KEYS = ("preferred_terminal", "claude_cli_path", "git_timeout")


def _parse_value(key: str, value: str):
    if key == "git_timeout":
        if value.strip().lower() in ("", "none"):
            return None
        try:
            return float(value)
        except ValueError:
            raise ValueError(f"git_timeout must be a number of seconds, got '{value}'") from None
    return value


def set_config_value(key: str, value: str, path: Optional[Union[str, Path]] = None) -> Config:
    """Change one setting in the config file.

    The value is validated by Config before anything is written.

    Raises:
        ConfigError: If the key cannot be edited or the file cannot be read
        ValueError: If the value is invalid
    """
    if key not in EDITABLE_KEYS:
        raise ConfigError(f"Unknown setting '{key}', expected one of {list(EDITABLE_KEYS)}")

    current = load_config(path)
    updated = Config.from_dict({**current.to_dict(), key: _parse_value(key, value)})
    save_config(updated, path)
    logger.info(f"Set {key} to {updated.get(key)!r}")
    return updated
