"""MCP server settings service"""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from claude_trees.logging_config import get_logger
from claude_trees.models.mcp_server import MCPServer

logger = get_logger(__name__)

DEFAULT_SETTINGS_FILE = Path.home() / ".claude" / "settings.json"


class SettingsService:
    """Reads and toggles MCP servers in a Claude settings file.

    Only the `disabled` flag of a server entry is ever changed, every other key
    in the file is written back untouched.
    """

    def __init__(self, settings_file: Optional[Union[str, Path]] = None):
        self.settings_file = Path(settings_file) if settings_file else DEFAULT_SETTINGS_FILE
        self.servers: List[MCPServer] = []
        self.error_message: Optional[str] = None
        self._root: Dict[str, Any] = {}

    def load(self) -> None:
        """Load the settings file. Problems end up in `error_message`."""
        self.error_message = None
        try:
            with open(self.settings_file, 'r') as f:
                data = json.load(f)
        except FileNotFoundError:
            self.error_message = "~/.claude/settings.json not found"
            self._reset()
            return
        except (OSError, json.JSONDecodeError) as e:
            self.error_message = f"Failed to read settings: {e}"
            logger.warning(self.error_message)
            self._reset()
            return

        if not isinstance(data, dict):
            self.error_message = "settings.json is not a valid JSON object"
            logger.warning(f"{self.settings_file}: {self.error_message}")
            self._reset()
            return

        self._root = data
        self.servers = self._parse_servers(self._root)
        logger.debug(f"Loaded {len(self.servers)} MCP servers from {self.settings_file}")

    def _reset(self) -> None:
        self._root = {}
        self.servers = []

    def set_enabled(self, server_id: str, enabled: bool) -> bool:
        """Enable or disable a server and write the file back.

        Returns:
            True if the file was updated
        """
        mcp_servers = self._root.get("mcpServers")
        if not isinstance(mcp_servers, dict) or not isinstance(mcp_servers.get(server_id), dict):
            logger.warning(f"Unknown MCP server '{server_id}'")
            return False

        entry = dict(mcp_servers[server_id])
        if enabled:
            entry.pop("disabled", None)
        else:
            entry["disabled"] = True

        root = dict(self._root)
        root["mcpServers"] = {**mcp_servers, server_id: entry}

        temp_file = self.settings_file.with_suffix('.tmp')
        try:
            with open(temp_file, 'w') as f:
                json.dump(root, f, indent=2, sort_keys=True)
                f.write("\n")
            temp_file.replace(self.settings_file)
        except OSError as e:
            self.error_message = f"Failed to save settings: {e}"
            logger.error(self.error_message)
            if temp_file.exists():
                temp_file.unlink()
            return False

        self._root = root
        self.servers = self._parse_servers(self._root)
        self.error_message = None
        logger.info(f"{'Enabled' if enabled else 'Disabled'} MCP server '{server_id}'")
        return True

    def get(self, server_id: str) -> Optional[MCPServer]:
        return next((s for s in self.servers if s.id == server_id), None)

    @staticmethod
    def _parse_servers(root: Dict[str, Any]) -> List[MCPServer]:
        mcp_servers = root.get("mcpServers")
        if not isinstance(mcp_servers, dict):
            return []

        servers = []
        for key, value in mcp_servers.items():
            if not isinstance(value, dict):
                continue
            args = value.get("args")
            env = value.get("env")
            disabled = value.get("disabled")
            servers.append(MCPServer(
                id=key,
                type=value.get("type") if isinstance(value.get("type"), str) else None,
                command=value.get("command") if isinstance(value.get("command"), str) else None,
                args=args if isinstance(args, list) else None,
                env=env if isinstance(env, dict) else None,
                disabled=disabled if isinstance(disabled, bool) else None,
            ))
        return sorted(servers, key=lambda s: s.id.casefold())
