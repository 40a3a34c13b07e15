"""MCP server entry model."""

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass
class MCPServer:
    """An entry under "mcpServers" in the settings file."""

    id: str
    type: Optional[str] = None
    command: Optional[str] = None
    args: Optional[List[str]] = None
    env: Optional[Dict[str, str]] = None
    disabled: Optional[bool] = None

    @property
    def is_enabled(self) -> bool:
        return not (self.disabled or False)
