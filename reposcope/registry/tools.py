"""Namespaced tool registry.

Keys are ``repo:tool`` for repo-bound tools and the bare name for root
tools. A key, once registered, is never silently replaced.
"""

from typing import Dict, List, Optional

from reposcope.core.errors import ToolAlreadyRegisteredError
from reposcope.registry.types import ToolDefinition


class ToolRegistry:
    """Mapping from tool key to tool definition, in registration order."""

    def __init__(self):
        self._tools: Dict[str, ToolDefinition] = {}

    def register(self, key: str, tool: ToolDefinition) -> None:
        """Register a tool under ``key``.

        Raises:
            ToolAlreadyRegisteredError: If ``key`` is already taken.
        """
        if key in self._tools:
            raise ToolAlreadyRegisteredError(key)
        self._tools[key] = tool

    def get(self, key: str) -> Optional[ToolDefinition]:
        """Get a tool by key."""
        return self._tools.get(key)

    def all(self) -> List[ToolDefinition]:
        """Get all registered tools."""
        return list(self._tools.values())

    def by_repo(self, repo_name: str) -> List[ToolDefinition]:
        """Get the tools owned by one repository."""
        return [tool for tool in self._tools.values() if tool.repo == repo_name]

    def has(self, key: str) -> bool:
        return key in self._tools

    def unregister(self, key: str) -> None:
        self._tools.pop(key, None)

    def clear(self) -> None:
        self._tools.clear()

    def count(self) -> int:
        """Get number of registered tools."""
        return len(self._tools)
