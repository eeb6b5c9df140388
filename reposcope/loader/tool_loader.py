"""Top-level tool loading: root tools once, repo tools on demand."""

import logging
from typing import Callable, List, Optional

from reposcope.loader.repo_tools import RepoToolLoader
from reposcope.registry.types import RepoInfo, ToolDefinition
from reposcope.tools.root import load_root_tools

logger = logging.getLogger(__name__)


class ToolLoader:
    """Loads root tools exactly once per process and repo tools per repository."""

    def __init__(self, repo_tool_loader: Optional[RepoToolLoader] = None):
        self.repo_tool_loader = repo_tool_loader or RepoToolLoader()
        self._root_tools_loaded = False

    @property
    def root_tools_loaded(self) -> bool:
        return self._root_tools_loaded

    def load_root_tools(
        self,
        get_repos: Callable[[], List[RepoInfo]],
        get_repo: Callable[[str], Optional[RepoInfo]],
        get_tools_by_repo: Callable[[str], List[ToolDefinition]],
    ) -> List[ToolDefinition]:
        """Build the root tools. Returns an empty list after the first call."""
        if self._root_tools_loaded:
            return []

        tools = load_root_tools(get_repos, get_repo, get_tools_by_repo)
        self._root_tools_loaded = True
        logger.info("Loaded %d root tools", len(tools))
        return tools

    async def load_repo_tools(self, repo: RepoInfo) -> List[ToolDefinition]:
        return await self.repo_tool_loader.resolve_tools(repo)
