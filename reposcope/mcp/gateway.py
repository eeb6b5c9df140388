"""
Dispatch gateway.

Answers "list tools" and "call tool" requests against the tool registry.
Repository tools are resolved lazily on first reference; every failure is
turned into a ToolResult with ``is_error`` set instead of propagating.
"""

import inspect
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from reposcope.config import GatewayConfig
from reposcope.core.errors import ToolAlreadyRegisteredError, ToolNotFoundError
from reposcope.loader.repo_tools import RepoToolLoader
from reposcope.loader.tool_loader import ToolLoader
from reposcope.registry.repos import RepoRegistry
from reposcope.registry.tools import ToolRegistry
from reposcope.registry.types import (
    NAMESPACE_SEPARATOR,
    UNKNOWN_CATEGORY,
    RepoInfo,
    ToolContext,
    ToolResult,
)

logger = logging.getLogger(__name__)

ROOT_REPO_NAME = "root"


class RepoGateway:
    """
    Ties repository discovery, tool loading and the tool registry together.

    Usage:
        gateway = RepoGateway(load_config())
        await gateway.initialize()
        result = await gateway.call_tool("api:list_files", {})
    """

    def __init__(
        self,
        config: GatewayConfig,
        repo_registry: Optional[RepoRegistry] = None,
        tool_registry: Optional[ToolRegistry] = None,
        tool_loader: Optional[ToolLoader] = None,
        cwd: Optional[Callable[[], Path]] = None,
    ):
        self.config = config
        self._cwd = cwd or Path.cwd
        self.repos = repo_registry or RepoRegistry(config, cwd=self._cwd)
        self.tools = tool_registry or ToolRegistry()
        self.loader = tool_loader or ToolLoader(RepoToolLoader(custom_dir=config.tools.custom_dir))

    async def initialize(self) -> None:
        """Discover repositories, register root tools and, unless lazy, all repo tools."""
        logger.info("Initializing gateway...")
        await self.repos.refresh()

        root_tools = self.loader.load_root_tools(self.repos.list, self.repos.get, self.tools.by_repo)
        for tool in root_tools:
            self.tools.register(tool.qualified_name, tool)

        if not self.config.tools.lazy_load:
            for repo in self.repos.list():
                await self.ensure_repo_tools(repo.name)

        logger.info("Gateway initialized with %d tools", self.tools.count())

    def list_tools(self) -> List[Dict[str, Any]]:
        """Public descriptors of every registered tool. Never triggers loading."""
        return [tool.to_mcp_format() for tool in self.tools.all()]

    async def ensure_repo_tools(self, repo_name: str) -> bool:
        """Make sure a repository's tools are registered.

        Returns:
            True if the repository exists and has tools registered.
        """
        repo = self.repos.get(repo_name)
        if repo is None:
            return False

        if self.tools.by_repo(repo_name):
            return True

        try:
            tools = await self.loader.load_repo_tools(repo)
        except Exception as e:
            logger.warning("Failed to load tools for repo %s: %s", repo_name, e)
            return False

        # Another call may have registered this repo while we were loading
        if self.tools.by_repo(repo_name):
            logger.debug("Tools for %s were registered concurrently", repo_name)
            return True

        # No await from the re-check on, so a conflict here can't come from
        # a concurrent load: it means the repo's sources repeat a tool name.
        registered = 0
        for tool in tools:
            try:
                self.tools.register(tool.qualified_name, tool)
                registered += 1
            except ToolAlreadyRegisteredError as e:
                logger.warning("Duplicate tool from repo %s sources, keeping the first: %s", repo_name, e.message)

        logger.info("Loaded %d tools for repo %s", registered, repo_name)
        return True

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
        """Invoke a tool by (possibly namespaced) name.

        Never raises: unknown tools and handler failures come back as
        error results.
        """
        tool, repo = await self._lookup(name)
        if tool is None:
            error = ToolNotFoundError(name)
            logger.warning(error.message)
            return ToolResult.error(error.message)

        context = self._build_context(repo)
        try:
            result = tool.handler(arguments or {}, context)
            if inspect.isawaitable(result):
                result = await result
            return ToolResult.coerce(result)
        except Exception as e:
            logger.error("Tool execution error in %s: %s", name, e)
            return ToolResult.error(str(e))

    async def _lookup(self, name: str):
        if NAMESPACE_SEPARATOR not in name:
            return self.tools.get(name), None

        repo_name, tool_name = name.split(NAMESPACE_SEPARATOR, 1)
        key = f"{repo_name}{NAMESPACE_SEPARATOR}{tool_name}"

        tool = self.tools.get(key)
        if tool is None and await self.ensure_repo_tools(repo_name):
            tool = self.tools.get(key)
        return tool, self.repos.get(repo_name)

    def _build_context(self, repo: Optional[RepoInfo]) -> ToolContext:
        if repo is None:
            workspace = self._cwd()
            repo = RepoInfo(name=ROOT_REPO_NAME, path=workspace, category=UNKNOWN_CATEGORY)
        return ToolContext(
            repo_path=repo.path,
            repo=repo,
            logger=logging.getLogger(f"reposcope.tools.{repo.name}"),
        )
