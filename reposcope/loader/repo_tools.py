"""Tool resolution pipeline for a single repository.

Interprets a repository's ToolSource, loads plugin modules through the
module cache, and guarantees at least one tool per repository by
synthesizing the ``list_files`` fallback.
"""

from __future__ import annotations

import inspect
import logging
from pathlib import Path
from types import ModuleType
from typing import Any, Awaitable, Callable, Dict, List, Optional

from reposcope.config import CONFIG_DIR_NAME
from reposcope.core.errors import ToolLoadError, ToolSourceNotFoundError
from reposcope.loader.cache import ModuleCache
from reposcope.loader.plugins import PluginLoader, PythonPluginLoader
from reposcope.registry.types import RepoInfo, SourceKind, ToolDefinition, ToolSource
from reposcope.tools.fallback import create_list_files_tool

logger = logging.getLogger(__name__)

DEFAULT_BUILTIN_DIR = Path(__file__).resolve().parent.parent / "tools" / "builtin"


class RepoToolLoader:
    """Resolves a repository's declared tool source into tool definitions."""

    def __init__(
        self,
        builtin_dir: Optional[Path] = None,
        custom_dir: Optional[Path] = None,
        plugin_loader: Optional[PluginLoader] = None,
        cache: Optional[ModuleCache] = None,
    ):
        self._builtin_dir = Path(builtin_dir) if builtin_dir else DEFAULT_BUILTIN_DIR
        self._custom_dir = Path(custom_dir).expanduser() if custom_dir else Path.cwd() / CONFIG_DIR_NAME / "tools"
        self._plugin_loader = plugin_loader or PythonPluginLoader()
        self._cache = cache if cache is not None else ModuleCache()

        self._resolvers: Dict[SourceKind, Callable[[ToolSource, RepoInfo], Awaitable[List[ToolDefinition]]]] = {
            SourceKind.BUILTIN: self._load_builtin_tools,
            SourceKind.CUSTOM: self._load_custom_tools,
            SourceKind.PATH: self._load_path_tools,
            SourceKind.LIST: self._load_list_tools,
        }

    @property
    def cache(self) -> ModuleCache:
        return self._cache

    async def resolve_tools(self, repo: RepoInfo) -> List[ToolDefinition]:
        """Resolve the tools for ``repo``, each stamped with the repo name.

        Never returns an empty list: when the declared sources produce no
        tools (or fail to load) the ``list_files`` fallback is returned.
        """
        try:
            tools = await self._resolve(repo.tool_source, repo)
        except ToolLoadError as e:
            logger.error("Failed to load tools for repo %s: %s", repo.name, e.message)
            tools = []

        if not tools:
            logger.warning("No tools found for repo %s, using fallback", repo.name)
            tools = [create_list_files_tool(repo)]

        return [tool.with_repo(repo.name) for tool in tools]

    async def _resolve(self, source: ToolSource, repo: RepoInfo) -> List[ToolDefinition]:
        return await self._resolvers[source.kind](source, repo)

    async def _load_builtin_tools(self, source: ToolSource, repo: RepoInfo) -> List[ToolDefinition]:
        location = self._builtin_dir / repo.category
        try:
            return await self._load_location(location, repo) or []
        except ToolSourceNotFoundError:
            logger.debug("No builtin tools for category %s", repo.category)
            return []

    async def _load_custom_tools(self, source: ToolSource, repo: RepoInfo) -> List[ToolDefinition]:
        for location in self._custom_candidates(repo):
            try:
                tools = await self._load_location(location, repo)
            except ToolSourceNotFoundError:
                continue
            if tools is not None:
                logger.info("Loaded %d custom tools from %s", len(tools), location)
                return tools

        logger.debug("No custom tools found for %s (checked repo name and type)", repo.name)
        return []

    def _custom_candidates(self, repo: RepoInfo) -> List[Path]:
        candidates: List[Path] = []
        for stem in (repo.name, repo.category):
            for location in (self._custom_dir / f"{stem}.py", self._custom_dir / stem):
                if location not in candidates:
                    candidates.append(location)
        return candidates

    async def _load_path_tools(self, source: ToolSource, repo: RepoInfo) -> List[ToolDefinition]:
        location = Path(source.path).expanduser()
        if not location.is_absolute():
            location = Path(repo.path) / location
        try:
            return await self._load_location(location, repo) or []
        except ToolSourceNotFoundError:
            logger.warning("Tool path %s for repo %s does not exist", source.path, repo.name)
            return []

    async def _load_list_tools(self, source: ToolSource, repo: RepoInfo) -> List[ToolDefinition]:
        tools: List[ToolDefinition] = []
        for item in source.items:
            tools.extend(await self._resolve(item, repo))
        return tools

    async def _load_location(self, location: Path, repo: RepoInfo) -> Optional[List[ToolDefinition]]:
        """Load the module at ``location`` and extract its tools.

        Returns None when the module exposes neither ``load_tools`` nor
        ``TOOLS``.

        Raises:
            ToolSourceNotFoundError: location does not exist
            ToolLoadError: module failed to load or produced bad tools
        """
        module = await self._load_module(location.resolve())
        return await self._extract_tools(module, location, repo)

    async def _load_module(self, location: Path) -> ModuleType:
        module = self._cache.get(location)
        if module is not None:
            return module

        module = await self._plugin_loader.load(location)
        self._cache.put(location, module)
        return module

    async def _extract_tools(
        self, module: ModuleType, location: Path, repo: RepoInfo
    ) -> Optional[List[ToolDefinition]]:
        factory = getattr(module, "load_tools", None)
        if callable(factory):
            try:
                produced = factory(repo.path)
                if inspect.isawaitable(produced):
                    produced = await produced
            except Exception as e:
                raise ToolLoadError(str(location), f"load_tools failed: {e}") from e
        elif hasattr(module, "TOOLS"):
            produced = module.TOOLS
        else:
            return None

        if not isinstance(produced, (list, tuple)):
            raise ToolLoadError(str(location), f"expected a list of tools, got {type(produced).__name__}")
        return [_coerce_tool(item, location) for item in produced]


def _coerce_tool(item: Any, location: Path) -> ToolDefinition:
    """Accept ToolDefinition instances or equivalent dicts."""
    if isinstance(item, ToolDefinition):
        return item
    if isinstance(item, dict) and "name" in item and callable(item.get("handler")):
        return ToolDefinition(
            name=item["name"],
            description=item.get("description", ""),
            handler=item["handler"],
            input_schema=item.get("input_schema", item.get("inputSchema")),
        )
    raise ToolLoadError(str(location), f"invalid tool definition: {item!r}")
