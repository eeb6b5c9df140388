"""Repository registry.

Aggregates repositories from, in precedence order:
1. Explicit configuration entries
2. Auto-discovery under the configured parent path
3. Auto-discovery under $REPOSCOPE_REPOS_PATH
4. Auto-discovery under the working directory

The first source to produce a name wins; later duplicates are dropped.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional

from reposcope.config import REPOS_PATH_ENV_VAR, GatewayConfig
from reposcope.discovery.discoverer import RepoDiscoverer
from reposcope.discovery.validator import RepoValidator
from reposcope.registry.types import RepoInfo, parse_tool_source

logger = logging.getLogger(__name__)


class RepoRegistry:
    """Name to RepoInfo lookup, rebuilt wholesale by refresh()."""

    def __init__(
        self,
        config: GatewayConfig,
        discoverer: Optional[RepoDiscoverer] = None,
        validator: Optional[RepoValidator] = None,
        cwd: Optional[Callable[[], Path]] = None,
    ):
        self._config = config
        self._validator = validator or RepoValidator()
        self._discoverer = discoverer or RepoDiscoverer(validator=self._validator)
        self._cwd = cwd or Path.cwd
        self._repos: Dict[str, RepoInfo] = {}

    async def refresh(self) -> None:
        """Clear and repopulate the registry from all sources."""
        logger.info("Starting repository discovery...")
        self._repos.clear()

        candidates: List[RepoInfo] = []
        candidates.extend(await self._from_config())

        scanned: set = set()
        discovery = self._config.discovery
        workspace = self._cwd()

        if discovery.enabled:
            root = Path(discovery.parent_path).expanduser() if discovery.parent_path else workspace
            candidates.extend(await self._discover_root(root, discovery.auto_detect_type, scanned))

        env_root = os.getenv(REPOS_PATH_ENV_VAR)
        if env_root:
            logger.info("Checking environment variable repos path: %s", env_root)
            candidates.extend(await self._discover_root(Path(env_root).expanduser(), True, scanned))

        if discovery.scan_workspace:
            logger.info("Checking workspace context: %s", workspace)
            candidates.extend(await self._discover_root(workspace, True, scanned))

        for repo in candidates:
            if repo.name in self._repos:
                logger.warning("Skipping duplicate repo: %s (%s)", repo.name, repo.path)
                continue
            self._repos[repo.name] = repo
            logger.info("Registered repo: %s (%s) at %s", repo.name, repo.category, repo.path)

        logger.info("Discovery complete. Found %d repositories.", len(self._repos))

    async def _from_config(self) -> List[RepoInfo]:
        repos = []
        if self._config.repos:
            logger.info("Found %d repos in configuration", len(self._config.repos))

        for entry in self._config.repos:
            repo = RepoInfo(
                name=entry.name,
                path=Path(entry.path).expanduser().resolve(),
                category=entry.category,
                tool_source=parse_tool_source(entry.tools),
            )
            if await self._validator.validate(repo):
                repos.append(repo)
        return repos

    async def _discover_root(self, root: Path, classify: bool, scanned: set) -> List[RepoInfo]:
        resolved = root.resolve()
        if resolved in scanned:
            logger.debug("Already scanned %s in this pass", resolved)
            return []
        scanned.add(resolved)
        return await self._discoverer.discover(resolved, classify)

    def list(self) -> List[RepoInfo]:
        return list(self._repos.values())

    def get(self, name: str) -> Optional[RepoInfo]:
        return self._repos.get(name)

    def has(self, name: str) -> bool:
        return name in self._repos

    async def validate(self, repo: RepoInfo) -> bool:
        return await self._validator.validate(repo)
