"""Repository discovery.

Scans the immediate subdirectories of a root directory and keeps those
that carry a repository indicator (VCS marker, package manifest, build
tool config).
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

from reposcope.discovery.classifier import RepoClassifier
from reposcope.discovery.validator import RepoValidator
from reposcope.registry.types import NAMESPACE_SEPARATOR, UNKNOWN_CATEGORY, RepoInfo

logger = logging.getLogger(__name__)

REPO_INDICATORS = (
    ".git",
    "package.json",
    "foundry.toml",
    "hardhat.config.js",
    "hardhat.config.ts",
    "truffle-config.js",
    "Cargo.toml",
    "go.mod",
    "pom.xml",
    "build.gradle",
    "pyproject.toml",
    "setup.py",
)


def _list_subdirectories(root: Path) -> List[Path]:
    return sorted((child for child in root.iterdir() if child.is_dir()), key=lambda p: p.name)


def is_repo_candidate(path: Path) -> bool:
    """True if any indicator exists directly inside ``path``."""
    return any((path / indicator).exists() for indicator in REPO_INDICATORS)


class RepoDiscoverer:
    """Finds and classifies repositories under a root directory."""

    def __init__(
        self,
        classifier: Optional[RepoClassifier] = None,
        validator: Optional[RepoValidator] = None,
    ):
        self._classifier = classifier or RepoClassifier()
        self._validator = validator or RepoValidator()

    async def discover(self, root: Optional[Path] = None, classify: bool = True) -> List[RepoInfo]:
        """Discover repositories directly under ``root``.

        Args:
            root: Directory to scan (default: working directory)
            classify: Assign categories; otherwise every repo is ``unknown``

        Returns:
            Valid repositories, ordered by directory name. Empty when
            ``root`` can't be read.
        """
        search_path = Path(root) if root else Path.cwd()

        try:
            children = await asyncio.to_thread(_list_subdirectories, search_path)
        except OSError as e:
            logger.warning("Failed to discover repos in %s: %s", search_path, e)
            return []

        repos: List[RepoInfo] = []
        for child in children:
            if NAMESPACE_SEPARATOR in child.name:
                logger.warning("Skipping %s: repo names must not contain '%s'", child, NAMESPACE_SEPARATOR)
                continue

            # One unreadable candidate must not abort the whole pass
            try:
                if not await asyncio.to_thread(is_repo_candidate, child):
                    continue
                category = await self._classifier.classify(child) if classify else UNKNOWN_CATEGORY
            except OSError as e:
                logger.warning("Skipping unreadable directory %s: %s", child, e)
                continue

            repo = RepoInfo(name=child.name, path=child.resolve(), category=category)

            if await self._validator.validate(repo):
                repos.append(repo)
                logger.debug("Discovered repo: %s (%s)", repo.name, repo.category)

        return repos
