"""Repository path validation."""

import asyncio
import logging
import os
from pathlib import Path

from reposcope.registry.types import RepoInfo

logger = logging.getLogger(__name__)


def _check_directory(path: Path) -> Path:
    resolved = path.expanduser().resolve(strict=True)
    if not resolved.is_dir():
        raise NotADirectoryError(f"Repo path is not a directory: {resolved}")
    if not os.access(resolved, os.R_OK | os.X_OK):
        raise PermissionError(f"Repo path is not readable: {resolved}")
    return resolved


class RepoValidator:
    """Confirms that a repository path is an existing, readable directory."""

    async def validate(self, repo: RepoInfo) -> bool:
        """Return True when ``repo.path`` is usable. Never raises."""
        try:
            await asyncio.to_thread(_check_directory, Path(repo.path))
            return True
        except OSError as e:
            logger.warning("Failed to validate repo %s: %s", repo.name, e)
            return False
