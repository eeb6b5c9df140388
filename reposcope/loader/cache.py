"""Module cache for dynamically loaded tool sources."""

from pathlib import Path
from types import ModuleType
from typing import Dict, Optional


class ModuleCache:
    """Maps a resolved location to its already-loaded module.

    Owned by one RepoToolLoader; a fresh instance means a cold cache.
    Only successful loads are cached, so a location that appears later is
    still picked up.
    """

    def __init__(self):
        self._modules: Dict[Path, ModuleType] = {}
        self.hits = 0
        self.misses = 0

    def get(self, location: Path) -> Optional[ModuleType]:
        module = self._modules.get(location)
        if module is None:
            self.misses += 1
        else:
            self.hits += 1
        return module

    def put(self, location: Path, module: ModuleType) -> None:
        self._modules[location] = module

    def clear(self) -> None:
        self._modules.clear()

    def __contains__(self, location: Path) -> bool:
        return location in self._modules

    def __len__(self) -> int:
        return len(self._modules)
