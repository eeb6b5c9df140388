"""Plugin loading: turn a file-system location into a Python module.

A location is either a ``.py`` file or a package directory (loaded through
its ``__init__.py``). Modules are executed under a synthetic name so that
same-named plugins from different repositories never collide.
"""

import asyncio
import hashlib
import importlib.util
import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from types import ModuleType
from typing import Optional

from reposcope.core.errors import ToolLoadError, ToolSourceNotFoundError

logger = logging.getLogger(__name__)

PLUGIN_MODULE_PREFIX = "_reposcope_plugin_"


def resolve_module_file(location: Path) -> Optional[Path]:
    """Map a location to the file that would be executed, if it exists."""
    if location.is_dir():
        init_file = location / "__init__.py"
        return init_file if init_file.is_file() else None
    if location.is_file():
        return location
    return None


class PluginLoader(ABC):
    """Loads a plugin module from a location.

    Implementations raise ToolSourceNotFoundError when the location does
    not exist and ToolLoadError for any other failure.
    """

    @abstractmethod
    async def load(self, location: Path) -> ModuleType:
        """Load and execute the module at ``location``."""
        pass


class PythonPluginLoader(PluginLoader):
    """Executes Python source files with importlib."""

    async def load(self, location: Path) -> ModuleType:
        return await asyncio.to_thread(self._load_sync, Path(location))

    def _load_sync(self, location: Path) -> ModuleType:
        module_file = resolve_module_file(location)
        if module_file is None:
            raise ToolSourceNotFoundError(str(location))

        digest = hashlib.sha1(str(module_file).encode("utf-8")).hexdigest()[:12]
        module_name = f"{PLUGIN_MODULE_PREFIX}{digest}"
        is_package = module_file.name == "__init__.py"

        spec = importlib.util.spec_from_file_location(
            module_name,
            module_file,
            submodule_search_locations=[str(module_file.parent)] if is_package else None,
        )
        if spec is None or spec.loader is None:
            raise ToolLoadError(str(location), "not an importable Python module")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(module_name, None)
            raise ToolLoadError(str(location), f"{type(e).__name__}: {e}") from e

        logger.debug("Loaded plugin module %s from %s", module_name, module_file)
        return module
