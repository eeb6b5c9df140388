"""Tool loading: plugin modules, module cache and the resolution pipeline."""

from reposcope.loader.cache import ModuleCache
from reposcope.loader.plugins import PluginLoader, PythonPluginLoader
from reposcope.loader.repo_tools import DEFAULT_BUILTIN_DIR, RepoToolLoader
from reposcope.loader.tool_loader import ToolLoader

__all__ = [
    "DEFAULT_BUILTIN_DIR",
    "ModuleCache",
    "PluginLoader",
    "PythonPluginLoader",
    "RepoToolLoader",
    "ToolLoader",
]
