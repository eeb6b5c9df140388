"""Repository and tool registries plus the shared data types.

RepoRegistry is resolved lazily: it depends on the discovery package, which
itself imports the data types from here.
"""

from typing import TYPE_CHECKING, Any

from reposcope.registry.tools import ToolRegistry
from reposcope.registry.types import (
    NAMESPACE_SEPARATOR,
    ImageContent,
    RepoInfo,
    ResourceContent,
    SourceKind,
    TextContent,
    ToolContext,
    ToolDefinition,
    ToolResult,
    ToolSource,
    parse_tool_source,
)

if TYPE_CHECKING:
    from reposcope.registry.repos import RepoRegistry

__all__ = [
    "NAMESPACE_SEPARATOR",
    "ImageContent",
    "RepoInfo",
    "RepoRegistry",
    "ResourceContent",
    "SourceKind",
    "TextContent",
    "ToolContext",
    "ToolDefinition",
    "ToolRegistry",
    "ToolResult",
    "ToolSource",
    "parse_tool_source",
]


def __getattr__(name: str) -> Any:
    """Lazily resolve RepoRegistry."""
    if name == "RepoRegistry":
        from reposcope.registry.repos import RepoRegistry

        return RepoRegistry

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
