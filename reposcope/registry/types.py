"""Core data types shared by discovery, loading and dispatch.

RepoInfo describes a discovered repository, ToolSource describes where its
tools come from, ToolDefinition/ToolResult/ToolContext describe the tools
themselves and how they are invoked.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

NAMESPACE_SEPARATOR = ":"
UNKNOWN_CATEGORY = "unknown"


class SourceKind(str, Enum):
    """Tag for the ToolSource variant."""

    BUILTIN = "builtin"
    CUSTOM = "custom"
    PATH = "path"
    LIST = "list"


@dataclass(frozen=True)
class ToolSource:
    """Declared strategy for obtaining a repository's tools.

    A tagged variant: ``kind`` selects the meaning, ``path`` is set for
    PATH sources and ``items`` for LIST sources.
    """

    kind: SourceKind = SourceKind.BUILTIN
    path: Optional[str] = None
    items: tuple = ()

    @classmethod
    def builtin(cls) -> ToolSource:
        return cls(SourceKind.BUILTIN)

    @classmethod
    def custom(cls) -> ToolSource:
        return cls(SourceKind.CUSTOM)

    @classmethod
    def from_path(cls, path: str) -> ToolSource:
        return cls(SourceKind.PATH, path=path)

    @classmethod
    def of(cls, *items: ToolSource) -> ToolSource:
        return cls(SourceKind.LIST, items=tuple(items))

    def describe(self) -> str:
        """Short human-readable form for logs."""
        if self.kind is SourceKind.PATH:
            return f"path:{self.path}"
        if self.kind is SourceKind.LIST:
            return "[" + ", ".join(item.describe() for item in self.items) + "]"
        return self.kind.value


def parse_tool_source(value: Union[None, str, List[str], ToolSource]) -> ToolSource:
    """Turn a configuration value into a ToolSource.

    ``None`` and ``"builtin"`` mean the category built-ins, ``"custom"``
    means the custom tool directory, any other string is a path, and a
    list is resolved element by element.
    """
    if isinstance(value, ToolSource):
        return value
    if value is None:
        return ToolSource.builtin()
    if isinstance(value, (list, tuple)):
        return ToolSource.of(*(parse_tool_source(item) for item in value))
    if value == SourceKind.BUILTIN.value:
        return ToolSource.builtin()
    if value == SourceKind.CUSTOM.value:
        return ToolSource.custom()
    return ToolSource.from_path(str(value))


@dataclass(frozen=True)
class RepoInfo:
    """A validated repository descriptor."""

    name: str
    path: Path
    category: str = UNKNOWN_CATEGORY
    tool_source: ToolSource = field(default_factory=ToolSource.builtin)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": str(self.path),
            "type": self.category,
            "tools": self.tool_source.describe(),
        }


@dataclass
class TextContent:
    text: str
    type: str = "text"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass
class ImageContent:
    """Binary content, base64-encoded."""

    data: str
    mime_type: str
    type: str = "image"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "data": self.data, "mimeType": self.mime_type}


@dataclass
class ResourceContent:
    uri: str
    text: Optional[str] = None
    mime_type: Optional[str] = None
    type: str = "resource"

    def to_dict(self) -> Dict[str, Any]:
        resource: Dict[str, Any] = {"uri": self.uri}
        if self.text is not None:
            resource["text"] = self.text
        if self.mime_type is not None:
            resource["mimeType"] = self.mime_type
        return {"type": self.type, "resource": resource}


ContentPart = Union[TextContent, ImageContent, ResourceContent]


def _content_from_dict(data: Dict[str, Any]) -> ContentPart:
    kind = data.get("type", "text")
    if kind == "image":
        return ImageContent(data=data.get("data", ""), mime_type=data.get("mimeType", "application/octet-stream"))
    if kind == "resource":
        resource = data.get("resource", data)
        return ResourceContent(
            uri=resource.get("uri", ""),
            text=resource.get("text"),
            mime_type=resource.get("mimeType"),
        )
    return TextContent(text=str(data.get("text", "")))


@dataclass
class ToolResult:
    """Result of a tool invocation, in MCP content form."""

    content: List[ContentPart] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> ToolResult:
        return cls(content=[TextContent(text=text)], is_error=is_error)

    @classmethod
    def json(cls, data: Any, is_error: bool = False) -> ToolResult:
        return cls.text(json.dumps(data, indent=2, default=str), is_error=is_error)

    @classmethod
    def error(cls, message: str) -> ToolResult:
        return cls.json({"error": message}, is_error=True)

    @classmethod
    def coerce(cls, value: Any) -> ToolResult:
        """Normalize whatever a handler returned into a ToolResult."""
        if isinstance(value, ToolResult):
            return value
        if isinstance(value, dict) and isinstance(value.get("content"), list):
            return cls(
                content=[_content_from_dict(part) for part in value["content"]],
                is_error=bool(value.get("isError", False)),
            )
        if isinstance(value, str):
            return cls.text(value)
        return cls.json(value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": [part.to_dict() for part in self.content],
            "isError": self.is_error,
        }


@dataclass
class ToolContext:
    """Per-call invocation context. Built fresh for every call."""

    repo_path: Path
    repo: RepoInfo
    logger: logging.Logger


ToolHandler = Callable[[Dict[str, Any], ToolContext], Union[Awaitable[Any], Any]]

EMPTY_INPUT_SCHEMA: Dict[str, Any] = {"type": "object", "properties": {}}


@dataclass
class ToolDefinition:
    """A named, schema-described, invocable operation."""

    name: str
    description: str
    handler: ToolHandler
    input_schema: Optional[Dict[str, Any]] = None
    repo: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        """``repo:name`` for repo-bound tools, bare name for root tools."""
        if self.repo:
            return f"{self.repo}{NAMESPACE_SEPARATOR}{self.name}"
        return self.name

    def with_repo(self, repo_name: str) -> ToolDefinition:
        return replace(self, repo=repo_name)

    def to_mcp_format(self) -> Dict[str, Any]:
        """Convert to MCP tool format."""
        return {
            "name": self.qualified_name,
            "description": self.description,
            "inputSchema": self.input_schema or dict(EMPTY_INPUT_SCHEMA),
        }
