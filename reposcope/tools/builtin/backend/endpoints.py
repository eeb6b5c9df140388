"""get_api_endpoint: locate the route file that defines an endpoint."""

import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles

from reposcope.registry.types import ToolContext, ToolDefinition, ToolResult

ROUTE_DIRS = (
    ("src", "routes"),
    ("src", "api"),
    ("routes",),
    ("api",),
    ("server", "routes"),
    ("app", "routers"),
    ("app", "api"),
)

ROUTE_SUFFIXES = (".ts", ".js", ".py")


def _route_files(routes_dir: Path) -> List[Path]:
    if not routes_dir.is_dir():
        return []
    return sorted(p for p in routes_dir.rglob("*") if p.is_file() and p.suffix in ROUTE_SUFFIXES)


async def find_endpoint(routes_dir: Path, endpoint: str) -> Optional[Dict[str, Any]]:
    """First route file mentioning ``endpoint`` or its last path segment."""
    parts = [p for p in endpoint.split("/") if p]
    needles = {endpoint}
    if parts:
        needles.add(parts[-1])

    for path in await asyncio.to_thread(_route_files, routes_dir):
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                content = await f.read()
        except (OSError, UnicodeDecodeError):
            continue
        if any(needle in content for needle in needles):
            return {"file": str(path), "endpoint": endpoint, "found": True}
    return None


async def get_api_endpoint(args: Dict[str, Any], context: ToolContext) -> ToolResult:
    endpoint = args.get("endpoint")
    if not endpoint:
        return ToolResult.error("endpoint is required")

    for parts in ROUTE_DIRS:
        info = await find_endpoint(Path(context.repo_path).joinpath(*parts), endpoint)
        if info:
            return ToolResult.json(info)

    return ToolResult.error(f"Endpoint {endpoint} not found")


def create_get_api_endpoint_tool() -> ToolDefinition:
    return ToolDefinition(
        name="get_api_endpoint",
        description="Get API endpoint configuration from the backend repository",
        input_schema={
            "type": "object",
            "properties": {
                "endpoint": {
                    "type": "string",
                    "description": "Endpoint path (e.g., /api/users)",
                },
            },
            "required": ["endpoint"],
        },
        handler=get_api_endpoint,
    )
