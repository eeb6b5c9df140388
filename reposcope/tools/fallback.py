"""Fallback tool registered for repositories whose sources yield nothing."""

import asyncio
from pathlib import Path
from typing import Any, Dict, List

from reposcope.registry.types import RepoInfo, ToolContext, ToolDefinition, ToolResult

FALLBACK_TOOL_NAME = "list_files"


def _list_directory(directory: Path) -> List[Dict[str, str]]:
    return [
        {"name": entry.name, "type": "directory" if entry.is_dir() else "file"}
        for entry in sorted(directory.iterdir(), key=lambda p: p.name)
    ]


async def list_files(args: Dict[str, Any], context: ToolContext) -> ToolResult:
    root = Path(context.repo_path).resolve()
    target = (root / args.get("directory", ".")).resolve()

    if target != root and root not in target.parents:
        return ToolResult.error(f"Directory '{args.get('directory')}' is outside the repository")

    try:
        entries = await asyncio.to_thread(_list_directory, target)
    except OSError as e:
        return ToolResult.error(f"Cannot list {target}: {e.strerror or e}")

    return ToolResult.json(entries)


def create_list_files_tool(repo: RepoInfo) -> ToolDefinition:
    return ToolDefinition(
        name=FALLBACK_TOOL_NAME,
        description=f"List files in {repo.name} repository",
        input_schema={
            "type": "object",
            "properties": {
                "directory": {
                    "type": "string",
                    "description": "Directory relative to the repository root (default: root)",
                },
            },
        },
        handler=list_files,
        repo=repo.name,
    )
