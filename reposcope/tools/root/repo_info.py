"""get_repo_info root tool."""

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from reposcope.registry.types import RepoInfo, ToolContext, ToolDefinition, ToolResult

SKIPPED_DIRS = {"node_modules"}


def build_file_tree(root: Path, max_depth: int = 2, _depth: int = 0) -> Dict[str, Any]:
    """Nested dict of directories; files map to ``"file"``. Unreadable dirs are empty."""
    tree: Dict[str, Any] = {}
    if _depth >= max_depth:
        return tree

    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError:
        return tree

    for entry in entries:
        if entry.name.startswith(".") or entry.name in SKIPPED_DIRS:
            continue
        if entry.is_dir():
            tree[entry.name] = build_file_tree(entry, max_depth, _depth + 1)
        else:
            tree[entry.name] = "file"
    return tree


def create_get_repo_info_tool(
    get_repo: Callable[[str], Optional[RepoInfo]],
    get_tools_by_repo: Callable[[str], List[ToolDefinition]],
) -> ToolDefinition:
    async def handler(args: Dict[str, Any], context: ToolContext) -> ToolResult:
        repo_name = args.get("repo")
        repo = get_repo(repo_name) if repo_name else None
        if repo is None:
            return ToolResult.error(f"Repository '{repo_name}' not found")

        info = {
            "name": repo.name,
            "path": str(repo.path),
            "type": repo.category,
            "tools": [
                {"name": tool.name, "description": tool.description} for tool in get_tools_by_repo(repo.name)
            ],
            "fileStructure": await asyncio.to_thread(build_file_tree, Path(repo.path)),
        }
        return ToolResult.json(info)

    return ToolDefinition(
        name="get_repo_info",
        description="Get detailed information about a specific repository",
        input_schema={
            "type": "object",
            "properties": {
                "repo": {"type": "string", "description": "Repository name"},
            },
            "required": ["repo"],
        },
        handler=handler,
    )
