"""search_across_repos root tool.

Plain file-system search over file names and contents. Hidden entries and
``node_modules`` are skipped, as are files that aren't UTF-8 text.
"""

import asyncio
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import aiofiles

from reposcope.registry.types import RepoInfo, ToolContext, ToolDefinition, ToolResult

SKIPPED_DIRS = {"node_modules"}
MAX_FILE_BYTES = 1_000_000


def _iter_files(root: Path, file_types: Optional[List[str]]) -> List[Path]:
    files = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith(".") and d not in SKIPPED_DIRS)
        for filename in sorted(filenames):
            if filename.startswith("."):
                continue
            if file_types and Path(filename).suffix.lstrip(".") not in file_types:
                continue
            path = Path(dirpath) / filename
            try:
                if path.stat().st_size > MAX_FILE_BYTES:
                    continue
            except OSError:
                continue
            files.append(path)
    return files


async def search_in_directory(
    root: Path, query: str, file_types: Optional[List[str]] = None
) -> List[Dict[str, Any]]:
    """Files under ``root`` whose name or content contains ``query`` (case-insensitive)."""
    needle = query.lower()
    results = []

    for path in await asyncio.to_thread(_iter_files, root, file_types):
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                content = await f.read()
        except (OSError, UnicodeDecodeError):
            continue

        name_hit = 1 if needle in path.name.lower() else 0
        matches = content.lower().count(needle) + name_hit
        if matches:
            results.append({"file": str(path), "matches": matches})

    return results


def create_search_across_repos_tool(get_repos: Callable[[], List[RepoInfo]]) -> ToolDefinition:
    async def handler(args: Dict[str, Any], context: ToolContext) -> ToolResult:
        query = args.get("query")
        if not query:
            return ToolResult.error("query is required")

        repo_filter = args.get("repoFilter") or args.get("repo_filter")
        file_types = args.get("fileTypes") or args.get("file_types")

        repos = get_repos()
        if repo_filter:
            repos = [repo for repo in repos if repo.name in repo_filter]

        results: Dict[str, List[Dict[str, Any]]] = {}
        for repo in repos:
            hits = await search_in_directory(Path(repo.path), query, file_types)
            if hits:
                results[repo.name] = hits

        return ToolResult.json(results)

    return ToolDefinition(
        name="search_across_repos",
        description="Search across all repositories using file system search",
        input_schema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search query (searches in file names and content)",
                },
                "repoFilter": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Optional: Limit search to specific repos",
                },
                "fileTypes": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": 'Optional: Filter by file extensions (e.g., ["py", "ts"])',
                },
            },
            "required": ["query"],
        },
        handler=handler,
    )
