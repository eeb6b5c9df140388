"""list_repos root tool."""

from typing import Any, Callable, Dict, List

from reposcope.registry.types import RepoInfo, ToolContext, ToolDefinition, ToolResult


def create_list_repos_tool(get_repos: Callable[[], List[RepoInfo]]) -> ToolDefinition:
    async def handler(args: Dict[str, Any], context: ToolContext) -> ToolResult:
        return ToolResult.json(
            [{"name": repo.name, "path": str(repo.path), "type": repo.category} for repo in get_repos()]
        )

    return ToolDefinition(
        name="list_repos",
        description="Lists all discovered repositories with metadata",
        handler=handler,
    )
