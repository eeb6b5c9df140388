"""Root tools: repository-independent tools registered under bare names."""

from typing import Callable, List, Optional

from reposcope.registry.types import RepoInfo, ToolDefinition
from reposcope.tools.root.list_repos import create_list_repos_tool
from reposcope.tools.root.repo_info import create_get_repo_info_tool
from reposcope.tools.root.search import create_search_across_repos_tool


def load_root_tools(
    get_repos: Callable[[], List[RepoInfo]],
    get_repo: Callable[[str], Optional[RepoInfo]],
    get_tools_by_repo: Callable[[str], List[ToolDefinition]],
) -> List[ToolDefinition]:
    return [
        create_list_repos_tool(get_repos),
        create_search_across_repos_tool(get_repos),
        create_get_repo_info_tool(get_repo, get_tools_by_repo),
    ]


__all__ = ["load_root_tools"]
