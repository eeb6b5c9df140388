"""Tests for root tools and the list_files fallback."""

import json
import logging
from pathlib import Path

import pytest

from reposcope.registry.types import RepoInfo, ToolContext, ToolDefinition
from reposcope.tools.fallback import create_list_files_tool
from reposcope.tools.root import load_root_tools
from reposcope.tools.root.repo_info import build_file_tree
from reposcope.tools.root.search import search_in_directory


def _context(path, name="root"):
    repo = RepoInfo(name=name, path=Path(path))
    return ToolContext(repo_path=Path(path), repo=repo, logger=logging.getLogger("test"))


def _payload(result):
    return json.loads(result.content[0].text)


@pytest.fixture
def repos(workspace):
    return [
        RepoInfo(name="api", path=workspace / "api", category="backend"),
        RepoInfo(name="web", path=workspace / "web", category="frontend"),
    ]


@pytest.fixture
def root_tools(repos):
    by_name = {repo.name: repo for repo in repos}
    owned = {"api": [ToolDefinition(name="get_api_endpoint", description="Find routes", handler=None, repo="api")]}
    tools = load_root_tools(lambda: repos, by_name.get, lambda name: owned.get(name, []))
    return {tool.name: tool for tool in tools}


class TestListFiles:
    @pytest.mark.asyncio
    async def test_lists_repo_root(self, workspace):
        repo = RepoInfo(name="api", path=workspace / "api")
        tool = create_list_files_tool(repo)

        result = await tool.handler({}, _context(repo.path, "api"))

        assert not result.is_error
        assert _payload(result) == [
            {"name": "package.json", "type": "file"},
            {"name": "src", "type": "directory"},
        ]
        assert tool.qualified_name == "api:list_files"

    @pytest.mark.asyncio
    async def test_subdirectory(self, workspace):
        tool = create_list_files_tool(RepoInfo(name="api", path=workspace / "api"))
        result = await tool.handler({"directory": "src/routes"}, _context(workspace / "api", "api"))
        assert _payload(result) == [{"name": "users.ts", "type": "file"}]

    @pytest.mark.asyncio
    async def test_escape_is_rejected(self, workspace):
        tool = create_list_files_tool(RepoInfo(name="api", path=workspace / "api"))
        result = await tool.handler({"directory": "../web"}, _context(workspace / "api", "api"))
        assert result.is_error

    @pytest.mark.asyncio
    async def test_missing_directory_is_error(self, workspace):
        tool = create_list_files_tool(RepoInfo(name="api", path=workspace / "api"))
        result = await tool.handler({"directory": "nope"}, _context(workspace / "api", "api"))
        assert result.is_error


class TestListRepos:
    @pytest.mark.asyncio
    async def test_lists_all(self, root_tools, workspace):
        result = await root_tools["list_repos"].handler({}, _context(workspace))
        assert _payload(result) == [
            {"name": "api", "path": str(workspace / "api"), "type": "backend"},
            {"name": "web", "path": str(workspace / "web"), "type": "frontend"},
        ]


class TestSearchAcrossRepos:
    @pytest.mark.asyncio
    async def test_content_search_is_case_insensitive(self, root_tools, workspace):
        result = await root_tools["search_across_repos"].handler({"query": "LISTUSERS"}, _context(workspace))
        payload = _payload(result)

        assert list(payload) == ["api"]
        assert payload["api"][0]["file"].endswith("users.ts")
        assert payload["api"][0]["matches"] == 1

    @pytest.mark.asyncio
    async def test_repo_filter(self, root_tools, workspace):
        result = await root_tools["search_across_repos"].handler(
            {"query": "name", "repoFilter": ["web"]}, _context(workspace)
        )
        assert list(_payload(result)) == ["web"]

    @pytest.mark.asyncio
    async def test_file_types(self, root_tools, workspace):
        result = await root_tools["search_across_repos"].handler(
            {"query": "export", "fileTypes": ["json"]}, _context(workspace)
        )
        assert _payload(result) == {}

    @pytest.mark.asyncio
    async def test_query_required(self, root_tools, workspace):
        result = await root_tools["search_across_repos"].handler({}, _context(workspace))
        assert result.is_error

    @pytest.mark.asyncio
    async def test_skips_hidden_and_node_modules(self, write_tree, tmp_path):
        write_tree(tmp_path, {
            ".git/config": "needle",
            "node_modules/pkg/index.js": "needle",
            "src/main.py": "needle needle",
        })
        hits = await search_in_directory(tmp_path, "needle")
        assert hits == [{"file": str(tmp_path / "src" / "main.py"), "matches": 2}]

    @pytest.mark.asyncio
    async def test_file_name_counts_as_match(self, write_tree, tmp_path):
        write_tree(tmp_path, {"needle.txt": "nothing here"})
        hits = await search_in_directory(tmp_path, "needle")
        assert hits[0]["matches"] == 1

    @pytest.mark.asyncio
    async def test_binary_files_are_skipped(self, tmp_path):
        (tmp_path / "blob.bin").write_bytes(b"\xff\xfe\x00needle")
        assert await search_in_directory(tmp_path, "needle") == []


class TestGetRepoInfo:
    @pytest.mark.asyncio
    async def test_info(self, root_tools, workspace):
        result = await root_tools["get_repo_info"].handler({"repo": "api"}, _context(workspace))
        payload = _payload(result)

        assert payload["name"] == "api"
        assert payload["type"] == "backend"
        assert payload["tools"] == [{"name": "get_api_endpoint", "description": "Find routes"}]
        assert payload["fileStructure"] == {"package.json": "file", "src": {"routes": {}}}

    @pytest.mark.asyncio
    async def test_unknown_repo(self, root_tools, workspace):
        result = await root_tools["get_repo_info"].handler({"repo": "ghost"}, _context(workspace))
        assert result.is_error
        assert "ghost" in _payload(result)["error"]

    def test_file_tree_depth(self, write_tree, tmp_path):
        write_tree(tmp_path, {"a/b/c/d.txt": "", ".hidden/x": "", "top.txt": ""})
        assert build_file_tree(tmp_path, max_depth=2) == {"a": {"b": {}}, "top.txt": "file"}
