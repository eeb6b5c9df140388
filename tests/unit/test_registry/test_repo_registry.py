"""Tests for the repository registry: source precedence and refresh."""

import logging

import pytest

from reposcope.config import build_config
from reposcope.registry.repos import RepoRegistry
from reposcope.registry.types import SourceKind


def _registry(data, cwd):
    return RepoRegistry(build_config(data), cwd=lambda: cwd)


class TestRefresh:
    @pytest.mark.asyncio
    async def test_discovers_workspace_by_default(self, workspace):
        registry = _registry({}, workspace)
        await registry.refresh()

        assert [repo.name for repo in registry.list()] == ["api", "chain", "infra", "web"]
        assert registry.get("api").category == "backend"
        assert registry.has("web")
        assert registry.get("notes") is None

    @pytest.mark.asyncio
    async def test_config_entry_beats_discovery(self, workspace, make_repo, caplog):
        """A configured repo keeps its name even when discovery finds another with it."""
        elsewhere = make_repo("other-api", {"package.json": "{}"})
        registry = _registry(
            {"repos": [{"name": "api", "path": str(elsewhere), "type": "custom-type", "tools": "custom"}]},
            workspace,
        )

        with caplog.at_level(logging.WARNING):
            await registry.refresh()

        api = registry.get("api")
        assert api.path == elsewhere.resolve()
        assert api.category == "custom-type"
        assert api.tool_source.kind is SourceKind.CUSTOM
        assert "Skipping duplicate repo" in caplog.text
        assert [repo.name for repo in registry.list()].count("api") == 1

    @pytest.mark.asyncio
    async def test_config_entries_come_first(self, workspace, make_repo):
        extra = make_repo("zeta", {})
        registry = _registry({"repos": [{"name": "zeta", "path": str(extra)}]}, workspace)
        await registry.refresh()
        assert registry.list()[0].name == "zeta"

    @pytest.mark.asyncio
    async def test_invalid_config_path_is_dropped(self, workspace, tmp_path):
        registry = _registry({"repos": [{"name": "ghost", "path": str(tmp_path / "nope")}]}, workspace)
        await registry.refresh()
        assert not registry.has("ghost")

    @pytest.mark.asyncio
    async def test_config_relative_path_resolves_against_cwd(self, workspace, monkeypatch):
        monkeypatch.chdir(workspace)
        registry = _registry(
            {"repos": [{"name": "notes", "path": "notes"}], "discovery": {"enabled": False, "scanWorkspace": False}},
            workspace,
        )
        await registry.refresh()
        assert registry.get("notes").path == (workspace / "notes").resolve()

    @pytest.mark.asyncio
    async def test_discovery_disabled(self, workspace):
        registry = _registry({"discovery": {"enabled": False, "scanWorkspace": False}}, workspace)
        await registry.refresh()
        assert registry.list() == []

    @pytest.mark.asyncio
    async def test_parent_path(self, workspace, tmp_path):
        empty_cwd = tmp_path / "empty"
        empty_cwd.mkdir()
        registry = _registry({"discovery": {"parentPath": str(workspace)}}, empty_cwd)
        await registry.refresh()
        assert registry.has("chain")

    @pytest.mark.asyncio
    async def test_auto_detect_off_applies_to_parent_path_only(self, workspace):
        registry = _registry({"discovery": {"autoDetectType": False, "scanWorkspace": False}}, workspace)
        await registry.refresh()
        assert {repo.category for repo in registry.list()} == {"unknown"}

    @pytest.mark.asyncio
    async def test_env_repos_path(self, workspace, tmp_path, make_repo, monkeypatch):
        other = tmp_path / "other"
        make_repo("extra", {".git/": None}, parent=other)
        make_repo("api", {".git/": None}, parent=other)
        monkeypatch.setenv("REPOSCOPE_REPOS_PATH", str(other))

        registry = _registry({}, workspace)
        await registry.refresh()

        assert registry.has("extra")
        assert registry.get("api").path == (workspace / "api").resolve()

    @pytest.mark.asyncio
    async def test_refresh_is_idempotent(self, workspace):
        registry = _registry({}, workspace)
        await registry.refresh()
        first = registry.list()
        await registry.refresh()
        assert registry.list() == first

    @pytest.mark.asyncio
    async def test_refresh_picks_up_removals(self, workspace):
        registry = _registry({}, workspace)
        await registry.refresh()

        (workspace / "infra" / "terraform").rmdir()
        (workspace / "infra" / ".git").rmdir()
        await registry.refresh()

        assert not registry.has("infra")
