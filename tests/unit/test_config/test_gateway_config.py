"""Tests for layered configuration loading."""

import json
import logging

import pytest
from pydantic import ValidationError

from reposcope.config import (
    GatewayConfig,
    RepoConfig,
    build_config,
    config_sources,
    load_config,
)
from reposcope.core.errors import InvalidConfigError


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Working directory and home both inside tmp_path."""
    cwd = tmp_path / "project"
    home = tmp_path / "home"
    cwd.mkdir()
    home.mkdir()
    monkeypatch.chdir(cwd)
    monkeypatch.setenv("HOME", str(home))
    return cwd, home


def _write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
    return path


class TestDefaults:
    def test_defaults(self):
        config = GatewayConfig()
        assert config.repos == []
        assert config.discovery.enabled is True
        assert config.discovery.parent_path is None
        assert config.discovery.auto_detect_type is True
        assert config.tools.lazy_load is True
        assert config.log_level == "INFO"
        assert config.source == "defaults"

    def test_log_level_env_override(self, monkeypatch):
        monkeypatch.setenv("REPOSCOPE_LOG_LEVEL", "debug")
        assert GatewayConfig().log_level == "DEBUG"
        assert GatewayConfig(logLevel="warning").log_level == "DEBUG"

    def test_log_level_uppercased(self):
        assert GatewayConfig(logLevel="warning").log_level == "WARNING"


class TestModels:
    def test_camel_case_aliases(self):
        config = build_config(
            {
                "repos": [{"name": "api", "path": "../api", "type": "backend", "tools": ["builtin", "./t.py"]}],
                "discovery": {"parentPath": "~/code", "autoDetectType": False, "scanWorkspace": False},
                "tools": {"lazyLoad": False, "customDir": "/opt/tools"},
            }
        )
        assert config.repos[0].category == "backend"
        assert config.repos[0].tools == ["builtin", "./t.py"]
        assert config.discovery.parent_path == "~/code"
        assert config.discovery.auto_detect_type is False
        assert config.discovery.scan_workspace is False
        assert config.tools.lazy_load is False
        assert config.tools.custom_dir == "/opt/tools"

    def test_partial_config_keeps_defaults(self):
        config = build_config({"tools": {"lazyLoad": False}})
        assert config.tools.lazy_load is False
        assert config.discovery.enabled is True

    @pytest.mark.parametrize("name", ["", "api:v2"])
    def test_repo_name_rejected(self, name):
        with pytest.raises(ValidationError):
            RepoConfig(name=name, path=".")

    def test_build_config_wraps_validation_error(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            build_config({"repos": [{"name": "x"}]}, source="bad.json")
        assert exc_info.value.details["source"] == "bad.json"


class TestConfigSources:
    def test_order(self, tmp_path, monkeypatch):
        monkeypatch.setenv("REPOSCOPE_CONFIG", str(tmp_path / "env.json"))
        sources = config_sources(cwd=tmp_path / "cwd", home=tmp_path / "home")

        assert sources[0] == tmp_path / "cwd" / ".reposcope" / "repos.json"
        assert sources[3] == tmp_path / "home" / ".reposcope" / "repos.json"
        assert sources[-1] == tmp_path / "env.json"

    def test_no_env_source_when_unset(self, tmp_path):
        sources = config_sources(cwd=tmp_path, home=tmp_path)
        assert len(sources) == 6


class TestLoadConfig:
    def test_defaults_when_nothing_exists(self, isolated):
        config = load_config()
        assert config.source == "defaults"

    def test_project_beats_home(self, isolated):
        cwd, home = isolated
        _write_json(cwd / ".reposcope" / "repos.json", {"logLevel": "ERROR"})
        _write_json(home / ".reposcope" / "repos.json", {"logLevel": "DEBUG"})

        config = load_config()
        assert config.log_level == "ERROR"
        assert config.source.endswith("repos.json")

    def test_first_valid_source_wins_without_merge(self, isolated):
        cwd, home = isolated
        _write_json(cwd / ".reposcope" / "repos.json", {"tools": {"lazyLoad": False}})
        _write_json(home / ".reposcope" / "repos.json", {"logLevel": "DEBUG"})

        config = load_config()
        assert config.tools.lazy_load is False
        assert config.log_level == "INFO"

    def test_invalid_source_falls_through(self, isolated, caplog):
        cwd, home = isolated
        _write_json(cwd / ".reposcope" / "repos.json", "{not json")
        _write_json(home / ".reposcope" / "repos.json", {"logLevel": "ERROR"})

        with caplog.at_level(logging.WARNING):
            config = load_config()

        assert config.log_level == "ERROR"
        assert "failed" in caplog.text

    def test_env_source(self, isolated, tmp_path, monkeypatch):
        env_file = _write_json(tmp_path / "elsewhere" / "config.json", {"discovery": {"enabled": False}})
        monkeypatch.setenv("REPOSCOPE_CONFIG", str(env_file))

        assert load_config().discovery.enabled is False

    def test_yaml_source(self, isolated):
        cwd, _ = isolated
        (cwd / ".reposcope").mkdir()
        (cwd / ".reposcope" / "repos.yaml").write_text(
            "repos:\n  - name: api\n    path: ../api\n    type: backend\n", encoding="utf-8"
        )

        config = load_config()
        assert config.repos[0].name == "api"
        assert config.repos[0].category == "backend"

    def test_non_mapping_is_invalid(self, isolated):
        cwd, _ = isolated
        _write_json(cwd / ".reposcope" / "repos.json", [1, 2, 3])
        assert load_config().source == "defaults"

    def test_explicit_path(self, isolated, tmp_path):
        path = _write_json(tmp_path / "explicit.json", {"logLevel": "WARNING"})
        assert load_config(path).log_level == "WARNING"

    def test_explicit_missing_path_gives_defaults(self, isolated, tmp_path):
        assert load_config(tmp_path / "missing.json").source == "defaults"
