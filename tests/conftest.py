"""Pytest configuration and fixtures."""

import json
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from reposcope.config import CONFIG_ENV_VAR, LOG_LEVEL_ENV_VAR, REPOS_PATH_ENV_VAR


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of the tests."""
    for name in (CONFIG_ENV_VAR, REPOS_PATH_ENV_VAR, LOG_LEVEL_ENV_VAR):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir(tmp_path):
    """Provide temporary directory for tests."""
    return tmp_path


def write_files(root: Path, files: dict) -> Path:
    """Create ``files`` (relative path -> content) under ``root``.

    Dict content is written as JSON; a path ending in "/" creates a directory.
    """
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        target = root / rel
        if rel.endswith("/"):
            target.mkdir(parents=True, exist_ok=True)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, dict):
            content = json.dumps(content)
        target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def make_repo(tmp_path):
    """Factory: make_repo("name", {"package.json": {...}}) -> repo path."""

    def _make(name: str, files: dict = None, parent: Path = None) -> Path:
        return write_files((parent or tmp_path) / name, files or {})

    return _make


@pytest.fixture
def workspace(tmp_path):
    """A parent directory holding one repository of every category, plus noise."""
    root = tmp_path / "workspace"
    write_files(root / "api", {
        "package.json": {"name": "api", "dependencies": {"express": "^4.18.0"}},
        "src/routes/users.ts": "router.get('/api/users', listUsers);\n",
    })
    write_files(root / "web", {
        "package.json": {"name": "web", "dependencies": {"react": "^18.0.0"}},
        "src/App.tsx": "export const App = () => null;\n",
    })
    write_files(root / "chain", {
        "foundry.toml": "[profile.default]\n",
        "out/Token.sol/Token.json": {"abi": [{"type": "function", "name": "transfer"}]},
    })
    write_files(root / "infra", {".git/": None, "terraform/": None})
    write_files(root / "notes", {"README.md": "just notes\n"})
    return root


@pytest.fixture
def write_tree():
    """The write_files helper, for tests that lay out their own trees."""
    return write_files
