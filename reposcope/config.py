"""Configuration management for reposcope.

Configuration is looked up in layers and the first valid source wins:
1. Project-local file (./.reposcope/repos.json, .yaml or .yml)
2. User file (~/.reposcope/repos.json, .yaml or .yml)
3. File named by the REPOSCOPE_CONFIG environment variable
4. Built-in defaults

The winning source is merged field-by-field over the defaults.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from reposcope.core.errors import InvalidConfigError

# Load .env file
load_dotenv()

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "REPOSCOPE_CONFIG"
REPOS_PATH_ENV_VAR = "REPOSCOPE_REPOS_PATH"
LOG_LEVEL_ENV_VAR = "REPOSCOPE_LOG_LEVEL"

CONFIG_DIR_NAME = ".reposcope"
CONFIG_FILE_NAMES = ("repos.json", "repos.yaml", "repos.yml")


class RepoConfig(BaseModel):
    """An explicitly configured repository."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(description="Unique repository name")
    path: str = Field(description="Repository directory, absolute or relative to the working directory")
    category: str = Field(default="unknown", alias="type", description="Repository category")
    tools: Optional[Union[str, List[str]]] = Field(
        default=None, description="Tool source: builtin, custom, a path, or a list of those"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or ":" in v:
            raise ValueError("repository name must be non-empty and must not contain ':'")
        return v


class DiscoveryConfig(BaseModel):
    """Configuration for repository auto-discovery."""

    enabled: bool = Field(default=True, description="Scan the parent path for repositories")
    parent_path: Optional[str] = Field(
        default=None, alias="parentPath", description="Directory to scan (default: working directory)"
    )
    auto_detect_type: bool = Field(
        default=True, alias="autoDetectType", description="Classify discovered repositories"
    )
    scan_workspace: bool = Field(
        default=True, alias="scanWorkspace", description="Also scan the ambient working directory"
    )

    model_config = ConfigDict(populate_by_name=True)


class ToolsConfig(BaseModel):
    """Configuration for tool loading."""

    lazy_load: bool = Field(default=True, alias="lazyLoad", description="Load repo tools on first reference")
    cache_results: bool = Field(default=True, alias="cacheResults", description="Cache tool results (reserved)")
    custom_dir: Optional[str] = Field(
        default=None, alias="customDir", description="Directory holding custom tool modules"
    )

    model_config = ConfigDict(populate_by_name=True)


class GatewayConfig(BaseModel):
    """Top-level gateway configuration."""

    repos: List[RepoConfig] = Field(default_factory=list)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    log_level: str = Field(default="INFO", alias="logLevel")

    # Where this configuration came from, for diagnostics
    source: str = Field(default="defaults", exclude=True)

    model_config = ConfigDict(populate_by_name=True, validate_default=True)

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        """Environment overrides the configured level."""
        return str(os.getenv(LOG_LEVEL_ENV_VAR) or v or "INFO").upper()


def _read_config_file(path: Path) -> Dict[str, Any]:
    """Parse a JSON or YAML config file.

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidConfigError: If the file cannot be parsed or is not a mapping
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise InvalidConfigError(str(path), str(e)) from e

    if not isinstance(data, dict):
        raise InvalidConfigError(str(path), "expected a mapping at top level")
    return data


def _candidate_files(base_dir: Path) -> List[Path]:
    return [base_dir / CONFIG_DIR_NAME / name for name in CONFIG_FILE_NAMES]


def config_sources(cwd: Optional[Path] = None, home: Optional[Path] = None) -> List[Path]:
    """Config file locations in lookup order."""
    cwd = cwd or Path.cwd()
    home = home or Path.home()

    sources = _candidate_files(cwd) + _candidate_files(home)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        sources.append(Path(env_path).expanduser())
    return sources


def build_config(data: Dict[str, Any], source: str = "dict") -> GatewayConfig:
    """Validate raw data into a GatewayConfig, defaults filling the gaps.

    Raises:
        InvalidConfigError: If validation fails
    """
    try:
        config = GatewayConfig.model_validate(data)
    except ValidationError as e:
        raise InvalidConfigError(source, str(e)) from e
    config.source = source
    return config


def load_config(config_path: Optional[Path] = None) -> GatewayConfig:
    """Load configuration from the first valid source.

    Args:
        config_path: Explicit config file; when given, only this file and
            the defaults are consulted.

    Returns:
        GatewayConfig instance
    """
    sources = [config_path] if config_path else config_sources()

    for path in sources:
        try:
            data = _read_config_file(path)
        except FileNotFoundError:
            continue
        except (OSError, InvalidConfigError) as e:
            logger.warning("Config source %s failed: %s", path, e)
            continue

        try:
            config = build_config(data, source=str(path))
        except InvalidConfigError as e:
            logger.warning("Config source %s failed: %s", path, e.message)
            continue

        logger.info("Loaded config from: %s", path)
        return config

    logger.info("Using default configuration")
    return GatewayConfig()
