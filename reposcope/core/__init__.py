"""Core building blocks shared across reposcope."""

from reposcope.core.errors import (
    ConfigurationError,
    DiscoveryError,
    InvalidConfigError,
    InvalidParamsError,
    ReposcopeError,
    ToolAlreadyRegisteredError,
    ToolLoadError,
    ToolNotFoundError,
    ToolRegistryError,
    ToolSourceError,
    ToolSourceNotFoundError,
)

__all__ = [
    "ConfigurationError",
    "DiscoveryError",
    "InvalidConfigError",
    "InvalidParamsError",
    "ReposcopeError",
    "ToolAlreadyRegisteredError",
    "ToolLoadError",
    "ToolNotFoundError",
    "ToolRegistryError",
    "ToolSourceError",
    "ToolSourceNotFoundError",
]
