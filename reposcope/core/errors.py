"""Core exception hierarchy for reposcope.

All reposcope exceptions inherit from ReposcopeError, enabling both
specific and broad exception handling.

Exception Hierarchy:
    ReposcopeError (base)
    ├── ConfigurationError - Config issues
    │   └── InvalidConfigError
    ├── DiscoveryError - Repository discovery issues
    ├── ToolSourceError - Tool source resolution issues
    │   ├── ToolSourceNotFoundError
    │   └── ToolLoadError
    ├── ToolRegistryError - Tool registry issues
    │   ├── ToolAlreadyRegisteredError
    │   └── ToolNotFoundError
    └── InvalidParamsError - Malformed protocol request parameters
"""

from typing import Any, Dict, Optional


class ReposcopeError(Exception):
    """Base exception for all reposcope errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code (e.g., "TOOL_NOT_FOUND")
        details: Optional dict with additional context
    """

    error_code: str = "REPOSCOPE_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dict for protocol responses."""
        return {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


# Configuration Errors
class ConfigurationError(ReposcopeError):
    """Base class for configuration errors."""

    error_code = "CONFIG_ERROR"


class InvalidConfigError(ConfigurationError):
    """A configuration source exists but could not be parsed or validated."""

    error_code = "CONFIG_INVALID"

    def __init__(self, source: str, reason: str):
        super().__init__(
            f"Invalid configuration in {source}: {reason}",
            details={"source": source, "reason": reason},
        )


# Discovery Errors
class DiscoveryError(ReposcopeError):
    """Repository discovery failed for a root directory."""

    error_code = "DISCOVERY_ERROR"


# Tool Source Errors
class ToolSourceError(ReposcopeError):
    """Base class for tool source resolution errors."""

    error_code = "TOOL_SOURCE_ERROR"


class ToolSourceNotFoundError(ToolSourceError):
    """A tool source location does not exist.

    Not-found is non-fatal: the resolution pipeline treats it as zero tools
    from that source.
    """

    error_code = "TOOL_SOURCE_NOT_FOUND"

    def __init__(self, location: str):
        super().__init__(
            f"Tool source not found: {location}",
            details={"location": location},
        )


class ToolLoadError(ToolSourceError):
    """A tool source exists but failed to load (syntax error, import error, bad shape)."""

    error_code = "TOOL_LOAD_FAILED"

    def __init__(self, location: str, reason: str):
        super().__init__(
            f"Failed to load tools from {location}: {reason}",
            details={"location": location, "reason": reason},
        )


# Registry Errors
class ToolRegistryError(ReposcopeError):
    """Base class for tool registry errors."""

    error_code = "TOOL_REGISTRY_ERROR"


class ToolAlreadyRegisteredError(ToolRegistryError):
    """A tool key is already taken. Registered tools are never overwritten."""

    error_code = "TOOL_ALREADY_REGISTERED"

    def __init__(self, key: str):
        super().__init__(
            f"Tool with name '{key}' is already registered",
            details={"key": key},
        )


class ToolNotFoundError(ToolRegistryError):
    """Requested tool does not exist, even after lazy resolution."""

    error_code = "TOOL_NOT_FOUND"

    def __init__(self, name: str):
        super().__init__(
            f"Tool '{name}' not found",
            details={"name": name},
        )


# Protocol Errors
class InvalidParamsError(ReposcopeError):
    """A protocol request carried missing or malformed parameters."""

    error_code = "INVALID_PARAMS"
