"""Tests for core error hierarchy."""

import json

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


class TestErrorHierarchy:
    """Test exception inheritance."""

    def test_all_errors_inherit_from_reposcope_error(self):
        """All custom errors should inherit from ReposcopeError."""
        errors = [
            ConfigurationError("test"),
            InvalidConfigError("repos.json", "bad json"),
            DiscoveryError("test"),
            ToolSourceError("test"),
            ToolSourceNotFoundError("/tools/api.py"),
            ToolLoadError("/tools/api.py", "SyntaxError"),
            ToolRegistryError("test"),
            ToolAlreadyRegisteredError("api:list_files"),
            ToolNotFoundError("api:nope"),
            InvalidParamsError("name is required"),
        ]

        for error in errors:
            assert isinstance(error, ReposcopeError)

    def test_tool_source_errors_share_base(self):
        """Not-found and load failures are both tool source errors."""
        for error in (ToolSourceNotFoundError("x"), ToolLoadError("x", "y")):
            assert isinstance(error, ToolSourceError)

    def test_registry_errors_share_base(self):
        for error in (ToolAlreadyRegisteredError("k"), ToolNotFoundError("k")):
            assert isinstance(error, ToolRegistryError)


class TestErrorCodes:
    """Test error codes are set correctly."""

    def test_base_error_code(self):
        """ReposcopeError should have default error code."""
        assert ReposcopeError("test").error_code == "REPOSCOPE_ERROR"

    def test_explicit_error_code_overrides_class_default(self):
        assert ReposcopeError("test", error_code="CUSTOM").error_code == "CUSTOM"

    def test_specific_codes(self):
        assert InvalidConfigError("a", "b").error_code == "CONFIG_INVALID"
        assert ToolSourceNotFoundError("a").error_code == "TOOL_SOURCE_NOT_FOUND"
        assert ToolLoadError("a", "b").error_code == "TOOL_LOAD_FAILED"
        assert ToolAlreadyRegisteredError("a").error_code == "TOOL_ALREADY_REGISTERED"
        assert ToolNotFoundError("a").error_code == "TOOL_NOT_FOUND"


class TestErrorMessages:
    """Test error messages and details."""

    def test_already_registered_message(self):
        error = ToolAlreadyRegisteredError("api:list_files")
        assert error.message == "Tool with name 'api:list_files' is already registered"
        assert error.details["key"] == "api:list_files"

    def test_not_found_message(self):
        error = ToolNotFoundError("ghost:anything")
        assert error.message == "Tool 'ghost:anything' not found"

    def test_load_error_captures_location_and_reason(self):
        error = ToolLoadError("/tmp/tools.py", "SyntaxError: invalid syntax")
        assert error.details == {"location": "/tmp/tools.py", "reason": "SyntaxError: invalid syntax"}
        assert "/tmp/tools.py" in error.message

    def test_str_is_message(self):
        error = InvalidConfigError("repos.json", "expected a mapping")
        assert str(error) == error.message


class TestErrorToDict:
    """Test error serialization."""

    def test_to_dict_includes_all_fields(self):
        result = ToolLoadError("x.py", "boom").to_dict()

        assert result["error"] is True
        assert result["error_code"] == "TOOL_LOAD_FAILED"
        assert "message" in result
        assert result["details"]["reason"] == "boom"

    def test_to_dict_is_json_serializable(self):
        json_str = json.dumps(InvalidConfigError("repos.yaml", "bad").to_dict())
        assert "CONFIG_INVALID" in json_str
