"""Reposcope package exports.

Multi-repository tool gateway: discovers local repositories, loads their
tool modules and exposes them under one namespaced MCP endpoint.
"""

__version__ = "0.3.0"
__author__ = "blisspixel"

__all__ = ["__version__"]
