"""MCP gateway and server."""

from reposcope.mcp.gateway import RepoGateway
from reposcope.mcp.server import ReposcopeMCPServer, run_stdio_server

__all__ = ["RepoGateway", "ReposcopeMCPServer", "run_stdio_server"]
