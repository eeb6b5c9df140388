"""
MCP server for the repository gateway.

Exposes the gateway's tool listing and dispatch over JSON-RPC on stdio.
"""

import asyncio
import logging
import sys
from typing import Any, Dict, Optional

from reposcope import __version__
from reposcope.config import GatewayConfig, load_config
from reposcope.core.errors import InvalidParamsError
from reposcope.mcp.gateway import RepoGateway
from reposcope.mcp.transport.stdio import StdioServer, StdioTransport

logger = logging.getLogger(__name__)

SERVER_NAME = "reposcope"
PROTOCOL_VERSION = "2024-11-05"


class ReposcopeMCPServer:
    """JSON-RPC method handlers backed by a RepoGateway."""

    def __init__(self, gateway: RepoGateway):
        self.gateway = gateway

    async def initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "protocolVersion": params.get("protocolVersion", PROTOCOL_VERSION),
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    async def list_tools(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"tools": self.gateway.list_tools()}

    async def call_tool(self, params: Dict[str, Any]) -> Dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidParamsError("Missing required parameter: name")
        arguments = params.get("arguments") or {}
        if not isinstance(arguments, dict):
            raise InvalidParamsError("arguments must be an object")

        result = await self.gateway.call_tool(name, arguments)
        return result.to_dict()

    async def ping(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {}

    def register(self, server: StdioServer) -> StdioServer:
        server.register_method("initialize", self.initialize)
        server.register_method("tools/list", self.list_tools)
        server.register_method("tools/call", self.call_tool)
        server.register_method("ping", self.ping)
        return server


async def run_stdio_server(
    config: Optional[GatewayConfig] = None,
    transport: Optional[StdioTransport] = None,
) -> None:
    """Initialize a gateway and serve it over stdio until stdin closes."""
    gateway = RepoGateway(config or load_config())
    await gateway.initialize()

    server = ReposcopeMCPServer(gateway).register(StdioServer(transport))

    print("Reposcope MCP server started", file=sys.stderr)
    logger.info("Serving %d repositories", len(gateway.repos.list()))
    await server.run()


def main():
    """Entry point for MCP server."""
    try:
        asyncio.run(run_stdio_server())
    except KeyboardInterrupt:
        print("\nShutting down MCP server...", file=sys.stderr)


if __name__ == "__main__":
    main()
