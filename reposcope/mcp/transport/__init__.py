"""MCP transports."""

from reposcope.mcp.transport.stdio import Message, StdioServer, StdioTransport, TransportStats

__all__ = ["Message", "StdioServer", "StdioTransport", "TransportStats"]
