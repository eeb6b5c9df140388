"""
Stdio Transport for MCP.

Implements newline-delimited JSON-RPC over stdin/stdout. Stdout carries
protocol messages only; logs go to stderr.
"""

import asyncio
import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional, Union

from reposcope.core.errors import InvalidParamsError

logger = logging.getLogger(__name__)

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

_UNSET = object()


@dataclass
class Message:
    """A JSON-RPC message."""

    jsonrpc: str = "2.0"
    id: Optional[Union[str, int]] = None
    method: Optional[str] = None
    params: Optional[dict] = None
    result: Any = _UNSET
    error: Optional[dict] = None

    def is_request(self) -> bool:
        """Check if this is a request message."""
        return self.method is not None and self.id is not None

    def is_notification(self) -> bool:
        """Check if this is a notification (no id)."""
        return self.method is not None and self.id is None

    def is_response(self) -> bool:
        """Check if this is a response message."""
        return self.result is not _UNSET or self.error is not None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        d = {"jsonrpc": self.jsonrpc}
        if self.id is not None or self.is_response():
            d["id"] = self.id
        if self.method is not None:
            d["method"] = self.method
        if self.params is not None:
            d["params"] = self.params
        if self.result is not _UNSET:
            d["result"] = self.result
        if self.error is not None:
            d["error"] = self.error
        return d

    @classmethod
    def from_dict(cls, data: dict) -> "Message":
        """Create from dictionary."""
        return cls(
            jsonrpc=data.get("jsonrpc", "2.0"),
            id=data.get("id"),
            method=data.get("method"),
            params=data.get("params"),
            result=data.get("result", _UNSET),
            error=data.get("error"),
        )


@dataclass
class TransportStats:
    """Statistics for transport monitoring."""

    messages_sent: int = 0
    messages_received: int = 0
    errors: int = 0
    started_at: datetime = field(default_factory=datetime.now)

    def record_sent(self) -> None:
        self.messages_sent += 1

    def record_received(self) -> None:
        self.messages_received += 1

    def record_error(self) -> None:
        self.errors += 1


MessageHandler = Callable[[Message], Awaitable[Optional[Message]]]


class StdioTransport:
    """
    Stdio-based MCP transport.

    Reads JSON-RPC messages from stdin and writes responses to stdout.

    Usage:
        transport = StdioTransport()
        transport.on_message(handler)
        await transport.start()
        await transport.wait_closed()
    """

    def __init__(
        self,
        input_stream: Optional[asyncio.StreamReader] = None,
        output_stream: Optional[Any] = None,
    ):
        """
        Initialize stdio transport.

        Args:
            input_stream: Custom input stream (default: stdin)
            output_stream: Custom output stream with write()/drain() (default: stdout)
        """
        self._input = input_stream
        self._output = output_stream
        self._handler: Optional[MessageHandler] = None
        self._running = False
        self._stats = TransportStats()
        self._read_task: Optional[asyncio.Task] = None

    def on_message(self, handler: MessageHandler) -> None:
        """Set the async message handler."""
        self._handler = handler

    async def start(self) -> None:
        """Start reading from stdin in a background task."""
        if self._running:
            return

        self._running = True
        loop = asyncio.get_running_loop()

        if self._input is None:
            self._input = asyncio.StreamReader()
            protocol = asyncio.StreamReaderProtocol(self._input)
            await loop.connect_read_pipe(lambda: protocol, sys.stdin)

        if self._output is None:
            transport, protocol = await loop.connect_write_pipe(asyncio.streams.FlowControlMixin, sys.stdout)
            self._output = asyncio.StreamWriter(transport, protocol, None, loop)

        self._read_task = asyncio.create_task(self._read_loop())

    async def stop(self) -> None:
        """Stop the transport."""
        self._running = False
        if self._read_task:
            self._read_task.cancel()
            try:
                await self._read_task
            except asyncio.CancelledError:
                pass

    async def wait_closed(self) -> None:
        """Wait until EOF on input or stop()."""
        if self._read_task:
            try:
                await self._read_task
            except asyncio.CancelledError:
                pass

    async def _read_loop(self) -> None:
        """
        Main read loop for incoming messages.

        Each request is handled in its own task so a slow tool doesn't
        block other requests.
        """
        pending = set()
        try:
            while self._running:
                line = await self._input.readline()
                if not line:
                    break

                line_str = line.decode("utf-8").strip()
                if not line_str:
                    continue

                self._stats.record_received()

                try:
                    data = json.loads(line_str)
                    if not isinstance(data, dict):
                        raise json.JSONDecodeError("Expected object", line_str, 0)
                    message = Message.from_dict(data)
                except json.JSONDecodeError:
                    self._stats.record_error()
                    await self._send_error(None, PARSE_ERROR, "Parse error")
                    continue

                task = asyncio.create_task(self._dispatch(message))
                pending.add(task)
                task.add_done_callback(pending.discard)

            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
        finally:
            self._running = False

    async def _dispatch(self, message: Message) -> None:
        if not self._handler:
            return
        try:
            response = await self._handler(message)
            if response:
                await self.send(response)
        except Exception as e:
            self._stats.record_error()
            logger.error("Unhandled error processing %s: %s", message.method, e)
            if message.id is not None:
                await self._send_error(message.id, INTERNAL_ERROR, f"Internal error: {e}")

    async def send(self, message: Message) -> None:
        """Send a message to stdout."""
        if not self._output:
            return

        data = json.dumps(message.to_dict()) + "\n"
        self._output.write(data.encode("utf-8"))
        await self._output.drain()
        self._stats.record_sent()

    async def _send_error(self, id: Optional[Union[str, int]], code: int, message: str) -> None:
        """Send an error response."""
        await self.send(Message(id=id, error={"code": code, "message": message}))

    @property
    def stats(self) -> TransportStats:
        return self._stats

    @property
    def is_running(self) -> bool:
        return self._running


class StdioServer:
    """
    Method router on top of StdioTransport.

    Usage:
        server = StdioServer()
        server.register_method("tools/list", list_tools_handler)
        await server.run()
    """

    def __init__(self, transport: Optional[StdioTransport] = None):
        self._transport = transport or StdioTransport()
        self._methods: dict = {}
        self._transport.on_message(self.handle_message)

    def register_method(self, name: str, handler: Callable[[dict], Awaitable[Any]]) -> None:
        """
        Register a method handler.

        Args:
            name: Method name (e.g., "tools/list")
            handler: Async function taking the params dict
        """
        self._methods[name] = handler

    async def handle_message(self, message: Message) -> Optional[Message]:
        """Route a request to its handler. Notifications get no response."""
        if not message.is_request():
            return None

        handler = self._methods.get(message.method)
        if handler is None:
            return Message(
                id=message.id,
                error={"code": METHOD_NOT_FOUND, "message": f"Method not found: {message.method}"},
            )

        try:
            result = await handler(message.params or {})
            return Message(id=message.id, result=result)
        except InvalidParamsError as e:
            return Message(id=message.id, error={"code": INVALID_PARAMS, "message": e.message})
        except Exception as e:
            logger.error("Method %s failed: %s", message.method, e)
            return Message(id=message.id, error={"code": INTERNAL_ERROR, "message": str(e)})

    async def run(self) -> None:
        """Run the server until stdin closes."""
        await self._transport.start()
        await self._transport.wait_closed()

    async def stop(self) -> None:
        await self._transport.stop()

    @property
    def stats(self) -> TransportStats:
        return self._transport.stats
