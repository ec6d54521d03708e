"""MCP server: Redis command gateway.

Exposes the command catalog (strings, hashes, sets, sorted sets and JSON
documents) as MCP tools over stdio. Every call is routed through the
table-driven dispatcher; this module only adapts it to the MCP wire types and
owns process startup and shutdown.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
import sys
from typing import Any, Optional, Sequence

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from kvgate.core.config import AppSettings, ServerConfig
from kvgate.core.exceptions import BackendUnavailableError, ToolCallError
from kvgate.core.protocols import IKeyValueStore
from kvgate.gateway.dispatcher import Dispatcher
from kvgate.persistence import create_store

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class RedisGateway:
    """Boundary between the MCP host and the dispatcher.

    The handlers registered with the MCP server call the synchronous
    dispatcher directly on the event loop, so one invocation always completes
    before the next one starts.
    """

    def __init__(self, dispatcher: Dispatcher, config: Optional[ServerConfig] = None) -> None:
        self._dispatcher = dispatcher
        self._config = config or ServerConfig()
        self._server = Server(self._config.name, version=self._config.version)
        self._register_handlers()

    @property
    def server(self) -> Server:
        return self._server

    def _register_handlers(self) -> None:
        @self._server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            return self.list_tools()

        # Arguments are validated by the dispatcher, which reports every bad field.
        @self._server.call_tool(validate_input=False)
        async def handle_call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            return self.call_tool(name, arguments)

    def list_tools(self) -> list[Tool]:
        """One Tool per catalog row, with the argument model's JSON schema."""
        return [
            Tool(name=op.name, description=op.description, inputSchema=op.input_schema())
            for op in self._dispatcher.operations
        ]

    def call_tool(self, name: str, arguments: Optional[dict[str, Any]]) -> list[TextContent]:
        """Dispatch one call.

        Raises:
            ToolCallError: the call failed; the MCP server reports the message
                to the host as an error result.
        """
        result = self._dispatcher.handle(name, arguments)
        if not result.ok:
            raise ToolCallError(result.text)
        return [TextContent(type="text", text=result.text)]

    async def run(self) -> None:
        """Serve MCP over stdio until the host closes the channel."""
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Redis MCP server running on stdio")
            await self._server.run(
                read_stream, write_stream, self._server.create_initialization_options(),
            )


def configure_logging(level: str) -> None:
    # stdout carries the MCP transport; logs go to stderr only.
    logging.basicConfig(level=level.upper(), stream=sys.stderr, format=LOG_FORMAT)


def _install_signal_handlers(store: IKeyValueStore) -> None:
    def _shutdown(signum: int, _frame: Any) -> None:
        logger.info("Received %s, closing Redis connection", signal.Signals(signum).name)
        store.close()
        # stdin is read on a worker thread that cannot be cancelled; exit directly.
        logging.shutdown()
        os._exit(0)

    for sig_name in ("SIGTERM", "SIGINT"):
        sig_value = getattr(signal, sig_name, None)
        if sig_value is not None:
            signal.signal(sig_value, _shutdown)


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="kvgate", description="Expose Redis commands as MCP tools over stdio.",
    )
    parser.add_argument(
        "redis_url", nargs="?", default=None,
        help="Redis connection URL (default: KVGATE_REDIS_URL or redis://localhost:6379)",
    )
    parser.add_argument("--log-level", default=None, help="Override KVGATE_LOG_LEVEL")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Process entry point. Returns the exit code."""
    args = _parse_args(argv)
    settings = AppSettings()
    configure_logging(args.log_level or settings.log_level)

    store = create_store(settings, url=args.redis_url)
    try:
        store.connect()
    except BackendUnavailableError as exc:
        logger.error("Server initialization failed: %s", exc)
        store.close()
        return 1

    gateway = RedisGateway(Dispatcher(store), settings.server)
    _install_signal_handlers(store)
    try:
        asyncio.run(gateway.run())
    finally:
        store.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
