"""stdio entry point wiring the MCP server to the tool dispatcher."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import List

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from . import __version__, config
from .accounts import AccountManager
from .dispatch import ToolDispatcher
from .handlers import register_all
from .registry import ToolRegistry

logger = logging.getLogger("mcp-server-linode")

SERVER_NAME = "mcp-server-linode"


def build_server(dispatcher: ToolDispatcher) -> Server:
    """Create an MCP server whose tool surface is the dispatcher's registry."""

    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return dispatcher.registry.tools()

    # Installed directly: the call_tool decorator would turn McpError into an isError result.
    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        result = await dispatcher.call(request.params.name, request.params.arguments)
        return types.ServerResult(result)

    server.request_handlers[types.CallToolRequest] = call_tool
    return server


accounts = AccountManager(cache_ttl=config.CACHE_TTL, timeout=config.TIMEOUT, default_api_url=config.API_URL)
registry = register_all(ToolRegistry())
dispatcher = ToolDispatcher(registry, accounts)
app = build_server(dispatcher)


async def main() -> None:
    logging.basicConfig(level=config.LOG_LEVEL)
    config.load_accounts(accounts, config.discover())
    logger.info("Serving %d tools", len(registry))
    try:
        async with stdio_server() as (read_stream, write_stream):
            await app.run(read_stream, write_stream, app.create_initialization_options())
    finally:
        await accounts.aclose()


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    run()
