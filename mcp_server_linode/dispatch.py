"""Route tool invocations to handlers and map failures onto results."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, CallToolResult, ErrorData

from .accounts import AccountManager
from .errors import ServerError, UnknownToolError
from .registry import ToolRegistry, ToolScope
from .rendering import ToolResult

logger = logging.getLogger("mcp-server-linode.dispatch")


def _internal_error(name: str, message: str) -> McpError:
    return McpError(ErrorData(code=INTERNAL_ERROR, message=f"Internal error in {name}: {message}"))


class ToolDispatcher:
    """Lookup, account resolution, handler call and error mapping.

    Tool-level :class:`ServerError` subclasses come back as ``isError``
    results. Anything else escaping a handler is logged and raised as
    :class:`McpError` so the transport reports it. Cancellation is never
    intercepted.
    """

    def __init__(self, registry: ToolRegistry, accounts: AccountManager) -> None:
        self.registry = registry
        self.accounts = accounts

    async def dispatch(self, name: str, arguments: Optional[Mapping[str, Any]]) -> ToolResult:
        logger.debug("Dispatching %s", name)
        try:
            spec = self.registry.get(name)
            if spec is None:
                raise UnknownToolError(name)
            if spec.scope is ToolScope.MANAGER:
                target: Any = self.accounts
            else:
                target = self.accounts.get_current()
            return await spec.handler(arguments if arguments is not None else {}, target)
        except ServerError as exc:
            if not exc.tool_level:
                logger.error("Tool %s hit an internal invariant violation: %s", name, exc, exc_info=True)
                raise _internal_error(name, str(exc)) from exc
            logger.info("Tool %s failed: %s", name, exc)
            return ToolResult.from_error(exc)
        except McpError:
            raise
        except Exception as exc:
            logger.error("Unexpected failure in tool %s", name, exc_info=True)
            raise _internal_error(name, f"{type(exc).__name__}: {exc}") from exc

    async def call(self, name: str, arguments: Optional[Mapping[str, Any]]) -> CallToolResult:
        result = await self.dispatch(name, arguments)
        return result.to_call_tool_result()
