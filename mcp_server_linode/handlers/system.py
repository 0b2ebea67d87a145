"""Server information tool."""

from __future__ import annotations

from typing import Any, Mapping

from .. import __version__
from ..accounts import AccountManager
from ..arguments import as_mapping
from ..errors import AccountError
from ..registry import ToolRegistry, ToolScope, ToolSpec
from ..rendering import ToolResult

API_VERSION = "v4"


def make_version_handler(registry: ToolRegistry):
    async def version(arguments: Mapping[str, Any], manager: AccountManager) -> ToolResult:
        as_mapping(arguments)
        name = None
        current = "unknown"
        try:
            account = manager.get_current()
        except AccountError:
            pass
        else:
            name = account.name
            current = f"{account.name} ({account.label})"
        lines = [
            "mcp-server-linode Version Information:",
            "",
            f"Version: {__version__}",
            f"API Version: {API_VERSION} (Linode API)",
            f"Tools: {len(registry)}",
            f"Accounts: {len(manager)}",
            f"Current Account: {current}",
        ]
        structured = {
            "version": __version__,
            "apiVersion": API_VERSION,
            "tools": len(registry),
            "currentAccount": name,
        }
        return ToolResult("\n".join(lines), structured=structured)

    return version


def register_tools(registry: ToolRegistry) -> None:
    registry.add(
        ToolSpec(
            "linode.version",
            "Show the server version, tool count and current account.",
            make_version_handler(registry),
            scope=ToolScope.MANAGER,
        )
    )
