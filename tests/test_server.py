import unittest

from mcp.shared.exceptions import McpError
from mcp.shared.memory import create_connected_server_and_client_session
from mcp.types import INTERNAL_ERROR

from mcp_server_linode import __version__
from mcp_server_linode.dispatch import ToolDispatcher
from mcp_server_linode.handlers import register_all
from mcp_server_linode.registry import ToolRegistry, ToolScope, ToolSpec
from mcp_server_linode.server import build_server
from stub_linode_api import StubLinodeAPI


async def _broken(arguments, manager):
    raise RuntimeError("wires crossed")


class ServerSessionTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.api = StubLinodeAPI()
        self.accounts = self.api.manager()
        self.accounts.register("prod", "Production", "token-prod")
        self.accounts.set_current("prod")
        self.registry = register_all(ToolRegistry())
        self.registry.add(ToolSpec("test.broken", "Always fails.", _broken, scope=ToolScope.MANAGER))
        self.server = build_server(ToolDispatcher(self.registry, self.accounts))

    async def asyncTearDown(self) -> None:
        await self.accounts.aclose()

    async def test_lists_registered_tools(self) -> None:
        async with create_connected_server_and_client_session(self.server) as session:
            result = await session.list_tools()

        names = [tool.name for tool in result.tools]
        self.assertEqual(names, sorted(names))
        self.assertEqual(len(names), len(self.registry))
        self.assertIn("linode.instances.list", names)

    async def test_call_tool_round_trip(self) -> None:
        async with create_connected_server_and_client_session(self.server) as session:
            result = await session.call_tool("linode.instances.list", {})

        self.assertFalse(result.isError)
        self.assertTrue(result.content[0].text.startswith("Found 1 instances:"))

    async def test_tool_errors_are_results(self) -> None:
        async with create_connected_server_and_client_session(self.server) as session:
            unknown = await session.call_tool("linode.nothing.here", {})
            invalid = await session.call_tool("linode.instances.get", {"instance_id": "abc"})

        self.assertTrue(unknown.isError)
        self.assertIn("linode.nothing.here", unknown.content[0].text)
        self.assertTrue(invalid.isError)
        self.assertIn("instance_id", invalid.content[0].text)

    async def test_internal_failure_is_a_protocol_error(self) -> None:
        async with create_connected_server_and_client_session(self.server) as session:
            with self.assertLogs("mcp-server-linode.dispatch", level="ERROR"):
                with self.assertRaises(McpError) as ctx:
                    await session.call_tool("test.broken", {})

        self.assertEqual(ctx.exception.error.code, INTERNAL_ERROR)
        self.assertIn("test.broken", ctx.exception.error.message)

    async def test_server_reports_version(self) -> None:
        async with create_connected_server_and_client_session(self.server) as session:
            result = await session.call_tool("linode.version", {})

        self.assertIn(f"Version: {__version__}", result.content[0].text)
        self.assertEqual(result.structuredContent["currentAccount"], "prod")


if __name__ == "__main__":
    unittest.main()
