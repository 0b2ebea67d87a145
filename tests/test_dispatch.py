import asyncio
import unittest

from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR

from mcp_server_linode.accounts import AccountManager
from mcp_server_linode.dispatch import ToolDispatcher
from mcp_server_linode.errors import InternalInvariantViolation, UpstreamError
from mcp_server_linode.registry import ToolRegistry, ToolScope, ToolSpec
from mcp_server_linode.rendering import ToolResult
from stub_linode_api import StubLinodeAPI


class ToolDispatcherTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.api = StubLinodeAPI()
        self.accounts = self.api.manager()
        self.registry = ToolRegistry()
        self.dispatcher = ToolDispatcher(self.registry, self.accounts)
        self.seen = []

        async def x_list(arguments, account) -> ToolResult:
            self.seen.append((dict(arguments), account))
            return ToolResult(f"listed for {account.name}")

        self.registry.add(ToolSpec("x.list", "List x.", x_list))

    async def asyncTearDown(self) -> None:
        await self.accounts.aclose()

    async def test_unknown_tool_is_a_tool_error(self) -> None:
        result = await self.dispatcher.call("nope.list", {})

        self.assertTrue(result.isError)
        self.assertIn("nope.list", result.content[0].text)
        self.assertEqual(result.structuredContent["status"], "unknown_tool")

    async def test_no_current_account_is_a_tool_error(self) -> None:
        result = await self.dispatcher.call("x.list", {})

        self.assertTrue(result.isError)
        self.assertIn("account", result.content[0].text)
        self.assertEqual(self.seen, [])

    async def test_handler_receives_current_account(self) -> None:
        self.accounts.register("prod", "Production", "token")
        self.accounts.set_current("prod")

        result = await self.dispatcher.call("x.list", None)

        self.assertFalse(result.isError)
        self.assertEqual(result.content[0].text, "listed for prod")
        self.assertEqual(self.seen[0][0], {})
        self.assertEqual(self.seen[0][1].name, "prod")

    async def test_manager_scope_receives_manager(self) -> None:
        received = []

        async def whoami(arguments, manager) -> ToolResult:
            received.append(manager)
            return ToolResult("ok")

        self.registry.add(ToolSpec("x.whoami", "Who am I.", whoami, scope=ToolScope.MANAGER))

        result = await self.dispatcher.call("x.whoami", {})

        self.assertFalse(result.isError)
        self.assertIsInstance(received[0], AccountManager)

    async def test_upstream_errors_become_tool_errors(self) -> None:
        async def failing(arguments, account) -> ToolResult:
            raise UpstreamError(403, ["Unauthorized"])

        self.registry.add(ToolSpec("x.fail", "Fail.", failing))
        self.accounts.register("prod", "Production", "token")
        self.accounts.set_current("prod")

        result = await self.dispatcher.call("x.fail", {})

        self.assertTrue(result.isError)
        self.assertEqual(result.content[0].text, "[403] Unauthorized")
        self.assertEqual(result.structuredContent["httpStatus"], 403)

    async def test_unexpected_exception_is_a_protocol_error(self) -> None:
        async def broken(arguments, manager) -> ToolResult:
            raise KeyError("missing")

        self.registry.add(ToolSpec("x.broken", "Broken.", broken, scope=ToolScope.MANAGER))

        with self.assertLogs("mcp-server-linode.dispatch", level="ERROR"):
            with self.assertRaises(McpError) as ctx:
                await self.dispatcher.call("x.broken", {})

        self.assertEqual(ctx.exception.error.code, INTERNAL_ERROR)
        self.assertIn("x.broken", ctx.exception.error.message)

    async def test_invariant_violation_is_a_protocol_error(self) -> None:
        async def inconsistent(arguments, manager) -> ToolResult:
            raise InternalInvariantViolation("cache slot half written")

        self.registry.add(ToolSpec("x.bad", "Bad.", inconsistent, scope=ToolScope.MANAGER))

        with self.assertLogs("mcp-server-linode.dispatch", level="ERROR"):
            with self.assertRaises(McpError) as ctx:
                await self.dispatcher.call("x.bad", {})

        self.assertIn("cache slot half written", ctx.exception.error.message)

    async def test_cancellation_propagates(self) -> None:
        started = asyncio.Event()

        async def stalls(arguments, manager) -> ToolResult:
            started.set()
            await asyncio.Event().wait()
            return ToolResult("never")

        self.registry.add(ToolSpec("x.stall", "Stall.", stalls, scope=ToolScope.MANAGER))

        task = asyncio.create_task(self.dispatcher.call("x.stall", {}))
        await started.wait()
        task.cancel()

        with self.assertRaises(asyncio.CancelledError):
            await task


if __name__ == "__main__":
    unittest.main()
