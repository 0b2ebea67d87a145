import json
import tempfile
import unittest
from contextlib import asynccontextmanager
from pathlib import Path
from unittest import mock

from mcp_server_linode import config
from stub_linode_api import StubLinodeAPI


class DiscoveryTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)

    def write(self, name: str, payload: object) -> Path:
        path = self.root / name
        path.write_text(payload if isinstance(payload, str) else json.dumps(payload))
        return path

    def test_environment_token_creates_default_account(self) -> None:
        discovered = config.discover({"LINODE_TOKEN": "env-token"}, paths=[])

        account = discovered.accounts["default"]
        self.assertEqual(account.token, "env-token")
        self.assertEqual(account.source, "LINODE_TOKEN")

    def test_prefixed_token_wins(self) -> None:
        discovered = config.discover({"LINODE_TOKEN": "plain", "MCP_LINODE_TOKEN": "prefixed"}, paths=[])

        self.assertEqual(discovered.accounts["default"].token, "prefixed")

    def test_accounts_file(self) -> None:
        path = self.write(
            "accounts.json",
            {
                "defaultAccount": "dev",
                "accounts": {
                    "prod": {"token": "tok-prod", "label": "Production", "apiUrl": "https://api.example.test/v4"},
                    "dev": {"token": "tok-dev"},
                    "broken": {"label": "No token"},
                },
            },
        )

        with self.assertLogs("mcp-server-linode.config", level="WARNING") as logs:
            discovered = config.discover({}, paths=[path])

        self.assertEqual(sorted(discovered.accounts), ["dev", "prod"])
        self.assertEqual(discovered.accounts["prod"].api_url, "https://api.example.test/v4")
        self.assertEqual(discovered.accounts["dev"].label, "dev")
        self.assertEqual(discovered.default_account, "dev")
        self.assertTrue(any("broken" in line for line in logs.output))

    def test_first_definition_wins(self) -> None:
        first = self.write("first.json", {"accounts": {"prod": {"token": "one"}}})
        second = self.write("second.json", {"defaultAccount": "prod", "accounts": {"prod": {"token": "two"}}})

        discovered = config.discover({}, paths=[first, second])

        self.assertEqual(discovered.accounts["prod"].token, "one")
        self.assertEqual(discovered.default_account, "prod")

    def test_malformed_file_is_skipped(self) -> None:
        bad = self.write("bad.json", "{not json")
        good = self.write("good.json", {"accounts": {"prod": {"token": "tok"}}})

        with self.assertLogs("mcp-server-linode.config", level="WARNING") as logs:
            discovered = config.discover({}, paths=[bad, self.root / "missing.json", good])

        self.assertEqual(list(discovered.accounts), ["prod"])
        self.assertTrue(any("Failed to read" in line for line in logs.output))

    def test_explicit_config_path_is_searched_first(self) -> None:
        paths = config.config_paths({"MCP_LINODE_CONFIG": str(self.root / "explicit.json")})

        self.assertEqual(paths[0], self.root / "explicit.json")
        self.assertEqual(paths[1:], config.CONFIG_PATHS)

    def test_environment_default_overrides_file_default(self) -> None:
        path = self.write("accounts.json", {"defaultAccount": "dev", "accounts": {"dev": {"token": "t"}}})

        discovered = config.discover({"MCP_LINODE_DEFAULT_ACCOUNT": "prod"}, paths=[path])

        self.assertEqual(discovered.default_account, "prod")


class LoadAccountsTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.api = StubLinodeAPI()
        self.manager = self.api.manager()

    async def asyncTearDown(self) -> None:
        await self.manager.aclose()

    def _config(self, default=None, **tokens: str) -> config.ServerConfig:
        server_config = config.ServerConfig(default_account=default)
        for name, token in tokens.items():
            server_config.add(config.AccountConfig(name=name, token=token, label=name.title()))
        return server_config

    async def test_named_default_becomes_current(self) -> None:
        current = config.load_accounts(self.manager, self._config("prod", dev="t-dev", prod="t-prod"))

        self.assertEqual(current, "prod")
        self.assertEqual(self.manager.current_name, "prod")
        self.assertEqual(len(self.manager), 2)

    async def test_first_by_name_without_default(self) -> None:
        current = config.load_accounts(self.manager, self._config(zeta="t-z", alpha="t-a"))

        self.assertEqual(current, "alpha")

    async def test_unknown_default_falls_back(self) -> None:
        with self.assertLogs("mcp-server-linode.config", level="WARNING"):
            current = config.load_accounts(self.manager, self._config("ghost", prod="t-prod"))

        self.assertEqual(current, "prod")

    async def test_invalid_credentials_are_skipped(self) -> None:
        with self.assertLogs("mcp-server-linode.config", level="WARNING") as logs:
            current = config.load_accounts(self.manager, self._config(bad="has space", good="t-good"))

        self.assertEqual(current, "good")
        self.assertNotIn("bad", self.manager)
        self.assertFalse(any("has space" in line for line in logs.output))

    async def test_nothing_configured(self) -> None:
        with self.assertLogs("mcp-server-linode.config", level="WARNING"):
            current = config.load_accounts(self.manager, config.ServerConfig())

        self.assertIsNone(current)
        self.assertIsNone(self.manager.current_name)


class PositiveSecondsTests(unittest.TestCase):
    def test_valid_value(self) -> None:
        self.assertEqual(config.positive_seconds({"MCP_LINODE_CACHE_TTL": "12.5"}, "MCP_LINODE_CACHE_TTL", 300.0), 12.5)

    def test_missing_or_blank_uses_default(self) -> None:
        for environ in ({}, {"MCP_LINODE_TIMEOUT": ""}, {"MCP_LINODE_TIMEOUT": "   "}):
            with self.subTest(environ=environ):
                self.assertEqual(config.positive_seconds(environ, "MCP_LINODE_TIMEOUT", 30.0), 30.0)

    def test_malformed_value_logs_and_uses_default(self) -> None:
        with self.assertLogs("mcp-server-linode.config", level="WARNING") as logs:
            value = config.positive_seconds({"MCP_LINODE_TIMEOUT": "thirty"}, "MCP_LINODE_TIMEOUT", 30.0)

        self.assertEqual(value, 30.0)
        self.assertIn("MCP_LINODE_TIMEOUT", logs.output[0])

    def test_non_positive_or_non_finite_uses_default(self) -> None:
        for raw in ("0", "-5", "nan", "inf"):
            with self.subTest(raw=raw):
                with self.assertLogs("mcp-server-linode.config", level="WARNING"):
                    value = config.positive_seconds({"MCP_LINODE_CACHE_TTL": raw}, "MCP_LINODE_CACHE_TTL", 300.0)
                self.assertEqual(value, 300.0)


class DefaultSourcesTests(unittest.TestCase):
    def test_discover_reads_process_environment_and_default_paths(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "accounts.json"
            path.write_text(json.dumps({"accounts": {"lab": {"token": "tok-lab", "label": "Lab"}}}))
            with mock.patch.dict("os.environ", {"LINODE_TOKEN": "env-token"}, clear=True):
                with mock.patch.object(config, "CONFIG_PATHS", [path]):
                    discovered = config.discover()

        self.assertEqual(sorted(discovered.accounts), ["default", "lab"])
        self.assertEqual(discovered.accounts["lab"].label, "Lab")


class MainTests(unittest.IsolatedAsyncioTestCase):
    async def test_main_loads_accounts_and_closes_clients(self) -> None:
        from mcp_server_linode import server

        api = StubLinodeAPI()
        manager = api.manager()
        discovered = config.ServerConfig()
        discovered.add(config.AccountConfig(name="prod", token="tok", label="Production"))

        @asynccontextmanager
        async def fake_stdio():
            yield object(), object()

        with mock.patch.object(server, "accounts", manager), mock.patch.object(
            config, "discover", return_value=discovered
        ), mock.patch.object(server, "stdio_server", fake_stdio), mock.patch.object(
            server.app, "run", new=mock.AsyncMock()
        ) as run:
            await server.main()

        run.assert_awaited_once()
        self.assertEqual(manager.current_name, "prod")
        self.assertTrue(manager.get("prod").client.closed)


if __name__ == "__main__":
    unittest.main()
