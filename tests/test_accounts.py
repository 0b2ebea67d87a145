import threading
import time
import unittest
from typing import List, Optional

from mcp_server_linode.accounts import AccountManager, ReadWriteLock
from mcp_server_linode.client import LinodeClient
from mcp_server_linode.errors import (
    AccountError,
    DuplicateAccountError,
    InvalidCredentialError,
    NoCurrentAccountError,
    UnknownAccountError,
)
from stub_linode_api import StubLinodeAPI


class AccountManagerTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.api = StubLinodeAPI()
        self.manager = self.api.manager()

    async def asyncTearDown(self) -> None:
        await self.manager.aclose()

    def test_register_and_select(self) -> None:
        self.manager.register("prod", "Production", "token-a")
        self.manager.register("dev", "", "token-b")

        self.assertIsNone(self.manager.current_name)
        record = self.manager.set_current("dev")

        self.assertEqual(record.name, "dev")
        self.assertEqual(record.label, "dev")
        self.assertIs(self.manager.get_current(), record)
        self.assertEqual(len(self.manager), 2)
        self.assertIn("prod", self.manager)

    def test_each_account_gets_its_own_client_and_cache(self) -> None:
        a = self.manager.register("a", "A", "token-a")
        b = self.manager.register("b", "B", "token-b")

        self.assertIsNot(a.client, b.client)
        self.assertIsNot(a.reference_cache, b.reference_cache)

    def test_duplicate_name_is_rejected(self) -> None:
        self.manager.register("prod", "Production", "token-a")

        with self.assertRaises(DuplicateAccountError):
            self.manager.register("prod", "Other", "token-b")
        self.assertEqual(self.manager.get("prod").label, "Production")

    def test_invalid_token_is_a_credential_error(self) -> None:
        with self.assertRaises(InvalidCredentialError) as ctx:
            self.manager.register("prod", "Production", "not a token")

        self.assertNotIn("not a token", str(ctx.exception))
        self.assertNotIn("prod", [summary.name for summary in self.manager.list()])

    def test_invalid_names(self) -> None:
        for name in ("", "two words", "tab\tname", None):
            with self.subTest(name=name):
                with self.assertRaises(AccountError):
                    self.manager.register(name, "label", "token")  # type: ignore[arg-type]

    def test_get_current_without_selection(self) -> None:
        self.manager.register("prod", "Production", "token-a")

        with self.assertRaises(NoCurrentAccountError) as ctx:
            self.manager.get_current()
        self.assertIn("account", str(ctx.exception))

    def test_switch_to_unknown_keeps_previous(self) -> None:
        self.manager.register("prod", "Production", "token-a")
        self.manager.set_current("prod")

        with self.assertRaises(UnknownAccountError):
            self.manager.set_current("missing")
        self.assertEqual(self.manager.current_name, "prod")

    def test_list_is_sorted_and_flags_current(self) -> None:
        for name in ("zeta", "alpha", "mid"):
            self.manager.register(name, name.title(), f"token-{name}")
        self.manager.set_current("mid")

        summaries = self.manager.list()

        self.assertEqual([summary.name for summary in summaries], ["alpha", "mid", "zeta"])
        self.assertEqual([summary.is_current for summary in summaries], [False, True, False])

    def test_relabel(self) -> None:
        self.manager.register("prod", "Production", "token-a")

        self.manager.relabel("prod", "Primary")

        self.assertEqual(self.manager.get("prod").label, "Primary")
        with self.assertRaises(AccountError):
            self.manager.relabel("prod", "")
        with self.assertRaises(UnknownAccountError):
            self.manager.relabel("missing", "x")

    async def test_remove_current_clears_selection(self) -> None:
        record = self.manager.register("prod", "Production", "token-a")
        self.manager.set_current("prod")

        self.manager.remove("prod")

        self.assertIsNone(self.manager.current_name)
        self.assertNotIn("prod", self.manager)
        self.assertFalse(record.client.closed)
        with self.assertRaises(UnknownAccountError):
            self.manager.remove("prod")

        await self.manager.aclose()
        self.assertTrue(record.client.closed)

    async def test_aclose_closes_every_client(self) -> None:
        records = [self.manager.register(name, name, f"token-{name}") for name in ("a", "b")]

        await self.manager.aclose()

        self.assertTrue(all(record.client.closed for record in records))

    def test_repr_does_not_leak_token(self) -> None:
        record = self.manager.register("prod", "Production", "super-secret")

        self.assertNotIn("super-secret", repr(record))

    def test_uses_factory_with_api_url(self) -> None:
        seen: List[Optional[str]] = []

        def factory(token: str, api_url: Optional[str]) -> LinodeClient:
            seen.append(api_url)
            return self.api.client(token, api_url)

        manager = AccountManager(client_factory=factory, default_api_url="https://fallback.test/v4")
        self.addAsyncCleanup(manager.aclose)
        manager.register("a", "A", "token", api_url="https://custom.test/v4")
        manager.register("b", "B", "token")

        self.assertEqual(seen, ["https://custom.test/v4", "https://fallback.test/v4"])

    def test_switch_is_visible_to_every_reader(self) -> None:
        self.manager.register("A", "A", "token-a")
        self.manager.register("B", "B", "token-b")
        self.manager.set_current("A")

        stop = threading.Event()
        failures: List[str] = []

        def writer() -> None:
            names = ("A", "B")
            index = 0
            while not stop.is_set():
                index ^= 1
                self.manager.set_current(names[index])
                if self.manager.current_name not in names:
                    failures.append("writer saw foreign value")
                time.sleep(0.0005)

        def reader() -> None:
            while not stop.is_set():
                try:
                    name = self.manager.get_current().name
                except Exception as exc:  # pragma: no cover - reported below
                    failures.append(repr(exc))
                    return
                if name not in ("A", "B"):
                    failures.append(name)

        threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(8)]
        for thread in threads:
            thread.start()
        time.sleep(0.3)
        stop.set()
        for thread in threads:
            thread.join(timeout=5)

        self.assertEqual(failures, [])

    def test_set_current_then_get_current_sequentially(self) -> None:
        for name in ("A", "B", "C"):
            self.manager.register(name, name, f"token-{name}")
        for name in ("B", "A", "C", "C", "B"):
            self.manager.set_current(name)
            self.assertEqual(self.manager.get_current().name, name)


class ReadWriteLockTests(unittest.TestCase):
    def test_readers_share(self) -> None:
        lock = ReadWriteLock()
        inside = threading.Barrier(3, timeout=2)

        def reader() -> None:
            with lock.read():
                inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        self.assertFalse(inside.broken)

    def test_writer_excludes_readers(self) -> None:
        lock = ReadWriteLock()
        events: List[str] = []
        writer_in = threading.Event()

        def writer() -> None:
            with lock.write():
                writer_in.set()
                time.sleep(0.05)
                events.append("write-done")

        def reader() -> None:
            writer_in.wait()
            with lock.read():
                events.append("read")

        threads = [threading.Thread(target=writer), threading.Thread(target=reader)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        self.assertEqual(events, ["write-done", "read"])


if __name__ == "__main__":
    unittest.main()
