"""Process-wide registry of named Linode credentials."""

from __future__ import annotations

import contextlib
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional

from .cache import DEFAULT_TTL, ReferenceDataCache
from .client import LinodeClient
from .errors import (
    AccountError,
    DuplicateAccountError,
    InvalidCredentialError,
    NoCurrentAccountError,
    UnknownAccountError,
)

logger = logging.getLogger("mcp-server-linode.accounts")

ClientFactory = Callable[[str, Optional[str]], LinodeClient]


class ReadWriteLock:
    """Shared-read, exclusive-write lock built on a single condition.

    Waiting writers hold off new readers so a steady stream of reads cannot
    starve a switch. Not reentrant.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextlib.contextmanager
    def read(self) -> Iterator[None]:
        with self._condition:
            while self._writer or self._writers_waiting:
                self._condition.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._condition:
                self._readers -= 1
                if not self._readers:
                    self._condition.notify_all()

    @contextlib.contextmanager
    def write(self) -> Iterator[None]:
        with self._condition:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._condition.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._condition:
                self._writer = False
                self._condition.notify_all()


class AccountRecord:
    """One named credential and the upstream client built from it.

    The token itself is not kept; only the client holds it.
    """

    __slots__ = ("_name", "label", "_client", "_reference_cache")

    def __init__(self, name: str, label: str, client: LinodeClient, reference_cache: ReferenceDataCache) -> None:
        self._name = name
        self.label = label
        self._client = client
        self._reference_cache = reference_cache

    @property
    def name(self) -> str:
        return self._name

    @property
    def client(self) -> LinodeClient:
        return self._client

    @property
    def reference_cache(self) -> ReferenceDataCache:
        return self._reference_cache

    def __repr__(self) -> str:
        return f"AccountRecord(name={self._name!r}, label={self.label!r})"


@dataclass(frozen=True)
class AccountSummary:
    name: str
    label: str
    is_current: bool


def _validate_name(name: object) -> str:
    if not isinstance(name, str) or not name:
        raise AccountError("Account name must be a non-empty string")
    if not name.isascii() or not name.isprintable() or any(char.isspace() for char in name):
        raise AccountError(f"Account name must be printable ASCII without spaces: {name!r}")
    return name


class AccountManager:
    """Named accounts plus the slot naming the current one.

    The mapping and the slot share one read/write lock. No critical section
    awaits, so the manager is usable from worker threads as well as from the
    event loop.
    """

    def __init__(
        self,
        *,
        client_factory: Optional[ClientFactory] = None,
        cache_ttl: float = DEFAULT_TTL,
        timeout: float = 30.0,
        default_api_url: Optional[str] = None,
    ) -> None:
        if cache_ttl <= 0:
            raise ValueError("cache TTL must be positive")
        self._lock = ReadWriteLock()
        self._accounts: Dict[str, AccountRecord] = {}
        self._current: Optional[str] = None
        self._retired: List[LinodeClient] = []
        self._cache_ttl = cache_ttl
        self._default_api_url = default_api_url

        def _default_factory(token: str, api_url: Optional[str]) -> LinodeClient:
            return LinodeClient(token, base_url=api_url, timeout=timeout)

        self._client_factory: ClientFactory = client_factory or _default_factory

    def register(self, name: str, label: str, token: str, *, api_url: Optional[str] = None) -> AccountRecord:
        name = _validate_name(name)
        with self._lock.write():
            if name in self._accounts:
                raise DuplicateAccountError(name)
            try:
                client = self._client_factory(token, api_url or self._default_api_url)
            except (TypeError, ValueError) as exc:
                raise InvalidCredentialError(name, str(exc)) from exc
            record = AccountRecord(name, label or name, client, ReferenceDataCache(self._cache_ttl))
            self._accounts[name] = record
        logger.info("Registered account %s (%s)", name, record.label)
        return record

    def set_current(self, name: str) -> AccountRecord:
        with self._lock.write():
            record = self._accounts.get(name)
            if record is None:
                raise UnknownAccountError(name)
            self._current = name
        logger.info("Current account is now %s", name)
        return record

    def clear_current(self) -> None:
        with self._lock.write():
            self._current = None

    def get_current(self) -> AccountRecord:
        with self._lock.read():
            current = self._current
            if current is None:
                raise NoCurrentAccountError()
            record = self._accounts.get(current)
        if record is None:
            raise UnknownAccountError(current)
        return record

    @property
    def current_name(self) -> Optional[str]:
        with self._lock.read():
            return self._current

    def get(self, name: str) -> AccountRecord:
        with self._lock.read():
            record = self._accounts.get(name)
        if record is None:
            raise UnknownAccountError(name)
        return record

    def list(self) -> List[AccountSummary]:
        with self._lock.read():
            current = self._current
            records = sorted(self._accounts.values(), key=lambda record: record.name)
            return [AccountSummary(record.name, record.label, record.name == current) for record in records]

    def relabel(self, name: str, label: str) -> AccountRecord:
        if not isinstance(label, str) or not label:
            raise AccountError("Account label must be a non-empty string")
        with self._lock.write():
            record = self._accounts.get(name)
            if record is None:
                raise UnknownAccountError(name)
            record.label = label
        return record

    def remove(self, name: str) -> None:
        """Unlink an account. In-flight calls keep using its client until shutdown."""

        with self._lock.write():
            record = self._accounts.pop(name, None)
            if record is None:
                raise UnknownAccountError(name)
            if self._current == name:
                self._current = None
            self._retired.append(record.client)
        logger.info("Removed account %s", name)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._accounts)

    def __contains__(self, name: object) -> bool:
        with self._lock.read():
            return name in self._accounts

    async def aclose(self) -> None:
        with self._lock.write():
            clients = [record.client for record in self._accounts.values()] + self._retired
            self._retired = []
        for client in clients:
            await client.aclose()
