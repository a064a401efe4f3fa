"""Pytest configuration and fixtures for redlock-exec tests"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

import pytest

from redlock_exec.core.colors import ConsoleColors
from redlock_exec.core.exceptions import StorageUnavailableError
from redlock_exec.core.locks.manager import LockManager
from redlock_exec.core.logging import SensitiveDataFilter


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.advance(seconds)


class FakeRedisInstance:
    """One in-memory storage instance with per-key expiry.

    Each operation runs under a mutex so SET NX and the owner-checked
    delete are atomic, like the real server-side commands.
    """

    def __init__(self, clock: Callable[[], float]):
        self.clock = clock
        self._data: dict[str, tuple[str, float]] = {}
        self._mutex = threading.Lock()

    def _get_live(self, key: str) -> str | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self.clock() >= expires_at:
            del self._data[key]
            return None
        return value

    def get(self, key: str) -> str | None:
        with self._mutex:
            return self._get_live(key)

    def set_nx_px(self, key: str, value: str, ttl_ms: int) -> bool:
        with self._mutex:
            if self._get_live(key) is not None:
                return False
            self._data[key] = (value, self.clock() + ttl_ms / 1000.0)
            return True

    def force_set(self, key: str, value: str, ttl_seconds: float = 60.0) -> None:
        with self._mutex:
            self._data[key] = (value, self.clock() + ttl_seconds)

    def delete_if_equals(self, key: str, value: str) -> bool:
        with self._mutex:
            if self._get_live(key) == value:
                del self._data[key]
                return True
            return False


class FakeStorageBackend:
    """StorageBackend test double backed by FakeRedisInstance objects.

    Servers listed in ``unreachable`` raise StorageUnavailableError the way
    RedisStorageBackend does on connection failures. ``latency`` is called
    with the server before every operation.
    """

    name = "fake"

    def __init__(
        self,
        servers: list[str],
        clock: Callable[[], float],
        latency: Callable[[str], None] | None = None,
    ):
        self.instances = {server: FakeRedisInstance(clock) for server in servers}
        self.unreachable: set[str] = set()
        self.latency = latency
        self.calls: list[tuple[str, str]] = []

    def _instance(self, server: str, operation: str) -> FakeRedisInstance:
        self.calls.append((operation, server))
        if self.latency is not None:
            self.latency(server)
        if server in self.unreachable or server not in self.instances:
            raise StorageUnavailableError(server, operation, ConnectionError("Connection refused"))
        return self.instances[server]

    def set_if_absent(self, server: str, key: str, token: str, ttl_ms: int) -> bool:
        return self._instance(server, "set").set_nx_px(key, token, ttl_ms)

    def delete_if_owner(self, server: str, key: str, token: str) -> bool:
        return self._instance(server, "delete").delete_if_equals(key, token)

    def values(self, key: str) -> dict[str, str | None]:
        return {server: instance.get(key) for server, instance in self.instances.items()}

    def servers_called(self, operation: str) -> list[str]:
        return [server for op, server in self.calls if op == operation]


@pytest.fixture
def servers():
    return ["redis://redis-a:6379", "redis://redis-b:6379", "redis://redis-c:6379"]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend(servers, clock):
    return FakeStorageBackend(servers, clock)


@pytest.fixture
def manager(backend, clock):
    return LockManager(backend, clock=clock)


@pytest.fixture(autouse=True)
def _restore_logging_and_colors():
    """Undo global logging/color changes made by setup_logging and the CLI."""
    root = logging.getLogger()
    package_logger = logging.getLogger("redlock_exec")
    saved_level = root.level
    saved_package_level = package_logger.level
    saved_colors = ConsoleColors._enabled
    yield
    # Handlers installed by setup_logging carry the redaction filter.
    for handler in root.handlers[:]:
        if any(isinstance(f, SensitiveDataFilter) for f in handler.filters):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved_level)
    package_logger.setLevel(saved_package_level)
    ConsoleColors._enabled = saved_colors
