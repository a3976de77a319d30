"""In-memory KVStore implementation.

This adapter keeps every namespace in process memory. It is meant for
tests and for ephemeral lists that do not need to survive a restart.

Isolation:
    Committed namespaces are immutable snapshots. A read transaction
    holds a reference to the snapshot current at its start; a write
    transaction mutates a private copy that replaces the snapshot on
    commit. Readers therefore never see partial writes and never block
    writers.

Thread Safety:
    Write transactions are serialized by a store-wide lock.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from circular_store.infrastructure.logging import get_logger
from circular_store.ports.outbound.kv_store import (
    ReadOnlyTransactionError,
    StorageError,
)


logger = get_logger(__name__)


class MemoryTransaction:
    """Transaction over one namespace snapshot."""

    def __init__(self, namespace: str, data: dict[bytes, bytes], writable: bool) -> None:
        self._namespace = namespace
        self._data = data
        self._writable = writable
        self._closed = False

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def writable(self) -> bool:
        return self._writable

    def get(self, key: bytes) -> bytes | None:
        self._check_open()
        return self._data.get(bytes(key))

    def put(self, key: bytes, value: bytes) -> None:
        self._check_writable("put")
        self._data[bytes(key)] = bytes(value)

    def delete(self, key: bytes) -> None:
        self._check_writable("delete")
        self._data.pop(bytes(key), None)

    def scan(self, prefix: bytes = b"") -> Iterator[tuple[bytes, bytes]]:
        for key in self._sorted_keys(prefix):
            yield key, self._data[key]

    def scan_keys(self, prefix: bytes = b"") -> Iterator[bytes]:
        return iter(self._sorted_keys(prefix))

    def clear(self) -> None:
        self._check_writable("clear")
        self._data.clear()

    def close(self) -> None:
        self._closed = True

    def _sorted_keys(self, prefix: bytes) -> list[bytes]:
        self._check_open()
        # Materialized so callers may mutate while iterating.
        return sorted(key for key in self._data if key.startswith(prefix))

    def _check_open(self) -> None:
        if self._closed:
            raise StorageError(f"transaction on {self._namespace!r} is closed")

    def _check_writable(self, operation: str) -> None:
        self._check_open()
        if not self._writable:
            raise ReadOnlyTransactionError(self._namespace, operation)


class MemoryStore:
    """In-memory implementation of the KVStore protocol.

    Example:
        store = MemoryStore()
        with store.write("jobs") as tx:
            tx.put(b"a", b"1")
        with store.read("jobs") as tx:
            assert tx.get(b"a") == b"1"
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._namespaces: dict[str, dict[bytes, bytes]] = {}
        self._write_lock = threading.Lock()
        self._writer: int | None = None
        self._closed = False

    @contextmanager
    def read(self, namespace: str) -> Iterator[MemoryTransaction]:
        """Open a read-only transaction on the committed snapshot."""
        self._check_open()
        tx = MemoryTransaction(namespace, self._namespaces.get(namespace, {}), writable=False)
        try:
            yield tx
        finally:
            tx.close()

    @contextmanager
    def write(self, namespace: str) -> Iterator[MemoryTransaction]:
        """Open a read-write transaction; publish the copy on clean exit."""
        self._check_open()
        self._check_not_nested()
        with self._write_lock:
            self._writer = threading.get_ident()
            data = dict(self._namespaces.get(namespace, {}))
            tx = MemoryTransaction(namespace, data, writable=True)
            try:
                yield tx
            except BaseException:
                logger.debug("memory_transaction_rolled_back", namespace=namespace)
                raise
            else:
                self._publish(namespace, data)
            finally:
                tx.close()
                self._writer = None

    def namespaces(self) -> list[str]:
        self._check_open()
        return sorted(name for name, data in self._namespaces.items() if data)

    def drop_namespace(self, namespace: str) -> bool:
        self._check_open()
        self._check_not_nested()
        with self._write_lock:
            data = self._namespaces.pop(namespace, None)
        return bool(data)

    def close(self) -> None:
        self._closed = True

    def __enter__(self) -> MemoryStore:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _publish(self, namespace: str, data: dict[bytes, bytes]) -> None:
        if data:
            self._namespaces[namespace] = data
        else:
            self._namespaces.pop(namespace, None)

    def _check_open(self) -> None:
        if self._closed:
            raise StorageError("store is closed")

    def _check_not_nested(self) -> None:
        # The write lock is not re-entrant.
        if self._writer == threading.get_ident():
            raise StorageError("nested transactions are not supported")
