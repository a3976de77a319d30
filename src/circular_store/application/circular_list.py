"""Circular List - durable ring of byte payloads with a current pointer.

This module provides the CircularList class that ties the domain services
to a KVStore: each public operation opens exactly one transaction, runs
the domain logic inside it, and records logs, metrics and a trace span.

Usage:
    from circular_store.adapters import SQLiteStore
    from circular_store.application import CircularList

    store = SQLiteStore("/var/lib/app/lists.db")
    jobs = CircularList.open(store, "jobs")

    jobs.add(b"build")
    jobs.add_nx(b"test")          # False if already present
    value, index, count = jobs.current()
    jobs.next()                   # wraps past the last item
    jobs.remove()                 # view moves to the successor

Storage is the only source of truth. The list object caches nothing, so
any number of CircularList instances, threads or processes may share a
namespace, and a list reopened after a crash sees exactly the committed
state.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from circular_store.domain.services import (
    MutationService,
    OrderIndex,
    PointerController,
    list_state,
)
from circular_store.infrastructure.logging import get_logger
from circular_store.infrastructure.metrics import MetricsRegistry, get_metrics
from circular_store.infrastructure.tracing import trace_span
from circular_store.ports.inbound.circular_list import CurrentItem
from circular_store.ports.outbound.kv_store import KVStore


def _payload(value: object) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"payload must be bytes-like, got {type(value).__name__}")


class CircularList:
    """A circular list stored in one namespace of a KVStore.

    Construct with ``CircularList.create`` (wipe and initialise) or
    ``CircularList.open`` (reuse existing items).

    Thread Safety:
        Safe to share. Write operations are serialized by the store's
        write transactions; reads see a consistent snapshot.
    """

    def __init__(
        self,
        store: KVStore,
        name: str,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Bind a list to a namespace without touching storage.

        Args:
            store: The backing key-value store.
            name: Namespace holding this list.
            metrics: Metrics registry (defaults to the global one).

        Raises:
            ValueError: If name is empty.
        """
        if not name:
            raise ValueError("list name must be a non-empty string")

        self._store = store
        self._name = name
        self._metrics = metrics or get_metrics()
        self._logger = get_logger(__name__, namespace=name)

        self._index = OrderIndex()
        self._pointer = PointerController(self._index, on_stale=self._pointer_reset)
        self._mutations = MutationService(self._index)

    @classmethod
    def create(
        cls,
        store: KVStore,
        name: str,
        metrics: MetricsRegistry | None = None,
    ) -> CircularList:
        """Create a fresh, empty list, discarding anything stored under name."""
        lst = cls(store, name, metrics)
        with lst._operation("create"):
            with store.write(name) as tx:
                list_state.reset(tx)
        lst._logger.info("circular_list_created")
        return lst

    @classmethod
    def open(
        cls,
        store: KVStore,
        name: str,
        metrics: MetricsRegistry | None = None,
    ) -> CircularList:
        """Open the list stored under name, initialising it if absent."""
        lst = cls(store, name, metrics)
        with lst._operation("open"):
            with store.write(name) as tx:
                initialized = list_state.initialize(tx)
        lst._logger.info("circular_list_opened", initialized=initialized)
        return lst

    @property
    def name(self) -> str:
        return self._name

    @property
    def store(self) -> KVStore:
        return self._store

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add(self, value: bytes) -> None:
        """Append value; the current pointer does not move."""
        payload = _payload(value)
        with self._operation("add"):
            with self._store.write(self._name) as tx:
                seq = self._mutations.add(tx, payload)
                count = len(self._index.snapshot(tx))
        self._metrics.items.labels(namespace=self._name).set(count)
        self._logger.debug("item_added", seq=seq, size=len(payload))

    def add_nx(self, value: bytes) -> bool:
        """Append value unless an equal payload exists.

        Returns:
            True if the value was added.
        """
        payload = _payload(value)
        with self._operation("add_nx"):
            with self._store.write(self._name) as tx:
                seq = self._mutations.add_nx(tx, payload)
                count = len(self._index.snapshot(tx))
        self._metrics.items.labels(namespace=self._name).set(count)

        if seq is None:
            self._metrics.duplicates_rejected_total.labels(namespace=self._name).inc()
            self._logger.debug("duplicate_rejected", size=len(payload))
            return False

        self._logger.debug("item_added", seq=seq, size=len(payload))
        return True

    def remove(self) -> bytes | None:
        """Delete the current element; the view moves to its successor.

        Returns:
            The removed payload, or None if the list was empty.
        """
        with self._operation("remove"):
            with self._store.write(self._name) as tx:
                removed = self._pointer.remove(tx)

        self._metrics.items.labels(namespace=self._name).set(removed.count)
        if removed.value is not None:
            self._logger.debug("item_removed", index=removed.index, count=removed.count)
        return removed.value

    # -------------------------------------------------------------------------
    # Pointer
    # -------------------------------------------------------------------------

    def current(self) -> CurrentItem:
        """Return ``(value, index, count)`` for the current element."""
        with self._operation("current"):
            with self._store.read(self._name) as tx:
                item = self._pointer.current(tx)
        self._metrics.items.labels(namespace=self._name).set(item.count)
        return item

    def next(self) -> bytes | None:
        """Advance the pointer, wrapping to the first element."""
        with self._operation("next"):
            with self._store.write(self._name) as tx:
                item = self._pointer.next(tx)
        self._metrics.items.labels(namespace=self._name).set(item.count)
        return item.value

    def previous(self) -> bytes | None:
        """Move the pointer back, wrapping to the last element."""
        with self._operation("previous"):
            with self._store.write(self._name) as tx:
                item = self._pointer.previous(tx)
        self._metrics.items.labels(namespace=self._name).set(item.count)
        return item.value

    # -------------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------------

    def count(self) -> int:
        """Return the number of live items."""
        with self._operation("count"):
            with self._store.read(self._name) as tx:
                count = len(self._index.snapshot(tx))
        self._metrics.items.labels(namespace=self._name).set(count)
        return count

    def values(self) -> list[bytes]:
        """Return all payloads in insertion order."""
        with self._operation("values"):
            with self._store.read(self._name) as tx:
                return self._index.values(tx)

    def contains(self, value: bytes) -> bool:
        """Return True if an equal payload is stored."""
        payload = _payload(value)
        with self._operation("contains"):
            with self._store.read(self._name) as tx:
                return self._index.find(tx, payload) is not None

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            return False
        return self.contains(value)

    def __repr__(self) -> str:
        return f"CircularList(name={self._name!r})"

    # -------------------------------------------------------------------------
    # Instrumentation
    # -------------------------------------------------------------------------

    @contextmanager
    def _operation(self, operation: str) -> Iterator[None]:
        """Run one public operation inside a span, with metrics and error logging."""
        start = time.perf_counter()
        with trace_span(f"circular_list.{operation}", {"circular.namespace": self._name}):
            try:
                yield
            except Exception:
                self._metrics.operations_total.labels(
                    operation=operation, status="error"
                ).inc()
                self._logger.error("operation_failed", operation=operation, exc_info=True)
                raise
            else:
                self._metrics.operations_total.labels(
                    operation=operation, status="success"
                ).inc()
            finally:
                self._metrics.operation_latency_seconds.labels(
                    operation=operation
                ).observe(time.perf_counter() - start)

    def _pointer_reset(self, stored: int, count: int) -> None:
        self._metrics.pointer_resets_total.labels(namespace=self._name).inc()
        self._logger.warning("stale_pointer_normalized", stored=stored, count=count)
