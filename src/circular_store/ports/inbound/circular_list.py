"""Circular list port - the public contract of a durable ring.

A circular list is a ring of opaque byte payloads kept in insertion order,
with a movable current pointer. Every write operation is exactly one
storage write transaction; every read operation is one read transaction.

Key responsibilities:
- Preserve insertion order across restarts (order is derived from keys)
- Keep the current pointer a valid index after every operation
- Make add-if-absent atomic with respect to other writers
"""

from __future__ import annotations

from abc import abstractmethod
from typing import NamedTuple, Protocol


class CurrentItem(NamedTuple):
    """The element under the current pointer.

    Unpacks as ``value, index, count``. On an empty list the value is None
    and both integers are 0.
    """

    value: bytes | None
    index: int
    count: int


class CircularListPort(Protocol):
    """Protocol for a durable circular list.

    Empty-list calls are never errors: ``current`` reports
    ``CurrentItem(None, 0, 0)`` and ``next``/``previous``/``remove``
    return None without writing.

    Thread Safety:
        Any number of threads (or processes sharing the same store file)
        may call into the same list. Atomicity comes from the store's
        transactions; the list object keeps no mutable state of its own.
    """

    @abstractmethod
    def add(self, value: bytes) -> None:
        """Append value at the end of the insertion order.

        The current pointer is not moved.
        """
        ...

    @abstractmethod
    def add_nx(self, value: bytes) -> bool:
        """Append value unless an equal payload is already stored.

        The existence check and the insert share one write transaction.

        Returns:
            True if the value was added.
        """
        ...

    @abstractmethod
    def remove(self) -> bytes | None:
        """Delete the current element.

        The pointer keeps its index, so the view moves to the successor;
        it wraps to 0 when the removed element was the last one.

        Returns:
            The removed payload, or None on an empty list.
        """
        ...

    @abstractmethod
    def current(self) -> CurrentItem:
        """Return the current element, its index and the item count."""
        ...

    @abstractmethod
    def next(self) -> bytes | None:
        """Advance the pointer (wrapping past the end) and return the new value."""
        ...

    @abstractmethod
    def previous(self) -> bytes | None:
        """Move the pointer back (wrapping before the start) and return the new value."""
        ...


class CircularListError(Exception):
    """Base class for circular list failures."""

    def __init__(self, message: str, namespace: str | None = None):
        super().__init__(message)
        self.namespace = namespace


class MissingMetaError(CircularListError):
    """Raised when a list's meta keys are absent.

    Create and open always write both meta keys, so this means the
    namespace was wiped or corrupted underneath the list.
    """

    pass


class KeySpaceExhaustedError(CircularListError):
    """Raised when the 64-bit sequence counter has no values left."""

    pass
