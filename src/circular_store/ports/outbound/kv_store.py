"""Key-value store port for transactional, ordered namespaces.

This outbound port defines the only capability circular lists need from
a storage engine: run a unit of work inside a read-only or read-write
transaction against a named, ordered namespace of byte keys and values.

Transactions are context managers. The body of the ``with`` block is the
unit of work:

    with store.write("jobs") as tx:
        tx.put(b"k", b"v")      # committed when the block exits normally

    with store.read("jobs") as tx:
        value = tx.get(b"k")    # consistent snapshot for the whole block

A write block that raises leaves storage unchanged and the exception
propagates to the caller.
"""

from __future__ import annotations

from abc import abstractmethod
from contextlib import AbstractContextManager
from typing import Iterator, Protocol


class KVTransaction(Protocol):
    """A transaction bound to a single namespace.

    Keys iterate in ascending lexicographic (memcmp) order.

    Thread Safety:
        A transaction belongs to the thread that opened it and must not
        outlive its ``with`` block.
    """

    @property
    @abstractmethod
    def namespace(self) -> str:
        """Return the namespace this transaction operates on."""
        ...

    @property
    @abstractmethod
    def writable(self) -> bool:
        """Return True for read-write transactions."""
        ...

    @abstractmethod
    def get(self, key: bytes) -> bytes | None:
        """Return the value stored under key, or None if absent."""
        ...

    @abstractmethod
    def put(self, key: bytes, value: bytes) -> None:
        """Store value under key, replacing any previous value.

        Raises:
            ReadOnlyTransactionError: If the transaction is read-only.
        """
        ...

    @abstractmethod
    def delete(self, key: bytes) -> None:
        """Delete key. Deleting an absent key is a no-op.

        Raises:
            ReadOnlyTransactionError: If the transaction is read-only.
        """
        ...

    @abstractmethod
    def scan(self, prefix: bytes = b"") -> Iterator[tuple[bytes, bytes]]:
        """Iterate (key, value) pairs whose key starts with prefix, ascending."""
        ...

    @abstractmethod
    def scan_keys(self, prefix: bytes = b"") -> Iterator[bytes]:
        """Iterate keys that start with prefix, ascending."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Delete every key in the namespace.

        Raises:
            ReadOnlyTransactionError: If the transaction is read-only.
        """
        ...


class KVStore(Protocol):
    """Protocol for a transactional store of ordered namespaces.

    Guarantees:
        - Write transactions are serialized and atomic (all-or-nothing).
        - Read transactions observe a consistent snapshot and never block
          writers from committing later.
        - A failed write transaction leaves storage unchanged.

    Thread Safety:
        Implementations must be safe to share between threads.
    """

    @abstractmethod
    def read(self, namespace: str) -> AbstractContextManager[KVTransaction]:
        """Open a read-only transaction on namespace.

        Raises:
            StorageError: If the transaction cannot be started.
        """
        ...

    @abstractmethod
    def write(self, namespace: str) -> AbstractContextManager[KVTransaction]:
        """Open a read-write transaction on namespace.

        Commits when the block exits normally, rolls back otherwise.

        Raises:
            StorageError: If the transaction cannot be started or committed.
        """
        ...

    @abstractmethod
    def namespaces(self) -> list[str]:
        """Return the names of all non-empty namespaces, sorted."""
        ...

    @abstractmethod
    def drop_namespace(self, namespace: str) -> bool:
        """Delete a namespace and everything in it.

        Returns:
            True if the namespace held any keys.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Release resources. The store must not be used afterwards."""
        ...


class StorageError(Exception):
    """Raised when the storage engine fails.

    The enclosing transaction has been rolled back when this propagates.
    """

    pass


class TransactionConflictError(StorageError):
    """Raised when the store stays locked by another writer past the busy timeout."""

    pass


class ReadOnlyTransactionError(StorageError):
    """Raised when a mutation is attempted through a read-only transaction."""

    def __init__(self, namespace: str, operation: str):
        super().__init__(f"{operation} not allowed in read-only transaction on {namespace!r}")
        self.namespace = namespace
        self.operation = operation
