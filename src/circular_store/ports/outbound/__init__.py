"""Outbound ports - interfaces for external dependencies.

The only external dependency of a circular list is a transactional,
ordered key-value store.
"""

from circular_store.ports.outbound.kv_store import (
    KVStore,
    KVTransaction,
    ReadOnlyTransactionError,
    StorageError,
    TransactionConflictError,
)

__all__ = [
    "KVStore",
    "KVTransaction",
    "StorageError",
    "TransactionConflictError",
    "ReadOnlyTransactionError",
]
