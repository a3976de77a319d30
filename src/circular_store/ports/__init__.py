"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Inbound ports: APIs offered to clients (CircularListPort)
- Outbound ports: Dependencies on external systems (KVStore)

Adapters implement these ports with concrete functionality.
"""

from circular_store.ports.inbound import (
    CircularListError,
    CircularListPort,
    CurrentItem,
    KeySpaceExhaustedError,
    MissingMetaError,
)
from circular_store.ports.outbound import (
    KVStore,
    KVTransaction,
    ReadOnlyTransactionError,
    StorageError,
    TransactionConflictError,
)

__all__ = [
    # Inbound ports
    "CircularListPort",
    "CurrentItem",
    "CircularListError",
    "MissingMetaError",
    "KeySpaceExhaustedError",
    # Outbound ports
    "KVStore",
    "KVTransaction",
    "StorageError",
    "TransactionConflictError",
    "ReadOnlyTransactionError",
]
