"""Adapters layer - concrete implementations of ports.

Outbound adapters implement the KVStore port:
- SQLiteStore: durable single-file store
- MemoryStore: in-process store for tests and ephemeral lists
"""

from circular_store.adapters.outbound import MemoryStore, SQLiteStore, build_store

__all__ = [
    "build_store",
    "MemoryStore",
    "SQLiteStore",
]
