"""Outbound adapters - key-value store implementations."""

from __future__ import annotations

from circular_store.adapters.outbound.memory_store import MemoryStore, MemoryTransaction
from circular_store.adapters.outbound.sqlite_store import (
    SQLiteStore,
    SQLiteTransaction,
    prefix_upper_bound,
)
from circular_store.infrastructure.config import StorageConfig
from circular_store.ports.outbound.kv_store import KVStore


def build_store(config: StorageConfig) -> KVStore:
    """Create the store selected by the storage configuration."""
    if config.backend == "memory":
        return MemoryStore()
    return SQLiteStore(
        config.path,
        busy_timeout_seconds=config.busy_timeout_seconds,
        synchronous=config.synchronous,
    )


__all__ = [
    "build_store",
    "MemoryStore",
    "MemoryTransaction",
    "SQLiteStore",
    "SQLiteTransaction",
    "prefix_upper_bound",
]
