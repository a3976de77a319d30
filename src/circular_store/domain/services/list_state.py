"""Meta state of a list namespace: the current pointer and the next key.

Both scalars are stored as 8-byte big-endian values alongside the items
and are always read and written through the caller's transaction.
"""

from __future__ import annotations

from circular_store.domain.services.order_index import OrderIndex
from circular_store.domain.value_objects import (
    CURRENT_KEY,
    NEXT_KEY,
    SequenceNumber,
    decode_u64,
    encode_u64,
)
from circular_store.ports.inbound.circular_list import MissingMetaError
from circular_store.ports.outbound.kv_store import KVTransaction


def read_pointer(tx: KVTransaction) -> int:
    """Return the stored current pointer (not yet clamped)."""
    return _read_meta(tx, CURRENT_KEY)


def write_pointer(tx: KVTransaction, pointer: int) -> None:
    tx.put(CURRENT_KEY, encode_u64(pointer))


def read_next_key(tx: KVTransaction) -> SequenceNumber:
    """Return the sequence number the next insert will use."""
    return SequenceNumber(_read_meta(tx, NEXT_KEY))


def write_next_key(tx: KVTransaction, next_key: int) -> None:
    tx.put(NEXT_KEY, encode_u64(next_key))


def reset(tx: KVTransaction) -> None:
    """Wipe the namespace and write fresh meta state."""
    tx.clear()
    write_pointer(tx, 0)
    write_next_key(tx, 0)


def initialize(tx: KVTransaction) -> bool:
    """Write whichever meta keys are missing, keeping existing items.

    A missing next key is recovered as one past the highest stored item so
    that sequence numbers are never reused.

    Returns:
        True if any meta key had to be written.
    """
    written = False

    if tx.get(NEXT_KEY) is None:
        stored = OrderIndex().snapshot(tx).sequence_numbers()
        write_next_key(tx, stored[-1] + 1 if stored else 0)
        written = True

    if tx.get(CURRENT_KEY) is None:
        write_pointer(tx, 0)
        written = True

    return written


def _read_meta(tx: KVTransaction, key: bytes) -> int:
    raw = tx.get(key)
    if raw is None:
        raise MissingMetaError(
            f"meta key {key.decode()} missing from namespace {tx.namespace!r}",
            namespace=tx.namespace,
        )
    return decode_u64(raw)
