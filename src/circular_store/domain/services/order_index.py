"""Order index - derives the item sequence of a list from storage.

The index holds no state. Every call re-reads the item range of the
namespace through the caller's transaction, so the result can never go
stale relative to that transaction's view, whichever process wrote the
data.

References:
    - Key layout: circular_store.domain.value_objects.keys
"""

from __future__ import annotations

from circular_store.domain.entities import Sequence
from circular_store.domain.value_objects import ITEM_PREFIX
from circular_store.ports.outbound.kv_store import KVTransaction


class OrderIndex:
    """Scan-backed index over the item keys of a namespace.

    Because item keys are ``i`` + big-endian sequence number, the store's
    ascending key order is insertion order.
    """

    def __init__(self, prefix: bytes = ITEM_PREFIX) -> None:
        """Initialize the index.

        Args:
            prefix: Key prefix shared by all item keys.
        """
        self._prefix = prefix

    def snapshot(self, tx: KVTransaction) -> Sequence:
        """Return the ordered item keys visible to tx.

        Must run in the same transaction as any read or write that uses
        the returned positions.
        """
        return Sequence(tuple(tx.scan_keys(self._prefix)))

    def find(self, tx: KVTransaction, value: bytes) -> bytes | None:
        """Return the key of the first item whose payload equals value.

        This is a linear scan over every payload.
        """
        for key, payload in tx.scan(self._prefix):
            if payload == value:
                return key
        return None

    def values(self, tx: KVTransaction) -> list[bytes]:
        """Return all payloads in sequence order."""
        return [payload for _, payload in tx.scan(self._prefix)]
