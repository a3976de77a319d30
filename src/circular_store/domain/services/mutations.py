"""Mutation service - inserts into a list namespace.

Each method performs its whole read-modify-write through the caller's
write transaction. In particular ``add_nx`` runs its existence scan and
its insert in that one transaction, so two concurrent callers adding the
same payload are serialized by the store and only one of them inserts.
"""

from __future__ import annotations

from circular_store.domain.services import list_state
from circular_store.domain.services.order_index import OrderIndex
from circular_store.domain.value_objects import U64_LIMIT, SequenceNumber, item_key
from circular_store.ports.inbound.circular_list import KeySpaceExhaustedError
from circular_store.ports.outbound.kv_store import KVTransaction


class MutationService:
    """Appends payloads under fresh sequence numbers."""

    def __init__(self, index: OrderIndex) -> None:
        self._index = index

    def add(self, tx: KVTransaction, value: bytes) -> SequenceNumber:
        """Store value under the next sequence number and bump the counter.

        The current pointer is left untouched.

        Returns:
            The sequence number assigned to the new item.

        Raises:
            KeySpaceExhaustedError: If every 64-bit sequence number is used.
            MissingMetaError: If the next-key counter is absent.
        """
        seq = list_state.read_next_key(tx)
        if seq + 1 >= U64_LIMIT:
            raise KeySpaceExhaustedError(
                f"sequence numbers exhausted in namespace {tx.namespace!r}",
                namespace=tx.namespace,
            )

        tx.put(item_key(seq), value)
        list_state.write_next_key(tx, seq + 1)
        return seq

    def add_nx(self, tx: KVTransaction, value: bytes) -> SequenceNumber | None:
        """Add value unless an equal payload is already stored.

        Returns:
            The new sequence number, or None if a duplicate exists.
        """
        if self._index.find(tx, value) is not None:
            return None
        return self.add(tx, value)
