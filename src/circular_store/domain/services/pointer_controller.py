"""Pointer controller - current/next/previous/remove over a sequence.

The current pointer is an index into the sequence, not a key. It is
advisory state: every operation derives a fresh sequence in its own
transaction and clamps the stored pointer against it before use, so a
pointer left out of range by an external deletion heals to 0 instead of
surfacing as an error.

Transitions (n = item count, p = clamped pointer):

    current    read only, no write-back
    next       p -> (p + 1) mod n
    previous   p -> (p - 1 + n) mod n
    remove     delete item p; p stays unless p >= n - 1, then p -> 0

Removal keeps the index, which moves the view to the item that followed
the removed one.
"""

from __future__ import annotations

from typing import Callable, NamedTuple

from circular_store.domain.entities import Sequence
from circular_store.domain.services import list_state
from circular_store.domain.services.order_index import OrderIndex
from circular_store.ports.inbound.circular_list import CurrentItem
from circular_store.ports.outbound.kv_store import KVTransaction


StaleHandler = Callable[[int, int], None]
"""Called with (stored_pointer, item_count) when a stored pointer is out of range."""


class RemovedItem(NamedTuple):
    """Outcome of a removal: the deleted payload and the new pointer state."""

    value: bytes | None
    index: int
    count: int


class PointerController:
    """Owns the current pointer of one list.

    All methods take the transaction to run in; the caller decides whether
    that is a read or write transaction and commits it.
    """

    def __init__(
        self,
        index: OrderIndex,
        on_stale: StaleHandler | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            index: Order index used to derive the sequence.
            on_stale: Optional hook for out-of-range stored pointers.
        """
        self._index = index
        self._on_stale = on_stale

    def current(self, tx: KVTransaction) -> CurrentItem:
        """Return the element under the pointer without moving it."""
        sequence = self._index.snapshot(tx)
        if not sequence:
            return CurrentItem(None, 0, 0)

        pointer = self._load(tx, sequence)
        return CurrentItem(tx.get(sequence.key_at(pointer)), pointer, len(sequence))

    def next(self, tx: KVTransaction) -> CurrentItem:
        """Advance one step, wrapping from the last element to the first."""
        return self._step(tx, 1)

    def previous(self, tx: KVTransaction) -> CurrentItem:
        """Step back one element, wrapping from the first to the last."""
        return self._step(tx, -1)

    def remove(self, tx: KVTransaction) -> RemovedItem:
        """Delete the element under the pointer and persist the new pointer."""
        sequence = self._index.snapshot(tx)
        if not sequence:
            return RemovedItem(None, 0, 0)

        pointer = self._load(tx, sequence)
        key = sequence.key_at(pointer)
        value = tx.get(key)
        tx.delete(key)

        count = len(sequence) - 1
        if count == 0 or pointer >= count:
            pointer = 0
        list_state.write_pointer(tx, pointer)

        return RemovedItem(value, pointer, count)

    def _step(self, tx: KVTransaction, delta: int) -> CurrentItem:
        sequence = self._index.snapshot(tx)
        if not sequence:
            return CurrentItem(None, 0, 0)

        count = len(sequence)
        pointer = (self._load(tx, sequence) + delta + count) % count
        list_state.write_pointer(tx, pointer)
        return CurrentItem(tx.get(sequence.key_at(pointer)), pointer, count)

    def _load(self, tx: KVTransaction, sequence: Sequence) -> int:
        """Read the stored pointer and clamp it into the sequence."""
        stored = list_state.read_pointer(tx)
        pointer = sequence.clamp(stored)
        if pointer != stored and self._on_stale is not None:
            self._on_stale(stored, len(sequence))
        return pointer
