"""Unit tests for Sequence and OrderIndex."""

from __future__ import annotations

import pytest

from circular_store.adapters.outbound import MemoryStore
from circular_store.domain.entities import Sequence
from circular_store.domain.services import OrderIndex
from circular_store.domain.value_objects import CURRENT_KEY, NEXT_KEY, encode_u64, item_key


@pytest.mark.unit
class TestSequence:
    """Tests for the Sequence entity."""

    def test_empty_sequence(self) -> None:
        """Empty sequence is falsy and clamps to 0."""
        seq = Sequence()
        assert len(seq) == 0
        assert not seq
        assert seq.clamp(0) == 0
        assert seq.clamp(7) == 0

    def test_clamp_in_range(self) -> None:
        """Valid pointers pass through."""
        seq = Sequence((item_key(0), item_key(1), item_key(2)))
        assert seq.clamp(0) == 0
        assert seq.clamp(2) == 2

    def test_clamp_out_of_range(self) -> None:
        """Stale pointers normalise to 0."""
        seq = Sequence((item_key(0), item_key(1)))
        assert seq.clamp(2) == 0
        assert seq.clamp(-1) == 0

    def test_key_at(self) -> None:
        """Keys are addressed by position."""
        seq = Sequence((item_key(4), item_key(9)))
        assert seq.key_at(1) == item_key(9)
        with pytest.raises(IndexError):
            seq.key_at(2)

    def test_sequence_numbers(self) -> None:
        """Sequence numbers are recovered from keys."""
        seq = Sequence((item_key(4), item_key(9)))
        assert seq.sequence_numbers() == [4, 9]


@pytest.mark.unit
class TestOrderIndex:
    """Tests for scan-backed ordering."""

    @pytest.fixture
    def store(self) -> MemoryStore:
        """Store with three items written out of order plus meta keys."""
        store = MemoryStore()
        with store.write("ring") as tx:
            tx.put(CURRENT_KEY, encode_u64(0))
            tx.put(NEXT_KEY, encode_u64(300))
            tx.put(item_key(256), b"C")
            tx.put(item_key(2), b"A")
            tx.put(item_key(10), b"B")
        return store

    def test_snapshot_is_ascending(self, store: MemoryStore) -> None:
        """Snapshot order follows sequence numbers, not write order."""
        index = OrderIndex()
        with store.read("ring") as tx:
            seq = index.snapshot(tx)
        assert seq.keys == (item_key(2), item_key(10), item_key(256))

    def test_snapshot_excludes_meta(self, store: MemoryStore) -> None:
        """Meta keys are not part of the sequence."""
        index = OrderIndex()
        with store.read("ring") as tx:
            seq = index.snapshot(tx)
        assert CURRENT_KEY not in seq.keys
        assert NEXT_KEY not in seq.keys

    def test_snapshot_of_empty_namespace(self) -> None:
        """An unknown namespace yields an empty sequence."""
        with MemoryStore().read("missing") as tx:
            assert len(OrderIndex().snapshot(tx)) == 0

    def test_find(self, store: MemoryStore) -> None:
        """find compares payloads byte for byte."""
        index = OrderIndex()
        with store.read("ring") as tx:
            assert index.find(tx, b"B") == item_key(10)
            assert index.find(tx, b"b") is None
            assert index.find(tx, b"") is None

    def test_values(self, store: MemoryStore) -> None:
        """values returns payloads in sequence order."""
        with store.read("ring") as tx:
            assert OrderIndex().values(tx) == [b"A", b"B", b"C"]
