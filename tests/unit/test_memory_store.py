"""Unit tests for MemoryStore."""

from __future__ import annotations

import pytest

from circular_store.adapters.outbound import MemoryStore
from circular_store.ports.outbound import ReadOnlyTransactionError, StorageError


@pytest.mark.unit
class TestMemoryStore:
    """Tests for the in-memory store."""

    def test_write_then_read(self, memory_store: MemoryStore) -> None:
        """Committed writes are visible to later readers."""
        with memory_store.write("ns") as tx:
            tx.put(b"a", b"1")

        with memory_store.read("ns") as tx:
            assert tx.get(b"a") == b"1"
            assert tx.get(b"b") is None

    def test_failed_write_rolls_back(self, memory_store: MemoryStore) -> None:
        """An exception inside the block discards every change."""
        with memory_store.write("ns") as tx:
            tx.put(b"a", b"1")

        with pytest.raises(RuntimeError):
            with memory_store.write("ns") as tx:
                tx.put(b"a", b"2")
                tx.put(b"b", b"3")
                raise RuntimeError("boom")

        with memory_store.read("ns") as tx:
            assert tx.get(b"a") == b"1"
            assert tx.get(b"b") is None

    def test_reader_keeps_snapshot(self, memory_store: MemoryStore) -> None:
        """A reader does not observe commits made after it started."""
        with memory_store.write("ns") as tx:
            tx.put(b"a", b"1")

        with memory_store.read("ns") as reader:
            with memory_store.write("ns") as writer:
                writer.put(b"a", b"2")
            assert reader.get(b"a") == b"1"

        with memory_store.read("ns") as tx:
            assert tx.get(b"a") == b"2"

    def test_read_only_rejects_mutation(self, memory_store: MemoryStore) -> None:
        """put, delete and clear fail in a read transaction."""
        with memory_store.read("ns") as tx:
            with pytest.raises(ReadOnlyTransactionError):
                tx.put(b"a", b"1")
            with pytest.raises(ReadOnlyTransactionError):
                tx.delete(b"a")
            with pytest.raises(ReadOnlyTransactionError):
                tx.clear()

    def test_scan_prefix_ascending(self, memory_store: MemoryStore) -> None:
        """scan yields only prefixed keys in byte order."""
        with memory_store.write("ns") as tx:
            for key in (b"i\x02", b"j", b"i\x01", b"h", b"i\x10"):
                tx.put(key, key)

        with memory_store.read("ns") as tx:
            assert list(tx.scan_keys(b"i")) == [b"i\x01", b"i\x02", b"i\x10"]
            assert [k for k, _ in tx.scan(b"i")] == [b"i\x01", b"i\x02", b"i\x10"]

    def test_namespaces_are_isolated(self, memory_store: MemoryStore) -> None:
        """Keys in one namespace are invisible to another."""
        with memory_store.write("a") as tx:
            tx.put(b"k", b"1")

        with memory_store.read("b") as tx:
            assert tx.get(b"k") is None

        assert memory_store.namespaces() == ["a"]

    def test_drop_namespace(self, memory_store: MemoryStore) -> None:
        """Dropping removes every key."""
        with memory_store.write("a") as tx:
            tx.put(b"k", b"1")

        assert memory_store.drop_namespace("a") is True
        assert memory_store.drop_namespace("a") is False
        assert memory_store.namespaces() == []

    def test_nested_write_rejected(self, memory_store: MemoryStore) -> None:
        """A second write on the same thread fails instead of deadlocking."""
        with memory_store.write("a"):
            with pytest.raises(StorageError, match="nested"):
                with memory_store.write("b"):
                    pass

    def test_closed_store(self) -> None:
        """A closed store refuses new transactions."""
        store = MemoryStore()
        store.close()
        with pytest.raises(StorageError, match="closed"):
            with store.read("ns"):
                pass
