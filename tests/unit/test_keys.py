"""Unit tests for the key codec."""

from __future__ import annotations

import pytest

from circular_store.domain.value_objects import (
    CURRENT_KEY,
    ITEM_PREFIX,
    NEXT_KEY,
    SequenceNumber,
    decode_u64,
    encode_u64,
    is_item_key,
    item_key,
    item_seq,
)


@pytest.mark.unit
class TestU64Codec:
    """Tests for 8-byte big-endian encoding."""

    def test_encode_is_big_endian(self) -> None:
        """Most significant byte comes first."""
        assert encode_u64(1) == b"\x00\x00\x00\x00\x00\x00\x00\x01"
        assert encode_u64(256) == b"\x00\x00\x00\x00\x00\x00\x01\x00"

    def test_decode_inverts_encode(self) -> None:
        """Boundary values survive encoding."""
        for value in (0, 1, 255, 2**32, 2**64 - 1):
            assert decode_u64(encode_u64(value)) == value

    def test_byte_order_matches_numeric_order(self) -> None:
        """Lexicographic order of encodings equals numeric order."""
        values = [0, 1, 9, 10, 255, 256, 65535, 65536, 2**40]
        encoded = [encode_u64(v) for v in values]
        assert sorted(encoded) == encoded

    def test_encode_rejects_out_of_range(self) -> None:
        """Negative and oversized values raise."""
        with pytest.raises(ValueError, match="out of unsigned 64-bit range"):
            encode_u64(-1)
        with pytest.raises(ValueError, match="out of unsigned 64-bit range"):
            encode_u64(2**64)

    def test_decode_rejects_wrong_length(self) -> None:
        """Only 8-byte inputs decode."""
        with pytest.raises(ValueError, match="requires 8 bytes"):
            decode_u64(b"\x00" * 7)


@pytest.mark.unit
class TestItemKeys:
    """Tests for item key construction."""

    def test_item_key_layout(self) -> None:
        """Item keys are the prefix followed by the encoded number."""
        assert item_key(3) == b"i" + encode_u64(3)
        assert item_seq(item_key(3)) == SequenceNumber(3)

    def test_item_keys_sort_by_sequence(self) -> None:
        """Ten sorts after nine, unlike decimal strings."""
        assert item_key(9) < item_key(10) < item_key(256)

    def test_meta_keys_outside_item_range(self) -> None:
        """Meta keys never match the item prefix."""
        assert not CURRENT_KEY.startswith(ITEM_PREFIX)
        assert not NEXT_KEY.startswith(ITEM_PREFIX)
        assert not is_item_key(CURRENT_KEY)
        assert not is_item_key(NEXT_KEY)

    def test_is_item_key(self) -> None:
        """Only prefix plus 8 bytes qualifies."""
        assert is_item_key(item_key(0))
        assert not is_item_key(b"i")
        assert not is_item_key(b"item")

    def test_item_seq_rejects_meta_key(self) -> None:
        """Parsing a non-item key raises."""
        with pytest.raises(ValueError, match="not an item key"):
            item_seq(NEXT_KEY)
