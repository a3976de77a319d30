"""Key codec for the circular list key space.

Every list owns one namespace laid out as:

    __current__           8-byte big-endian current pointer
    __next__              8-byte big-endian next sequence number
    i + <8-byte seq>      item payload

Sequence numbers are encoded big-endian so that the store's lexicographic
key order equals ascending numeric order. The item prefix ``i`` (0x69) never
starts a meta key (both begin with ``_``, 0x5F), so a prefix scan over ``i``
yields exactly the items.
"""

from __future__ import annotations

from typing import NewType


SequenceNumber = NewType("SequenceNumber", int)
"""Insertion sequence number of an item. Assigned once, never reused."""

U64_SIZE = 8
U64_LIMIT = 1 << 64

ITEM_PREFIX = b"i"
CURRENT_KEY = b"__current__"
NEXT_KEY = b"__next__"

ITEM_KEY_SIZE = len(ITEM_PREFIX) + U64_SIZE


def encode_u64(value: int) -> bytes:
    """Encode an unsigned 64-bit integer as 8 big-endian bytes.

    Raises:
        ValueError: If value does not fit in 64 unsigned bits.
    """
    if not 0 <= value < U64_LIMIT:
        raise ValueError(f"value out of unsigned 64-bit range: {value}")
    return value.to_bytes(U64_SIZE, byteorder="big", signed=False)


def decode_u64(data: bytes) -> int:
    """Decode 8 big-endian bytes into an unsigned integer.

    Raises:
        ValueError: If data is not exactly 8 bytes.
    """
    if len(data) != U64_SIZE:
        raise ValueError(f"u64 requires {U64_SIZE} bytes, got {len(data)}")
    return int.from_bytes(data, byteorder="big", signed=False)


def item_key(seq: int) -> bytes:
    """Build the storage key for the item with sequence number ``seq``."""
    return ITEM_PREFIX + encode_u64(seq)


def item_seq(key: bytes) -> SequenceNumber:
    """Extract the sequence number from an item key.

    Raises:
        ValueError: If key is not an item key.
    """
    if not is_item_key(key):
        raise ValueError(f"not an item key: {key!r}")
    return SequenceNumber(decode_u64(key[len(ITEM_PREFIX):]))


def is_item_key(key: bytes) -> bool:
    """Return True if key belongs to the item range of a namespace."""
    return len(key) == ITEM_KEY_SIZE and key.startswith(ITEM_PREFIX)
