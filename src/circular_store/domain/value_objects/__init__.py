"""Value objects for the circular list domain.

Exports:
    Keys:
        - SequenceNumber: Type-safe insertion sequence number
        - encode_u64, decode_u64: 8-byte big-endian integer codec
        - item_key, item_seq, is_item_key: Item key construction and parsing
        - ITEM_PREFIX, CURRENT_KEY, NEXT_KEY: Namespace layout constants
"""

from circular_store.domain.value_objects.keys import (
    CURRENT_KEY,
    ITEM_KEY_SIZE,
    ITEM_PREFIX,
    NEXT_KEY,
    U64_LIMIT,
    U64_SIZE,
    SequenceNumber,
    decode_u64,
    encode_u64,
    is_item_key,
    item_key,
    item_seq,
)

__all__ = [
    "SequenceNumber",
    "encode_u64",
    "decode_u64",
    "item_key",
    "item_seq",
    "is_item_key",
    "ITEM_PREFIX",
    "ITEM_KEY_SIZE",
    "CURRENT_KEY",
    "NEXT_KEY",
    "U64_SIZE",
    "U64_LIMIT",
]
