"""Sequence snapshot - the ordered item keys of one list.

A Sequence is never persisted. It is derived by the order index inside a
transaction and is only meaningful within that transaction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from circular_store.domain.value_objects import SequenceNumber, item_seq


@dataclass(frozen=True, slots=True)
class Sequence:
    """Ordered item keys of a list, ascending by sequence number.

    Attributes:
        keys: Item storage keys in insertion order.

    Example:
        >>> seq = Sequence((item_key(0), item_key(3)))
        >>> len(seq)
        2
        >>> seq.clamp(5)
        0
    """

    keys: tuple[bytes, ...] = ()

    def __len__(self) -> int:
        return len(self.keys)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.keys)

    def __bool__(self) -> bool:
        return bool(self.keys)

    def key_at(self, index: int) -> bytes:
        """Return the item key at ``index``.

        Raises:
            IndexError: If index is outside the sequence.
        """
        if not 0 <= index < len(self.keys):
            raise IndexError(f"index {index} outside sequence of {len(self.keys)}")
        return self.keys[index]

    def clamp(self, pointer: int) -> int:
        """Normalise a stored pointer against this sequence.

        Out-of-range pointers map to 0, as does any pointer on an empty
        sequence.
        """
        if 0 <= pointer < len(self.keys):
            return pointer
        return 0

    def sequence_numbers(self) -> list[SequenceNumber]:
        """Return the sequence numbers of all items, in order."""
        return [item_seq(key) for key in self.keys]
