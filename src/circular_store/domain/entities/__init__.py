"""Domain entities for the circular list.

Exports:
    - Sequence: Ordered item keys derived from storage
"""

from circular_store.domain.entities.sequence import Sequence

__all__ = [
    "Sequence",
]
