"""Application layer - the public circular list API.

Exports:
    - CircularList: Durable circular list bound to one store namespace
    - CurrentItem: ``(value, index, count)`` result of ``current()``
"""

from circular_store.application.circular_list import CircularList
from circular_store.ports.inbound.circular_list import CurrentItem

__all__ = [
    "CircularList",
    "CurrentItem",
]
