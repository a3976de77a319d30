"""
Circular Store - durable circular lists over a transactional key-value store

A rotating worklist whose items, insertion order and current pointer live
entirely in storage, so a list survives restarts and can be reopened by a
fresh process.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"

from circular_store.application import CircularList, CurrentItem

__all__ = [
    "CircularList",
    "CurrentItem",
]
