"""Inbound ports - API contracts for circular lists."""

from circular_store.ports.inbound.circular_list import (
    CircularListError,
    CircularListPort,
    CurrentItem,
    KeySpaceExhaustedError,
    MissingMetaError,
)

__all__ = [
    "CircularListPort",
    "CurrentItem",
    "CircularListError",
    "MissingMetaError",
    "KeySpaceExhaustedError",
]
