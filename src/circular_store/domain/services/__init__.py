"""Domain services for circular lists."""

from circular_store.domain.services import list_state
from circular_store.domain.services.mutations import MutationService
from circular_store.domain.services.order_index import OrderIndex
from circular_store.domain.services.pointer_controller import (
    PointerController,
    RemovedItem,
)

__all__ = [
    "list_state",
    "MutationService",
    "OrderIndex",
    "PointerController",
    "RemovedItem",
]
