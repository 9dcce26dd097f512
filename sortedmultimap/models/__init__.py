"""Sorted multimap data models — all Pydantic v2, all frozen (immutable)."""

from sortedmultimap.models.wire import WIRE_FORMAT, EncodedMultimap, EncodedSlot

__all__ = [
    "WIRE_FORMAT",
    "EncodedMultimap",
    "EncodedSlot",
]
