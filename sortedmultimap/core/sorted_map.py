"""Comparator-ordered mapping used as the multimap's backing map.

Keys are located by bisecting a ``SortedKeyList`` of slots and confirming
with the comparator, so two key objects that compare ``0`` share one slot.
The key object that created a slot is the one kept; assigning through an
equivalent key only replaces the value.
"""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from functools import cmp_to_key
from typing import Any

from sortedcontainers import SortedKeyList

from sortedmultimap.core.comparators import Comparator


class _Slot:
    __slots__ = ("key", "value")

    def __init__(self, key: Any, value: Any) -> None:
        self.key = key
        self.value = value


class SortedSlotMap(MutableMapping):
    """Mutable mapping whose keys are ordered and matched by a comparator."""

    def __init__(self, comparator: Comparator) -> None:
        self._comparator = comparator
        self._sort_key = cmp_to_key(comparator)
        self._slots: SortedKeyList = SortedKeyList(key=self._slot_key)

    def _slot_key(self, slot: _Slot) -> Any:
        return self._sort_key(slot.key)

    @property
    def comparator(self) -> Comparator:
        return self._comparator

    def _find(self, key: Any) -> int:
        """Return the index of the slot for *key*, or -1."""
        index = self._slots.bisect_key_left(self._sort_key(key))
        if index < len(self._slots) and self._comparator(self._slots[index].key, key) == 0:
            return index
        return -1

    # ------------------------------------------------------------------
    # Mapping protocol
    # ------------------------------------------------------------------

    def __getitem__(self, key: Any) -> Any:
        index = self._find(key)
        if index < 0:
            raise KeyError(key)
        return self._slots[index].value

    def __setitem__(self, key: Any, value: Any) -> None:
        index = self._find(key)
        if index >= 0:
            self._slots[index].value = value
        else:
            self._slots.add(_Slot(key, value))

    def __delitem__(self, key: Any) -> None:
        index = self._find(key)
        if index < 0:
            raise KeyError(key)
        del self._slots[index]

    def __contains__(self, key: object) -> bool:
        return self._find(key) >= 0

    def __iter__(self) -> Iterator[Any]:
        return (slot.key for slot in self._slots)

    def __reversed__(self) -> Iterator[Any]:
        return (slot.key for slot in reversed(self._slots))

    def __len__(self) -> int:
        return len(self._slots)

    def clear(self) -> None:
        self._slots.clear()

    def iter_items(self, reverse: bool = False) -> Iterator[tuple[Any, Any]]:
        """Iterate ``(key, value)`` pairs in key order without re-lookups."""
        slots = reversed(self._slots) if reverse else iter(self._slots)
        return ((slot.key, slot.value) for slot in slots)

    def stored_key(self, key: Any) -> Any:
        """Return the key object held for the slot equivalent to *key*."""
        index = self._find(key)
        if index < 0:
            raise KeyError(key)
        return self._slots[index].key

    # ------------------------------------------------------------------
    # Navigation (keys)
    # ------------------------------------------------------------------

    def first_key(self) -> Any:
        if not self._slots:
            raise IndexError("first_key() on an empty map")
        return self._slots[0].key

    def last_key(self) -> Any:
        if not self._slots:
            raise IndexError("last_key() on an empty map")
        return self._slots[-1].key

    def lower_key(self, key: Any) -> Any | None:
        index = self._slots.bisect_key_left(self._sort_key(key))
        return self._slots[index - 1].key if index > 0 else None

    def floor_key(self, key: Any) -> Any | None:
        index = self._slots.bisect_key_right(self._sort_key(key))
        return self._slots[index - 1].key if index > 0 else None

    def ceiling_key(self, key: Any) -> Any | None:
        index = self._slots.bisect_key_left(self._sort_key(key))
        return self._slots[index].key if index < len(self._slots) else None

    def higher_key(self, key: Any) -> Any | None:
        index = self._slots.bisect_key_right(self._sort_key(key))
        return self._slots[index].key if index < len(self._slots) else None

    def irange(
        self,
        minimum: Any = None,
        maximum: Any = None,
        inclusive: tuple[bool, bool] = (True, True),
        reverse: bool = False,
    ) -> Iterator[Any]:
        """Iterate keys between *minimum* and *maximum* (None = unbounded)."""
        min_key = None if minimum is None else self._sort_key(minimum)
        max_key = None if maximum is None else self._sort_key(maximum)
        slots = self._slots.irange_key(min_key, max_key, inclusive, reverse)
        return (slot.key for slot in slots)
