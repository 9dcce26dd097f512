"""Live views over a ``SortedMultimap``.

Every view holds a reference to its multimap and, for the per-key view, the
key it looks at. Nothing is cached: each read resolves the current backing
state, and each write goes through the multimap's own mutation methods, so
slot creation and empty-slot removal happen in one place.

Views stay valid only as long as their multimap does. Mutating the multimap
while iterating a view is undefined.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Iterator, Mapping, MutableSet, Set
from typing import TYPE_CHECKING, Any

from sortedmultimap.core.comparators import Comparator
from sortedmultimap.core.sorted_set import SortedValueSet

if TYPE_CHECKING:
    from sortedmultimap.core.multimap import SortedMultimap

_MISSING = object()


# ---------------------------------------------------------------------------
# Per-key values
# ---------------------------------------------------------------------------

class ValueSetView(MutableSet):
    """Live, ordered view of the values stored under one key.

    The view exists whether or not the key is present. For an absent key it
    reads as empty, and the first successful ``add`` creates the slot.
    Removing the last value removes the key from the multimap.
    """

    def __init__(self, multimap: SortedMultimap, key: Any) -> None:
        self._multimap = multimap
        self._key = key

    def _delegate(self) -> SortedValueSet | None:
        return self._multimap._values_for(self._key)

    @property
    def key(self) -> Any:
        return self._key

    @property
    def comparator(self) -> Comparator:
        return self._multimap.value_comparator

    def __contains__(self, value: object) -> bool:
        values = self._delegate()
        return values is not None and value in values

    def __iter__(self) -> Iterator[Any]:
        values = self._delegate()
        return iter(values) if values is not None else iter(())

    def __reversed__(self) -> Iterator[Any]:
        values = self._delegate()
        return reversed(values) if values is not None else iter(())

    def __len__(self) -> int:
        values = self._delegate()
        return len(values) if values is not None else 0

    def __repr__(self) -> str:
        return repr(list(self))

    def _from_iterable(self, iterable: Iterable[Any]) -> SortedValueSet:
        return SortedValueSet(self._multimap.value_comparator, iterable)

    def add(self, value: Any) -> bool:
        """Insert *value* under this view's key; True if it was new."""
        return self._multimap.put(self._key, value)

    def discard(self, value: Any) -> bool:
        """Remove *value* from this view's key; True if it was present."""
        return self._multimap.remove(self._key, value)

    def clear(self) -> None:
        self._multimap.remove_all(self._key)

    def pop(self) -> Any:
        return self.pop_first()

    def copy(self) -> SortedValueSet:
        """Return a detached snapshot of the current values."""
        return SortedValueSet(self._multimap.value_comparator, self)

    def first(self) -> Any:
        values = self._delegate()
        if values is None:
            raise IndexError(f"first() on empty values for key {self._key!r}")
        return values.first()

    def last(self) -> Any:
        values = self._delegate()
        if values is None:
            raise IndexError(f"last() on empty values for key {self._key!r}")
        return values.last()

    def lower(self, value: Any) -> Any | None:
        values = self._delegate()
        return values.lower(value) if values is not None else None

    def floor(self, value: Any) -> Any | None:
        values = self._delegate()
        return values.floor(value) if values is not None else None

    def ceiling(self, value: Any) -> Any | None:
        values = self._delegate()
        return values.ceiling(value) if values is not None else None

    def higher(self, value: Any) -> Any | None:
        values = self._delegate()
        return values.higher(value) if values is not None else None

    def pop_first(self) -> Any:
        values = self._delegate()
        if values is None:
            raise KeyError(f"pop_first() on empty values for key {self._key!r}")
        value = values.first()
        self._multimap.remove(self._key, value)
        return value

    def pop_last(self) -> Any:
        values = self._delegate()
        if values is None:
            raise KeyError(f"pop_last() on empty values for key {self._key!r}")
        value = values.last()
        self._multimap.remove(self._key, value)
        return value

    def irange(
        self,
        minimum: Any = None,
        maximum: Any = None,
        inclusive: tuple[bool, bool] = (True, True),
        reverse: bool = False,
    ) -> Iterator[Any]:
        values = self._delegate()
        if values is None:
            return iter(())
        return values.irange(minimum, maximum, inclusive, reverse)


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------

class KeySetView(Set):
    """Live, ordered set of the distinct keys.

    Keys cannot be added through this view; removing a key removes every
    value stored under it.
    """

    def __init__(self, multimap: SortedMultimap) -> None:
        self._multimap = multimap

    @property
    def comparator(self) -> Comparator:
        return self._multimap.key_comparator

    def __contains__(self, key: object) -> bool:
        return self._multimap.contains_key(key)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._multimap._map)

    def __reversed__(self) -> Iterator[Any]:
        return reversed(self._multimap._map)

    def __len__(self) -> int:
        return len(self._multimap._map)

    def __repr__(self) -> str:
        return repr(list(self))

    def _from_iterable(self, iterable: Iterable[Any]) -> SortedValueSet:
        return SortedValueSet(self._multimap.key_comparator, iterable)

    def discard(self, key: Any) -> bool:
        """Remove *key* and all of its values; True if it was present."""
        return len(self._multimap.remove_all(key)) > 0

    def remove(self, key: Any) -> None:
        if not self.discard(key):
            raise KeyError(key)

    def clear(self) -> None:
        self._multimap.clear()

    def first(self) -> Any:
        return self._multimap._map.first_key()

    def last(self) -> Any:
        return self._multimap._map.last_key()

    def lower(self, key: Any) -> Any | None:
        return self._multimap._map.lower_key(key)

    def floor(self, key: Any) -> Any | None:
        return self._multimap._map.floor_key(key)

    def ceiling(self, key: Any) -> Any | None:
        return self._multimap._map.ceiling_key(key)

    def higher(self, key: Any) -> Any | None:
        return self._multimap._map.higher_key(key)

    def pop_first(self) -> Any:
        if not self:
            raise KeyError("pop_first() on an empty key set")
        key = self.first()
        self._multimap.remove_all(key)
        return key

    def pop_last(self) -> Any:
        if not self:
            raise KeyError("pop_last() on an empty key set")
        key = self.last()
        self._multimap.remove_all(key)
        return key

    def irange(
        self,
        minimum: Any = None,
        maximum: Any = None,
        inclusive: tuple[bool, bool] = (True, True),
        reverse: bool = False,
    ) -> Iterator[Any]:
        return self._multimap._map.irange(minimum, maximum, inclusive, reverse)


# ---------------------------------------------------------------------------
# Map of key -> values
# ---------------------------------------------------------------------------

class AsMapView(Mapping):
    """Live, ordered mapping of each key to its live ``ValueSetView``.

    Follows the ``Mapping`` protocol: indexing an absent key raises
    ``KeyError``. Entries cannot be assigned, but deleting a key removes its
    whole slot.
    """

    def __init__(self, multimap: SortedMultimap) -> None:
        self._multimap = multimap

    def __getitem__(self, key: Any) -> ValueSetView:
        if not self._multimap.contains_key(key):
            raise KeyError(key)
        return ValueSetView(self._multimap, self._multimap._map.stored_key(key))

    def __contains__(self, key: object) -> bool:
        return self._multimap.contains_key(key)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._multimap._map)

    def __len__(self) -> int:
        return len(self._multimap._map)

    def __delitem__(self, key: Any) -> None:
        if not self._multimap.contains_key(key):
            raise KeyError(key)
        self._multimap.remove_all(key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        if len(self) != len(other):
            return False
        for key, values in self.items():
            try:
                other_values = other[key]
            except KeyError:
                return False
            if values != other_values:
                return False
        return True

    def __repr__(self) -> str:
        return "{" + ", ".join(f"{key!r}: {values!r}" for key, values in self.items()) + "}"

    def keys(self) -> KeySetView:  # type: ignore[override]
        return self._multimap.key_set()

    def pop(self, key: Any, default: Any = _MISSING) -> Any:
        """Remove *key* and return its former values as a detached set."""
        if not self._multimap.contains_key(key):
            if default is _MISSING:
                raise KeyError(key)
            return default
        return self._multimap.remove_all(key)

    def clear(self) -> None:
        self._multimap.clear()

    def first_key(self) -> Any:
        return self._multimap._map.first_key()

    def last_key(self) -> Any:
        return self._multimap._map.last_key()

    def lower_key(self, key: Any) -> Any | None:
        return self._multimap._map.lower_key(key)

    def floor_key(self, key: Any) -> Any | None:
        return self._multimap._map.floor_key(key)

    def ceiling_key(self, key: Any) -> Any | None:
        return self._multimap._map.ceiling_key(key)

    def higher_key(self, key: Any) -> Any | None:
        return self._multimap._map.higher_key(key)


# ---------------------------------------------------------------------------
# Flattened sequences
# ---------------------------------------------------------------------------

class EntriesView(Collection):
    """Live ``(key, value)`` sequence: keys in key order, then values in value order.

    Each ``iter()`` starts a fresh traversal of the current state.
    """

    def __init__(self, multimap: SortedMultimap) -> None:
        self._multimap = multimap

    def __iter__(self) -> Iterator[tuple[Any, Any]]:
        for key, values in self._multimap._map.iter_items():
            for value in values:
                yield key, value

    def __len__(self) -> int:
        return self._multimap.size()

    def __contains__(self, entry: object) -> bool:
        try:
            key, value = entry  # type: ignore[misc]
        except (TypeError, ValueError):
            return False
        return self._multimap.contains_entry(key, value)

    def __repr__(self) -> str:
        return repr(list(self))


class FlatValuesView(Collection):
    """Live sequence of every value, in the same order as ``EntriesView``."""

    def __init__(self, multimap: SortedMultimap) -> None:
        self._multimap = multimap

    def __iter__(self) -> Iterator[Any]:
        for _key, values in self._multimap._map.iter_items():
            yield from values

    def __len__(self) -> int:
        return self._multimap.size()

    def __contains__(self, value: object) -> bool:
        return self._multimap.contains_value(value)

    def __repr__(self) -> str:
        return repr(list(self))
