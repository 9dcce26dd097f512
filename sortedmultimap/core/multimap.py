"""Sorted multimap: each key maps to a non-empty, comparator-ordered value set.

The multimap owns one ``SortedSlotMap`` from key to ``SortedValueSet``.
Invariants held by every public method:

- No slot is ever empty. The slot for a key is created by the first value
  inserted for it and removed the moment its last value goes.
- Keys are matched by the key comparator and values by the value
  comparator. ``==`` and ``hash`` are never consulted.
- Views (``get``, ``key_set``, ``as_map``, ``entries``, ``values``) are live
  and write back through ``put`` / ``remove`` / ``remove_all``.
  ``remove_all`` and ``replace_values`` are the only methods that hand out
  detached snapshots.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from sortedmultimap.core.comparators import Comparator, check_accepts_none, natural_order
from sortedmultimap.core.sorted_map import SortedSlotMap
from sortedmultimap.core.sorted_set import SortedValueSet
from sortedmultimap.core.views import (
    AsMapView,
    EntriesView,
    FlatValuesView,
    KeySetView,
    ValueSetView,
)
from sortedmultimap.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class SortedMultimap:
    """Multimap with comparator-ordered keys and comparator-ordered value sets.

    Not thread-safe. Concurrent readers are fine as long as nothing mutates
    the multimap at the same time; any read racing a write is undefined.
    Wrap the instance in your own lock if you need concurrent writers.

    Parameters
    ----------
    key_comparator:
        Total order over keys. Use ``natural_order`` for ``<`` ordering.
    value_comparator:
        Total order over the values stored under one key.

    Examples
    --------
    >>> mm = SortedMultimap.create()
    >>> mm.put(3, "a"), mm.put(1, "b"), mm.put(3, "b"), mm.put(1, "b")
    (True, True, True, False)
    >>> list(mm.entries())
    [(1, 'b'), (3, 'a'), (3, 'b')]
    """

    def __init__(
        self,
        key_comparator: Comparator = natural_order,
        value_comparator: Comparator = natural_order,
    ) -> None:
        if key_comparator is None:
            raise InvalidArgumentError(
                "key_comparator is required; pass natural_order for natural ordering."
            )
        if value_comparator is None:
            raise InvalidArgumentError(
                "value_comparator is required; pass natural_order for natural ordering."
            )
        self._key_comparator = key_comparator
        self._value_comparator = value_comparator
        self._map = SortedSlotMap(key_comparator)
        self._total = 0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        key_comparator: Comparator = natural_order,
        value_comparator: Comparator = natural_order,
    ) -> SortedMultimap:
        """Create an empty multimap (natural ordering unless told otherwise)."""
        return cls(key_comparator, value_comparator)

    @classmethod
    def copy_of(cls, source: Any) -> SortedMultimap:
        """Create a naturally ordered multimap holding every pair from *source*.

        *source* may be a ``SortedMultimap``, a mapping of key to an
        iterable of values (not a bare ``str``), or an iterable of
        ``(key, value)`` pairs. Pairs are inserted in the order the source
        yields them.
        """
        multimap = cls()
        multimap.put_all_from(source)
        logger.debug(
            "Copied %d entries under %d keys.", multimap.size(), len(multimap._map)
        )
        return multimap

    @property
    def key_comparator(self) -> Comparator:
        return self._key_comparator

    @property
    def value_comparator(self) -> Comparator:
        return self._value_comparator

    # ------------------------------------------------------------------
    # Internal access used by the views
    # ------------------------------------------------------------------

    def _values_for(self, key: Any) -> SortedValueSet | None:
        """Return the backing value set for *key*, or None if no slot exists."""
        return self._map.get(key)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def put(self, key: Any, value: Any) -> bool:
        """Store *value* under *key*.

        Returns True if the entry is new, False if an equivalent value was
        already stored under an equivalent key.

        Raises
        ------
        NullRejectedError
            If *key* (or *value*) is None and its comparator rejects None.
            Nothing is modified in that case.
        """
        if key is None:
            check_accepts_none(self._key_comparator, "key")
        if value is None:
            check_accepts_none(self._value_comparator, "value")

        values = self._values_for(key)
        if values is None:
            values = SortedValueSet(self._value_comparator)
            values.add(value)
            self._map[key] = values
            logger.debug("Created slot for key %r.", key)
        elif not values.add(value):
            return False
        self._total += 1
        return True

    def put_all(self, key: Any, values: Iterable[Any]) -> bool:
        """Store every item of *values* under *key*; True if anything changed.

        A bare ``str`` or ``bytes`` is rejected rather than split into
        characters; wrap it in a list to store it as one value.
        """
        changed = False
        for value in _collect_values(key, values):
            changed |= self.put(key, value)
        return changed

    def put_all_from(self, source: Any) -> bool:
        """Store every pair from another multimap, mapping, or pair iterable."""
        changed = False
        for key, value in list(_iter_pairs(source)):
            changed |= self.put(key, value)
        return changed

    def remove(self, key: Any, value: Any) -> bool:
        """Remove one entry; True if it was present.

        Removing the last value under a key removes the key.
        """
        values = self._values_for(key)
        if values is None or not values.discard(value):
            return False
        self._total -= 1
        if not values:
            del self._map[key]
            logger.debug("Removed empty slot for key %r.", key)
        return True

    def remove_all(self, key: Any) -> SortedValueSet:
        """Remove *key* and return its former values as a detached set.

        Returns an empty set if the key was absent.
        """
        values = self._map.pop(key, None)
        if values is None:
            return SortedValueSet(self._value_comparator)
        self._total -= len(values)
        logger.debug("Removed slot for key %r (%d values).", key, len(values))
        return values

    def replace_values(self, key: Any, new_values: Iterable[Any]) -> SortedValueSet:
        """Replace every value under *key* with *new_values*.

        Duplicates in *new_values* collapse; an empty iterable removes the
        key. Returns the previous values as a detached set.
        """
        incoming = _collect_values(key, new_values)
        previous = self.remove_all(key)
        self.put_all(key, incoming)
        return previous

    def clear(self) -> None:
        self._map.clear()
        self._total = 0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, key: Any) -> ValueSetView:
        """Return the live view of the values under *key*.

        The view is empty when *key* is absent, and adding to it creates the
        key.
        """
        return ValueSetView(self, key)

    def __getitem__(self, key: Any) -> ValueSetView:
        return self.get(key)

    def contains_key(self, key: Any) -> bool:
        return key in self._map

    def __contains__(self, key: object) -> bool:
        return self.contains_key(key)

    def contains_value(self, value: Any) -> bool:
        return any(value in values for _key, values in self._map.iter_items())

    def contains_entry(self, key: Any, value: Any) -> bool:
        values = self._values_for(key)
        return values is not None and value in values

    def size(self) -> int:
        """Number of (key, value) entries, not distinct keys."""
        return self._total

    def __len__(self) -> int:
        return self._total

    def is_empty(self) -> bool:
        return self._total == 0

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def key_set(self) -> KeySetView:
        return KeySetView(self)

    def as_map(self) -> AsMapView:
        return AsMapView(self)

    def entries(self) -> EntriesView:
        return EntriesView(self)

    def values(self) -> FlatValuesView:
        return FlatValuesView(self)

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SortedMultimap):
            return NotImplemented
        return self.as_map() == other.as_map()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.as_map()!r})"


def _iter_pairs(source: Any) -> Iterator[tuple[Any, Any]]:
    """Yield ``(key, value)`` pairs from any supported copy source."""
    if isinstance(source, SortedMultimap):
        return iter(source.entries())
    if isinstance(source, Mapping):
        return (
            (key, value)
            for key, values in source.items()
            for value in _collect_values(key, values)
        )
    return iter(source)


def _collect_values(key: Any, values: Iterable[Any]) -> list[Any]:
    """Materialize *values* for *key*, refusing a bare string or bytes object."""
    if isinstance(values, (str, bytes, bytearray)):
        raise InvalidArgumentError(
            f"Values for key {key!r} must be an iterable of values, not "
            f"{type(values).__name__} {values!r}; wrap a single value in a list."
        )
    return list(values)
