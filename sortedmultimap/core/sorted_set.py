"""Comparator-ordered set used for per-key value collections.

``SortedValueSet`` is the value-set primitive behind every slot of a
``SortedMultimap`` and the detached snapshot type returned by
``remove_all`` / ``replace_values``.

Ordering lives in a ``sortedcontainers.SortedKeyList`` keyed by
``functools.cmp_to_key(comparator)``. Membership is decided by bisecting to
the candidate position and asking the comparator whether it returns ``0``;
``==`` and ``hash`` are never used, so values need not be hashable.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, MutableSet
from functools import cmp_to_key
from typing import Any

from sortedcontainers import SortedKeyList

from sortedmultimap.core.comparators import Comparator, natural_order
from sortedmultimap.errors import InvalidArgumentError


class SortedValueSet(MutableSet):
    """Mutable set ordered and deduplicated by a comparator.

    Parameters
    ----------
    comparator:
        Total order over the elements. Elements comparing ``0`` are the
        same element; the first one inserted is kept.
    iterable:
        Initial elements, inserted in iteration order.
    """

    def __init__(
        self, comparator: Comparator = natural_order, iterable: Iterable[Any] = ()
    ) -> None:
        if comparator is None:
            raise InvalidArgumentError("SortedValueSet requires a comparator.")
        self._comparator = comparator
        self._sort_key = cmp_to_key(comparator)
        self._items: SortedKeyList = SortedKeyList(key=self._sort_key)
        for value in iterable:
            self.add(value)

    @property
    def comparator(self) -> Comparator:
        """The comparator that orders and deduplicates this set."""
        return self._comparator

    def _find(self, value: Any) -> int:
        """Return the index of the element equivalent to *value*, or -1."""
        index = self._items.bisect_key_left(self._sort_key(value))
        if index < len(self._items) and self._comparator(self._items[index], value) == 0:
            return index
        return -1

    # ------------------------------------------------------------------
    # Set protocol
    # ------------------------------------------------------------------

    def __contains__(self, value: object) -> bool:
        return self._find(value) >= 0

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __reversed__(self) -> Iterator[Any]:
        return reversed(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._items)!r})"

    def _from_iterable(self, iterable: Iterable[Any]) -> SortedValueSet:
        # Set operators (&, |, -, ^) build their results through this hook.
        return SortedValueSet(self._comparator, iterable)

    def add(self, value: Any) -> bool:
        """Insert *value*; return True if the set grew."""
        if self._find(value) >= 0:
            return False
        self._items.add(value)
        return True

    def discard(self, value: Any) -> bool:
        """Remove the element equivalent to *value*; return True if one was removed."""
        index = self._find(value)
        if index < 0:
            return False
        del self._items[index]
        return True

    def clear(self) -> None:
        self._items.clear()

    def pop(self) -> Any:
        """Remove and return the first element (``KeyError`` if empty)."""
        return self.pop_first()

    def copy(self) -> SortedValueSet:
        """Return a detached copy with the same comparator."""
        return SortedValueSet(self._comparator, self._items)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def first(self) -> Any:
        """Return the lowest element; ``IndexError`` if empty."""
        if not self._items:
            raise IndexError("first() on an empty set")
        return self._items[0]

    def last(self) -> Any:
        """Return the highest element; ``IndexError`` if empty."""
        if not self._items:
            raise IndexError("last() on an empty set")
        return self._items[-1]

    def lower(self, value: Any) -> Any | None:
        """Greatest element strictly less than *value*, or None."""
        index = self._items.bisect_key_left(self._sort_key(value))
        return self._items[index - 1] if index > 0 else None

    def floor(self, value: Any) -> Any | None:
        """Greatest element less than or equivalent to *value*, or None."""
        index = self._items.bisect_key_right(self._sort_key(value))
        return self._items[index - 1] if index > 0 else None

    def ceiling(self, value: Any) -> Any | None:
        """Least element greater than or equivalent to *value*, or None."""
        index = self._items.bisect_key_left(self._sort_key(value))
        return self._items[index] if index < len(self._items) else None

    def higher(self, value: Any) -> Any | None:
        """Least element strictly greater than *value*, or None."""
        index = self._items.bisect_key_right(self._sort_key(value))
        return self._items[index] if index < len(self._items) else None

    def pop_first(self) -> Any:
        """Remove and return the lowest element; ``KeyError`` if empty."""
        if not self._items:
            raise KeyError("pop_first() on an empty set")
        return self._items.pop(0)

    def pop_last(self) -> Any:
        """Remove and return the highest element; ``KeyError`` if empty."""
        if not self._items:
            raise KeyError("pop_last() on an empty set")
        return self._items.pop(-1)

    def irange(
        self,
        minimum: Any = None,
        maximum: Any = None,
        inclusive: tuple[bool, bool] = (True, True),
        reverse: bool = False,
    ) -> Iterator[Any]:
        """Iterate elements between *minimum* and *maximum*.

        ``None`` for either bound means unbounded on that side, as in
        ``sortedcontainers``.
        """
        min_key = None if minimum is None else self._sort_key(minimum)
        max_key = None if maximum is None else self._sort_key(maximum)
        return self._items.irange_key(min_key, max_key, inclusive, reverse)
