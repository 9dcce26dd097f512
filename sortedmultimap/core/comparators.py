"""Comparators and the comparator registry.

A comparator is any callable ``(left, right) -> int`` returning a negative
number, zero or a positive number, the same shape ``functools.cmp_to_key``
accepts. Two operands are treated as the same element iff the comparator
returns ``0``; equality and hashing are never consulted.

The registry maps stable names to comparators so that the wire format can
record which orderings a multimap was built with (see ``core.codec``).
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from sortedmultimap.errors import InvalidArgumentError, NullRejectedError

logger = logging.getLogger(__name__)

Comparator = Callable[[Any, Any], int]


# ---------------------------------------------------------------------------
# Orderings
# ---------------------------------------------------------------------------

def natural_order(left: Any, right: Any) -> int:
    """Order operands by their own ``<`` operator.

    Incomparable operands (including ``None``) raise ``TypeError``.
    """
    if left < right:
        return -1
    if right < left:
        return 1
    return 0


def reverse_order(comparator: Comparator = natural_order) -> Comparator:
    """Return a comparator that inverts *comparator*."""

    def compare(left: Any, right: Any) -> int:
        return comparator(right, left)

    return compare


def nulls_first(comparator: Comparator = natural_order) -> Comparator:
    """Return a comparator that sorts ``None`` before every other operand."""

    def compare(left: Any, right: Any) -> int:
        if left is None:
            return 0 if right is None else -1
        if right is None:
            return 1
        return comparator(left, right)

    return compare


def nulls_last(comparator: Comparator = natural_order) -> Comparator:
    """Return a comparator that sorts ``None`` after every other operand."""

    def compare(left: Any, right: Any) -> int:
        if left is None:
            return 0 if right is None else 1
        if right is None:
            return -1
        return comparator(left, right)

    return compare


def comparing(
    key_func: Callable[[Any], Any], comparator: Comparator = natural_order
) -> Comparator:
    """Return a comparator that orders operands by ``key_func(operand)``."""

    def compare(left: Any, right: Any) -> int:
        return comparator(key_func(left), key_func(right))

    return compare


def check_accepts_none(comparator: Comparator, role: str) -> None:
    """Probe ``comparator(None, None)`` and fail fast if it is rejected.

    Raises
    ------
    NullRejectedError
        If the comparator raises when handed ``None``.
    """
    try:
        comparator(None, None)
    except Exception as exc:
        raise NullRejectedError(
            f"The {role} comparator does not accept None: {exc}"
        ) from exc


REVERSE_ORDER: Comparator = reverse_order(natural_order)
NATURAL_NULLS_FIRST: Comparator = nulls_first(natural_order)
NATURAL_NULLS_LAST: Comparator = nulls_last(natural_order)
CASEFOLD_ORDER: Comparator = comparing(str.casefold)

_BUILTIN_COMPARATORS: dict[str, Comparator] = {
    "natural": natural_order,
    "reverse": REVERSE_ORDER,
    "natural_nulls_first": NATURAL_NULLS_FIRST,
    "natural_nulls_last": NATURAL_NULLS_LAST,
    "casefold": CASEFOLD_ORDER,
}


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class ComparatorRegistry:
    """Two-way mapping between comparator names and comparator callables.

    Comparators are matched by identity: ``reverse_order()`` builds a new
    callable on every call, so register the exact object you construct
    multimaps with.

    Parameters
    ----------
    include_builtins:
        Pre-register ``natural``, ``reverse``, ``natural_nulls_first``,
        ``natural_nulls_last`` and ``casefold``.
    """

    def __init__(self, *, include_builtins: bool = True) -> None:
        self._by_name: dict[str, Comparator] = {}
        self._by_comparator: dict[Comparator, str] = {}
        if include_builtins:
            for name, comparator in _BUILTIN_COMPARATORS.items():
                self._by_name[name] = comparator
                self._by_comparator[comparator] = name

    def register(
        self, name: str, comparator: Comparator, *, replace: bool = False
    ) -> None:
        """Register *comparator* under *name*.

        Raises ``InvalidArgumentError`` if the name is empty, the comparator
        is not callable, or the name is taken and ``replace`` is False.
        """
        if not name:
            raise InvalidArgumentError("Comparator name must be a non-empty string.")
        if comparator is None or not callable(comparator):
            raise InvalidArgumentError(f"Comparator {name!r} is not callable.")
        if name in self._by_name and not replace:
            raise InvalidArgumentError(f"Comparator {name!r} is already registered.")

        previous = self._by_name.get(name)
        if previous is not None:
            self._by_comparator.pop(previous, None)
        self._by_name[name] = comparator
        self._by_comparator[comparator] = name
        logger.info("Registered comparator %r.", name)

    def resolve(self, name: str) -> Comparator:
        """Return the comparator registered under *name*."""
        try:
            return self._by_name[name]
        except KeyError:
            raise InvalidArgumentError(f"Unknown comparator name: {name!r}") from None

    def name_of(self, comparator: Comparator) -> str:
        """Return the registered name of *comparator*."""
        try:
            return self._by_comparator[comparator]
        except (KeyError, TypeError):
            raise InvalidArgumentError(
                f"Comparator {comparator!r} is not registered and cannot be encoded."
            ) from None

    def names(self) -> list[str]:
        """Return all registered names, sorted."""
        return sorted(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name


# Module-level singleton, used by the codec unless a registry is passed in.
default_registry = ComparatorRegistry()
