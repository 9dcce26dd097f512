"""Error taxonomy for sorted multimaps.

Every error raised by this package derives from ``SortedMultimapError``.
Argument and data errors also derive from ``ValueError`` so callers that
only care about "bad input" can catch the builtin.

Lookups of absent keys are never errors: ``get``, ``remove_all`` and
friends return empty results instead.
"""

from __future__ import annotations


class SortedMultimapError(Exception):
    """Base class for all sorted multimap errors."""


class InvalidArgumentError(SortedMultimapError, ValueError):
    """Raised when a required argument is missing or cannot be used."""


class NullRejectedError(InvalidArgumentError):
    """Raised when a comparator does not accept ``None`` as an operand.

    The check runs before any mutation, so a rejected insert leaves the
    multimap untouched.
    """


class CorruptDataError(SortedMultimapError, ValueError):
    """Raised when an encoded multimap cannot be decoded."""
