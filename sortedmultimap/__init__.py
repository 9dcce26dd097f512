"""sortedmultimap: comparator-ordered multimaps with live views.

Each key maps to a non-empty set of values. Keys and values are ordered,
matched and deduplicated by pluggable comparators rather than by equality:
  - Lazy per-key slots, created by the first value and removed with the last
  - Live key-set, per-key, entry and map-of-collections views
  - Detached snapshots from remove_all / replace_values
  - Canonical JSON transport encoding with payload hashing
  - Typer + Rich CLI for grouping JSON-lines records into an index
"""

__version__ = "0.1.0"
__description__ = "Comparator-ordered multimap with live, mutually consistent views"

from sortedmultimap.core.codec import decode, dump, encode, load
from sortedmultimap.core.comparators import (
    CASEFOLD_ORDER,
    NATURAL_NULLS_FIRST,
    NATURAL_NULLS_LAST,
    REVERSE_ORDER,
    ComparatorRegistry,
    comparing,
    default_registry,
    natural_order,
    nulls_first,
    nulls_last,
    reverse_order,
)
from sortedmultimap.core.multimap import SortedMultimap
from sortedmultimap.core.sorted_set import SortedValueSet
from sortedmultimap.errors import (
    CorruptDataError,
    InvalidArgumentError,
    NullRejectedError,
    SortedMultimapError,
)

__all__ = [
    "SortedMultimap",
    "SortedValueSet",
    # codec
    "encode",
    "decode",
    "dump",
    "load",
    # comparators
    "ComparatorRegistry",
    "default_registry",
    "natural_order",
    "reverse_order",
    "nulls_first",
    "nulls_last",
    "comparing",
    "REVERSE_ORDER",
    "NATURAL_NULLS_FIRST",
    "NATURAL_NULLS_LAST",
    "CASEFOLD_ORDER",
    # errors
    "SortedMultimapError",
    "InvalidArgumentError",
    "NullRejectedError",
    "CorruptDataError",
    "__version__",
]
