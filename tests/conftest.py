"""Shared test fixtures for sortedmultimap."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import pytest

from sortedmultimap.core.comparators import (
    Comparator,
    ComparatorRegistry,
    natural_order,
)
from sortedmultimap.core.multimap import SortedMultimap


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def multimap() -> SortedMultimap:
    """Provide an empty, naturally ordered multimap."""
    return SortedMultimap.create()


@pytest.fixture
def scenario(multimap: SortedMultimap) -> SortedMultimap:
    """The reference multimap: put(3,a), put(1,b), put(3,b), put(1,b)."""
    multimap.put(3, "a")
    multimap.put(1, "b")
    multimap.put(3, "b")
    multimap.put(1, "b")
    return multimap


@pytest.fixture
def registry() -> ComparatorRegistry:
    """Provide a fresh registry with only the built-in comparators."""
    return ComparatorRegistry()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_multimap() -> Callable[..., SortedMultimap]:
    """Factory fixture: build a populated multimap from (key, value) pairs."""

    def _factory(
        pairs: Iterable[tuple[Any, Any]] = (),
        key_comparator: Comparator = natural_order,
        value_comparator: Comparator = natural_order,
    ) -> SortedMultimap:
        mm = SortedMultimap.create(key_comparator, value_comparator)
        for key, value in pairs:
            mm.put(key, value)
        return mm

    return _factory
