"""Tests for SortedSlotMap — the comparator-keyed backing map."""

from __future__ import annotations

import pytest

from sortedmultimap.core.comparators import CASEFOLD_ORDER, natural_order
from sortedmultimap.core.sorted_map import SortedSlotMap


class TestSortedSlotMap:
    def test_keys_iterate_in_order(self):
        m = SortedSlotMap(natural_order)
        for k in (3, 1, 2):
            m[k] = str(k)
        assert list(m) == [1, 2, 3]
        assert list(reversed(m)) == [3, 2, 1]

    def test_equivalent_key_shares_slot_and_keeps_original(self):
        m = SortedSlotMap(CASEFOLD_ORDER)
        m["Key"] = 1
        m["KEY"] = 2
        assert len(m) == 1
        assert m["key"] == 2
        assert m.stored_key("kEy") == "Key"

    def test_delete_missing_raises(self):
        m = SortedSlotMap(natural_order)
        with pytest.raises(KeyError):
            del m[1]

    def test_get_and_pop_defaults(self):
        m = SortedSlotMap(natural_order)
        m[1] = "a"
        assert m.get(2) is None
        assert m.pop(2, "fallback") == "fallback"
        assert m.pop(1) == "a"
        assert len(m) == 0

    def test_iter_items(self):
        m = SortedSlotMap(natural_order)
        m[2] = "b"
        m[1] = "a"
        assert list(m.iter_items()) == [(1, "a"), (2, "b")]
        assert list(m.iter_items(reverse=True)) == [(2, "b"), (1, "a")]

    def test_navigation(self):
        m = SortedSlotMap(natural_order)
        for k in (10, 20, 30):
            m[k] = k
        assert m.first_key() == 10
        assert m.last_key() == 30
        assert m.lower_key(20) == 10
        assert m.floor_key(25) == 20
        assert m.ceiling_key(25) == 30
        assert m.higher_key(30) is None
        assert list(m.irange(20)) == [20, 30]

    def test_first_key_on_empty_raises(self):
        with pytest.raises(IndexError):
            SortedSlotMap(natural_order).first_key()
