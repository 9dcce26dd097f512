"""Tests for the codec — encode/decode, canonical bytes, dump/load."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from sortedmultimap.core.codec import (
    decode,
    dump,
    encode,
    from_document,
    load,
    parse_document,
    payload_hash,
    to_document,
)
from sortedmultimap.core.comparators import (
    CASEFOLD_ORDER,
    REVERSE_ORDER,
    ComparatorRegistry,
    comparing,
    reverse_order,
)
from sortedmultimap.core.multimap import SortedMultimap
from sortedmultimap.errors import InvalidArgumentError
from sortedmultimap.models.wire import WIRE_FORMAT


class TestEncode:
    def test_document_layout(self, scenario: SortedMultimap):
        doc = to_document(scenario)
        assert doc.format == WIRE_FORMAT
        assert doc.key_comparator == "natural"
        assert doc.value_comparator == "natural"
        assert doc.key_count == 2
        assert [(s.key, s.value_count, s.values) for s in doc.slots] == [
            (1, 1, ["b"]),
            (3, 2, ["a", "b"]),
        ]
        assert doc.entry_count == 3

    def test_payload_hash_is_set(self, scenario: SortedMultimap):
        doc = to_document(scenario)
        assert len(doc.payload_hash) == 64
        assert doc.payload_hash == payload_hash(doc.model_dump())

    def test_encoding_is_deterministic(self, make_multimap):
        a = make_multimap([(3, "a"), (1, "b"), (3, "b")])
        b = make_multimap([(3, "b"), (1, "b"), (3, "a")])
        assert encode(a) == encode(b)

    def test_encoded_bytes_are_json(self, scenario: SortedMultimap):
        raw = json.loads(encode(scenario))
        assert raw["key_count"] == 2
        assert raw["slots"][1] == {"key": 3, "value_count": 2, "values": ["a", "b"]}

    def test_empty_multimap(self, multimap: SortedMultimap):
        doc = to_document(multimap)
        assert doc.key_count == 0
        assert doc.slots == []

    def test_unregistered_comparator_rejected(self):
        mm = SortedMultimap.create(reverse_order(), CASEFOLD_ORDER)
        with pytest.raises(InvalidArgumentError, match="not registered"):
            encode(mm)

    def test_non_json_values_rejected(self, multimap: SortedMultimap):
        multimap.put("k", object())
        with pytest.raises(InvalidArgumentError, match="cannot be encoded"):
            encode(multimap)


class TestLosslessEncoding:
    """Only contents that decode back to identical objects may be encoded."""

    def test_tuple_key_rejected(self, multimap: SortedMultimap):
        multimap.put((1, 2), "a")
        with pytest.raises(InvalidArgumentError, match="tuple"):
            encode(multimap)

    def test_tuple_nested_in_value_rejected(self, multimap: SortedMultimap):
        multimap.put("k", [1, (2, 3)])
        with pytest.raises(InvalidArgumentError, match="tuple"):
            encode(multimap)

    def test_non_string_dict_key_rejected(self, multimap: SortedMultimap):
        multimap.put("k", {1: "one"})
        with pytest.raises(InvalidArgumentError, match="not a str"):
            encode(multimap)

    def test_non_finite_float_rejected(self, multimap: SortedMultimap):
        multimap.put("k", float("inf"))
        with pytest.raises(InvalidArgumentError, match="non-finite"):
            encode(multimap)

    def test_str_subclass_rejected(self, multimap: SortedMultimap):
        class Label(str):
            pass

        multimap.put(Label("k"), 1)
        with pytest.raises(InvalidArgumentError, match="Label"):
            encode(multimap)

    def test_rejection_happens_before_any_output(self, multimap: SortedMultimap, tmp_dir: Path):
        multimap.put((1, 2), "a")
        with pytest.raises(InvalidArgumentError):
            dump(multimap, tmp_dir / "mm.json")
        assert not (tmp_dir / "mm.json").exists()

    def test_json_native_contents_round_trip_exactly(self, multimap: SortedMultimap):
        multimap.put("nested", [1, [2.5, "x"], {"a": None, "b": True}])
        multimap.put("nested", [0])
        multimap.put("scalar", 1.5)
        restored = decode(encode(multimap))
        assert list(restored.entries()) == list(multimap.entries())
        assert [type(v) for v in restored.values()] == [type(v) for v in multimap.values()]


class TestDecode:
    def test_round_trip(self, scenario: SortedMultimap):
        restored = decode(encode(scenario))
        assert list(restored.entries()) == list(scenario.entries())
        assert restored == scenario

    def test_round_trip_keeps_comparators(self, make_multimap):
        mm = make_multimap(
            [("b", "Y"), ("a", "x"), ("b", "z")],
            key_comparator=REVERSE_ORDER,
            value_comparator=CASEFOLD_ORDER,
        )
        restored = decode(encode(mm))
        assert restored.key_comparator is REVERSE_ORDER
        assert restored.value_comparator is CASEFOLD_ORDER
        assert list(restored.entries()) == [("b", "Y"), ("b", "z"), ("a", "x")]

    def test_decode_accepts_str(self, scenario: SortedMultimap):
        assert decode(encode(scenario).decode("utf-8")) == scenario

    def test_custom_registry(self, registry: ComparatorRegistry):
        by_len = comparing(len)
        registry.register("by_len", by_len)
        mm = SortedMultimap.create(by_len, REVERSE_ORDER)
        mm.put("ccc", 1)
        mm.put("a", 2)
        mm.put("a", 5)
        restored = decode(encode(mm, registry), registry)
        assert restored.key_comparator is by_len
        assert list(restored.entries()) == [("a", 5), ("a", 2), ("ccc", 1)]

    def test_parse_document_without_building(self, scenario: SortedMultimap):
        doc = parse_document(encode(scenario))
        assert doc.key_count == 2
        assert from_document(doc) == scenario

    def test_decoded_multimap_is_independent(self, scenario: SortedMultimap):
        restored = decode(encode(scenario))
        restored.put(9, "z")
        assert not scenario.contains_key(9)


class TestFiles:
    def test_dump_and_load(self, scenario: SortedMultimap, tmp_dir: Path):
        path = dump(scenario, tmp_dir / "nested" / "mm.json")
        assert path.exists()
        assert load(path) == scenario

    def test_dump_writes_canonical_bytes(self, scenario: SortedMultimap, tmp_dir: Path):
        path = dump(scenario, tmp_dir / "mm.json")
        assert path.read_bytes() == encode(scenario)
