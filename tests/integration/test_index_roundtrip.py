"""End-to-end integration tests — build, mutate, encode, persist, decode.

These tests drive SortedMultimap, its views, the codec and the CLI together
and check the results against a plain dict-of-sets model.
"""

from __future__ import annotations

import json
import random
from pathlib import Path

import pytest
from typer.testing import CliRunner

from sortedmultimap import (
    CASEFOLD_ORDER,
    REVERSE_ORDER,
    SortedMultimap,
    decode,
    dump,
    encode,
    load,
)
from sortedmultimap.cli.app import app


def _model_entries(model: dict[int, set[int]], reverse_keys: bool = False) -> list[tuple[int, int]]:
    return [
        (key, value)
        for key in sorted(model, reverse=reverse_keys)
        for value in sorted(model[key])
    ]


class TestRandomizedOperations:
    """A seeded random walk of puts and removes must track a dict-of-sets model."""

    @pytest.mark.parametrize("seed", [0, 1, 7, 42])
    def test_matches_model(self, seed: int):
        rng = random.Random(seed)
        mm = SortedMultimap.create()
        model: dict[int, set[int]] = {}

        for _ in range(500):
            key, value = rng.randrange(20), rng.randrange(10)
            op = rng.random()
            if op < 0.6:
                expected = value not in model.get(key, set())
                assert mm.put(key, value) is expected
                model.setdefault(key, set()).add(value)
            elif op < 0.85:
                expected = value in model.get(key, set())
                assert mm.remove(key, value) is expected
                if expected:
                    model[key].discard(value)
                    if not model[key]:
                        del model[key]
            elif op < 0.95:
                removed = mm.remove_all(key)
                assert set(removed) == model.pop(key, set())
            else:
                new_values = [rng.randrange(10) for _ in range(rng.randrange(4))]
                previous = mm.replace_values(key, new_values)
                assert set(previous) == model.pop(key, set())
                if new_values:
                    model[key] = set(new_values)

            assert mm.size() == sum(len(v) for v in model.values())

        assert list(mm.key_set()) == sorted(model)
        assert list(mm.entries()) == _model_entries(model)
        assert all(len(mm.get(key)) > 0 for key in mm.key_set())

    @pytest.mark.parametrize("seed", [3, 11])
    def test_round_trip_after_random_walk(self, seed: int, tmp_dir: Path):
        rng = random.Random(seed)
        mm = SortedMultimap.create(REVERSE_ORDER, REVERSE_ORDER)
        model: dict[int, set[int]] = {}
        for _ in range(200):
            key, value = rng.randrange(15), rng.randrange(15)
            mm.put(key, value)
            model.setdefault(key, set()).add(value)

        entries = list(mm.entries())
        assert [k for k, _ in entries] == sorted((k for k, _ in entries), reverse=True)

        restored = decode(encode(mm))
        assert list(restored.entries()) == entries
        assert encode(restored) == encode(mm)

        loaded = load(dump(mm, tmp_dir / "walk.json"))
        assert loaded == mm


class TestViewsDuringLifecycle:
    def test_views_track_the_whole_lifecycle(self):
        mm = SortedMultimap.create(CASEFOLD_ORDER, CASEFOLD_ORDER)
        keys, as_map, entries = mm.key_set(), mm.as_map(), mm.entries()
        fruit = mm.get("Fruit")

        fruit.add("pear")
        fruit.add("Apple")
        mm.put("veg", "Leek")
        mm.put("FRUIT", "apple")

        assert list(keys) == ["Fruit", "veg"]
        assert list(as_map["fruit"]) == ["Apple", "pear"]
        assert list(entries) == [("Fruit", "Apple"), ("Fruit", "pear"), ("veg", "Leek")]

        restored = decode(encode(mm))
        assert list(restored.entries()) == list(entries)

        fruit.clear()
        assert list(keys) == ["veg"]
        assert "Fruit" not in as_map
        assert len(entries) == 1


class TestCliPipeline:
    def test_group_show_verify(self, tmp_dir: Path):
        rng = random.Random(5)
        source = tmp_dir / "events.jsonl"
        records = [
            {"user": f"u{rng.randrange(5)}", "event": rng.choice(["login", "logout", "view"])}
            for _ in range(40)
        ]
        source.write_text("\n".join(json.dumps(r) for r in records), encoding="utf-8")
        output = tmp_dir / "events.json"

        runner = CliRunner()
        result = runner.invoke(app, [
            "group", str(source), "-k", "user", "-v", "event", "-o", str(output),
        ])
        assert result.exit_code == 0, result.output

        expected = SortedMultimap.copy_of((r["user"], r["event"]) for r in records)
        assert load(output) == expected

        assert runner.invoke(app, ["show", str(output)]).exit_code == 0
        verify = runner.invoke(app, ["verify", str(output)])
        assert verify.exit_code == 0
        assert f"{expected.size()} entries" in verify.output
