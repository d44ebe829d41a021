"""
tests/unit/test_builder_catalog.py
==================================
Tests for waba/builder.py, waba/catalog.py and the Framework /
Extension data types.
"""

import json

import pytest

from waba.builder import FrameworkBuilder, FrameworkLoader
from waba.catalog import CatalogEntry, get_example, list_examples
from waba.core.exceptions import InvalidFramework
from waba.core.types import POS_INF, Framework, Rule, Weight
from waba.engine.solver import solve

W = Weight.finite


class TestFrameworkBuilder:
    def test_fluent_build(self, weighted_mutual):
        assert weighted_mutual.name == "weighted_mutual"
        assert weighted_mutual.assumptions == {"a", "b"}
        assert weighted_mutual.contraries == {"a": "c_a", "b": "c_b"}
        assert weighted_mutual.weights == {"a": W(80), "b": W(60)}
        assert [r.id for r in weighted_mutual.rules] == ["r1", "r2"]

    def test_second_contrary_is_rejected(self):
        builder = FrameworkBuilder().assumption("a", contrary="x")
        builder.contrary("a", "x")
        with pytest.raises(ValueError, match="already has contrary"):
            builder.contrary("a", "y")

    def test_facts_and_sentinel_weights(self):
        fw = (FrameworkBuilder()
              .assumptions("a", "b")
              .fact("f", weight="#sup", rule_id="base")
              .rule("g", "f", "a")
              .build())
        assert fw.rules[0] == Rule("base", "f")
        assert fw.rules[0].is_fact
        assert fw.rules[1].id == "r2"
        assert fw.weights["f"] == POS_INF

    def test_build_validates(self):
        with pytest.raises(InvalidFramework):
            FrameworkBuilder().assumption("bad atom").build()
        fw = FrameworkBuilder().assumption("bad atom").build(validate=False)
        assert "bad atom" in fw.assumptions

    def test_named(self):
        assert FrameworkBuilder().named("later").build().name == "later"


class TestFramework:
    def test_indexes(self, total_conflict):
        assert total_conflict.victims["c_a"] == ("a",)
        assert len(total_conflict.rules_by_head["c_a"]) == 2
        assert total_conflict.is_flat
        assert total_conflict.contrary_of("a") == "c_a"
        assert total_conflict.contrary_of("c_a") is None
        assert total_conflict.summary() == {
            "assumptions": 3, "rules": 6, "contraries": 3, "weights": 0, "atoms": 6,
        }

    def test_immutable_mappings(self, weighted_mutual):
        with pytest.raises(TypeError):
            weighted_mutual.weights["a"] = W(1)

    def test_dict_round_trip(self, weighted_mutual):
        data = weighted_mutual.to_dict()
        assert data["weights"] == {"a": 80, "b": 60}
        again = Framework.from_dict(data)
        assert again.to_dict() == data

    def test_from_dict_accepts_pairs_and_missing_ids(self):
        fw = Framework.from_dict({
            "assumptions": ["a", "b"],
            "rules": [["c_a", ["b"]], {"head": "d", "body": []}],
            "contraries": {"a": "c_a"},
            "weights": {"b": "#sup"},
        })
        assert [r.id for r in fw.rules] == ["r1", "r2"]
        assert fw.rules[1].is_fact
        assert fw.weights["b"] == POS_INF


class TestFrameworkLoader:
    def test_json_round_trip(self, tmp_path, weighted_mutual):
        path = tmp_path / "fw.json"
        FrameworkLoader.to_json(weighted_mutual, str(path))
        assert json.loads(path.read_text())["name"] == "weighted_mutual"
        loaded = FrameworkLoader.from_json(str(path))
        assert loaded.to_dict() == weighted_mutual.to_dict()

    def test_from_dict_validates(self):
        with pytest.raises(InvalidFramework):
            FrameworkLoader.from_dict({"assumptions": ["a"], "contraries": {"z": "c"}})


class TestExtensionRendering:
    def test_to_dict_and_explain(self, scenario_two):
        result = solve(scenario_two, "godel", "max", "stable", budget=80)
        cheap, tolerant = result.extensions
        assert cheap.to_dict()["successful"] == [{"attacker": "c_a", "victim": "a", "weight": 80}]
        assert tolerant.to_dict()["cost"] == 80
        assert tolerant.to_dict()["out"] == []
        text = tolerant.explain()
        assert text.splitlines()[0].startswith("[stable] in = {a, b}")
        assert "tolerates: c_a → a (w: 80)" in text
        assert "defeats:   c_a → a (w: 80)" in cheap.explain()


class TestCatalog:
    def test_listing(self):
        assert list_examples() == ["simple", "linear", "cycle", "tree", "complete", "mixed", "isolated"]

    def test_unknown(self):
        with pytest.raises(KeyError, match="Unknown example"):
            get_example("nope")

    @pytest.mark.parametrize("name", list_examples())
    def test_every_example_builds_and_solves(self, name):
        entry = get_example(name)
        assert isinstance(entry, CatalogEntry)
        assert entry.framework.name == name
        assert entry.budget.is_finite
        for semiring in ("godel", "tropical", "lukasiewicz"):
            result = solve(entry.framework, semiring, "sum", "admissible", budget=entry.budget)
            assert result.satisfiable
        assert entry.to_dict()["framework"]["name"] == name

    def test_simple_example(self):
        entry = get_example("simple")
        strict = solve(entry.framework, "godel", "sum", "stable", budget=0)
        # the fact d defeats c whenever nothing may be discarded
        assert strict.in_sets() == [{"b"}]

        relaxed = solve(entry.framework, "godel", "sum", "stable", budget=entry.budget)
        costs = {tuple(sorted(e.in_assumptions)): e.cost for e in relaxed}
        assert costs == {("b",): W(0), ("b", "c"): W(50), ("a", "b"): W(70)}

    def test_isolated_islands_combine(self):
        entry = get_example("isolated")
        result = solve(entry.framework, "godel", "max", "stable", budget=0)
        assert sorted(sorted(s) for s in result.in_sets()) == [
            ["a1", "b1"], ["a1", "b2"], ["a2", "b1"], ["a2", "b2"],
        ]
