"""
tests/unit/test_validators_config.py
====================================
Tests for waba/core/validators.py, waba/core/config.py,
waba/core/registry.py and the exception hierarchy.
"""

import logging

import pytest

from waba.algebra.semiring import LukasiewiczSemiring
from waba.core.config import DEFAULT_CONFIG, SearchConfig, SupportConfig, WabaConfig
from waba.core.exceptions import (
    BudgetExceeded,
    InvalidFramework,
    SolveCancelled,
    UnknownAlgebra,
    UnstableFixpoint,
    WabaError,
)
from waba.core.registry import Registry
from waba.core.types import NEG_INF, POS_INF, Framework, Rule, Weight
from waba.core.validators import (
    validate_atom,
    validate_budget,
    validate_framework,
    validate_framework_or_raise,
    validate_weight,
)
from waba.engine.solver import with_search

W = Weight.finite


class TestAtomValidation:
    @pytest.mark.parametrize("atom", ["a", "c_a", "x1", "not_b", "a'", "p.q", "r-2", "_hidden"])
    def test_valid(self, atom):
        assert validate_atom(atom) == []

    @pytest.mark.parametrize("atom", ["", "a b", "a,b", "(a)", "-a", "a←b"])
    def test_invalid(self, atom):
        assert validate_atom(atom)

    def test_role_appears_in_message(self):
        assert "Assumption" in validate_atom("a b", "Assumption")[0]


class TestWeightValidation:
    def test_weights(self):
        assert validate_weight("a", W(0)) == []
        assert validate_weight("a", POS_INF) == []
        assert validate_weight("a", W(-1))
        assert validate_weight("a", NEG_INF)

    def test_budgets(self):
        assert validate_budget(None) == []
        assert validate_budget(W(0)) == []
        assert validate_budget(POS_INF) == []
        assert validate_budget(W(-0.5))


class TestFrameworkValidation:
    def test_valid_framework(self, weighted_mutual):
        assert validate_framework(weighted_mutual) == []

    def test_duplicate_rule_ids(self):
        fw = Framework(
            assumptions={"a"},
            rules=(Rule("r1", "x", {"a"}), Rule("r1", "y", {"a"})),
        )
        assert any("Duplicate rule id" in e for e in validate_framework(fw))

    def test_contrary_for_non_assumption(self):
        fw = Framework(assumptions={"a"}, contraries={"z": "c_z"})
        assert any("not an assumption" in e for e in validate_framework(fw))

    def test_negative_weight(self):
        fw = Framework(assumptions={"a"}, weights={"a": -3})
        assert any("negative" in e for e in validate_framework(fw))

    def test_semiring_scale(self):
        fw = Framework(assumptions={"a"}, weights={"a": 101})
        assert validate_framework(fw) == []
        assert validate_framework(fw, LukasiewiczSemiring())

    def test_non_flat_framework_only_warns(self, caplog):
        fw = Framework(assumptions={"a", "b"}, rules=(Rule("r1", "a", {"b"}),))
        with caplog.at_level(logging.WARNING, logger="waba.core.validators"):
            assert validate_framework(fw) == []
        assert "not flat" in caplog.text

    def test_or_raise(self):
        fw = Framework(assumptions={"a b"})
        with pytest.raises(InvalidFramework) as exc_info:
            validate_framework_or_raise(fw)
        assert exc_info.value.context["errors"] == exc_info.value.errors
        assert len(exc_info.value.errors) == 1


class TestConfig:
    def test_defaults(self):
        assert DEFAULT_CONFIG.search.workers == 1
        assert DEFAULT_CONFIG.algebra.lukasiewicz_scale == 100.0
        assert DEFAULT_CONFIG.server.max_assumptions == 18

    @pytest.mark.parametrize("profile, check", [
        ("interactive", lambda c: c.search.deadline_s == 60.0 and c.search.projection),
        ("parallel",    lambda c: c.search.workers == 4),
        ("exhaustive",  lambda c: c.support.pass_slack == 8),
        ("default",     lambda c: c.search.workers == 1),
    ])
    def test_profiles(self, profile, check):
        cfg = WabaConfig.for_profile(profile)
        assert cfg.profile == profile
        assert check(cfg)

    def test_validation(self):
        with pytest.raises(ValueError):
            WabaConfig(search=SearchConfig(workers=0))

    def test_support_cache_must_hold_an_entry(self):
        assert DEFAULT_CONFIG.support.cache_size == 512
        with pytest.raises(ValueError, match="cache_size"):
            WabaConfig(support=SupportConfig(cache_size=0))

    def test_with_search_copies(self):
        cfg = with_search(workers=3, projection=True)
        assert cfg.search.workers == 3
        assert cfg.search.projection
        assert DEFAULT_CONFIG.search.workers == 1
        assert not DEFAULT_CONFIG.search.projection


class TestRegistry:
    def test_register_get_unregister(self):
        Registry.register("sample", object, category="test_sample")
        try:
            assert Registry.get("sample", category="test_sample") is object
            assert Registry.names("test_sample") == ["sample"]
            with pytest.raises(KeyError):
                Registry.register("sample", int, category="test_sample")
            Registry.register("sample", int, category="test_sample", override=True)
            assert Registry.get("sample", category="test_sample") is int
        finally:
            Registry.unregister("sample", category="test_sample")
        with pytest.raises(KeyError):
            Registry.get("sample", category="test_sample")

    def test_builtins_listed(self):
        listing = Registry.list_all()
        assert "godel" in listing["semiring"]
        assert "lex" in listing["monoid"]


class TestExceptions:
    def test_hierarchy(self):
        for exc in (
            UnknownAlgebra("semiring", "x", []),
            UnstableFixpoint("m", passes=3, atoms=["x"]),
            BudgetExceeded("m", cost=W(5), budget=W(1)),
            InvalidFramework("m", errors=["e"]),
            SolveCancelled("stop"),
        ):
            assert isinstance(exc, WabaError)
            assert isinstance(exc.context, dict)

    def test_context(self):
        assert UnstableFixpoint("m", passes=3, atoms=["x"]).context == {"passes": 3, "atoms": ["x"]}
        assert BudgetExceeded("m", cost=W(5), budget=W(1)).context == {"cost": "5", "budget": "1"}
        assert UnknownAlgebra("monoid", "median", ["sum", "max"]).available == ["sum", "max"]
