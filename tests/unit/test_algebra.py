"""
tests/unit/test_algebra.py
==========================
Tests for the weight domain, semirings, monoids and algebra lookup.
"""

import math

import pytest

from waba.algebra.monoid import CountMonoid, LexMonoid, MaxMonoid, MinMonoid, SumMonoid
from waba.algebra.registry import available, get_monoid, get_semiring, normalize_name
from waba.algebra.semiring import (
    ArcticSemiring,
    BottleneckCostSemiring,
    GodelSemiring,
    LukasiewiczSemiring,
    TropicalSemiring,
)
from waba.core.config import AlgebraConfig
from waba.core.exceptions import UnknownAlgebra
from waba.core.types import (
    NEG_INF,
    POS_INF,
    ZERO,
    BudgetDirection,
    MonoidName,
    SemiringName,
    Weight,
)

W = Weight.finite


# ═══════════════════════════════════════════════════════════════════
#  Weight domain
# ═══════════════════════════════════════════════════════════════════


class TestWeight:
    def test_total_order(self):
        assert NEG_INF < W(-5) < ZERO < W(3.5) < POS_INF
        assert max(W(1), POS_INF, W(100)) == POS_INF
        assert min(W(1), NEG_INF) == NEG_INF

    def test_coercion_from_tokens_and_numbers(self):
        assert Weight.of("#sup") == POS_INF
        assert Weight.of("#inf") == NEG_INF
        assert Weight.of(math.inf) == POS_INF
        assert Weight.of(-math.inf) == NEG_INF
        assert Weight.of("42") == W(42)
        assert Weight.of(7) is not None and Weight.of(7).value == 7

    def test_coercion_rejects_garbage(self):
        with pytest.raises(ValueError):
            Weight.of("heavy")
        with pytest.raises(TypeError):
            Weight.of(True)
        with pytest.raises(TypeError):
            Weight.of([1])

    def test_finite_rejects_nan(self):
        with pytest.raises(ValueError):
            W(float("nan"))

    def test_int_and_float_are_equal_and_hash_alike(self):
        assert W(40) == W(40.0)
        assert len({W(40), W(40.0)}) == 1

    def test_addition(self):
        assert W(2) + W(3) == W(5)
        assert W(2) + POS_INF == POS_INF
        assert NEG_INF + W(2) == NEG_INF
        with pytest.raises(ValueError):
            POS_INF + NEG_INF

    def test_json_rendering(self):
        assert POS_INF.to_json() == "#sup"
        assert NEG_INF.to_json() == "#inf"
        assert W(40.0).to_json() == 40
        assert W(2.5).to_json() == 2.5
        assert str(POS_INF) == "#sup"


# ═══════════════════════════════════════════════════════════════════
#  Semirings
# ═══════════════════════════════════════════════════════════════════


class TestSemirings:
    def test_godel(self):
        s = GodelSemiring()
        assert s.plus(W(3), W(7)) == W(7)
        assert s.times(W(3), W(7)) == W(3)
        assert s.times(POS_INF, W(7)) == W(7)
        assert s.product([]) == POS_INF
        assert s.sum([]) == ZERO

    def test_tropical(self):
        s = TropicalSemiring()
        assert s.plus(W(3), W(7)) == W(3)
        assert s.times(W(3), W(7)) == W(10)
        assert s.sum([]) == POS_INF
        assert s.product([]) == ZERO
        assert s.polarity == "cost"
        assert not s.ascending

    def test_arctic(self):
        s = ArcticSemiring()
        assert s.plus(W(3), W(7)) == W(7)
        assert s.times(W(3), W(7)) == W(10)
        assert s.times(NEG_INF, POS_INF) == NEG_INF
        assert s.sum([]) == NEG_INF

    def test_lukasiewicz(self):
        s = LukasiewiczSemiring()
        assert s.times(W(80), W(60)) == W(40)
        assert s.times(W(30), W(40)) == ZERO
        assert s.times(POS_INF, W(55)) == W(55)
        assert s.plus(W(30), W(40)) == W(40)
        assert s.validate_weight("a", W(120))
        assert s.validate_weight("a", W(100)) == []

    def test_lukasiewicz_scale_from_config(self):
        s = get_semiring("lukasiewicz", AlgebraConfig(lukasiewicz_scale=10.0))
        assert s.scale == 10.0
        assert s.times(W(8), W(6)) == W(4)

    def test_lukasiewicz_rejects_bad_scale(self):
        with pytest.raises(ValueError):
            LukasiewiczSemiring(scale=0)

    def test_bottleneck_cost(self):
        s = BottleneckCostSemiring()
        assert s.plus(W(3), W(7)) == W(3)
        assert s.times(W(3), W(7)) == W(7)
        assert s.product([]) == ZERO

    @pytest.mark.parametrize("name", [s.value for s in SemiringName])
    def test_default_weight_is_unconditional(self, name):
        s = get_semiring(name)
        assert s.default_weight == POS_INF
        assert s.is_unconditional(s.default_weight)
        assert not s.is_unconditional(W(99))

    @pytest.mark.parametrize("name", [s.value for s in SemiringName])
    def test_identities(self, name):
        s = get_semiring(name)
        for x in (W(0), W(5), W(60)):
            assert s.plus(x, s.zero) == x
            assert s.times(x, s.one) == x

    @pytest.mark.parametrize("name", [s.value for s in SemiringName])
    def test_commutative(self, name):
        s = get_semiring(name)
        for a, b in [(W(10), W(70)), (W(0), POS_INF), (W(55), W(55))]:
            assert s.plus(a, b) == s.plus(b, a)
            assert s.times(a, b) == s.times(b, a)

    def test_at_least_as_good_follows_polarity(self):
        assert GodelSemiring().at_least_as_good(W(9), W(3))
        assert TropicalSemiring().at_least_as_good(W(3), W(9))

    def test_describe(self):
        info = TropicalSemiring().describe()
        assert info["name"] == "tropical"
        assert info["plus"] == "min"
        assert info["zero"] == "#sup"
        assert info["default_weight"] == "#sup"


# ═══════════════════════════════════════════════════════════════════
#  Monoids
# ═══════════════════════════════════════════════════════════════════


class TestMonoids:
    @pytest.mark.parametrize("monoid, identity", [
        (MaxMonoid(), ZERO),
        (SumMonoid(), ZERO),
        (CountMonoid(), ZERO),
        (MinMonoid(), POS_INF),
        (LexMonoid(), ()),
    ])
    def test_empty_discard_set_costs_identity(self, monoid, identity):
        assert monoid.aggregate([]) == identity

    def test_aggregates(self):
        weights = [W(30), W(80), W(50)]
        assert MaxMonoid().aggregate(weights) == W(80)
        assert SumMonoid().aggregate(weights) == W(160)
        assert MinMonoid().aggregate(weights) == W(30)
        assert CountMonoid().aggregate(weights) == W(3)
        assert LexMonoid().aggregate(weights) == (W(80), W(50), W(30))

    def test_lex_ordering(self):
        lex = LexMonoid()
        one_heavy = lex.aggregate([W(80)])
        many_light = lex.aggregate([W(50), W(50), W(50)])
        assert many_light < one_heavy
        assert lex.aggregate([W(80)]) < lex.aggregate([W(80), W(10)])
        assert lex.budget_key(one_heavy) == W(80)
        assert lex.budget_key(()) == ZERO

    def test_upper_budget(self):
        m = SumMonoid(BudgetDirection.UPPER)
        assert m.within_budget(W(50), W(50))
        assert not m.within_budget(W(51), W(50))
        assert m.within_budget(W(10 ** 6), None)

    def test_lower_budget(self):
        m = SumMonoid(BudgetDirection.LOWER)
        assert m.within_budget(W(50), W(50))
        assert not m.within_budget(W(49), W(50))

    def test_min_monoid_empty_set_violates_finite_upper_budget(self):
        m = MinMonoid(BudgetDirection.UPPER)
        assert not m.within_budget(m.identity, W(100))
        assert m.within_budget(m.identity, POS_INF)

    def test_bounds_growth(self):
        lo, hi = SumMonoid().bounds(W(10), [W(5), W(7)])
        assert (lo, hi) == (W(10), W(22))
        lo, hi = MinMonoid().bounds(W(10), [W(5), W(7)])
        assert (lo, hi) == (W(5), W(10))

    def test_describe(self):
        info = MinMonoid(BudgetDirection.LOWER).describe()
        assert info == {
            "name": "min", "identity": "#sup", "direction": "lb", "growth": "non-increasing",
        }


# ═══════════════════════════════════════════════════════════════════
#  Lookup
# ═══════════════════════════════════════════════════════════════════


class TestAlgebraLookup:
    def test_enum_and_string_names(self):
        assert isinstance(get_semiring(SemiringName.TROPICAL), TropicalSemiring)
        assert isinstance(get_semiring("Tropical"), TropicalSemiring)
        assert isinstance(get_monoid(MonoidName.LEX), LexMonoid)

    def test_aliases(self):
        assert normalize_name("Gödel") == "godel"
        assert normalize_name("bottleneck-cost") == "bottleneck_cost"
        assert isinstance(get_semiring("bottleneck"), BottleneckCostSemiring)

    def test_playground_monoid_keys(self):
        m = get_monoid("sum_minimization", direction="lb")
        assert isinstance(m, SumMonoid)
        assert m.direction is BudgetDirection.LOWER
        assert isinstance(get_monoid("count_maximization"), CountMonoid)

    def test_instances_pass_through(self):
        s = GodelSemiring()
        assert get_semiring(s) is s

    def test_unknown_semiring(self):
        with pytest.raises(UnknownAlgebra) as exc_info:
            get_semiring("viterbi")
        assert exc_info.value.kind == "semiring"
        assert "godel" in exc_info.value.available

    def test_unknown_monoid(self):
        with pytest.raises(UnknownAlgebra):
            get_monoid("median")

    def test_available_lists_builtins(self):
        import waba.engine  # noqa: F401  registers the semantics

        names = available()
        assert set(names["semiring"]) == {s.value for s in SemiringName}
        assert set(names["monoid"]) == {m.value for m in MonoidName}
        assert "preferred" in names["semantics"]
        assert available("monoid") == sorted(m.value for m in MonoidName)
