"""
tests/unit/test_attacks.py
==========================
Tests for waba/engine/attacks.py — potential attacks, discard rules and
budget pricing.
"""

import pytest

from waba.algebra.registry import get_monoid
from waba.core.exceptions import BudgetExceeded
from waba.core.types import POS_INF, ZERO, Attack, Weight
from waba.engine.attacks import AttackResolver, potential_attacks, resolve_attacks
from waba.engine.support import compute_support

W = Weight.finite


@pytest.fixture
def weighted_support(weighted_mutual, godel):
    return compute_support(weighted_mutual, {"a", "b"}, godel)


class TestPotentialAttacks:
    def test_weights_come_from_contrary_support(self, weighted_mutual, weighted_support):
        attacks = potential_attacks(weighted_mutual, weighted_support)
        assert attacks == (
            Attack("c_a", "a", W(60)),
            Attack("c_b", "b", W(80)),
        )

    def test_unsupported_contrary_attacks_nothing(self, weighted_mutual, godel):
        supported = compute_support(weighted_mutual, {"a"}, godel)
        assert potential_attacks(weighted_mutual, supported) == (Attack("c_b", "b", W(80)),)

    def test_one_contrary_may_attack_several_assumptions(self, godel):
        from waba.builder import FrameworkBuilder

        fw = (FrameworkBuilder()
              .assumption("a", contrary="x")
              .assumption("b", contrary="x")
              .assumption("c")
              .rule("x", "c")
              .build())
        attacks = potential_attacks(fw, compute_support(fw, {"c"}, godel))
        assert [a.victim for a in attacks] == ["a", "b"]
        assert all(a.weight == POS_INF for a in attacks)


class TestAttackResolver:
    def test_without_budget_everything_is_discardable(self, godel, max_monoid):
        resolver = AttackResolver(godel, max_monoid, budget=None)
        assert not resolver.upper_bounded
        assert resolver.can_discard(Attack("x", "a", POS_INF))
        assert not resolver.never_tolerable(POS_INF)

    def test_unconditional_attacks_are_never_discardable_under_upper_budget(self, godel, max_monoid):
        resolver = AttackResolver(godel, max_monoid, budget=POS_INF)
        assert resolver.upper_bounded
        assert not resolver.can_discard(Attack("x", "a", POS_INF))
        assert resolver.can_discard(Attack("x", "a", W(10 ** 9)))
        assert resolver.never_tolerable(POS_INF)

    def test_never_tolerable_uses_single_discard_cost(self, godel, max_monoid):
        resolver = AttackResolver(godel, max_monoid, budget=W(50))
        assert resolver.never_tolerable(W(60))
        assert not resolver.never_tolerable(W(50))

    def test_lower_budget_never_forbids_discards(self, godel):
        resolver = AttackResolver(godel, get_monoid("sum", "lb"), budget=W(100))
        assert not resolver.upper_bounded
        assert resolver.can_discard(Attack("x", "a", POS_INF))

    def test_min_monoid_has_no_single_discard_bound(self, godel):
        resolver = AttackResolver(godel, get_monoid("min"), budget=W(10))
        assert not resolver.never_tolerable(W(60))

    def test_reachable_by_direction(self, godel):
        upper = AttackResolver(godel, get_monoid("sum"), budget=W(50))
        assert upper.reachable(W(40), W(90))
        assert not upper.reachable(W(60), W(90))
        lower = AttackResolver(godel, get_monoid("sum", "lb"), budget=W(50))
        assert lower.reachable(W(0), W(50))
        assert not lower.reachable(W(0), W(49))

    def test_price(self, godel, sum_monoid):
        resolver = AttackResolver(godel, sum_monoid)
        assert resolver.price([]) == ZERO
        assert resolver.price([Attack("x", "a", W(30)), Attack("y", "b", W(45))]) == W(75)


class TestBuildCandidate:
    def test_no_discards(self, weighted_mutual, weighted_support, godel, max_monoid):
        potential = potential_attacks(weighted_mutual, weighted_support)
        resolver = AttackResolver(godel, max_monoid, budget=W(0))
        candidate = resolver.build_candidate({"a", "b"}, weighted_support, potential, [])
        assert candidate.cost == ZERO
        assert candidate.successful == frozenset(potential)
        assert candidate.defeated == {"a", "b"}
        assert candidate.tolerated == frozenset()

    def test_discard_within_budget(self, weighted_mutual, weighted_support, godel, max_monoid):
        potential = potential_attacks(weighted_mutual, weighted_support)
        on_a = potential[0]
        resolver = AttackResolver(godel, max_monoid, budget=W(60))
        candidate = resolver.build_candidate({"a", "b"}, weighted_support, potential, [on_a])
        assert candidate.cost == W(60)
        assert candidate.defeated == {"b"}
        assert candidate.tolerated == {("c_a", "a")}

    def test_discard_over_budget(self, weighted_mutual, weighted_support, godel, max_monoid):
        potential = potential_attacks(weighted_mutual, weighted_support)
        resolver = AttackResolver(godel, max_monoid, budget=W(60))
        with pytest.raises(BudgetExceeded) as exc_info:
            resolver.build_candidate({"a", "b"}, weighted_support, potential, potential)
        assert exc_info.value.cost == W(80)
        assert exc_info.value.budget == W(60)

    def test_unconditional_discard_rejected(self, mutual_attack, godel, max_monoid):
        supported = compute_support(mutual_attack, {"a", "b"}, godel)
        potential = potential_attacks(mutual_attack, supported)
        resolver = AttackResolver(godel, max_monoid, budget=W(0))
        with pytest.raises(BudgetExceeded, match="unconditional"):
            resolver.build_candidate({"a", "b"}, supported, potential, potential[:1])

    def test_lower_budget_forces_discards(self, weighted_mutual, weighted_support, godel):
        potential = potential_attacks(weighted_mutual, weighted_support)
        resolver = AttackResolver(godel, get_monoid("sum", "lb"), budget=W(100))
        with pytest.raises(BudgetExceeded):
            resolver.build_candidate({"a"}, weighted_support, potential, potential[:1])
        candidate = resolver.build_candidate({"a"}, weighted_support, potential, potential)
        assert candidate.cost == W(140)

    def test_stray_discard_is_a_caller_error(self, weighted_mutual, weighted_support, godel, max_monoid):
        potential = potential_attacks(weighted_mutual, weighted_support)
        resolver = AttackResolver(godel, max_monoid)
        with pytest.raises(ValueError):
            resolver.build_candidate(
                {"a"}, weighted_support, potential, [Attack("zzz", "a", W(1))]
            )

    def test_resolve_attacks_one_shot(self, weighted_mutual, weighted_support, godel, sum_monoid):
        potential = potential_attacks(weighted_mutual, weighted_support)
        candidate = resolve_attacks(
            weighted_mutual, {"b"}, weighted_support, potential[1:], godel, sum_monoid, W(80),
        )
        assert candidate.cost == W(80)
        assert candidate.defeated == {"a"}
