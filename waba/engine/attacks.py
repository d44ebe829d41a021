"""
waba/engine/attacks.py
======================
Attack resolution: potential attacks of a supported set, the split into
successful / discarded attacks, and the budget check on the discard cost.

A potential attack exists for every assumption A whose contrary X is
supported; it carries weight supported[X]. Discarding is rejected —
not merely costed — when the attack carries the semiring's unconditional
weight under an upper-bound budget: with all-default weights and the
identity budget this is what makes the engine coincide with classical
ABA.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional, Tuple

from waba.algebra.monoid import Monoid
from waba.algebra.semiring import Semiring
from waba.core.exceptions import BudgetExceeded
from waba.core.types import (
    Atom,
    Attack,
    BudgetDirection,
    Candidate,
    Cost,
    Framework,
    Weight,
    sorted_attacks,
)

logger = logging.getLogger(__name__)


def potential_attacks(framework: Framework, supported: Mapping[Atom, Weight]) -> Tuple[Attack, ...]:
    """Every attack licensed by the supported atoms, sorted by (victim, attacker)."""
    found = []
    for contrary, victims in framework.victims.items():
        weight = supported.get(contrary)
        if weight is None:
            continue
        for victim in victims:
            found.append(Attack(attacker=contrary, victim=victim, weight=weight))
    return tuple(sorted_attacks(found))


class AttackResolver:
    """Splits potential attacks by a discard choice and prices the choice.

    Usage:
        resolver = AttackResolver(semiring, monoid, budget=Weight.finite(80))
        candidate = resolver.build_candidate(in_set, supported, potential, discarded)
    """

    def __init__(self, semiring: Semiring, monoid: Monoid, budget: Optional[Weight] = None):
        self.semiring = semiring
        self.monoid = monoid
        self.budget = budget

    @property
    def upper_bounded(self) -> bool:
        return self.budget is not None and self.monoid.direction is BudgetDirection.UPPER

    # ─── DISCARDABILITY ────────────────────────────────────────────

    def can_discard(self, attack: Attack) -> bool:
        """False for unconditional attacks under an upper-bound budget."""
        return not (self.upper_bounded and self.semiring.is_unconditional(attack.weight))

    def never_tolerable(self, weight: Weight) -> bool:
        """True if no discard set containing an attack of (at least) this
        weight can respect the budget."""
        if not self.upper_bounded:
            return False
        if self.semiring.is_unconditional(weight):
            return True
        if self.monoid.growth > 0:
            single = self.monoid.combine(self.monoid.identity, weight)
            return not self.monoid.within_budget(single, self.budget)
        return False

    def reachable(self, lowest: Cost, highest: Cost) -> bool:
        """Whether some cost in [lowest, highest] can still meet the budget."""
        if self.budget is None:
            return True
        if self.monoid.direction is BudgetDirection.UPPER:
            return self.monoid.within_budget(lowest, self.budget)
        return self.monoid.within_budget(highest, self.budget)

    # ─── RESOLUTION ────────────────────────────────────────────────

    def price(self, discarded: Iterable[Attack]) -> Cost:
        """Monoid aggregate of the discarded weights (identity when empty)."""
        return self.monoid.aggregate(a.weight for a in sorted_attacks(discarded))

    def build_candidate(
        self,
        in_set: Iterable[Atom],
        supported: Mapping[Atom, Weight],
        potential: Tuple[Attack, ...],
        discarded: Iterable[Attack],
    ) -> Candidate:
        """Resolve one discard choice into a priced candidate.

        Raises:
            BudgetExceeded: if an undiscardable attack is discarded or the
                aggregated cost violates the budget.
            ValueError: if ``discarded`` is not a subset of ``potential``.
        """
        discarded = frozenset(discarded)
        stray = discarded.difference(potential)
        if stray:
            raise ValueError(f"Discarded attacks are not potential attacks: {sorted_attacks(stray)}")

        for attack in discarded:
            if not self.can_discard(attack):
                raise BudgetExceeded(
                    f"Attack {attack} is unconditional and cannot be discarded",
                    cost=attack.weight,
                    budget=self.budget,
                )

        cost = self.price(discarded)
        if not self.monoid.within_budget(cost, self.budget):
            raise BudgetExceeded(
                f"Discard cost {cost} violates {self.monoid.direction.value} budget {self.budget}",
                cost=cost,
                budget=self.budget,
            )

        return Candidate(
            in_set=frozenset(in_set),
            supported=dict(supported),
            potential=potential,
            discarded=discarded,
            successful=frozenset(potential).difference(discarded),
            cost=cost,
        )


def resolve_attacks(
    framework: Framework,
    in_set: Iterable[Atom],
    supported: Mapping[Atom, Weight],
    discarded: Iterable[Attack],
    semiring: Semiring,
    monoid: Monoid,
    budget: Optional[Weight] = None,
) -> Candidate:
    """One-shot resolution of a discard choice for the given support.

    Raises:
        BudgetExceeded: see ``AttackResolver.build_candidate``.
    """
    potential = potential_attacks(framework, supported)
    return AttackResolver(semiring, monoid, budget).build_candidate(in_set, supported, potential, discarded)
