"""
waba/algebra/semiring.py
========================
Semirings for weight propagation along (⊗) and across (⊕) derivations.

A semiring is ⟨D, ⊕, ⊗, 0̄, 1̄⟩ over the tagged weight domain, with
⊕ and ⊗ associative and commutative, 0̄ absorbed by ⊕ and 1̄ by ⊗.
All built-in ⊕ operations are idempotent selections (max or min), so
every semiring induces a total "preference" order: a is at least as good
as b iff a ⊕ b = a.

Default weights:
    Each semiring chooses, independently, the weight an atom gets when the
    framework does not weight it. All built-ins choose #sup — the value
    that can never be discarded under an upper-bound budget — so an
    unweighted framework evaluated with the identity budget behaves
    exactly like classical (unweighted) ABA. For Tropical and
    Bottleneck-Cost #sup is the ⊕-identity, for Gödel and Łukasiewicz it
    is the ⊗-identity, and for Arctic it is the absorbing top.

Reference: Bistarelli, Montanari & Rossi (1997) "Semiring-based
constraint satisfaction and optimization".
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from functools import reduce
from typing import Iterable, List

from waba.core.registry import Registry
from waba.core.types import NEG_INF, POS_INF, ZERO, SemiringName, Weight

logger = logging.getLogger(__name__)

SEMIRING_CATEGORY = "semiring"


class Semiring(ABC):
    """Base class: subclasses supply ⊕, ⊗ and their identities."""

    name: str = ""
    polarity: str = "strength"      # "strength": higher is stronger; "cost": lower is stronger
    ascending: bool = True          # ⊕ keeps the larger operand
    zero: Weight = ZERO             # ⊕-identity
    one: Weight = POS_INF           # ⊗-identity

    @abstractmethod
    def plus(self, a: Weight, b: Weight) -> Weight:
        """⊕ — combine alternative derivations."""

    @abstractmethod
    def times(self, a: Weight, b: Weight) -> Weight:
        """⊗ — combine the joint premises of one derivation."""

    @property
    def default_weight(self) -> Weight:
        return POS_INF

    def is_unconditional(self, weight: Weight) -> bool:
        """Attacks of this weight can never be discarded under an upper bound."""
        return weight.is_pos_inf

    def sum(self, weights: Iterable[Weight]) -> Weight:
        return reduce(self.plus, weights, self.zero)

    def product(self, weights: Iterable[Weight]) -> Weight:
        return reduce(self.times, weights, self.one)

    def at_least_as_good(self, a: Weight, b: Weight) -> bool:
        """True iff a ⊕ b = a."""
        return self.plus(a, b) == a

    def validate_weight(self, atom: str, weight: Weight) -> List[str]:
        return []

    def describe(self) -> dict:
        return {
            "name":           self.name,
            "polarity":       self.polarity,
            "plus":           "max" if self.ascending else "min",
            "zero":           self.zero.to_json(),
            "one":            self.one.to_json(),
            "default_weight": self.default_weight.to_json(),
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


# ─────────────────────────────────────────────
#  BUILT-IN SEMIRINGS
# ─────────────────────────────────────────────

@Registry.decorator(SemiringName.GODEL.value, category=SEMIRING_CATEGORY)
class GodelSemiring(Semiring):
    """⟨[0, #sup], max, min, 0, #sup⟩ — a chain is as strong as its weakest link."""

    name = SemiringName.GODEL.value
    polarity = "strength"
    ascending = True
    zero = ZERO
    one = POS_INF

    def plus(self, a: Weight, b: Weight) -> Weight:
        return max(a, b)

    def times(self, a: Weight, b: Weight) -> Weight:
        return min(a, b)


@Registry.decorator(SemiringName.TROPICAL.value, category=SEMIRING_CATEGORY)
class TropicalSemiring(Semiring):
    """⟨[0, #sup], min, +, #sup, 0⟩ — cheapest derivation, costs add up."""

    name = SemiringName.TROPICAL.value
    polarity = "cost"
    ascending = False
    zero = POS_INF
    one = ZERO

    def plus(self, a: Weight, b: Weight) -> Weight:
        return min(a, b)

    def times(self, a: Weight, b: Weight) -> Weight:
        return a + b


@Registry.decorator(SemiringName.ARCTIC.value, category=SEMIRING_CATEGORY)
class ArcticSemiring(Semiring):
    """⟨[#inf, #sup], max, +, #inf, 0⟩ — strongest derivation, rewards add up.

    #inf annihilates ⊗ (it is the ⊕-identity), so #inf + #sup = #inf.
    """

    name = SemiringName.ARCTIC.value
    polarity = "strength"
    ascending = True
    zero = NEG_INF
    one = ZERO

    def plus(self, a: Weight, b: Weight) -> Weight:
        return max(a, b)

    def times(self, a: Weight, b: Weight) -> Weight:
        if a.is_neg_inf or b.is_neg_inf:
            return NEG_INF
        return a + b


@Registry.decorator(SemiringName.LUKASIEWICZ.value, category=SEMIRING_CATEGORY)
class LukasiewiczSemiring(Semiring):
    """⟨[0, K] ∪ {#sup}, max, ⊗_Ł, 0, #sup⟩ with a ⊗_Ł b = max(0, a + b − K).

    Weights live on the scale [0, K] (K = 100 by default); #sup plays the
    role of certainty and is the ⊗-identity.
    """

    name = SemiringName.LUKASIEWICZ.value
    polarity = "strength"
    ascending = True
    zero = ZERO
    one = POS_INF

    def __init__(self, scale: float = 100.0):
        if scale <= 0:
            raise ValueError("Łukasiewicz scale must be positive")
        self.scale = scale

    def plus(self, a: Weight, b: Weight) -> Weight:
        return max(a, b)

    def times(self, a: Weight, b: Weight) -> Weight:
        if a.is_pos_inf:
            return b
        if b.is_pos_inf:
            return a
        return Weight.finite(max(0, a.value + b.value - self.scale))

    def validate_weight(self, atom: str, weight: Weight) -> List[str]:
        if weight.is_finite and weight.value > self.scale:
            return [
                f"Weight of '{atom}' ({weight.value}) exceeds the Łukasiewicz scale {self.scale}"
            ]
        return []

    def describe(self) -> dict:
        info = super().describe()
        info["scale"] = self.scale
        return info

    def __repr__(self) -> str:
        return f"LukasiewiczSemiring(scale={self.scale})"


@Registry.decorator(SemiringName.BOTTLENECK_COST.value, category=SEMIRING_CATEGORY)
class BottleneckCostSemiring(Semiring):
    """⟨[0, #sup], min, max, #sup, 0⟩ — a path costs its most expensive step;
    the cheapest path wins."""

    name = SemiringName.BOTTLENECK_COST.value
    polarity = "cost"
    ascending = False
    zero = POS_INF
    one = ZERO

    def plus(self, a: Weight, b: Weight) -> Weight:
        return min(a, b)

    def times(self, a: Weight, b: Weight) -> Weight:
        return max(a, b)
