"""
waba/algebra/monoid.py
======================
Monoids aggregating the weights of discarded attacks into an
extension cost, together with the budget regime the cost must respect.

    upper bound (ub):  cost ≤ β   — discards are allowed up to a budget
    lower bound (lb):  cost ≥ β   — discards are forced up to a quota

Every built-in monoid is monotone in the number of discards: adding a
discard either never lowers the cost (growth = +1: max, sum, count, lex)
or never raises it (growth = −1: min). The enumerator relies on this to
bound partial discard choices during branch-and-bound.
"""
from __future__ import annotations

import bisect
import logging
from abc import ABC, abstractmethod
from functools import reduce
from typing import Iterable, Optional, Tuple

from waba.core.registry import Registry
from waba.core.types import (
    POS_INF,
    ZERO,
    BudgetDirection,
    Cost,
    MonoidName,
    Weight,
)

logger = logging.getLogger(__name__)

MONOID_CATEGORY = "monoid"


class Monoid(ABC):
    """Base class: ``combine`` folds one discarded weight into a cost."""

    name: str = ""
    growth: int = 1                 # +1 non-decreasing, −1 non-increasing in discards

    def __init__(self, direction: BudgetDirection = BudgetDirection.UPPER):
        self.direction = BudgetDirection(direction)

    @property
    @abstractmethod
    def identity(self) -> Cost:
        """Cost of the empty discard set."""

    @abstractmethod
    def combine(self, cost: Cost, weight: Weight) -> Cost:
        """Fold one discarded attack weight into ``cost``."""

    def aggregate(self, weights: Iterable[Weight]) -> Cost:
        return reduce(self.combine, weights, self.identity)

    def budget_key(self, cost: Cost) -> Weight:
        """Scalar compared against the budget."""
        return cost

    def within_budget(self, cost: Cost, budget: Optional[Weight]) -> bool:
        if budget is None:
            return True
        key = self.budget_key(cost)
        if self.direction is BudgetDirection.UPPER:
            return not key > budget
        return not key < budget

    def bounds(self, partial: Cost, remaining: Iterable[Weight]) -> Tuple[Cost, Cost]:
        """(lowest, highest) cost reachable by extending ``partial`` with any
        subset of ``remaining``."""
        everything = reduce(self.combine, remaining, partial)
        if self.growth > 0:
            return partial, everything
        return everything, partial

    def describe(self) -> dict:
        return {
            "name":      self.name,
            "identity":  _json(self.identity),
            "direction": self.direction.value,
            "growth":    "non-decreasing" if self.growth > 0 else "non-increasing",
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(direction={self.direction.value})"


def _json(cost: Cost):
    if isinstance(cost, tuple):
        return [w.to_json() for w in cost]
    return cost.to_json()


# ─────────────────────────────────────────────
#  BUILT-IN MONOIDS
# ─────────────────────────────────────────────

@Registry.decorator(MonoidName.MAX.value, category=MONOID_CATEGORY)
class MaxMonoid(Monoid):
    """Cost = heaviest discarded attack."""

    name = MonoidName.MAX.value
    growth = 1

    @property
    def identity(self) -> Cost:
        return ZERO

    def combine(self, cost: Cost, weight: Weight) -> Cost:
        return max(cost, weight)


@Registry.decorator(MonoidName.SUM.value, category=MONOID_CATEGORY)
class SumMonoid(Monoid):
    """Cost = total weight discarded."""

    name = MonoidName.SUM.value
    growth = 1

    @property
    def identity(self) -> Cost:
        return ZERO

    def combine(self, cost: Cost, weight: Weight) -> Cost:
        return cost + weight


@Registry.decorator(MonoidName.MIN.value, category=MONOID_CATEGORY)
class MinMonoid(Monoid):
    """Cost = lightest discarded attack; #sup when nothing is discarded."""

    name = MonoidName.MIN.value
    growth = -1

    @property
    def identity(self) -> Cost:
        return POS_INF

    def combine(self, cost: Cost, weight: Weight) -> Cost:
        return min(cost, weight)


@Registry.decorator(MonoidName.COUNT.value, category=MONOID_CATEGORY)
class CountMonoid(Monoid):
    """Cost = number of discarded attacks, whatever their weight."""

    name = MonoidName.COUNT.value
    growth = 1

    @property
    def identity(self) -> Cost:
        return ZERO

    def combine(self, cost: Cost, weight: Weight) -> Cost:
        return Weight.finite(cost.value + 1)


@Registry.decorator(MonoidName.LEX.value, category=MONOID_CATEGORY)
class LexMonoid(Monoid):
    """Leximax cost: the descending tuple of discarded weights.

    Costs compare lexicographically, so discarding one heavier attack is
    worse than discarding any number of lighter ones, and among equal
    leading weights fewer discards win. The budget is compared against
    the leading (heaviest) weight.
    """

    name = MonoidName.LEX.value
    growth = 1

    @property
    def identity(self) -> Cost:
        return ()

    def combine(self, cost: Cost, weight: Weight) -> Cost:
        ascending = sorted(cost)
        bisect.insort(ascending, weight)
        return tuple(reversed(ascending))

    def budget_key(self, cost: Cost) -> Weight:
        return cost[0] if cost else ZERO
