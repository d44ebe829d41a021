"""
waba/engine/semantics.py
========================
Acceptance checks for candidates and the global selections over them.

Local checks (decidable on one candidate):
    cf          no in-assumption is the victim of a successful attack
    admissible  cf, and no in-assumption is threatened — its contrary is
                derivable from the undefeated assumptions through an
                attack the candidate did not discard
    complete    admissible, and every assumption not threatened is in
    stable      cf, and every out-assumption is defeated
    grounded    complete, and the in-set is the least fixpoint of the
                "not threatened" operator under the same discards

Global selections (need the whole pool of base-accepted candidates):
    preferred   ⊆-maximal in-set among admissible
    naive       ⊆-maximal in-set among cf
    semistable  ⊆-maximal range (in ∪ defeated) among complete
    staged      ⊆-maximal range among complete
    ideal       ⊆-maximal admissible inside ∩ of the preferred in-sets
    eager       ⊆-maximal admissible inside ∩ of the semistable in-sets

A semantics is a strategy object registered under category "semantics";
new ones plug in through ``Registry.decorator`` without touching the
enumerator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, FrozenSet, Iterable, List, Optional, Sequence, Tuple, Union

from waba.core.exceptions import UnknownAlgebra
from waba.core.registry import Registry
from waba.core.types import Atom, Candidate, Extension, Framework, SemanticsName
from waba.engine.support import derivable

logger = logging.getLogger(__name__)

SEMANTICS_CATEGORY = "semantics"

# Profile levels, weakest first.
CF = "cf"
ADMISSIBLE = "admissible"
COMPLETE = "complete"
STABLE = "stable"
GROUNDED = "grounded"


@dataclass(frozen=True)
class Evaluation:
    """Verdict on one candidate.

    ``profile`` lists every local level the candidate reaches; ``failed``
    names the first check that rejected it (None when accepted).
    """
    accepted: bool
    profile:  FrozenSet[str] = frozenset()
    failed:   Optional[str] = None

    def satisfies(self, level: str) -> bool:
        return level in self.profile


PoolItem = Tuple[Extension, Evaluation]


# ─────────────────────────────────────────────
#  EVALUATOR
# ─────────────────────────────────────────────

class SemanticsEvaluator:
    """Computes the local acceptance profile of candidates for one framework.

    Stateless apart from the framework reference, so one evaluator may
    be shared by all worker threads.
    """

    def __init__(self, framework: Framework):
        self.framework = framework

    def threatened(self, candidate: Candidate) -> FrozenSet[Atom]:
        undefeated = self.framework.assumptions - candidate.defeated
        opponent = derivable(self.framework, undefeated)
        return self._threatened_by(opponent, candidate.tolerated)

    def _threatened_by(
        self,
        opponent: FrozenSet[Atom],
        tolerated: FrozenSet[Tuple[Atom, Atom]],
    ) -> FrozenSet[Atom]:
        return frozenset(
            a for a, x in self.framework.contraries.items()
            if x in opponent and (x, a) not in tolerated
        )

    def profile(self, candidate: Candidate) -> FrozenSet[str]:
        """Every local level (cf, admissible, complete, stable) the candidate reaches."""
        in_set = candidate.in_set
        if in_set & candidate.defeated:
            return frozenset()

        levels = {CF}
        out = self.framework.assumptions - in_set
        if out <= candidate.defeated:
            levels.add(STABLE)

        threatened = self.threatened(candidate)
        if not in_set & threatened:
            levels.add(ADMISSIBLE)
            if self.framework.assumptions - threatened <= in_set:
                levels.add(COMPLETE)
        return frozenset(levels)

    def grounded_fixpoint(self, tolerated: FrozenSet[Tuple[Atom, Atom]] = frozenset()) -> FrozenSet[Atom]:
        """Least fixpoint, from ∅, of S ↦ {b : b not threatened given S}.

        The operator is monotone (a larger S defeats more, so fewer
        assumptions stay threatened), hence the iteration climbs and
        stops within |assumptions| + 1 steps.
        """
        fw = self.framework
        current: FrozenSet[Atom] = frozenset()
        for _ in range(len(fw.assumptions) + 1):
            supported = derivable(fw, current)
            defeated = {
                v for x in supported for v in fw.victims.get(x, ())
                if (x, v) not in tolerated
            }
            opponent = derivable(fw, fw.assumptions - defeated)
            threatened = self._threatened_by(opponent, tolerated)
            nxt = fw.assumptions - threatened
            if nxt == current:
                break
            current = nxt
        return current

    def evaluate(self, candidate: Candidate, semantics: "Semantics") -> Evaluation:
        profile = self.profile(candidate)
        failed = semantics.failure(self, candidate, profile)
        if failed is not None:
            logger.debug(f"Rejected in={sorted(candidate.in_set)} at {failed}")
        return Evaluation(accepted=failed is None, profile=profile, failed=failed)


# ─────────────────────────────────────────────
#  SEMANTICS STRATEGIES
# ─────────────────────────────────────────────

class Semantics:
    """A named acceptance condition.

    ``base`` is the local level a candidate needs to enter the pool;
    ``maximal`` semantics then call ``select`` on the full pool, which
    disables early stopping and branch-and-bound in the enumerator.
    ``fixpoint`` semantics are computed per discard choice as a least
    fixpoint instead of being searched for among all assignments.
    """

    name: str = ""
    base: str = CF
    maximal: bool = False
    fixpoint: bool = False

    def failure(
        self,
        evaluator: SemanticsEvaluator,
        candidate: Candidate,
        profile: FrozenSet[str],
    ) -> Optional[str]:
        if CF not in profile:
            return CF
        if self.base not in profile:
            return self.base
        return None

    def select(self, pool: Sequence[PoolItem]) -> List[Extension]:
        return [ext for ext, _ in pool]

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def _in_set(ext: Extension) -> FrozenSet[Atom]:
    return ext.in_assumptions


def _range(ext: Extension) -> FrozenSet[Atom]:
    return ext.range


def maximal_by(
    items: Sequence[PoolItem],
    key: Callable[[Extension], FrozenSet[Atom]],
) -> List[PoolItem]:
    """Items whose key is not a strict subset of another item's key (order kept)."""
    keys = {key(ext) for ext, _ in items}
    top = {k for k in keys if not any(k < other for other in keys)}
    return [item for item in items if key(item[0]) in top]


def _intersection(sets: Iterable[FrozenSet[Atom]]) -> Optional[FrozenSet[Atom]]:
    result: Optional[FrozenSet[Atom]] = None
    for s in sets:
        result = s if result is None else result & s
    return result


def select_maximal(pool: Sequence[PoolItem]) -> List[PoolItem]:
    """⊆-maximal in-sets."""
    return maximal_by(pool, _in_set)


def select_by_range(pool: Sequence[PoolItem]) -> List[PoolItem]:
    """⊆-maximal ranges (in ∪ defeated)."""
    return maximal_by(pool, _range)


def _maximal_admissible_within(
    pool: Sequence[PoolItem],
    reference: Sequence[PoolItem],
) -> List[PoolItem]:
    bound = _intersection(ext.in_assumptions for ext, _ in reference)
    if bound is None:
        return []
    eligible = [
        item for item in pool
        if item[1].satisfies(ADMISSIBLE) and item[0].in_assumptions <= bound
    ]
    return select_maximal(eligible)


def select_ideal(pool: Sequence[PoolItem]) -> List[PoolItem]:
    """⊆-maximal admissible items inside every preferred in-set."""
    admissible = [item for item in pool if item[1].satisfies(ADMISSIBLE)]
    return _maximal_admissible_within(pool, select_maximal(admissible))


def select_eager(pool: Sequence[PoolItem]) -> List[PoolItem]:
    """⊆-maximal admissible items inside every semi-stable in-set."""
    complete = [item for item in pool if item[1].satisfies(COMPLETE)]
    return _maximal_admissible_within(pool, select_by_range(complete))


def _extensions(items: Sequence[PoolItem]) -> List[Extension]:
    return [ext for ext, _ in items]


@Registry.decorator(SemanticsName.CF.value, category=SEMANTICS_CATEGORY)
class ConflictFree(Semantics):
    name = SemanticsName.CF.value
    base = CF


@Registry.decorator(SemanticsName.ADMISSIBLE.value, category=SEMANTICS_CATEGORY)
class Admissible(Semantics):
    name = SemanticsName.ADMISSIBLE.value
    base = ADMISSIBLE


@Registry.decorator(SemanticsName.COMPLETE.value, category=SEMANTICS_CATEGORY)
class Complete(Semantics):
    name = SemanticsName.COMPLETE.value
    base = COMPLETE


@Registry.decorator(SemanticsName.STABLE.value, category=SEMANTICS_CATEGORY)
class Stable(Semantics):
    name = SemanticsName.STABLE.value
    base = STABLE


@Registry.decorator(SemanticsName.GROUNDED.value, category=SEMANTICS_CATEGORY)
class Grounded(Semantics):
    """Complete, and equal to the least fixpoint under its own discards."""

    name = SemanticsName.GROUNDED.value
    base = COMPLETE
    fixpoint = True

    def failure(self, evaluator, candidate, profile):
        failed = super().failure(evaluator, candidate, profile)
        if failed is not None:
            return failed
        if candidate.in_set != evaluator.grounded_fixpoint(candidate.tolerated):
            return GROUNDED
        return None


@Registry.decorator(SemanticsName.PREFERRED.value, category=SEMANTICS_CATEGORY)
class Preferred(Semantics):
    name = SemanticsName.PREFERRED.value
    base = ADMISSIBLE
    maximal = True

    def select(self, pool):
        return _extensions(select_maximal(pool))


@Registry.decorator(SemanticsName.NAIVE.value, category=SEMANTICS_CATEGORY)
class Naive(Semantics):
    name = SemanticsName.NAIVE.value
    base = CF
    maximal = True

    def select(self, pool):
        return _extensions(select_maximal(pool))


@Registry.decorator(SemanticsName.SEMISTABLE.value, category=SEMANTICS_CATEGORY)
class SemiStable(Semantics):
    name = SemanticsName.SEMISTABLE.value
    base = COMPLETE
    maximal = True

    def select(self, pool):
        return _extensions(select_by_range(pool))


@Registry.decorator(SemanticsName.STAGED.value, category=SEMANTICS_CATEGORY)
class Staged(Semantics):
    """Complete, with ⊆-maximal range among the complete candidates."""

    name = SemanticsName.STAGED.value
    base = COMPLETE
    maximal = True

    def select(self, pool):
        return _extensions(select_by_range(pool))


@Registry.decorator(SemanticsName.IDEAL.value, category=SEMANTICS_CATEGORY)
class Ideal(Semantics):
    name = SemanticsName.IDEAL.value
    base = ADMISSIBLE
    maximal = True

    def select(self, pool):
        return _extensions(select_ideal(pool))


@Registry.decorator(SemanticsName.EAGER.value, category=SEMANTICS_CATEGORY)
class Eager(Semantics):
    name = SemanticsName.EAGER.value
    base = ADMISSIBLE
    maximal = True

    def select(self, pool):
        return _extensions(select_eager(pool))


# ─────────────────────────────────────────────
#  LOOKUP
# ─────────────────────────────────────────────

def get_semantics(name: Union[str, Enum, Semantics]) -> Semantics:
    """Return a fresh strategy object for ``name``.

    Raises:
        UnknownAlgebra: if no semantics is registered under that name.
    """
    if isinstance(name, Semantics):
        return name
    raw = name.value if isinstance(name, Enum) else str(name)
    key = raw.strip().lower().replace("-", "_")
    try:
        cls = Registry.get(key, category=SEMANTICS_CATEGORY)
    except KeyError:
        raise UnknownAlgebra("semantics", raw, Registry.names(SEMANTICS_CATEGORY)) from None
    return cls()
