"""
waba/engine/support.py
======================
Support propagation: which atoms a set of assumptions supports, and
with what weight.

Mathematical basis:
    For an in-set Δ the weighted support is the least fixpoint of

        w(x) = base(x)                                  x ∈ Δ
             ⊕ ⨁_{r: head(r)=x, body(r) ⊆ supp} ⨂_{b ∈ body(r)} w(b)
             ⊕ explicit(x)

    where an empty body contributes base(x) instead of the ⊗-identity
    (the ⊗-identity would dominate any explicit weight under ⊕).
    Passes are Jacobi-style: every rule reads the previous pass, and the
    loop stops only when a full pass changes no weight — ⊕ can still
    revise a weight after the atom first becomes supported.

    Termination: O(|rules|) passes on acyclic graphs. On cyclic graphs
    the fixpoint exists when ⊕/⊗ are monotone (Knaster–Tarski); the pass
    bound only guards pathological cycles such as x ← x, y under the
    Arctic semiring, which grow without limit.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Dict, FrozenSet, Iterable, Mapping, Optional

from waba.algebra.semiring import Semiring
from waba.core.config import SupportConfig
from waba.core.exceptions import UnstableFixpoint
from waba.core.types import Atom, Framework, Weight

logger = logging.getLogger(__name__)


def base_weight(framework: Framework, atom: Atom, semiring: Semiring) -> Weight:
    """Explicit weight if the framework has one, the semiring default otherwise."""
    explicit = framework.explicit_weight(atom)
    return explicit if explicit is not None else semiring.default_weight


def pass_bound(framework: Framework, config: Optional[SupportConfig] = None) -> int:
    cfg = config or SupportConfig()
    if cfg.max_passes is not None:
        return cfg.max_passes
    return len(framework.rules) + len(framework.atoms) + cfg.pass_slack


def derivable(framework: Framework, assumptions: Iterable[Atom]) -> FrozenSet[Atom]:
    """Unweighted closure: every atom derivable from ``assumptions``."""
    derived = set(assumptions)
    changed = True
    while changed:
        changed = False
        for rule in framework.rules:
            if rule.head not in derived and rule.body <= derived:
                derived.add(rule.head)
                changed = True
    return frozenset(derived)


def compute_support(
    framework: Framework,
    in_set: Iterable[Atom],
    semiring: Semiring,
    config: Optional[SupportConfig] = None,
) -> Dict[Atom, Weight]:
    """Least fixpoint of weighted support for the given in-set.

    Returns:
        supported atom → weight. Deterministic for equal inputs.

    Raises:
        UnstableFixpoint: if weights still change after the pass bound.
    """
    seeds: Dict[Atom, Weight] = {
        a: base_weight(framework, a, semiring) for a in sorted(set(in_set))
    }
    current: Dict[Atom, Weight] = dict(seeds)
    limit = pass_bound(framework, config)

    for passes in range(1, limit + 1):
        derivations: Dict[Atom, Weight] = {}
        for rule in framework.rules:
            if not all(b in current for b in rule.body):
                continue
            if rule.is_fact:
                weight = base_weight(framework, rule.head, semiring)
            else:
                weight = semiring.product(current[b] for b in sorted(rule.body))
            if rule.head in derivations:
                weight = semiring.plus(derivations[rule.head], weight)
            derivations[rule.head] = weight

        nxt: Dict[Atom, Weight] = dict(seeds)
        for head, weight in derivations.items():
            if head in nxt:
                weight = semiring.plus(nxt[head], weight)
            explicit = framework.explicit_weight(head)
            if explicit is not None:
                weight = semiring.plus(weight, explicit)
            nxt[head] = weight

        if nxt == current:
            logger.debug(f"Support fixpoint after {passes} pass(es): {len(nxt)} atoms")
            return nxt
        current = nxt

    unstable = sorted(current)
    raise UnstableFixpoint(
        f"Support did not stabilise within {limit} passes under {semiring.name}; "
        "a rule cycle keeps revising weights",
        passes=limit,
        atoms=unstable,
    )


def reachable_support(
    framework: Framework,
    assumptions: Iterable[Atom],
    semiring: Semiring,
    config: Optional[SupportConfig] = None,
) -> Dict[Atom, Weight]:
    """Weighted support of an arbitrary assumption set.

    Unlike an in-set this may mix in and out assumptions, e.g. the
    undefeated assumptions an opponent can still use.
    """
    assumptions = frozenset(assumptions)
    unknown = assumptions - framework.assumptions
    if unknown:
        raise ValueError(f"Not assumptions of the framework: {sorted(unknown)}")
    return compute_support(framework, assumptions, semiring, config)


class SupportEngine:
    """Memoising wrapper around ``compute_support`` for one search branch.

    Keeps the ``cache_size`` most recently used support maps; backtracking
    revisits in-sets along the current path, so a small window suffices.
    Not shared between threads: each branch of the enumerator owns one.
    """

    def __init__(
        self,
        framework: Framework,
        semiring: Semiring,
        config: Optional[SupportConfig] = None,
    ):
        self.framework = framework
        self.semiring = semiring
        self.config = config
        self.max_entries = (config or SupportConfig()).cache_size
        self._cache: "OrderedDict[FrozenSet[Atom], Dict[Atom, Weight]]" = OrderedDict()

    def support(self, in_set: FrozenSet[Atom]) -> Mapping[Atom, Weight]:
        cached = self._cache.get(in_set)
        if cached is not None:
            self._cache.move_to_end(in_set)
            return cached
        cached = compute_support(self.framework, in_set, self.semiring, self.config)
        self._cache[in_set] = cached
        if len(self._cache) > self.max_entries:
            self._cache.popitem(last=False)
        return cached

    def envelope(self) -> Mapping[Atom, Weight]:
        """Support of the full assumption set — the extreme weight every
        atom can reach in any assignment (monotone semirings)."""
        return self.support(self.framework.assumptions)

    @property
    def cache_size(self) -> int:
        return len(self._cache)
