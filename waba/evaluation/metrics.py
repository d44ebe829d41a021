"""
waba/evaluation/metrics.py
==========================
Acceptance metrics over the extensions of one solve.

Global metrics (over the near-optimal set S):
    optimal cost     best cost among all extensions
    gap              |second-best level − optimal| (None if either is a sentinel)
    S                extensions at the best K cost levels, widened one level
                     at a time until |S| ≥ m (K = 2, m = 3 by default)
    diversity        mean pairwise Jaccard distance of the in-sets in S

Per-assumption metrics:
    brave            in at least one extension of S
    cautious         in every extension of S
    frequency        fraction of all extensions containing it
    best_with        best cost among extensions containing it
    best_without     best cost among extensions not containing it
    regret           |best_with − optimal|

Mathematical definitions:

Jaccard distance(A, B) = 1 − |A ∩ B| / |A ∪ B|
Diversity              = mean over pairs in S (0 when |S| ≤ 1)

"Best" follows the optimisation direction: lowest cost when minimising
(or not optimising), highest when maximising.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Sequence

from waba.core.types import Atom, Cost, Extension, OptimizeDirection, SolveResult, cost_to_json


def cost_scalar(cost: Cost) -> float:
    """Numeric view of a cost: sentinels map to ±inf, lex costs to their
    leading weight."""
    if isinstance(cost, tuple):
        if not cost:
            return 0.0
        cost = cost[0]
    if cost.is_pos_inf:
        return math.inf
    if cost.is_neg_inf:
        return -math.inf
    return float(cost.value)


def _difference(a: Cost, b: Cost) -> Optional[float]:
    x, y = cost_scalar(a), cost_scalar(b)
    if math.isinf(x) or math.isinf(y):
        return None
    return abs(x - y)


def jaccard_distance(a: frozenset, b: frozenset) -> float:
    union = a | b
    if not union:
        return 0.0
    return 1.0 - len(a & b) / len(union)


@dataclass
class GlobalMetrics:
    """Cost landscape of one result."""
    optimal_cost:     Cost
    second_best_cost: Optional[Cost]
    gap:              Optional[float]
    levels:           List[Cost]        # cost levels admitted into S, best first
    num_in_s:         int
    total:            int
    diversity:        float

    def to_dict(self) -> dict:
        return {
            "optimal_cost":     cost_to_json(self.optimal_cost),
            "second_best_cost": None if self.second_best_cost is None else cost_to_json(self.second_best_cost),
            "gap":              self.gap,
            "levels":           [cost_to_json(c) for c in self.levels],
            "num_in_s":         self.num_in_s,
            "total":            self.total,
            "diversity":        self.diversity,
        }


@dataclass
class AssumptionMetrics:
    """How one assumption fares across the extensions."""
    brave:        bool = False
    cautious:     bool = False
    frequency:    float = 0.0
    best_with:    Optional[Cost] = None
    best_without: Optional[Cost] = None
    regret:       Optional[float] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        for key in ("best_with", "best_without"):
            value = getattr(self, key)
            data[key] = None if value is None else cost_to_json(value)
        return data


@dataclass
class AcceptanceReport:
    """Complete metrics for one solve result."""
    global_metrics: Optional[GlobalMetrics]
    assumptions:    Dict[Atom, AssumptionMetrics] = field(default_factory=dict)

    @property
    def brave(self) -> List[Atom]:
        return sorted(a for a, m in self.assumptions.items() if m.brave)

    @property
    def cautious(self) -> List[Atom]:
        return sorted(a for a, m in self.assumptions.items() if m.cautious)

    def to_dict(self) -> dict:
        return {
            "global":      None if self.global_metrics is None else self.global_metrics.to_dict(),
            "assumptions": {a: m.to_dict() for a, m in sorted(self.assumptions.items())},
        }

    def summary(self) -> str:
        if self.global_metrics is None:
            return "=== Acceptance Report: no extensions ===\n"
        g = self.global_metrics
        gap = "n/a" if g.gap is None else f"{g.gap:.2f}"
        return (
            f"=== Acceptance Report (n={g.total}) ===\n"
            f"Optimal cost: {cost_to_json(g.optimal_cost)}  gap: {gap}\n"
            f"Near-optimal: {g.num_in_s} extension(s), diversity={g.diversity:.3f}\n"
            f"Brave:    {', '.join(self.brave) or '-'}\n"
            f"Cautious: {', '.join(self.cautious) or '-'}\n"
        )


def compute_metrics(
    extensions: Sequence[Extension],
    assumptions: Optional[Sequence[Atom]] = None,
    optimize: OptimizeDirection = OptimizeDirection.NONE,
    k_levels: int = 2,
    min_models: int = 3,
) -> AcceptanceReport:
    """Compute global and per-assumption acceptance metrics.

    Args:
        extensions:  the extensions to summarise (any order).
        assumptions: assumptions to report on; defaults to the union of all
                     in/out sets.
        optimize:    MAXIMIZE makes higher costs better.
        k_levels:    cost levels initially admitted into S.
        min_models:  widen S level by level until it holds this many.
    """
    if assumptions is None:
        seen = set()
        for ext in extensions:
            seen |= ext.in_assumptions | ext.out_assumptions
        assumptions = sorted(seen)
    if not extensions:
        return AcceptanceReport(global_metrics=None, assumptions={a: AssumptionMetrics() for a in assumptions})

    maximize = OptimizeDirection(optimize) is OptimizeDirection.MAXIMIZE
    levels = sorted({ext.cost for ext in extensions}, reverse=maximize)
    best = min if not maximize else max

    allowed = levels[: max(1, k_levels)]
    near = [ext for ext in extensions if ext.cost in allowed]
    index = len(allowed)
    while len(near) < min_models and index < len(levels):
        allowed.append(levels[index])
        near = [ext for ext in extensions if ext.cost in allowed]
        index += 1

    optimal = levels[0]
    second = levels[1] if len(levels) > 1 else None
    distances = [
        jaccard_distance(near[i].in_assumptions, near[j].in_assumptions)
        for i in range(len(near)) for j in range(i + 1, len(near))
    ]
    global_metrics = GlobalMetrics(
        optimal_cost=optimal,
        second_best_cost=second,
        gap=None if second is None else _difference(second, optimal),
        levels=list(allowed),
        num_in_s=len(near),
        total=len(extensions),
        diversity=sum(distances) / len(distances) if distances else 0.0,
    )

    per_assumption: Dict[Atom, AssumptionMetrics] = {}
    for atom in assumptions:
        with_atom = [ext.cost for ext in extensions if atom in ext.in_assumptions]
        without = [ext.cost for ext in extensions if atom not in ext.in_assumptions]
        best_with = best(with_atom) if with_atom else None
        per_assumption[atom] = AssumptionMetrics(
            brave=any(atom in ext.in_assumptions for ext in near),
            cautious=all(atom in ext.in_assumptions for ext in near),
            frequency=len(with_atom) / len(extensions),
            best_with=best_with,
            best_without=best(without) if without else None,
            regret=None if best_with is None else _difference(best_with, optimal),
        )
    return AcceptanceReport(global_metrics=global_metrics, assumptions=per_assumption)


def metrics_for(result: SolveResult, optimize: OptimizeDirection = OptimizeDirection.NONE) -> AcceptanceReport:
    """Shorthand: metrics over a SolveResult's extensions."""
    return compute_metrics(result.extensions, optimize=optimize)
