"""
waba/engine/solver.py
=====================
Public entry point: ``solve`` resolves the algebra once, validates the
framework and runs the enumerator.

Usage:
    result = solve(fw, "godel", "max", "stable", budget=80)
    for ext in result:
        print(ext.explain())
"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Any, Optional, Union

from waba.algebra.monoid import Monoid
from waba.algebra.registry import get_monoid, get_semiring
from waba.algebra.semiring import Semiring
from waba.core.config import DEFAULT_CONFIG, WabaConfig
from waba.core.exceptions import WabaError
from waba.core.types import (
    BudgetDirection,
    Framework,
    OptimizeDirection,
    SolveResult,
    Weight,
    cost_to_json,
)
from waba.core.validators import validate_budget, validate_framework_or_raise
from waba.engine.concurrency import CancellationToken
from waba.engine.enumerator import ExtensionEnumerator
from waba.engine.semantics import Semantics, get_semantics

logger = logging.getLogger(__name__)

NameLike = Union[str, Enum]


def solve(
    framework:   Framework,
    semiring:    Union[NameLike, Semiring],
    monoid:      Union[NameLike, Monoid],
    semantics:   Union[NameLike, Semantics],
    budget:      Any = None,
    optimize:    Union[OptimizeDirection, str] = OptimizeDirection.NONE,
    max_results: int = 0,
    *,
    direction:   Union[BudgetDirection, str] = BudgetDirection.UPPER,
    config:      Optional[WabaConfig] = None,
    token:       Optional[CancellationToken] = None,
) -> SolveResult:
    """Enumerate the extensions of ``framework``.

    Args:
        framework:   the weighted ABA framework.
        semiring:    name or instance (godel, tropical, arctic, lukasiewicz,
                     bottleneck_cost).
        monoid:      name or instance (max, sum, min, count, lex).
        semantics:   name or strategy (cf, stable, admissible, complete,
                     grounded, preferred, semistable, ideal, staged, naive,
                     eager).
        budget:      number, ``"#sup"`` / ``"#inf"`` or Weight; None disables
                     the budget constraint.
        optimize:    none, minimize or maximize the discard cost.
        max_results: 0 returns every extension.
        direction:   budget regime for a monoid given by name (ub / lb).
        config:      WabaConfig; DEFAULT_CONFIG when omitted.
        token:       cooperative cancellation; one is built from
                     ``config.search`` deadline / node limits when omitted.

    Returns:
        SolveResult — UNSATISFIABLE when nothing is accepted.

    Raises:
        UnknownAlgebra, InvalidFramework, UnstableFixpoint, SolveCancelled.
    """
    cfg = config or DEFAULT_CONFIG
    semiring_ops = get_semiring(semiring, cfg.algebra)
    monoid_ops = get_monoid(monoid, direction)
    strategy = get_semantics(semantics)
    optimize = OptimizeDirection(optimize)

    budget_weight = None if budget is None else Weight.of(budget)
    budget_errors = validate_budget(budget_weight)
    if budget_errors:
        raise WabaError(budget_errors[0], context={"budget": str(budget)})
    if max_results is None:
        max_results = 0
    if max_results < 0:
        raise WabaError("max_results must be >= 0", context={"max_results": max_results})

    validate_framework_or_raise(framework, semiring_ops)

    if token is None:
        token = CancellationToken(
            deadline_s=cfg.search.deadline_s,
            max_nodes=cfg.search.max_nodes,
        )

    logger.info(
        f"Solving '{framework.name or '<unnamed>'}' ({len(framework.assumptions)} assumptions, "
        f"{len(framework.rules)} rules) under {semiring_ops.name}/{monoid_ops.name}"
        f"[{monoid_ops.direction.value}] {strategy.name}, budget={budget_weight}, "
        f"optimize={optimize.value}"
    )

    enumerator = ExtensionEnumerator(
        framework,
        semiring_ops,
        monoid_ops,
        strategy,
        budget=budget_weight,
        optimize=optimize,
        max_results=max_results,
        config=cfg,
        token=token,
    )
    result = enumerator.run()

    optimal = "" if result.optimal_cost is None else f", optimal cost {cost_to_json(result.optimal_cost)}"
    logger.info(
        f"{result.status.value}: {len(result)} extension(s){optimal}; "
        f"{result.stats.nodes} nodes, {result.stats.candidates} candidates "
        f"in {result.stats.elapsed_s:.3f}s"
    )
    return result


def with_search(config: Optional[WabaConfig] = None, **overrides: Any) -> WabaConfig:
    """Copy of ``config`` with some ``SearchConfig`` fields replaced.

    Usage:
        solve(fw, "godel", "max", "stable", config=with_search(workers=4))
    """
    base = config or DEFAULT_CONFIG
    return replace(base, search=replace(base.search, **overrides))
