"""waba/engine — Support propagation, attack resolution, semantics and search."""

from waba.engine.attacks import AttackResolver, potential_attacks, resolve_attacks
from waba.engine.concurrency import CancellationToken, SharedBound
from waba.engine.enumerator import ExtensionEnumerator
from waba.engine.semantics import (
    Evaluation,
    Semantics,
    SemanticsEvaluator,
    get_semantics,
    select_by_range,
    select_eager,
    select_ideal,
    select_maximal,
)
from waba.engine.solver import solve, with_search
from waba.engine.support import (
    SupportEngine,
    compute_support,
    derivable,
    reachable_support,
)

__all__ = [
    "solve",
    "with_search",
    "compute_support",
    "reachable_support",
    "derivable",
    "SupportEngine",
    "potential_attacks",
    "resolve_attacks",
    "AttackResolver",
    "Semantics",
    "SemanticsEvaluator",
    "Evaluation",
    "get_semantics",
    "select_maximal",
    "select_by_range",
    "select_ideal",
    "select_eager",
    "ExtensionEnumerator",
    "CancellationToken",
    "SharedBound",
]
