"""
waba/__init__.py — Public API exports
"""

from waba.algebra.registry import available, get_monoid, get_semiring
from waba.builder import FrameworkBuilder, FrameworkLoader
from waba.catalog import get_example, list_examples
from waba.core.config import DEFAULT_CONFIG, WabaConfig
from waba.core.exceptions import (
    BudgetExceeded,
    InvalidFramework,
    SolveCancelled,
    UnknownAlgebra,
    UnstableFixpoint,
    WabaError,
)
from waba.core.types import (
    NEG_INF,
    POS_INF,
    Attack,
    BudgetDirection,
    Extension,
    Framework,
    MonoidName,
    OptimizeDirection,
    Rule,
    SearchStats,
    SemanticsName,
    SemiringName,
    SolveResult,
    SolveStatus,
    Weight,
)
from waba.engine.concurrency import CancellationToken
from waba.engine.semantics import get_semantics
from waba.engine.solver import solve, with_search
from waba.engine.support import compute_support
from waba.evaluation.metrics import compute_metrics, metrics_for
from waba.version import __version__

__all__ = [
    "solve",
    "with_search",
    "compute_support",
    "get_semiring",
    "get_monoid",
    "get_semantics",
    "available",
    "Framework",
    "FrameworkBuilder",
    "FrameworkLoader",
    "Rule",
    "Weight",
    "POS_INF",
    "NEG_INF",
    "Attack",
    "Extension",
    "SolveResult",
    "SolveStatus",
    "SearchStats",
    "SemiringName",
    "MonoidName",
    "SemanticsName",
    "BudgetDirection",
    "OptimizeDirection",
    "CancellationToken",
    "WabaConfig",
    "DEFAULT_CONFIG",
    "get_example",
    "list_examples",
    "compute_metrics",
    "metrics_for",
    "WabaError",
    "UnknownAlgebra",
    "UnstableFixpoint",
    "BudgetExceeded",
    "InvalidFramework",
    "SolveCancelled",
    "__version__",
]
