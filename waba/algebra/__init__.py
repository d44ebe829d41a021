"""waba/algebra — Semirings, monoids and the algebra registry."""

from waba.algebra.monoid import (
    CountMonoid,
    LexMonoid,
    MaxMonoid,
    MinMonoid,
    Monoid,
    SumMonoid,
)
from waba.algebra.registry import available, get_monoid, get_semiring, normalize_name
from waba.algebra.semiring import (
    ArcticSemiring,
    BottleneckCostSemiring,
    GodelSemiring,
    LukasiewiczSemiring,
    Semiring,
    TropicalSemiring,
)

__all__ = [
    "Semiring",
    "GodelSemiring",
    "TropicalSemiring",
    "ArcticSemiring",
    "LukasiewiczSemiring",
    "BottleneckCostSemiring",
    "Monoid",
    "MaxMonoid",
    "SumMonoid",
    "MinMonoid",
    "CountMonoid",
    "LexMonoid",
    "get_semiring",
    "get_monoid",
    "available",
    "normalize_name",
]
