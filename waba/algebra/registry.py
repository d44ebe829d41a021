"""
waba/algebra/registry.py
========================
Algebra lookup: resolve semiring / monoid names (enum values or their
string form) to ready-to-use operation sets.

Unknown names raise ``UnknownAlgebra`` immediately. Lookups are pure;
importing this module registers the built-ins.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Optional, Union

from waba.algebra.monoid import MONOID_CATEGORY, Monoid
from waba.algebra.semiring import SEMIRING_CATEGORY, LukasiewiczSemiring, Semiring
from waba.core.config import AlgebraConfig
from waba.core.exceptions import UnknownAlgebra
from waba.core.registry import Registry
from waba.core.types import BudgetDirection, SemiringName

logger = logging.getLogger(__name__)

NameLike = Union[str, Enum]

# Playground identifiers that differ from the registered names.
_ALIASES = {
    "gödel":       SemiringName.GODEL.value,
    "bottleneck":  SemiringName.BOTTLENECK_COST.value,
    "łukasiewicz": SemiringName.LUKASIEWICZ.value,
}


def normalize_name(name: NameLike) -> str:
    raw = name.value if isinstance(name, Enum) else str(name)
    key = raw.strip().lower().replace("-", "_")
    return _ALIASES.get(key, key)


def _lookup(kind: str, category: str, name: NameLike):
    key = normalize_name(name)
    try:
        return Registry.get(key, category=category)
    except KeyError:
        raise UnknownAlgebra(kind, str(name), Registry.names(category)) from None


def get_semiring(
    name: Union[NameLike, Semiring],
    config: Optional[AlgebraConfig] = None,
) -> Semiring:
    """Return the semiring registered under ``name``.

    Raises:
        UnknownAlgebra: if no semiring is registered under that name.
    """
    if isinstance(name, Semiring):
        return name
    cls = _lookup("semiring", SEMIRING_CATEGORY, name)
    if issubclass(cls, LukasiewiczSemiring):
        return cls(scale=(config or AlgebraConfig()).lukasiewicz_scale)
    return cls()


def get_monoid(
    name: Union[NameLike, Monoid],
    direction: Union[BudgetDirection, str] = BudgetDirection.UPPER,
) -> Monoid:
    """Return the monoid registered under ``name`` bound to a budget regime.

    Playground-style keys such as ``"sum_minimization"`` are accepted; the
    optimisation suffix is not part of the monoid and is ignored here.

    Raises:
        UnknownAlgebra: if no monoid is registered under that name.
    """
    if isinstance(name, Monoid):
        return name
    key = normalize_name(name)
    for suffix in ("_minimization", "_maximization"):
        if key.endswith(suffix):
            key = key[: -len(suffix)]
    cls = _lookup("monoid", MONOID_CATEGORY, key)
    return cls(direction=BudgetDirection(direction))


def available(category: Optional[str] = None) -> Union[Dict[str, List[str]], List[str]]:
    """Registered names per category (semiring, monoid, semantics), or the
    names of a single category when one is given."""
    if category is not None:
        return Registry.names(category)
    return {
        "semiring":  Registry.names(SEMIRING_CATEGORY),
        "monoid":    Registry.names(MONOID_CATEGORY),
        "semantics": Registry.names("semantics"),
    }
