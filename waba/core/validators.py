"""
waba/core/validators.py
========================
Input validation utilities for WABA-Core.

Validates:
    - Atom names (non-empty, no whitespace or punctuation that the
      framework syntax reserves)
    - Framework structure (contraries keyed by assumptions, unique rule
      ids, well-formed bodies)
    - Explicit weights (no NaN, no negative or #inf weights, and within
      the semiring's scale where it has one)
    - Budgets

These validators run at API boundaries, not in hot search paths.
Call validate_* functions before feeding data to the engine.

All validation failures raise **WabaError** subclasses already defined.
Silent failures are forbidden — every bad input produces a typed exception
with structured context.
"""
from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, List, Optional

from waba.core.exceptions import InvalidFramework
from waba.core.types import Framework, Weight

if TYPE_CHECKING:
    from waba.algebra.semiring import Semiring

logger = logging.getLogger(__name__)


# ─── REGEX PATTERNS ───────────────────────────────────────────────

ATOM_RE    = re.compile(r'^[A-Za-z0-9_][A-Za-z0-9_\'.\-]*$')
RULE_ID_RE = re.compile(r'^[A-Za-z0-9_][A-Za-z0-9_.\-]*$')


# ─── ATOMS ────────────────────────────────────────────────────────

def validate_atom(atom: str, role: str = "atom") -> List[str]:
    """Validate a single atom name. Returns list of error strings."""
    if not isinstance(atom, str) or not atom:
        return [f"{role} name is empty"]
    if not ATOM_RE.match(atom):
        return [f"{role} '{atom}' invalid: must match [A-Za-z0-9_][A-Za-z0-9_'.-]*"]
    return []


# ─── WEIGHTS ──────────────────────────────────────────────────────

def validate_weight(atom: str, weight: Weight) -> List[str]:
    """Explicit weights must be non-negative numbers or #sup."""
    if weight.is_neg_inf:
        return [f"Weight of '{atom}' is #inf; explicit weights must be >= 0 or #sup"]
    if weight.is_finite and weight.value < 0:
        return [f"Weight of '{atom}' is negative ({weight.value})"]
    return []


def validate_budget(budget: Optional[Weight]) -> List[str]:
    if budget is None:
        return []
    if budget.is_finite and budget.value < 0:
        return [f"Budget must be >= 0, got {budget.value}"]
    return []


# ─── FRAMEWORK ────────────────────────────────────────────────────

def validate_framework(
    framework: Framework,
    semiring: Optional["Semiring"] = None,
) -> List[str]:
    """Validate a framework. Returns list of errors.

    Checks:
        1. Every assumption, rule head/body atom and contrary is a valid atom
        2. Rule ids are non-empty, well-formed and unique
        3. Contraries are only declared for assumptions
        4. Explicit weights are valid (and within the semiring's scale)
    """
    errors: List[str] = []

    for assumption in sorted(framework.assumptions):
        errors.extend(validate_atom(assumption, "Assumption"))

    seen_ids = set()
    for rule in framework.rules:
        if not rule.id or not RULE_ID_RE.match(rule.id):
            errors.append(f"Rule id '{rule.id}' invalid")
        elif rule.id in seen_ids:
            errors.append(f"Duplicate rule id '{rule.id}'")
        seen_ids.add(rule.id)
        errors.extend(validate_atom(rule.head, f"Rule '{rule.id}' head"))
        for atom in sorted(rule.body):
            errors.extend(validate_atom(atom, f"Rule '{rule.id}' body atom"))

    for assumption, contrary in sorted(framework.contraries.items()):
        if assumption not in framework.assumptions:
            errors.append(
                f"Contrary declared for '{assumption}', which is not an assumption"
            )
        errors.extend(validate_atom(contrary, f"Contrary of '{assumption}'"))

    for atom, weight in sorted(framework.weights.items()):
        errors.extend(validate_atom(atom, "Weighted atom"))
        errors.extend(validate_weight(atom, weight))
        if semiring is not None:
            errors.extend(semiring.validate_weight(atom, weight))

    if not framework.is_flat:
        heads = sorted(r.head for r in framework.rules if r.head in framework.assumptions)
        logger.warning(f"Framework is not flat: assumptions derived by rules: {heads}")

    return errors


def validate_framework_or_raise(
    framework: Framework,
    semiring: Optional["Semiring"] = None,
) -> None:
    errors = validate_framework(framework, semiring)
    if errors:
        raise InvalidFramework(
            f"Framework '{framework.name or '<unnamed>'}' has {len(errors)} error(s): "
            + "; ".join(errors[:5]),
            errors=errors,
        )
