"""
waba/core/exceptions.py
=======================
Custom exception hierarchy for WABA-Core.

All exceptions carry structured context so callers can
programmatically handle different failure modes.

Only framework-level problems (unknown algebra, unstable fixpoint,
malformed framework) and caller-requested cancellation ever reach the
caller. ``BudgetExceeded`` is a per-candidate rejection that the
enumerator consumes internally.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from waba.core.types import Extension


class WabaError(Exception):
    """Base exception for all WABA-Core errors."""

    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message)
        self.context = context or {}


class UnknownAlgebra(WabaError):
    """Raised when a semiring, monoid or semantics name is not registered.

    Fatal: surfaced immediately, never retried.
    """

    def __init__(self, kind: str, name: str, available: Sequence[str]):
        super().__init__(
            f"Unknown {kind} '{name}'. Available: {sorted(available)}",
            context={"kind": kind, "name": name},
        )
        self.kind = kind
        self.name = name
        self.available = list(available)


class UnstableFixpoint(WabaError):
    """Raised when support propagation does not converge within its pass bound.

    Indicates a pathological weight cycle (e.g. a self-feeding rule under
    an additive ⊗ that keeps raising the head's weight).
    """

    def __init__(self, message: str, passes: int, atoms: List[str]):
        super().__init__(message, context={"passes": passes, "atoms": atoms})
        self.passes = passes
        self.atoms = atoms


class BudgetExceeded(WabaError):
    """A candidate's discard choice violates the budget.

    Not a true error: the enumerator treats it as a pruning signal.
    """

    def __init__(self, message: str, cost: object = None, budget: object = None):
        super().__init__(message, context={"cost": str(cost), "budget": str(budget)})
        self.cost = cost
        self.budget = budget


class InvalidFramework(WabaError):
    """Raised when a framework fails structural validation."""

    def __init__(self, message: str, errors: List[str]):
        super().__init__(message, context={"errors": errors})
        self.errors = errors


class SolveCancelled(WabaError):
    """Raised when cooperative cancellation is observed mid-search.

    ``partial`` holds the extensions accepted before the search stopped
    (possibly empty). For maximality-based semantics no partial result is
    final, so the list is always empty there.
    """

    def __init__(self, reason: str, partial: Optional[List["Extension"]] = None):
        super().__init__(f"Search cancelled: {reason}", context={"reason": reason})
        self.reason = reason
        self.partial = list(partial or [])
