"""
waba/core/types.py
==================
Foundation type system for WABA-Core.
Every module imports from here. No circular dependencies.

Mathematical basis:
  - Weight is the tagged domain  Finite(x) | +∞ | −∞  shared by all
    semirings and monoids; the sentinels print as #sup / #inf.
  - Framework is a flat ABA framework ⟨A, R, ¯, w⟩ with a partial
    weight function; unweighted atoms get a semiring default.
  - An Extension is an accepted (in-set, discard-set) pair with its
    resolved attacks and aggregated discard cost.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from functools import cached_property, total_ordering
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple, Union


Atom = str


# ─────────────────────────────────────────────
#  ENUMERATIONS
# ─────────────────────────────────────────────

class SemiringName(Enum):
    GODEL           = "godel"
    TROPICAL        = "tropical"
    ARCTIC          = "arctic"
    LUKASIEWICZ     = "lukasiewicz"
    BOTTLENECK_COST = "bottleneck_cost"


class MonoidName(Enum):
    MAX   = "max"
    SUM   = "sum"
    MIN   = "min"
    COUNT = "count"
    LEX   = "lex"


class SemanticsName(Enum):
    CF         = "cf"
    STABLE     = "stable"
    ADMISSIBLE = "admissible"
    COMPLETE   = "complete"
    GROUNDED   = "grounded"
    PREFERRED  = "preferred"
    SEMISTABLE = "semistable"
    IDEAL      = "ideal"
    STAGED     = "staged"
    NAIVE      = "naive"
    EAGER      = "eager"


class BudgetDirection(Enum):
    """Budget regime: upper bound (cost ≤ β) or lower bound (cost ≥ β)."""
    UPPER = "ub"
    LOWER = "lb"


class OptimizeDirection(Enum):
    NONE     = "none"
    MINIMIZE = "minimize"
    MAXIMIZE = "maximize"


class SolveStatus(Enum):
    SATISFIABLE   = "satisfiable"
    UNSATISFIABLE = "unsatisfiable"


class WeightKind(Enum):
    NEG_INF = -1
    FINITE  = 0
    POS_INF = 1


# ─────────────────────────────────────────────
#  WEIGHTS
# ─────────────────────────────────────────────

_SENTINEL_TOKENS = {
    "#sup": WeightKind.POS_INF,
    "sup":  WeightKind.POS_INF,
    "inf":  WeightKind.POS_INF,
    "+inf": WeightKind.POS_INF,
    "#inf": WeightKind.NEG_INF,
    "-inf": WeightKind.NEG_INF,
}


@total_ordering
@dataclass(frozen=True)
class Weight:
    """A value of the weight domain: a finite number or one of the sentinels.

    Frozen so weights can live in sets and attack tuples.
    Ordering: NEG_INF < every finite value < POS_INF.

    Examples:
        Weight.finite(80)
        Weight.of("#sup")  → POS_INF
        Weight.of(math.inf) → POS_INF
    """
    kind:  WeightKind = WeightKind.FINITE
    value: float = 0

    def __post_init__(self):
        if self.kind is not WeightKind.FINITE:
            object.__setattr__(self, "value", 0)
        elif isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(f"Finite weight needs a number, got {self.value!r}")
        elif math.isnan(self.value) or math.isinf(self.value):
            raise ValueError("Finite weight cannot be NaN or infinite; use the sentinels")

    @classmethod
    def finite(cls, value: float) -> "Weight":
        return cls(WeightKind.FINITE, value)

    @classmethod
    def of(cls, raw: Any) -> "Weight":
        """Coerce numbers, sentinel tokens and weights to a Weight.

        Used at API boundaries only — the engine passes Weight objects.
        """
        if isinstance(raw, Weight):
            return raw
        if isinstance(raw, bool):
            raise TypeError("Booleans are not weights")
        if isinstance(raw, (int, float)):
            if math.isinf(raw):
                return POS_INF if raw > 0 else NEG_INF
            return cls.finite(raw)
        if isinstance(raw, str):
            token = raw.strip().lower()
            if token in _SENTINEL_TOKENS:
                return cls(_SENTINEL_TOKENS[token])
            try:
                number = float(token)
            except ValueError:
                raise ValueError(f"Cannot interpret {raw!r} as a weight") from None
            return cls.finite(int(number) if number.is_integer() else number)
        raise TypeError(f"Cannot interpret {type(raw).__name__} as a weight")

    @property
    def is_finite(self) -> bool:
        return self.kind is WeightKind.FINITE

    @property
    def is_pos_inf(self) -> bool:
        return self.kind is WeightKind.POS_INF

    @property
    def is_neg_inf(self) -> bool:
        return self.kind is WeightKind.NEG_INF

    def __lt__(self, other: "Weight") -> bool:
        if not isinstance(other, Weight):
            return NotImplemented
        return (self.kind.value, self.value) < (other.kind.value, other.value)

    def __add__(self, other: "Weight") -> "Weight":
        if self.is_finite and other.is_finite:
            return Weight.finite(self.value + other.value)
        kinds = {self.kind, other.kind}
        if kinds == {WeightKind.POS_INF, WeightKind.NEG_INF}:
            raise ValueError("#sup + #inf is undefined")
        return POS_INF if WeightKind.POS_INF in kinds else NEG_INF

    def to_json(self) -> Union[int, float, str]:
        if self.is_pos_inf:
            return "#sup"
        if self.is_neg_inf:
            return "#inf"
        if isinstance(self.value, float) and self.value.is_integer():
            return int(self.value)
        return self.value

    def __str__(self) -> str:
        return str(self.to_json())

    def __repr__(self) -> str:
        return f"Weight({self})"


POS_INF = Weight(WeightKind.POS_INF)
NEG_INF = Weight(WeightKind.NEG_INF)
ZERO    = Weight.finite(0)

# Scalar monoids produce a Weight; the lexicographic monoid produces the
# descending tuple of discarded weights.
Cost = Union[Weight, Tuple[Weight, ...]]


def cost_to_json(cost: Cost) -> Union[int, float, str, List[Any]]:
    if isinstance(cost, tuple):
        return [w.to_json() for w in cost]
    return cost.to_json()


# ─────────────────────────────────────────────
#  FRAMEWORK
# ─────────────────────────────────────────────

@dataclass(frozen=True)
class Rule:
    """A rule  head ← body.  An empty body makes the rule a fact.

    Example:
        Rule("r1", head="c_a", body=frozenset({"b"}))   # c_a ← b
    """
    id:   str
    head: Atom
    body: FrozenSet[Atom] = frozenset()

    def __post_init__(self):
        if not isinstance(self.body, frozenset):
            object.__setattr__(self, "body", frozenset(self.body))

    @property
    def is_fact(self) -> bool:
        return not self.body

    def __str__(self) -> str:
        if self.is_fact:
            return f"{self.id}: {self.head}."
        return f"{self.id}: {self.head} ← {', '.join(sorted(self.body))}"


@dataclass(frozen=True, eq=False)
class Framework:
    """Immutable WABA framework ⟨assumptions, rules, contraries, weights⟩.

    Each assumption has at most one contrary; the contrary need not be an
    assumption itself. ``weights`` is partial: atoms without an explicit
    weight receive the chosen semiring's default during support
    computation.
    """
    assumptions: FrozenSet[Atom]
    rules:       Tuple[Rule, ...] = ()
    contraries:  Mapping[Atom, Atom] = field(default_factory=dict)
    weights:     Mapping[Atom, Weight] = field(default_factory=dict)
    name:        str = ""

    def __post_init__(self):
        object.__setattr__(self, "assumptions", frozenset(self.assumptions))
        object.__setattr__(self, "rules", tuple(self.rules))
        object.__setattr__(self, "contraries", MappingProxyType(dict(self.contraries)))
        object.__setattr__(
            self,
            "weights",
            MappingProxyType({atom: Weight.of(w) for atom, w in dict(self.weights).items()}),
        )

    # ─── INDEXES ───────────────────────────────────────────────────

    @cached_property
    def atoms(self) -> FrozenSet[Atom]:
        """Every atom mentioned anywhere in the framework."""
        found = set(self.assumptions)
        for rule in self.rules:
            found.add(rule.head)
            found.update(rule.body)
        found.update(self.contraries.keys())
        found.update(self.contraries.values())
        found.update(self.weights.keys())
        return frozenset(found)

    @cached_property
    def rules_by_head(self) -> Mapping[Atom, Tuple[Rule, ...]]:
        index: Dict[Atom, List[Rule]] = {}
        for rule in self.rules:
            index.setdefault(rule.head, []).append(rule)
        return MappingProxyType({h: tuple(rs) for h, rs in index.items()})

    @cached_property
    def victims(self) -> Mapping[Atom, Tuple[Atom, ...]]:
        """contrary atom → assumptions it attacks (sorted)."""
        index: Dict[Atom, List[Atom]] = {}
        for assumption, contrary in self.contraries.items():
            index.setdefault(contrary, []).append(assumption)
        return MappingProxyType({c: tuple(sorted(a)) for c, a in index.items()})

    def contrary_of(self, assumption: Atom) -> Optional[Atom]:
        return self.contraries.get(assumption)

    def explicit_weight(self, atom: Atom) -> Optional[Weight]:
        return self.weights.get(atom)

    @property
    def is_flat(self) -> bool:
        """No assumption appears as a rule head."""
        return not any(rule.head in self.assumptions for rule in self.rules)

    def summary(self) -> Dict[str, int]:
        return {
            "assumptions": len(self.assumptions),
            "rules":       len(self.rules),
            "contraries":  len(self.contraries),
            "weights":     len(self.weights),
            "atoms":       len(self.atoms),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name":        self.name,
            "assumptions": sorted(self.assumptions),
            "rules": [
                {"id": r.id, "head": r.head, "body": sorted(r.body)} for r in self.rules
            ],
            "contraries":  dict(sorted(self.contraries.items())),
            "weights":     {a: w.to_json() for a, w in sorted(self.weights.items())},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Framework":
        """Inverse of ``to_dict``. Rules may be dicts or ``[head, [body...]]``
        pairs; missing rule ids are numbered r1, r2, ...
        """
        rules = []
        for i, raw in enumerate(data.get("rules", ()), start=1):
            if isinstance(raw, Mapping):
                rules.append(Rule(str(raw.get("id") or f"r{i}"), raw["head"], frozenset(raw.get("body", ()))))
            else:
                head, body = raw
                rules.append(Rule(f"r{i}", head, frozenset(body)))
        return cls(
            assumptions=frozenset(data.get("assumptions", ())),
            rules=tuple(rules),
            contraries=dict(data.get("contraries", {})),
            weights=dict(data.get("weights", {})),
            name=str(data.get("name", "")),
        )


# ─────────────────────────────────────────────
#  ATTACKS, CANDIDATES, EXTENSIONS
# ─────────────────────────────────────────────

@dataclass(frozen=True)
class Attack:
    """A (potential) attack: the supported contrary ``attacker`` hits ``victim``."""
    attacker: Atom
    victim:   Atom
    weight:   Weight

    @property
    def pair(self) -> Tuple[Atom, Atom]:
        return (self.attacker, self.victim)

    def sort_key(self) -> Tuple[Atom, Atom]:
        return (self.victim, self.attacker)

    def to_dict(self) -> Dict[str, Any]:
        return {"attacker": self.attacker, "victim": self.victim, "weight": self.weight.to_json()}

    def __str__(self) -> str:
        return f"{self.attacker} → {self.victim} (w: {self.weight})"


def sorted_attacks(attacks: Iterable[Attack]) -> List[Attack]:
    return sorted(attacks, key=Attack.sort_key)


@dataclass(frozen=True, eq=False)
class Candidate:
    """A fully resolved trial solution produced during search.

    Transient: built per (assignment, discard choice) and dropped unless
    the semantics evaluator accepts it.
    """
    in_set:     FrozenSet[Atom]
    supported:  Mapping[Atom, Weight]
    potential:  Tuple[Attack, ...]
    discarded:  FrozenSet[Attack]
    successful: FrozenSet[Attack]
    cost:       Cost

    @cached_property
    def defeated(self) -> FrozenSet[Atom]:
        return frozenset(a.victim for a in self.successful)

    @cached_property
    def tolerated(self) -> FrozenSet[Tuple[Atom, Atom]]:
        return frozenset(a.pair for a in self.discarded)


@dataclass(frozen=True, eq=False)
class Extension:
    """An accepted extension — immutable once produced."""
    in_assumptions:     FrozenSet[Atom]
    out_assumptions:    FrozenSet[Atom]
    supported:          Mapping[Atom, Weight]
    discarded_attacks:  FrozenSet[Attack]
    successful_attacks: FrozenSet[Attack]
    cost:               Cost
    semantics:          str = ""

    @classmethod
    def from_candidate(
        cls,
        candidate: Candidate,
        framework: Framework,
        semantics: str = "",
    ) -> "Extension":
        return cls(
            in_assumptions=candidate.in_set,
            out_assumptions=framework.assumptions - candidate.in_set,
            supported=MappingProxyType(dict(candidate.supported)),
            discarded_attacks=candidate.discarded,
            successful_attacks=candidate.successful,
            cost=candidate.cost,
            semantics=semantics,
        )

    @property
    def defeated(self) -> FrozenSet[Atom]:
        return frozenset(a.victim for a in self.successful_attacks)

    @property
    def range(self) -> FrozenSet[Atom]:
        """in ∪ defeated."""
        return self.in_assumptions | self.defeated

    def to_dict(self) -> Dict[str, Any]:
        return {
            "in":         sorted(self.in_assumptions),
            "out":        sorted(self.out_assumptions),
            "supported":  {a: w.to_json() for a, w in sorted(self.supported.items())},
            "discarded":  [a.to_dict() for a in sorted_attacks(self.discarded_attacks)],
            "successful": [a.to_dict() for a in sorted_attacks(self.successful_attacks)],
            "cost":       cost_to_json(self.cost),
            "semantics":  self.semantics,
        }

    def explain(self) -> str:
        """Human-readable account of the extension, one fact per line."""
        lines = [
            f"[{self.semantics or 'extension'}] in = {{{', '.join(sorted(self.in_assumptions))}}}"
            f"  cost = {cost_to_json(self.cost)}",
        ]
        for attack in sorted_attacks(self.successful_attacks):
            lines.append(f"  defeats:   {attack}")
        for attack in sorted_attacks(self.discarded_attacks):
            lines.append(f"  tolerates: {attack}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"Extension(in={sorted(self.in_assumptions)}, cost={cost_to_json(self.cost)}, "
            f"discarded={len(self.discarded_attacks)})"
        )


# ─────────────────────────────────────────────
#  SOLVE OUTPUT
# ─────────────────────────────────────────────

@dataclass
class SearchStats:
    """Counters collected by the enumerator (per branch, merged at the end)."""
    nodes:           int   = 0   # backtracking nodes visited
    assignments:     int   = 0   # complete in/out assignments reached
    candidates:      int   = 0   # (assignment, discard) pairs evaluated
    accepted:        int   = 0
    pruned_conflict: int   = 0
    pruned_budget:   int   = 0
    pruned_bound:    int   = 0
    elapsed_s:       float = 0.0

    def merge(self, other: "SearchStats") -> "SearchStats":
        for name in ("nodes", "assignments", "candidates", "accepted",
                     "pruned_conflict", "pruned_budget", "pruned_bound"):
            setattr(self, name, getattr(self, name) + getattr(other, name))
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SolveResult:
    """Outcome of one solve request.

    ``UNSATISFIABLE`` is a valid outcome, not an error: no candidate passed
    the semantics evaluator.
    """
    status:       SolveStatus
    extensions:   List[Extension]
    semantics:    str
    semiring:     str
    monoid:       str
    optimal_cost: Optional[Cost] = None
    stats:        SearchStats = field(default_factory=SearchStats)

    @property
    def satisfiable(self) -> bool:
        return self.status is SolveStatus.SATISFIABLE

    def in_sets(self) -> List[FrozenSet[Atom]]:
        return [ext.in_assumptions for ext in self.extensions]

    def __len__(self) -> int:
        return len(self.extensions)

    def __iter__(self) -> Iterator[Extension]:
        return iter(self.extensions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status":       self.status.value,
            "semantics":    self.semantics,
            "semiring":     self.semiring,
            "monoid":       self.monoid,
            "optimal_cost": None if self.optimal_cost is None else cost_to_json(self.optimal_cost),
            "extensions":   [ext.to_dict() for ext in self.extensions],
            "stats":        self.stats.to_dict(),
        }
