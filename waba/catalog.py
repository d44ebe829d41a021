"""
waba/catalog.py
===============
Ready-made example frameworks, one per attack topology.

Each entry carries the framework plus the budget it was designed for.
Where an assumption is attacked from several directions, the attackers
derive one shared contrary atom through separate rules (an assumption has
a single contrary).

Usage:
    entry = get_example("cycle")
    solve(entry.framework, "godel", "sum", "stable", budget=entry.budget)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

from waba.builder import FrameworkBuilder
from waba.core.types import Framework, Weight

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogEntry:
    name:        str
    description: str
    framework:   Framework
    budget:      Weight

    def to_dict(self) -> dict:
        return {
            "name":        self.name,
            "description": self.description,
            "budget":      self.budget.to_json(),
            "framework":   self.framework.to_dict(),
        }


def _simple() -> Framework:
    # c_a is derived from b; the fact d attacks c without any assumption
    return (FrameworkBuilder("simple")
            .assumption("a", contrary="c_a", weight=80)
            .assumption("b", weight=60)
            .assumption("c", contrary="d")
            .rule("c_a", "b")
            .weight("c_a", 70)
            .fact("d", weight=50)
            .build())


def _linear() -> Framework:
    return (FrameworkBuilder("linear")
            .assumption("a", contrary="b", weight=90)
            .assumption("b", contrary="c_b", weight=70)
            .assumption("c", contrary="d", weight=50)
            .assumption("d", weight=30)
            .rule("c_b", "c")
            .weight("c_b", 60)
            .build())


def _cycle() -> Framework:
    return (FrameworkBuilder("cycle")
            .assumption("a", contrary="b", weight=80)
            .assumption("b", contrary="c_b", weight=70)
            .assumption("c", contrary="a", weight=60)
            .rule("c_b", "c")
            .weight("c_b", 65)
            .build())


def _tree() -> Framework:
    return (FrameworkBuilder("tree")
            .assumption("a", weight=100)
            .assumption("b", contrary="c_b", weight=80)
            .assumption("c", contrary="a", weight=70)
            .assumption("d", weight=50)
            .rule("c_b", "a")
            .rule("c_b", "d")
            .weight("c_b", 60)
            .build())


def _complete() -> Framework:
    return (FrameworkBuilder("complete")
            .assumption("a", contrary="c_a", weight=90)
            .assumption("b", contrary="c", weight=80)
            .assumption("c", contrary="c_c", weight=70)
            .rule("c_a", "b")
            .rule("c_a", "c")
            .rule("c_a", "b", "c")
            .weight("c_a", 75)
            .rule("c_c", "a")
            .weight("c_c", 85)
            .build())


def _mixed() -> Framework:
    return (FrameworkBuilder("mixed")
            .assumption("a", contrary="c_a", weight=100)
            .assumption("b", contrary="a", weight=90)
            .assumption("c", contrary="c_c", weight=80)
            .assumption("d", contrary="e", weight=70)
            .assumption("e", weight=60)
            .rule("c_c", "d")
            .rule("c_c", "a")
            .rule("c_c", "b")
            .weight("c_c", 85)
            .rule("c_a", "b", "d")
            .weight("c_a", 95)
            .build())


def _isolated() -> Framework:
    return (FrameworkBuilder("isolated")
            .assumption("a1", contrary="a2", weight=90)
            .assumption("a2", contrary="c_a2", weight=80)
            .assumption("b1", contrary="b2", weight=70)
            .assumption("b2", contrary="c_b2", weight=60)
            .rule("c_a2", "a1")
            .weight("c_a2", 85)
            .rule("c_b2", "b1")
            .weight("c_b2", 65)
            .build())


_EXAMPLES: Dict[str, tuple] = {
    "simple":   (_simple,   100, "Derived attack (c_a ← b) next to a weighted fact attacking c"),
    "linear":   (_linear,   80,  "Chain d → c → b → a of direct and derived attacks"),
    "cycle":    (_cycle,    100, "Three-way attack cycle: b hits a, c hits b, a hits c"),
    "tree":     (_tree,     120, "Root a attacks b and c; leaf d attacks b through a rule"),
    "complete": (_complete, 150, "Every assumption attacks every other, directly or jointly"),
    "mixed":    (_mixed,    200, "Chains, a cycle and a joint attack in one framework"),
    "isolated": (_isolated, 100, "Two independent mutual-attack islands"),
}


def list_examples() -> List[str]:
    return list(_EXAMPLES)


def get_example(name: str) -> CatalogEntry:
    """Build the catalogue entry registered under ``name``.

    Raises:
        KeyError: if no example has that name.
    """
    try:
        factory, budget, description = _EXAMPLES[name]
    except KeyError:
        raise KeyError(f"Unknown example '{name}'. Available: {list_examples()}") from None
    return CatalogEntry(name=name, description=description, framework=factory(), budget=Weight.finite(budget))
