"""
waba/builder.py
===============
Framework construction: fluent builder and structured-data loading.

Frameworks enter the engine already structured; this module provides:
    1. FrameworkBuilder — fluent API to assemble a framework in code
    2. FrameworkLoader  — load frameworks from JSON files or plain dicts
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from waba.core.types import Framework, Rule, Weight
from waba.core.validators import validate_framework_or_raise

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────
#  FRAMEWORK BUILDER  (fluent API)
# ─────────────────────────────────────────────


class FrameworkBuilder:
    """Fluent builder for Framework.

    Example:
        fw = (FrameworkBuilder("simple")
              .assumption("a", contrary="c_a", weight=80)
              .assumption("b", contrary="c_b", weight=60)
              .rule("c_a", "b")
              .rule("c_b", "a")
              .build())
    """

    def __init__(self, name: str = ""):
        self._name = name
        self._assumptions: List[str] = []
        self._rules: List[Rule] = []
        self._contraries: Dict[str, str] = {}
        self._weights: Dict[str, Weight] = {}

    def assumption(
        self,
        name: str,
        contrary: Optional[str] = None,
        weight: Any = None,
    ) -> "FrameworkBuilder":
        if name not in self._assumptions:
            self._assumptions.append(name)
        if contrary is not None:
            self.contrary(name, contrary)
        if weight is not None:
            self.weight(name, weight)
        return self

    def assumptions(self, *names: str) -> "FrameworkBuilder":
        for name in names:
            self.assumption(name)
        return self

    def contrary(self, assumption: str, atom: str) -> "FrameworkBuilder":
        previous = self._contraries.get(assumption)
        if previous is not None and previous != atom:
            raise ValueError(
                f"Assumption '{assumption}' already has contrary '{previous}'; "
                "derive additional attackers through rules instead"
            )
        self._contraries[assumption] = atom
        return self

    def rule(self, head: str, *body: str, rule_id: Optional[str] = None) -> "FrameworkBuilder":
        rid = rule_id or f"r{len(self._rules) + 1}"
        self._rules.append(Rule(rid, head, frozenset(body)))
        return self

    def fact(self, head: str, weight: Any = None, rule_id: Optional[str] = None) -> "FrameworkBuilder":
        self.rule(head, rule_id=rule_id)
        if weight is not None:
            self.weight(head, weight)
        return self

    def weight(self, atom: str, weight: Any) -> "FrameworkBuilder":
        self._weights[atom] = Weight.of(weight)
        return self

    def named(self, name: str) -> "FrameworkBuilder":
        self._name = name
        return self

    def build(self, validate: bool = True) -> Framework:
        framework = Framework(
            assumptions=frozenset(self._assumptions),
            rules=tuple(self._rules),
            contraries=dict(self._contraries),
            weights=dict(self._weights),
            name=self._name,
        )
        if validate:
            validate_framework_or_raise(framework)
        return framework


# ─────────────────────────────────────────────
#  FRAMEWORK LOADER
# ─────────────────────────────────────────────


class FrameworkLoader:
    """Load frameworks from JSON or dict config.

    JSON format:
    {
      "name": "simple",
      "assumptions": ["a", "b"],
      "rules": [{"id": "r1", "head": "c_a", "body": ["b"]}],
      "contraries": {"a": "c_a", "b": "c_b"},
      "weights": {"a": 80, "b": 60, "c_a": "#sup"}
    }
    """

    @classmethod
    def from_json(cls, path: str) -> Framework:
        data = json.loads(Path(path).read_text())
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Framework:
        framework = Framework.from_dict(data)
        validate_framework_or_raise(framework)
        logger.info(
            f"Loaded framework '{framework.name or '<unnamed>'}': "
            f"{len(framework.assumptions)} assumptions, {len(framework.rules)} rules"
        )
        return framework

    @classmethod
    def to_json(cls, framework: Framework, path: str) -> None:
        Path(path).write_text(json.dumps(framework.to_dict(), indent=2))
