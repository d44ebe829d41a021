"""
tests/conftest.py
==================
Shared pytest fixtures for all WABA-Core tests.
"""

import pytest

from waba.algebra.registry import get_monoid, get_semiring
from waba.builder import FrameworkBuilder


# ─── CLASSICAL FRAMEWORKS (no explicit weights) ───────────────────


@pytest.fixture
def mutual_attack():
    """a and b attack each other: stable {a}, {b}; grounded ∅."""
    return (FrameworkBuilder("mutual")
            .assumption("a", contrary="c_a")
            .assumption("b", contrary="c_b")
            .rule("c_a", "b")
            .rule("c_b", "a")
            .build())


@pytest.fixture
def odd_cycle():
    """a → b → c → a: no stable extension, grounded ∅."""
    return (FrameworkBuilder("odd_cycle")
            .assumption("a", contrary="c_a")
            .assumption("b", contrary="c_b")
            .assumption("c", contrary="c_c")
            .rule("c_b", "a")
            .rule("c_c", "b")
            .rule("c_a", "c")
            .build())


@pytest.fixture
def attack_chain():
    """c → b → a: grounded {a, c}."""
    return (FrameworkBuilder("chain")
            .assumption("a", contrary="c_a")
            .assumption("b", contrary="c_b")
            .assumption("c", contrary="c_c")
            .rule("c_a", "b")
            .rule("c_b", "c")
            .build())


@pytest.fixture
def total_conflict():
    """Every assumption attacks every other one."""
    builder = FrameworkBuilder("total")
    for x in ("a", "b", "c"):
        builder.assumption(x, contrary=f"c_{x}")
        for y in ("a", "b", "c"):
            if x != y:
                builder.rule(f"c_{x}", y)
    return builder.build()


@pytest.fixture
def classical_frameworks(mutual_attack, odd_cycle, attack_chain, total_conflict):
    return [mutual_attack, odd_cycle, attack_chain, total_conflict]


# ─── WEIGHTED FRAMEWORKS ──────────────────────────────────────────


@pytest.fixture
def weighted_mutual():
    """b attacks a with 60, a attacks b with 80 (Gödel support)."""
    return (FrameworkBuilder("weighted_mutual")
            .assumption("a", contrary="c_a", weight=80)
            .assumption("b", contrary="c_b", weight=60)
            .rule("c_a", "b")
            .rule("c_b", "a")
            .build())


@pytest.fixture
def scenario_two():
    return (FrameworkBuilder("scenario_two")
            .assumption("a", contrary="c_a")
            .assumption("b", weight=80)
            .rule("c_a", "b")
            .build())


@pytest.fixture
def diverging_arctic():
    """x ← y and x ← x, y: Arctic support of x grows forever."""
    return (FrameworkBuilder("diverging")
            .assumption("y", weight=1)
            .rule("x", "y")
            .rule("x", "x", "y")
            .build())


# ─── ALGEBRA ──────────────────────────────────────────────────────


@pytest.fixture
def godel():
    return get_semiring("godel")


@pytest.fixture
def tropical():
    return get_semiring("tropical")


@pytest.fixture
def max_monoid():
    return get_monoid("max")


@pytest.fixture
def sum_monoid():
    return get_monoid("sum")
