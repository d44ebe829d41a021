"""
examples/weighted_budget.py
===========================
Budgets in action: tolerating weak attacks, then optimising the cost.
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from waba import FrameworkBuilder, metrics_for, solve
from waba.core.types import OptimizeDirection


def main():
    fw = (FrameworkBuilder("weighted")
          .assumption("a", contrary="c_a", weight=80)
          .assumption("b", contrary="c_b", weight=60)
          .rule("c_a", "b")
          .rule("c_b", "a")
          .build())

    print("Budget 0 (no attack may be tolerated):")
    for ext in solve(fw, "godel", "sum", "stable", budget=0):
        print(ext.explain())

    print("\nBudget 60 (b's weaker attack on a can be tolerated):")
    result = solve(fw, "godel", "sum", "cf", budget=60)
    for ext in result:
        print(ext.explain())

    print("\nCheapest admissible extensions:")
    best = solve(fw, "godel", "sum", "admissible", budget=200, optimize=OptimizeDirection.MINIMIZE)
    print(f"optimal cost: {best.optimal_cost}")
    print(metrics_for(best).summary())


if __name__ == "__main__":
    main()
