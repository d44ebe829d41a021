"""
examples/basic_solve.py
=======================
Minimal WABA-Core example: classical ABA recovered with default weights.
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from waba import FrameworkBuilder, solve


def main():
    # a and b attack each other through their contraries
    fw = (FrameworkBuilder("mutual")
          .assumption("a", contrary="c_a")
          .assumption("b", contrary="c_b")
          .rule("c_a", "b")
          .rule("c_b", "a")
          .build())

    result = solve(fw, "godel", "max", "stable", budget=0)
    for ext in result:
        print(ext.explain())
    assert sorted(map(sorted, result.in_sets())) == [["a"], ["b"]], "Two stable extensions expected"
    print("✓ Basic solve passed.")


if __name__ == "__main__":
    main()
