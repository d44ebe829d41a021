#!/usr/bin/env python3
"""
scripts/solve.py
=================
Enumerate extensions from the command line.

Usage:
    python scripts/solve.py --example cycle --semantics preferred
    python scripts/solve.py --framework fw.json --semiring tropical --monoid sum
                            --budget 50 --optimize minimize --metrics
    python scripts/solve.py --list
"""
import argparse
import json
import logging
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


def main():
    parser = argparse.ArgumentParser(description="WABA-Core Solver CLI")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--example",   default=None, help="Catalogue example name")
    source.add_argument("--framework", default=None, help="Path to framework JSON")
    source.add_argument("--list",      action="store_true", help="List catalogue examples")
    parser.add_argument("--semiring",  default="godel")
    parser.add_argument("--monoid",    default="max")
    parser.add_argument("--semantics", default="stable")
    parser.add_argument("--budget",    default=None,
                        help="Budget value, #sup / #inf, or 'none' (default: the example's budget)")
    parser.add_argument("--direction", default="ub", choices=["ub", "lb"])
    parser.add_argument("--optimize",  default="none", choices=["none", "minimize", "maximize"])
    parser.add_argument("--max-results", type=int, default=0)
    parser.add_argument("--workers",   type=int, default=1)
    parser.add_argument("--projection", action="store_true")
    parser.add_argument("--metrics",   action="store_true", help="Print acceptance metrics")
    parser.add_argument("--json",      action="store_true", help="Emit the result as JSON")
    parser.add_argument("--verbose",   action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    from waba.builder import FrameworkLoader
    from waba.catalog import get_example, list_examples
    from waba.core.exceptions import WabaError
    from waba.engine.solver import solve, with_search
    from waba.evaluation.metrics import compute_metrics

    if args.list:
        for name in list_examples():
            entry = get_example(name)
            print(f"{name:10s} budget={entry.budget}  {entry.description}")
        return

    budget = args.budget
    if args.framework:
        framework = FrameworkLoader.from_json(args.framework)
    else:
        entry = get_example(args.example or "simple")
        framework = entry.framework
        if budget is None:
            budget = entry.budget
    if isinstance(budget, str) and budget.lower() == "none":
        budget = None

    config = with_search(workers=args.workers, projection=args.projection)
    try:
        result = solve(
            framework, args.semiring, args.monoid, args.semantics,
            budget=budget, optimize=args.optimize, max_results=args.max_results,
            direction=args.direction, config=config,
        )
    except WabaError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(2)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(f"{result.status.value.upper()}: {len(result)} {result.semantics} extension(s)")
        for ext in result:
            print(ext.explain())
    if args.metrics:
        print(compute_metrics(result.extensions, sorted(framework.assumptions), optimize=args.optimize).summary())


if __name__ == "__main__":
    main()
