from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

from orchard.common import INITIAL_STATE, parse_state
from orchard.dp import build_table
from orchard.report import agreement, compare_strategies, method_choices, table_frame
from orchard.strategies import build_strategy, strategy_choices, strategy_description


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Exact win chance of the orchard game per basket strategy")
    parser.add_argument(
        "--strategy",
        action="append",
        choices=strategy_choices(),
        default=None,
        help="Strategy to evaluate (repeatable, default: all)",
    )
    parser.add_argument(
        "--method",
        choices=method_choices() + ["both"],
        default="both",
        help="Evaluator to run",
    )
    parser.add_argument("--state", type=str, default="", help="Start state as a,b,c,d,raven")
    parser.add_argument("--tol", type=float, default=1e-9, help="Allowed gap between evaluators")
    parser.add_argument("--show-table", type=int, default=0, help="Print the N worst non-terminal states per strategy")
    parser.add_argument("--out", type=str, default="", help="Optional JSON output path")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.tol < 0:
        raise ValueError("--tol must be >= 0")
    if args.show_table < 0:
        raise ValueError("--show-table must be >= 0")
    state = parse_state(args.state) if args.state else INITIAL_STATE
    names = args.strategy or strategy_choices()
    methods = method_choices() if args.method == "both" else [args.method]

    print(f"Start state: {state}")
    t0 = time.perf_counter()
    frame = compare_strategies([build_strategy(name) for name in names], methods, state=state)
    t1 = time.perf_counter()

    for row in frame.itertuples(index=False):
        print(
            f"{row.strategy} by {row.method}: {row.win_probability:.12f} "
            f"(computed {row.states_computed}, hits {row.cache_hits}, {row.seconds:.4f}s)"
        )
    print(f"Total time: {t1 - t0:.3f}s")

    ok = True
    gaps = agreement(frame)
    if len(methods) > 1:
        for row in gaps.itertuples(index=False):
            if row.max_abs_diff > args.tol:
                ok = False
                print(f"MISMATCH {row.strategy}: evaluators differ by {row.max_abs_diff:.3e}")

    if args.show_table:
        for name in names:
            table = table_frame(build_table(name))
            worst = table.sort_values("win_probability", kind="mergesort").head(args.show_table)
            print(f"\nLowest win chance under {name} ({strategy_description(name)}):")
            print(worst.to_string(index=False))

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        result = {
            "state": list(state.as_tuple()),
            "results": [
                {
                    "strategy": str(row.strategy),
                    "method": str(row.method),
                    "win_probability": float(row.win_probability),
                    "states_computed": int(row.states_computed),
                    "cache_hits": int(row.cache_hits),
                    "seconds": float(row.seconds),
                }
                for row in frame.itertuples(index=False)
            ],
            "max_abs_diff": {row.strategy: float(row.max_abs_diff) for row in gaps.itertuples(index=False)},
            "agree": ok,
        }
        with out_path.open("w", encoding="utf-8") as f:
            json.dump(result, f, indent=2)
        print(f"\nWrote JSON: {out_path}")

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
