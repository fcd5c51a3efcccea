from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Tuple

import numpy as np
import pandas as pd

from orchard.common import INITIAL_STATE, State, iter_states, is_lose, is_win
from orchard.dp import solve_dp_with_stats
from orchard.solver import EvalStats, StrategyLike, solve_recursive_with_stats
from orchard.strategies import as_strategy

SolveFn = Callable[[StrategyLike, State], Tuple[float, EvalStats]]

METHODS: Dict[str, SolveFn] = {
    "recursive": solve_recursive_with_stats,
    "dp": solve_dp_with_stats,
}


def method_choices() -> List[str]:
    return list(METHODS)


def compare_strategies(strategies: Iterable[StrategyLike],
                       methods: Iterable[str] = ("recursive", "dp"),
                       state: State = INITIAL_STATE) -> pd.DataFrame:
    methods = list(methods)
    for method in methods:
        if method not in METHODS:
            raise ValueError(f"Unknown method: {method}")
    rows = []
    for strategy in strategies:
        strat = as_strategy(strategy)
        for method in methods:
            p, stats = METHODS[method](strat, state)
            rows.append({
                "strategy": strat.name,
                "method": method,
                "win_probability": p,
                "states_computed": stats.states_computed,
                "cache_hits": stats.cache_hits,
                "seconds": stats.seconds,
            })
    return pd.DataFrame(rows, columns=[
        "strategy", "method", "win_probability", "states_computed", "cache_hits", "seconds",
    ])


def agreement(frame: pd.DataFrame) -> pd.DataFrame:
    """Largest gap between methods for each strategy."""
    grouped = frame.groupby("strategy", sort=False)["win_probability"]
    out = pd.DataFrame({
        "min": grouped.min(),
        "max": grouped.max(),
    })
    out["max_abs_diff"] = out["max"] - out["min"]
    return out.reset_index()


def table_frame(table: np.ndarray, include_terminal: bool = False) -> pd.DataFrame:
    rows = []
    for state in iter_states():
        if not include_terminal and (is_win(state) or is_lose(state)):
            continue
        a, b, c, d, raven = state.as_tuple()
        rows.append({
            "a": a,
            "b": b,
            "c": c,
            "d": d,
            "raven": raven,
            "win_probability": float(table[state.as_tuple()]),
        })
    return pd.DataFrame(rows, columns=["a", "b", "c", "d", "raven", "win_probability"])
