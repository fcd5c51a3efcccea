"""Bottom-up orchard solver: fills the whole table in dependency order."""

from __future__ import annotations

import time
from typing import Tuple

import numpy as np

from orchard.common import (
    INITIAL_STATE,
    RAVEN_LEVELS,
    TABLE_SHAPE,
    State,
    is_canonical,
    iter_fruit_levels,
    remaining_fruit_indices,
    roll_fruit,
    roll_raven,
)
from orchard.solver import EvalStats, StrategyLike
from orchard.strategies import Strategy, as_strategy


def _lookup(table: np.ndarray, state: State) -> float:
    value = table[state.as_tuple()]
    if np.isnan(value):
        raise KeyError(f"state not in table: {state}")
    return float(value)


def _fill(table: np.ndarray, strategy: Strategy, stats: EvalStats) -> None:
    # Win states, including the raven arriving as the last fruit is taken.
    for raven in RAVEN_LEVELS:
        table[0, 0, 0, 0, raven] = 1.0

    # Lose states
    for a, b, c, d in iter_fruit_levels():
        if a > 0:
            table[a, b, c, d, 0] = 0.0

    # Every child has a lower raven level or comes earlier in
    # iter_fruit_levels, so it is already filled.
    for raven in RAVEN_LEVELS[1:]:
        for a, b, c, d in iter_fruit_levels():
            if a == 0:
                continue
            state = State(a, b, c, d, raven)
            total = 0.0
            weight = 0

            # Raven
            total += _lookup(table, roll_raven(state))
            weight += 1

            # Fruit
            for i in remaining_fruit_indices(state):
                total += _lookup(table, roll_fruit(state, i))
                weight += 1

            # Basket
            total += _lookup(table, roll_fruit(state, strategy(state)))
            weight += 1

            table[a, b, c, d, raven] = total / weight
            stats.states_computed += 1


def build_table_with_stats(strategy: StrategyLike) -> Tuple[np.ndarray, EvalStats]:
    strat = as_strategy(strategy)
    stats = EvalStats(method="dp", strategy=strat.name)
    table = np.full(TABLE_SHAPE, np.nan, dtype=np.float64)
    t0 = time.perf_counter()
    _fill(table, strat, stats)
    stats.seconds = time.perf_counter() - t0
    return table, stats


def build_table(strategy: StrategyLike) -> np.ndarray:
    """Win chance for every canonical state, indexed by ``State.as_tuple()``.

    Entries for fruit orders that are not sorted descending stay NaN.
    """
    table, _stats = build_table_with_stats(strategy)
    return table


def solve_dp_with_stats(strategy: StrategyLike,
                        state: State = INITIAL_STATE) -> Tuple[float, EvalStats]:
    if not is_canonical(state):
        raise KeyError(f"state not in table: {state}")
    table, stats = build_table_with_stats(strategy)
    return _lookup(table, state), stats


def solve_dp(strategy: StrategyLike, state: State = INITIAL_STATE) -> float:
    p, _stats = solve_dp_with_stats(strategy, state)
    return p
