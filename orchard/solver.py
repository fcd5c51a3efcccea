"""Top-down orchard solver"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Tuple, Union

from orchard.common import (
    INITIAL_STATE,
    State,
    is_canonical,
    is_lose,
    is_win,
    remaining_fruit_indices,
    roll_fruit,
    roll_raven,
    state_to_key,
)
from orchard.strategies import ChooseFn, Strategy, as_strategy

StrategyLike = Union[str, Strategy, ChooseFn]


@dataclass
class EvalStats:
    method: str
    strategy: str
    states_computed: int = 0
    cache_hits: int = 0
    seconds: float = 0.0

    def summary(self) -> str:
        return (
            f"{self.method}/{self.strategy}: computed {self.states_computed} states, "
            f"cache hits {self.cache_hits}, {self.seconds:.4f}s"
        )


class RecursiveEvaluator:
    """Memoized expectation over the transition model.

    One instance per evaluation; the cache is never shared between
    strategies.
    """

    def __init__(self, strategy: StrategyLike) -> None:
        self.strategy = as_strategy(strategy)
        self.cache: dict[int, float] = {}
        self.stats = EvalStats(method="recursive", strategy=self.strategy.name)

    def win_chance(self, state: State) -> float:
        if is_win(state):
            return 1.0
        if is_lose(state):
            return 0.0
        key = state_to_key(state)
        try:
            p = self.cache[key]
        except KeyError:
            pass
        else:
            self.stats.cache_hits += 1
            return p

        total = 0.0
        weight = 0

        # Raven
        total += self.win_chance(roll_raven(state))
        weight += 1

        # Fruit
        for i in remaining_fruit_indices(state):
            total += self.win_chance(roll_fruit(state, i))
            weight += 1

        # Basket
        total += self.win_chance(roll_fruit(state, self.strategy(state)))
        weight += 1

        p = total / weight
        self.cache[key] = p
        self.stats.states_computed += 1
        return p


def solve_recursive_with_stats(strategy: StrategyLike,
                               state: State = INITIAL_STATE) -> Tuple[float, EvalStats]:
    if not is_canonical(state):
        raise KeyError(f"state not in table: {state}")
    evaluator = RecursiveEvaluator(strategy)
    t0 = time.perf_counter()
    p = evaluator.win_chance(state)
    evaluator.stats.seconds = time.perf_counter() - t0
    return p, evaluator.stats


def solve_recursive(strategy: StrategyLike, state: State = INITIAL_STATE) -> float:
    """Probability of winning from ``state`` when following ``strategy``."""
    p, _stats = solve_recursive_with_stats(strategy, state)
    return p
