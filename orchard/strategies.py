from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Union

from orchard.common import State

ChooseFn = Callable[[State], int]


class Strategy(ABC):
    """Picks which fruit the basket roll takes.

    Only called on states with fruit left; must return the index of a
    pile with a positive level.
    """

    name = "strategy"

    @abstractmethod
    def choose(self, state: State) -> int:
        raise NotImplementedError

    def __call__(self, state: State) -> int:
        return self.choose(state)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class GreedyBasketStrategy(Strategy):
    """Choose the emptiest fruit."""

    name = "greedy"

    def choose(self, state: State) -> int:
        fruits = state.fruits
        for i in range(3, 0, -1):
            if fruits[i] > 0:
                return i
        return 0


class VarietyBasketStrategy(Strategy):
    """Choose the fullest fruit."""

    name = "variety"

    def choose(self, state: State) -> int:
        return 0


class FunctionStrategy(Strategy):
    def __init__(self, fn: ChooseFn, name: str = "custom") -> None:
        self._fn = fn
        self.name = name

    def choose(self, state: State) -> int:
        return self._fn(state)


@dataclass(frozen=True)
class _StrategySpec:
    build: Callable[[], Strategy]
    description: str


_STRATEGIES: dict[str, _StrategySpec] = {
    "greedy": _StrategySpec(build=GreedyBasketStrategy, description="take from the emptiest fruit"),
    "variety": _StrategySpec(build=VarietyBasketStrategy, description="take from the fullest fruit"),
}


def strategy_choices() -> List[str]:
    return list(_STRATEGIES)


def strategy_description(name: str) -> str:
    spec = _STRATEGIES.get(name)
    if spec is None:
        raise ValueError(f"Unknown strategy: {name}")
    return spec.description


def build_strategy(name: str) -> Strategy:
    spec = _STRATEGIES.get(name)
    if spec is None:
        raise ValueError(f"Unknown strategy: {name}")
    return spec.build()


def as_strategy(obj: Union[str, Strategy, ChooseFn]) -> Strategy:
    if isinstance(obj, Strategy):
        return obj
    if isinstance(obj, type) and issubclass(obj, Strategy):
        return obj()
    if isinstance(obj, str):
        return build_strategy(obj)
    if callable(obj):
        return FunctionStrategy(obj, name=getattr(obj, "__name__", "custom"))
    raise TypeError(f"not a strategy: {obj!r}")
