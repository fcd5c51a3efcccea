from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from itertools import combinations_with_replacement
from typing import List, Tuple

MAX_FRUIT = 4
MAX_RAVEN = 5
FRUIT_LEVELS: Tuple[int, ...] = tuple(range(MAX_FRUIT + 1))
RAVEN_LEVELS: Tuple[int, ...] = tuple(range(MAX_RAVEN + 1))
FRUIT_INDICES: Tuple[int, ...] = (0, 1, 2, 3)
TABLE_SHAPE = (len(FRUIT_LEVELS),) * len(FRUIT_INDICES) + (len(RAVEN_LEVELS),)

_FIELD_BITS = 4
_FIELD_MASK = (1 << _FIELD_BITS) - 1


@dataclass(frozen=True)
class State:
    """Remaining fruit (sorted descending) and steps left for the raven."""

    a: int
    b: int
    c: int
    d: int
    raven: int

    @property
    def fruits(self) -> Tuple[int, int, int, int]:
        return (self.a, self.b, self.c, self.d)

    def as_tuple(self) -> Tuple[int, int, int, int, int]:
        return (self.a, self.b, self.c, self.d, self.raven)

    def __str__(self) -> str:
        return ",".join(str(x) for x in self.as_tuple())


INITIAL_STATE = State(MAX_FRUIT, MAX_FRUIT, MAX_FRUIT, MAX_FRUIT, MAX_RAVEN)


def is_win(state: State) -> bool:
    """The game is won once every fruit is claimed."""
    return state.a == 0 and state.b == 0 and state.c == 0 and state.d == 0


def is_lose(state: State) -> bool:
    """The game is lost when the raven reaches the orchard."""
    return state.raven == 0


def is_sorted(state: State) -> bool:
    return state.a >= state.b >= state.c >= state.d


def is_canonical(state: State) -> bool:
    """Sorted, and every level inside its bounds."""
    return (
        is_sorted(state)
        and all(level in FRUIT_LEVELS for level in state.fruits)
        and state.raven in RAVEN_LEVELS
    )


def encode_key(a: int, b: int, c: int, d: int, raven: int) -> int:
    return (
        (a & _FIELD_MASK)
        | ((b & _FIELD_MASK) << 4)
        | ((c & _FIELD_MASK) << 8)
        | ((d & _FIELD_MASK) << 12)
        | ((raven & _FIELD_MASK) << 16)
    )


def decode_key(key: int) -> Tuple[int, int, int, int, int]:
    key = int(key)
    a = key & _FIELD_MASK
    b = (key >> 4) & _FIELD_MASK
    c = (key >> 8) & _FIELD_MASK
    d = (key >> 12) & _FIELD_MASK
    raven = (key >> 16) & _FIELD_MASK
    return a, b, c, d, raven


def state_to_key(state: State) -> int:
    return encode_key(state.a, state.b, state.c, state.d, state.raven)


def state_from_key(key: int) -> State:
    return State(*decode_key(key))


def canonicalize(fruits: Iterable[int], raven: int) -> State:
    """Build a valid state from fruit levels given in any order."""
    levels = [int(x) for x in fruits]
    if len(levels) != len(FRUIT_INDICES):
        raise ValueError(f"expected {len(FRUIT_INDICES)} fruit levels, got {len(levels)}")
    for level in levels:
        if level not in FRUIT_LEVELS:
            raise ValueError(f"fruit level out of range 0..{MAX_FRUIT}: {level}")
    if int(raven) not in RAVEN_LEVELS:
        raise ValueError(f"raven level out of range 0..{MAX_RAVEN}: {raven}")
    levels.sort(reverse=True)
    return State(levels[0], levels[1], levels[2], levels[3], int(raven))


def parse_state(text: str) -> State:
    """Parse "a,b,c,d,raven" into a canonical state."""
    parts = [p.strip() for p in text.split(",") if p.strip()]
    if len(parts) != len(FRUIT_INDICES) + 1:
        raise ValueError(f"state must have {len(FRUIT_INDICES) + 1} comma-separated values: {text!r}")
    try:
        values = [int(p) for p in parts]
    except ValueError:
        raise ValueError(f"state values must be integers: {text!r}") from None
    return canonicalize(values[:-1], values[-1])


def iter_fruit_levels() -> Iterator[Tuple[int, int, int, int]]:
    # Ascending lexicographic order: depleting a fruit always yields an
    # earlier combination.
    combos = sorted(
        tuple(reversed(combo))
        for combo in combinations_with_replacement(FRUIT_LEVELS, len(FRUIT_INDICES))
    )
    return iter(combos)


def iter_states(raven_levels: Iterable[int] = RAVEN_LEVELS) -> Iterator[State]:
    for raven in raven_levels:
        for a, b, c, d in iter_fruit_levels():
            yield State(a, b, c, d, raven)


def remaining_fruit_indices(state: State) -> List[int]:
    fruits = state.fruits
    return [i for i in FRUIT_INDICES if fruits[i] > 0]


def roll_raven(state: State) -> State:
    return State(state.a, state.b, state.c, state.d, state.raven - 1)


def roll_fruit(state: State, index: int) -> State:
    fruits = list(state.fruits)
    # Take from the last pile of a run of equal piles so the order holds.
    while index < 3 and fruits[index] == fruits[index + 1]:
        index += 1
    fruits[index] -= 1
    return State(fruits[0], fruits[1], fruits[2], fruits[3], state.raven)
