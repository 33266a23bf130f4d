"""Decomposition states — occurrence counts keyed by Fibonacci index."""

from __future__ import annotations
from functools import lru_cache
from typing import Iterator, Mapping


@lru_cache(maxsize=None)
def fib(index: int) -> int:
    """Fibonacci number at `index`, with fib(0) = fib(1) = 1."""
    if index < 0:
        raise ValueError(f"Fibonacci index must be non-negative, got {index}")
    a, b = 1, 1
    for _ in range(index - 1):
        a, b = b, a + b
    return b


class DecompositionState:
    """Immutable multiset of Fibonacci units.

    Maps a Fibonacci index to the number of units of fib(index) present.
    Keys holding zero are allowed and are ignored by equality and hashing:
    two states are equal when every index in the union of their keys has the
    same count on both sides.
    """

    __slots__ = ("_counts",)

    def __init__(self, counts: Mapping[int, int] | None = None):
        counts = dict(counts or {})
        for index, count in counts.items():
            if not isinstance(index, int) or isinstance(index, bool) or index < 0:
                raise ValueError(f"Invalid Fibonacci index {index!r}")
            if not isinstance(count, int) or isinstance(count, bool) or count < 0:
                raise ValueError(f"Invalid count {count!r} at index {index}")
        self._counts = counts

    @classmethod
    def initial(cls, n: int) -> DecompositionState:
        if isinstance(n, bool) or not isinstance(n, int) or n < 1:
            raise ValueError(f"n must be a positive integer, got {n!r}")
        return cls({1: n})

    def count(self, index: int) -> int:
        return self._counts.get(index, 0)

    def indices(self) -> list[int]:
        """Indices holding at least one unit, ascending."""
        return sorted(i for i, c in self._counts.items() if c > 0)

    def items(self) -> Iterator[tuple[int, int]]:
        for index in self.indices():
            yield index, self._counts[index]

    def as_dict(self) -> dict[int, int]:
        return dict(self.items())

    def total_units(self) -> int:
        return sum(self._counts.values())

    def value(self) -> int:
        """Sum of count * fib(index); conserved by every move."""
        return sum(count * fib(index) for index, count in self._counts.items())

    def adjusted(self, deltas: Mapping[int, int]) -> DecompositionState:
        """Return a new state with `deltas` added to the counts."""
        counts = dict(self._counts)
        for index, delta in deltas.items():
            counts[index] = counts.get(index, 0) + delta
        return DecompositionState(counts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DecompositionState):
            return NotImplemented
        keys = set(self._counts) | set(other._counts)
        return all(self.count(k) == other.count(k) for k in keys)

    def __hash__(self) -> int:
        return hash(tuple(self.items()))

    def __repr__(self) -> str:
        return f"DecompositionState({self.as_dict()!r})"
