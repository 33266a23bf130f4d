"""Move rules of the Zeckendorf decomposition game.

A state is a multiset of Fibonacci units (see zeck.state). A move rewrites
a few units into others of the same total value:

- sum consecutive:  F(i) + F(i+1)  ->  F(i+2)
- split a pair:     2 * F(i)       ->  F(i-2) + F(i+1)     (i >= 2)
- combine ones:     F(1) + F(1)    ->  F(2)

Each move function returns the source state object unchanged when the move
is not applicable. The player left without a move loses.
"""

from __future__ import annotations
from dataclasses import dataclass

from zeck.state import DecompositionState, fib


SUM_CONSECUTIVE = "sum_consecutive"
SPLIT_PAIR = "split_pair"
COMBINE_ONES = "combine_ones"


@dataclass(frozen=True)
class Move:
    """One applicable move and the state it produces."""
    kind: str
    index: int
    result: DecompositionState


def sum_consecutive(state: DecompositionState, index: int) -> DecompositionState:
    if state.count(index) < 1 or state.count(index + 1) < 1:
        return state
    return state.adjusted({index: -1, index + 1: -1, index + 2: 1})


def split_pair(state: DecompositionState, index: int) -> DecompositionState:
    # index 2 sends its lower unit to key 0: 2 * F(2) = F(0) + F(3)
    if index < 2 or state.count(index) < 2:
        return state
    return state.adjusted({index: -2, index - 2: 1, index + 1: 1})


def combine_ones(state: DecompositionState) -> DecompositionState:
    if state.count(1) < 2:
        return state
    return state.adjusted({1: -2, 2: 1})


def legal_moves(state: DecompositionState) -> list[Move]:
    """All applicable moves in generation order, duplicate results included.

    Indices are visited in ascending order, trying a split before a sum at
    each one; combining ones comes last.
    """
    moves = []
    for index in state.indices():
        result = split_pair(state, index)
        if result != state:
            moves.append(Move(SPLIT_PAIR, index, result))
        result = sum_consecutive(state, index)
        if result != state:
            moves.append(Move(SUM_CONSECUTIVE, index, result))
    result = combine_ones(state)
    if result != state:
        moves.append(Move(COMBINE_ONES, 1, result))
    return moves


def generate_children(state: DecompositionState) -> list[DecompositionState]:
    """Distinct states reachable in one move, in generation order."""
    children = []
    seen = set()
    for move in legal_moves(state):
        if move.result in seen:
            continue
        seen.add(move.result)
        children.append(move.result)
    return children


def is_terminal(state: DecompositionState) -> bool:
    """True when the state has reached its final shape.

    Any unit on index 1 keeps the game open, except for the single-one
    state. Otherwise the state is open when some adjacent pair of indices
    holds a repeated unit or units on both sides. A terminal state never
    has children; a few open states, such as {1: 1, 3: 1}, have none either.
    """
    counts = state.as_dict()
    if counts == {1: 1}:
        return True
    if counts.get(1, 0) > 0:
        return False
    for index in range(max(counts, default=0) + 1):
        first = counts.get(index, 0)
        second = counts.get(index + 1, 0)
        if first + second == 0:
            continue
        if first > 1 or second > 1:
            return False
        if first and second:
            return False
    return True


def has_child(state: DecompositionState, candidate: DecompositionState) -> bool:
    return candidate in generate_children(state)


def tostr(state: DecompositionState) -> str:
    parts = [f"{count}*F{index}" for index, count in state.items()]
    return " + ".join(parts) if parts else "empty"


def describe(state: DecompositionState) -> str:
    """Unit values spelled out, e.g. '1x2 + 1x3 (= 5)'."""
    parts = [f"{count}x{fib(index)}" for index, count in state.items()]
    return f"{' + '.join(parts)} (= {state.value()})"


class ZeckendorfGame:
    """Start from n ones; players alternate moves until none is left."""

    class Config:
        def __init__(self, n=1):
            self.n = n

    @staticmethod
    def initial_state(config=None):
        n = config.n if config else 1
        return DecompositionState.initial(n)

    @staticmethod
    def is_terminal(state):
        return is_terminal(state)

    @staticmethod
    def get_children(state, config=None):
        return generate_children(state)

    @staticmethod
    def tostr(state):
        return tostr(state)
