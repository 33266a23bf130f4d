"""Zeckendorf decomposition game — state graph construction and solver."""

from .engine import play_game, evaluate, value, winning_path, winner_table, GameResult
from .game import ZeckendorfGame, generate_children, is_terminal
from .graph import build_graph, Graph, Node, Winner
from .state import DecompositionState, fib

__all__ = [
    "play_game", "evaluate", "value", "winning_path", "winner_table", "GameResult",
    "ZeckendorfGame", "generate_children", "is_terminal",
    "build_graph", "Graph", "Node", "Winner",
    "DecompositionState", "fib",
]
