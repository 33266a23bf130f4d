"""Backward-induction evaluation of the decomposition game."""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Optional

from zeck.game import ZeckendorfGame
from zeck.graph import DEFAULT_MAX_NODES, Graph, Node, Winner, build_graph


logger = logging.getLogger(__name__)


@dataclass
class GameResult:
    """Outcome of a full game analysis for one starting size."""
    n: int
    winner: Winner
    graph: Graph
    winning_path: list[Node]
    strategy: dict[int, Optional[int]] = field(default_factory=dict)

    def on_winning_path(self, node_id: int) -> bool:
        return any(node.id == node_id for node in self.winning_path)

    @property
    def game_length(self) -> int:
        """Number of moves along the winning path."""
        return len(self.winning_path) - 1


def _resolve(graph: Graph, node: Node) -> tuple[Winner, Optional[int]]:
    """Winner of `node` and its strategic child, given evaluated children."""
    mover = node.to_move
    if node.is_leaf:
        # The player to move is stuck and loses.
        return mover.opponent, None
    for child_id in node.children:
        if graph.nodes[child_id].winner is mover:
            return mover, child_id
    return mover.opponent, node.children[0]


def value(
    graph: Graph,
    node_id: int,
    strategy: Optional[dict[int, Optional[int]]] = None,
) -> Winner:
    """Winner of the game from `node_id` under best play by both sides.

    Post-order DFS with an explicit stack; each node is resolved once all of
    its children are, and its winner is memoized on the node. Strategic
    children of resolved nodes are recorded in `strategy` when given.
    """
    if strategy is None:
        strategy = {}

    stack = [node_id]
    while stack:
        node = graph.nodes[stack[-1]]
        if node.winner is not Winner.UNDETERMINED:
            stack.pop()
            strategy.setdefault(node.id, _resolve(graph, node)[1])
            continue

        pending = [c for c in node.children if graph.nodes[c].winner is Winner.UNDETERMINED]
        if pending:
            stack.extend(reversed(pending))
            continue

        stack.pop()
        winner, choice = _resolve(graph, node)
        graph.set_winner(node.id, winner)
        strategy[node.id] = choice

    return graph.nodes[node_id].winner


def evaluate(graph: Graph) -> dict[int, Optional[int]]:
    """Evaluate every node reachable from the root.

    Returns:
        Map of node id to its strategic child id (None for leaves).
    """
    strategy: dict[int, Optional[int]] = {}
    value(graph, graph.root.id, strategy)
    return strategy


def winning_path(graph: Graph, strategy: dict[int, Optional[int]]) -> list[Node]:
    """Follow strategic children from the root down to a leaf."""
    def next_id(node: Node) -> Optional[int]:
        if node.id in strategy:
            return strategy[node.id]
        if node.winner is Winner.UNDETERMINED:
            return None
        return _resolve(graph, node)[1]

    path = [graph.root]
    node_id = next_id(graph.root)
    while node_id is not None:
        node = graph.nodes[node_id]
        path.append(node)
        node_id = next_id(node)
    if not path[-1].is_leaf:
        raise RuntimeError(f"Winning path stops at inner node {path[-1].id}; graph not evaluated")
    return path


def play_game(n: int, *, max_nodes: Optional[int] = DEFAULT_MAX_NODES) -> GameResult:
    """Build and solve the game starting from `n` ones.

    Args:
        n: Starting number of ones; must be a positive integer.
        max_nodes: Upper bound on the state graph size (None for no bound).

    Returns:
        GameResult with the winner, the evaluated graph and one winning path.
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise ValueError(f"n must be a positive integer, got {n!r}")
    if n < 1:
        raise ValueError(f"n must be a positive integer, got {n}")

    config = ZeckendorfGame.Config(n=n)
    graph = build_graph(
        ZeckendorfGame.initial_state(config),
        get_children=ZeckendorfGame.get_children,
        is_terminal=ZeckendorfGame.is_terminal,
        max_nodes=max_nodes,
    )
    strategy = evaluate(graph)
    path = winning_path(graph, strategy)
    winner = graph.root.winner

    logger.info("n=%d: %s wins (winning path of %d moves)", n, winner.name, len(path) - 1)
    return GameResult(n=n, winner=winner, graph=graph, winning_path=path, strategy=strategy)


def winner_table(max_n: int, *, max_nodes: Optional[int] = DEFAULT_MAX_NODES) -> dict[int, Winner]:
    """Winner for every starting size from 1 to max_n."""
    if isinstance(max_n, bool) or not isinstance(max_n, int) or max_n < 1:
        raise ValueError(f"max_n must be a positive integer, got {max_n!r}")
    return {n: play_game(n, max_nodes=max_nodes).winner for n in range(1, max_n + 1)}
