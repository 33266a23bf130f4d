"""Layered state graph — breadth-first construction with per-layer merging.

Nodes live in an arena (`Graph.nodes`) and refer to each other by integer
id. A node's depth is the number of moves from the root; every edge goes
from depth d to depth d + 1, so a state reachable by several move orders of
the same length is stored once per layer with several parents.
"""

from __future__ import annotations
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from zeck.game import generate_children, is_terminal as rules_is_terminal
from zeck.state import DecompositionState


logger = logging.getLogger(__name__)

DEFAULT_MAX_NODES = 2_000_000


class Winner(Enum):
    UNDETERMINED = 0
    PLAYER1 = 1
    PLAYER2 = -1

    @property
    def opponent(self) -> Winner:
        if self is Winner.PLAYER1:
            return Winner.PLAYER2
        if self is Winner.PLAYER2:
            return Winner.PLAYER1
        return Winner.UNDETERMINED


@dataclass
class Node:
    id: int
    state: DecompositionState
    depth: int
    winner: Winner = Winner.UNDETERMINED
    parents: list[int] = field(default_factory=list)
    children: list[int] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def to_move(self) -> Winner:
        """Player whose turn it is at this node."""
        return Winner.PLAYER1 if self.depth % 2 == 0 else Winner.PLAYER2


@dataclass
class Graph:
    """All states reachable from the root, grouped into depth layers."""
    n: int
    nodes: list[Node] = field(default_factory=list)
    layers: list[list[int]] = field(default_factory=list)

    @property
    def root(self) -> Node:
        return self.nodes[0]

    @property
    def num_nodes(self) -> int:
        return len(self.nodes)

    @property
    def num_edges(self) -> int:
        return sum(len(node.children) for node in self.nodes)

    @property
    def max_depth(self) -> int:
        return len(self.layers) - 1

    def node(self, node_id: int) -> Node:
        return self.nodes[node_id]

    def layer(self, depth: int) -> list[Node]:
        return [self.nodes[i] for i in self.layers[depth]]

    def leaves(self) -> list[Node]:
        return [node for node in self.nodes if node.is_leaf]

    def flatten(self) -> list[Node]:
        """Nodes in breadth-first discovery order."""
        return list(self.nodes)

    def add_node(self, state: DecompositionState, depth: int) -> Node:
        if depth > len(self.layers):
            raise RuntimeError(f"Cannot open layer {depth} before layer {len(self.layers)}")
        node = Node(id=len(self.nodes), state=state, depth=depth)
        self.nodes.append(node)
        if depth == len(self.layers):
            self.layers.append([])
        self.layers[depth].append(node.id)
        return node

    def link(self, parent_id: int, child_id: int) -> None:
        parent = self.nodes[parent_id]
        child = self.nodes[child_id]
        if child.depth != parent.depth + 1:
            raise RuntimeError(
                f"Edge {parent_id}->{child_id} skips layers ({parent.depth} -> {child.depth})"
            )
        if child_id in parent.children:
            return
        parent.children.append(child_id)
        child.parents.append(parent_id)

    def set_winner(self, node_id: int, winner: Winner) -> None:
        """Record a node's winner. A winner is never revised once set."""
        if winner is Winner.UNDETERMINED:
            raise ValueError("Cannot assign an undetermined winner")
        node = self.nodes[node_id]
        if node.winner is Winner.UNDETERMINED:
            node.winner = winner
        elif node.winner is not winner:
            raise RuntimeError(
                f"Node {node_id} already won by {node.winner.name}, refusing {winner.name}"
            )


def build_graph(
    initial_state: DecompositionState,
    *,
    get_children: Callable[[DecompositionState], list[DecompositionState]] = generate_children,
    is_terminal: Callable[[DecompositionState], bool] = rules_is_terminal,
    max_nodes: Optional[int] = DEFAULT_MAX_NODES,
) -> Graph:
    """Expand every state reachable from `initial_state`, one layer at a time.

    Child states equal to a node already created in the next layer are
    merged into it as an extra parent edge. Merging is never attempted
    across layers.

    Args:
        initial_state: Root state of the graph.
        get_children: Distinct successor states of a state.
        is_terminal: Predicate for states in their final shape; such
            states are not expanded.
        max_nodes: Upper bound on the graph size, or None for no bound.

    Returns:
        The constructed Graph; winners are left undetermined.
    """
    total = initial_state.value()
    graph = Graph(n=total)
    root = graph.add_node(initial_state, 0)

    to_explore = deque([root.id])
    current_depth = 0
    # state -> node id for the layer being filled (current_depth + 1)
    next_layer: dict[DecompositionState, int] = {}
    num_terminal = 0

    while to_explore:
        node = graph.nodes[to_explore.popleft()]
        if node.depth > current_depth:
            logger.debug("Layer %d complete: %d nodes", current_depth + 1, len(next_layer))
            current_depth = node.depth
            next_layer = {}

        if is_terminal(node.state):
            num_terminal += 1
            continue

        for child_state in get_children(node.state):
            existing = next_layer.get(child_state)
            if existing is not None:
                graph.link(node.id, existing)
                continue

            if max_nodes is not None and graph.num_nodes >= max_nodes:
                raise RuntimeError(
                    f"State graph for n={total} exceeds max_nodes={max_nodes}"
                )
            if child_state.value() != total:
                raise RuntimeError(
                    f"Bug in move rules: {child_state!r} has value {child_state.value()}, expected {total}"
                )
            child = graph.add_node(child_state, node.depth + 1)
            graph.link(node.id, child.id)
            next_layer[child_state] = child.id
            to_explore.append(child.id)

    logger.info(
        "Built graph for n=%d: %d nodes, %d edges, %d leaves (%d terminal), max depth %d",
        total, graph.num_nodes, graph.num_edges, len(graph.leaves()), num_terminal,
        graph.max_depth,
    )
    return graph
