"""Monte Carlo playouts over an evaluated game graph.

A complement to the exact backward induction. Plays games along the graph
where one player may follow the computed strategy and every other move is
drawn uniformly at random.

Useful for:
1. Validating the exact solution (the forced winner never loses when it
   follows its strategy)
2. Measuring how often each side wins under random play
3. Looking at typical game lengths
"""

import random
from typing import Optional

from zeck.engine import GameResult
from zeck.graph import Winner


def simulate_play(
    result: GameResult,
    *,
    num_simulations: int = 1000,
    strategic: Optional[Winner] = None,
    seed: Optional[int] = None,
) -> dict:
    """Play random games on `result.graph`.

    Args:
        result: An evaluated game, as returned by play_game.
        num_simulations: Number of games to play.
        strategic: Player that follows `result.strategy`; None means both
            players move at random.
        seed: Seed for the move sampler.

    Returns dict with:
        - player1_win_rate / player2_win_rate: fraction of games won
        - mean_game_length: average number of moves per game
        - exact_winner: winner under best play
        - num_simulations: games played
    """
    if num_simulations < 1:
        raise ValueError(f"num_simulations must be at least 1, got {num_simulations}")
    graph = result.graph
    if graph.root.winner is Winner.UNDETERMINED:
        raise ValueError("Game result has not been evaluated")

    rng = random.Random(seed)
    wins = {Winner.PLAYER1: 0, Winner.PLAYER2: 0}
    total_length = 0

    for _ in range(num_simulations):
        node = graph.root
        while not node.is_leaf:
            choice = result.strategy.get(node.id) if node.to_move is strategic else None
            if choice is None:
                choice = rng.choice(node.children)
            node = graph.nodes[choice]

        # Whoever is to move at a leaf has lost.
        wins[node.to_move.opponent] += 1
        total_length += node.depth

    return {
        "player1_win_rate": wins[Winner.PLAYER1] / num_simulations,
        "player2_win_rate": wins[Winner.PLAYER2] / num_simulations,
        "mean_game_length": total_length / num_simulations,
        "exact_winner": graph.root.winner,
        "num_simulations": num_simulations,
    }
