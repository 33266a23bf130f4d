"""Tests for Monte Carlo playouts over solved games."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest
from zeck.engine import GameResult, play_game
from zeck.graph import Winner, build_graph
from zeck.simulate import simulate_play
from zeck.state import DecompositionState


class TestSimulatePlay:

    @pytest.mark.parametrize("n", [3, 5, 8, 11])
    def test_forced_winner_never_loses(self, n):
        result = play_game(n)
        sim = simulate_play(result, num_simulations=300, strategic=result.winner, seed=n)
        key = "player1_win_rate" if result.winner is Winner.PLAYER1 else "player2_win_rate"
        assert sim[key] == 1.0
        assert sim["exact_winner"] is result.winner

    def test_single_line_game(self):
        sim = simulate_play(play_game(2), num_simulations=50, seed=0)
        assert sim["player1_win_rate"] == 1.0
        assert sim["mean_game_length"] == 1.0

    def test_rates_sum_to_one(self):
        sim = simulate_play(play_game(9), num_simulations=500, seed=1)
        assert abs(sim["player1_win_rate"] + sim["player2_win_rate"] - 1.0) < 1e-12
        assert sim["num_simulations"] == 500

    def test_game_length_within_graph_depth(self):
        result = play_game(10)
        sim = simulate_play(result, num_simulations=200, seed=2)
        assert 0 < sim["mean_game_length"] <= result.graph.max_depth

    def test_seed_reproducible(self):
        result = play_game(10)
        a = simulate_play(result, num_simulations=200, seed=42)
        b = simulate_play(result, num_simulations=200, seed=42)
        assert a == b

    def test_rejects_zero_simulations(self):
        with pytest.raises(ValueError):
            simulate_play(play_game(3), num_simulations=0)

    def test_rejects_unevaluated_result(self):
        graph = build_graph(DecompositionState.initial(4))
        result = GameResult(n=4, winner=Winner.UNDETERMINED, graph=graph, winning_path=[])
        with pytest.raises(ValueError):
            simulate_play(result)
