"""Tests for the simulation runner."""

import json

import pytest

from simulation.runner import GameRunner, run_batch, save_game_log
from strategies.heuristic import HeuristicStrategy
from strategies.random_strategy import RandomStrategy


def heuristic_seats():
    return (HeuristicStrategy(), HeuristicStrategy(), HeuristicStrategy())


class TestGameRunner:
    def test_heuristic_games_conserve_cards(self):
        runner = GameRunner(heuristic_seats(), log_moves=False, check_invariants=True)

        for seed in range(10):
            result, log = runner.run_game(seed=seed)
            assert log is None
            assert result.move_count > 0
            if result.winner is not None:
                assert 0 in result.final_hand_sizes

    def test_random_games_conserve_cards(self):
        strategies = (RandomStrategy(seed=1), RandomStrategy(seed=2), HeuristicStrategy())
        runner = GameRunner(strategies, log_moves=False, check_invariants=True)

        for seed in range(5):
            result, _ = runner.run_game(seed=seed)
            assert result.player_strategies == ("Random", "Random", "Heuristic")

    def test_winner_slug_matches_empty_hand(self):
        runner = GameRunner(heuristic_seats(), log_moves=False)
        slugs = ["player", "bot-1", "bot-2"]

        for seed in range(10):
            result, _ = runner.run_game(seed=seed)
            if result.winner is not None:
                assert result.final_hand_sizes[slugs.index(result.winner)] == 0

    def test_same_seed_same_game(self):
        first, _ = GameRunner(heuristic_seats(), log_moves=False).run_game(seed=11)
        second, _ = GameRunner(heuristic_seats(), log_moves=False).run_game(seed=11)

        assert first.winner == second.winner
        assert first.turns == second.turns
        assert first.final_hand_sizes == second.final_hand_sizes

    def test_max_turns_stalls_without_winner(self):
        runner = GameRunner(heuristic_seats(), max_turns=1, log_moves=False)

        result, _ = runner.run_game(seed=3)

        assert result.winner is None
        assert result.turns == 2

    def test_wrong_number_of_strategies(self):
        with pytest.raises(ValueError):
            GameRunner((HeuristicStrategy(), HeuristicStrategy()))


class TestGameLog:
    def test_log_records_every_move(self):
        runner = GameRunner(heuristic_seats(), log_moves=True)

        result, log = runner.run_game(seed=4)

        assert log.result is result
        assert len(log.moves) == result.move_count
        assert log.initial_state["turn"] == 1
        assert log.moves[0].player == "player"

    def test_save_game_log(self, tmp_path):
        runner = GameRunner(heuristic_seats(), log_moves=True)
        _, log = runner.run_game(seed=4)

        path = save_game_log(log, base_dir=str(tmp_path))

        data = json.loads(path.read_text())
        assert path.parent.parent == tmp_path
        assert data["game_id"] == log.game_id
        assert len(data["moves"]) == len(log.moves)
        assert data["result"]["move_count"] == log.result.move_count


class TestRunBatch:
    def test_batch_uses_consecutive_seeds(self):
        results = run_batch(heuristic_seats(), num_games=3, start_seed=20)

        assert [r.seed for r in results] == [20, 21, 22]
        assert len({r.game_id for r in results}) == 3
