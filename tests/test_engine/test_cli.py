"""Tests for CLI formatting and batch output."""

from crazy_eights.cli import format_snapshot, format_state, run_games
from crazy_eights.game import CrazyEightsGame


class TestFormatting:
    def test_snapshot_hides_bot_cards(self):
        game = CrazyEightsGame()
        snapshot = game.new_game(seed=1)

        text = format_snapshot(snapshot)

        assert "Bot 1: [8 cards]" in text
        assert "Bot 2: [8 cards]" in text
        assert "Your hand:" in text
        assert snapshot.message in text
        for card in game.state.hands[1]:
            assert f"Bot 1: {card}" not in text

    def test_state_shows_every_hand(self):
        game = CrazyEightsGame()
        game.new_game(seed=1)

        text = format_state(game.state)

        for card in game.state.hands[2]:
            assert str(card) in text


class TestBatch:
    def test_run_games_prints_summary(self, capsys):
        run_games(num_games=3, seed=0)

        out = capsys.readouterr().out
        assert "Running 3 games" in out
        assert "player (Heuristic) wins" in out
        assert "Average turns" in out
