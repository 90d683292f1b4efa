"""Game runner for Crazy Eights simulations."""

from __future__ import annotations

import json
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from crazy_eights.executor import execute_move
from crazy_eights.move_generator import generate_legal_moves
from crazy_eights.state import Participant, check_conservation, create_initial_state

if TYPE_CHECKING:
    from crazy_eights.state import GameState
    from strategies.base import Strategy


@dataclass
class GameResult:
    """Result of a completed game."""

    game_id: str
    winner: str | None  # participant slug, or None if the game stalled
    turns: int
    final_hand_sizes: tuple[int, int, int]
    player_strategies: tuple[str, str, str]
    seed: int | None
    duration_ms: float
    move_count: int


@dataclass
class MoveRecord:
    """Record of a single move."""

    turn: int
    player: str
    move: str
    state_after: dict


@dataclass
class GameLog:
    """Complete log of a game."""

    game_id: str
    timestamp: str
    seed: int | None
    player_strategies: tuple[str, str, str]
    initial_state: dict
    moves: list[MoveRecord] = field(default_factory=list)
    result: GameResult | None = None


class GameRunner:
    """Runs Crazy Eights games with a strategy in every seat.

    With an empty draw pile and nobody able to play, a game can go round
    forever; ``max_turns`` ends it without a winner.
    """

    def __init__(
        self,
        strategies: tuple[Strategy, Strategy, Strategy],
        max_turns: int = 500,
        log_moves: bool = True,
        check_invariants: bool = False,
    ):
        """Initialize the game runner.

        Args:
            strategies: Strategy for player, bot-1 and bot-2, in that order.
            max_turns: Maximum turns before declaring a stall.
            log_moves: Whether to log individual moves.
            check_invariants: Verify card conservation after every move.
        """
        if len(strategies) != len(Participant):
            raise ValueError(f"Need {len(Participant)} strategies, got {len(strategies)}")
        self.strategies = tuple(strategies)
        self.max_turns = max_turns
        self.log_moves = log_moves
        self.check_invariants = check_invariants

    @property
    def strategy_names(self) -> tuple[str, str, str]:
        return (self.strategies[0].name, self.strategies[1].name, self.strategies[2].name)

    def run_game(self, seed: int | None = None) -> tuple[GameResult, GameLog | None]:
        """Run a single game.

        Args:
            seed: Random seed for reproducibility.

        Returns:
            Tuple of (result, log). Log is None if log_moves is False.
        """
        start_time = time.perf_counter()
        game_id = str(uuid.uuid4())

        state = create_initial_state(seed=seed)
        deal_size = state.card_count

        for seat, strategy in zip(Participant, self.strategies):
            strategy.on_game_start(state, seat)

        game_log = None
        if self.log_moves:
            game_log = GameLog(
                game_id=game_id,
                timestamp=datetime.now().isoformat(),
                seed=seed,
                player_strategies=self.strategy_names,
                initial_state=self._state_to_dict(state),
            )

        move_count = 0

        while not state.is_game_over and state.turn_number <= self.max_turns:
            acting_player = state.current_player
            legal_moves = generate_legal_moves(state)

            strategy = self.strategies[acting_player]
            move = strategy.select_move(state, legal_moves)

            new_state = execute_move(state, move)
            move_count += 1
            if self.check_invariants:
                check_conservation(new_state, expected_size=deal_size)

            if game_log:
                game_log.moves.append(
                    MoveRecord(
                        turn=state.turn_number,
                        player=acting_player.slug,
                        move=str(move),
                        state_after=self._state_to_dict(new_state),
                    )
                )

            state = new_state

        duration_ms = (time.perf_counter() - start_time) * 1000

        result = GameResult(
            game_id=game_id,
            winner=state.winner.slug if state.winner is not None else None,
            turns=state.turn_number,
            final_hand_sizes=(len(state.hands[0]), len(state.hands[1]), len(state.hands[2])),
            player_strategies=self.strategy_names,
            seed=seed,
            duration_ms=duration_ms,
            move_count=move_count,
        )

        if game_log:
            game_log.result = result

        for strategy in self.strategies:
            strategy.on_game_end(state, state.winner)

        return result, game_log

    def _state_to_dict(self, state: GameState) -> dict:
        """Convert game state to a dictionary for logging."""
        return {
            "turn": state.turn_number,
            "current_player": state.current_player.slug,
            "phase": state.phase.name,
            "deck_size": len(state.deck),
            "top_card": str(state.top_card),
            "active_suit": state.active_suit.label,
            "hands": [[str(c) for c in hand] for hand in state.hands],
        }


def save_game_log(log: GameLog, base_dir: str = "logs/games") -> Path:
    """Save a game log to disk.

    Args:
        log: Game log to save.
        base_dir: Base directory for logs.

    Returns:
        Path to the saved file.
    """
    date_str = log.timestamp[:10]  # YYYY-MM-DD
    dir_path = Path(base_dir) / date_str
    dir_path.mkdir(parents=True, exist_ok=True)

    file_path = dir_path / f"game_{log.game_id}.json"

    data = {
        "game_id": log.game_id,
        "timestamp": log.timestamp,
        "seed": log.seed,
        "player_strategies": log.player_strategies,
        "initial_state": log.initial_state,
        "moves": [
            {
                "turn": m.turn,
                "player": m.player,
                "move": m.move,
                "state_after": m.state_after,
            }
            for m in log.moves
        ],
        "result": {
            "winner": log.result.winner,
            "turns": log.result.turns,
            "final_hand_sizes": log.result.final_hand_sizes,
            "duration_ms": log.result.duration_ms,
            "move_count": log.result.move_count,
        }
        if log.result
        else None,
    }

    with open(file_path, "w") as f:
        json.dump(data, f, indent=2)

    return file_path


def run_batch(
    strategies: tuple[Strategy, Strategy, Strategy],
    num_games: int,
    start_seed: int = 0,
    log_moves: bool = False,
) -> list[GameResult]:
    """Run multiple games.

    Args:
        strategies: Strategy for each seat.
        num_games: Number of games to run.
        start_seed: Starting seed (incremented for each game).
        log_moves: Whether to log moves (slower).

    Returns:
        List of game results.
    """
    runner = GameRunner(strategies, log_moves=log_moves)
    results = []

    for i in range(num_games):
        result, _ = runner.run_game(seed=start_seed + i)
        results.append(result)

    return results
