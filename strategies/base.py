"""Base strategy interface for Crazy Eights bots."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crazy_eights.moves import Move
    from crazy_eights.state import GameState, Participant


class Strategy(ABC):
    """Abstract base class for bot strategies."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this strategy."""
        ...

    @abstractmethod
    def select_move(self, state: GameState, legal_moves: list[Move]) -> Move:
        """Select a move from the list of legal moves.

        Args:
            state: Current game state.
            legal_moves: List of all legal moves for the current situation.

        Returns:
            The selected move.
        """
        ...

    def on_game_start(self, state: GameState, seat: Participant) -> None:
        """Called when a game starts.

        Override to initialize per-game state.

        Args:
            state: Initial game state.
            seat: Which participant this strategy controls.
        """
        pass

    def on_game_end(self, state: GameState, winner: Participant | None) -> None:
        """Called when a game ends.

        Args:
            state: Final game state.
            winner: Winning participant, or None if the game stalled.
        """
        pass
