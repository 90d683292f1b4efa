"""Random strategy for baseline testing."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from strategies.base import Strategy

if TYPE_CHECKING:
    from crazy_eights.moves import Move
    from crazy_eights.state import GameState


class RandomStrategy(Strategy):
    """Strategy that selects moves uniformly at random.

    Useful as a baseline and for smoke testing. Note that drawing is always
    among the legal moves, so this bot sometimes draws while holding a
    playable card.
    """

    def __init__(self, seed: int | None = None):
        """Initialize the random strategy.

        Args:
            seed: Optional random seed for reproducibility.
        """
        self._rng = random.Random(seed)

    @property
    def name(self) -> str:
        return "Random"

    def select_move(self, state: GameState, legal_moves: list[Move]) -> Move:
        """Select a random legal move."""
        if not legal_moves:
            raise ValueError("No legal moves available")
        return self._rng.choice(legal_moves)
