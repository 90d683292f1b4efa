"""Heuristic bot strategy for Crazy Eights.

The bot saves its eights and bombs:

1. Play an ordinary matching card if it has one (first in hand order)
2. Otherwise play an eight or bomb (first in hand order)
3. Otherwise draw
4. After an eight or bomb, name the suit it holds most of, ties broken by
   hearts, diamonds, clubs, spades; spades when no suited card is left
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from crazy_eights.cards import Suit
from crazy_eights.moves import ChooseSuit, Draw, PlayCard
from strategies.base import Strategy

if TYPE_CHECKING:
    from crazy_eights.cards import Card
    from crazy_eights.moves import Move
    from crazy_eights.state import GameState

FALLBACK_SUIT = Suit.SPADES


def best_suit(hand: tuple[Card, ...] | list[Card]) -> Suit:
    """Most common suit in ``hand``; bombs don't count."""
    counts = Counter(c.suit for c in hand if not c.is_wildcard)
    if not counts:
        return FALLBACK_SUIT
    # Suit iterates in priority order and max() keeps the first best.
    return max(Suit, key=lambda suit: counts[suit])


class HeuristicStrategy(Strategy):
    """Deterministic rule-based bot.

    Given the same state and legal moves it always returns the same move.
    """

    @property
    def name(self) -> str:
        return "Heuristic"

    def select_move(self, state: GameState, legal_moves: list[Move]) -> Move:
        """Select the highest scoring move, first one wins ties."""
        if not legal_moves:
            raise ValueError("No legal moves available")

        target_suit = best_suit(state.current_hand)

        best_move = legal_moves[0]
        best_score = self._score_move(best_move, target_suit)
        for move in legal_moves[1:]:
            score = self._score_move(move, target_suit)
            if score > best_score:
                best_move, best_score = move, score
        return best_move

    def _score_move(self, move: Move, target_suit: Suit) -> int:
        """Score a move (higher is better)."""
        match move:
            case PlayCard(card=card):
                if card.changes_suit:
                    return 100
                return 200
            case Draw():
                return 0
            case ChooseSuit(suit=suit):
                return 1 if suit == target_suit else 0
        return -1
