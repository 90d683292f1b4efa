"""Legality checks and legal move generation for Crazy Eights."""

from __future__ import annotations

from typing import TYPE_CHECKING

from crazy_eights.cards import Suit
from crazy_eights.moves import ChooseSuit, Draw, Move, PlayCard
from crazy_eights.state import GamePhase, GameState

if TYPE_CHECKING:
    from crazy_eights.cards import Card


def is_legal(card: Card, top_card: Card, active_suit: Suit) -> bool:
    """Whether ``card`` may be played onto ``top_card``.

    Eights and bombs are always playable. Anything else must match the
    active suit or the rank of the top card.
    """
    if card.changes_suit:
        return True
    return card.suit == active_suit or card.rank == top_card.rank


def playable_cards(state: GameState, hand: tuple[Card, ...] | None = None) -> list[Card]:
    """Cards from ``hand`` (default: the current player's) that can be played now."""
    if hand is None:
        hand = state.current_hand
    return [c for c in hand if is_legal(c, state.top_card, state.active_suit)]


def generate_legal_moves(state: GameState) -> list[Move]:
    """Generate all legal moves for the current game state.

    Args:
        state: Current game state.

    Returns:
        List of all legal moves for the current player/phase. Plays come
        first in hand order, followed by the draw.
    """
    if state.is_game_over:
        return []

    player = state.current_player

    match state.phase:
        case GamePhase.AWAITING_MOVE:
            moves: list[Move] = [PlayCard(player, card) for card in playable_cards(state)]
            moves.append(Draw(player))
            return moves
        case GamePhase.AWAITING_SUIT_CHOICE:
            return [ChooseSuit(player, suit) for suit in Suit]

    return []
