"""Move execution for Crazy Eights."""

from __future__ import annotations

import logging

from crazy_eights.move_generator import is_legal
from crazy_eights.moves import ChooseSuit, Draw, Move, PlayCard
from crazy_eights.state import GamePhase, GameState

logger = logging.getLogger(__name__)


class IllegalMoveError(Exception):
    """Raised when an illegal move is attempted."""

    pass


def execute_move(state: GameState, move: Move) -> GameState:
    """Execute a move and return the new game state.

    Args:
        state: Current game state.
        move: Move to execute.

    Returns:
        New game state after the move.

    Raises:
        IllegalMoveError: If the move is not legal.
    """
    if state.is_game_over:
        raise IllegalMoveError("Game is already over")
    if move.player != state.current_player:
        raise IllegalMoveError(f"It is not {move.player.display_name}'s turn")

    match move:
        case PlayCard():
            return _execute_play_card(state, move)
        case Draw():
            return _execute_draw(state)
        case ChooseSuit():
            return _execute_choose_suit(state, move)
        case _:
            raise IllegalMoveError(f"Unknown move type: {type(move)}")


def _execute_play_card(state: GameState, move: PlayCard) -> GameState:
    """Execute playing a card onto the discard pile."""
    if state.phase != GamePhase.AWAITING_MOVE:
        raise IllegalMoveError("Choose a suit before playing another card")

    player = state.current_player
    hand = state.current_hand
    if move.card not in hand:
        raise IllegalMoveError(f"Card {move.card} not in hand")
    if not is_legal(move.card, state.top_card, state.active_suit):
        raise IllegalMoveError(
            f"Card {move.card} does not match {state.top_card} or {state.active_suit.label}"
        )

    new_hand = tuple(c for c in hand if c != move.card)
    new_state = state.with_hand(player, new_hand).with_discard(state.discard + (move.card,))

    if not new_hand:
        logger.info(f"{player.display_name} emptied their hand with {move.card}")
        return new_state.with_winner(player)

    if move.card.changes_suit:
        return new_state.with_phase(GamePhase.AWAITING_SUIT_CHOICE)

    return new_state.with_active_suit(move.card.suit).with_next_turn()


def _execute_draw(state: GameState) -> GameState:
    """Execute a draw, skipping the turn when the deck is exhausted."""
    if state.phase != GamePhase.AWAITING_MOVE:
        raise IllegalMoveError("Can only draw while awaiting a move")

    player = state.current_player
    if not state.deck:
        logger.info(f"Draw pile is empty, {player.display_name} skips their turn")
        return state.with_next_turn()

    drawn_card = state.deck[-1]
    new_hand = state.current_hand + (drawn_card,)
    return state.with_hand(player, new_hand).with_deck(state.deck[:-1]).with_next_turn()


def _execute_choose_suit(state: GameState, move: ChooseSuit) -> GameState:
    """Execute naming the new active suit."""
    if state.phase != GamePhase.AWAITING_SUIT_CHOICE:
        raise IllegalMoveError("No suit choice is pending")

    return state.with_active_suit(move.suit).with_next_turn()
