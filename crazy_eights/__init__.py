"""Crazy Eights card game engine."""

from crazy_eights.cards import Card, Rank, Suit
from crazy_eights.executor import IllegalMoveError
from crazy_eights.game import CrazyEightsGame, Rejected, TableSnapshot
from crazy_eights.moves import ChooseSuit, Draw, Move, PlayCard
from crazy_eights.state import GamePhase, GameState, InvariantViolationError, Participant

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "GameState",
    "GamePhase",
    "Participant",
    "Move",
    "PlayCard",
    "Draw",
    "ChooseSuit",
    "CrazyEightsGame",
    "TableSnapshot",
    "Rejected",
    "IllegalMoveError",
    "InvariantViolationError",
]
