"""Move types for Crazy Eights."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crazy_eights.cards import Card, Suit
    from crazy_eights.state import Participant


class MoveType(IntEnum):
    """Type of move."""

    PLAY_CARD = auto()
    DRAW = auto()
    CHOOSE_SUIT = auto()


@dataclass(frozen=True, slots=True)
class Move(ABC):
    """Base class for all moves.

    Every move names the participant making it; the executor rejects moves
    made out of turn.
    """

    player: Participant

    @property
    @abstractmethod
    def move_type(self) -> MoveType:
        """The type of this move."""
        ...

    @abstractmethod
    def __str__(self) -> str:
        """Human-readable move description."""
        ...


@dataclass(frozen=True, slots=True)
class PlayCard(Move):
    """Play a card from hand onto the discard pile."""

    card: Card

    @property
    def move_type(self) -> MoveType:
        return MoveType.PLAY_CARD

    def __str__(self) -> str:
        return f"Play {self.card}"


@dataclass(frozen=True, slots=True)
class Draw(Move):
    """Draw a card from the deck (or skip the turn if it is empty)."""

    @property
    def move_type(self) -> MoveType:
        return MoveType.DRAW

    def __str__(self) -> str:
        return "Draw"


@dataclass(frozen=True, slots=True)
class ChooseSuit(Move):
    """Name the new active suit after an eight or a bomb."""

    suit: Suit

    @property
    def move_type(self) -> MoveType:
        return MoveType.CHOOSE_SUIT

    def __str__(self) -> str:
        return f"Choose {self.suit.label}"
