"""Card, Suit, and Rank models for Crazy Eights."""

from __future__ import annotations

import random
import uuid
from enum import IntEnum


class Suit(IntEnum):
    """Card suits, in the fixed priority order used for suit tie-breaks."""

    HEARTS = 0
    DIAMONDS = 1
    CLUBS = 2
    SPADES = 3

    def __str__(self) -> str:
        return self.symbol

    @property
    def symbol(self) -> str:
        return {
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
            Suit.SPADES: "♠",
        }[self]

    @property
    def label(self) -> str:
        """Lowercase name used on the wire ("hearts", "spades", ...)."""
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> Suit:
        try:
            return cls[label.upper()]
        except KeyError:
            raise ValueError(f"Unknown suit: {label}") from None


class Rank(IntEnum):
    """Card ranks (Ace=1 through King=13) plus the wildcard "bomb"."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    WILDCARD = 14

    def __str__(self) -> str:
        return self.symbol

    @property
    def symbol(self) -> str:
        if self == Rank.WILDCARD:
            return "BOMB"
        if self.value == 1:
            return "A"
        elif self.value <= 10:
            return str(self.value)
        else:
            return self.name[0]


NATURAL_RANKS: tuple[Rank, ...] = tuple(r for r in Rank if r != Rank.WILDCARD)
WILDCARD_COUNT = 3
DECK_SIZE = len(Suit) * len(NATURAL_RANKS) + WILDCARD_COUNT

# Suit carried into play when a wildcard is the opening discard.
WILDCARD_PLACEHOLDER_SUIT = Suit.SPADES


class Card:
    """A playing card.

    Cards are immutable. Identity is the ``id``: two cards with the same rank
    and suit but different ids are different cards (the deck holds several
    wildcards). Wildcards have no suit.
    """

    __slots__ = ("_id", "_rank", "_suit")

    def __init__(self, rank: Rank, suit: Suit | None = None, card_id: str | None = None):
        if rank == Rank.WILDCARD:
            suit = None
        elif suit is None:
            raise ValueError(f"Rank {rank.name} needs a suit")
        object.__setattr__(self, "_rank", rank)
        object.__setattr__(self, "_suit", suit)
        object.__setattr__(self, "_id", card_id or _new_card_id(rank, suit))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Card is immutable")

    @property
    def id(self) -> str:
        return self._id

    @property
    def rank(self) -> Rank:
        return self._rank

    @property
    def suit(self) -> Suit | None:
        return self._suit

    @property
    def is_wildcard(self) -> bool:
        return self._rank == Rank.WILDCARD

    @property
    def is_eight(self) -> bool:
        return self._rank == Rank.EIGHT

    @property
    def changes_suit(self) -> bool:
        """Whether playing this card forces a suit choice (eights and bombs)."""
        return self._rank in (Rank.EIGHT, Rank.WILDCARD)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        suit = self._suit.name if self._suit is not None else None
        return f"Card({self._rank.name}, {suit}, id={self._id!r})"

    def __str__(self) -> str:
        if self.is_wildcard:
            return "BOMB"
        return f"{self._rank.symbol}{self._suit.symbol}"


def _new_card_id(rank: Rank, suit: Suit | None) -> str:
    prefix = "bomb" if suit is None else f"{suit.label}-{rank.symbol}"
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def create_deck() -> list[Card]:
    """Create the 55-card deck: 52 standard cards plus three bombs.

    Every call returns cards with fresh ids.
    """
    deck = [Card(rank, suit) for suit in Suit for rank in NATURAL_RANKS]
    deck.extend(Card(Rank.WILDCARD) for _ in range(WILDCARD_COUNT))
    return deck


def shuffle_deck(deck: list[Card], seed: int | None = None) -> list[Card]:
    """Return a shuffled copy of the deck."""
    rng = random.Random(seed)
    shuffled = deck.copy()
    rng.shuffle(shuffled)
    return shuffled
