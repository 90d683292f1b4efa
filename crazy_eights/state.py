"""Immutable game state models for Crazy Eights."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from crazy_eights.cards import (
    DECK_SIZE,
    WILDCARD_PLACEHOLDER_SUIT,
    Rank,
    Suit,
    create_deck,
    shuffle_deck,
)

if TYPE_CHECKING:
    from crazy_eights.cards import Card

HAND_SIZE = 8


class InvariantViolationError(Exception):
    """Raised when a game state breaks card conservation or its own shape."""

    pass


class GamePhase(IntEnum):
    """Current phase of the game."""

    SETUP = auto()  # No cards dealt yet
    AWAITING_MOVE = auto()  # Current player plays or draws
    AWAITING_SUIT_CHOICE = auto()  # Current player just played an eight or bomb
    FINISHED = auto()  # Someone emptied their hand


class Participant(IntEnum):
    """Seats at the table, in rotation order."""

    PLAYER = 0
    BOT_1 = 1
    BOT_2 = 2

    @property
    def next(self) -> Participant:
        return Participant((self.value + 1) % len(Participant))

    @property
    def is_bot(self) -> bool:
        return self != Participant.PLAYER

    @property
    def slug(self) -> str:
        """Wire identifier: "player", "bot-1", "bot-2"."""
        return self.name.lower().replace("_", "-")

    @property
    def display_name(self) -> str:
        return {
            Participant.PLAYER: "You",
            Participant.BOT_1: "Bot 1",
            Participant.BOT_2: "Bot 2",
        }[self]

    @classmethod
    def from_slug(cls, slug: str) -> Participant:
        try:
            return cls[slug.upper().replace("-", "_")]
        except KeyError:
            raise ValueError(f"Unknown participant: {slug}") from None


@dataclass(frozen=True, slots=True)
class GameState:
    """Complete immutable game state.

    Attributes:
        hands: One hand per participant, indexed by ``Participant``
        deck: Draw pile; the last card is the top
        discard: Discard pile; the last card is the top
        active_suit: Suit currently in force
        current_player: Whose turn it is
        phase: Current game phase
        turn_number: Increments every time the turn passes
        winner: Participant who emptied their hand, if any
    """

    hands: tuple[tuple[Card, ...], tuple[Card, ...], tuple[Card, ...]]
    deck: tuple[Card, ...]
    discard: tuple[Card, ...]
    active_suit: Suit
    current_player: Participant = Participant.PLAYER
    phase: GamePhase = GamePhase.AWAITING_MOVE
    turn_number: int = 1
    winner: Participant | None = None

    @property
    def top_card(self) -> Card:
        return self.discard[-1]

    @property
    def current_hand(self) -> tuple[Card, ...]:
        return self.hands[self.current_player]

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.FINISHED

    @property
    def card_count(self) -> int:
        return len(self.deck) + len(self.discard) + sum(len(h) for h in self.hands)

    def hand_of(self, participant: Participant) -> tuple[Card, ...]:
        return self.hands[participant]

    def with_hand(self, participant: Participant, hand: tuple[Card, ...]) -> GameState:
        """Return new state with one participant's hand replaced."""
        hands = list(self.hands)
        hands[participant] = hand
        return GameState(
            hands=(hands[0], hands[1], hands[2]),
            deck=self.deck,
            discard=self.discard,
            active_suit=self.active_suit,
            current_player=self.current_player,
            phase=self.phase,
            turn_number=self.turn_number,
            winner=self.winner,
        )

    def with_deck(self, deck: tuple[Card, ...]) -> GameState:
        """Return new state with updated draw pile."""
        return GameState(
            hands=self.hands,
            deck=deck,
            discard=self.discard,
            active_suit=self.active_suit,
            current_player=self.current_player,
            phase=self.phase,
            turn_number=self.turn_number,
            winner=self.winner,
        )

    def with_discard(self, discard: tuple[Card, ...]) -> GameState:
        """Return new state with updated discard pile."""
        return GameState(
            hands=self.hands,
            deck=self.deck,
            discard=discard,
            active_suit=self.active_suit,
            current_player=self.current_player,
            phase=self.phase,
            turn_number=self.turn_number,
            winner=self.winner,
        )

    def with_active_suit(self, active_suit: Suit) -> GameState:
        """Return new state with updated active suit."""
        return GameState(
            hands=self.hands,
            deck=self.deck,
            discard=self.discard,
            active_suit=active_suit,
            current_player=self.current_player,
            phase=self.phase,
            turn_number=self.turn_number,
            winner=self.winner,
        )

    def with_phase(self, phase: GamePhase) -> GameState:
        """Return new state with updated phase."""
        return GameState(
            hands=self.hands,
            deck=self.deck,
            discard=self.discard,
            active_suit=self.active_suit,
            current_player=self.current_player,
            phase=phase,
            turn_number=self.turn_number,
            winner=self.winner,
        )

    def with_next_turn(self) -> GameState:
        """Return new state with the turn passed to the next participant."""
        return GameState(
            hands=self.hands,
            deck=self.deck,
            discard=self.discard,
            active_suit=self.active_suit,
            current_player=self.current_player.next,
            phase=GamePhase.AWAITING_MOVE,
            turn_number=self.turn_number + 1,
            winner=self.winner,
        )

    def with_winner(self, winner: Participant) -> GameState:
        """Return new state with the game finished."""
        return GameState(
            hands=self.hands,
            deck=self.deck,
            discard=self.discard,
            active_suit=self.active_suit,
            current_player=self.current_player,
            phase=GamePhase.FINISHED,
            turn_number=self.turn_number,
            winner=winner,
        )


def check_conservation(state: GameState, expected_size: int = DECK_SIZE) -> None:
    """Verify every card of the deal is still in exactly one pile.

    Raises:
        InvariantViolationError: If cards went missing, appeared, or were
            duplicated.
    """
    ids = [c.id for c in state.deck]
    ids.extend(c.id for c in state.discard)
    for hand in state.hands:
        ids.extend(c.id for c in hand)

    if len(ids) != expected_size:
        raise InvariantViolationError(
            f"Expected {expected_size} cards on the table, found {len(ids)}"
        )
    duplicates = [card_id for card_id, n in Counter(ids).items() if n > 1]
    if duplicates:
        raise InvariantViolationError(f"Duplicate cards on the table: {duplicates}")
    if not state.discard:
        raise InvariantViolationError("Discard pile is empty")


def create_initial_state(deck: list[Card] | None = None, seed: int | None = None) -> GameState:
    """Deal a new game.

    Args:
        deck: Optional pre-ordered deck. If None, creates and shuffles a new deck.
        seed: Random seed for shuffling (only used if deck is None).

    Returns:
        Initial game state with 8 cards per participant and one card on the
        discard pile.
    """
    if deck is None:
        deck = shuffle_deck(create_deck(), seed)
    else:
        deck = list(deck)

    dealt = HAND_SIZE * len(Participant)
    if len(deck) <= dealt:
        raise ValueError(f"Need more than {dealt} cards to deal, got {len(deck)}")

    hands = (
        tuple(deck[:HAND_SIZE]),
        tuple(deck[HAND_SIZE : 2 * HAND_SIZE]),
        tuple(deck[2 * HAND_SIZE : dealt]),
    )
    remaining = deck[dealt:]

    # An eight can't open the discard pile: it goes to the bottom of the deck.
    # Bombs are not checked here.
    first_discard = remaining.pop()
    while first_discard.rank == Rank.EIGHT:
        if all(c.rank == Rank.EIGHT for c in remaining):
            break
        remaining.insert(0, first_discard)
        first_discard = remaining.pop()

    if first_discard.is_wildcard:
        active_suit = WILDCARD_PLACEHOLDER_SUIT
    else:
        active_suit = first_discard.suit

    return GameState(
        hands=hands,
        deck=tuple(remaining),
        discard=(first_discard,),
        active_suit=active_suit,
        current_player=Participant.PLAYER,
        phase=GamePhase.AWAITING_MOVE,
    )
