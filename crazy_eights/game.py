"""Turn scheduler for a single game of Crazy Eights.

``CrazyEightsGame`` owns one game's state and is the only thing callers
outside the engine talk to. It routes participant intents to the executor,
turns illegal moves into ``Rejected`` results, plays bot turns, and exposes
a ``TableSnapshot`` that never reveals the bots' hands.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from crazy_eights.cards import Rank
from crazy_eights.executor import IllegalMoveError, execute_move
from crazy_eights.move_generator import generate_legal_moves, playable_cards
from crazy_eights.moves import ChooseSuit, Draw, PlayCard
from crazy_eights.state import (
    GamePhase,
    GameState,
    Participant,
    check_conservation,
    create_initial_state,
)

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from crazy_eights.cards import Card, Suit
    from crazy_eights.moves import Move
    from strategies.base import Strategy

WELCOME_MESSAGE = "Welcome to Crazy Eights!"
PLAYER_TURN_MESSAGE = "Your turn! Match the suit or rank."


@dataclass(frozen=True)
class TableSnapshot:
    """Read-only view of the table from the human player's seat."""

    game_id: str
    phase: GamePhase
    current_player: Participant | None
    winner: Participant | None
    message: str
    active_suit: Suit | None
    top_card: Card | None
    deck_count: int
    hand_counts: tuple[int, int, int]
    player_hand: tuple[Card, ...]
    playable_card_ids: frozenset[str]
    turn_number: int

    @property
    def is_player_turn(self) -> bool:
        return self.current_player == Participant.PLAYER and self.phase in (
            GamePhase.AWAITING_MOVE,
            GamePhase.AWAITING_SUIT_CHOICE,
        )


@dataclass(frozen=True)
class Rejected:
    """An action that was refused. The table is unchanged."""

    reason: str
    snapshot: TableSnapshot


@dataclass
class MoveRecord:
    """Record of a single applied move."""

    turn: int
    player: Participant
    move: str
    move_type: str
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class CrazyEightsGame:
    """One game between the human player and two bots."""

    def __init__(
        self,
        strategies: dict[Participant, Strategy] | None = None,
        game_id: str | None = None,
    ):
        """Initialize an undealt game.

        Args:
            strategies: Strategy per bot seat. Missing seats use the
                heuristic bot.
            game_id: Optional identifier (generated if not provided).
        """
        from strategies.heuristic import HeuristicStrategy

        strategies = dict(strategies or {})
        for seat in (Participant.BOT_1, Participant.BOT_2):
            if seat not in strategies:
                strategies[seat] = HeuristicStrategy()

        self.id = game_id or str(uuid.uuid4())
        self.strategies = strategies
        self.state: GameState | None = None
        self.message = WELCOME_MESSAGE
        self.move_history: list[MoveRecord] = []
        self._deal_size = 0

    @property
    def phase(self) -> GamePhase:
        if self.state is None:
            return GamePhase.SETUP
        return self.state.phase

    @property
    def is_bot_turn(self) -> bool:
        """Whether a bot has to act next."""
        return (
            self.state is not None
            and not self.state.is_game_over
            and self.state.current_player.is_bot
        )

    def new_game(self, seed: int | None = None, deck: list[Card] | None = None) -> TableSnapshot:
        """Deal a fresh game, discarding whatever state came before."""
        self.state = create_initial_state(deck=deck, seed=seed)
        check_conservation(self.state, expected_size=self.state.card_count)
        self._deal_size = self.state.card_count
        self.move_history = []
        self.message = PLAYER_TURN_MESSAGE

        for seat, strategy in self.strategies.items():
            strategy.on_game_start(self.state, seat)

        logger.info(
            f"Game {self.id}: dealt, top card {self.state.top_card}, "
            f"active suit {self.state.active_suit.label}"
        )
        return self.snapshot()

    def load_state(self, state: GameState, message: str = PLAYER_TURN_MESSAGE) -> TableSnapshot:
        """Continue from an existing position instead of a fresh deal."""
        check_conservation(state, expected_size=state.card_count)
        self.state = state
        self._deal_size = state.card_count
        self.move_history = []
        self.message = message
        return self.snapshot()

    def play_card(self, participant: Participant, card_id: str) -> TableSnapshot | Rejected:
        """Play the card with ``card_id`` from ``participant``'s hand."""
        if self.state is None:
            return self._reject("No game in progress")

        card = next((c for c in self.state.hand_of(participant) if c.id == card_id), None)
        if card is None:
            return self._reject(f"{card_id} is not in {participant.display_name}'s hand")
        return self._apply(PlayCard(participant, card))

    def choose_suit(
        self, suit: Suit, participant: Participant = Participant.PLAYER
    ) -> TableSnapshot | Rejected:
        """Name the active suit after an eight or a bomb."""
        if self.state is None:
            return self._reject("No game in progress")
        return self._apply(ChooseSuit(participant, suit))

    def draw_card(self, participant: Participant) -> TableSnapshot | Rejected:
        """Draw for ``participant``, or skip their turn if the deck is empty."""
        if self.state is None:
            return self._reject("No game in progress")
        return self._apply(Draw(participant))

    def run_bot_turn(self) -> TableSnapshot | None:
        """Play the current bot's whole turn.

        The card choice and any suit choice are worked out on a local copy
        and committed together, so the table never shows a bot halfway
        through its turn.

        Returns:
            The new snapshot, or None if no bot is due to act.
        """
        if not self.is_bot_turn:
            return None

        bot = self.state.current_player
        strategy = self.strategies[bot]
        state = self.state
        moves: list[Move] = []

        while True:
            move = strategy.select_move(state, generate_legal_moves(state))
            state = execute_move(state, move)
            moves.append(move)
            if not (state.phase == GamePhase.AWAITING_SUIT_CHOICE and state.current_player == bot):
                break

        self._commit(moves, state)
        return self.snapshot()

    def run_bot_turns(self) -> list[TableSnapshot]:
        """Run bot turns until it's the human's turn or the game ends."""
        snapshots = []
        while self.is_bot_turn:
            snapshots.append(self.run_bot_turn())
        return snapshots

    def snapshot(self) -> TableSnapshot:
        """Current table as seen from the human player's seat."""
        state = self.state
        if state is None:
            return TableSnapshot(
                game_id=self.id,
                phase=GamePhase.SETUP,
                current_player=None,
                winner=None,
                message=self.message,
                active_suit=None,
                top_card=None,
                deck_count=0,
                hand_counts=(0, 0, 0),
                player_hand=(),
                playable_card_ids=frozenset(),
                turn_number=0,
            )

        player_hand = state.hand_of(Participant.PLAYER)
        playable: frozenset[str] = frozenset()
        if state.current_player == Participant.PLAYER and state.phase == GamePhase.AWAITING_MOVE:
            playable = frozenset(c.id for c in playable_cards(state, player_hand))

        return TableSnapshot(
            game_id=self.id,
            phase=state.phase,
            current_player=state.current_player,
            winner=state.winner,
            message=self.message,
            active_suit=state.active_suit,
            top_card=state.top_card,
            deck_count=len(state.deck),
            hand_counts=(len(state.hands[0]), len(state.hands[1]), len(state.hands[2])),
            player_hand=player_hand,
            playable_card_ids=playable,
            turn_number=state.turn_number,
        )

    def _reject(self, reason: str) -> Rejected:
        logger.debug(f"Game {self.id}: rejected: {reason}")
        return Rejected(reason=reason, snapshot=self.snapshot())

    def _apply(self, move: Move) -> TableSnapshot | Rejected:
        try:
            new_state = execute_move(self.state, move)
        except IllegalMoveError as e:
            return self._reject(str(e))

        self._commit([move], new_state)
        return self.snapshot()

    def _commit(self, moves: list[Move], new_state: GameState) -> None:
        """Replace the state after one participant's action."""
        check_conservation(new_state, expected_size=self._deal_size)
        old_state = self.state
        self.state = new_state

        for move in moves:
            self.move_history.append(
                MoveRecord(
                    turn=old_state.turn_number,
                    player=move.player,
                    move=str(move),
                    move_type=move.move_type.name,
                )
            )
            logger.debug(f"Game {self.id}: {move.player.slug} {move}")

        self.message = _describe(old_state, moves, new_state)

        if new_state.is_game_over:
            logger.info(f"Game {self.id}: {new_state.winner.slug} wins")
            for strategy in self.strategies.values():
                strategy.on_game_end(new_state, new_state.winner)


def _describe(old_state: GameState, moves: list[Move], new_state: GameState) -> str:
    """Status line for the table after an action."""
    actor = moves[0].player
    name = actor.display_name

    if new_state.is_game_over:
        if new_state.winner == Participant.PLAYER:
            return "You win! You emptied your hand first."
        return f"{new_state.winner.display_name} wins!"

    if new_state.phase == GamePhase.AWAITING_SUIT_CHOICE:
        if new_state.top_card.is_wildcard:
            return "BOMB! Choose a new suit."
        return "Crazy 8! Choose a new suit."

    match moves[0]:
        case Draw():
            if not old_state.deck:
                text = "Draw pile is empty! Skipping turn."
            else:
                text = f"{name} drew a card."
        case PlayCard(card=card) if card.changes_suit:
            played = "a BOMB" if card.rank == Rank.WILDCARD else "an 8"
            text = f"{name} played {played} and chose {new_state.active_suit.label}!"
        case PlayCard(card=card):
            text = f"{name} played {card}."
        case ChooseSuit(suit=suit):
            text = f"Suit changed to {suit.label}."
        case _:
            text = ""

    upcoming = new_state.current_player
    if upcoming == Participant.PLAYER:
        return f"{text} Your turn!"
    return f"{text} {upcoming.display_name} is thinking..."
