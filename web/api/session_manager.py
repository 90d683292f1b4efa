"""Game session management for the web API."""

from __future__ import annotations

import asyncio
import logging
import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import TYPE_CHECKING, Any, Callable

from crazy_eights.game import CrazyEightsGame
from crazy_eights.state import Participant

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from crazy_eights.cards import Card
    from crazy_eights.game import TableSnapshot
    from strategies.base import Strategy

# Seconds a bot "thinks" before its move is applied.
DEFAULT_BOT_DELAY = float(os.environ.get("CRAZY_EIGHTS_BOT_DELAY", "1.5"))


@dataclass
class GameSession:
    """An active game session.

    A reset swaps in a brand new ``CrazyEightsGame``; a bot task still
    holding the old game can't touch the new one.
    """

    id: str
    game: CrazyEightsGame
    created_at: datetime
    bot_strategies: dict[str, str] = field(default_factory=dict)
    seed: int | None = None
    bot_task: asyncio.Task | None = None

    # Callbacks for WebSocket notifications
    _state_listeners: list[Callable[[dict], None]] = field(default_factory=list)

    @property
    def bots_pending(self) -> bool:
        """Whether a bot turn is scheduled and not yet applied."""
        return self.bot_task is not None and not self.bot_task.done()

    def add_listener(self, callback: Callable[[dict], None]) -> None:
        """Add a state change listener."""
        self._state_listeners.append(callback)

    def remove_listener(self, callback: Callable[[dict], None]) -> None:
        """Remove a state change listener."""
        if callback in self._state_listeners:
            self._state_listeners.remove(callback)

    def _notify_listeners(self, event: dict) -> None:
        """Notify all listeners of a state change."""
        for listener in list(self._state_listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Session {self.id}: listener failed")

    def to_client_state(self) -> dict:
        """Convert the current snapshot to a client-friendly format."""
        return snapshot_to_dict(self.game.snapshot(), bots_pending=self.bots_pending)


def card_to_dict(card: Card) -> dict:
    """Convert a Card to a dictionary."""
    return {
        "id": card.id,
        "rank": card.rank.value,
        "rank_symbol": card.rank.symbol,
        "rank_name": card.rank.name,
        "suit": card.suit.label if card.suit is not None else None,
        "suit_symbol": card.suit.symbol if card.suit is not None else None,
        "is_wildcard": card.is_wildcard,
        "display": str(card),
    }


def snapshot_to_dict(snapshot: TableSnapshot, bots_pending: bool = False) -> dict:
    """Convert a TableSnapshot to a dictionary.

    Bot hands appear only as counts.
    """
    return {
        "game_id": snapshot.game_id,
        "phase": snapshot.phase.name,
        "current_player": (
            snapshot.current_player.slug if snapshot.current_player is not None else None
        ),
        "winner": snapshot.winner.slug if snapshot.winner is not None else None,
        "message": snapshot.message,
        "active_suit": snapshot.active_suit.label if snapshot.active_suit is not None else None,
        "top_card": card_to_dict(snapshot.top_card) if snapshot.top_card is not None else None,
        "deck_count": snapshot.deck_count,
        "turn_number": snapshot.turn_number,
        "is_player_turn": snapshot.is_player_turn,
        "bots_pending": bots_pending,
        "players": [
            {
                "id": seat.slug,
                "name": seat.display_name,
                "hand_count": snapshot.hand_counts[seat],
            }
            for seat in Participant
        ],
        "hand": [
            {**card_to_dict(c), "playable": c.id in snapshot.playable_card_ids}
            for c in snapshot.player_hand
        ],
    }


class GameSessionManager:
    """Manages all active game sessions."""

    def __init__(self, bot_delay: float = DEFAULT_BOT_DELAY):
        self._sessions: dict[str, GameSession] = {}
        self._strategy_factory = StrategyFactory()
        self.bot_delay = bot_delay

    def create_session(
        self,
        seed: int | None = None,
        bot_strategies: dict[str, str] | None = None,
    ) -> GameSession:
        """Create a new game session and deal the first game."""
        session_id = str(uuid.uuid4())
        bot_strategies = bot_strategies or {}

        session = GameSession(
            id=session_id,
            game=self._new_game(session_id, bot_strategies),
            created_at=datetime.now(),
            bot_strategies=bot_strategies,
            seed=seed,
        )
        session.game.new_game(seed=seed)

        self._sessions[session_id] = session
        logger.info(f"Session {session_id} created (seed={seed})")
        return session

    def _new_game(self, session_id: str, bot_strategies: dict[str, str]) -> CrazyEightsGame:
        strategies: dict[Participant, Strategy] = {}
        for slug, name in bot_strategies.items():
            seat = Participant.from_slug(slug)
            if not seat.is_bot:
                raise ValueError(f"{slug} is not a bot seat")
            strategies[seat] = self._strategy_factory.create(name)
        return CrazyEightsGame(strategies=strategies, game_id=session_id)

    def reset_session(self, session: GameSession, seed: int | None = None) -> GameSession:
        """Throw the current game away and deal a new one.

        A pending bot turn is cancelled before it can apply anything.
        """
        self.cancel_bot_turns(session)
        session.game = self._new_game(session.id, session.bot_strategies)
        session.seed = seed
        session.game.new_game(seed=seed)
        logger.info(f"Session {session.id} reset (seed={seed})")
        session._notify_listeners({"type": "reset", "state": session.to_client_state()})
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def delete_session(self, session_id: str) -> bool:
        """Delete a session."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        self.cancel_bot_turns(session)
        return True

    def list_sessions(self) -> list[dict]:
        """List all active sessions."""
        sessions = []
        for s in self._sessions.values():
            snapshot = s.game.snapshot()
            sessions.append({
                "id": s.id,
                "created_at": s.created_at.isoformat(),
                "phase": snapshot.phase.name,
                "turn_number": snapshot.turn_number,
                "winner": snapshot.winner.slug if snapshot.winner is not None else None,
                "bots": s.bot_strategies,
                "seed": s.seed,
            })
        return sessions

    def cancel_bot_turns(self, session: GameSession) -> None:
        """Cancel a scheduled bot turn, if any."""
        if session.bot_task is not None and not session.bot_task.done():
            session.bot_task.cancel()
            logger.info(f"Session {session.id}: pending bot turn cancelled")
        session.bot_task = None

    def schedule_bot_turns(self, session: GameSession) -> asyncio.Task | None:
        """Start playing bot turns in the background, if a bot is due.

        Must be called from a running event loop.
        """
        if not session.game.is_bot_turn or session.bots_pending:
            return session.bot_task
        task = asyncio.create_task(self._run_bot_turns(session, session.game))
        task.add_done_callback(partial(_log_bot_failure, session.id))
        session.bot_task = task
        return task

    async def _run_bot_turns(self, session: GameSession, game: CrazyEightsGame) -> None:
        """Play bot turns, each after the thinking delay, until the human is up.

        ``game`` is pinned at scheduling time. Cancellation can only land in
        the sleep, before a turn is computed, so no partial turn is applied.
        """
        while game.is_bot_turn:
            bot = game.state.current_player
            session._notify_listeners({"type": "bot_thinking", "player": bot.slug})
            await asyncio.sleep(self.bot_delay)

            if session.game is not game:
                return

            snapshot = game.run_bot_turn()
            logger.info(f"Session {session.id}: {bot.slug} moved: {snapshot.message}")
            session._notify_listeners({
                "type": "move_made",
                "player": bot.slug,
                "state": session.to_client_state(),
            })

    async def run_bot_turns_until_human(self, session: GameSession) -> None:
        """Schedule bot turns and wait for them to finish."""
        task = self.schedule_bot_turns(session)
        if task is not None:
            await task


def _log_bot_failure(session_id: str, task: asyncio.Task) -> None:
    """Log a bot task that died with an exception."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.exception(f"Session {session_id}: bot turn failed", exc_info=exc)


class StrategyFactory:
    """Factory for creating strategy instances."""

    AVAILABLE_STRATEGIES = {
        "heuristic": "Saves eights and bombs, names its longest suit",
        "random": "Random legal move (baseline)",
    }

    def create(self, name: str, params: dict[str, Any] | None = None) -> Strategy:
        """Create a strategy instance."""
        params = params or {}

        match name.lower():
            case "heuristic":
                from strategies.heuristic import HeuristicStrategy
                return HeuristicStrategy()

            case "random":
                from strategies.random_strategy import RandomStrategy
                return RandomStrategy(seed=params.get("seed"))

            case _:
                raise ValueError(f"Unknown strategy: {name}")

    def list_strategies(self) -> dict[str, str]:
        """List available strategies with descriptions."""
        return self.AVAILABLE_STRATEGIES.copy()


# Global session manager instance
session_manager = GameSessionManager()
