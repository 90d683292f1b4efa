"""Game API routes."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, Field

from crazy_eights.cards import Suit
from crazy_eights.game import Rejected
from crazy_eights.state import Participant
from web.api.session_manager import (
    GameSession,
    StrategyFactory,
    session_manager,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["games"])


# Request/Response models
class CreateGameRequest(BaseModel):
    """Request to create a new game."""

    seed: int | None = Field(None, description="Random seed for reproducibility")
    bot_strategies: dict[str, str] = Field(
        default_factory=dict,
        description="Strategy per bot seat, e.g. {'bot-2': 'random'}. Default: heuristic",
    )


class ResetGameRequest(BaseModel):
    """Request to deal a new game in an existing session."""

    seed: int | None = Field(None, description="Random seed for reproducibility")


class PlayCardRequest(BaseModel):
    """Request to play a card from the human player's hand."""

    card_id: str = Field(..., description="Id of the card in the player's hand")


class ChooseSuitRequest(BaseModel):
    """Request to name the active suit after an eight or a bomb."""

    suit: str = Field(..., description="'hearts', 'diamonds', 'clubs' or 'spades'")


class StrategyInfo(BaseModel):
    """Information about an available strategy."""

    name: str
    description: str


def _get_session(game_id: str) -> GameSession:
    session = session_manager.get_session(game_id)
    if not session:
        raise HTTPException(status_code=404, detail="Game not found")
    return session


def _respond(session: GameSession, result) -> dict:
    """Turn an engine result into a response, scheduling bots if they're up."""
    if isinstance(result, Rejected):
        raise HTTPException(status_code=400, detail=result.reason)

    state = session.to_client_state()
    if session_manager.schedule_bot_turns(session) is not None:
        state["bots_pending"] = True
    return {"game_id": session.id, "state": state}


# REST Endpoints


@router.get("/strategies", response_model=list[StrategyInfo])
async def list_strategies():
    """List available bot strategies."""
    factory = StrategyFactory()
    strategies = factory.list_strategies()
    return [StrategyInfo(name=name, description=desc) for name, desc in strategies.items()]


@router.post("/games", response_model=dict)
async def create_game(request: CreateGameRequest):
    """Create a new game session and deal."""
    try:
        session = session_manager.create_session(
            seed=request.seed,
            bot_strategies=request.bot_strategies,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"game_id": session.id, "state": session.to_client_state()}


@router.get("/games", response_model=list[dict])
async def list_games():
    """List all active game sessions."""
    return session_manager.list_sessions()


@router.get("/games/{game_id}")
async def get_game(game_id: str):
    """Get current state of a game."""
    session = _get_session(game_id)
    return {
        "game_id": session.id,
        "state": session.to_client_state(),
        "move_history": [
            {
                "turn": r.turn,
                "player": r.player.slug,
                "move": r.move,
                "move_type": r.move_type,
                "timestamp": r.timestamp,
            }
            for r in session.game.move_history
        ],
    }


@router.post("/games/{game_id}/reset")
async def reset_game(game_id: str, request: ResetGameRequest | None = None):
    """Deal a new game, cancelling any bot turn in progress."""
    session = _get_session(game_id)
    seed = request.seed if request is not None else None
    session_manager.reset_session(session, seed=seed)
    return {"game_id": session.id, "state": session.to_client_state()}


@router.post("/games/{game_id}/play")
async def play_card(game_id: str, request: PlayCardRequest):
    """Play a card for the human player."""
    session = _get_session(game_id)
    result = session.game.play_card(Participant.PLAYER, request.card_id)
    return _respond(session, result)


@router.post("/games/{game_id}/suit")
async def choose_suit(game_id: str, request: ChooseSuitRequest):
    """Choose the new active suit for the human player."""
    session = _get_session(game_id)
    try:
        suit = Suit.from_label(request.suit)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    result = session.game.choose_suit(suit, Participant.PLAYER)
    return _respond(session, result)


@router.post("/games/{game_id}/draw")
async def draw_card(game_id: str):
    """Draw a card for the human player."""
    session = _get_session(game_id)
    result = session.game.draw_card(Participant.PLAYER)
    return _respond(session, result)


@router.delete("/games/{game_id}")
async def delete_game(game_id: str):
    """Delete a game session."""
    if session_manager.delete_session(game_id):
        return {"deleted": True}
    raise HTTPException(status_code=404, detail="Game not found")


# WebSocket endpoint for real-time updates


@router.websocket("/ws/game/{game_id}")
async def game_websocket(websocket: WebSocket, game_id: str):
    """WebSocket endpoint for real-time game updates.

    Protocol:
    Server -> Client messages:
        - game_state: Full game state update
        - bot_thinking: A bot is about to move
        - move_made: A bot move was applied
        - reset: A new game was dealt
        - error: Error message

    Client -> Server messages:
        - get_state: Request current state
    """
    session = session_manager.get_session(game_id)
    if not session:
        logger.warning(f"WebSocket: Game not found: {game_id}")
        await websocket.close(code=4004, reason="Game not found")
        return

    await websocket.accept()

    event_queue: asyncio.Queue = asyncio.Queue()
    session.add_listener(event_queue.put_nowait)

    async def forward_events():
        while True:
            event = await event_queue.get()
            await websocket.send_json(event)

    event_task = asyncio.create_task(forward_events())

    try:
        await websocket.send_json({"type": "game_state", "state": session.to_client_state()})

        while True:
            data = await websocket.receive_json()
            msg_type = data.get("type", "")

            if msg_type == "get_state":
                await websocket.send_json({
                    "type": "game_state",
                    "state": session.to_client_state(),
                })
            else:
                await websocket.send_json({
                    "type": "error",
                    "message": f"Unknown message type: {msg_type}",
                })

    except WebSocketDisconnect:
        logger.info(f"WebSocket: disconnected from {game_id}")
    finally:
        event_task.cancel()
        session.remove_listener(event_queue.put_nowait)
