"""
HTTP API Routes for Passive Poker.

These routes drive a single global game: create a match, start rounds and
reveal streets. Pacing is up to the client; nothing here runs on a timer.
"""

from typing import Any, Callable, Dict, Optional, TypeVar

from fastapi import APIRouter, HTTPException

from passivepoker.core.game import PassivePokerGame
from passivepoker.core.rules import PhaseError
from passivepoker.server.schemas import (
    NewMatchRequest, GameStateSchema, LeadersSchema, ShowdownSchema, StandingSchema,
)

router = APIRouter()

T = TypeVar("T")

# Global game instance for single-table mode
# Multi-table play goes through the WebSocket GameManager
_game: Optional[PassivePokerGame] = None


def get_game() -> PassivePokerGame:
    """Get the current game instance."""
    if _game is None:
        raise HTTPException(status_code=400, detail="Game not initialized")
    return _game


def _in_phase(fn: Callable[[], T]) -> T:
    """Run an engine call, reporting out-of-phase requests as 409."""
    try:
        return fn()
    except PhaseError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/new_match")
async def create_match(req: NewMatchRequest) -> Dict[str, Any]:
    """
    Start a new match with the given roster and target settings.

    An empty roster falls back to two default players.
    """
    global _game

    _game = PassivePokerGame(
        player_names=req.player_names,
        target_enabled=req.target_enabled,
        target=req.target,
        seed=req.seed,
    )

    return {
        "success": True,
        "message": f"Match started with {_game.num_players} players",
        "players": [{"id": p.player_id, "name": p.name} for p in _game.players],
    }


@router.post("/start_round", response_model=GameStateSchema)
async def start_round() -> Dict[str, Any]:
    """Shuffle and deal hole cards for a new round."""
    game = get_game()
    _in_phase(game.start_round)
    return game.get_state()


@router.post("/advance", response_model=GameStateSchema)
async def advance() -> Dict[str, Any]:
    """Reveal the next street, or go to showdown and score the round."""
    game = get_game()
    _in_phase(game.advance)
    return game.get_state()


@router.post("/reveal_next", response_model=GameStateSchema)
async def reveal_next() -> Dict[str, Any]:
    """Advance the round, starting a new one when idle or after showdown."""
    game = get_game()
    _in_phase(game.reveal_next)
    return game.get_state()


@router.get("/state", response_model=GameStateSchema)
async def get_state() -> Dict[str, Any]:
    """Get the current game state."""
    return get_game().get_state()


@router.get("/showdown", response_model=ShowdownSchema)
async def get_showdown() -> Dict[str, Any]:
    """Get the showdown result of the current round."""
    game = get_game()
    return _in_phase(game.get_showdown_result).to_dict()


@router.get("/leaders", response_model=LeadersSchema)
async def get_leaders() -> Dict[str, Any]:
    """Get the current leaders (flop and turn only)."""
    game = get_game()
    return _in_phase(game.get_leaders).to_dict()


@router.get("/standings")
async def get_standings() -> Dict[str, Any]:
    """Scoreboard, highest points first."""
    game = get_game()
    rows = [
        StandingSchema(id=p.player_id, name=p.name, points=p.points)
        for p in game.standings()
    ]
    return {"standings": rows, "champion_id": game.match.champion_id}


@router.get("/events")
async def get_events() -> Dict[str, Any]:
    """Events of the current round, oldest first."""
    return {"events": get_game().get_events()}


@router.post("/reset_points", response_model=GameStateSchema)
async def reset_points() -> Dict[str, Any]:
    """Zero all points and clear the champion."""
    game = get_game()
    game.reset_points()
    return game.get_state()


@router.post("/continue_free_play", response_model=GameStateSchema)
async def continue_free_play() -> Dict[str, Any]:
    """Disable the match target so rounds continue after a champion."""
    game = get_game()
    game.continue_free_play()
    return game.get_state()


@router.post("/reset_game")
async def reset_game() -> Dict[str, Any]:
    """
    Reset the game (for development/testing).
    """
    global _game
    _game = None
    return {"success": True, "message": "Game reset"}
