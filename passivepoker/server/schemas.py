"""
Pydantic schemas for API request/response validation.
"""

from typing import List, Optional, Dict, Union
from pydantic import BaseModel, Field

from passivepoker.core.rules import DEFAULT_MATCH_TARGET, MIN_MATCH_TARGET, MAX_MATCH_TARGET


# ============= Request Schemas =============

class NewMatchRequest(BaseModel):
    """Request to start a new match."""
    player_names: Optional[Union[str, List[str]]] = Field(
        default=None,
        description="Comma/newline separated names or a list of names (1-9 players)",
    )
    target_enabled: bool = True
    target: int = Field(default=DEFAULT_MATCH_TARGET, ge=MIN_MATCH_TARGET, le=MAX_MATCH_TARGET)
    seed: Optional[int] = Field(default=None, description="Seed for reproducible shuffles")


# ============= Response Schemas =============

class CardSchema(BaseModel):
    """Card representation."""
    rank: str
    suit: str
    text: str
    color: str
    index: int


class HandResultSchema(BaseModel):
    """An evaluated hand."""
    vector: List[int]
    category: Optional[str] = None
    name: str
    cards: List[CardSchema] = []


class PlayerSchema(BaseModel):
    """Player information, hole cards included (every hand is shown)."""
    id: str
    name: str
    seat: int
    points: int
    last_win: bool = False
    last_hand_name: Optional[str] = None
    last_best_cards: List[CardSchema] = []
    cards: List[CardSchema] = []


class StandingSchema(BaseModel):
    """One row of the scoreboard."""
    id: str
    name: str
    points: int


class MatchSchema(BaseModel):
    """Match-level state."""
    round_number: int
    target_enabled: bool
    target: int
    champion_id: Optional[str] = None
    champion_hand: Optional[HandResultSchema] = None
    is_over: bool
    standings: List[StandingSchema]


class LeadersSchema(BaseModel):
    """Leaders on the flop or turn."""
    leaders: List[str]
    per_leader_cards: Dict[str, List[CardSchema]]
    highlighted_board_cards: List[CardSchema]


class ShowdownSchema(BaseModel):
    """Showdown result."""
    round_number: int
    winners: List[str]
    per_player: Dict[str, HandResultSchema]
    highlighted_board_cards: List[CardSchema]


class GameStateSchema(BaseModel):
    """Complete game state."""
    phase: str
    round_number: int
    board: List[CardSchema]
    deck_cursor: int
    players: List[PlayerSchema]
    match: MatchSchema
    leaders: Optional[LeadersSchema] = None
    showdown: Optional[ShowdownSchema] = None


class ErrorSchema(BaseModel):
    """Error response."""
    error: str
    detail: Optional[str] = None


# ============= WebSocket Message Schemas =============

class WSJoinMessage(BaseModel):
    """WebSocket join room message."""
    type: str = "join"
    room_id: str
    spectator_id: Optional[str] = None


class WSNewMatchMessage(NewMatchRequest):
    """WebSocket message restarting the room's match."""
    type: str = "new_match"


class WSErrorMessage(BaseModel):
    """WebSocket error message."""
    type: str = "error"
    message: str
