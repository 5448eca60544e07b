"""
WebSocket handling for real-time table updates.

This module provides:
- GameManager: Manages multiple tables (rooms)
- WebSocket endpoint: Spectator connections that drive and watch a table

Any connected spectator may send ``reveal_next``/``advance``; every
transition is followed by a state broadcast to the whole room.
"""

from __future__ import annotations
from typing import Dict, Iterable, Optional, Any, Union
from dataclasses import dataclass, field
import logging

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from passivepoker.core.game import PassivePokerGame
from passivepoker.core.rules import PhaseError, RoundPhase, DEFAULT_MATCH_TARGET
from passivepoker.server.schemas import WSJoinMessage, WSNewMatchMessage


logger = logging.getLogger(__name__)


@dataclass
class GameRoom:
    """A table with its game instance and connected spectators."""
    room_id: str
    game: PassivePokerGame
    connections: Dict[str, WebSocket] = field(default_factory=dict)
    _spectator_counter: int = 0

    def add_spectator(self, websocket: WebSocket, spectator_id: Optional[str] = None) -> str:
        """
        Register a connection and return its spectator ID.

        IDs are never reused within a room; a requested ID that is already
        connected is replaced by a fresh one.
        """
        if not spectator_id or spectator_id in self.connections:
            self._spectator_counter += 1
            spectator_id = f"spectator-{self._spectator_counter}"
            while spectator_id in self.connections:
                self._spectator_counter += 1
                spectator_id = f"spectator-{self._spectator_counter}"

        self.connections[spectator_id] = websocket
        return spectator_id

    async def broadcast(self, message: Dict[str, Any], exclude: Optional[str] = None):
        """Broadcast a message to all connected spectators."""
        for spectator_id, ws in list(self.connections.items()):
            if spectator_id != exclude:
                try:
                    await ws.send_json(message)
                except Exception as e:
                    logger.error(f"Error sending to {spectator_id}: {e}")

    async def send_state_to_all(self):
        """Send the table state to every spectator."""
        await self.broadcast({"type": "state", **self.game.get_state()})

    async def send_result(self):
        """Send the showdown result (and champion, if decided) to everyone."""
        message = {
            "type": "result",
            **self.game.get_showdown_result().to_dict(),
            "champion_id": self.game.match.champion_id,
        }
        await self.broadcast(message)


class GameManager:
    """
    Manages multiple tables and spectator connections.

    Usage:
        manager = GameManager()
        room_id = manager.create_room("Alice, Bob", target=5)
        await manager.handle_message(room_id, {"type": "reveal_next"})
    """

    def __init__(self):
        self.rooms: Dict[str, GameRoom] = {}
        self._room_counter = 0

    def create_room(
        self,
        player_names: Union[str, Iterable[str], None] = None,
        target_enabled: bool = True,
        target: int = DEFAULT_MATCH_TARGET,
        seed: Optional[int] = None,
    ) -> str:
        """Create a new table."""
        self._room_counter += 1
        room_id = f"room-{self._room_counter}"

        game = PassivePokerGame(player_names, target_enabled, target, seed=seed)
        self.rooms[room_id] = GameRoom(room_id=room_id, game=game)
        logger.info(f"Created room {room_id} with {game.num_players} players")

        return room_id

    def get_room(self, room_id: str) -> Optional[GameRoom]:
        """Get a table by ID."""
        return self.rooms.get(room_id)

    async def disconnect(self, room_id: str, spectator_id: str):
        """Disconnect a spectator from a room."""
        room = self.get_room(room_id)
        if room and spectator_id in room.connections:
            del room.connections[spectator_id]
            logger.info(f"Spectator {spectator_id} disconnected from {room_id}")

            await room.broadcast({
                "type": "spectator_left",
                "spectator_id": spectator_id
            })

    async def handle_message(self, room_id: str, message: Dict[str, Any]) -> Dict[str, Any]:
        """
        Handle a message from a spectator.

        Args:
            room_id: The room ID
            message: The message dict with 'type' and optional data

        Returns:
            Response dict
        """
        room = self.get_room(room_id)
        if room is None:
            return {"type": "error", "message": "Room not found"}
        if not isinstance(message, dict):
            return {"type": "error", "message": "Message must be a JSON object"}

        msg_type = message.get("type", "")
        game = room.game

        try:
            if msg_type == "start_round":
                game.start_round()
            elif msg_type == "advance":
                game.advance()
            elif msg_type == "reveal_next":
                game.reveal_next()
            elif msg_type == "new_match":
                req = WSNewMatchMessage(**message)
                game.new_match(req.player_names, req.target_enabled, req.target, seed=req.seed)
            elif msg_type == "reset_points":
                game.reset_points()
            elif msg_type == "continue_free_play":
                game.continue_free_play()
            elif msg_type == "get_state":
                return {"type": "state", **game.get_state()}
            else:
                return {"type": "error", "message": f"Unknown message type: {msg_type}"}
        except PhaseError as e:
            return {"type": "error", "message": str(e)}
        except ValidationError as e:
            return {"type": "error", "message": f"Invalid message: {e.errors()}"}

        await room.send_state_to_all()
        if game.phase == RoundPhase.SHOWDOWN and msg_type in ("advance", "reveal_next"):
            await room.send_result()

        return {
            "type": "ok",
            "action": msg_type,
            "phase": game.phase.name,
            "round_number": game.round_number,
        }


# Global game manager instance
game_manager = GameManager()


async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for table communication.

    Protocol:
    1. Client connects and sends: {"type": "join", "room_id": "..."}
    2. Server sends table state
    3. Client sends: {"type": "reveal_next"} (or advance, start_round, ...)
    4. Server broadcasts state updates, and a "result" after each showdown
    """
    room_id: Optional[str] = None
    spectator_id: Optional[str] = None

    try:
        await websocket.accept()
        join_msg = await websocket.receive_json()

        if not isinstance(join_msg, dict) or join_msg.get("type") != "join":
            await websocket.send_json({
                "type": "error",
                "message": "First message must be join"
            })
            await websocket.close()
            return

        try:
            join = WSJoinMessage(**join_msg)
        except ValidationError:
            await websocket.send_json({
                "type": "error",
                "message": "room_id required"
            })
            await websocket.close()
            return

        room_id = join.room_id
        room = game_manager.get_room(room_id)
        if room is None:
            # Auto-create room for convenience
            room_id = game_manager.create_room()
            room = game_manager.get_room(room_id)

        spectator_id = room.add_spectator(websocket, join.spectator_id)
        logger.info(f"Spectator {spectator_id} joined {room_id}")

        await websocket.send_json({
            "type": "state",
            "room_id": room_id,
            "spectator_id": spectator_id,
            **room.game.get_state()
        })

        # Message loop
        while True:
            message = await websocket.receive_json()
            response = await game_manager.handle_message(room_id, message)
            await websocket.send_json(response)

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: {spectator_id}")
    finally:
        if room_id and spectator_id:
            await game_manager.disconnect(room_id, spectator_id)
