"""
Passive Poker Server - FastAPI + WebSocket Server Layer
"""

from passivepoker.server.app import app, create_app

__all__ = ["app", "create_app"]
