"""
Passive Poker - Showdown-only Texas Hold'em Engine

A spectator poker project with:
- Pure Python round engine (deal, flop, turn, river, showdown)
- Exhaustive best-of-seven hand evaluation with leader/winner highlighting
- Match scoring to an optional target, with tie-continuation
- FastAPI + WebSocket server for external drivers

Usage:
    from passivepoker.core import PassivePokerGame, evaluate_best
"""

__version__ = "0.1.0"

from passivepoker.core.card import Card, Deck
from passivepoker.core.player import Player
from passivepoker.core.hand import HandRank, HandResult, evaluate_best
from passivepoker.core.game import PassivePokerGame

__all__ = [
    "Card",
    "Deck",
    "Player",
    "HandRank",
    "HandResult",
    "evaluate_best",
    "PassivePokerGame",
    "__version__",
]
