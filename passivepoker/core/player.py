"""
Player class for passive Texas Hold'em.

Manages player state including:
- Hole cards for the current round
- Cumulative match points
- Outcome of the last completed round (for display and highlighting)
"""

from __future__ import annotations
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field

from passivepoker.core.card import Card


@dataclass
class Player:
    """
    A seated player.

    Attributes:
        player_id: Stable identifier assigned at match start ("p0", "p1", ...)
        name: Unique display name
        seat: Seat position at the table (0-indexed)
        hole_cards: The player's private cards (0 or 2 cards)
        points: Cumulative points in the current match
        last_win: Whether the player won the last showdown
        last_hand_name: Display name of the player's hand at the last showdown
        last_best_cards: The 5 cards of the winning hand, empty unless a winner
    """
    player_id: str
    name: str
    seat: int = 0
    hole_cards: List[Card] = field(default_factory=list)
    points: int = 0

    last_win: bool = False
    last_hand_name: Optional[str] = None
    last_best_cards: List[Card] = field(default_factory=list)

    def reset_for_new_round(self) -> None:
        """Clear hole cards and the previous round's outcome."""
        self.hole_cards = []
        self.last_win = False
        self.last_hand_name = None
        self.last_best_cards = []

    def deal_card(self, card: Card) -> None:
        """Give the player one hole card."""
        self.hole_cards = self.hole_cards + [card]

    def to_dict(self, hide_cards: bool = False) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Args:
            hide_cards: If True, don't include hole cards
        """
        result = {
            "id": self.player_id,
            "name": self.name,
            "seat": self.seat,
            "points": self.points,
            "last_win": self.last_win,
            "last_hand_name": self.last_hand_name,
            "last_best_cards": [card.to_dict() for card in self.last_best_cards],
        }

        if not hide_cards:
            result["cards"] = [card.to_dict() for card in self.hole_cards]

        return result

    def __repr__(self) -> str:
        return f"Player({self.player_id}, {self.name!r}, points={self.points})"

    def __str__(self) -> str:
        cards_str = " ".join(str(c) for c in self.hole_cards) if self.hole_cards else "??"
        return f"{self.name} [{cards_str}] {self.points} pts"
