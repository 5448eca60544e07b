"""
Match tracking for passive Texas Hold'em.

A match is a sequence of rounds played by a fixed roster. Each showdown
winner scores one point (ties are not split). With a match target enabled,
the match ends once a single player leads with at least the target score;
players tied at or above the target keep playing.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Union
from dataclasses import dataclass, field
import logging
import re

from passivepoker.core.player import Player
from passivepoker.core.hand import HandResult
from passivepoker.core.rules import (
    PhaseError, validate_match_target,
    DEFAULT_MATCH_TARGET, DEFAULT_PLAYER_NAMES, MAX_PLAYERS,
)

if TYPE_CHECKING:
    from passivepoker.core.round import ShowdownResult


logger = logging.getLogger(__name__)

_NAME_SEPARATORS = re.compile(r"\s*,\s*|\r?\n")


@dataclass
class MatchState:
    """
    State that lives for a whole match.

    Attributes:
        players: Seated players in seat order
        target_enabled: Whether the match ends at ``target`` points
        target: Points needed to win the match (1-999)
        round_number: Number of rounds started so far
        champion_id: Player ID of the match winner, once decided
        champion_hand: The champion's hand from the deciding showdown
        last_scored_round: Round number of the last showdown scored
    """
    players: List[Player]
    target_enabled: bool = True
    target: int = DEFAULT_MATCH_TARGET
    round_number: int = 0
    champion_id: Optional[str] = None
    champion_hand: Optional[HandResult] = None
    last_scored_round: int = 0

    @property
    def is_over(self) -> bool:
        """True once a champion has been decided."""
        return self.champion_id is not None

    @property
    def champion(self) -> Optional[Player]:
        if self.champion_id is None:
            return None
        return self.get_player(self.champion_id)

    def get_player(self, player_id: str) -> Optional[Player]:
        """Get player by ID."""
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round_number": self.round_number,
            "target_enabled": self.target_enabled,
            "target": self.target,
            "champion_id": self.champion_id,
            "champion_hand": self.champion_hand.to_dict() if self.champion_hand else None,
            "is_over": self.is_over,
            "standings": [
                {"id": p.player_id, "name": p.name, "points": p.points}
                for p in standings(self)
            ],
        }


def parse_player_names(names: Union[str, Iterable[str], None]) -> List[str]:
    """
    Turn raw roster input into a clean list of player names.

    A string is split on commas and newlines. Names are trimmed, empty
    entries dropped, duplicates removed (first occurrence wins) and the
    list is capped at MAX_PLAYERS.
    """
    if names is None:
        return []

    if isinstance(names, str):
        raw = _NAME_SEPARATORS.split(names)
    else:
        raw = [n for n in names if isinstance(n, str)]

    result: List[str] = []
    for name in raw:
        name = name.strip()
        if name and name not in result:
            result.append(name)

    return result[:MAX_PLAYERS]


def new_match(
    player_names: Union[str, Iterable[str], None],
    target_enabled: bool = True,
    target: int = DEFAULT_MATCH_TARGET,
) -> MatchState:
    """
    Create a new match.

    Args:
        player_names: Comma/newline separated string or list of names
        target_enabled: Whether the match ends at ``target`` points
        target: Winning score (1-999)

    Falls back to a default two-player roster when no usable names remain.

    Raises:
        ValueError: If the target is out of range
    """
    validate_match_target(target)

    names = parse_player_names(player_names)
    if not names:
        logger.warning(f"No usable player names in {player_names!r}, using default roster")
        names = list(DEFAULT_PLAYER_NAMES)

    players = [
        Player(player_id=f"p{i}", name=name, seat=i)
        for i, name in enumerate(names)
    ]

    logger.info(
        f"New match with {len(players)} players "
        f"(target: {target if target_enabled else 'off'})"
    )
    return MatchState(players=players, target_enabled=target_enabled, target=target)


def apply_scoring(match: MatchState, result: ShowdownResult) -> MatchState:
    """
    Credit a showdown to the match.

    Every winner gets one point. If the target is enabled and a single
    player now leads with at least ``target`` points, that player becomes
    champion.

    Raises:
        PhaseError: If this round has already been scored
    """
    if result.round_number <= match.last_scored_round:
        raise PhaseError(f"Round {result.round_number} has already been scored")

    winners = set(result.winners)
    for player in match.players:
        if player.player_id in winners:
            player.points += 1
    match.last_scored_round = result.round_number

    champion = check_champion(match)
    if champion is not None:
        match.champion_id = champion.player_id
        match.champion_hand = result.per_player.get(champion.player_id)
        logger.info(
            f"{champion.name} wins the match with {champion.points} points "
            f"after {match.round_number} rounds"
        )

    return match


def check_champion(match: MatchState) -> Optional[Player]:
    """
    Return the player who has won the match, if any.

    Ties at the top never produce a champion, whatever the score.
    """
    if not match.target_enabled or not match.players:
        return None

    top = max(p.points for p in match.players)
    leaders = [p for p in match.players if p.points == top]
    if len(leaders) == 1 and top >= match.target:
        return leaders[0]
    return None


def reset_points(match: MatchState) -> MatchState:
    """Zero every player's points and clear the champion."""
    for player in match.players:
        player.points = 0
        player.last_win = False
    match.champion_id = None
    match.champion_hand = None
    return match


def continue_free_play(match: MatchState) -> MatchState:
    """Turn the match target off so rounds keep going after a champion."""
    match.target_enabled = False
    match.champion_id = None
    match.champion_hand = None
    return match


def standings(match: MatchState) -> List[Player]:
    """Players ordered by points (highest first), then by name."""
    return sorted(match.players, key=lambda p: (-p.points, p.name.casefold()))
