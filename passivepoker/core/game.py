"""
Passive Hold'em game driver.

PassivePokerGame bundles a match and its current round behind a small
object API for drivers such as the HTTP/WebSocket server. It performs no
timing: the driver calls ``advance`` (or ``reveal_next``) whenever it wants
the next reveal.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Union
import logging
import random

from passivepoker.core.player import Player
from passivepoker.core.rules import RoundPhase, PhaseError, DEFAULT_MATCH_TARGET
from passivepoker.core.match import (
    MatchState, new_match, apply_scoring, reset_points, continue_free_play, standings,
)
from passivepoker.core.round import (
    RoundState, ShowdownResult, LeaderResult,
    start_round, advance, get_leaders, get_showdown_result,
)


logger = logging.getLogger(__name__)


class PassivePokerGame:
    """
    Passive Hold'em match driver.

    Usage:
        game = PassivePokerGame("Alice, Bob, Carol", target=5, seed=42)

        while not game.is_over:
            game.reveal_next()     # deal, flop, turn, river, showdown, ...
            state = game.get_state()

        print(game.match.champion.name)
    """

    def __init__(
        self,
        player_names: Union[str, Iterable[str], None] = None,
        target_enabled: bool = True,
        target: int = DEFAULT_MATCH_TARGET,
        seed: Optional[int] = None,
    ):
        """
        Initialize a new game.

        Args:
            player_names: Roster as a comma/newline separated string or a list
            target_enabled: Whether the match ends at ``target`` points
            target: Winning score (1-999)
            seed: Optional seed for reproducible shuffles
        """
        self._seed = seed
        self._rng = random.Random(seed)
        self.match: MatchState = new_match(player_names, target_enabled, target)
        self.round: Optional[RoundState] = None

    @property
    def players(self) -> List[Player]:
        return self.match.players

    @property
    def num_players(self) -> int:
        return len(self.match.players)

    @property
    def phase(self) -> RoundPhase:
        """Phase of the current round (IDLE before the first deal)."""
        return self.round.phase if self.round is not None else RoundPhase.IDLE

    @property
    def round_number(self) -> int:
        return self.match.round_number

    @property
    def is_over(self) -> bool:
        return self.match.is_over

    def start_round(self) -> RoundState:
        """Shuffle, clear the table and deal hole cards."""
        self.round = start_round(self.match, rng=self._rng)
        return self.round

    def advance(self) -> RoundState:
        """
        Reveal the next street, or go to showdown.

        Reaching showdown scores the round immediately.

        Raises:
            PhaseError: If no round is in progress or it is already at showdown
        """
        if self.round is None:
            raise PhaseError("No round in progress")

        advance(self.round)
        if self.round.phase == RoundPhase.SHOWDOWN:
            apply_scoring(self.match, get_showdown_result(self.round))
        return self.round

    def reveal_next(self) -> RoundState:
        """Start a round when idle or after showdown, otherwise advance."""
        if self.round is None or self.round.phase == RoundPhase.SHOWDOWN:
            return self.start_round()
        return self.advance()

    def get_leaders(self) -> LeaderResult:
        if self.round is None:
            raise PhaseError("No round in progress")
        return get_leaders(self.round)

    def get_showdown_result(self) -> ShowdownResult:
        if self.round is None:
            raise PhaseError("No round in progress")
        return get_showdown_result(self.round)

    def reset_points(self) -> None:
        reset_points(self.match)
        logger.info("Points reset")

    def continue_free_play(self) -> None:
        """Disable the match target and keep playing."""
        continue_free_play(self.match)
        logger.info("Continuing in free play")

    def new_match(
        self,
        player_names: Union[str, Iterable[str], None] = None,
        target_enabled: Optional[bool] = None,
        target: Optional[int] = None,
        seed: Optional[int] = None,
    ) -> MatchState:
        """
        Start over with a fresh match.

        Omitted arguments keep the current roster and target settings. The
        shuffle source restarts from ``seed``, or from the game's current
        seed when none is given, so a seeded match deals the same way however
        many rounds the previous match lasted.
        """
        if player_names is None:
            player_names = [p.name for p in self.match.players]
        if target_enabled is None:
            target_enabled = self.match.target_enabled
        if target is None:
            target = self.match.target

        self.match = new_match(player_names, target_enabled, target)
        if seed is not None:
            self._seed = seed
        self._rng = random.Random(self._seed)
        self.round = None
        return self.match

    def standings(self) -> List[Player]:
        return standings(self.match)

    def get_events(self) -> List[Dict[str, Any]]:
        """Events of the current round, oldest first."""
        if self.round is None:
            return []
        return list(self.round.history)

    def get_state(self) -> Dict[str, Any]:
        """
        Get a JSON-friendly snapshot of the game.

        Leaders are included on the flop and turn, the showdown result once
        the round reaches showdown.
        """
        phase = self.phase
        state: Dict[str, Any] = {
            "phase": phase.name,
            "round_number": self.match.round_number,
            "board": [c.to_dict() for c in self.round.board] if self.round else [],
            "deck_cursor": self.round.cursor if self.round else 0,
            "players": [p.to_dict() for p in self.match.players],
            "match": self.match.to_dict(),
            "leaders": None,
            "showdown": None,
        }

        if phase in (RoundPhase.FLOP, RoundPhase.TURN):
            state["leaders"] = self.get_leaders().to_dict()
        elif phase == RoundPhase.SHOWDOWN:
            state["showdown"] = self.get_showdown_result().to_dict()

        return state
