"""
Round Controller - a passive Hold'em round as a phase state machine.

    IDLE -> DEALING -> FLOP -> TURN -> RIVER -> SHOWDOWN

Every transition is a plain function taking and returning a RoundState, so
the caller (a UI loop, a server, a test) decides when to move on. Nothing
here waits or schedules.

Usage:
    match = new_match(["Alice", "Bob", "Carol"])
    state = start_round(match, rng=random.Random(7))
    while state.phase != RoundPhase.SHOWDOWN:
        state = advance(state)
    apply_scoring(match, get_showdown_result(state))
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence
from dataclasses import dataclass, field
import logging
import random

from passivepoker.core.card import Card, Deck
from passivepoker.core.hand import HandResult, evaluate_best
from passivepoker.core.match import MatchState
from passivepoker.core.player import Player
from passivepoker.core.rules import (
    RoundPhase, PhaseError,
    HOLE_CARDS, NEXT_PHASE, STREET_CARDS,
)


logger = logging.getLogger(__name__)


@dataclass
class ShowdownResult:
    """
    Outcome of a showdown.

    Attributes:
        round_number: Round the result belongs to
        winners: IDs of every player holding the best hand, in seat order
        per_player: Each player's best hand
        highlighted_board_cards: Board cards used by at least one winner
    """
    round_number: int
    winners: List[str]
    per_player: Dict[str, HandResult]
    highlighted_board_cards: List[Card] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round_number": self.round_number,
            "winners": list(self.winners),
            "per_player": {pid: hand.to_dict() for pid, hand in self.per_player.items()},
            "highlighted_board_cards": [c.to_dict() for c in self.highlighted_board_cards],
        }


@dataclass
class LeaderResult:
    """Players currently holding the best hand on the flop or turn."""
    leaders: List[str] = field(default_factory=list)
    per_leader_cards: Dict[str, List[Card]] = field(default_factory=dict)
    highlighted_board_cards: List[Card] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.leaders

    def to_dict(self) -> Dict[str, Any]:
        return {
            "leaders": list(self.leaders),
            "per_leader_cards": {
                pid: [c.to_dict() for c in cards]
                for pid, cards in self.per_leader_cards.items()
            },
            "highlighted_board_cards": [c.to_dict() for c in self.highlighted_board_cards],
        }


@dataclass
class RoundState:
    """
    Everything that belongs to one round.

    ``players`` is the match's own player list; the round writes hole cards
    and last-round outcomes onto it. Points are left to the match tracker.
    """
    round_number: int
    players: List[Player]
    deck: Deck
    phase: RoundPhase = RoundPhase.IDLE
    board: List[Card] = field(default_factory=list)
    history: List[Dict[str, Any]] = field(default_factory=list)
    showdown: Optional[ShowdownResult] = None

    @property
    def cursor(self) -> int:
        """Cards drawn from this round's deck so far, burns included."""
        return self.deck.cursor

    def log_event(self, action: str, details: Dict[str, Any]) -> None:
        """Append an event to the round history."""
        self.history.append({
            "action": action,
            "phase": self.phase.name,
            **details
        })


def start_round(match: MatchState, rng: Optional[random.Random] = None) -> RoundState:
    """
    Start a new round: fresh shuffled deck, empty board, new hole cards.

    Raises:
        PhaseError: If the match already has a champion
    """
    if match.is_over:
        raise PhaseError("Match is over; start a new match or continue in free play")

    match.round_number += 1
    state = RoundState(
        round_number=match.round_number,
        players=match.players,
        deck=Deck(shuffle=True, rng=rng),
    )

    for player in state.players:
        player.reset_for_new_round()

    state.phase = RoundPhase.DEALING
    _deal_hole_cards(state)

    logger.info(f"Starting round #{state.round_number} with {len(state.players)} players")
    return state


def _deal_hole_cards(state: RoundState) -> None:
    """
    Deal one card at a time around the table, twice.

    Deal events are reported highest card first (rank, then suit
    ♠ > ♥ > ♦ > ♣); ownership follows the deal order.
    """
    dealt = []
    for _ in range(HOLE_CARDS):
        for player in state.players:
            card = state.deck.draw_one()
            player.deal_card(card)
            dealt.append((player, card))

    dealt.sort(key=lambda step: (step[1].rank, step[1].suit), reverse=True)
    for player, card in dealt:
        state.log_event("CARD_DEALT", {"player": player.player_id, "card": str(card)})


def advance(state: RoundState) -> RoundState:
    """
    Perform the next phase transition.

    Raises:
        PhaseError: From IDLE or SHOWDOWN; the driver must start a new round
    """
    if state.phase not in NEXT_PHASE:
        raise PhaseError(f"Cannot advance from {state.phase.name}; start a new round")

    next_phase = NEXT_PHASE[state.phase]
    if next_phase == RoundPhase.SHOWDOWN:
        _showdown(state)
    else:
        _reveal_street(state, next_phase)

    return state


def _reveal_street(state: RoundState, phase: RoundPhase) -> None:
    """Burn one card, then draw the street's cards onto the board."""
    state.deck.burn()
    cards = state.deck.draw(STREET_CARDS[phase])
    state.board.extend(cards)
    state.phase = phase

    state.log_event(phase.name, {"cards": [str(c) for c in cards]})
    logger.debug(f"Round #{state.round_number} {phase.name}: {' '.join(str(c) for c in state.board)}")


def _showdown(state: RoundState) -> None:
    """Evaluate every hand, mark winners and record highlights."""
    per_player = {
        player.player_id: evaluate_best(player.hole_cards + state.board)
        for player in state.players
    }
    winners = _best_players(state.players, per_player)

    for player in state.players:
        hand = per_player[player.player_id]
        player.last_hand_name = hand.name
        if player.player_id in winners:
            player.last_win = True
            player.last_best_cards = list(hand.cards)

    state.showdown = ShowdownResult(
        round_number=state.round_number,
        winners=winners,
        per_player=per_player,
        highlighted_board_cards=_board_cards_used(
            state.board, [per_player[pid].cards for pid in winners]
        ),
    )
    state.phase = RoundPhase.SHOWDOWN

    state.log_event("SHOWDOWN", {"winners": winners})
    logger.info(
        f"Round #{state.round_number} showdown won by "
        + ", ".join(f"{pid} ({per_player[pid].name})" for pid in winners)
    )


def _best_players(players: Sequence[Player], results: Dict[str, HandResult]) -> List[str]:
    """IDs of the players whose complete hand ties the best one, in seat order."""
    complete = [results[p.player_id] for p in players if results[p.player_id].is_complete]
    if not complete:
        return []

    best = max(complete, key=lambda hand: hand.sort_key)
    return [
        p.player_id for p in players
        if results[p.player_id].is_complete and results[p.player_id].ties(best)
    ]


def _board_cards_used(board: Sequence[Card], hands: Sequence[Sequence[Card]]) -> List[Card]:
    """Board cards, in board order, that appear in any of the given hands."""
    return [card for card in board if any(card in hand for hand in hands)]


def evaluate_leaders(players: Sequence[Player], board: Sequence[Card]) -> LeaderResult:
    """
    Find the players currently holding the best hand.

    Works on a partial board (flop or turn). When no player has five cards
    to evaluate yet, the result is empty.
    """
    results = {
        player.player_id: evaluate_best(list(player.hole_cards) + list(board))
        for player in players
    }
    leaders = _best_players(players, results)
    if not leaders:
        return LeaderResult()

    per_leader_cards = {pid: list(results[pid].cards) for pid in leaders}
    return LeaderResult(
        leaders=leaders,
        per_leader_cards=per_leader_cards,
        highlighted_board_cards=_board_cards_used(board, list(per_leader_cards.values())),
    )


def get_leaders(state: RoundState) -> LeaderResult:
    """
    Leaders of the round in progress.

    Raises:
        PhaseError: Outside DEALING, FLOP and TURN (pre-flop gives no leaders)
    """
    if state.phase == RoundPhase.DEALING:
        return LeaderResult()
    if state.phase not in (RoundPhase.FLOP, RoundPhase.TURN):
        raise PhaseError(f"Leaders are only tracked on the flop and turn, not {state.phase.name}")
    return evaluate_leaders(state.players, state.board)


def get_showdown_result(state: RoundState) -> ShowdownResult:
    """
    Result of the round's showdown.

    Raises:
        PhaseError: If the round has not reached showdown
    """
    if state.phase != RoundPhase.SHOWDOWN or state.showdown is None:
        raise PhaseError(f"No showdown result during {state.phase.name}")
    return state.showdown
