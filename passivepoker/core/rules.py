"""
Passive Hold'em rules, constants and engine errors.

Passive Hold'em is showdown-only poker: there is no betting and no folding.
Every seated player receives two hole cards, the board is revealed street by
street, and every player reaches showdown.

1. Hole cards are dealt one card at a time around the table, twice, with no
   burn card.
2. Flop, turn and river are each preceded by exactly one burn card.
3. At showdown every player holding the best hand scores one point. Ties are
   not split: each tied winner receives the full point.
4. With a match target enabled, the match ends when exactly one player holds
   the maximum score and that score is at least the target. Players tied at
   or above the target keep playing until the tie is broken.
"""

from enum import Enum, auto


class RoundPhase(Enum):
    """Phases of a passive Hold'em round."""
    IDLE = auto()         # No round dealt yet
    DEALING = auto()      # Hole cards dealt, board empty
    FLOP = auto()         # 3 community cards
    TURN = auto()         # 4 community cards
    RIVER = auto()        # 5 community cards
    SHOWDOWN = auto()     # Hands evaluated, winners decided


class PhaseError(RuntimeError):
    """A round or match operation was requested in the wrong phase."""


class DeckExhaustedError(RuntimeError):
    """More cards were drawn than the deck holds."""


# Table limits
MIN_PLAYERS = 1
MAX_PLAYERS = 9
DEFAULT_PLAYER_NAMES = ["Player 1", "Player 2"]

# Match target
DEFAULT_MATCH_TARGET = 10
MIN_MATCH_TARGET = 1
MAX_MATCH_TARGET = 999

# Cards per phase
DECK_SIZE = 52
HOLE_CARDS = 2
FLOP_CARDS = 3
TURN_CARDS = 1
RIVER_CARDS = 1
BURN_CARDS = 1
TOTAL_COMMUNITY_CARDS = 5

# Hand evaluation
HAND_SIZE = 5  # Best 5-card hand

# Phase order; each entry maps to the next phase reached by ``advance``
NEXT_PHASE = {
    RoundPhase.DEALING: RoundPhase.FLOP,
    RoundPhase.FLOP: RoundPhase.TURN,
    RoundPhase.TURN: RoundPhase.RIVER,
    RoundPhase.RIVER: RoundPhase.SHOWDOWN,
}

# Board cards drawn on entering each street
STREET_CARDS = {
    RoundPhase.FLOP: FLOP_CARDS,
    RoundPhase.TURN: TURN_CARDS,
    RoundPhase.RIVER: RIVER_CARDS,
}


def cards_per_round(num_players: int) -> int:
    """
    Number of cards a full round draws from the deck.

    Two hole cards per player, three burns and five board cards.
    With the nine-player cap this never exceeds 26.
    """
    return num_players * HOLE_CARDS + 3 * BURN_CARDS + TOTAL_COMMUNITY_CARDS


def validate_match_target(target: int) -> int:
    """
    Check a match target against the configured range.

    Raises:
        ValueError: If the target is outside [MIN_MATCH_TARGET, MAX_MATCH_TARGET]
    """
    if isinstance(target, bool) or not isinstance(target, int):
        raise ValueError(f"Match target must be an integer, got {target!r}")
    if not MIN_MATCH_TARGET <= target <= MAX_MATCH_TARGET:
        raise ValueError(
            f"Match target must be {MIN_MATCH_TARGET}-{MAX_MATCH_TARGET}, got {target}"
        )
    return target
