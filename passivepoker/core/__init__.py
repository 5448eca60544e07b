"""
Passive Poker Core - Pure Python showdown-only Texas Hold'em logic

This module contains all game logic without any network dependencies.
"""

from passivepoker.core.card import Card, Deck, Rank, Suit, build_deck, shuffle_cards
from passivepoker.core.player import Player
from passivepoker.core.hand import (
    HandRank, HandResult, INCOMPLETE,
    combinations, compare_vectors, evaluate_best, best_5_of_7,
)
from passivepoker.core.rules import RoundPhase, PhaseError, DeckExhaustedError
from passivepoker.core.match import (
    MatchState, new_match, apply_scoring, parse_player_names,
)
from passivepoker.core.round import (
    RoundState, ShowdownResult, LeaderResult,
    start_round, advance, evaluate_leaders, get_leaders, get_showdown_result,
)
from passivepoker.core.game import PassivePokerGame

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "build_deck",
    "shuffle_cards",
    "Player",
    "HandRank",
    "HandResult",
    "INCOMPLETE",
    "combinations",
    "compare_vectors",
    "evaluate_best",
    "best_5_of_7",
    "RoundPhase",
    "PhaseError",
    "DeckExhaustedError",
    "MatchState",
    "new_match",
    "apply_scoring",
    "parse_player_names",
    "RoundState",
    "ShowdownResult",
    "LeaderResult",
    "start_round",
    "advance",
    "evaluate_leaders",
    "get_leaders",
    "get_showdown_result",
    "PassivePokerGame",
]
