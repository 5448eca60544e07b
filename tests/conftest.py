"""
Pytest configuration and shared fixtures for Passive Poker tests.
"""

import random

import pytest
from passivepoker.core.card import Card, Deck, Rank, Suit, build_deck, parse_cards
from passivepoker.core.match import new_match


class RiggedRandom:
    """
    Stand-in random source whose shuffle puts chosen cards on top.

    The remaining cards follow in canonical order.
    """

    def __init__(self, top_cards):
        self.top_cards = list(top_cards)

    def shuffle(self, cards):
        rest = [c for c in cards if c not in self.top_cards]
        cards[:] = self.top_cards + rest


def rig_round(holes, board):
    """
    Build a random source that deals the given hands and board.

    Args:
        holes: One string of two cards per player, in seat order ("As Kd")
        board: Five board cards ("2d 7c 9s Jh 4c")

    Hole cards go out one at a time around the table; the burns before
    flop, turn and river are taken from unused cards.
    """
    hole_cards = [parse_cards(h) for h in holes]
    board_cards = parse_cards(board)
    used = {c for hand in hole_cards for c in hand} | set(board_cards)
    burns = [c for c in build_deck() if c not in used][:3]

    order = [hand[0] for hand in hole_cards] + [hand[1] for hand in hole_cards]
    order += [burns[0], *board_cards[:3], burns[1], board_cards[3], burns[2], board_cards[4]]
    return RiggedRandom(order)


@pytest.fixture
def rigged():
    """Factory for rigged random sources (see rig_round)."""
    return rig_round


@pytest.fixture
def rng():
    """A seeded random source."""
    return random.Random(1234)


@pytest.fixture
def deck(rng):
    """Create a fresh seeded, shuffled deck."""
    return Deck(shuffle=True, rng=rng)


@pytest.fixture
def unshuffled_deck():
    """Create a fresh unshuffled deck."""
    return Deck(shuffle=False)


@pytest.fixture
def two_player_match():
    """Heads-up match to 10 points."""
    return new_match(["Alice", "Bob"], target_enabled=True, target=10)


@pytest.fixture
def three_player_match():
    """Three-player match to 10 points."""
    return new_match("Alice, Bob, Carol", target_enabled=True, target=10)


@pytest.fixture
def sample_hand():
    """Create a sample 5-card hand (pair of aces)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.ACE, Suit.HEARTS),
        Card(Rank.KING, Suit.DIAMONDS),
        Card(Rank.QUEEN, Suit.CLUBS),
        Card(Rank.JACK, Suit.SPADES),
    ]


@pytest.fixture
def royal_flush():
    """Create a royal flush hand."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.KING, Suit.SPADES),
        Card(Rank.QUEEN, Suit.SPADES),
        Card(Rank.JACK, Suit.SPADES),
        Card(Rank.TEN, Suit.SPADES),
    ]


@pytest.fixture
def straight_flush():
    """Create a straight flush (9-high)."""
    return [
        Card(Rank.NINE, Suit.HEARTS),
        Card(Rank.EIGHT, Suit.HEARTS),
        Card(Rank.SEVEN, Suit.HEARTS),
        Card(Rank.SIX, Suit.HEARTS),
        Card(Rank.FIVE, Suit.HEARTS),
    ]


@pytest.fixture
def wheel_straight():
    """Create a wheel straight (A-2-3-4-5)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.TWO, Suit.HEARTS),
        Card(Rank.THREE, Suit.DIAMONDS),
        Card(Rank.FOUR, Suit.CLUBS),
        Card(Rank.FIVE, Suit.SPADES),
    ]
