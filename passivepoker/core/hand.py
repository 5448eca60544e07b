"""
Hand Evaluation for passive Texas Hold'em.

A hand's strength is a vector ``(category, tiebreak1, tiebreak2, ...)``.
Vectors compare lexicographically from left to right, and a missing trailing
position counts as 0. Higher is better.

Categories (best to worst):
8. Straight Flush: 5 consecutive cards of one suit (Royal Flush when Ace-high)
7. Four of a Kind: 4 cards of same rank
6. Full House: 3 of a kind + pair
5. Flush: 5 cards of same suit
4. Straight: 5 consecutive cards
3. Three of a Kind: 3 cards of same rank
2. Two Pair: 2 different pairs
1. One Pair: 2 cards of same rank
0. High Card: No made hand

Note: Ace can be low in A-2-3-4-5 straight (wheel), which ranks as 5-high.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Tuple, TypeVar
from dataclasses import dataclass, field
from enum import IntEnum
from collections import Counter
import itertools

from passivepoker.core.card import Card, Rank, Suit, RANK_LABELS, SUIT_NAMES
from passivepoker.core.rules import HAND_SIZE


T = TypeVar("T")


class HandRank(IntEnum):
    """Hand categories, the first position of every strength vector."""
    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8


HAND_RANK_NAMES = {
    HandRank.STRAIGHT_FLUSH: "Straight Flush",
    HandRank.FOUR_OF_A_KIND: "Four of a Kind",
    HandRank.FULL_HOUSE: "Full House",
    HandRank.FLUSH: "Flush",
    HandRank.STRAIGHT: "Straight",
    HandRank.THREE_OF_A_KIND: "Three of a Kind",
    HandRank.TWO_PAIR: "Two Pair",
    HandRank.ONE_PAIR: "One Pair",
    HandRank.HIGH_CARD: "High Card",
}

# Longest vector is high card / flush: category + 5 ranks
VECTOR_LENGTH = 6

INCOMPLETE_VECTOR: Tuple[int, ...] = (-1,)

# Suit scan order when looking for a flush
_FLUSH_SUIT_ORDER = (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS)


def compare_vectors(a: Sequence[int], b: Sequence[int]) -> int:
    """
    Compare two strength vectors.

    Returns:
        1 if a is stronger, -1 if b is stronger, 0 if tied
    """
    for i in range(max(len(a), len(b))):
        av = a[i] if i < len(a) else 0
        bv = b[i] if i < len(b) else 0
        if av != bv:
            return 1 if av > bv else -1
    return 0


@dataclass(frozen=True)
class HandResult:
    """
    The best hand found for a set of cards.

    Attributes:
        vector: Strength vector, (-1,) when fewer than 5 cards were available
        cards: The exact 5 cards forming the hand
        name: Display name, e.g. "Straight to K" or "Spade Flush"
    """
    vector: Tuple[int, ...]
    cards: Tuple[Card, ...] = field(default_factory=tuple)
    name: str = ""

    @property
    def is_complete(self) -> bool:
        return self.vector != INCOMPLETE_VECTOR

    @property
    def category(self) -> Optional[HandRank]:
        if not self.is_complete:
            return None
        return HandRank(self.vector[0])

    @property
    def sort_key(self) -> Tuple[int, ...]:
        """Vector padded with zeros so that plain tuple ordering applies."""
        return tuple(self.vector) + (0,) * (VECTOR_LENGTH - len(self.vector))

    def beats(self, other: HandResult) -> bool:
        return compare_vectors(self.vector, other.vector) > 0

    def ties(self, other: HandResult) -> bool:
        return compare_vectors(self.vector, other.vector) == 0

    def to_dict(self) -> Dict:
        return {
            "vector": list(self.vector),
            "category": self.category.name if self.category is not None else None,
            "name": self.name,
            "cards": [card.to_dict() for card in self.cards],
        }


INCOMPLETE = HandResult(vector=INCOMPLETE_VECTOR, cards=(), name="Incomplete")


def combinations(items: Sequence[T], k: int) -> List[Tuple[T, ...]]:
    """
    Return every k-sized subset of items.

    Subsets keep the input order of their members. Asking for more items
    than available gives an empty list.
    """
    if k < 0:
        raise ValueError(f"Subset size must be non-negative, got {k}")
    return list(itertools.combinations(items, k))


def evaluate_best(cards: Sequence[Card]) -> HandResult:
    """
    Find the best 5-card hand among the given cards.

    Args:
        cards: Candidate cards (any number; 7 at showdown)

    Returns:
        HandResult for the strongest 5-card subset, or INCOMPLETE when
        fewer than 5 cards are supplied. When several subsets tie, the
        first one enumerated is kept.
    """
    if len(cards) < HAND_SIZE:
        return INCOMPLETE

    if len(cards) == HAND_SIZE:
        return evaluate_five(cards)

    best = INCOMPLETE
    for combo in combinations(cards, HAND_SIZE):
        result = evaluate_five(combo)
        if result.beats(best):
            best = result

    return best


def best_5_of_7(cards: Sequence[Card]) -> HandResult:
    """Evaluate a full showdown hand: 2 hole cards + 5 board cards."""
    if len(cards) != 7:
        raise ValueError(f"Need exactly 7 cards, got {len(cards)}")
    return evaluate_best(cards)


def evaluate_five(cards: Sequence[Card]) -> HandResult:
    """Evaluate exactly 5 cards."""
    if len(cards) != HAND_SIZE:
        raise ValueError(f"Need exactly 5 cards, got {len(cards)}")

    vector, name = classify(cards)
    return HandResult(vector=tuple(int(v) for v in vector), cards=tuple(cards), name=name)


def classify(cards: Sequence[Card]) -> Tuple[Tuple[int, ...], str]:
    """
    Compute the strength vector and display name for a set of cards.

    The rules hold for any card multiset of 5 to 7 cards, so the vector
    equals that of the best 5-card subset.
    """
    values = sorted((int(c.rank) for c in cards), reverse=True)
    rank_counts = Counter(values)

    by_suit: Dict[Suit, List[int]] = {}
    for card in cards:
        by_suit.setdefault(card.suit, []).append(int(card.rank))

    flush_suit = next(
        (s for s in _FLUSH_SUIT_ORDER if len(by_suit.get(s, [])) >= HAND_SIZE),
        None,
    )

    if flush_suit is not None:
        top = _straight_top(by_suit[flush_suit])
        if top is not None:
            if top == Rank.ACE:
                return (HandRank.STRAIGHT_FLUSH, top), "Royal Flush"
            return (HandRank.STRAIGHT_FLUSH, top), f"Straight Flush to {_label(top)}"

    # Groups ordered by count first, then rank
    groups = sorted(rank_counts.items(), key=lambda g: (g[1], g[0]), reverse=True)
    lead_rank, lead_count = groups[0]

    if lead_count == 4:
        kicker = max(v for v in values if v != lead_rank)
        return (HandRank.FOUR_OF_A_KIND, lead_rank, kicker), "Four of a Kind"

    if lead_count == 3:
        pair_ranks = [r for r, c in groups[1:] if c >= 2]
        if pair_ranks:
            return (HandRank.FULL_HOUSE, lead_rank, max(pair_ranks)), "Full House"

    if flush_suit is not None:
        flush_values = sorted(by_suit[flush_suit], reverse=True)[:HAND_SIZE]
        return (HandRank.FLUSH, *flush_values), f"{SUIT_NAMES[flush_suit]} Flush"

    top = _straight_top(values)
    if top is not None:
        return (HandRank.STRAIGHT, top), f"Straight to {_label(top)}"

    if lead_count == 3:
        kickers = [v for v in values if v != lead_rank][:2]
        return (HandRank.THREE_OF_A_KIND, lead_rank, *kickers), "Three of a Kind"

    pairs = [r for r, c in groups if c == 2]
    if len(pairs) >= 2:
        high, low = pairs[0], pairs[1]
        kicker = max((v for v in values if v not in (high, low)), default=0)
        return (HandRank.TWO_PAIR, high, low, kicker), "Two Pair"

    if lead_count == 2:
        kickers = [v for v in values if v != lead_rank][:3]
        return (HandRank.ONE_PAIR, lead_rank, *kickers), "One Pair"

    return (HandRank.HIGH_CARD, *values[:HAND_SIZE]), f"High Card {_label(values[0])}"


def _straight_top(values: Sequence[int]) -> Optional[int]:
    """
    Return the top rank of the highest straight in values, if any.

    The ace also plays low, so A-2-3-4-5 returns 5.
    """
    present = set(values)
    if Rank.ACE in present:
        present.add(1)

    for top in range(Rank.ACE, Rank.FIVE - 1, -1):
        if all(v in present for v in range(top - 4, top + 1)):
            return top
    return None


def _label(value: int) -> str:
    return RANK_LABELS[Rank(value)]


def describe_hand(result: HandResult) -> str:
    """Get a longer human-readable description of an evaluated hand."""
    if not result.is_complete:
        return "Incomplete hand"

    category = result.category
    ranks = result.vector[1:]

    if category == HandRank.STRAIGHT_FLUSH:
        if ranks[0] == Rank.ACE:
            return "Royal Flush"
        return f"Straight Flush, {_rank_name(ranks[0])} high"
    elif category == HandRank.FOUR_OF_A_KIND:
        return f"Four of a Kind, {_rank_name(ranks[0])}s"
    elif category == HandRank.FULL_HOUSE:
        return f"Full House, {_rank_name(ranks[0])}s full of {_rank_name(ranks[1])}s"
    elif category == HandRank.FLUSH:
        return f"Flush, {_rank_name(ranks[0])} high"
    elif category == HandRank.STRAIGHT:
        if ranks[0] == Rank.FIVE:
            return "Straight, Five high (Wheel)"
        return f"Straight, {_rank_name(ranks[0])} high"
    elif category == HandRank.THREE_OF_A_KIND:
        return f"Three of a Kind, {_rank_name(ranks[0])}s"
    elif category == HandRank.TWO_PAIR:
        return f"Two Pair, {_rank_name(ranks[0])}s and {_rank_name(ranks[1])}s"
    elif category == HandRank.ONE_PAIR:
        return f"Pair of {_rank_name(ranks[0])}s"
    else:
        return f"High Card, {_rank_name(ranks[0])}"


def _rank_name(value: int) -> str:
    """Get the name of a rank."""
    names = {
        Rank.TWO: "Two", Rank.THREE: "Three", Rank.FOUR: "Four",
        Rank.FIVE: "Five", Rank.SIX: "Six", Rank.SEVEN: "Seven",
        Rank.EIGHT: "Eight", Rank.NINE: "Nine", Rank.TEN: "Ten",
        Rank.JACK: "Jack", Rank.QUEEN: "Queen", Rank.KING: "King",
        Rank.ACE: "Ace"
    }
    return names[Rank(value)]
