"""
Card and Deck classes for passive Texas Hold'em.

Every card carries a stable integer index (0-51) so that the engine can tell
exactly which physical card contributed to a hand, independent of object
identity.
"""

from __future__ import annotations
import random
from typing import List, Optional, Sequence
from enum import IntEnum

from passivepoker.core.rules import DeckExhaustedError, DECK_SIZE


class Suit(IntEnum):
    """Card suits. Higher value = higher presentation priority."""
    CLUBS = 0     # ♣
    DIAMONDS = 1  # ♦
    HEARTS = 2    # ♥
    SPADES = 3    # ♠


class Rank(IntEnum):
    """Card ranks valued as they appear in strength vectors (2..14)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


SUIT_SYMBOLS = {
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.HEARTS: "♥",
    Suit.SPADES: "♠",
}

SUIT_CHARS = {
    Suit.CLUBS: "c",
    Suit.DIAMONDS: "d",
    Suit.HEARTS: "h",
    Suit.SPADES: "s",
}

SUIT_NAMES = {
    Suit.CLUBS: "Club",
    Suit.DIAMONDS: "Diamond",
    Suit.HEARTS: "Heart",
    Suit.SPADES: "Spade",
}

# Display labels ("10" rather than "T")
RANK_LABELS = {rank: str(int(rank)) for rank in Rank if rank <= Rank.TEN}
RANK_LABELS.update({
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
})

RANK_CHARS = dict(RANK_LABELS)
RANK_CHARS[Rank.TEN] = "T"

# Reverse mappings
CHAR_TO_RANK = {v: k for k, v in RANK_CHARS.items()}
CHAR_TO_RANK["10"] = Rank.TEN
CHAR_TO_SUIT = {v: k for k, v in SUIT_CHARS.items()}
SYMBOL_TO_SUIT = {v: k for k, v in SUIT_SYMBOLS.items()}


class Card:
    """
    An immutable playing card.

    Cards can be created from:
    - Rank and Suit enums: Card(Rank.ACE, Suit.SPADES)
    - String notation: Card.from_string("As"), "A♠" or "10s"
    - Index (0-51): Card.from_index(51) = Ace of Spades

    The index is ``(rank - 2) * 4 + suit``. It is unique within a deck and
    is what equality and hashing are based on.
    """

    __slots__ = ("_rank", "_suit", "_index")

    def __init__(self, rank: Rank, suit: Suit):
        object.__setattr__(self, "_rank", Rank(rank))
        object.__setattr__(self, "_suit", Suit(suit))
        object.__setattr__(self, "_index", (int(self._rank) - 2) * 4 + int(self._suit))

    def __setattr__(self, name, value):
        raise AttributeError("Card is immutable")

    def __reduce__(self):
        return (Card.from_index, (self._index,))

    @property
    def rank(self) -> Rank:
        return self._rank

    @property
    def suit(self) -> Suit:
        return self._suit

    @property
    def index(self) -> int:
        """Stable position of this card in the canonical deck."""
        return self._index

    @classmethod
    def from_string(cls, s: str) -> Card:
        """
        Create a card from string notation.

        Accepts formats:
        - "As", "Kh", "Td", "2c" (rank + suit char)
        - "A♠", "K♥", "10♦", "2♣" (rank + suit symbol)
        """
        s = s.strip()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_part, suit_part = s[:-1].upper(), s[-1]

        if rank_part not in CHAR_TO_RANK:
            raise ValueError(f"Invalid rank: {rank_part}")
        rank = CHAR_TO_RANK[rank_part]

        if suit_part.lower() in CHAR_TO_SUIT:
            suit = CHAR_TO_SUIT[suit_part.lower()]
        elif suit_part in SYMBOL_TO_SUIT:
            suit = SYMBOL_TO_SUIT[suit_part]
        else:
            raise ValueError(f"Invalid suit: {suit_part}")

        return cls(rank, suit)

    @classmethod
    def from_index(cls, index: int) -> Card:
        """Create a card from its deck index (0-51)."""
        if not 0 <= index < DECK_SIZE:
            raise ValueError(f"Card index must be 0-51, got {index}")
        return cls(Rank(index // 4 + 2), Suit(index % 4))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Card):
            return self._index == other._index
        return NotImplemented

    def __hash__(self) -> int:
        return self._index

    def __lt__(self, other: Card) -> bool:
        """Compare by rank only (for sorting)."""
        return self._rank < other._rank

    def __repr__(self) -> str:
        return f"Card({RANK_CHARS[self._rank]}{SUIT_CHARS[self._suit]})"

    def __str__(self) -> str:
        return f"{RANK_LABELS[self._rank]}{SUIT_SYMBOLS[self._suit]}"

    @property
    def short_str(self) -> str:
        """Short string like 'As', 'Th'."""
        return f"{RANK_CHARS[self._rank]}{SUIT_CHARS[self._suit]}"

    @property
    def color(self) -> str:
        """Return 'red' for hearts/diamonds, 'black' for clubs/spades."""
        return "red" if self._suit in (Suit.HEARTS, Suit.DIAMONDS) else "black"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "rank": RANK_LABELS[self._rank],
            "suit": SUIT_SYMBOLS[self._suit],
            "text": str(self),
            "color": self.color,
            "index": self._index,
        }


def build_deck() -> List[Card]:
    """Return the 52 distinct cards in canonical (index) order."""
    return [Card(rank, suit) for rank in Rank for suit in Suit]


def shuffle_cards(cards: Sequence[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """Return a uniformly shuffled copy of ``cards``."""
    shuffled = list(cards)
    (rng or random).shuffle(shuffled)
    return shuffled


class Deck:
    """
    A standard 52-card deck with a draw cursor.

    Every draw, burns included, advances the cursor; no card is ever dealt
    twice. Pass a seeded ``random.Random`` for reproducible deals.

    Usage:
        deck = Deck(rng=random.Random(7))
        hole_cards = deck.draw(2)
        deck.burn()
        flop = deck.draw(3)
    """

    def __init__(self, shuffle: bool = True, rng: Optional[random.Random] = None):
        """Initialize a new deck, optionally shuffled."""
        self._rng = rng
        self.reset()
        if shuffle:
            self.shuffle()

    def reset(self) -> None:
        """Reset the deck to a full 52 cards in canonical order."""
        self._cards: List[Card] = build_deck()
        self._cursor = 0

    def shuffle(self) -> None:
        """Shuffle the undrawn part of the deck."""
        self._cards[self._cursor:] = shuffle_cards(self._cards[self._cursor:], self._rng)

    def draw(self, n: int = 1) -> List[Card]:
        """
        Draw n cards from the top of the deck.

        Raises:
            DeckExhaustedError: If fewer than n cards remain.
        """
        if n < 0:
            raise ValueError(f"Cannot draw a negative number of cards: {n}")
        if n > self.remaining:
            raise DeckExhaustedError(
                f"Cannot draw {n} cards, only {self.remaining} remain"
            )

        drawn = self._cards[self._cursor:self._cursor + n]
        self._cursor += n
        return drawn

    def draw_one(self) -> Card:
        """Draw a single card."""
        return self.draw(1)[0]

    def burn(self) -> Card:
        """Burn (discard) the top card."""
        return self.draw_one()

    @property
    def cursor(self) -> int:
        """Number of cards drawn so far."""
        return self._cursor

    @property
    def remaining(self) -> int:
        """Number of cards remaining in the deck."""
        return DECK_SIZE - self._cursor

    @property
    def dealt_cards(self) -> List[Card]:
        """List of cards that have been drawn, burns included."""
        return self._cards[:self._cursor]

    def __len__(self) -> int:
        return self.remaining

    def __repr__(self) -> str:
        return f"Deck({self.remaining} cards remaining)"


def parse_cards(cards_str: str) -> List[Card]:
    """
    Parse multiple cards from a string.

    Accepts formats:
    - "As Kh 10d" (space-separated)
    - "AsKhTd" (no separator, 2 chars each)
    - "A♠ K♥ T♦" (with symbols)
    """
    cards_str = cards_str.strip()

    if " " in cards_str:
        return [Card.from_string(s) for s in cards_str.split()]

    result = []
    i = 0
    while i < len(cards_str):
        if cards_str.startswith("10", i):
            result.append(Card.from_string(cards_str[i:i + 3]))
            i += 3
        elif i + 1 < len(cards_str) and (
            cards_str[i + 1] in SYMBOL_TO_SUIT or cards_str[i + 1].lower() in CHAR_TO_SUIT
        ):
            result.append(Card.from_string(cards_str[i:i + 2]))
            i += 2
        else:
            raise ValueError(f"Cannot parse card at position {i}: {cards_str[i:]}")

    return result
