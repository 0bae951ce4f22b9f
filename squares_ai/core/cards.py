"""
Playing cards for Poker Squares.

This module defines the immutable Card type, the canonical ordering of the
52-card deck, and helpers for creating, shuffling and parsing decks.
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import random

from squares_ai.core.constants import (
    NUM_RANKS, NUM_SUITS, NUM_CARDS, RANK_SYMBOLS, SUIT_SYMBOLS, SUIT_NAMES
)


@dataclass(frozen=True)
class Card:
    """
    Represents a playing card.

    Cards compare equal by rank and suit. Rank 0 is the ace and rank 12 the
    king; suits are ordered clubs, diamonds, hearts, spades.
    """
    rank: int
    suit: int

    def __post_init__(self):
        """Validate the card after initialization."""
        if not 0 <= self.rank < NUM_RANKS:
            raise ValueError(f"Card rank must be in [0, {NUM_RANKS}), got {self.rank}")
        if not 0 <= self.suit < NUM_SUITS:
            raise ValueError(f"Card suit must be in [0, {NUM_SUITS}), got {self.suit}")

    @property
    def index(self) -> int:
        """Position of this card in the canonical deck ordering (0-51)."""
        return self.suit * NUM_RANKS + self.rank

    @property
    def suit_name(self) -> str:
        return SUIT_NAMES[self.suit]

    @classmethod
    def from_index(cls, index: int) -> 'Card':
        """
        Get the card at a canonical deck position.

        Args:
            index: Position in the canonical ordering (0-51)

        Returns:
            The shared Card instance for that position
        """
        return ALL_CARDS[index]

    @classmethod
    def from_string(cls, text: str) -> 'Card':
        """
        Parse a two-character card string such as "AS", "TC" or "9h".

        Args:
            text: Rank symbol followed by suit symbol

        Returns:
            The parsed Card
        """
        text = text.strip().upper()
        if len(text) != 2 or text[0] not in RANK_SYMBOLS or text[1] not in SUIT_SYMBOLS:
            raise ValueError(f"Cannot parse card from {text!r}")
        return ALL_CARDS[SUIT_SYMBOLS.index(text[1]) * NUM_RANKS + RANK_SYMBOLS.index(text[0])]

    def __str__(self) -> str:
        return f"{RANK_SYMBOLS[self.rank]}{SUIT_SYMBOLS[self.suit]}"


# All 52 cards in canonical order
ALL_CARDS: Tuple[Card, ...] = tuple(
    Card(rank, suit) for suit in range(NUM_SUITS) for rank in range(NUM_RANKS)
)

assert len(ALL_CARDS) == NUM_CARDS


def create_deck() -> List[Card]:
    """Create a new list holding the full deck in canonical order."""
    return list(ALL_CARDS)


def shuffled_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """
    Create a shuffled deck.

    Args:
        rng: Random source (the module-level generator if None)

    Returns:
        List of all 52 cards in random order
    """
    deck = create_deck()
    (rng or random).shuffle(deck)
    return deck


def parse_cards(text: str) -> List[Card]:
    """
    Parse a whitespace separated list of card strings.

    Args:
        text: For example "AS KS QS JS TS"

    Returns:
        List of parsed cards
    """
    return [Card.from_string(token) for token in text.split()]


def format_cards(cards: Sequence[Optional[Card]]) -> str:
    """Format cards for display, showing empty slots as "--"."""
    return " ".join("--" if card is None else str(card) for card in cards)
