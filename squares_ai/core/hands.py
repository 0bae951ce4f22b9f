"""
Partial poker hand categories for Poker Squares.

A row or column can hold zero to five cards at any point of the game. This
module buckets any such line into one of 40 categories. Complete lines use
the ten canonical hand ranks; shorter lines use reduced sets that describe
which hands are still reachable (for example a two-card flush that is also
a straight draw). The classifier is a pure function and is the innermost
call of every rollout, so it avoids allocating more than it must.
"""
from __future__ import annotations
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from squares_ai.core.cards import Card
from squares_ai.core.constants import (
    ACE, KING, NUM_RANKS, NUM_SUITS, LINE_SIZE, ROYAL_RANKS
)
from squares_ai.core.exceptions import LineTooLongError
from squares_ai.core.scoring import PokerHand


class HandCategory(Enum):
    """
    The 40 line categories, identified by a stable index.

    Each member carries its index, the number of cards it describes and a
    short abbreviation used in table dumps.
    """
    HIGH_CARD5 = (0, 5, "HC", "high card")
    ONE_PAIR5 = (1, 5, "1P", "one pair")
    TWO_PAIR5 = (2, 5, "2P", "two pair")
    THREE_OF_A_KIND5 = (3, 5, "3K", "three of a kind")
    STRAIGHT5 = (4, 5, "ST", "straight")
    FLUSH5 = (5, 5, "FL", "flush")
    FULL_HOUSE5 = (6, 5, "FH", "full house")
    FOUR_OF_A_KIND5 = (7, 5, "4K", "four of a kind")
    STRAIGHT_FLUSH5 = (8, 5, "SF", "straight flush")
    ROYAL_FLUSH5 = (9, 5, "RF", "royal flush")
    HIGH_CARD4 = (10, 4, "HC4", "high card 4")
    ONE_PAIR4 = (11, 4, "1P4", "one pair 4")
    TWO_PAIR4 = (12, 4, "2P4", "two pair 4")
    THREE_OF_A_KIND4 = (13, 4, "3K4", "three of a kind 4")
    STRAIGHT4 = (14, 4, "ST4", "straight (diff suits) 4")
    FLUSH4 = (15, 4, "FL4", "flush 4")
    FOUR_OF_A_KIND4 = (16, 4, "4K4", "four of a kind 4")
    STRAIGHT_FLUSH4 = (17, 4, "SF4", "straight flush 4")
    ROYAL_FLUSH4 = (18, 4, "RF4", "royal flush 4")
    INSIDE_STRAIGHT4 = (19, 4, "IS4", "inside straight 4")
    INSIDE_STRAIGHT_FLUSH4 = (20, 4, "IF4", "inside straight flush 4")
    HIGH_CARD3 = (21, 3, "HC3", "high card 3")
    ONE_PAIR3 = (22, 3, "1P3", "one pair 3")
    THREE_OF_A_KIND3 = (23, 3, "3K3", "three of a kind 3")
    STRAIGHT3 = (24, 3, "ST3", "straight (diff suits) 3")
    FLUSH3 = (25, 3, "FL3", "flush 3")
    STRAIGHT_FLUSH3 = (26, 3, "SF3", "straight flush 3")
    ROYAL_FLUSH3 = (27, 3, "RF3", "royal flush 3")
    INSIDE_STRAIGHT3 = (28, 3, "IS3", "inside straight 3")
    INSIDE_STRAIGHT_FLUSH3 = (29, 3, "IF3", "inside straight flush 3")
    HIGH_CARD2 = (30, 2, "HC2", "high card 2")
    ONE_PAIR2 = (31, 2, "1P2", "one pair 2")
    STRAIGHT2 = (32, 2, "ST2", "straight (diff suits) 2")
    FLUSH2 = (33, 2, "FL2", "flush 2")
    STRAIGHT_FLUSH2 = (34, 2, "SF2", "straight flush 2")
    ROYAL_FLUSH2 = (35, 2, "RF2", "royal flush 2")
    INSIDE_STRAIGHT2 = (36, 2, "IS2", "inside straight 2")
    INSIDE_STRAIGHT_FLUSH2 = (37, 2, "IF2", "inside straight flush 2")
    ONE_CARD = (38, 1, "1C", "one card")
    ZERO_CARDS = (39, 0, "0C", "zero cards")

    def __init__(self, index: int, size: int, abbreviation: str, label: str):
        self.index = index
        self.size = size
        self.abbreviation = abbreviation
        self.label = label

    @property
    def is_complete(self) -> bool:
        """Whether this category describes a full five-card line."""
        return self.size == LINE_SIZE

    @property
    def poker_hand(self) -> PokerHand:
        """The canonical hand rank of a complete-line category."""
        if not self.is_complete:
            raise ValueError(f"{self.name} is not a complete hand")
        return PokerHand(self.index)

    def __str__(self) -> str:
        return self.label


# Categories indexed by their stable index
CATEGORIES: Tuple[HandCategory, ...] = tuple(sorted(HandCategory, key=lambda c: c.index))
NUM_CATEGORIES: int = len(CATEGORIES)

# Categories for complete lines, in PokerHand order
COMPLETE_CATEGORIES: Tuple[HandCategory, ...] = tuple(c for c in CATEGORIES if c.is_complete)

# Categories a tuner may adjust (everything short of a complete hand)
PARTIAL_CATEGORIES: Tuple[HandCategory, ...] = tuple(c for c in CATEGORIES if not c.is_complete)

_BY_SIZE: Dict[int, Dict[str, HandCategory]] = {}
for _category in CATEGORIES:
    _BY_SIZE.setdefault(_category.size, {})[_category.name.rstrip("012345")] = _category


def _pick(size: int, kind: str) -> HandCategory:
    return _BY_SIZE[size][kind]


def classify(cards: Sequence[Optional[Card]]) -> HandCategory:
    """
    Classify a line of up to five cards, ignoring empty slots.

    Precedence for complete lines is royal flush, straight flush, four of a
    kind, full house, flush, straight, three of a kind, two pair, one pair,
    high card. For two to four cards it is flush with royal ranks, flush
    with a straight, flush with an inside straight, four of a kind (four
    cards), flush, straight, inside straight, three of a kind (three or more
    cards), two pair (four cards), one pair, high card.

    Args:
        cards: Line slots, None for empty cells

    Returns:
        The line's HandCategory
    """
    present = [card for card in cards if card is not None]
    n = len(present)
    if n > LINE_SIZE:
        raise LineTooLongError(n)
    if n == 0:
        return HandCategory.ZERO_CARDS
    if n == 1:
        return HandCategory.ONE_CARD

    rank_counts = [0] * NUM_RANKS
    suit_counts = [0] * NUM_SUITS
    for card in present:
        rank_counts[card.rank] += 1
        suit_counts[card.suit] += 1

    max_of_a_kind = max(rank_counts)
    pairs = rank_counts.count(2)
    flush = suit_counts[present[0].suit] == n

    straight = royal = inside_straight = False
    if max_of_a_kind == 1:
        ranks = sorted(card.rank for card in present)
        span = ranks[-1] - ranks[0]
        # Either a consecutive run, or the ace with the top n-1 ranks
        straight = span == n - 1 or (
            ranks[0] == ACE and ranks[1] == KING - n + 2 and ranks[-1] - ranks[1] == n - 2
        )
        royal = all(rank in ROYAL_RANKS for rank in ranks)
        inside_straight = span <= LINE_SIZE - 1

    if n == LINE_SIZE:
        if flush and royal:
            return HandCategory.ROYAL_FLUSH5
        if flush and straight:
            return HandCategory.STRAIGHT_FLUSH5
        if max_of_a_kind == 4:
            return HandCategory.FOUR_OF_A_KIND5
        if max_of_a_kind == 3 and pairs == 1:
            return HandCategory.FULL_HOUSE5
        if flush:
            return HandCategory.FLUSH5
        if straight:
            return HandCategory.STRAIGHT5
        if max_of_a_kind == 3:
            return HandCategory.THREE_OF_A_KIND5
        if pairs == 2:
            return HandCategory.TWO_PAIR5
        if pairs == 1:
            return HandCategory.ONE_PAIR5
        return HandCategory.HIGH_CARD5

    if flush:
        if royal:
            return _pick(n, "ROYAL_FLUSH")
        if straight:
            return _pick(n, "STRAIGHT_FLUSH")
        if inside_straight:
            return _pick(n, "INSIDE_STRAIGHT_FLUSH")
    if n == 4 and max_of_a_kind == 4:
        return HandCategory.FOUR_OF_A_KIND4
    if flush:
        return _pick(n, "FLUSH")
    if straight:
        return _pick(n, "STRAIGHT")
    if inside_straight:
        return _pick(n, "INSIDE_STRAIGHT")
    if n >= 3 and max_of_a_kind == 3:
        return _pick(n, "THREE_OF_A_KIND")
    if n == 4 and pairs == 2:
        return HandCategory.TWO_PAIR4
    if pairs == 1:
        return _pick(n, "ONE_PAIR")
    return _pick(n, "HIGH_CARD")


def categories_of_size(size: int) -> List[HandCategory]:
    """Get all categories describing lines of the given card count."""
    return [category for category in CATEGORIES if category.size == size]
