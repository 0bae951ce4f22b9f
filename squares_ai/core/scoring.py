"""
Official point systems for Poker Squares.

This module classifies complete poker hands into the ten canonical ranks and
maps those ranks to points. It is the scoring authority the Monte Carlo
player consults for finished grids; the partial-hand classifier in
``squares_ai.core.hands`` never depends on it.
"""
from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple
import random

from squares_ai.core.cards import Card
from squares_ai.core.constants import (
    ACE, KING, LINE_SIZE, GRID_SIZE, ROW_CELLS, COLUMN_CELLS, NUM_CELLS,
    MIN_HEURISTIC_VALUE, MAX_HEURISTIC_VALUE
)
from squares_ai.core.exceptions import LineTooLongError


class PokerHand(Enum):
    """The ten canonical poker hand ranks, in ascending order."""
    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8
    ROYAL_FLUSH = 9

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").lower()


def classify_hand(cards: Sequence[Optional[Card]]) -> PokerHand:
    """
    Classify a line of cards into one of the ten poker hand ranks.

    Empty slots are ignored. Straights and flushes need all five cards; the
    ace plays both low (A-2-3-4-5) and high (10-J-Q-K-A). Incomplete lines
    are classified by rank multiplicities only.

    Args:
        cards: Up to five cards, possibly with None for empty cells

    Returns:
        The poker hand rank
    """
    present = [card for card in cards if card is not None]
    if len(present) > LINE_SIZE:
        raise LineTooLongError(len(present))

    shape = sorted(Counter(card.rank for card in present).values(), reverse=True)

    if len(present) == LINE_SIZE and shape == [1, 1, 1, 1, 1]:
        ranks = {card.rank for card in present}
        is_flush = len({card.suit for card in present}) == 1
        is_broadway = ranks == {ACE, KING, KING - 1, KING - 2, KING - 3}
        is_straight = is_broadway or max(ranks) - min(ranks) == LINE_SIZE - 1
        if is_flush and is_broadway:
            return PokerHand.ROYAL_FLUSH
        if is_flush and is_straight:
            return PokerHand.STRAIGHT_FLUSH
        if is_flush:
            return PokerHand.FLUSH
        if is_straight:
            return PokerHand.STRAIGHT
        return PokerHand.HIGH_CARD

    if shape[:1] == [4]:
        return PokerHand.FOUR_OF_A_KIND
    if shape[:2] == [3, 2]:
        return PokerHand.FULL_HOUSE
    if shape[:1] == [3]:
        return PokerHand.THREE_OF_A_KIND
    if shape[:2] == [2, 2]:
        return PokerHand.TWO_PAIR
    if shape[:1] == [2]:
        return PokerHand.ONE_PAIR
    return PokerHand.HIGH_CARD


@dataclass(frozen=True)
class PointSystem:
    """
    Maps each poker hand rank to a point value.

    A grid is worth the sum of the values of its five rows and five columns.
    """
    name: str
    scores: Tuple[int, ...]

    def __post_init__(self):
        """Validate the point system after initialization."""
        if len(self.scores) != len(PokerHand):
            raise ValueError(f"A point system needs {len(PokerHand)} scores, got {len(self.scores)}")

    def hand_score(self, hand: PokerHand) -> int:
        """Get the points awarded for a hand rank."""
        return self.scores[hand.value]

    def score_line(self, cards: Sequence[Optional[Card]]) -> int:
        """Get the points awarded for one row or column."""
        return self.scores[classify_hand(cards).value]

    def hand_scores(self, grid: Sequence[Optional[Card]]) -> List[int]:
        """
        Score every line of a grid.

        Args:
            grid: The 25 cells in row-major order (None for empty cells)

        Returns:
            Scores of rows 0-4 followed by columns 0-4
        """
        if len(grid) != NUM_CELLS:
            raise ValueError(f"A grid has {NUM_CELLS} cells, got {len(grid)}")
        lines = ROW_CELLS + COLUMN_CELLS
        return [self.score_line([grid[cell] for cell in line]) for line in lines]

    def score_grid(self, grid: Sequence[Optional[Card]]) -> int:
        """Get the total points for a grid given as 25 row-major cells."""
        return sum(self.hand_scores(grid))

    def to_dict(self) -> Dict[str, int]:
        return {hand.name: self.scores[hand.value] for hand in PokerHand}

    @classmethod
    def from_dict(cls, mapping: Mapping[str, int], name: str = "Custom") -> 'PointSystem':
        """
        Create a point system from a mapping of hand names to points.

        Args:
            mapping: Hand rank names (e.g. "ONE_PAIR") to points; missing hands score 0
            name: Display name

        Returns:
            PointSystem
        """
        unknown = set(mapping) - {hand.name for hand in PokerHand}
        if unknown:
            raise ValueError(f"Unknown hand names: {sorted(unknown)}")
        return cls(name, tuple(int(mapping.get(hand.name, 0)) for hand in PokerHand))

    @classmethod
    def american(cls) -> 'PointSystem':
        """Get the American point system."""
        return cls("American", (0, 2, 5, 10, 15, 20, 25, 50, 75, 100))

    @classmethod
    def british(cls) -> 'PointSystem':
        """Get the British point system."""
        return cls("British", (0, 1, 3, 6, 12, 5, 10, 16, 30, 30))

    @classmethod
    def random(cls, rng: Optional[random.Random] = None) -> 'PointSystem':
        """
        Get a point system with independent random values in [-128, 127].

        Args:
            rng: Random source (the module-level generator if None)

        Returns:
            PointSystem
        """
        rng = rng or random.Random()
        return cls("Random", tuple(
            rng.randint(MIN_HEURISTIC_VALUE, MAX_HEURISTIC_VALUE) for _ in PokerHand
        ))

    @classmethod
    def by_name(cls, name: str, rng: Optional[random.Random] = None) -> 'PointSystem':
        """Get a preset point system by name ("american", "british" or "random")."""
        presets = {"american": cls.american, "british": cls.british}
        key = name.lower()
        if key == "random":
            return cls.random(rng)
        if key not in presets:
            raise ValueError(f"Unknown point system {name!r}")
        return presets[key]()

    def __str__(self) -> str:
        values = ", ".join(f"{hand.label}: {self.scores[hand.value]}" for hand in PokerHand)
        return f"{self.name} ({values})"


def grid_rows(grid: Sequence[Optional[Card]]) -> List[List[Optional[Card]]]:
    """Split 25 row-major cells into five rows."""
    return [list(grid[row * GRID_SIZE:(row + 1) * GRID_SIZE]) for row in range(GRID_SIZE)]
