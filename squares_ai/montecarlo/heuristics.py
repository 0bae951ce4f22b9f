"""
Heuristic values for partial Poker Squares lines.

A HeuristicTable assigns an integer value in [-128, 127] to each of the 40
line categories, separately for three phases of the game (turns 0-9, 10-19
and 20-24). Values live in a fixed-size numpy array indexed by
(phase bucket, category index). Rollouts read a bucket as a plain tuple so
the innermost loop never touches numpy scalars.

Tables start from ``seed_table``, which values every partial line by the
best complete hand it can still become, and are then adjusted by the tuners
through ``randomize``, ``merge`` and ``mutate``.
"""
from __future__ import annotations
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import random

import numpy as np

from squares_ai.core.constants import (
    NUM_PHASE_BUCKETS, TURNS_PER_BUCKET, NUM_CELLS,
    MIN_HEURISTIC_VALUE, MAX_HEURISTIC_VALUE
)
from squares_ai.core.exceptions import UnseededTableError
from squares_ai.core.hands import (
    HandCategory, CATEGORIES, COMPLETE_CATEGORIES, PARTIAL_CATEGORIES,
    NUM_CATEGORIES, categories_of_size
)
from squares_ai.core.scoring import PokerHand

H = HandCategory

# Categories reachable by adding one card to a line of each category
REACHABLE: Dict[HandCategory, Tuple[HandCategory, ...]] = {
    # Four cards
    H.ROYAL_FLUSH4: (H.FLUSH5, H.STRAIGHT5, H.STRAIGHT_FLUSH5, H.ROYAL_FLUSH5, H.HIGH_CARD5, H.ONE_PAIR5),
    H.STRAIGHT_FLUSH4: (H.FLUSH5, H.STRAIGHT5, H.STRAIGHT_FLUSH5, H.HIGH_CARD5, H.ONE_PAIR5),
    H.FOUR_OF_A_KIND4: (H.FOUR_OF_A_KIND5,),
    H.FLUSH4: (H.FLUSH5, H.HIGH_CARD5, H.ONE_PAIR5),
    H.STRAIGHT4: (H.STRAIGHT5, H.HIGH_CARD5, H.ONE_PAIR5),
    H.THREE_OF_A_KIND4: (H.THREE_OF_A_KIND5, H.FOUR_OF_A_KIND5, H.FULL_HOUSE5),
    H.TWO_PAIR4: (H.FULL_HOUSE5, H.TWO_PAIR5),
    H.ONE_PAIR4: (H.ONE_PAIR5, H.TWO_PAIR5, H.THREE_OF_A_KIND5),
    H.HIGH_CARD4: (H.HIGH_CARD5, H.ONE_PAIR5),
    # Three cards
    H.ROYAL_FLUSH3: (H.ROYAL_FLUSH4, H.STRAIGHT4, H.FLUSH4, H.HIGH_CARD4, H.ONE_PAIR4, H.STRAIGHT_FLUSH4),
    H.STRAIGHT_FLUSH3: (H.STRAIGHT4, H.FLUSH4, H.HIGH_CARD4, H.ONE_PAIR4, H.STRAIGHT_FLUSH4),
    H.FLUSH3: (H.FLUSH4, H.HIGH_CARD4, H.ONE_PAIR4),
    H.STRAIGHT3: (H.STRAIGHT4, H.HIGH_CARD4, H.ONE_PAIR4),
    H.THREE_OF_A_KIND3: (H.THREE_OF_A_KIND4, H.FOUR_OF_A_KIND4),
    H.ONE_PAIR3: (H.THREE_OF_A_KIND4, H.ONE_PAIR4, H.TWO_PAIR4),
    H.HIGH_CARD3: (H.HIGH_CARD4, H.ONE_PAIR4),
    # Two cards
    H.ROYAL_FLUSH2: (H.ROYAL_FLUSH3, H.STRAIGHT3, H.FLUSH3, H.HIGH_CARD3, H.ONE_PAIR3, H.STRAIGHT_FLUSH3),
    H.STRAIGHT_FLUSH2: (H.STRAIGHT3, H.FLUSH3, H.HIGH_CARD3, H.ONE_PAIR3, H.STRAIGHT_FLUSH3),
    H.FLUSH2: (H.FLUSH3, H.HIGH_CARD3, H.ONE_PAIR3),
    H.STRAIGHT2: (H.STRAIGHT3, H.HIGH_CARD3, H.ONE_PAIR3),
    H.ONE_PAIR2: (H.THREE_OF_A_KIND3, H.ONE_PAIR3),
    H.HIGH_CARD2: (H.HIGH_CARD3, H.ONE_PAIR3),
    # One and zero cards
    H.ONE_CARD: (H.ROYAL_FLUSH2, H.STRAIGHT2, H.FLUSH2, H.HIGH_CARD2, H.ONE_PAIR2, H.STRAIGHT_FLUSH2),
    H.ZERO_CARDS: (H.ONE_CARD,),
}

# A gap-filling draw completes the same hand as the plain straight draw
INSIDE_VARIANTS: Dict[HandCategory, HandCategory] = {
    H.INSIDE_STRAIGHT4: H.STRAIGHT4,
    H.INSIDE_STRAIGHT_FLUSH4: H.STRAIGHT_FLUSH4,
    H.INSIDE_STRAIGHT3: H.STRAIGHT3,
    H.INSIDE_STRAIGHT_FLUSH3: H.STRAIGHT_FLUSH3,
    H.INSIDE_STRAIGHT2: H.STRAIGHT2,
    H.INSIDE_STRAIGHT_FLUSH2: H.STRAIGHT_FLUSH2,
}

# Four-card draws that score nothing unless the last card completes them
DRAW_CATEGORIES: Tuple[HandCategory, ...] = (
    H.FLUSH4, H.STRAIGHT4, H.STRAIGHT_FLUSH4, H.ROYAL_FLUSH4,
    H.INSIDE_STRAIGHT4, H.INSIDE_STRAIGHT_FLUSH4,
)


def clamp(value: int) -> int:
    """Clamp a heuristic value to [-128, 127]."""
    return max(MIN_HEURISTIC_VALUE, min(MAX_HEURISTIC_VALUE, int(value)))


def bucket_for_turn(turn: int) -> int:
    """
    Get the phase bucket for a turn index.

    Turns 0-9 map to bucket 0, 10-19 to bucket 1 and 20-24 to bucket 2.
    Negative turns (an empty grid) use bucket 0.
    """
    if turn < 0:
        return 0
    return min(turn // TURNS_PER_BUCKET, NUM_PHASE_BUCKETS - 1)


class HeuristicTable:
    """
    Phase-bucketed category values used to score partial grids.

    Every (bucket, category) entry must be defined before the table is read.
    Only the tuners and the seeding step write to a table; rollouts treat it
    as read-only.
    """

    def __init__(self):
        self._values = np.zeros((NUM_PHASE_BUCKETS, NUM_CATEGORIES), dtype=np.int16)
        self._defined = np.zeros((NUM_PHASE_BUCKETS, NUM_CATEGORIES), dtype=bool)
        self._rows: List[Optional[Tuple[int, ...]]] = [None] * NUM_PHASE_BUCKETS

    def put(self, turn: int, category: HandCategory, value: int) -> None:
        """Set the value of a category for the phase bucket containing a turn."""
        self.set_bucket_value(bucket_for_turn(turn), category, value)

    def get(self, turn: int, category: HandCategory) -> int:
        """Get the value of a category for the phase bucket containing a turn."""
        return self.bucket_value(bucket_for_turn(turn), category)

    def set_bucket_value(self, bucket: int, category: HandCategory, value: int) -> None:
        self._values[bucket, category.index] = clamp(value)
        self._defined[bucket, category.index] = True
        self._rows[bucket] = None

    def bucket_value(self, bucket: int, category: HandCategory) -> int:
        if not self._defined[bucket, category.index]:
            raise UnseededTableError(bucket, category)
        return int(self._values[bucket, category.index])

    def values_for_turn(self, turn: int) -> Tuple[int, ...]:
        """
        Get all category values for the bucket containing a turn.

        Returns:
            Tuple indexed by ``HandCategory.index``
        """
        bucket = bucket_for_turn(turn)
        row = self._rows[bucket]
        if row is None:
            if not self._defined[bucket].all():
                missing = CATEGORIES[int(np.argmin(self._defined[bucket]))]
                raise UnseededTableError(bucket, missing)
            row = tuple(int(v) for v in self._values[bucket])
            self._rows[bucket] = row
        return row

    @property
    def is_complete(self) -> bool:
        """Whether every category has a value in every bucket."""
        return bool(self._defined.all())

    def clone_all_turns(self) -> None:
        """Copy the bucket-0 values into every other bucket."""
        for bucket in range(1, NUM_PHASE_BUCKETS):
            self._values[bucket] = self._values[0]
            self._defined[bucket] = self._defined[0]
            self._rows[bucket] = None

    def clone(self) -> 'HeuristicTable':
        """Create a deep copy."""
        other = HeuristicTable()
        other._values = self._values.copy()
        other._defined = self._defined.copy()
        other._rows = list(self._rows)
        return other

    def randomize(
        self,
        rng: random.Random,
        spread: int = 10,
        categories: Sequence[HandCategory] = PARTIAL_CATEGORIES,
    ) -> 'HeuristicTable':
        """
        Create a perturbed copy.

        Each category receives one offset in [-spread, spread], applied to
        all three buckets.

        Args:
            rng: Random source
            spread: Largest absolute offset
            categories: Categories to perturb

        Returns:
            New HeuristicTable
        """
        child = self.clone()
        indices = [category.index for category in categories]
        offsets = np.array([rng.randint(-spread, spread) for _ in indices], dtype=np.int32)
        shifted = self._values[:, indices].astype(np.int32) + offsets
        child._values[:, indices] = np.clip(shifted, MIN_HEURISTIC_VALUE, MAX_HEURISTIC_VALUE)
        child._rows = [None] * NUM_PHASE_BUCKETS
        return child

    def merge(
        self,
        other: 'HeuristicTable',
        rng: random.Random,
        categories: Sequence[HandCategory] = PARTIAL_CATEGORIES,
    ) -> 'HeuristicTable':
        """
        Create a child by uniform crossover with another table.

        Each category independently takes this table's or the other table's
        values (all three buckets together) with equal probability.

        Args:
            other: Second parent
            rng: Random source
            categories: Categories eligible for crossover

        Returns:
            New HeuristicTable
        """
        child = self.clone()
        taken = [category.index for category in categories if rng.random() < 0.5]
        if taken:
            child._values[:, taken] = other._values[:, taken]
            child._defined[:, taken] = other._defined[:, taken]
            child._rows = [None] * NUM_PHASE_BUCKETS
        return child

    def mutate(
        self,
        rng: random.Random,
        num_mutations: int = 2,
        step: int = 2,
        categories: Sequence[HandCategory] = PARTIAL_CATEGORIES,
    ) -> None:
        """
        Perturb random entries in place.

        Each mutation picks a category and a turn, and shifts the value of
        that turn's bucket by a random integer in [-step, step].
        """
        for _ in range(num_mutations):
            category = categories[rng.randrange(len(categories))]
            turn = rng.randrange(NUM_CELLS)
            delta = rng.randint(-step, step)
            self.put(turn, category, self.get(turn, category) + delta)

    def as_array(self) -> np.ndarray:
        """Get a copy of the (bucket, category) value array."""
        return self._values.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeuristicTable):
            return NotImplemented
        return bool(
            np.array_equal(self._defined, other._defined)
            and np.array_equal(self._values[self._defined], other._values[other._defined])
        )

    __hash__ = None

    def __str__(self) -> str:
        header = " ".join(f"{category.abbreviation:>3}" for category in CATEGORIES)
        lines = [header]
        for bucket in range(NUM_PHASE_BUCKETS):
            lines.append(" ".join(
                f"{int(v):3d}" if defined else "  ?"
                for v, defined in zip(self._values[bucket], self._defined[bucket])
            ))
        return "\n".join(lines)


def seed_table(
    score_fn: Callable[[PokerHand], int],
    discount_draws: bool = False,
) -> HeuristicTable:
    """
    Build the starting heuristic table from a point system.

    Complete hands take their point value. Every shorter category takes the
    best value among the categories one more card can turn it into, working
    down from four cards to zero; inside-straight categories copy the plain
    straight category of the same size. Bucket 0 is filled this way and
    copied into the other buckets.

    Args:
        score_fn: Points for each canonical hand rank (e.g. ``PointSystem.hand_score``)
        discount_draws: Halve the four-card draws that score nothing unless completed

    Returns:
        Fully defined HeuristicTable
    """
    values: Dict[HandCategory, int] = {}
    for category in COMPLETE_CATEGORIES:
        values[category] = clamp(score_fn(category.poker_hand))

    for size in (4, 3, 2, 1, 0):
        sized = categories_of_size(size)
        for category in sized:
            if category not in INSIDE_VARIANTS:
                values[category] = max(values[successor] for successor in REACHABLE[category])
        for category in sized:
            if category in INSIDE_VARIANTS:
                values[category] = values[INSIDE_VARIANTS[category]]
        if size == 4 and discount_draws:
            for category in DRAW_CATEGORIES:
                # Round toward zero
                values[category] = int((values[category] + 1) / 2)

    table = HeuristicTable()
    for category, value in values.items():
        table.set_bucket_value(0, category, value)
    table.clone_all_turns()
    return table

