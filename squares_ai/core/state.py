"""
Backtrackable play state for Poker Squares.

The state keeps two permutations that make both real moves and simulated
rollouts cheap to apply and undo:

- ``order`` holds the 25 cell indices. Slots ``[0, played)`` list the cells
  filled so far in chronological order; slots ``[played, 25)`` are the empty
  cells in arbitrary order.
- ``deal_order`` holds the 52 cards. Slots ``[0, played)`` are the cards
  placed so far; slots ``[played, 52)`` are the undealt cards, so a random
  future card is just a uniform draw from that suffix.

Reverse indices (``cell -> slot`` and ``card -> slot``) keep every swap O(1),
and each move records the slots it swapped so ``undo_move`` restores both
permutations exactly.
"""
from __future__ import annotations
from typing import List, Optional, Sequence, Tuple
import random

from squares_ai.core.cards import Card, ALL_CARDS
from squares_ai.core.constants import (
    GRID_SIZE, NUM_CELLS, NUM_CARDS
)
from squares_ai.core.exceptions import (
    BoardFullError, CardAlreadyDealtError, EmptyHistoryError, InvalidCellError, OccupiedCellError
)


class PlayState:
    """
    The grid, move history and undealt deck of one game.

    ``apply_move`` and ``undo_move`` are the only mutators besides ``reset``.
    All operations are single-threaded; parallel evaluation needs a private
    copy from ``clone``.
    """

    def __init__(self):
        self.grid: List[Optional[Card]] = [None] * NUM_CELLS
        self.order: List[int] = list(range(NUM_CELLS))
        self.cell_slot: List[int] = list(range(NUM_CELLS))
        self.deal_order: List[Card] = list(ALL_CARDS)
        self.card_slot: List[int] = list(range(NUM_CARDS))
        self.played = 0
        # (card slot, cell slot) each move swapped from, for exact undo
        self._swaps: List[Tuple[int, int]] = []

    def reset(self) -> None:
        """Clear the grid and restore the cell order to identity for a new game."""
        for cell in range(NUM_CELLS):
            self.grid[cell] = None
            self.order[cell] = cell
            self.cell_slot[cell] = cell
        self.played = 0
        self._swaps.clear()

    @property
    def is_full(self) -> bool:
        return self.played == NUM_CELLS

    @property
    def remaining_cells(self) -> int:
        return NUM_CELLS - self.played

    def legal_cells(self) -> List[int]:
        """Get a copy of the currently empty cells (row-major indices)."""
        return self.order[self.played:]

    def played_cells(self) -> List[int]:
        """Get the filled cells in the order they were played."""
        return self.order[:self.played]

    def played_cards(self) -> List[Card]:
        """Get the placed cards in the order they were played."""
        return self.deal_order[:self.played]

    def is_dealt(self, card: Card) -> bool:
        """Whether a card is already on the grid."""
        return self.card_slot[card.index] < self.played

    def apply_move(self, card: Card, cell: int) -> None:
        """
        Place a card into an empty cell.

        Args:
            card: A card not yet on the grid
            cell: Row-major index of an empty cell
        """
        played = self.played
        if played == NUM_CELLS:
            raise BoardFullError()
        if not 0 <= cell < NUM_CELLS:
            raise InvalidCellError(cell)
        if self.grid[cell] is not None:
            raise OccupiedCellError(cell)
        card_index = card.index
        card_from = self.card_slot[card_index]
        if card_from < played:
            raise CardAlreadyDealtError(card)

        # Swap the card to the front of the undealt suffix
        other_card = self.deal_order[played]
        self.deal_order[card_from] = other_card
        self.card_slot[other_card.index] = card_from
        self.deal_order[played] = card
        self.card_slot[card_index] = played

        # Swap the cell to the front of the empty-cell suffix
        cell_from = self.cell_slot[cell]
        other_cell = self.order[played]
        self.order[cell_from] = other_cell
        self.cell_slot[other_cell] = cell_from
        self.order[played] = cell
        self.cell_slot[cell] = played

        self.grid[cell] = card
        self._swaps.append((card_from, cell_from))
        self.played = played + 1

    def undo_move(self) -> Tuple[Card, int]:
        """
        Take back the most recent move.

        Returns:
            The (card, cell) that was removed
        """
        if self.played == 0:
            raise EmptyHistoryError()
        played = self.played - 1
        card_from, cell_from = self._swaps.pop()
        card = self.deal_order[played]
        cell = self.order[played]
        self.grid[cell] = None

        other_card = self.deal_order[card_from]
        self.deal_order[played] = other_card
        self.card_slot[other_card.index] = played
        self.deal_order[card_from] = card
        self.card_slot[card.index] = card_from

        other_cell = self.order[cell_from]
        self.order[played] = other_cell
        self.cell_slot[other_cell] = played
        self.order[cell_from] = cell
        self.cell_slot[cell] = cell_from

        self.played = played
        return card, cell

    def draw_random_card(self, rng: random.Random) -> Card:
        """Draw a uniformly random card from the undealt suffix (without dealing it)."""
        return self.deal_order[rng.randrange(self.played, NUM_CARDS)]

    def row(self, row: int) -> List[Optional[Card]]:
        start = row * GRID_SIZE
        return self.grid[start:start + GRID_SIZE]

    def column(self, col: int) -> List[Optional[Card]]:
        return self.grid[col::GRID_SIZE]

    def lines(self) -> List[List[Optional[Card]]]:
        """Get the five rows followed by the five columns."""
        return [self.row(i) for i in range(GRID_SIZE)] + [self.column(i) for i in range(GRID_SIZE)]

    def card_at(self, row: int, col: int) -> Optional[Card]:
        return self.grid[row * GRID_SIZE + col]

    def snapshot(self) -> Tuple:
        """An immutable copy of everything that defines the state, for comparisons."""
        return (
            tuple(self.grid), tuple(self.order), tuple(self.cell_slot),
            tuple(self.deal_order), tuple(self.card_slot), self.played,
        )

    def clone(self) -> 'PlayState':
        """Create an independent copy for use by another thread of evaluation."""
        other = PlayState.__new__(PlayState)
        other.grid = list(self.grid)
        other.order = list(self.order)
        other.cell_slot = list(self.cell_slot)
        other.deal_order = list(self.deal_order)
        other.card_slot = list(self.card_slot)
        other.played = self.played
        other._swaps = list(self._swaps)
        return other

    @classmethod
    def from_moves(cls, moves: Sequence[Tuple[Card, int]]) -> 'PlayState':
        """
        Build a state by applying a sequence of (card, cell) moves.

        Args:
            moves: Moves in play order

        Returns:
            PlayState
        """
        state = cls()
        for card, cell in moves:
            state.apply_move(card, cell)
        return state

    def __str__(self) -> str:
        rows = []
        for row in range(GRID_SIZE):
            rows.append(" ".join("--" if card is None else str(card) for card in self.row(row)))
        return "\n".join(rows)


# Lines through each cell: (row index, column index)
CELL_LINES: Tuple[Tuple[int, int], ...] = tuple(divmod(cell, GRID_SIZE) for cell in range(NUM_CELLS))

__all__ = ["PlayState", "CELL_LINES"]
